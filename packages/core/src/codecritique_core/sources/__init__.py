"""Pull request sources.

These sit outside the review core: they turn a hosting provider's pull or
merge request into the read-only PullRequest snapshot the core consumes.
"""

from __future__ import annotations

from codecritique_core.errors import ConfigError
from codecritique_core.models import PullRequest


def fetch_pull_request(config: dict, repo: str, number: int) -> PullRequest:
    git_provider = str(config.get("git_provider", "GitHub")).lower()

    if git_provider == "github":
        from codecritique_core.sources.github import fetch_pull_request as fetch_github

        token = config.get("github_token")
        if not token:
            raise ConfigError("GITHUB_TOKEN environment variable is not set.")
        return fetch_github(repo, number, token=token)

    if git_provider == "gitlab":
        from codecritique_core.sources.gitlab import fetch_merge_request

        token = config.get("gitlab_token")
        if not token:
            raise ConfigError("GITLAB_TOKEN environment variable is not set.")
        return fetch_merge_request(repo, number, token=token, base_url=config.get("gitlab_url") or "https://gitlab.com")

    raise ConfigError(f"Unsupported Git provider: {config.get('git_provider')!r}. Choose 'GitHub' or 'GitLab'.")
