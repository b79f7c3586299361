from __future__ import annotations

from github import Github, GithubException

from codecritique_core.errors import TransportError
from codecritique_core.models import File, PullRequest


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_diff(pr):
    return pr.get_files()


def to_pull_request(pr) -> PullRequest:
    """Snapshot a PyGithub PullRequest into the core model.

    Files without a patch (binaries, very large diffs) carry nothing a model
    could review, so they are left out.
    """
    files = [File(name=f.filename, content=f.patch) for f in get_diff(pr) if f.patch]
    return PullRequest(
        title=pr.title or "",
        description=pr.body or "",
        files=tuple(files),
        branch=pr.head.ref or "",
    )


def fetch_pull_request(repo_name: str, pr_number: int, token: str) -> PullRequest:
    try:
        return to_pull_request(get_pull(get_repo(repo_name, token=token), pr_number))
    except GithubException as e:
        raise TransportError(
            f"Failed to fetch GitHub PR {repo_name}#{pr_number}: {e}",
            status_code=e.status,
            body=str(e.data) if e.data is not None else None,
        ) from e
