"""Fetch GitLab merge requests over the REST v4 API."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from codecritique_core.errors import TransportError
from codecritique_core.models import File, PullRequest

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30.0
PER_PAGE = 100


def _request(client: httpx.Client, path: str, params: dict | None = None) -> httpx.Response:
    response = client.get(path, params=params)
    if not response.is_success:
        raise TransportError(
            f"GitLab returned non-OK status: {response.status_code} for {path}",
            status_code=response.status_code,
            body=response.text,
        )
    return response


def _get(client: httpx.Client, path: str):
    return _request(client, path).json()


def _get_all(client: httpx.Client, path: str) -> list:
    """Collect every page of a list endpoint by following X-Next-Page."""
    items: list = []
    page = "1"
    while page:
        response = _request(client, path, params={"per_page": PER_PAGE, "page": page})
        items.extend(response.json())
        page = response.headers.get("X-Next-Page", "")
    return items


def fetch_merge_request(
    project: str,
    mr_iid: int,
    token: str,
    base_url: str = "https://gitlab.com",
    transport: httpx.BaseTransport | None = None,
) -> PullRequest:
    """Return the merge request ``project!mr_iid`` as a PullRequest.

    ``project`` is the full ``namespace/name`` path; GitLab expects it
    URL-encoded as a single path segment.
    """
    project_id = quote(project, safe="")
    prefix = f"/api/v4/projects/{project_id}/merge_requests/{mr_iid}"

    with httpx.Client(
        base_url=base_url.rstrip("/"),
        headers={"PRIVATE-TOKEN": token},
        timeout=REQUEST_TIMEOUT_SECONDS,
        transport=transport,
    ) as client:
        try:
            mr = _get(client, prefix)
            diffs = _get_all(client, f"{prefix}/diffs")
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to fetch GitLab MR: {e}") from e

    logger.debug("Fetched GitLab MR %s!%d with %d diff(s)", project, mr_iid, len(diffs))
    files = [File(name=d["new_path"], content=d.get("diff") or "") for d in diffs]
    return PullRequest(
        title=mr.get("title") or "",
        description=mr.get("description") or "",
        files=tuple(files),
        branch=mr.get("source_branch") or "",
    )
