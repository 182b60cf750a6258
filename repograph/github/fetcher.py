"""GitHub tree fetcher.

Two read-only calls against the GitHub REST API: repository metadata (to
learn the default branch) and the recursive git tree of that branch.  The
result is filtered down to regular files outside the exclusion list; no
file-count ceiling is applied here.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Callable, Iterable, Optional
from urllib.parse import quote

import httpx

from repograph.config import settings
from repograph.errors import (
    NetworkError,
    RateLimitError,
    RepoNotFoundError,
    UpstreamError,
    UpstreamUnavailableError,
)
from repograph.github.models import FetchResult, FileEntry, RepoMetadata

logger = logging.getLogger(__name__)

FetchProgress = Callable[[str, str], None]

_DEFAULT_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": "repograph/0.1 (+https://github.com/repograph)",
}

_UNAVAILABLE_STATUSES = {500, 502, 503, 504}


# ---------------------------------------------------------------------------
# Path filtering
# ---------------------------------------------------------------------------

def is_excluded_path(path: str, excluded: Optional[Iterable[str]] = None) -> bool:
    """Return ``True`` if *path* matches an entry of the exclusion list.

    Entries ending in ``/`` are directory prefixes and match at the start of
    the path or after any ``/``.  Other entries match the file name (or the
    whole path) exactly.
    """
    patterns = settings.excluded_paths if excluded is None else excluded
    file_name = path.rsplit("/", 1)[-1]
    for pattern in patterns:
        if pattern.endswith("/"):
            if path.startswith(pattern) or ("/" + pattern) in path:
                return True
        elif file_name == pattern or path == pattern:
            return True
    return False


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------

def _auth_headers() -> dict[str, str]:
    headers = dict(_DEFAULT_HEADERS)
    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token}"
    return headers


def build_client() -> httpx.AsyncClient:
    """Return an ``AsyncClient`` configured for the GitHub API."""
    return httpx.AsyncClient(
        base_url=settings.github_api_base,
        headers=_auth_headers(),
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


def _rate_limit_message(response: httpx.Response) -> tuple[str, Optional[int]]:
    reset_header = response.headers.get("X-RateLimit-Reset")
    if not reset_header:
        return "GitHub API rate limit exceeded.", None
    try:
        reset_at = int(reset_header)
    except ValueError:
        return "GitHub API rate limit exceeded.", None
    minutes = max(0, math.ceil((reset_at - time.time()) / 60))
    return (
        f"GitHub API rate limit exceeded. Rate limit resets in ~{minutes} minute(s).",
        reset_at,
    )


def _raise_for_status(response: httpx.Response, owner: str, repo: str) -> None:
    """Map a non-2xx GitHub response onto the upstream error taxonomy."""
    if response.is_success:
        return

    status = response.status_code
    if status == 404:
        raise RepoNotFoundError(
            f'Repository "{owner}/{repo}" not found. '
            "Make sure the repository exists and is public."
        )
    if status in (403, 429):
        message, reset_at = _rate_limit_message(response)
        raise RateLimitError(message, reset_at=reset_at)
    if status in _UNAVAILABLE_STATUSES:
        raise UpstreamUnavailableError(
            "GitHub is experiencing issues. Please try again in a few minutes."
        )
    raise UpstreamError(f"GitHub API returned an error (HTTP {status}).")


async def _get_json(client: httpx.AsyncClient, url: str, owner: str, repo: str) -> Any:
    logger.debug("GET %s", url)
    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        raise NetworkError("Network error while contacting GitHub.") from exc
    _raise_for_status(response, owner, repo)
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamError("GitHub returned a response that is not valid JSON.") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def fetch_repo_tree(
    owner: str,
    repo: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    on_progress: Optional[FetchProgress] = None,
) -> FetchResult:
    """Fetch the filtered file listing of *owner/repo*'s default branch.

    Args:
        owner: Repository owner (user or organisation).
        repo: Repository name.
        client: Optional pre-configured client.  When omitted a client is
            created from ``settings`` and closed before returning.
        on_progress: Optional ``(stage, detail)`` callback.

    Returns:
        A :class:`FetchResult`.  ``truncated`` is set when GitHub cut the
        tree short; the entries are still returned.

    Raises:
        RepoNotFoundError, RateLimitError, UpstreamUnavailableError,
        NetworkError, UpstreamError: See :mod:`repograph.errors`.
    """
    def _emit(stage: str, detail: str) -> None:
        if on_progress is not None:
            on_progress(stage, detail)

    if client is None:
        async with build_client() as own_client:
            return await fetch_repo_tree(owner, repo, client=own_client, on_progress=on_progress)

    base = f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    _emit("fetching", "Loading repository metadata...")
    repo_data = await _get_json(client, base, owner, repo)

    metadata = RepoMetadata(
        owner=owner,
        name=repo_data.get("name") or repo,
        default_branch=repo_data.get("default_branch") or "main",
        stars=repo_data.get("stargazers_count") or 0,
        language=repo_data.get("language"),
        url=repo_data.get("html_url") or f"https://github.com/{owner}/{repo}",
    )
    _emit("fetching", f'Found repository "{metadata.name}" ({metadata.default_branch} branch)')

    _emit("fetching", "Loading file tree...")
    tree_url = f"{base}/git/trees/{quote(metadata.default_branch, safe='')}"
    tree_data = await _get_json(client, f"{tree_url}?recursive=1", owner, repo)

    raw_entries = tree_data.get("tree") if isinstance(tree_data, dict) else None
    if not isinstance(raw_entries, list):
        raise UpstreamError("Unexpected response format from GitHub tree API.")

    truncated = bool(tree_data.get("truncated"))
    if truncated:
        logger.warning("Tree for %s/%s was truncated by GitHub", owner, repo)
        _emit("fetching", "Warning: repository is very large, tree was truncated by GitHub.")

    _emit("parsing", "Filtering file entries...")
    entries = [
        FileEntry(path=item["path"], size=item.get("size"))
        for item in raw_entries
        if item.get("type") == "blob"
        and item.get("path")
        and not is_excluded_path(item["path"])
    ]
    _emit(
        "parsing",
        f"Found {len(entries)} files (filtered from {len(raw_entries)} entries)",
    )
    logger.debug("Fetched %d of %d tree entries for %s/%s", len(entries), len(raw_entries), owner, repo)

    return FetchResult(
        metadata=metadata,
        entries=entries,
        truncated=truncated,
        raw_count=len(raw_entries),
    )
