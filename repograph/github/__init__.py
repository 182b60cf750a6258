"""GitHub package: repository URL parsing and tree fetching."""

from repograph.github.fetcher import fetch_repo_tree, is_excluded_path
from repograph.github.models import FetchResult, FileEntry, ParsedRepo, RepoMetadata
from repograph.github.url import parse_repo_url

__all__ = [
    "fetch_repo_tree",
    "is_excluded_path",
    "parse_repo_url",
    "FetchResult",
    "FileEntry",
    "ParsedRepo",
    "RepoMetadata",
]
