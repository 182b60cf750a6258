"""Data models for the GitHub fetch stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ParsedRepo:
    """An ``owner/repo`` pair extracted from user input."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class FileEntry:
    """One regular file from the repository tree."""

    path: str
    size: Optional[int] = None


@dataclass
class RepoMetadata:
    """Repository facts returned by the metadata endpoint."""

    owner: str
    name: str
    default_branch: str
    stars: int = 0
    language: Optional[str] = None
    url: str = ""


@dataclass
class FetchResult:
    """Filtered tree listing plus the metadata it was fetched with."""

    metadata: RepoMetadata
    entries: List[FileEntry] = field(default_factory=list)
    truncated: bool = False
    raw_count: int = 0
