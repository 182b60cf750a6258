"""Parse user-supplied repository references into ``owner/repo`` pairs."""

from __future__ import annotations

import re

from repograph.errors import InvalidRepoUrlError
from repograph.github.models import ParsedRepo

_URL_PATTERN = re.compile(r"^(?:https?://)?github\.com/([^/]+)/([^/]+)/?\Z", re.IGNORECASE)
_SHORTHAND_PATTERN = re.compile(r"^([^/]+)/([^/]+)\Z")
_VALID_NAME = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?\Z")


def parse_repo_url(text: str) -> ParsedRepo:
    """Return the owner and repository named by *text*.

    Accepts ``https://github.com/owner/repo`` (scheme optional, trailing
    slash, ``.git`` suffix, query string and fragment tolerated) or the bare
    ``owner/repo`` shorthand.

    Raises:
        InvalidRepoUrlError: If *text* is empty, unparseable, names a
            different host, or the owner/repo names are invalid.
    """
    if not text or not isinstance(text, str):
        raise InvalidRepoUrlError("Repository URL is required")

    cleaned = text.strip()
    cleaned = re.sub(r"/+\Z", "", cleaned)
    cleaned = re.sub(r"[?#].*\Z", "", cleaned, flags=re.DOTALL)
    cleaned = re.sub(r"\.git\Z", "", cleaned)

    match = _URL_PATTERN.match(cleaned)
    if match:
        return _validated(match.group(1), match.group(2))

    match = _SHORTHAND_PATTERN.match(cleaned)
    if match:
        owner, repo = match.group(1), match.group(2)
        # "my-org.io/repo" looks like a host name, not an owner
        if ":" in owner or "." in owner:
            raise InvalidRepoUrlError(
                f'Invalid repository format: "{text}". Expected "owner/repo" or a GitHub URL.'
            )
        return _validated(owner, repo)

    raise InvalidRepoUrlError(
        f'Could not parse repository URL: "{text}". '
        'Accepted formats: "https://github.com/owner/repo", "github.com/owner/repo", or "owner/repo".'
    )


def _validated(owner: str, repo: str) -> ParsedRepo:
    if not owner or not repo:
        raise InvalidRepoUrlError("Both owner and repository name are required.")
    if not _VALID_NAME.match(owner):
        raise InvalidRepoUrlError(f'Invalid GitHub owner: "{owner}".')
    if not _VALID_NAME.match(repo):
        raise InvalidRepoUrlError(f'Invalid GitHub repository name: "{repo}".')
    return ParsedRepo(owner=owner, repo=repo)
