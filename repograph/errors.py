"""Typed failures raised across the repograph pipeline.

Every error carries a stable ``code`` (used in the ``error`` SSE event), a
``retryable`` flag (the caller may try again later; nothing here retries on
its own) and the HTTP ``status_code`` the API layer should answer with.

Lower layers (fetcher, inference, metrics, layout) only raise these; the
pipeline orchestrator is the one place that logs and converts them.
"""

from __future__ import annotations


class RepoGraphError(Exception):
    """Base class for every failure the pipeline reports to a caller."""

    code = "internal_error"
    retryable = False
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "code": self.code,
            "retryable": self.retryable,
        }


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

class ValidationError(RepoGraphError):
    code = "invalid_input"
    status_code = 400


class InvalidRepoUrlError(ValidationError):
    code = "invalid_repo_url"


# ---------------------------------------------------------------------------
# Upstream (GitHub API)
# ---------------------------------------------------------------------------

class UpstreamError(RepoGraphError):
    code = "upstream_error"
    status_code = 502


class RepoNotFoundError(UpstreamError):
    code = "repo_not_found"
    status_code = 404


class RateLimitError(UpstreamError):
    code = "rate_limited"
    retryable = True
    status_code = 429

    def __init__(self, message: str, reset_at: int | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class UpstreamUnavailableError(UpstreamError):
    code = "upstream_unavailable"
    retryable = True
    status_code = 503


class NetworkError(UpstreamError):
    code = "network_error"
    retryable = True


# ---------------------------------------------------------------------------
# Resource limits
# ---------------------------------------------------------------------------

class ResourceLimitError(RepoGraphError):
    code = "resource_limit"
    status_code = 429


class FileLimitError(ResourceLimitError):
    code = "file_limit_exceeded"
    status_code = 413


class ConcurrencyLimitError(ResourceLimitError):
    code = "too_many_concurrent_parses"


class GraphQuotaError(ResourceLimitError):
    code = "graph_quota_exceeded"


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

class PipelineTimeoutError(RepoGraphError):
    code = "timeout"
    status_code = 504


class PipelineError(RepoGraphError):
    """An unexpected failure, wrapped so callers only ever see this hierarchy."""

    code = "pipeline_failed"
