"""Domain exception hierarchy.

Engine errors (configuration, backend, normalization) are recovered inside the
synthesis use case and never reach its caller.  Collaborator errors (GitHub
fetch, document extraction) map to HTTP status codes at the interface layer.
"""

from __future__ import annotations


class InsightEngineError(Exception):
    """Base exception for the entire application."""


# ── Engine errors ───────────────────────────────────────────────────────────


class ConfigurationError(InsightEngineError):
    """No usable credential or adapter is available for the requested backend."""


class BackendError(InsightEngineError):
    """A backend call failed: transport, status, timeout or envelope shape."""

    def __init__(
        self, provider: str, message: str, *, status: int | None = None
    ) -> None:
        self.provider = provider
        self.status = status
        prefix = f"[{provider}]" if status is None else f"[{provider} HTTP {status}]"
        super().__init__(f"{prefix} {message}")


class NormalizationError(InsightEngineError):
    """The backend answered, but its text could not be coerced into an Insight."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidGitHubUrlError(InsightEngineError):
    """The supplied URL does not point to a valid GitHub repository."""


class UnsupportedDocumentError(InsightEngineError):
    """The uploaded document cannot be turned into analysable text."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class RepositoryNotFoundError(InsightEngineError):
    """The repository does not exist or is not accessible (404)."""


class RepositoryAccessDeniedError(InsightEngineError):
    """Access to the repository was denied (403)."""


class GitHubRateLimitError(InsightEngineError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


# ── Processing errors ───────────────────────────────────────────────────────


class ContentExtractionError(InsightEngineError):
    """Failed to fetch or decode source content."""
