"""Domain exception hierarchy.

Each exception maps to a process exit code (or to a degraded row) at the
interface layer.  Inner layers raise these; the driver and the CLI decide
which ones are fatal.
"""

from __future__ import annotations


class RepoCatalogError(Exception):
    """Base exception for the entire application."""


# ── Configuration ───────────────────────────────────────────────────────────


class ConfigurationError(RepoCatalogError):
    """Required settings are missing or invalid."""


# ── Source hosting errors ───────────────────────────────────────────────────


class SourceListingError(RepoCatalogError):
    """The repository list could not be retrieved (auth, network, service)."""


class ReadmeNotFoundError(RepoCatalogError):
    """The repository has no README at the requested path."""


class ReadmeFetchError(RepoCatalogError):
    """The README exists (or may exist) but could not be retrieved."""


# ── LLM errors ──────────────────────────────────────────────────────────────


class LlmError(RepoCatalogError):
    """Any error originating from the LLM provider."""


class MalformedResponseError(LlmError):
    """The LLM answered, but not with the expected JSON object."""


class RetryExhaustedError(RepoCatalogError):
    """Every attempt permitted by the retry policy failed."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


# ── Output catalog ──────────────────────────────────────────────────────────


class CatalogFileError(RepoCatalogError):
    """The output CSV could not be read or appended to."""
