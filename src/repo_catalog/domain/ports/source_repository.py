"""Port: source hosting — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol


class SourceRepository(Protocol):
    """Abstract contract for a source-control hosting account."""

    async def list_repositories(self) -> list[str]:
        """Return every repository name visible to the configured credentials.

        Raises :class:`SourceListingError` when the listing fails.
        """
        ...

    async def fetch_readme(self, name: str, path: str = "README.md") -> str:
        """Return the decoded text of *path* in repository *name*.

        Raises :class:`ReadmeNotFoundError` when the file does not exist and
        :class:`ReadmeFetchError` for any other failure.
        """
        ...
