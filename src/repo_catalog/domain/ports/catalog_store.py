"""Port: catalog store — the append-only output of a run."""

from __future__ import annotations

from typing import Protocol

from repo_catalog.domain.entities import CatalogRow


class CatalogStore(Protocol):
    """Abstract contract for the persisted catalog."""

    def processed_names(self) -> set[str]:
        """Return the names of repositories already recorded."""
        ...

    def append(self, row: CatalogRow) -> None:
        """Durably persist one row before returning."""
        ...
