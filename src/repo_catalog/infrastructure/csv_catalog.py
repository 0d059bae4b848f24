"""CSV catalog — implements the CatalogStore port on a flat, append-only file."""

from __future__ import annotations

import csv
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from repo_catalog.domain.entities import CatalogRow
from repo_catalog.domain.exceptions import CatalogFileError

logger = logging.getLogger(__name__)

NAME_COLUMN = "RepositoryName"
SUMMARY_COLUMN = "Summary"
TECH_STACK_COLUMN = "TechStack"
HEADER: tuple[str, ...] = (NAME_COLUMN, SUMMARY_COLUMN, TECH_STACK_COLUMN)


class CsvCatalog:
    """One row per repository; the header is written only on creation.

    Columns are addressed by name, so a file whose columns were reordered by
    hand is read and appended to in its own order.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._columns: list[str] | None = None

    def processed_names(self) -> set[str]:
        """Return every non-blank ``RepositoryName`` already in the file."""
        if not self._has_content():
            return set()

        try:
            with self._path.open("r", encoding="utf-8-sig", newline="") as fh:
                reader = csv.DictReader(fh)
                self._require_columns(reader.fieldnames, HEADER)
                names = {row[NAME_COLUMN] for row in reader if row.get(NAME_COLUMN)}
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise CatalogFileError(f"Could not read {self._path}: {exc}") from exc

        logger.info("Found %d previously processed repositories.", len(names))
        return names

    def append(self, row: CatalogRow) -> None:
        """Append *row*, creating the file with a header when needed.

        The file is flushed and fsync'd before returning, so a crash after
        this call never loses the row.
        """
        values = {
            NAME_COLUMN: row.name,
            SUMMARY_COLUMN: row.summary,
            TECH_STACK_COLUMN: row.tech_stack,
        }
        try:
            write_header = not self._has_content()
            if write_header:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._columns = list(HEADER)
            elif self._columns is None:
                self._columns = self._read_header()
            needs_newline = not write_header and not self._ends_with_newline()

            with self._path.open("a", encoding="utf-8", newline="") as fh:
                if needs_newline:
                    fh.write("\r\n")
                writer = csv.DictWriter(fh, fieldnames=self._columns, restval="")
                if write_header:
                    writer.writeheader()
                writer.writerow(values)
                fh.flush()
                os.fsync(fh.fileno())
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise CatalogFileError(f"Could not append to {self._path}: {exc}") from exc

    # ── Helpers ─────────────────────────────────────────────────────────

    def _has_content(self) -> bool:
        try:
            return self._path.stat().st_size > 0
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise CatalogFileError(f"Could not stat {self._path}: {exc}") from exc

    def _read_header(self) -> list[str]:
        with self._path.open("r", encoding="utf-8-sig", newline="") as fh:
            header = next(csv.reader(fh), None)
        if header is None:
            raise CatalogFileError(f"{self._path} has no header row.")
        self._require_columns(header, HEADER)
        return header

    def _ends_with_newline(self) -> bool:
        with self._path.open("rb") as fh:
            fh.seek(-1, os.SEEK_END)
            return fh.read(1) in (b"\n", b"\r")

    def _require_columns(
        self, fieldnames: Sequence[str] | None, required: tuple[str, ...]
    ) -> None:
        present = set(fieldnames or ())
        missing = [column for column in required if column not in present]
        if missing:
            raise CatalogFileError(
                f"{self._path} is not a repository catalog: "
                f"header is missing column(s) {', '.join(missing)}."
            )
