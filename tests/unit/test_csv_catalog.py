"""Unit tests for the CSV catalog (resume tracker and result sink)."""

import csv
from pathlib import Path

import pytest

from repo_catalog.domain.entities import CatalogRow
from repo_catalog.domain.exceptions import CatalogFileError
from repo_catalog.infrastructure.csv_catalog import HEADER, CsvCatalog


def _read_rows(path: Path) -> list[list[str]]:
    with path.open(encoding="utf-8", newline="") as fh:
        return list(csv.reader(fh))


class TestProcessedNames:
    def test_missing_file_is_empty_set(self, catalog_path: Path) -> None:
        assert CsvCatalog(catalog_path).processed_names() == set()
        assert not catalog_path.exists()

    def test_zero_byte_file_is_empty_set(self, catalog_path: Path) -> None:
        catalog_path.touch()
        assert CsvCatalog(catalog_path).processed_names() == set()

    def test_reads_names_by_column(self, catalog_path: Path) -> None:
        catalog_path.write_text(
            "RepositoryName,Summary,TechStack\nalpha,S,T\nbeta,\"S, with comma\",T\n",
            encoding="utf-8",
        )
        assert CsvCatalog(catalog_path).processed_names() == {"alpha", "beta"}

    def test_tolerates_reordered_columns(self, catalog_path: Path) -> None:
        catalog_path.write_text(
            "TechStack,Summary,RepositoryName\nT,S,gamma\n", encoding="utf-8"
        )
        assert CsvCatalog(catalog_path).processed_names() == {"gamma"}

    def test_tolerates_byte_order_mark(self, catalog_path: Path) -> None:
        catalog_path.write_text(
            "\ufeffRepositoryName,Summary,TechStack\ndelta,S,T\n", encoding="utf-8"
        )
        assert CsvCatalog(catalog_path).processed_names() == {"delta"}

    def test_skips_blank_names(self, catalog_path: Path) -> None:
        catalog_path.write_text(
            "RepositoryName,Summary,TechStack\n,S,T\nepsilon,S,T\n", encoding="utf-8"
        )
        assert CsvCatalog(catalog_path).processed_names() == {"epsilon"}

    def test_missing_name_column_is_fatal(self, catalog_path: Path) -> None:
        catalog_path.write_text("Name,Summary\nalpha,S\n", encoding="utf-8")
        with pytest.raises(CatalogFileError, match="RepositoryName"):
            CsvCatalog(catalog_path).processed_names()

    def test_header_with_only_name_column_is_fatal(self, catalog_path: Path) -> None:
        catalog_path.write_text("RepositoryName\nalpha\n", encoding="utf-8")
        with pytest.raises(CatalogFileError, match="Summary, TechStack"):
            CsvCatalog(catalog_path).processed_names()

    def test_undecodable_file_is_fatal(self, catalog_path: Path) -> None:
        catalog_path.write_bytes(b"RepositoryName,Summary,TechStack\n\xff\xfe\xfa\n")
        with pytest.raises(CatalogFileError):
            CsvCatalog(catalog_path).processed_names()


class TestAppend:
    def test_creates_file_with_header(self, catalog_path: Path) -> None:
        CsvCatalog(catalog_path).append(CatalogRow("a", "S1", "T1"))

        assert _read_rows(catalog_path) == [list(HEADER), ["a", "S1", "T1"]]

    def test_appends_without_repeating_header(self, catalog_path: Path) -> None:
        catalog = CsvCatalog(catalog_path)
        catalog.append(CatalogRow("a", "S1", "T1"))
        catalog.append(CatalogRow("b", "S2", "T2"))

        assert _read_rows(catalog_path) == [
            list(HEADER),
            ["a", "S1", "T1"],
            ["b", "S2", "T2"],
        ]

    def test_rows_persist_across_instances(self, catalog_path: Path) -> None:
        CsvCatalog(catalog_path).append(CatalogRow("a", "S1", "T1"))
        CsvCatalog(catalog_path).append(CatalogRow("b", "S2", "T2"))

        assert CsvCatalog(catalog_path).processed_names() == {"a", "b"}
        assert len(_read_rows(catalog_path)) == 3

    def test_quotes_commas_and_newlines(self, catalog_path: Path) -> None:
        row = CatalogRow("a", "Line one,\nline two", "Python, \"Django\"")
        CsvCatalog(catalog_path).append(row)

        assert _read_rows(catalog_path)[1] == ["a", "Line one,\nline two", "Python, \"Django\""]

    def test_follows_existing_column_order(self, catalog_path: Path) -> None:
        catalog_path.write_text(
            "TechStack,RepositoryName,Summary\nT0,zero,S0\n", encoding="utf-8"
        )
        CsvCatalog(catalog_path).append(CatalogRow("one", "S1", "T1"))

        assert _read_rows(catalog_path)[-1] == ["T1", "one", "S1"]

    def test_repairs_missing_trailing_newline(self, catalog_path: Path) -> None:
        catalog_path.write_text("RepositoryName,Summary,TechStack\nzero,S0,T0", encoding="utf-8")
        CsvCatalog(catalog_path).append(CatalogRow("one", "S1", "T1"))

        assert _read_rows(catalog_path)[1:] == [["zero", "S0", "T0"], ["one", "S1", "T1"]]

    def test_foreign_header_is_refused(self, catalog_path: Path) -> None:
        catalog_path.write_text("RepositoryName,Notes\nzero,n\n", encoding="utf-8")
        with pytest.raises(CatalogFileError, match="Summary"):
            CsvCatalog(catalog_path).append(CatalogRow("one", "S1", "T1"))

    def test_file_without_header_row_is_refused(self, catalog_path: Path) -> None:
        catalog_path.write_bytes(b"\xef\xbb\xbf")
        with pytest.raises(CatalogFileError, match="no header row"):
            CsvCatalog(catalog_path).append(CatalogRow("one", "S1", "T1"))
        assert catalog_path.read_bytes() == b"\xef\xbb\xbf"

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "catalog.csv"
        CsvCatalog(path).append(CatalogRow("a", "S", "T"))
        assert path.exists()

    def test_unwritable_location_is_fatal(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(CatalogFileError):
            CsvCatalog(blocker / "catalog.csv").append(CatalogRow("a", "S", "T"))
