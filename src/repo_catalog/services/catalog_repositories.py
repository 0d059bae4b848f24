"""Catalog-repositories use case — the main orchestration pipeline.

This is the single entry point for the business logic.  It depends only on
the ports (:class:`SourceRepository`, :class:`CatalogStore`) and the README
analyzer.  The interface layer injects concrete adapters at runtime.
"""

from __future__ import annotations

import asyncio
import logging

from repo_catalog.domain.entities import CatalogRow, RepoAnalysis, RunReport
from repo_catalog.domain.exceptions import ReadmeFetchError, ReadmeNotFoundError
from repo_catalog.domain.ports.catalog_store import CatalogStore
from repo_catalog.domain.ports.source_repository import SourceRepository
from repo_catalog.services.readme_analyzer import ReadmeAnalyzer
from repo_catalog.services.retry_policy import Sleep

logger = logging.getLogger(__name__)


class CatalogRepositoriesUseCase:
    """Orchestrates the list → fetch → summarise → persist pipeline.

    Parameters
    ----------
    source:
        Adapter that lists repositories and fetches their README.
    analyzer:
        Retrying README summariser.
    store:
        Append-only catalog, also the source of the resume set.
    readme_path:
        Path of the README inside each repository.
    pace_delay:
        Seconds to wait between two repositories.
    limit:
        Process at most this many repositories in one run.
    sleep:
        Awaitable sleep, injectable for tests.
    """

    def __init__(
        self,
        source: SourceRepository,
        analyzer: ReadmeAnalyzer,
        store: CatalogStore,
        readme_path: str = "README.md",
        pace_delay: float = 1.0,
        limit: int | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._source = source
        self._analyzer = analyzer
        self._store = store
        self._readme_path = readme_path
        self._pace_delay = pace_delay
        self._limit = limit
        self._sleep = sleep

    # ── Public entry point ──────────────────────────────────────────────

    async def execute(self) -> RunReport:
        """Run the full pipeline and return the counters for this run."""
        report = RunReport()

        # 1. Resume set first: an unreadable catalog must abort before any listing
        processed = self._store.processed_names()

        # 2. Enumerate
        logger.info("Fetching repository list...")
        all_names = await self._source.list_repositories()
        report.discovered = len(all_names)

        # 3. Filter, keeping listing order
        to_process = self._pending(all_names, processed)
        report.skipped = report.discovered - len(to_process)
        if self._limit is not None:
            to_process = to_process[: self._limit]

        if not to_process:
            logger.info(
                "No repositories left to process (%d listed, %d already done).",
                report.discovered,
                report.skipped,
            )
            return report

        logger.info("Found %d repositories to process.", len(to_process))

        # 4. One repository at a time
        for index, name in enumerate(to_process, start=1):
            logger.info("Processing %d/%d: %s", index, len(to_process), name)
            analysis = await self._analyse(name, report)

            self._store.append(CatalogRow.from_analysis(name, analysis))
            report.processed += 1
            logger.info("Saved progress for %s.", name)

            if index < len(to_process):
                await self._sleep(self._pace_delay)

        logger.info(
            "Done: %d processed, %d without README, %d failed analyses.",
            report.processed,
            report.missing_readme,
            report.failed_analysis,
        )
        return report

    # ── Steps ───────────────────────────────────────────────────────────

    @staticmethod
    def _pending(all_names: list[str], processed: set[str]) -> list[str]:
        """Names not yet in the catalog, in listing order, without duplicates."""
        seen = set(processed)
        pending: list[str] = []
        for name in all_names:
            if name in seen:
                continue
            seen.add(name)
            pending.append(name)
        return pending

    async def _analyse(self, name: str, report: RunReport) -> RepoAnalysis:
        readme = await self._load_readme(name)
        if readme is None:
            report.missing_readme += 1
            return RepoAnalysis.no_readme()

        analysis = await self._analyzer.analyze(readme, name=name)
        if analysis == RepoAnalysis.failed():
            report.failed_analysis += 1
        else:
            logger.info("   -> Summary: %s", analysis.summary)
            logger.info("   -> Tech: %s", analysis.tech_stack)
        return analysis

    async def _load_readme(self, name: str) -> str | None:
        """Fetch the README; any failure degrades to ``None``."""
        try:
            return await self._source.fetch_readme(name, self._readme_path)
        except ReadmeNotFoundError:
            logger.info("No %s found in repository: %s", self._readme_path, name)
        except ReadmeFetchError as exc:
            logger.error("Failed to get %s for %s: %s", self._readme_path, name, exc)
        return None
