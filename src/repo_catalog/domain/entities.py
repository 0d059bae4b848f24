"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass

NO_README_SUMMARY = "N/A - No README"
EMPTY_README_SUMMARY = "N/A - Empty README"
NOT_APPLICABLE = "N/A"
FAILED_SUMMARY = "Error: AI analysis failed after multiple retries"
FAILED_TECH_STACK = "Error"
SUMMARY_NOT_GENERATED = "Summary not generated"
TECH_STACK_NOT_IDENTIFIED = "Tech stack not identified"


@dataclass(frozen=True, slots=True)
class RepoAnalysis:
    """Summary and technology list derived from a README."""

    summary: str
    tech_stack: str

    @classmethod
    def no_readme(cls) -> RepoAnalysis:
        return cls(summary=NO_README_SUMMARY, tech_stack=NOT_APPLICABLE)

    @classmethod
    def empty_readme(cls) -> RepoAnalysis:
        return cls(summary=EMPTY_README_SUMMARY, tech_stack=NOT_APPLICABLE)

    @classmethod
    def failed(cls) -> RepoAnalysis:
        return cls(summary=FAILED_SUMMARY, tech_stack=FAILED_TECH_STACK)


@dataclass(frozen=True, slots=True)
class CatalogRow:
    """A single line of the output catalog."""

    name: str
    summary: str
    tech_stack: str

    @classmethod
    def from_analysis(cls, name: str, analysis: RepoAnalysis) -> CatalogRow:
        return cls(name=name, summary=analysis.summary, tech_stack=analysis.tech_stack)


@dataclass(slots=True)
class RunReport:
    """Counters collected over one catalog run."""

    discovered: int = 0
    skipped: int = 0
    processed: int = 0
    missing_readme: int = 0
    failed_analysis: int = 0
