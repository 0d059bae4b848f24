"""Shared pytest fixtures for repo-catalog tests.

Fakes for the three external collaborators live here:
- Source fixtures: an in-memory hosting account
- LLM fixtures: a scripted completion endpoint
- Timing fixtures: a sleep recorder so no test waits for real
"""

from __future__ import annotations

from pathlib import Path

import pytest

from repo_catalog.domain.exceptions import LlmError, ReadmeNotFoundError
from repo_catalog.infrastructure.config import get_settings

# =============================================================================
# Fakes
# =============================================================================


class FakeSource:
    """SourceRepository over a dict; names missing from *readmes* have no README."""

    def __init__(
        self,
        names: list[str],
        readmes: dict[str, str | Exception] | None = None,
        listing_error: Exception | None = None,
    ) -> None:
        self.names = names
        self.readmes = readmes or {}
        self.listing_error = listing_error
        self.fetched: list[tuple[str, str]] = []

    async def list_repositories(self) -> list[str]:
        if self.listing_error is not None:
            raise self.listing_error
        return list(self.names)

    async def fetch_readme(self, name: str, path: str = "README.md") -> str:
        self.fetched.append((name, path))
        if name not in self.readmes:
            raise ReadmeNotFoundError(f"No {path} in repository {name}.")
        item = self.readmes[name]
        if isinstance(item, Exception):
            raise item
        return item


class FakeLlm:
    """LlmGateway answering from a script of strings and exceptions."""

    def __init__(self, *responses: str | Exception) -> None:
        self._responses = list(responses)
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._responses:
            raise LlmError("no scripted response left")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RecordingSleep:
    """Awaitable stand-in for ``asyncio.sleep``."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_source() -> type[FakeSource]:
    return FakeSource


@pytest.fixture
def fake_llm() -> type[FakeLlm]:
    return FakeLlm


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def catalog_path(tmp_path: Path) -> Path:
    """Path of a not-yet-existing output CSV."""
    return tmp_path / "repositories_summary.csv"


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Isolate every test from the caller's environment and ``.env`` file."""
    for var in (
        "OPENAI_API_KEY",
        "GEMINI_API_KEY",
        "OPENAI_MODEL",
        "OPENAI_BASE_URL",
        "SOURCE_PROVIDER",
        "AWS_REGION",
        "GITHUB_OWNER",
        "GITHUB_TOKEN",
        "OUTPUT_CSV_FILE",
        "MAX_ATTEMPTS",
        "MAX_REPOSITORIES",
        "MAX_README_TOKENS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
