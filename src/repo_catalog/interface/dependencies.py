"""Dependency wiring — builds concrete adapters from settings."""

from __future__ import annotations

from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator

import httpx

from repo_catalog.domain.exceptions import LlmError
from repo_catalog.domain.ports.source_repository import SourceRepository
from repo_catalog.infrastructure.codecommit_adapter import CodeCommitAdapter
from repo_catalog.infrastructure.config import Settings
from repo_catalog.infrastructure.csv_catalog import CsvCatalog
from repo_catalog.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_catalog.infrastructure.openai_adapter import OpenAIAdapter
from repo_catalog.services.catalog_repositories import CatalogRepositoriesUseCase
from repo_catalog.services.readme_analyzer import ReadmeAnalyzer
from repo_catalog.services.retry_policy import RetryPolicy


def build_retry_policy(settings: Settings) -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.max_attempts,
        initial_delay=settings.initial_backoff_seconds,
        retry_on=(LlmError,),
    )


@asynccontextmanager
async def build_use_case(settings: Settings) -> AsyncIterator[CatalogRepositoriesUseCase]:
    """Yield a fully wired use case and release its clients afterwards."""
    async with AsyncExitStack() as stack:
        source: SourceRepository
        if settings.source_provider == "github":
            http_client = await stack.enter_async_context(
                httpx.AsyncClient(timeout=httpx.Timeout(30.0))
            )
            token = settings.github_token.get_secret_value() if settings.github_token else None
            assert settings.github_owner is not None
            source = GitHubRestAdapter(http_client, owner=settings.github_owner, token=token)
        else:
            source = CodeCommitAdapter.for_region(settings.aws_region)

        llm = OpenAIAdapter(
            api_key=settings.openai_api_key.get_secret_value(),
            model=settings.openai_model,
            base_url=settings.openai_base_url,
        )
        stack.push_async_callback(llm.close)

        yield CatalogRepositoriesUseCase(
            source=source,
            analyzer=ReadmeAnalyzer(
                llm,
                build_retry_policy(settings),
                max_readme_tokens=settings.max_readme_tokens,
            ),
            store=CsvCatalog(settings.output_csv_file),
            readme_path=settings.readme_path,
            pace_delay=settings.pace_delay_seconds,
            limit=settings.max_repositories,
        )
