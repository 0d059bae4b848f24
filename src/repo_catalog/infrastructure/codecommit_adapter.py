"""AWS CodeCommit adapter — implements the SourceRepository port."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from repo_catalog.domain.exceptions import (
    ReadmeFetchError,
    ReadmeNotFoundError,
    SourceListingError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"FileDoesNotExistException"})


class CodeCommitAdapter:
    """Concrete ``SourceRepository`` backed by the CodeCommit API.

    The boto3 client is blocking, so each call is pushed onto a worker
    thread; callers still await them one at a time.
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def for_region(cls, region: str) -> CodeCommitAdapter:
        """Build an adapter with credentials from the standard boto3 chain."""
        return cls(boto3.client("codecommit", region_name=region))

    async def list_repositories(self) -> list[str]:
        """ListRepositories, following ``nextToken`` until exhausted."""
        try:
            return await asyncio.to_thread(self._list_all)
        except (ClientError, BotoCoreError) as exc:
            raise SourceListingError(
                f"Failed to list CodeCommit repositories: {exc}"
            ) from exc

    async def fetch_readme(self, name: str, path: str = "README.md") -> str:
        """GetFile on the default branch → decoded text."""
        try:
            response = await asyncio.to_thread(
                self._client.get_file, repositoryName=name, filePath=path
            )
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _NOT_FOUND_CODES:
                raise ReadmeNotFoundError(f"No {path} in repository {name}.") from exc
            raise ReadmeFetchError(f"Failed to get {path} for {name}: {exc}") from exc
        except BotoCoreError as exc:
            raise ReadmeFetchError(f"Failed to get {path} for {name}: {exc}") from exc

        content = response.get("fileContent", b"")
        if isinstance(content, bytes):
            return content.decode("utf-8", errors="replace")
        return str(content)

    def _list_all(self) -> list[str]:
        paginator = self._client.get_paginator("list_repositories")
        names: list[str] = []
        for page in paginator.paginate():
            names.extend(repo["repositoryName"] for repo in page.get("repositories", []))
        logger.debug("CodeCommit listed %d repositories", len(names))
        return names
