"""GitHub REST API adapter — implements the SourceRepository port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from repo_catalog.domain.exceptions import (
    ReadmeFetchError,
    ReadmeNotFoundError,
    RepoCatalogError,
    SourceListingError,
)

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_PER_PAGE = 100


class GitHubRestAdapter:
    """Concrete SourceRepository backed by the GitHub v3 REST API.

    Lists the repositories of a single user or organisation (*owner*).  With
    a token, private repositories the token can read are listed too.
    """

    def __init__(
        self, client: httpx.AsyncClient, owner: str, token: str | None = None
    ) -> None:
        self._client = client
        self._owner = owner
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "repo-catalog/1.0",
        }
        self._authenticated = bool(token)
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def list_repositories(self) -> list[str]:
        """Walk the owner's repository listing page by page, until a short page."""
        endpoint, params = await self._listing_endpoint()
        names: list[str] = []
        page = 1
        while True:
            resp = await self._api_get(
                endpoint,
                error_cls=SourceListingError,
                not_found_cls=SourceListingError,
                params={**params, "per_page": str(_PER_PAGE), "page": str(page)},
            )
            batch = resp.json()
            names.extend(item["name"] for item in batch)
            if len(batch) < _PER_PAGE:
                break
            page += 1
        logger.debug("GitHub listed %d repositories for %s", len(names), self._owner)
        return names

    async def _listing_endpoint(self) -> tuple[str, dict[str, str]]:
        """Pick the listing that includes private repositories when possible.

        ``/users/{owner}/repos`` only ever returns public repositories.
        """
        public = (f"/users/{self._owner}/repos", {"type": "owner"})
        if not self._authenticated:
            return public

        owner = await self._api_get(
            f"/users/{self._owner}",
            error_cls=SourceListingError,
            not_found_cls=SourceListingError,
        )
        if owner.json().get("type") == "Organization":
            return f"/orgs/{self._owner}/repos", {"type": "all"}

        viewer = await self._api_get(
            "/user", error_cls=SourceListingError, not_found_cls=SourceListingError
        )
        if str(viewer.json().get("login", "")).lower() == self._owner.lower():
            return "/user/repos", {"affiliation": "owner", "visibility": "all"}

        return public

    async def fetch_readme(self, name: str, path: str = "README.md") -> str:
        """GET /repos/{owner}/{name}/contents/{path} as raw text."""
        resp = await self._api_get(
            f"/repos/{self._owner}/{name}/contents/{path}",
            error_cls=ReadmeFetchError,
            not_found_cls=ReadmeNotFoundError,
            accept="application/vnd.github.raw",
        )
        return resp.content.decode("utf-8", errors="replace")

    async def _api_get(
        self,
        endpoint: str,
        *,
        error_cls: type[RepoCatalogError],
        not_found_cls: type[RepoCatalogError],
        params: dict[str, str] | None = None,
        accept: str | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{_GITHUB_API}{endpoint}"
        headers = dict(self._api_headers)
        if accept:
            headers["Accept"] = accept
        try:
            resp = await self._client.get(url, headers=headers, params=params)
        except httpx.HTTPError as exc:
            raise error_cls(f"Network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code == 404:
            raise not_found_cls(f"Not found: {url}")

        if resp.status_code == 403:
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise error_cls(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}. "
                    "Set the GITHUB_TOKEN environment variable to increase the limit."
                )
            raise error_cls(f"Access denied for {url}.")

        if resp.status_code == 429:
            raise error_cls("GitHub API rate limit exceeded (HTTP 429).")

        raise error_cls(f"GitHub API returned HTTP {resp.status_code} for {url}")
