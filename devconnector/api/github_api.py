"""GitHub REST client for public repository listings."""

from typing import Any
from urllib.parse import quote

import requests  # type: ignore[import-untyped]

from devconnector.config import get_settings
from devconnector.constants import (
    GITHUB_REPO_DIRECTION,
    GITHUB_REPO_PAGE_SIZE,
    GITHUB_REPO_SORT,
    GITHUB_USER_AGENT,
)
from devconnector.errors import ExternalLookupFailed
from devconnector.logging import get_logger, log_timing

logger = get_logger("github")


class GitHubRepoFetcher:
    """
    Read-through client for ``GET /users/{username}/repos``.

    Every failure (non-200 status, unreadable body, network error or timeout)
    raises ExternalLookupFailed with a ``reason`` describing what happened.
    Nothing is cached and nothing is retried.
    """

    def __init__(
        self,
        api_base: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ):
        settings = get_settings()
        self.api_base = (api_base or settings.github_api_base).rstrip("/")
        self.token = token if token is not None else settings.pat_token
        self.timeout = timeout if timeout is not None else settings.github_timeout_seconds

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": GITHUB_USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def repos_url(self, username: str) -> str:
        return f"{self.api_base}/users/{quote(username, safe='')}/repos"

    @log_timing("github_repo_lookup", logger=logger)
    def list_repos(
        self,
        username: str,
        per_page: int = GITHUB_REPO_PAGE_SIZE,
        sort: str = GITHUB_REPO_SORT,
        direction: str = GITHUB_REPO_DIRECTION,
    ) -> list[dict[str, Any]]:
        """Return the user's public repositories exactly as GitHub sends them."""
        url = self.repos_url(username)
        params = {"per_page": per_page, "sort": sort, "direction": direction}

        try:
            response = requests.get(url, headers=self._headers(), params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("request_exception", error=str(e), url=url)
            raise ExternalLookupFailed(reason="transport_error", username=username) from e

        if response.status_code != 200:
            if response.status_code == 404:
                logger.debug("api_not_found", url=url)
            else:
                logger.error("api_error", status=response.status_code, url=url)
            raise ExternalLookupFailed(
                reason="upstream_status",
                username=username,
                upstream_status=response.status_code,
            )

        try:
            repos = response.json()
        except ValueError as e:
            logger.error("invalid_response_body", url=url)
            raise ExternalLookupFailed(reason="invalid_body", username=username) from e

        if not isinstance(repos, list):
            logger.error("unexpected_response_shape", url=url, body_type=type(repos).__name__)
            raise ExternalLookupFailed(reason="invalid_body", username=username)

        return repos


def get_github_fetcher() -> GitHubRepoFetcher:
    """Build a fetcher from settings (FastAPI dependency)."""
    return GitHubRepoFetcher()
