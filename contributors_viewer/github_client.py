import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from contributors_viewer.config import GITHUB_ACCEPT, USER_AGENT, Settings
from contributors_viewer.schemas import ContributorSummary

logger = logging.getLogger(__name__)


class RepoNotFoundError(Exception):
    pass


class RateLimitError(Exception):
    pass


class GitHubAPIError(Exception):
    pass


def _build_headers(token: str | None) -> dict[str, str]:
    headers = {"Accept": GITHUB_ACCEPT, "User-Agent": USER_AGENT}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


@asynccontextmanager
async def create_client(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an httpx async client configured for the GitHub API.

    Redirects are followed: GitHub answers 301 for renamed or transferred repos.
    """
    async with httpx.AsyncClient(
        transport=transport,
        follow_redirects=True,
        base_url=settings.github_api_base,
        headers=_build_headers(settings.github_token),
        timeout=settings.request_timeout,
    ) as client:
        yield client


def to_summary(record: dict) -> ContributorSummary:
    """Keep the five fields the viewer needs; html_url becomes profile_url."""
    return ContributorSummary(
        id=record["id"],
        login=record["login"],
        avatar_url=record["avatar_url"],
        contributions=record["contributions"],
        profile_url=record["html_url"],
    )


async def list_contributors(
    owner: str, repo: str, client: httpx.AsyncClient
) -> list[ContributorSummary]:
    """Fetch the first page of contributors for owner/repo, in upstream order."""
    url = f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/contributors"
    logger.debug(f"GET {url}")

    try:
        response = await client.get(url)
    except httpx.RequestError as exc:
        raise GitHubAPIError(f"Network error fetching contributors: {exc}") from exc

    if response.status_code == 404:
        raise RepoNotFoundError(f"Repository {owner}/{repo} not found")
    if response.status_code == 403:
        raise RateLimitError("GitHub API rate limit exceeded")
    # GitHub answers 204 for a repository without commits
    if response.status_code == 204:
        return []
    if response.status_code != 200:
        raise GitHubAPIError(f"Unexpected status {response.status_code} for {url}")

    try:
        data = response.json()
    except ValueError as exc:
        raise GitHubAPIError(f"Invalid JSON from {url}: {exc}") from exc

    if not isinstance(data, list):
        raise GitHubAPIError(f"Expected a JSON array from {url}, got {type(data).__name__}")

    try:
        return [to_summary(record) for record in data]
    except (KeyError, TypeError, ValidationError) as exc:
        raise GitHubAPIError(f"Malformed contributor record from {url}: {exc}") from exc
