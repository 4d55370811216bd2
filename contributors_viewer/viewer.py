import enum
import logging
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from contributors_viewer.config import Settings
from contributors_viewer.schemas import ContributorSummary, QueryParameters

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Please enter both a GitHub handle and repository name."
NO_CONTRIBUTORS_MESSAGE = "No contributors found for this repository."
FETCH_FAILED_MESSAGE = "Error fetching contributors. Please try again."

_contributor_list = TypeAdapter(list[ContributorSummary])


class ProxyError(Exception):
    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "proxy request failed")
        self.message = message


class ViewStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def contribution_label(count: int) -> str:
    return f"{count} {'contribution' if count == 1 else 'contributions'}"


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str) and body["message"]:
        return body["message"]
    return None


class ProxyClient:
    """Calls the proxy service's contributor listing."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def list_contributors(self, owner: str, repo: str) -> list[ContributorSummary]:
        url = f"/api/contributors/{quote(owner, safe='')}/{quote(repo, safe='')}"
        logger.debug(f"GET {url}")

        try:
            response = await self._client.get(url)
        except httpx.RequestError as exc:
            raise ProxyError() from exc

        if response.status_code != 200:
            raise ProxyError(_error_message(response))

        try:
            return _contributor_list.validate_json(response.content)
        except ValidationError as exc:
            raise ProxyError() from exc


@asynccontextmanager
async def create_proxy_client(settings: Settings) -> AsyncGenerator[ProxyClient, None]:
    async with httpx.AsyncClient(
        base_url=settings.api_url,
        timeout=settings.request_timeout,
    ) as client:
        yield ProxyClient(client)


class ContributorsViewer:
    def __init__(self, proxy: ProxyClient):
        self._proxy = proxy
        self.owner = ""
        self.repo = ""
        self.contributors: list[ContributorSummary] = []
        self.loading = False
        self.error = ""
        # bumped on every submission; older responses are dropped
        self._submission = 0

    @property
    def status(self) -> ViewStatus:
        if self.loading:
            return ViewStatus.LOADING
        if self.error:
            return ViewStatus.ERROR
        if self.contributors:
            return ViewStatus.SUCCESS
        return ViewStatus.IDLE

    async def submit(self, owner: str, repo: str) -> None:
        self.owner = owner
        self.repo = repo

        self._submission += 1
        submission = self._submission

        if not owner or not repo:
            self.loading = False
            self.error = MISSING_INPUT_MESSAGE
            return

        query = QueryParameters(owner=owner, repo=repo)

        self.loading = True
        self.error = ""
        self.contributors = []

        try:
            contributors = await self._proxy.list_contributors(query.owner, query.repo)
        except ProxyError as exc:
            logger.warning(f"Error fetching contributors for {query.owner}/{query.repo}: {exc}")
            if submission == self._submission:
                self.error = exc.message or FETCH_FAILED_MESSAGE
            return
        finally:
            if submission == self._submission:
                self.loading = False

        if submission != self._submission:
            logger.debug(f"Discarding stale response for {query.owner}/{query.repo}")
            return

        self.contributors = contributors
        if not contributors:
            self.error = NO_CONTRIBUTORS_MESSAGE
