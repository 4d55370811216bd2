"""Shared fixtures: a fake GitHub upstream and in-process clients for both apps."""

from typing import Callable

import httpx
import pytest

from contributors_viewer.config import Settings
from contributors_viewer import main as proxy_main
from contributors_viewer.github_client import create_client

GITHUB_BASE = "https://api.github.test"


def make_record(id: int, login: str, contributions: int) -> dict:
    """An upstream contributor record, including fields the proxy drops."""
    return {
        "login": login,
        "id": id,
        "node_id": f"MDQ6VXNlcj{id}",
        "avatar_url": f"https://avatars.githubusercontent.com/u/{id}?v=4",
        "gravatar_id": "",
        "url": f"https://api.github.com/users/{login}",
        "html_url": f"https://github.com/{login}",
        "type": "User",
        "site_admin": False,
        "contributions": contributions,
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(github_api_base=GITHUB_BASE, api_url="http://proxy.test")


@pytest.fixture
def upstream_records() -> list[dict]:
    return [
        make_record(583231, "octocat", 42),
        make_record(9919, "hubot", 1),
        make_record(1024025, "monalisa", 0),
    ]


class FakeGitHub:
    """Records requests and answers them with a configurable handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json=[]
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self, headers: dict | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self), base_url=GITHUB_BASE, headers=headers
        )


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def proxy_app(settings: Settings, fake_github: FakeGitHub):
    app = proxy_main.app
    startup_settings = app.state.settings
    app.state.settings = settings

    async def _github_client():
        async with create_client(settings, transport=httpx.MockTransport(fake_github)) as client:
            yield client

    app.dependency_overrides[proxy_main.get_github_client] = _github_client
    yield app
    app.dependency_overrides.clear()
    app.state.settings = startup_settings


@pytest.fixture
async def proxy_client(proxy_app):
    transport = httpx.ASGITransport(app=proxy_app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://proxy.test") as client:
        yield client
