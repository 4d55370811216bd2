import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from contributors_viewer.config import configure_logging, load_settings
from contributors_viewer.viewer import (
    ContributorsViewer,
    ProxyClient,
    contribution_label,
    create_proxy_client,
)

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["contribution_label"] = contribution_label


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Contributors gallery starting up (API at {app.state.settings.api_url})")
    yield
    logger.info("Contributors gallery shutting down")


app = FastAPI(
    title="GitHub Contributors Gallery",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.settings = settings


async def get_proxy_client(request: Request) -> AsyncGenerator[ProxyClient, None]:
    async with create_proxy_client(request.app.state.settings) as proxy:
        yield proxy


@app.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    owner: Optional[str] = None,
    repo: Optional[str] = None,
    proxy: ProxyClient = Depends(get_proxy_client),
) -> HTMLResponse:
    viewer = ContributorsViewer(proxy)
    # no query string means a first visit, not an empty submission
    if owner is not None or repo is not None:
        await viewer.submit(owner or "", repo or "")
    return templates.TemplateResponse(request, "index.html", {"viewer": viewer})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.client_port)
