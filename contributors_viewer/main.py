import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from contributors_viewer.config import configure_logging, load_settings
from contributors_viewer.schemas import (
    ContributorSummary,
    ErrorResponse,
    HealthResponse,
    QueryParameters,
)
from contributors_viewer.github_client import (
    list_contributors,
    create_client,
    RepoNotFoundError,
    RateLimitError,
    GitHubAPIError,
)

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

REPO_NOT_FOUND_MESSAGE = "Repository not found"
RATE_LIMIT_MESSAGE = "API rate limit exceeded. Try again later."
SERVER_ERROR_MESSAGE = "Server error"
MISSING_PARAMS_MESSAGE = "Both owner and repository name are required"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("GitHub Contributors proxy starting up")
    yield
    logger.info("GitHub Contributors proxy shutting down")


app = FastAPI(
    title="GitHub Contributors Proxy",
    description="Lists the contributors of a GitHub repository",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.settings = settings

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["GET"],
    allow_headers=["*"],
)


async def get_github_client(request: Request) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with create_client(request.app.state.settings) as client:
        yield client


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    content = ErrorResponse(message=str(exc.detail)).model_dump()
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    content = ErrorResponse(message=SERVER_ERROR_MESSAGE).model_dump()
    return JSONResponse(status_code=500, content=content)


@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(status="UP")


@app.get(
    "/api/contributors/{owner}/{repo}",
    response_model=list[ContributorSummary],
    responses={code: {"model": ErrorResponse} for code in (400, 403, 404, 500)},
)
async def contributors(
    owner: str,
    repo: str,
    client: httpx.AsyncClient = Depends(get_github_client),
) -> list[ContributorSummary]:
    logger.info(f"Contributors request: {owner}/{repo}")

    if not QueryParameters(owner=owner, repo=repo).is_complete():
        logger.warning(f"Rejected contributors request with blank owner/repo: {owner!r}/{repo!r}")
        raise HTTPException(status_code=400, detail=MISSING_PARAMS_MESSAGE)

    try:
        result = await list_contributors(owner, repo, client)
    except RepoNotFoundError as exc:
        logger.warning(f"Error fetching GitHub contributors for {owner}/{repo}: {exc}")
        raise HTTPException(status_code=404, detail=REPO_NOT_FOUND_MESSAGE)
    except RateLimitError as exc:
        logger.warning(f"Error fetching GitHub contributors for {owner}/{repo}: {exc}")
        raise HTTPException(status_code=403, detail=RATE_LIMIT_MESSAGE)
    except GitHubAPIError as exc:
        logger.error(f"Error fetching GitHub contributors for {owner}/{repo}: {exc}")
        raise HTTPException(status_code=500, detail=SERVER_ERROR_MESSAGE)

    logger.info(f"Returning {len(result)} contributors for {owner}/{repo}")
    return result


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Server running on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
