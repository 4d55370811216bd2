import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# --- Upstream ---
GITHUB_API_BASE: str = "https://api.github.com"
GITHUB_ACCEPT: str = "application/vnd.github.v3+json"
USER_AGENT: str = "github-contributors-viewer/1.0"

# --- Defaults ---
DEFAULT_PORT: int = 5000
DEFAULT_CLIENT_PORT: int = 3000
DEFAULT_API_URL: str = "http://localhost:5000"
REQUEST_TIMEOUT: float = 30.0  # per HTTP request (seconds)


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    client_port: int = DEFAULT_CLIENT_PORT
    api_url: str = DEFAULT_API_URL
    github_api_base: str = GITHUB_API_BASE
    github_token: Optional[str] = None  # sent as a bearer token when set
    request_timeout: float = REQUEST_TIMEOUT
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("*",)


def load_settings() -> Settings:
    """Read settings from the environment (and .env) once, at startup."""
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        port=int(os.getenv("PORT", str(DEFAULT_PORT))),
        client_port=int(os.getenv("CLIENT_PORT", str(DEFAULT_CLIENT_PORT))),
        api_url=os.getenv("API_URL", DEFAULT_API_URL).rstrip("/"),
        github_api_base=os.getenv("GITHUB_API_BASE", GITHUB_API_BASE).rstrip("/"),
        github_token=os.getenv("GITHUB_TOKEN", "").strip() or None,
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", str(REQUEST_TIMEOUT))),
        log_level=os.getenv("LOG_LEVEL", "info").upper(),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )


def configure_logging(log_level: str = "INFO") -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
