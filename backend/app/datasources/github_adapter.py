import asyncio
import json
from typing import Dict, List, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from ..config import Settings
from ..schemas import UpstreamRepository
from .base import DataSource, UpstreamHTTPError, UpstreamRequestError, UpstreamTimeoutError

GITHUB_API_VERSION = "2022-11-28"
GENERIC_ERROR_MESSAGE = "GitHub API error"

# newest first so truncation keeps the most recently updated repositories
REPO_LIST_PARAMS = {"per_page": 100, "sort": "updated", "direction": "desc"}


def build_headers(settings: Settings) -> Dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": settings.github_user_agent,
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }
    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token}"
    return headers


def build_repos_path(user: str) -> str:
    return f"/users/{quote(user, safe='')}/repos"


def extract_error_message(body: str) -> str:
    """Best-effort message from an upstream error body.

    Uses the JSON ``message`` field when present, otherwise the raw text,
    otherwise a generic message. Never raises.
    """
    message = body
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        message = str(payload["message"])
    return message or GENERIC_ERROR_MESSAGE


class GitHubAdapter(DataSource):
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.headers = build_headers(settings)
        client_kwargs = {
            "base_url": str(settings.github_base_url),
            "follow_redirects": True,  # renamed users answer with 301 to the new login
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        elif settings.github_proxy:
            # httpx accepts http(s):// and socks5:// proxy URLs here
            client_kwargs["proxy"] = settings.github_proxy
        self.client = httpx.AsyncClient(**client_kwargs)

    @property
    def timeout_seconds(self) -> float:
        return self.settings.github_timeout_ms / 1000

    async def list_user_repositories(self, user: str) -> List[UpstreamRepository]:
        path = build_repos_path(user)
        timeout = self.timeout_seconds
        logger.info(f"[github] GET {path} (timeout {timeout}s)")
        try:
            resp = await asyncio.wait_for(
                self.client.get(path, params=REPO_LIST_PARAMS, headers=self.headers, timeout=timeout),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise UpstreamTimeoutError(f"GitHub did not answer within {timeout}s") from exc
        except httpx.RequestError as exc:
            raise UpstreamRequestError(f"GitHub request error: {type(exc).__name__} {repr(exc)}") from exc

        if not resp.is_success:
            raise UpstreamHTTPError(resp.status_code, extract_error_message(resp.text))

        data = resp.json()
        if not isinstance(data, list):
            raise UpstreamRequestError(f"GitHub returned {type(data).__name__}, expected a list")
        logger.info(f"[github] {user}: received {len(data)} repositories")
        return [UpstreamRepository.model_validate(item) for item in data]

    async def aclose(self) -> None:
        await self.client.aclose()
