from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, AsyncIterator, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .datasources.base import DataSource
from .datasources.github_adapter import GitHubAdapter
from .services.github_projects import list_projects
from .services.results import HandlerResult, MethodNotAllowed

PROJECTS_PATH = "/api/github"
ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD", "TRACE", "CONNECT"]
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@lru_cache
def get_github_adapter() -> GitHubAdapter:
    return GitHubAdapter(get_settings())


async def get_data_source(settings: Settings = Depends(get_settings)) -> AsyncIterator[DataSource]:
    """Shared adapter for the process settings, a short-lived one for any other settings."""
    if settings is get_settings():
        yield get_github_adapter()
        return
    adapter = GitHubAdapter(settings)
    try:
        yield adapter
    finally:
        await adapter.aclose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if get_github_adapter.cache_info().currsize:
        await get_github_adapter().aclose()


settings = get_settings()
app = FastAPI(title="GitHub Projects API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def multi_dict_to_params(items) -> Dict[str, Any]:
    """Collapse a multi-dict: single values stay scalar, repeated keys become lists."""
    params: Dict[str, Any] = {}
    for key, value in items:
        if key in params:
            existing = params[key]
            params[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            params[key] = value
    return params


async def read_request_params(request: Request) -> Dict[str, Any]:
    if request.method == "GET":
        return multi_dict_to_params(request.query_params.multi_items())
    if request.method != "POST":
        return {}

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return multi_dict_to_params(form.multi_items())
    if "json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            logger.warning("[api] POST body is not valid JSON, treating as empty")
            return {}
        return body if isinstance(body, dict) else {}
    return {}


def to_response(result: HandlerResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body(), headers=result.headers)


@app.exception_handler(StarletteHTTPException)
async def projects_http_exception_handler(request: Request, exc: StarletteHTTPException):
    # methods outside ROUTE_METHODS are rejected by the router before the handler runs
    if exc.status_code == 405 and request.url.path == PROJECTS_PATH:
        return to_response(MethodNotAllowed())
    return await http_exception_handler(request, exc)


@app.get("/", response_class=PlainTextResponse)
async def index():
    return "API ready. Use /api/github"


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.api_route(PROJECTS_PATH, methods=ROUTE_METHODS)
async def github_projects(
    request: Request,
    settings: Settings = Depends(get_settings),
    source: DataSource = Depends(get_data_source),
):
    params = await read_request_params(request)
    result = await list_projects(request.method, params, settings, source)
    return to_response(result)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000)
