from typing import Any, Mapping

from loguru import logger

from ..config import Settings
from ..datasources.base import DataSource, UpstreamHTTPError, UpstreamTimeoutError
from ..schemas import ProjectsResponse
from .params import build_criteria, is_valid_user, resolve_user
from .repo_filter import select_projects
from .results import (
    HandlerResult,
    InternalError,
    InvalidUser,
    MethodNotAllowed,
    Ok,
    UpstreamError,
    UpstreamTimeout,
)

ALLOWED_METHODS = ("GET", "POST")


async def list_projects(
    method: str,
    params: Mapping[str, Any],
    settings: Settings,
    source: DataSource,
) -> HandlerResult:
    """List a user's public repositories after applying the requested filters.

    ``params`` is the query string for GET and the parsed body for POST. The
    result is a tagged value; rendering it is up to the caller.
    """
    if method.upper() not in ALLOWED_METHODS:
        return MethodNotAllowed()

    user = resolve_user(params, settings.default_user)
    if not is_valid_user(user):
        logger.info(f"[projects] rejected user {user!r}")
        return InvalidUser()

    criteria = build_criteria(user, params)
    try:
        repos = await source.list_user_repositories(criteria.user)
        projects = select_projects(repos, criteria)
    except UpstreamTimeoutError as exc:
        logger.warning(f"[projects] {user}: {exc}")
        return UpstreamTimeout()
    except UpstreamHTTPError as exc:
        logger.warning(f"[projects] {user}: upstream returned {exc.status_code}: {exc.message}")
        return UpstreamError(status_code=exc.status_code, error=exc.message)
    except Exception as exc:
        logger.exception(f"[projects] {user}: unexpected failure: {type(exc).__name__}")
        return InternalError()

    logger.info(f"[projects] {user}: returning {len(projects)} projects")
    return Ok(payload=ProjectsResponse(user=criteria.user, projects=projects))
