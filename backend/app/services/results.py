"""Outcomes of the projects handler.

Each variant carries the HTTP status, extra headers and the JSON body the
transport layer should send. Failures always render as ``{"error": ...}``.
"""

from typing import Any, Dict, Union

from pydantic import BaseModel, Field

from ..schemas import ProjectsResponse

CACHE_CONTROL = "s-maxage=600, stale-while-revalidate=3600"


class Ok(BaseModel):
    status_code: int = 200
    headers: Dict[str, str] = Field(default_factory=lambda: {"Cache-Control": CACHE_CONTROL})
    payload: ProjectsResponse

    def body(self) -> Dict[str, Any]:
        return self.payload.model_dump(mode="json", by_alias=True)


class Failure(BaseModel):
    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    error: str

    def body(self) -> Dict[str, Any]:
        return {"error": self.error}


class MethodNotAllowed(Failure):
    status_code: int = 405
    headers: Dict[str, str] = Field(default_factory=lambda: {"Allow": "GET, POST"})
    error: str = "Method not allowed."


class InvalidUser(Failure):
    status_code: int = 400
    error: str = "Invalid or missing GitHub user."


class UpstreamTimeout(Failure):
    status_code: int = 504
    error: str = "GitHub API timed out."


class UpstreamError(Failure):
    """Non-success upstream status, forwarded with the upstream message."""


class InternalError(Failure):
    status_code: int = 500
    error: str = "Unexpected server error."


HandlerResult = Union[Ok, Failure]
