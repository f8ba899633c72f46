from typing import List, Protocol

from ..schemas import UpstreamRepository


class UpstreamTimeoutError(Exception):
    """The upstream call did not complete within the configured timeout."""


class UpstreamRequestError(RuntimeError):
    """Transport-level failure talking to the upstream API."""


class UpstreamHTTPError(Exception):
    """The upstream API answered with a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"GitHub {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class DataSource(Protocol):
    async def list_user_repositories(self, user: str) -> List[UpstreamRepository]:
        ...
