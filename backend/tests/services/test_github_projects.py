"""Projects handler tests — pure (method, params) → result mapping.

Invariants:
    - only GET and POST reach the upstream source
    - every upstream failure maps to exactly one result variant
    - success carries the cache directive and the {user, projects} payload

Design Decisions:
    - Upstream replaced by a FakeSource (no HTTP at all)
"""

import pytest

from app.datasources.base import UpstreamHTTPError, UpstreamRequestError, UpstreamTimeoutError
from app.services.github_projects import list_projects
from app.services.results import (
    CACHE_CONTROL,
    InternalError,
    InvalidUser,
    MethodNotAllowed,
    Ok,
    UpstreamError,
    UpstreamTimeout,
)


@pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"])
async def test_unsupported_methods_rejected(method, settings, fake_source):
    source = fake_source()
    result = await list_projects(method, {}, settings, source)
    assert isinstance(result, MethodNotAllowed)
    assert result.status_code == 405
    assert result.body() == {"error": "Method not allowed."}
    assert result.headers["Allow"] == "GET, POST"
    assert source.calls == []


@pytest.mark.parametrize("user", ["", "-bad-", "-leading", "under_score"])
async def test_invalid_user_rejected(user, settings, fake_source):
    source = fake_source()
    result = await list_projects("GET", {"user": user}, settings, source)
    assert isinstance(result, InvalidUser)
    assert result.status_code == 400
    assert result.body() == {"error": "Invalid or missing GitHub user."}
    assert source.calls == []


async def test_missing_user_without_default_rejected(settings, fake_source):
    settings = settings.model_copy(update={"github_user": None})
    result = await list_projects("GET", {}, settings, fake_source())
    assert isinstance(result, InvalidUser)


async def test_default_user_used_when_absent(settings, fake_source, make_repo):
    source = fake_source(repos=[make_repo(name="site")])
    result = await list_projects("GET", {}, settings, source)
    assert isinstance(result, Ok)
    assert source.calls == ["octocat"]
    assert result.body()["user"] == "octocat"


async def test_post_params_are_honoured(settings, fake_source, make_repo):
    repos = [make_repo(name="a", language="Go"), make_repo(name="b", language="Python")]
    result = await list_projects(
        "post", {"user": "someone", "language": ["go"]}, settings, fake_source(repos=repos)
    )
    assert isinstance(result, Ok)
    assert [p["name"] for p in result.body()["projects"]] == ["a"]


async def test_success_payload_and_cache_header(settings, fake_source, make_repo):
    repos = [
        make_repo(name="forked", fork=True),
        make_repo(name="archived", archived=True),
        make_repo(name="kept", description=None, language=None, topics=None),
    ]
    result = await list_projects("GET", {"user": "octocat"}, settings, fake_source(repos=repos))
    assert result.status_code == 200
    assert result.headers["Cache-Control"] == CACHE_CONTROL
    body = result.body()
    assert body["user"] == "octocat"
    assert len(body["projects"]) == 1
    project = body["projects"][0]
    assert project["name"] == "kept"
    assert project["description"] == ""
    assert project["language"] == "Unknown"
    assert project["topics"] == []


async def test_limit_is_clamped(settings, fake_source, make_repo):
    repos = [make_repo(name=f"repo{i}") for i in range(60)]
    result = await list_projects("GET", {"limit": "1000"}, settings, fake_source(repos=repos))
    assert len(result.body()["projects"]) == 50


async def test_upstream_timeout(settings, fake_source):
    source = fake_source(error=UpstreamTimeoutError("slow"))
    result = await list_projects("GET", {}, settings, source)
    assert isinstance(result, UpstreamTimeout)
    assert result.status_code == 504
    assert result.body() == {"error": "GitHub API timed out."}


async def test_upstream_status_forwarded(settings, fake_source):
    source = fake_source(error=UpstreamHTTPError(404, "Not Found"))
    result = await list_projects("GET", {}, settings, source)
    assert isinstance(result, UpstreamError)
    assert result.status_code == 404
    assert result.body() == {"error": "Not Found"}


async def test_transport_failure_is_internal_error(settings, fake_source):
    source = fake_source(error=UpstreamRequestError("connection refused"))
    result = await list_projects("GET", {}, settings, source)
    assert isinstance(result, InternalError)
    assert result.status_code == 500
    assert result.body() == {"error": "Unexpected server error."}


async def test_unexpected_exception_is_internal_error(settings, fake_source):
    source = fake_source(error=ValueError("boom"))
    result = await list_projects("GET", {}, settings, source)
    assert isinstance(result, InternalError)
