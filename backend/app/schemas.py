from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class FilterCriteria(BaseModel):
    """Filters requested by the client, resolved once per request."""

    model_config = ConfigDict(frozen=True)

    user: str
    limit: int = 6
    languages: Tuple[str, ...] = ()
    topics: Tuple[str, ...] = ()
    min_size: Optional[float] = None
    max_size: Optional[float] = None
    min_stars: Optional[float] = None
    max_stars: Optional[float] = None
    updated_since: Optional[datetime] = None
    updated_until: Optional[datetime] = None


class UpstreamRepository(BaseModel):
    """Repository record as returned by GET /users/{user}/repos."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    html_url: str
    fork: bool = False
    archived: bool = False
    disabled: bool = False
    updated_at: str
    size: Optional[int] = 0
    stargazers_count: Optional[int] = 0
    forks_count: Optional[int] = 0
    open_issues_count: Optional[int] = 0
    default_branch: Optional[str] = ""
    topics: Optional[List[str]] = None


class ProjectSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    language: str = "Unknown"
    url: str
    updated_at: str = Field(serialization_alias="updatedAt")
    stars: Optional[int]
    forks: Optional[int]
    open_issues: Optional[int] = Field(serialization_alias="openIssues")
    default_branch: Optional[str] = Field(serialization_alias="defaultBranch")
    topics: List[str] = []
    size: Optional[int]


class ProjectsResponse(BaseModel):
    user: str
    projects: List[ProjectSummary]
