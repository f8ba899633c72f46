from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence

from loguru import logger

from ..schemas import FilterCriteria, ProjectSummary, UpstreamRepository
from .params import parse_datetime

RepoPredicate = Callable[[UpstreamRepository], bool]


def is_active(repo: UpstreamRepository) -> bool:
    return not (repo.fork or repo.archived or repo.disabled)


def matches_language(repo: UpstreamRepository, languages: Sequence[str]) -> bool:
    if not languages:
        return True
    lang = (repo.language or "").lower()
    return any(item.lower() == lang for item in languages)


def matches_topics(repo: UpstreamRepository, topics: Sequence[str]) -> bool:
    if not topics:
        return True
    repo_topics = {topic.lower() for topic in repo.topics or []}
    return all(topic.lower() in repo_topics for topic in topics)


def within_bounds(value: float, minimum: Optional[float], maximum: Optional[float]) -> bool:
    if minimum is not None and value < minimum:
        return False
    if maximum is not None and value > maximum:
        return False
    return True


def updated_within(
    repo: UpstreamRepository, since: Optional[datetime], until: Optional[datetime]
) -> bool:
    if since is None and until is None:
        return True
    updated_at = parse_datetime(repo.updated_at)
    if updated_at is None:
        # an unreadable timestamp cannot be compared, so it is not excluded
        return True
    if since is not None and updated_at < since:
        return False
    if until is not None and updated_at > until:
        return False
    return True


def build_pipeline(criteria: FilterCriteria) -> List[RepoPredicate]:
    """Ordered filter stages; truncation to ``criteria.limit`` comes after all of them."""
    return [
        is_active,
        lambda repo: matches_language(repo, criteria.languages),
        lambda repo: matches_topics(repo, criteria.topics),
        lambda repo: within_bounds(repo.size or 0, criteria.min_size, criteria.max_size),
        lambda repo: within_bounds(repo.stargazers_count or 0, criteria.min_stars, criteria.max_stars),
        lambda repo: updated_within(repo, criteria.updated_since, criteria.updated_until),
    ]


def filter_repositories(
    repos: Iterable[UpstreamRepository], criteria: FilterCriteria
) -> List[UpstreamRepository]:
    selected = list(repos)
    for stage in build_pipeline(criteria):
        selected = [repo for repo in selected if stage(repo)]
    logger.debug(f"[filter] {criteria.user}: {len(selected)} repositories passed, limit {criteria.limit}")
    return selected[: criteria.limit]


def to_project_summary(repo: UpstreamRepository) -> ProjectSummary:
    return ProjectSummary(
        name=repo.name,
        description=repo.description or "",
        language=repo.language or "Unknown",
        url=repo.html_url,
        updated_at=repo.updated_at,
        stars=repo.stargazers_count,
        forks=repo.forks_count,
        open_issues=repo.open_issues_count,
        default_branch=repo.default_branch,
        topics=list(repo.topics or []),
        size=repo.size,
    )


def select_projects(
    repos: Iterable[UpstreamRepository], criteria: FilterCriteria
) -> List[ProjectSummary]:
    return [to_project_summary(repo) for repo in filter_repositories(repos, criteria)]
