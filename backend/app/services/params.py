import math
import re
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from ..schemas import FilterCriteria

DEFAULT_LIMIT = 6
MAX_LIMIT = 50
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,37}[a-zA-Z0-9])?$")


def first_value(value: Any) -> Any:
    """Query strings and form bodies may repeat a key; scalars use the first."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def get_string(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = first_value(params.get(key))
    if isinstance(value, str):
        return value.strip()
    return None


def parse_number(value: Any) -> Optional[float]:
    value = first_value(value)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_limit(value: Any) -> int:
    number = parse_number(value)
    if number is None or number <= 0:
        return DEFAULT_LIMIT
    limit = math.floor(number)
    if limit < 1:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def parse_string_list(value: Any) -> List[str]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        raw = ",".join("" if item is None else str(item) for item in value)
    else:
        raw = str(value)
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_datetime(value: Any) -> Optional[datetime]:
    """ISO-8601 date or date-time; naive values are taken as UTC."""
    value = first_value(value)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_user(params: Mapping[str, Any], default_user: Optional[str]) -> Optional[str]:
    user = get_string(params, "user")
    return default_user if user is None else user


def is_valid_user(user: Optional[str]) -> bool:
    return bool(user) and USERNAME_PATTERN.fullmatch(user) is not None


def build_criteria(user: str, params: Mapping[str, Any]) -> FilterCriteria:
    return FilterCriteria(
        user=user,
        limit=parse_limit(params.get("limit")),
        languages=tuple(parse_string_list(params.get("language"))),
        topics=tuple(parse_string_list(params.get("topic"))),
        min_size=parse_number(params.get("min_size")),
        max_size=parse_number(params.get("max_size")),
        min_stars=parse_number(params.get("min_stars")),
        max_stars=parse_number(params.get("max_stars")),
        updated_since=parse_datetime(params.get("updated_since")),
        updated_until=parse_datetime(params.get("updated_until")),
    )
