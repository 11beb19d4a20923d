"""Helpers for reading Jira issue ``fields`` dictionaries.

Every accessor is total: missing or malformed values come back as the empty
value for their type (``False``, ``0``, ``None``, ``""`` or ``[]``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..config.settings import JiraFieldMap

STATUS_INITIAL = "new"
STATUS_TODO = ("to do", "backlog", "open")
STATUS_IN_PROGRESS = ("in progress", "progress")
STATUS_CATEGORY_DONE = "done"

ISSUE_KEY_PATTERN = re.compile(r"([A-Z][A-Z0-9]*-\d+)")
LOOSE_ISSUE_KEY_PATTERN = re.compile(r"\b([A-Za-z][A-Za-z0-9]*-\d+)\b")


class IssueKind(str, Enum):
    EPIC = "epic"
    STORY = "story"
    TASK = "task"
    SUBTASK = "subtask"
    BUG = "bug"
    OTHER = "other"


# Checked in order; "sub" must win over "task" and "story".
_KIND_PRIORITY = (
    ("sub", IssueKind.SUBTASK),
    ("epic", IssueKind.EPIC),
    ("story", IssueKind.STORY),
    ("bug", IssueKind.BUG),
    ("task", IssueKind.TASK),
)


@dataclass(frozen=True)
class FixVersion:
    released: bool = False
    release_date: Optional[date] = None


@dataclass(frozen=True)
class IssueFields:
    kind: IssueKind = IssueKind.OTHER
    status: str = ""
    status_category: str = ""
    has_description: bool = False
    has_assignee: bool = False
    has_priority: bool = False
    financial_category: Any = None
    story_points: Optional[float] = None
    original_estimate: Optional[float] = None
    aggregate_estimate: float = 0
    time_spent: float = 0
    fix_versions: List[FixVersion] = field(default_factory=list)


def classify_kind(name: Optional[str]) -> IssueKind:
    """Map a free-text issue type name onto a kind family."""
    lowered = name.lower() if isinstance(name, str) else ""
    for needle, kind in _KIND_PRIORITY:
        if needle in lowered:
            return kind
    return IssueKind.OTHER


def _nested_name(fields: Dict[str, Any], key: str) -> str:
    value = fields.get(key)
    if not isinstance(value, dict):
        return ""
    name = value.get("name")
    return name.lower() if isinstance(name, str) else ""


def _positive_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if value > 0 else None


def get_issue_kind(fields: Dict[str, Any]) -> IssueKind:
    issuetype = fields.get("issuetype")
    if not isinstance(issuetype, dict):
        return IssueKind.OTHER
    return classify_kind(issuetype.get("name"))


def get_status(fields: Dict[str, Any]) -> str:
    return _nested_name(fields, "status")


def get_status_category(fields: Dict[str, Any]) -> str:
    status = fields.get("status")
    if not isinstance(status, dict):
        return ""
    category = status.get("statusCategory")
    if not isinstance(category, dict):
        return ""
    key = category.get("key") or category.get("name")
    return key.lower() if isinstance(key, str) else ""


def has_description(fields: Dict[str, Any]) -> bool:
    return bool(fields.get("description"))


def has_assignee(fields: Dict[str, Any]) -> bool:
    return bool(fields.get("assignee"))


def has_priority(fields: Dict[str, Any]) -> bool:
    return bool(fields.get("priority"))


def get_financial_category(fields: Dict[str, Any], field_id: str = "customfield_10350") -> Any:
    return fields.get(field_id) or None


def coalesce_story_points(
    fields: Dict[str, Any],
    field_ids: Sequence[str] = ("customfield_10016", "customfield_10026"),
) -> Optional[float]:
    """Return the first positive estimate among ``field_ids``, else None."""
    for field_id in field_ids:
        points = _positive_number(fields.get(field_id))
        if points is not None:
            return points
    return None


def get_original_estimate(fields: Dict[str, Any]) -> Optional[float]:
    return _positive_number(fields.get("timeoriginalestimate"))


def coalesce_aggregate_estimate(fields: Dict[str, Any]) -> float:
    """Aggregate original estimate, then plain original estimate, then 0."""
    for key in ("aggregatetimeoriginalestimate", "timeoriginalestimate"):
        estimate = _positive_number(fields.get(key))
        if estimate is not None:
            return estimate
    return 0


def get_time_spent(fields: Dict[str, Any]) -> float:
    return _positive_number(fields.get("timespent")) or 0


def _parse_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def get_fix_versions(fields: Dict[str, Any]) -> List[FixVersion]:
    versions = fields.get("fixVersions")
    if not isinstance(versions, list):
        return []
    parsed: List[FixVersion] = []
    for version in versions:
        if not isinstance(version, dict):
            continue
        parsed.append(
            FixVersion(
                released=version.get("released") is True,
                release_date=_parse_date(version.get("releaseDate")),
            )
        )
    return parsed


def _status_matches(status: str, needles: Iterable[str]) -> bool:
    return any(needle in status for needle in needles)


def is_initial_status(status: str) -> bool:
    return status.strip() == STATUS_INITIAL


def is_todo_status(status: str) -> bool:
    return _status_matches(status, STATUS_TODO)


def is_in_progress_status(status: str) -> bool:
    return _status_matches(status, STATUS_IN_PROGRESS)


def extract_fields(raw: Any, field_map: Optional[JiraFieldMap] = None) -> IssueFields:
    """Build typed fields from a raw Jira ``fields`` mapping."""
    if not isinstance(raw, dict):
        return IssueFields()
    field_map = field_map or JiraFieldMap()
    return IssueFields(
        kind=get_issue_kind(raw),
        status=get_status(raw),
        status_category=get_status_category(raw),
        has_description=has_description(raw),
        has_assignee=has_assignee(raw),
        has_priority=has_priority(raw),
        financial_category=get_financial_category(raw, field_map.financial_category),
        story_points=coalesce_story_points(raw, field_map.story_points),
        original_estimate=get_original_estimate(raw),
        aggregate_estimate=coalesce_aggregate_estimate(raw),
        time_spent=get_time_spent(raw),
        fix_versions=get_fix_versions(raw),
    )


def extract_issue_key(text: Optional[str]) -> Optional[str]:
    """Pull the first ``ABC-123`` style key out of a URL, path or bare key.

    Upper-case keys win; a lower-case key such as ``abc-123`` is accepted
    only when no upper-case one is present, and is returned upper-cased.
    """
    if not text:
        return None
    match = ISSUE_KEY_PATTERN.search(text) or LOOSE_ISSUE_KEY_PATTERN.search(text)
    return match.group(1).upper() if match else None
