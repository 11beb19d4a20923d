"""Validate an issue together with its epic members or sub-tasks."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from ..clients.jira import Relation
from ..config.settings import CheckerSettings, JiraFieldMap
from ..fetchers.base import IssueRepository, RelatedIssue
from ..utils.fields import IssueKind, extract_fields, is_initial_status
from ..utils.issues import Violation, ViolationReport
from .catalog import RuleKind
from .single_issue import evaluate

logger = logging.getLogger(__name__)


def validate(
    root_fields: Dict[str, Any],
    root_key: str,
    settings: CheckerSettings,
    repository: IssueRepository,
    field_map: Optional[JiraFieldMap] = None,
    today: Optional[date] = None,
) -> ViolationReport:
    """Validate the root issue and the issues one level below it.

    Epics pull in every issue whose parent or Epic Link is the root; stories
    pull in their sub-tasks. Root violations carry no key, related-issue
    violations carry the related issue's key. Any other kind is checked on
    its own.
    """
    today = today or date.today()
    root = extract_fields(root_fields, field_map)
    report = ViolationReport(issue_key=root_key)
    report.extend(evaluate(root, settings, today))

    if root.kind is IssueKind.EPIC:
        members = _fetch_related(repository, root_key, Relation.EPIC_MEMBERS)
        report.extend(_evaluate_related(members, settings, field_map, today))
    elif root.kind is IssueKind.STORY:
        subtasks = _fetch_related(repository, root_key, Relation.CHILDREN_OF_PARENT)
        if not subtasks and not is_initial_status(root.status):
            report.extend([Violation.of(RuleKind.STORY_WITHOUT_SUBTASKS)])
        else:
            report.extend(_evaluate_related(subtasks, settings, field_map, today))

    return report


def _fetch_related(repository: IssueRepository, key: str, relation: Relation) -> List[RelatedIssue]:
    try:
        related = list(repository.fetch_related(key, relation) or [])
    except Exception as exc:
        logger.warning(
            "Related issue lookup failed, validating root only",
            extra={"issue_key": key, "relation": relation.value, "error": str(exc)},
        )
        return []
    return [issue for issue in related if isinstance(issue, dict)]


def _evaluate_related(
    related: List[RelatedIssue],
    settings: CheckerSettings,
    field_map: Optional[JiraFieldMap],
    today: date,
) -> List[Violation]:
    violations: List[Violation] = []
    for issue in related:
        key = issue.get("key") or "?"
        fields = extract_fields(issue.get("fields"), field_map)
        violations.extend(violation.keyed(key) for violation in evaluate(fields, settings, today))
    return violations
