"""Rule evaluation for a single issue, independent of its relatives."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from ..config.settings import CheckerSettings
from ..utils.fields import (
    STATUS_CATEGORY_DONE,
    IssueFields,
    IssueKind,
    is_in_progress_status,
    is_initial_status,
    is_todo_status,
)
from ..utils.issues import Violation
from .catalog import RuleKind

FINANCIAL_CATEGORY_KINDS = frozenset(
    {IssueKind.STORY, IssueKind.TASK, IssueKind.BUG, IssueKind.SUBTASK}
)


def evaluate(
    fields: IssueFields,
    settings: CheckerSettings,
    today: Optional[date] = None,
) -> List[Violation]:
    """Return the unkeyed violations for one issue, in catalog order.

    ``today`` defaults to the current local date and only matters for the
    fix-version release date rule.
    """
    rules: List[RuleKind] = []
    kind = fields.kind

    if not fields.has_description and _description_required(kind, settings):
        rules.append(RuleKind.DESCRIPTION_MISSING)

    if not fields.has_assignee and not (kind is IssueKind.EPIC and not settings.assignee_epic):
        rules.append(RuleKind.ASSIGNEE_MISSING)

    if not fields.has_priority and not (kind is IssueKind.EPIC and not settings.priority_epic):
        rules.append(RuleKind.PRIORITY_MISSING)

    if kind in FINANCIAL_CATEGORY_KINDS and not fields.financial_category:
        rules.append(RuleKind.FINANCIAL_CATEGORY_MISSING)

    if kind is IssueKind.STORY and not is_initial_status(fields.status) and fields.story_points is None:
        rules.append(RuleKind.STORY_POINTS_MISSING)

    if kind is IssueKind.SUBTASK and fields.original_estimate is None:
        rules.append(RuleKind.ORIGINAL_ESTIMATE_MISSING)

    if fields.time_spent > 0 and kind in (IssueKind.EPIC, IssueKind.STORY):
        rules.append(RuleKind.TIME_LOGGED_IN_EPIC_STORY)

    if fields.time_spent > 0 and is_todo_status(fields.status):
        rules.append(RuleKind.TIME_LOGGED_IN_TODO)

    if kind is IssueKind.SUBTASK and is_in_progress_status(fields.status):
        estimate = fields.aggregate_estimate
        if estimate > 0 and fields.time_spent >= estimate:
            rules.append(RuleKind.SUBTASK_FULLY_LOGGED_IN_PROGRESS)

    if fields.status_category != STATUS_CATEGORY_DONE and any(
        version.released for version in fields.fix_versions
    ):
        rules.append(RuleKind.RELEASED_NOT_DONE)

    today = today or date.today()
    if any(
        not version.released and version.release_date is not None and version.release_date < today
        for version in fields.fix_versions
    ):
        rules.append(RuleKind.PAST_RELEASE_DATE_UNRELEASED)

    return [Violation.of(rule) for rule in rules]


def _description_required(kind: IssueKind, settings: CheckerSettings) -> bool:
    if kind in (IssueKind.STORY, IssueKind.BUG):
        return True
    if kind is IssueKind.SUBTASK:
        return settings.desc_subtask
    if kind is IssueKind.EPIC:
        return settings.desc_epic
    if kind is IssueKind.TASK:
        return settings.desc_task
    return False
