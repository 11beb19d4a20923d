"""Catalog of the rules an issue can violate."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class RuleKind(str, Enum):
    DESCRIPTION_MISSING = "description_missing"
    ASSIGNEE_MISSING = "assignee_missing"
    PRIORITY_MISSING = "priority_missing"
    FINANCIAL_CATEGORY_MISSING = "financial_category_missing"
    STORY_POINTS_MISSING = "story_points_missing"
    ORIGINAL_ESTIMATE_MISSING = "original_estimate_missing"
    TIME_LOGGED_IN_EPIC_STORY = "time_logged_in_epic_story"
    TIME_LOGGED_IN_TODO = "time_logged_in_todo"
    SUBTASK_FULLY_LOGGED_IN_PROGRESS = "subtask_fully_logged_in_progress"
    STORY_WITHOUT_SUBTASKS = "story_without_subtasks"
    RELEASED_NOT_DONE = "released_not_done"
    PAST_RELEASE_DATE_UNRELEASED = "past_release_date_unreleased"

    @property
    def message(self) -> str:
        return RULE_MESSAGES[self]


RULE_MESSAGES = {
    RuleKind.DESCRIPTION_MISSING: "Description is missing",
    RuleKind.ASSIGNEE_MISSING: "Assignee not assigned",
    RuleKind.PRIORITY_MISSING: "Priority not set",
    RuleKind.FINANCIAL_CATEGORY_MISSING: "Financial Category is missing",
    RuleKind.STORY_POINTS_MISSING: "Story points not estimated (required for Stories)",
    RuleKind.ORIGINAL_ESTIMATE_MISSING: "Original Estimate missing (required for Sub-tasks)",
    RuleKind.TIME_LOGGED_IN_EPIC_STORY: "Time logged in Epic/Story (only allowed in Sub-tasks and Bugs)",
    RuleKind.TIME_LOGGED_IN_TODO: "Time logged but issue still in To Do status",
    RuleKind.SUBTASK_FULLY_LOGGED_IN_PROGRESS: "Sub-task 100% logged - still open",
    RuleKind.STORY_WITHOUT_SUBTASKS: "Story is past its initial status but has no Sub-tasks",
    RuleKind.RELEASED_NOT_DONE: "Fix version is released but issue is not Done",
    RuleKind.PAST_RELEASE_DATE_UNRELEASED: "Fix version release date has passed but it is still unreleased",
}


def render_message(rule: RuleKind, issue_key: Optional[str] = None) -> str:
    """Return the rule message, prefixed with ``[KEY]`` for related issues."""
    prefix = f"[{issue_key}] " if issue_key else ""
    return prefix + rule.message
