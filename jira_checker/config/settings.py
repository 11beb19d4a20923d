"""Runtime configuration models for the checker."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_WEEKLY_HOURS = 40
DEFAULT_TIMELOG_MESSAGE = "Please log your hours for this week!"
DEFAULT_TIMESHEET_MESSAGE = "Please submit your timesheet for this month!"


def _drop_blank_keys(data):
    """Drop keys left blank in YAML (``key:`` loads as None) so defaults apply."""
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


class JiraFieldMap(BaseModel):
    """Custom field ids that differ between Jira sites."""

    financial_category: str = "customfield_10350"
    # Earlier entries take precedence.
    story_points: List[str] = Field(
        default_factory=lambda: ["customfield_10016", "customfield_10026"]
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_blank(cls, data):
        return _drop_blank_keys(data)


class JiraConfig(BaseModel):
    base_url_env: str = "JIRA_BASE_URL"
    email_env: str = "JIRA_EMAIL"
    token_env: str = "JIRA_API_TOKEN"
    request_timeout_seconds: int = 30
    page_size: int = 100
    fields: JiraFieldMap = Field(default_factory=JiraFieldMap)

    @model_validator(mode="before")
    @classmethod
    def _drop_blank(cls, data):
        return _drop_blank_keys(data)


class CheckerSettings(BaseModel):
    """Rule toggles and reminder settings.

    Keys are accepted in snake_case or in the camelCase used by the browser
    settings page (``descSubtask``, ``assigneeEpic``...).
    """

    model_config = ConfigDict(populate_by_name=True)

    desc_subtask: bool = Field(False, alias="descSubtask")
    desc_epic: bool = Field(False, alias="descEpic")
    desc_task: bool = Field(False, alias="descTask")
    assignee_epic: bool = Field(False, alias="assigneeEpic")
    priority_epic: bool = Field(False, alias="priorityEpic")
    weekly_hours: int = Field(DEFAULT_WEEKLY_HOURS, alias="weeklyHours")
    timelog_message: str = Field(DEFAULT_TIMELOG_MESSAGE, alias="timelogMessage")
    timesheet_message: str = Field(DEFAULT_TIMESHEET_MESSAGE, alias="timesheetMessage")

    @model_validator(mode="before")
    @classmethod
    def _drop_blank(cls, data):
        return _drop_blank_keys(data)

    @field_validator("weekly_hours", mode="before")
    @classmethod
    def _weekly_hours_or_default(cls, value):
        try:
            hours = int(value)
        except (TypeError, ValueError):
            return DEFAULT_WEEKLY_HOURS
        return hours if hours > 0 else DEFAULT_WEEKLY_HOURS

    @field_validator("timelog_message", mode="before")
    @classmethod
    def _timelog_message_or_default(cls, value):
        return value or DEFAULT_TIMELOG_MESSAGE

    @field_validator("timesheet_message", mode="before")
    @classmethod
    def _timesheet_message_or_default(cls, value):
        return value or DEFAULT_TIMESHEET_MESSAGE


class RuntimeConfig(BaseModel):
    metadata: dict = Field(default_factory=dict)
    jira: JiraConfig = Field(default_factory=JiraConfig)
    checker: CheckerSettings = Field(default_factory=CheckerSettings)

    @model_validator(mode="before")
    @classmethod
    def _drop_blank(cls, data):
        return _drop_blank_keys(data)
