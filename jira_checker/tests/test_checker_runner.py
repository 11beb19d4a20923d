"""Tests for CheckerRunner with an in-memory repository."""

import logging
from unittest.mock import Mock

from jira_checker.checks.catalog import RuleKind
from jira_checker.config.settings import CheckerSettings, RuntimeConfig
from jira_checker.services.checker_runner import CheckerRunner


def test_runner_validates_story_and_subtasks(repository, today):
    runner = CheckerRunner(runtime_config=RuntimeConfig(), repository=repository)

    report = runner.check("PROJ-2", today=today)

    assert report.issue_key == "PROJ-2"
    assert report.count == 4
    assert {v.issue_key for v in report.violations} == {"PROJ-4", "PROJ-5"}
    assert repository.calls == [("issue", "PROJ-2"), ("children-of-parent", "PROJ-2")]


def test_runner_returns_none_for_unavailable_issue(repository, today):
    runner = CheckerRunner(runtime_config=RuntimeConfig(), repository=repository)

    assert runner.check("PROJ-999", today=today) is None
    assert repository.calls == [("issue", "PROJ-999")]


def test_runner_uses_configured_toggles(repository, today):
    config = RuntimeConfig(checker=CheckerSettings(desc_subtask=True))
    runner = CheckerRunner(runtime_config=config, repository=repository)

    report = runner.check("PROJ-2", today=today)

    assert (RuleKind.DESCRIPTION_MISSING, "PROJ-4") in [(v.rule, v.issue_key) for v in report.violations]


def test_runner_logs_validation_summary(repository, today, caplog):
    runner = CheckerRunner(runtime_config=RuntimeConfig(), repository=repository)

    with caplog.at_level(logging.INFO, logger="jira_checker.services.checker_runner"):
        runner.check("PROJ-1", today=today)

    records = [r for r in caplog.records if getattr(r, "stage", None) == "validate"]
    assert len(records) == 1
    assert records[0].violation_count == 2
    assert records[0].rule_breakdown == {
        "description_missing": 1,
        "financial_category_missing": 1,
    }


def test_runner_close_releases_repository():
    closable = Mock()
    CheckerRunner(runtime_config=RuntimeConfig(), repository=closable).close()
    closable.close.assert_called_once_with()


def test_runner_close_without_repository_close(repository):
    # FakeRepository has no close(); nothing to release.
    CheckerRunner(runtime_config=RuntimeConfig(), repository=repository).close()
