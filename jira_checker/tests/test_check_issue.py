"""Tests for the check_issue command line entry point."""

import json
from unittest.mock import patch

from jira_checker.config.settings import RuntimeConfig
from jira_checker.scripts import check_issue
from jira_checker.services.checker_runner import CheckerRunner


def patched_runner(repository):
    return lambda runtime_config: CheckerRunner(RuntimeConfig(), repository)


def test_cli_reports_violations(repository, capsys):
    with patch.object(check_issue, "CheckerRunner", patched_runner(repository)):
        code = check_issue.main(["https://acme.atlassian.net/browse/PROJ-1"])

    out = capsys.readouterr().out
    assert code == check_issue.EXIT_VIOLATIONS
    assert "PROJ-1: 2 problem(s)" in out
    assert "[PROJ-3] Description is missing" in out


def test_cli_json_output(repository, capsys):
    with patch.object(check_issue, "CheckerRunner", patched_runner(repository)):
        code = check_issue.main(["PROJ-2", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert code == check_issue.EXIT_VIOLATIONS
    assert payload["count"] == 4
    assert payload["summary"]["issue:PROJ-5"] == 3


def test_cli_clean_issue(make_repository, sample_issues, capsys):
    """An epic with no members and complete data passes."""
    repository = make_repository(sample_issues)
    with patch.object(check_issue, "CheckerRunner", patched_runner(repository)):
        code = check_issue.main(["PROJ-1"])

    assert code == check_issue.EXIT_OK
    assert "PROJ-1: All Good" in capsys.readouterr().out


def test_cli_unavailable_issue(repository, capsys):
    with patch.object(check_issue, "CheckerRunner", patched_runner(repository)):
        code = check_issue.main(["PROJ-999"])

    assert code == check_issue.EXIT_UNAVAILABLE
    assert "not available" in capsys.readouterr().err


def test_cli_rejects_text_without_key(capsys):
    assert check_issue.main(["nothing here"]) == check_issue.EXIT_UNAVAILABLE


def test_cli_accepts_lowercase_key(repository, capsys):
    with patch.object(check_issue, "CheckerRunner", patched_runner(repository)):
        code = check_issue.main(["proj-2"])

    assert code == check_issue.EXIT_VIOLATIONS
    assert "PROJ-2: 4 problem(s)" in capsys.readouterr().out
