"""Orchestrates a single validation pass end-to-end."""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from ..analyzers.scorer import rule_breakdown
from ..checks.hierarchy import validate
from ..clients.jira import JiraClient
from ..clients.logging import get_logger, log_fetch, log_validation
from ..config.config_loader import load_runtime_config
from ..config.settings import RuntimeConfig
from ..fetchers.base import IssueFetcher, IssueRepository
from ..utils.issues import ViolationReport
from ..utils.timing import timed

logger = get_logger(__name__)


class CheckerRunner:
    """Fetch a root issue, validate it with its relatives and log the outcome.

    Each call to :meth:`check` is independent; the runner keeps no state
    between passes beyond its configuration and repository.
    """

    def __init__(
        self,
        runtime_config: RuntimeConfig | None = None,
        repository: IssueRepository | None = None,
    ):
        self._runtime_config = runtime_config or load_runtime_config()
        self._repository = repository or IssueFetcher(JiraClient(self._runtime_config.jira))

    @property
    def runtime_config(self) -> RuntimeConfig:
        return self._runtime_config

    def check(self, issue_key: str, today: Optional[date] = None) -> Optional[ViolationReport]:
        """Validate ``issue_key``; returns None when the issue cannot be fetched."""
        durations: Dict[str, int] = {}

        with timed("fetch", durations):
            issue = self._repository.fetch_issue(issue_key)
        log_fetch(logger, issue_key, issue is not None, durations["fetch"])
        if issue is None:
            return None

        with timed("validate", durations):
            report = validate(
                issue.get("fields") or {},
                issue.get("key") or issue_key,
                self._runtime_config.checker,
                self._repository,
                field_map=self._runtime_config.jira.fields,
                today=today,
            )
        log_validation(
            logger,
            report.issue_key,
            report.count,
            durations["validate"],
            rule_breakdown(report.violations),
        )
        return report

    def close(self) -> None:
        """Release the repository's HTTP resources, if it holds any."""
        close = getattr(self._repository, "close", None)
        if callable(close):
            close()
