"""Pytest configuration and shared fixtures."""

import copy
import json
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from jira_checker.clients.jira import Relation
from jira_checker.config.settings import CheckerSettings

TODAY = date(2024, 6, 15)


class FakeRepository:
    """In-memory issue repository that records the lookups it serves."""

    def __init__(
        self,
        issues: Dict[str, Dict],
        related: Optional[Dict[str, List[str]]] = None,
        fail_related: bool = False,
    ):
        self._issues = issues
        self._related = related or {}
        self._fail_related = fail_related
        self.calls: List[tuple] = []

    def fetch_issue(self, key: str) -> Optional[Dict]:
        self.calls.append(("issue", key))
        issue = self._issues.get(key)
        return copy.deepcopy(issue) if issue else None

    def fetch_related(self, key: str, relation: Relation) -> List[Dict]:
        self.calls.append((relation.value, key))
        if self._fail_related:
            raise ConnectionError("Jira unreachable")
        return [copy.deepcopy(self._issues[k]) for k in self._related.get(f"{key}:{relation.value}", [])]


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_issues(fixtures_dir: Path) -> Dict[str, Dict]:
    """Load sample Jira issues keyed by issue key."""
    with open(fixtures_dir / "issues.json") as f:
        return json.load(f)


@pytest.fixture
def repository(sample_issues) -> FakeRepository:
    """Epic PROJ-1 holds stories PROJ-2 and PROJ-3; story PROJ-2 holds sub-tasks PROJ-4 and PROJ-5."""
    return FakeRepository(
        sample_issues,
        related={
            "PROJ-1:epic-members": ["PROJ-2", "PROJ-3"],
            "PROJ-2:children-of-parent": ["PROJ-4", "PROJ-5"],
        },
    )


@pytest.fixture
def settings() -> CheckerSettings:
    return CheckerSettings()


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def make_repository():
    """Factory for repositories with custom issues or failure modes."""
    return FakeRepository
