"""Issue repository used by the validation core."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

from ..clients.jira import JiraClient, Relation
from ..utils.errors import FetchError

logger = logging.getLogger(__name__)

RelatedIssue = Dict[str, Any]


class IssueRepository(Protocol):
    """Source of issue records. Implementations must not raise."""

    def fetch_issue(self, key: str) -> Optional[Dict[str, Any]]:
        ...

    def fetch_related(self, key: str, relation: Relation) -> List[RelatedIssue]:
        ...


class IssueFetcher:
    """Repository over a JiraClient that turns fetch failures into empty results."""

    def __init__(self, client: JiraClient):
        self._client = client

    def fetch_issue(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            return self._client.get_issue(key)
        except FetchError as exc:
            logger.warning(
                "Issue unavailable",
                extra={"issue_key": key, "error": str(exc)},
            )
            return None

    def fetch_related(self, key: str, relation: Relation) -> List[RelatedIssue]:
        try:
            issues = self._client.search_related(key, relation)
        except FetchError as exc:
            logger.warning(
                "Related issues unavailable",
                extra={"issue_key": key, "relation": relation.value, "error": str(exc)},
            )
            return []
        return [
            {"key": issue.get("key"), "fields": issue.get("fields") or {}}
            for issue in issues
            if isinstance(issue, dict)
        ]

    def close(self) -> None:
        self._client.close()
