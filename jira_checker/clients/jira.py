"""Jira REST client wrapper used by fetchers."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections import defaultdict
from enum import Enum
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import HTTPError, RequestException
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from ..config.settings import JiraConfig
from ..utils.errors import FetchError

# Constants
MIN_REQUEST_INTERVAL = float(os.getenv("JIRA_MIN_REQUEST_INTERVAL", "0.2"))  # Seconds between requests
API_TIMEOUT_SECONDS = int(os.getenv("JIRA_API_TIMEOUT_SECONDS", "30"))  # Give up retrying after this many seconds

ISSUE_FIELDS = [
    "issuetype",
    "status",
    "assignee",
    "priority",
    "description",
    "timeoriginalestimate",
    "aggregatetimeoriginalestimate",
    "timespent",
    "fixVersions",
]

logger = logging.getLogger(__name__)


class Relation(str, Enum):
    CHILDREN_OF_PARENT = "children-of-parent"
    EPIC_MEMBERS = "epic-members"

    def jql(self, key: str) -> str:
        if self is Relation.EPIC_MEMBERS:
            return f'parent={key} OR "Epic Link"={key}'
        return f"parent={key}"


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, HTTPError):
        status = exc.response.status_code if exc.response is not None else None
        return status is None or status == 429 or status >= 500
    return isinstance(exc, RequestException)


class JiraClient:
    """Thin wrapper around the Jira REST API with retry/rate limiting support.

    Throttle state is shared by every client in the process, so short-lived
    clients (one per API request) still respect the per-host interval.
    """

    _throttle_lock = threading.Lock()
    _last_request_time: Dict[str, float] = defaultdict(float)

    def __init__(self, config: JiraConfig, session: Optional[requests.Session] = None):
        self._config = config
        self._session = session

    @property
    def search_fields(self) -> List[str]:
        field_map = self._config.fields
        return ISSUE_FIELDS + [field_map.financial_category] + list(field_map.story_points)

    def _base_url(self) -> str:
        base_url = os.getenv(self._config.base_url_env)
        if not base_url:
            raise ValueError(
                f"Environment variable {self._config.base_url_env} not set (required for Jira access)"
            )
        return base_url.rstrip("/")

    def _get_session(self) -> requests.Session:
        """Lazy initialization of the HTTP session."""
        if self._session is None:
            session = requests.Session()
            email = os.getenv(self._config.email_env)
            token = os.getenv(self._config.token_env)
            if email and token:
                session.auth = (email, token)
            else:
                logger.warning(
                    "Jira credentials not set, requests will be anonymous",
                    extra={"email_env": self._config.email_env, "token_env": self._config.token_env},
                )
            session.headers.update({"Accept": "application/json", "User-Agent": "jira-checker"})
            self._session = session
        return self._session

    def _throttle_request(self, host: str) -> None:
        """Throttle requests to respect rate limits."""
        with self._throttle_lock:
            elapsed = time.time() - self._last_request_time[host]
            if elapsed < MIN_REQUEST_INTERVAL:
                time.sleep(MIN_REQUEST_INTERVAL - elapsed)
            self._last_request_time[host] = time.time()

    def close(self) -> None:
        """Close the HTTP session, if one was opened."""
        if self._session is not None:
            self._session.close()
            self._session = None

    @retry(
        retry=retry_if_exception(_is_retryable),
        stop=(stop_after_attempt(3) | stop_after_delay(API_TIMEOUT_SECONDS)),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _get_with_retry(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        base_url = self._base_url()
        self._throttle_request(base_url)
        response = self._get_session().get(
            f"{base_url}{path}",
            params=params,
            timeout=self._config.request_timeout_seconds,
        )
        if response.status_code != 404:
            response.raise_for_status()
        return response

    def get_issue(self, key: str) -> Optional[Dict[str, Any]]:
        """Fetch one issue; returns None when Jira reports it does not exist."""
        try:
            response = self._get_with_retry(f"/rest/api/2/issue/{key}")
            if response.status_code == 404:
                logger.info("Issue not found", extra={"issue_key": key})
                return None
            return response.json()
        except (RequestException, ValueError) as exc:
            raise FetchError("issue", str(exc), issue_key=key) from exc

    def search_related(self, key: str, relation: Relation) -> List[Dict[str, Any]]:
        """Fetch all issues related to ``key``, following search pagination."""
        jql = relation.jql(key)
        issues: List[Dict[str, Any]] = []
        start_at = 0
        page_count = 0

        try:
            while True:
                response = self._get_with_retry(
                    "/rest/api/2/search",
                    params={
                        "jql": jql,
                        "fields": ",".join(self.search_fields),
                        "startAt": start_at,
                        "maxResults": self._config.page_size,
                    },
                )
                if response.status_code == 404:
                    break
                payload = response.json()
                page = payload.get("issues") or []
                issues.extend(page)
                page_count += 1
                start_at += len(page)
                total = payload.get("total", 0)
                if not page or start_at >= total:
                    break
        except (RequestException, ValueError) as exc:
            raise FetchError(relation.value, str(exc), issue_key=key) from exc

        logger.info(
            "Fetched related issues",
            extra={
                "issue_key": key,
                "relation": relation.value,
                "record_count": len(issues),
                "pages": page_count,
            },
        )
        return issues
