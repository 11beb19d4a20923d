"""Summarize violations for logs and API responses."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable

from ..utils.issues import Violation


def summarize(violations: Iterable[Violation]) -> Dict[str, int]:
    """Count violations per rule and per attributed issue.

    Keys are ``rule:<rule>`` and ``issue:<key>``; root violations are counted
    under ``issue:root``.
    """
    counts: Dict[str, int] = defaultdict(int)
    for violation in violations:
        counts[f"rule:{violation.rule.value}"] += 1
        counts[f"issue:{violation.issue_key or 'root'}"] += 1
    return dict(counts)


def rule_breakdown(violations: Iterable[Violation]) -> Dict[str, int]:
    counts: Dict[str, int] = defaultdict(int)
    for violation in violations:
        counts[violation.rule.value] += 1
    return dict(counts)
