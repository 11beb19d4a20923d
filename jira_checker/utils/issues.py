"""Dataclasses describing violations emitted by checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..checks.catalog import RuleKind, render_message


@dataclass(frozen=True)
class Violation:
    rule: RuleKind
    message: str
    issue_key: Optional[str] = None

    @classmethod
    def of(cls, rule: RuleKind, issue_key: Optional[str] = None) -> "Violation":
        return cls(rule=rule, message=rule.message, issue_key=issue_key)

    def keyed(self, issue_key: str) -> "Violation":
        """Return a copy attributed to a related issue."""
        return Violation(rule=self.rule, message=self.message, issue_key=issue_key)

    def render(self) -> str:
        return render_message(self.rule, self.issue_key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule": self.rule.value,
            "message": self.message,
            "issue_key": self.issue_key,
            "rendered": self.render(),
        }


@dataclass
class ViolationReport:
    """Ordered violations for one validation pass: root first, then related issues."""

    issue_key: str
    violations: List[Violation] = field(default_factory=list)

    @property
    def has_violations(self) -> bool:
        return len(self.violations) > 0

    @property
    def count(self) -> int:
        return len(self.violations)

    def extend(self, violations: List[Violation]) -> None:
        self.violations.extend(violations)

    def messages(self) -> List[str]:
        return [violation.render() for violation in self.violations]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issue_key": self.issue_key,
            "has_violations": self.has_violations,
            "count": self.count,
            "violations": [violation.to_dict() for violation in self.violations],
        }
