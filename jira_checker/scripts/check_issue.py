"""Validate one Jira issue (and its stories or sub-tasks) from the command line."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from ..analyzers.scorer import summarize
from ..config.config_loader import load_runtime_config
from ..services.checker_runner import CheckerRunner
from ..utils.errors import ConfigError
from ..utils.fields import extract_issue_key

# Load .env file from package directory
package_dir = Path(__file__).resolve().parent.parent
load_dotenv(package_dir / ".env")

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_UNAVAILABLE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("issue", help="Issue key (PROJ-123) or a browse URL containing one.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to checker YAML (default: $JIRA_CHECKER_CONFIG or the bundled checker.yaml).",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    issue_key = extract_issue_key(args.issue)
    if not issue_key:
        print(f"No issue key found in {args.issue!r}", file=sys.stderr)
        return EXIT_UNAVAILABLE

    try:
        runtime_config = load_runtime_config(args.config)
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return EXIT_UNAVAILABLE

    runner = CheckerRunner(runtime_config)
    try:
        report = runner.check(issue_key)
    finally:
        runner.close()
    if report is None:
        print(f"Issue {issue_key} is not available", file=sys.stderr)
        return EXIT_UNAVAILABLE

    if args.json:
        payload = report.to_dict()
        payload["summary"] = summarize(report.violations)
        print(json.dumps(payload, indent=2))
    elif report.has_violations:
        print(f"{issue_key}: {report.count} problem(s)")
        for message in report.messages():
            print(f"  - {message}")
    else:
        print(f"{issue_key}: All Good")

    return EXIT_VIOLATIONS if report.has_violations else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
