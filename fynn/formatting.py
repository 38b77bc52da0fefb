"""
Text helpers for commit headers, prompt summaries, changelog versions
and generated test scenario documents.

Pure string transforms; nothing here writes to a terminal or a file.
"""
import re
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import List, Optional, Sequence

from .data_structures import ChangeRecord, CommitRecord
from .normalization import CommitSuggestion, TestSuite, truncate_text

INITIAL_VERSION = "1.0.0"
_VERSION = re.compile(r"(\d+)\.(\d+)\.(\d+)")

TESTABLE_EXTENSIONS = (".js", ".ts", ".py", ".java", ".cpp", ".c", ".go", ".rs", ".php")
NON_TESTABLE_FRAGMENTS = ("/test/", "/tests/", ".test.", ".spec.", "/node_modules/", "/dist/", "/build/")

SCENARIO_CELL_WIDTH = 30
_RULE = "=" * 50
SCENARIO_TABLE_HEADER = (
    "| Test Scenario                    | Input                           | Expected Output                 |"
)
SCENARIO_TABLE_RULE = "|" + "|".join(["-" * 34] * 3) + "|"


def format_commit_message(suggestion: CommitSuggestion) -> str:
    """Conventional commit header: type(scope)!: description"""
    scope = f"({suggestion.scope})" if suggestion.scope else ""
    breaking = "!" if suggestion.breaking else ""
    return f"{suggestion.type}{scope}{breaking}: {suggestion.description}"


def summarize_changes(changes: Sequence[ChangeRecord]) -> str:
    return "\n".join(
        f"{change.path} (+{change.insertions}/-{change.deletions})"
        for change in changes
    )


def next_version(latest_tag: Optional[str]) -> str:
    """Bump the patch component of the first X.Y.Z found in `latest_tag`."""
    if not latest_tag:
        return INITIAL_VERSION
    match = _VERSION.search(latest_tag)
    if not match:
        return INITIAL_VERSION
    major, minor, patch = match.groups()
    return f"{major}.{minor}.{int(patch) + 1}"


def is_testable_path(path: str) -> bool:
    if not path.endswith(TESTABLE_EXTENSIONS):
        return False
    return not any(fragment in path for fragment in NON_TESTABLE_FRAGMENTS)


def scenario_file_name(source_path: str, commit_hash: str) -> str:
    short_hash = commit_hash[:7]
    if not source_path:
        return f"test_{short_hash}.txt"
    return f"{PurePosixPath(source_path).stem}_test_{short_hash}.txt"


def _table_row(cells: Sequence[str]) -> str:
    return "| " + " | ".join(cell.ljust(SCENARIO_CELL_WIDTH + 2) for cell in cells) + " |"


def utc_timestamp(moment: datetime) -> str:
    """UTC time with millisecond precision and a Z suffix. Naive values are local time."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"


def render_test_scenarios(suite: TestSuite, commit: CommitRecord, generated_at: datetime) -> str:
    """
    Plain-text scenario document for one test suite.

    Layout: header block, a fixed-width scenario table (cells cut to
    30 characters), then the full scenarios as a numbered list, each
    followed by a blank line.
    """
    lines: List[str] = [
        f"TEST SCENARIOS FOR: {suite.file_name or 'Unknown File'}",
        _RULE,
        "",
        f"Commit: {commit.hash}",
        f"Message: {commit.message}",
        f"Generated: {utc_timestamp(generated_at)}",
        f"Function/Feature: {suite.function_name or 'Main functionality'}",
        "",
    ]

    if not suite.test_cases:
        lines.append("No test cases generated.")
        return "\n".join(lines) + "\n"

    lines += [
        "TEST CASES:",
        _RULE,
        "",
        SCENARIO_TABLE_HEADER,
        SCENARIO_TABLE_RULE,
    ]
    for index, case in enumerate(suite.test_cases, 1):
        cells = [
            truncate_text(case.scenario or f"Test {index}", SCENARIO_CELL_WIDTH),
            truncate_text(case.input, SCENARIO_CELL_WIDTH),
            truncate_text(case.expected_output, SCENARIO_CELL_WIDTH),
        ]
        lines.append(_table_row(cells))

    lines += ["", "", "DETAILED TEST DESCRIPTIONS:", _RULE, ""]
    for index, case in enumerate(suite.test_cases, 1):
        lines += [
            f"{index}. {case.scenario or f'Test {index}'}",
            f"   Input: {case.input or 'N/A'}",
            f"   Expected: {case.expected_output or 'N/A'}",
            "",
        ]

    return "\n".join(lines) + "\n"
