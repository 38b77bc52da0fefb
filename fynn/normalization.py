"""
Response Normalizer

Validates and defaults a parsed JSON value against one of a closed set
of expected shapes. The caller names the shape; each shape has its own
normalizer and the dispatch table must cover every Shape member.

Pipeline for generated text: extract → parse → normalize.
Every failure along the way is a distinct Outcome, never an exception.
"""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .extraction import extract_json_text
from .policy import DEFAULT_POLICY, Policy

LOGGER = logging.getLogger(__name__)

ELLIPSIS = "..."
SEVERITIES = ("low", "medium", "high")
DEFAULT_SEVERITY = "low"
MIN_DUPLICATE_SIMILARITY = 70


class Shape(Enum):
    COMMIT_SUGGESTION = "commit-suggestion"
    TEST_SUITE        = "test-suite"
    CODE_REVIEW       = "code-review"
    DUPLICATE_REPORT  = "duplicate-report"


@dataclass(frozen=True)
class CommitSuggestion:
    type:        str
    description: str
    scope:       Optional[str] = None
    body:        Optional[str] = None
    breaking:    bool = False


@dataclass(frozen=True)
class TestCase:
    __test__ = False  # not a pytest class

    scenario:        str
    input:           str
    expected_output: str


@dataclass(frozen=True)
class TestSuite:
    __test__ = False

    file_name:     str
    test_cases:    List[TestCase]
    function_name: Optional[str] = None
    description:   Optional[str] = None


@dataclass(frozen=True)
class ReviewIssue:
    severity:    str
    title:       str
    description: str
    file:        str
    line:        Optional[int] = None
    suggestion:  Optional[str] = None


@dataclass(frozen=True)
class ReviewSuggestion:
    title:       str
    description: str
    example:     Optional[str] = None


@dataclass(frozen=True)
class CodeReview:
    overall_score: Optional[float] = None
    issues:        List[ReviewIssue] = field(default_factory=list)
    suggestions:   List[ReviewSuggestion] = field(default_factory=list)


@dataclass(frozen=True)
class DuplicateLocation:
    file:   str
    line:   Optional[int]
    commit: str


@dataclass(frozen=True)
class DuplicateFinding:
    pattern:    str
    similarity: float
    locations:  List[DuplicateLocation]
    suggestion: Optional[str] = None


Normalized = Union[CommitSuggestion, TestSuite, CodeReview, List[DuplicateFinding]]


def truncate_text(text: str, limit: int) -> str:
    """Cut `text` to at most `limit` characters, ending in an ellipsis when cut."""
    if len(text) <= limit:
        return text
    if limit <= len(ELLIPSIS):
        return text[:limit]
    return text[:limit - len(ELLIPSIS)] + ELLIPSIS


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return _text(value)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _line(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _objects(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


# ---------------------------------------------------------------------------
# Per-shape normalizers
# ---------------------------------------------------------------------------

def _normalize_commit_suggestion(value: Any, policy: Policy) -> Optional[CommitSuggestion]:
    if not isinstance(value, dict):
        return None

    commit_type = value.get("type")
    if commit_type not in policy.commit_types:
        commit_type = policy.fallback_commit_type

    description = truncate_text(_text(value.get("description")), policy.description_limit)
    scope = _optional_text(value.get("scope")) or None

    return CommitSuggestion(
        type=commit_type,
        description=description,
        scope=scope,
        body=_optional_text(value.get("body")),
        breaking=value.get("breaking") is True,
    )


def _normalize_test_suite(value: Any, policy: Policy) -> Optional[TestSuite]:
    if not isinstance(value, dict):
        return None

    cases = [
        TestCase(
            scenario=_text(item.get("scenario")),
            input=_text(item.get("input")),
            expected_output=_text(item.get("expectedOutput")),
        )
        for item in _objects(value.get("testCases"))
    ]
    if not cases:
        return None

    return TestSuite(
        file_name=_text(value.get("fileName")),
        test_cases=cases,
        function_name=_optional_text(value.get("functionName")),
        description=_optional_text(value.get("description")),
    )


def _normalize_code_review(value: Any, policy: Policy) -> Optional[CodeReview]:
    if not isinstance(value, dict):
        return None

    issues = []
    for item in _objects(value.get("issues")):
        severity = item.get("severity")
        issues.append(ReviewIssue(
            severity=severity if severity in SEVERITIES else DEFAULT_SEVERITY,
            title=_text(item.get("title")),
            description=_text(item.get("description")),
            file=_text(item.get("file")),
            line=_line(item.get("line")),
            suggestion=_optional_text(item.get("suggestion")),
        ))

    suggestions = [
        ReviewSuggestion(
            title=_text(item.get("title")),
            description=_text(item.get("description")),
            example=_optional_text(item.get("example")),
        )
        for item in _objects(value.get("suggestions"))
    ]

    return CodeReview(
        overall_score=_number(value.get("overallScore")),
        issues=issues,
        suggestions=suggestions,
    )


def _normalize_duplicate_report(value: Any, policy: Policy) -> Optional[List[DuplicateFinding]]:
    if not isinstance(value, list):
        return None

    findings = []
    for item in _objects(value):
        similarity = _number(item.get("similarity"))
        if similarity is None or similarity < MIN_DUPLICATE_SIMILARITY:
            continue
        locations = [
            DuplicateLocation(
                file=_text(loc.get("file")),
                line=_line(loc.get("line")),
                commit=_text(loc.get("commit")),
            )
            for loc in _objects(item.get("locations"))
        ]
        findings.append(DuplicateFinding(
            pattern=_text(item.get("pattern")),
            similarity=similarity,
            locations=locations,
            suggestion=_optional_text(item.get("suggestion")),
        ))
    return findings


_NORMALIZERS: Dict[Shape, Callable[[Any, Policy], Optional[Normalized]]] = {
    Shape.COMMIT_SUGGESTION: _normalize_commit_suggestion,
    Shape.TEST_SUITE:        _normalize_test_suite,
    Shape.CODE_REVIEW:       _normalize_code_review,
    Shape.DUPLICATE_REPORT:  _normalize_duplicate_report,
}


assert set(_NORMALIZERS) == set(Shape)


def normalize(value: Any, shape: Shape, policy: Optional[Policy] = None) -> Optional[Normalized]:
    """
    Normalize a parsed JSON value into the object for `shape`.

    Returns None for an empty result: a value of the wrong JSON type,
    or a test suite without usable test cases.
    """
    return _NORMALIZERS[shape](value, policy or DEFAULT_POLICY)


# ---------------------------------------------------------------------------
# extract → parse → normalize
# ---------------------------------------------------------------------------

class Outcome(Enum):
    OK        = "ok"
    NOT_FOUND = "not_found"   # no balanced JSON value in the text
    MALFORMED = "malformed"   # balanced, but not valid JSON
    EMPTY     = "empty"       # valid JSON, nothing usable for the shape


@dataclass(frozen=True)
class Interpretation:
    outcome: Outcome
    value:   Optional[Normalized] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


def interpret_response(
    raw_text: str,
    shape: Shape,
    *,
    policy: Optional[Policy] = None,
    logger: Optional[logging.Logger] = None,
) -> Interpretation:
    log = logger or LOGGER

    extracted = extract_json_text(raw_text)
    if not extracted.found:
        log.debug("No JSON value found in %s response", shape.value)
        return Interpretation(Outcome.NOT_FOUND)

    try:
        parsed = json.loads(extracted.text)
    except json.JSONDecodeError as e:
        log.debug("Malformed JSON in %s response: %s", shape.value, e)
        return Interpretation(Outcome.MALFORMED)

    value = normalize(parsed, shape, policy)
    if value is None:
        log.debug("Empty %s response", shape.value)
        return Interpretation(Outcome.EMPTY)

    return Interpretation(Outcome.OK, value)
