"""
Diff Impact Scorer

Scores one commit's change set for risk and complexity.
Thresholds are fixed; which paths are critical comes from the policy.
"""
from typing import List, Optional, Sequence

from .data_structures import ChangeRecord, ImpactAssessment, RiskLevel
from .policy import DEFAULT_POLICY, Policy

NEW_FILE_MARKER     = "new file mode"
DELETED_FILE_MARKER = "deleted file mode"

CRITICAL_FILE_WEIGHT = 2
LARGE_FILE_WEIGHT    = 1
NEW_FILE_WEIGHT      = 1
DELETED_FILE_WEIGHT  = 2

LARGE_FILE_CHANGES = 100   # per-file lines before a file counts as large
CHANGES_PER_POINT  = 50
FILES_PER_POINT    = 5
MAX_SCORE          = 10

HIGH_RISK_SCORE   = 7
MEDIUM_RISK_SCORE = 4
MEDIUM_RISK_FILES = 5

LARGE_CHANGESET = 200
MANY_FILES      = 10

FALLBACK_DETAILS = "Standard code changes"


def _complexity_factors(change: ChangeRecord, critical: bool) -> int:
    factors = 0
    if critical:
        factors += CRITICAL_FILE_WEIGHT
    if change.total_changes > LARGE_FILE_CHANGES:
        factors += LARGE_FILE_WEIGHT
    if NEW_FILE_MARKER in change.diff_text:
        factors += NEW_FILE_WEIGHT
    if DELETED_FILE_MARKER in change.diff_text:
        factors += DELETED_FILE_WEIGHT
    return factors


def _complexity_score(total_changes: int, files_touched: int, factors: int) -> int:
    # floor(total/50 + files/5) in integer arithmetic, exact for any total
    per_point = CHANGES_PER_POINT // FILES_PER_POINT
    raw = (total_changes + files_touched * per_point) // CHANGES_PER_POINT + factors
    return max(0, min(MAX_SCORE, raw))


def _risk_level(score: int, critical_files: int, files_touched: int) -> RiskLevel:
    if score >= HIGH_RISK_SCORE or critical_files > 0:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_SCORE or files_touched > MEDIUM_RISK_FILES:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _details(total_changes: int, critical_files: int, files_touched: int) -> str:
    parts: List[str] = [f"{total_changes} total line changes"]
    if critical_files > 0:
        parts.append(f"{critical_files} critical files affected")
    if total_changes > LARGE_CHANGESET:
        parts.append("Large changeset")
    if files_touched > MANY_FILES:
        parts.append("Many files touched")
    return ", ".join(parts) or FALLBACK_DETAILS


def assess_impact(
    changes: Sequence[ChangeRecord],
    policy: Optional[Policy] = None,
) -> Optional[ImpactAssessment]:
    """
    Score a commit's change set.

    Returns None when there are no changes: nothing to analyze is not
    the same as a zero-valued assessment. Record order does not matter.
    """
    if not changes:
        return None

    policy = policy or DEFAULT_POLICY

    total_changes = 0
    critical_files = 0
    factors = 0

    for change in changes:
        total_changes += change.total_changes
        critical = policy.is_critical(change.path)
        if critical:
            critical_files += 1
        factors += _complexity_factors(change, critical)

    files_touched = len(changes)
    score = _complexity_score(total_changes, files_touched, factors)

    return ImpactAssessment(
        risk_level=_risk_level(score, critical_files, files_touched),
        files_touched=files_touched,
        complexity_score=score,
        details=_details(total_changes, critical_files, files_touched),
    )
