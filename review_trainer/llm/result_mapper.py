"""Map parsed model JSON onto ``ReviewResult``.

Model output is trusted for *what* it found but not for its shape: every field
degrades to a default instead of raising. All type leniency goes through
``flexible_string``; the two heuristic flags are resolved by ordered rule
tables where the first rule with an opinion wins.
"""

import json
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from review_trainer.llm.scoring import compute_score
from review_trainer.models.schemas import (
    Issue,
    MatchedUserPoint,
    ReviewResult,
    points_for_severity,
)

SPELLING_TERMS = (
    "spelling",
    "spelling error",
    "misspell",
    "misspelled",
    "typo",
    "typos",
    "misspelling",
)
SPELLING_THRESHOLD = 2

NEGATION_CUES = (
    "lack", "lacks", "missing", "missed", "no", "not",
    "doesn't", "didn't", "without", "low", "poor", "insufficient",
)
POSITIVE_INDICATORS = (
    "clear and actionable", "clear, actionable", "actionable feedback",
    "actionable", "good", "well",
)
ACTIONABLE_PHRASES = (
    "clear and actionable", "clear, actionable", "actionable guidance",
    "actionable suggestions", "actionable items", "actionable feedback",
    "actionable",
)


def flexible_string(value: Any) -> str:
    """Coerce any JSON value to text the way the model most likely meant it."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return json.dumps(value, separators=(",", ":"))


def map_to_result(problem_id: str, json_text: str, parsed: Any) -> ReviewResult:
    data = parsed if isinstance(parsed, dict) else {}

    issues = [_map_issue(item) for item in _as_list(data.get("issuesDetected")) if isinstance(item, dict)]
    matched = [
        _map_matched_point(item)
        for item in _as_list(data.get("matchedUserPoints"))
        if isinstance(item, dict)
    ]
    missed = [flexible_string(item) for item in _as_list(data.get("missedCriticalIssueIds"))]

    summary = data.get("summary")
    summary = summary if isinstance(summary, str) else ""
    recommended_code = data.get("recommendedCode")
    recommended_code = recommended_code if isinstance(recommended_code, str) else ""

    signals = FlagSignals(
        data=data,
        summary=summary,
        raw_json=json_text or "",
        issues=issues,
        matched=matched,
    )
    score = compute_score(issues, matched)

    return ReviewResult(
        problem_id=problem_id,
        issues_detected=issues,
        matched_user_points=matched,
        missed_critical_issue_ids=missed,
        summary=summary,
        raw_model_json=json_text or "",
        recommended_code=recommended_code,
        is_fallback=False,
        error=None,
        spelling_problems_detected=resolve_flag(SPELLING_RULES, signals),
        review_quality_bonus_granted=resolve_flag(BONUS_RULES, signals),
        user_score=score.user_score,
        possible_score=score.possible_score,
        is_shippable_as_is=data.get("isShippableAsIs") is True,
    )


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _map_issue(item: dict) -> Issue:
    severity = flexible_string(item.get("severity"))
    return Issue(
        id=flexible_string(item.get("id")),
        category=flexible_string(item.get("category")),
        title=flexible_string(item.get("title")),
        explanation=flexible_string(item.get("explanation")),
        severity=severity,
        possible_score=max(0, _possible_score(item.get("possibleScore"), severity)),
    )


def _possible_score(value: Any, severity: str) -> int:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return int(round(value))
    return points_for_severity(severity)


def _map_matched_point(item: dict) -> MatchedUserPoint:
    return MatchedUserPoint(
        excerpt=flexible_string(item.get("excerpt")),
        matched_issue_ids=[flexible_string(i) for i in _as_list(item.get("matchedIssueIds"))],
        accuracy=flexible_string(item.get("accuracy")),
    )


# ---------------------------------------------------------------------------
# Flag rule tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlagSignals:
    data: dict
    summary: str
    raw_json: str
    issues: Sequence[Issue]
    matched: Sequence[MatchedUserPoint]

    @property
    def summary_lower(self) -> str:
        return self.summary.lower()


# A rule returns True/False when it decides the flag, None to defer.
FlagRule = Callable[[FlagSignals], bool | None]


def resolve_flag(rules: Sequence[FlagRule], signals: FlagSignals) -> bool:
    for rule in rules:
        decision = rule(signals)
        if decision is not None:
            return decision
    return False


def count_terms(text: str, terms: Sequence[str] = SPELLING_TERMS) -> int:
    lowered = text.lower()
    return sum(lowered.count(term) for term in terms)


def _contains_any(text: str, needles: Sequence[str]) -> bool:
    return any(needle in text for needle in needles)


def explicit_spelling_flag(signals: FlagSignals) -> bool | None:
    value = signals.data.get("spellingProblemsDetected")
    return value if isinstance(value, bool) else None


def spelling_keyword_count(signals: FlagSignals) -> bool | None:
    structured = [signals.summary]
    structured.extend(f"{issue.title} {issue.explanation}" for issue in signals.issues)
    structured.extend(f"{point.excerpt} {point.accuracy}" for point in signals.matched)
    structured_hits = sum(count_terms(text) for text in structured)
    # The raw JSON repeats the structured fields; only hits beyond them count
    # (e.g. from extra keys the model invented).
    total = max(structured_hits, count_terms(signals.raw_json))
    return True if total >= SPELLING_THRESHOLD else None


def explicit_bonus_false(signals: FlagSignals) -> bool | None:
    return False if signals.data.get("reviewQualityBonusGranted") is False else None


def trusted_explicit_bonus(signals: FlagSignals) -> bool | None:
    if signals.data.get("reviewQualityBonusGranted") is not True:
        return None
    summary = signals.summary_lower
    if not _contains_any(summary, NEGATION_CUES) or _contains_any(summary, POSITIVE_INDICATORS):
        return True
    return None


def actionable_summary(signals: FlagSignals) -> bool | None:
    summary = signals.summary_lower
    if _contains_any(summary, ACTIONABLE_PHRASES) and not _contains_any(summary, NEGATION_CUES):
        return True
    return None


def clear_and_actionable_summary(signals: FlagSignals) -> bool | None:
    summary = signals.summary_lower
    if "clear" in summary and "actionable" in summary:
        if not _contains_any(summary, NEGATION_CUES) or "overall" in summary:
            return True
    return None


SPELLING_RULES: tuple[FlagRule, ...] = (
    explicit_spelling_flag,
    spelling_keyword_count,
)

BONUS_RULES: tuple[FlagRule, ...] = (
    explicit_bonus_false,
    trusted_explicit_bonus,
    actionable_summary,
    clear_and_actionable_summary,
)
