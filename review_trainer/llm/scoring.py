from collections.abc import Iterable, Sequence
from typing import NamedTuple

from review_trainer.models.schemas import Issue, MatchedUserPoint

# Substrings of a matched point's accuracy that disqualify the award.
# "no" is a plain substring check, so "not quite" also disqualifies.
NEGATIVE_ACCURACY_MARKERS = ("incorrect", "false", "no")


class ScoreBreakdown(NamedTuple):
    user_score: int
    possible_score: int


def compute_score(
    issues: Sequence[Issue],
    matched_points: Iterable[MatchedUserPoint],
) -> ScoreBreakdown:
    """Recompute the review score locally from the model's matches.

    Any score the model reports for itself is ignored. Each issue id is
    consumed by the first matched point that references it, whether or not
    that point earned the award.
    """
    possible_score = max(0, sum(issue.possible_score for issue in issues))

    by_id: dict[str, Issue] = {}
    for issue in issues:
        by_id.setdefault(issue.id.lower(), issue)

    user_score = 0
    consumed: set[str] = set()
    for point in matched_points:
        accuracy = (point.accuracy or "").lower()
        disqualified = any(marker in accuracy for marker in NEGATIVE_ACCURACY_MARKERS)
        for issue_id in point.matched_issue_ids:
            if not issue_id or not issue_id.strip():
                continue
            key = issue_id.lower()
            if key in consumed:
                continue
            issue = by_id.get(key)
            if issue is None:
                continue
            if not disqualified:
                user_score += issue.possible_score
            consumed.add(key)

    # Approving a sample with only trivial flaws is not a penalty
    if all(issue.possible_score <= 1 for issue in issues) and user_score <= 0:
        user_score = 0

    user_score = min(max(user_score, 0), possible_score)
    return ScoreBreakdown(user_score, possible_score)
