from dataclasses import dataclass
from datetime import datetime, timezone

from review_trainer.models.schemas import ReviewResult


@dataclass
class EvaluationMetrics:
    """Tracks aggregate metrics for graded review submissions."""

    total_evaluations: int = 0
    graded: int = 0
    fallbacks: int = 0
    total_user_score: int = 0
    total_possible_score: int = 0
    last_evaluated_at: datetime | None = None

    def record_evaluation(self, result: ReviewResult) -> None:
        self.total_evaluations += 1
        self.last_evaluated_at = datetime.now(timezone.utc)
        if result.is_fallback:
            self.fallbacks += 1
            return
        self.graded += 1
        self.total_user_score += result.user_score
        self.total_possible_score += result.possible_score

    @property
    def fallback_rate(self) -> float:
        if self.total_evaluations == 0:
            return 0.0
        return round(self.fallbacks / self.total_evaluations * 100, 1)

    @property
    def avg_score_pct(self) -> float:
        if self.total_possible_score == 0:
            return 0.0
        return round(self.total_user_score / self.total_possible_score * 100, 1)

    def to_dict(self) -> dict:
        return {
            "total_evaluations": self.total_evaluations,
            "graded": self.graded,
            "fallbacks": self.fallbacks,
            "fallback_rate_pct": self.fallback_rate,
            "avg_score_pct": self.avg_score_pct,
            "last_evaluated_at": (
                self.last_evaluated_at.isoformat() if self.last_evaluated_at else None
            ),
        }


# Global instance, resets on server restart (in-memory only)
metrics = EvaluationMetrics()
