from review_trainer.models.schemas import ReviewResult

NOT_CONFIGURED = "not configured"
EXCEPTION = "exception"


def build_fallback(
    problem_id: str,
    reason: str,
    details: str | None = None,
    raw_text: str | None = None,
) -> ReviewResult:
    """Zero-score result returned whenever the model could not be used."""
    error = reason if details is None else f"{reason}: {details}"
    return ReviewResult(
        problem_id=problem_id,
        summary=f"Fallback: {reason} {details or ''}".rstrip(),
        raw_model_json=raw_text or "",
        is_fallback=True,
        error=error,
    )
