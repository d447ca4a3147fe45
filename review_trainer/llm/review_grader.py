import logging

from review_trainer.llm.client import Completer
from review_trainer.llm.fallback import EXCEPTION, NOT_CONFIGURED, build_fallback
from review_trainer.llm.normalizer import NormalizationError, normalize
from review_trainer.llm.prompt_builder import build_prompt
from review_trainer.llm.result_mapper import map_to_result
from review_trainer.models.schemas import ReviewRequest, ReviewResult

logger = logging.getLogger(__name__)


async def evaluate_review(request: ReviewRequest, complete: Completer | None) -> ReviewResult:
    """Grade one submitted review via the language model.

    Always returns a well-formed ReviewResult; every failure short of
    cancellation becomes a fallback result. ``complete=None`` means the model
    is not configured.
    """
    problem_id = request.problem_id
    if complete is None:
        logger.warning("No completer configured; returning fallback for %s", problem_id)
        return build_fallback(problem_id, NOT_CONFIGURED)

    prompt = build_prompt(request)

    # asyncio.CancelledError is not an Exception subclass and propagates.
    try:
        raw = await complete(prompt)
    except Exception as exc:
        logger.error("Review model call failed for %s: %s", problem_id, exc)
        return build_fallback(problem_id, EXCEPTION, str(exc))

    logger.info("Reviewer raw LLM response: %s", raw[:500] if raw else "(empty)")

    try:
        normalized = normalize(raw)
    except NormalizationError as exc:
        logger.warning("Falling back for %s: %s", problem_id, exc.reason)
        return build_fallback(problem_id, exc.reason, raw_text=exc.raw)

    result = map_to_result(problem_id, normalized.json_text, normalized.data)
    logger.info(
        "Graded %s: %d/%d across %d issue(s)",
        problem_id, result.user_score, result.possible_score, len(result.issues_detected),
    )
    return result


async def evaluate(
    problem_id: str,
    patch_text: str,
    purpose_text: str,
    user_review: str,
    user_shippability_claim: bool | None = None,
    *,
    complete: Completer | None,
) -> ReviewResult:
    if problem_id is None or not str(problem_id).strip():
        raise ValueError("problem_id is required")

    request = ReviewRequest(
        problem_id=problem_id,
        code=patch_text or "",
        user_review=user_review or "",
        patch_purpose=purpose_text or "",
        user_shippability_claim=user_shippability_claim,
    )
    return await evaluate_review(request, complete)
