from review_trainer.llm.prompts import REVIEW_PROMPT
from review_trainer.llm.sanitizer import sanitize_code, sanitize_review
from review_trainer.models.schemas import ReviewRequest

MAX_REVIEW_CHARS = 2500
TRUNCATION_MARKER = "\n/* truncated */"

# problem id prefix -> (label used in prose, fence / comment language tag)
LANGUAGES = {
    "cs": ("C#", "csharp"),
    "js": ("JavaScript", "javascript"),
    "ts": ("TypeScript", "typescript"),
}
DEFAULT_LANGUAGE = LANGUAGES["cs"]


def infer_language(problem_id: str) -> tuple[str, str]:
    """Map the id's leading segment (``cs_easy_001`` -> ``cs``) to a language."""
    prefix = (problem_id or "").split("_", 1)[0].strip().lower()
    return LANGUAGES.get(prefix, DEFAULT_LANGUAGE)


def truncate(text: str, limit: int = MAX_REVIEW_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def describe_claim(claim: bool | None) -> str:
    if claim is None:
        return "not provided"
    return "yes" if claim else "no"


def build_prompt(request: ReviewRequest) -> str:
    """Render the grading prompt for one submission.

    The review is truncated first and then sanitized, the patch is sanitized
    line by line. No side effects.
    """
    label, tag = infer_language(request.problem_id)
    review = sanitize_review(truncate(request.user_review or ""))
    patch = sanitize_code(request.code, tag)

    return REVIEW_PROMPT.format(
        problem_id=request.problem_id,
        language=label,
        fence_tag=tag,
        patch=patch,
        purpose=sanitize_review(request.patch_purpose) or "(not provided)",
        review=review or "(empty review)",
        shippability_claim=describe_claim(request.user_shippability_claim),
    )
