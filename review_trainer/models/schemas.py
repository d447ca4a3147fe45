from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Points awarded for an issue when the model gives no explicit possibleScore.
SEVERITY_POINTS: dict[str, int] = {
    "critical": 3,
    "high": 3,
    "medium": 2,
    "low": 1,
    "trivial": 1,
}
DEFAULT_SEVERITY_POINTS = SEVERITY_POINTS["medium"]


def points_for_severity(severity: str | None) -> int:
    if not severity:
        return DEFAULT_SEVERITY_POINTS
    return SEVERITY_POINTS.get(severity.strip().lower(), DEFAULT_SEVERITY_POINTS)


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReviewRequest(CamelModel):
    model_config = ConfigDict(frozen=True)

    problem_id: str
    code: str
    user_review: str
    patch_purpose: str = ""
    user_shippability_claim: bool | None = None


class Issue(CamelModel):
    id: str = ""
    category: str = ""
    title: str = ""
    explanation: str = ""
    severity: str = ""
    possible_score: int = 0


class MatchedUserPoint(CamelModel):
    excerpt: str = ""
    matched_issue_ids: list[str] = Field(default_factory=list)
    accuracy: str = ""


class ReviewResult(CamelModel):
    problem_id: str
    issues_detected: list[Issue] = Field(default_factory=list)
    matched_user_points: list[MatchedUserPoint] = Field(default_factory=list)
    missed_critical_issue_ids: list[str] = Field(default_factory=list)
    summary: str = ""
    raw_model_json: str = ""
    recommended_code: str = ""
    is_fallback: bool = False
    error: str | None = None
    spelling_problems_detected: bool = False
    review_quality_bonus_granted: bool = False
    user_score: int = 0
    possible_score: int = 0
    is_shippable_as_is: bool = False


class SubmitReviewBody(CamelModel):
    """Body of POST /tests/{problem_id} as sent by the practice UI."""

    review: str = Field(..., min_length=1, max_length=10000)
    is_shippable: bool | None = None
