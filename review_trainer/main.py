import logging
import random
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from review_trainer.config import get_settings
from review_trainer.llm.client import ChatCompletionClient, Completer, build_completer
from review_trainer.llm.review_grader import evaluate_review
from review_trainer.metrics import metrics
from review_trainer.models.schemas import ReviewRequest, ReviewResult, SubmitReviewBody
from review_trainer.problems.catalog import Difficulty, Language
from review_trainer.problems.repository import ProblemRepository

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

_problem_repository = ProblemRepository()
_rng = random.Random()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        "Review trainer starting (model=%s, llm_configured=%s)",
        settings.llm_model, settings.is_llm_configured,
    )
    yield
    if get_completer.cache_info().currsize:
        completer = get_completer()
        if completer is not None:
            await completer.aclose()
        get_completer.cache_clear()


app = FastAPI(title="Code Review Trainer", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_problem_repository() -> ProblemRepository:
    return _problem_repository


def get_rng() -> random.Random:
    return _rng


@lru_cache
def get_completer() -> ChatCompletionClient | None:
    """One shared client per process; closed on shutdown."""
    return build_completer(get_settings())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/metrics")
async def get_metrics():
    return metrics.to_dict()


@app.get("/tests/")
async def get_test(
    level: Difficulty | None = None,
    language: Language | None = None,
    repository: ProblemRepository = Depends(get_problem_repository),
    rng: random.Random = Depends(get_rng),
):
    if level is None:
        return [difficulty.value for difficulty in Difficulty]

    problem = repository.random_problem(level, language, rng)
    if problem is None:
        raise HTTPException(status_code=404, detail=f"No problems available for level {level.value}")
    return problem.to_dict()


@app.post("/tests/{problem_id}", response_model=ReviewResult)
async def submit_review(
    problem_id: str,
    body: SubmitReviewBody,
    repository: ProblemRepository = Depends(get_problem_repository),
    complete: Completer | None = Depends(get_completer),
):
    problem = repository.get(problem_id)
    if problem is None:
        raise HTTPException(status_code=404, detail=f"Unknown problem {problem_id}")

    request = ReviewRequest(
        problem_id=problem.id,
        code=problem.patch,
        user_review=body.review,
        patch_purpose=problem.purpose,
        user_shippability_claim=body.is_shippable,
    )
    logger.info("Grading review for %s (%d chars)", problem.id, len(body.review))
    result = await evaluate_review(request, complete)
    metrics.record_evaluation(result)
    return result
