import asyncio
import json

import pytest

from review_trainer.llm.fallback import build_fallback
from review_trainer.llm.review_grader import evaluate, evaluate_review
from review_trainer.models.schemas import ReviewRequest

from conftest import StubCompleter, model_payload


def make_request(**overrides) -> ReviewRequest:
    fields = {
        "problem_id": "cs_easy_001",
        "code": "+public int Add(int x, int y)\n+{\n+    return x - y;\n+}",
        "user_review": "Add subtracts instead of adding.",
        "patch_purpose": "Change variable names for clarity",
    }
    fields.update(overrides)
    return ReviewRequest(**fields)


def run(coro):
    return asyncio.run(coro)


def assert_fallback_shape(result):
    assert result.is_fallback is True
    assert result.issues_detected == []
    assert result.matched_user_points == []
    assert result.missed_critical_issue_ids == []
    assert result.user_score == 0
    assert result.possible_score == 0
    assert result.recommended_code == ""
    assert result.spelling_problems_detected is False
    assert result.review_quality_bonus_granted is False
    assert result.is_shippable_as_is is False


def test_end_to_end_single_issue(high_issue_response):
    completer = StubCompleter(high_issue_response)
    result = run(evaluate_review(make_request(), completer))

    assert result.is_fallback is False
    assert result.possible_score == 3
    assert result.user_score == 3
    assert len(completer.prompts) == 1
    assert "Add subtracts instead of adding." in completer.prompts[0]


def test_not_configured_returns_fallback_without_calling():
    result = run(evaluate_review(make_request(), None))

    assert_fallback_shape(result)
    assert result.error == "not configured"
    assert result.summary == "Fallback: not configured"


def test_transport_error_becomes_exception_fallback():
    completer = StubCompleter(error=TimeoutError("request timed out"))
    result = run(evaluate_review(make_request(), completer))

    assert_fallback_shape(result)
    assert result.error == "exception: request timed out"
    assert result.summary == "Fallback: exception request timed out"


@pytest.mark.parametrize("response", ["", "   ", None])
def test_empty_response_fallback(response):
    result = run(evaluate_review(make_request(), StubCompleter(response)))

    assert_fallback_shape(result)
    assert result.error == "empty response"


def test_non_json_fallback_keeps_raw_text():
    raw = "Sorry, I can't help with that."
    result = run(evaluate_review(make_request(), StubCompleter(raw)))

    assert_fallback_shape(result)
    assert result.error == "non-JSON response"
    assert result.raw_model_json == raw


def test_fenced_response_is_graded():
    body = json.dumps(model_payload(isShippableAsIs=True))
    result = run(evaluate_review(make_request(), StubCompleter(f"```json\n{body}\n```")))

    assert result.is_fallback is False
    assert result.is_shippable_as_is is True
    assert result.raw_model_json == body


def test_cancellation_propagates():
    completer = StubCompleter(error=asyncio.CancelledError())
    with pytest.raises(asyncio.CancelledError):
        run(evaluate_review(make_request(), completer))


def test_evaluate_builds_request(high_issue_response):
    completer = StubCompleter(high_issue_response)
    result = run(evaluate(
        "js_easy_001", "+var total = x - y;", "Rename parameters", "wrong operator", True,
        complete=completer,
    ))

    assert result.problem_id == "js_easy_001"
    assert result.user_score == 3
    assert "```javascript" in completer.prompts[0]
    assert "shippable as-is: yes" in completer.prompts[0]


@pytest.mark.parametrize("problem_id", [None, "", "  "])
def test_evaluate_rejects_missing_problem_id(problem_id):
    with pytest.raises(ValueError):
        run(evaluate(problem_id, "code", "purpose", "review", complete=StubCompleter("{}")))


def test_fallback_with_details_and_raw():
    result = build_fallback("ts_medium_002", "exception", "boom", raw_text="partial")

    assert_fallback_shape(result)
    assert result.problem_id == "ts_medium_002"
    assert result.error == "exception: boom"
    assert result.raw_model_json == "partial"


def test_result_serializes_with_wire_names(high_issue_response):
    result = run(evaluate_review(make_request(), StubCompleter(high_issue_response)))
    wire = result.model_dump(by_alias=True)

    assert wire["userScore"] == 3
    assert wire["possibleScore"] == 3
    assert wire["isShippableAsIs"] is False
    assert wire["issuesDetected"][0]["possibleScore"] == 3
    assert wire["matchedUserPoints"][0]["matchedIssueIds"] == ["x"]
    assert "missedCriticalIssueIds" in wire
    assert "rawModelJson" in wire


@pytest.mark.parametrize(
    "raw",
    [
        '{"a":' + "[" * 100000 + "]" * 100000 + "}",
        '{"issuesDetected":[{"id":"1","possibleScore":' + "9" * 5000 + "}]}",
    ],
    ids=["deep-nesting", "huge-integer"],
)
def test_unparseable_json_falls_back(raw):
    result = run(evaluate("cs_easy_001", "+int a;", "purpose", "review", complete=StubCompleter(raw)))

    assert_fallback_shape(result)
    assert result.error == "non-JSON response"
    assert result.raw_model_json == raw
