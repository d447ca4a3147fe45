from __future__ import annotations

import json

import pytest


def model_payload(**overrides) -> dict:
    """A well-formed model response body; override any top-level key."""
    payload = {
        "problemId": "cs_easy_001",
        "issuesDetected": [],
        "matchedUserPoints": [],
        "missedCriticalIssueIds": [],
        "summary": "Summary: ok\n\nHow you can improve: nothing",
        "recommendedCode": "",
        "reviewQualityBonusGranted": False,
        "spellingProblemsDetected": False,
        "isShippableAsIs": False,
    }
    payload.update(overrides)
    return payload


class StubCompleter:
    """Records prompts and returns a canned response (or raises)."""

    def __init__(self, response: str | None = "", error: BaseException | None = None):
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def high_issue_response() -> str:
    return json.dumps(
        model_payload(
            issuesDetected=[
                {"id": "x", "category": "logic", "title": "Subtracts instead of adds",
                 "explanation": "x - y", "severity": "high", "possibleScore": 3},
            ],
            matchedUserPoints=[
                {"excerpt": "should be x + y", "matchedIssueIds": ["x"], "accuracy": "correct"},
            ],
        )
    )
