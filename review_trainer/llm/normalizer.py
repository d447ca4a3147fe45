"""Turn raw model output into parsed JSON, repairing what can be repaired.

Models wrap JSON in markdown fences, add chatter around it, or run out of
tokens mid-object. Each of those is handled here so the mapper only ever sees
a parsed object.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = "empty response"
NON_JSON_RESPONSE = "non-JSON response"


class NormalizationError(Exception):
    """Raw output could not be turned into JSON.

    ``reason`` is one of the fallback reasons, ``raw`` the untouched model
    output kept for diagnostics.
    """

    def __init__(self, reason: str, raw: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.raw = raw


@dataclass(frozen=True)
class NormalizedResponse:
    json_text: str
    data: Any


def normalize(raw_text: str | None) -> NormalizedResponse:
    if not raw_text or not raw_text.strip():
        raise NormalizationError(EMPTY_RESPONSE, raw_text or "")

    content = clean_model_content(raw_text)
    try:
        return NormalizedResponse(content, json.loads(content))
    except (ValueError, RecursionError) as exc:
        logger.warning("Model returned non-JSON (%s); attempting repair", exc)

    repaired = repair_json(content)
    if repaired is not None:
        try:
            return NormalizedResponse(repaired, json.loads(repaired))
        except (ValueError, RecursionError) as exc:
            logger.warning("Repair attempt failed: %s", exc)

    raise NormalizationError(NON_JSON_RESPONSE, raw_text)


def clean_model_content(content: str) -> str:
    """Strip markdown fencing and isolate the outermost ``{...}`` span."""
    cleaned = content.strip()
    if cleaned.startswith("```"):
        # Opening fence may carry a language tag (```json)
        first_newline = cleaned.find("\n")
        cleaned = cleaned[first_newline + 1:] if first_newline != -1 else cleaned[3:]
        fence = cleaned.rfind("```")
        if fence != -1:
            cleaned = cleaned[:fence]

    cleaned = cleaned.strip()
    return extract_json_object(cleaned) or cleaned


def extract_json_object(content: str) -> str | None:
    first = content.find("{")
    last = content.rfind("}")
    if first == -1 or last <= first:
        return None
    return content[first:last + 1].strip()


def repair_json(content: str) -> str | None:
    """Best-effort fix for truncated output.

    Drops ``...`` ellipsis tokens, then cuts the candidate back at each closing
    brace or bracket until the remaining prefix is balanced. Returns None when
    nothing balanced is left.
    """
    candidate = extract_json_object(content)
    if candidate is None:
        return None

    candidate = candidate.replace("...\n", "").replace("...", "")
    if is_balanced(candidate):
        return candidate

    for end in range(len(candidate) - 1, 0, -1):
        if candidate[end] in "}]":
            prefix = candidate[:end + 1]
            if is_balanced(prefix):
                return prefix
    return None


def is_balanced(text: str) -> bool:
    """Check ``{}`` and ``[]`` nesting outside of string literals."""
    braces = brackets = 0
    in_string = escaped = False
    for char in text:
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == "{":
            braces += 1
        elif char == "}":
            braces -= 1
        elif char == "[":
            brackets += 1
        elif char == "]":
            brackets -= 1
        if braces < 0 or brackets < 0:
            return False
    return braces == 0 and brackets == 0 and not in_string
