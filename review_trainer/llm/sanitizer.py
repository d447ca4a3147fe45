"""Neutralize prompt-injection attempts in text that is embedded into prompts.

Both the user's review and the patch under review are attacker-adjacent: a
user can paste instructions into either. The prompt template already tells the
model to treat these fields as data; this module is a second line of defense,
not a guarantee.
"""

import re

REDACTION_MARKER = "[REDACTED_INSTRUCTION]"

JAILBREAK_PHRASES = (
    "ignore previous instructions",
    "disregard previous instructions",
    "you are now",
    "role:",
    "become",
    "follow these instructions",
)

COMMENT_TOKENS = {
    "csharp": "//",
    "javascript": "//",
    "typescript": "//",
}
DEFAULT_COMMENT_TOKEN = "//"

_FENCED_BLOCK = re.compile(r"```.*?```", re.DOTALL)
_ROLE_LINE = re.compile(r"^[ \t]*(?:system|assistant|user)[ \t]*:.*$", re.IGNORECASE | re.MULTILINE)
_ROLE_LABEL = re.compile(r"^(?:system|assistant|user)\s*:", re.IGNORECASE)
_JAILBREAK = re.compile(
    "|".join(re.escape(phrase) for phrase in JAILBREAK_PHRASES), re.IGNORECASE
)
_NEWLINE_RUNS = re.compile(r"\n{2,}")


def sanitize_review(text: str | None) -> str:
    """Clean free-text review before it is placed in a prompt.

    Drops fenced code blocks and role-labelled lines, redacts jailbreak
    phrases and squeezes blank lines. Empty input yields an empty string.
    """
    if not text or not text.strip():
        return ""

    cleaned = text.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _FENCED_BLOCK.sub("", cleaned)
    cleaned = _ROLE_LINE.sub("", cleaned)
    cleaned = _JAILBREAK.sub(REDACTION_MARKER, cleaned)
    cleaned = _NEWLINE_RUNS.sub("\n", cleaned)
    return cleaned.strip()


def sanitize_code(text: str | None, language: str | None = None) -> str:
    """Replace instruction-looking lines in patch text with a redaction comment.

    Works line by line so the rest of the patch keeps its shape.
    """
    if not text:
        return ""

    token = COMMENT_TOKENS.get((language or "").strip().lower(), DEFAULT_COMMENT_TOKEN)
    redacted_line = f"{token} {REDACTION_MARKER}"

    lines = text.split("\n")
    return "\n".join(redacted_line if _is_instruction_line(line) else line for line in lines)


def _is_instruction_line(line: str) -> bool:
    stripped = line.strip()
    if not stripped:
        return False
    return bool(
        _ROLE_LABEL.match(stripped)
        or _JAILBREAK.search(stripped)
        or stripped.lower().startswith("role:")
    )
