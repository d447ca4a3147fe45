import hashlib
from dataclasses import dataclass
from typing import Literal

LineKind = Literal["added", "removed", "context"]


@dataclass(frozen=True)
class PatchLine:
    kind: LineKind
    text: str


def parse_patch(patch: str) -> list[PatchLine]:
    """Split a unified-diff style patch into classified lines.

    ``+`` lines are added, ``-`` lines removed, anything else is context
    (a single leading space is dropped from context lines).
    """
    lines: list[PatchLine] = []
    for raw in patch.replace("\r\n", "\n").split("\n"):
        if raw.startswith("+"):
            lines.append(PatchLine("added", raw[1:]))
        elif raw.startswith("-"):
            lines.append(PatchLine("removed", raw[1:]))
        elif raw.startswith(" "):
            lines.append(PatchLine("context", raw[1:]))
        else:
            lines.append(PatchLine("context", raw))
    return lines


def split_patch(patch: str) -> tuple[str, str]:
    """Rebuild the (original, updated) source texts a patch describes.

    The updated text is the patch's final state: what the reviewer is graded on.
    """
    original: list[str] = []
    updated: list[str] = []
    for line in parse_patch(patch):
        if line.kind != "added":
            original.append(line.text)
        if line.kind != "removed":
            updated.append(line.text)
    return "\n".join(original).strip("\n"), "\n".join(updated).strip("\n")


def patch_hash(patch: str) -> str:
    return hashlib.sha256(patch.encode()).hexdigest()
