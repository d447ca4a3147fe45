import random
from collections.abc import Mapping
from dataclasses import dataclass

from review_trainer.problems.catalog import CATALOG, Difficulty, Language, ProblemDefinition
from review_trainer.problems.patch import patch_hash, split_patch


@dataclass(frozen=True)
class Problem:
    id: str
    language: Language
    difficulty: Difficulty
    purpose: str
    patch: str
    original: str
    updated: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "level": self.difficulty.value,
            "language": self.language.value,
            "purpose": self.purpose,
            "patch": self.patch,
            "original": self.original,
            "problem": self.updated,
            "patchHash": patch_hash(self.patch),
        }


def make_problem_id(language: Language, difficulty: Difficulty, index: int) -> str:
    return f"{language.value}_{difficulty.value.lower()}_{index + 1:03d}"


class ProblemRepository:
    """Read-only lookup over the static problem bank."""

    def __init__(
        self,
        catalog: Mapping[tuple[Language, Difficulty], tuple[ProblemDefinition, ...]] = CATALOG,
    ):
        self._catalog = catalog

    def get(self, problem_id: str | None) -> Problem | None:
        """Resolve ``<lang>_<difficulty>_<NNN>``; None for anything unknown."""
        if not problem_id or not problem_id.strip():
            return None

        parts = problem_id.strip().split("_")
        if len(parts) != 3:
            return None

        language = _parse_language(parts[0])
        difficulty = _parse_difficulty(parts[1])
        if language is None or difficulty is None:
            return None

        if not (parts[2].isascii() and parts[2].isdigit()):
            return None
        index = int(parts[2]) - 1

        problems = self._catalog.get((language, difficulty), ())
        if not 0 <= index < len(problems):
            return None
        return self._build(language, difficulty, index, problems[index])

    def random_problem(
        self,
        difficulty: Difficulty,
        language: Language | None = None,
        rng: random.Random | None = None,
    ) -> Problem | None:
        """Pick a problem of the given difficulty.

        ``rng`` is injected so selection is reproducible in tests. Without a
        language, any language with problems at that difficulty is eligible.
        """
        rng = rng or random.Random()
        if language is None:
            languages = [
                lang for lang in Language if self._catalog.get((lang, difficulty))
            ]
            if not languages:
                return None
            language = rng.choice(languages)

        problems = self._catalog.get((language, difficulty), ())
        if not problems:
            return None
        index = rng.randrange(len(problems))
        return self._build(language, difficulty, index, problems[index])

    def _build(
        self,
        language: Language,
        difficulty: Difficulty,
        index: int,
        definition: ProblemDefinition,
    ) -> Problem:
        original, updated = split_patch(definition.patch)
        return Problem(
            id=make_problem_id(language, difficulty, index),
            language=language,
            difficulty=difficulty,
            purpose=definition.purpose,
            patch=definition.patch,
            original=original,
            updated=updated,
        )


def _parse_language(value: str) -> Language | None:
    try:
        return Language(value.lower())
    except ValueError:
        return None


def _parse_difficulty(value: str) -> Difficulty | None:
    for difficulty in Difficulty:
        if difficulty.value.lower() == value.lower():
            return difficulty
    return None
