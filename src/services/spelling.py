from __future__ import annotations

from typing import Iterable

from rapidfuzz import process
from rapidfuzz.distance import OSA

DEFAULT_VOCABULARY = (
    "rwanda",
    "bulbula",
    "branch",
    "location",
    "address",
    "doctor",
    "specialty",
    "emergency",
    "contact",
    "services",
    "departments",
    "availability",
    "day",
    "doctors",
    "specialist",
    "appointment",
    "outpatient",
)


class SpellingCorrector:
    """Snaps tokens one edit away from a domain word onto that word."""

    def __init__(self, vocabulary: Iterable[str] = DEFAULT_VOCABULARY, max_distance: int = 1) -> None:
        self._vocabulary = frozenset(word.lower() for word in vocabulary)
        if not self._vocabulary:
            raise ValueError("Vocabulary must contain at least one word")
        self._choices = sorted(self._vocabulary)
        self._max_distance = max_distance

    def correct(self, token: str) -> str:
        lowered = token.lower()
        if lowered in self._vocabulary:
            return lowered
        # OSA counts an adjacent transposition as a single edit.
        matches = process.extract(
            lowered,
            self._choices,
            scorer=OSA.distance,
            score_cutoff=self._max_distance,
            limit=None,
        )
        candidates = sorted(choice for choice, _distance, _index in matches)
        return candidates[0] if candidates else token

    def correct_text(self, text: str) -> str:
        return " ".join(self.correct(token) for token in text.split(" "))
