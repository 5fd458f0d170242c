from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence, Tuple

from src.services.session_memory import SessionContext

ReferentGetter = Callable[[SessionContext], Optional[str]]


def _alternation(phrases: Sequence[str]) -> re.Pattern:
    joined = "|".join(re.escape(phrase) for phrase in phrases)
    return re.compile(rf"\b({joined})\b", re.IGNORECASE)


def _branch(context: SessionContext) -> Optional[str]:
    return context.branch


def _doctors(context: SessionContext) -> Optional[str]:
    if context.doctors and len(context.doctors) > 1:
        return ", ".join(context.doctors)
    return None


def _doctor(context: SessionContext) -> Optional[str]:
    return context.doctor


def _specialty(context: SessionContext) -> Optional[str]:
    return context.specialty


def _day(context: SessionContext) -> Optional[str]:
    return context.day


# Order matters: each pass sees the output of the previous one.
DEFAULT_RULES: List[Tuple[ReferentGetter, re.Pattern]] = [
    (_branch, _alternation(["it", "that branch", "this branch", "branch"])),
    (_doctors, _alternation(["they", "them", "those doctors", "these doctors", "doctors"])),
    (_doctor, _alternation(["him", "her", "that doctor", "he", "she", "this doctor", "doctor"])),
    (_specialty, _alternation(["that specialty", "this specialty", "specialist", "specialty"])),
    (_day, _alternation(["that day", "this day", "day"])),
]


class PronounResolver:
    """Rewrites references like "it" or "that doctor" using session memory."""

    def __init__(self, rules: Sequence[Tuple[ReferentGetter, re.Pattern]] = DEFAULT_RULES) -> None:
        self._rules = list(rules)

    def resolve(self, text: str, context: SessionContext) -> str:
        output = text
        for referent_of, pattern in self._rules:
            referent = referent_of(context)
            if not referent:
                continue
            output = pattern.sub(lambda _match, value=referent: value, output)
        return output
