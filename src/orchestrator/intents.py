from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class Intent(str, Enum):
    BRANCH_LOCATION = "branch.location"
    LIST_BRANCHES = "list.branches"
    SERVICES_RWANDA = "services.rwanda"
    SERVICES_BULBULA = "services.bulbula"
    EMERGENCY_CONTACT = "emergency.contact"
    LIST_DOCTORS = "list.doctors"
    DOCTOR_AVAILABILITY = "doctor.availability"
    DOCTOR_BY_DAY = "doctor.by_day"
    DOCTOR_BY_SPECIALTY = "doctor.by_specialty"
    NONE = "None"

    @classmethod
    def from_label(cls, label: str) -> "Intent":
        try:
            return cls(label)
        except ValueError as exc:
            raise ValueError(f"Unsupported intent label: {label}") from exc


class EntityKind(str, Enum):
    DAY = "day"
    BRANCH = "branch"
    DOCTOR = "doctor"
    SPECIALTY = "specialty"

    @classmethod
    def from_label(cls, label: str) -> "EntityKind":
        try:
            return cls(label)
        except ValueError as exc:
            raise ValueError(f"Unsupported entity kind: {label}") from exc


@dataclass(frozen=True)
class Entity:
    kind: EntityKind
    source_text: str


@dataclass
class Classification:
    """What the NLU oracle makes of a single utterance."""

    intent: Intent = Intent.NONE
    entities: List[Entity] = field(default_factory=list)
