from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence, Union

from src.orchestrator.intents import Entity, EntityKind, Intent
from src.schemas.practitioner import PractitionerRecord
from src.services.knowledge_base import KnowledgeBase
from src.services.practitioners import (
    PractitionerCache,
    available_on,
    find_by_name,
    match_specialty,
)
from src.services.session_memory import SessionContext

logger = logging.getLogger(__name__)

Answer = Union[str, List[str]]
Handler = Callable[[Sequence[Entity], SessionContext, Sequence[PractitionerRecord]], Answer]

FALLBACK_ANSWER = "Sorry, I didn't understand. Can you rephrase?"

SERVICE_BRANCHES: Dict[Intent, str] = {
    Intent.SERVICES_RWANDA: "Rwanda Branch",
    Intent.SERVICES_BULBULA: "Bulbula Branch",
}


def _entity_text(entities: Sequence[Entity], kind: EntityKind) -> Optional[str]:
    for entity in entities:
        if entity.kind is kind and entity.source_text:
            return entity.source_text
    return None


class IntentDispatcher:
    """Turns a classified intent into an answer, reading and updating memory."""

    def __init__(self, cache: PractitionerCache, knowledge_base: KnowledgeBase) -> None:
        self._cache = cache
        self._knowledge_base = knowledge_base
        self._handlers: Dict[Intent, Handler] = {
            Intent.BRANCH_LOCATION: self._branch_location,
            Intent.LIST_BRANCHES: self._list_branches,
            Intent.SERVICES_RWANDA: partial(self._services, SERVICE_BRANCHES[Intent.SERVICES_RWANDA]),
            Intent.SERVICES_BULBULA: partial(self._services, SERVICE_BRANCHES[Intent.SERVICES_BULBULA]),
            Intent.EMERGENCY_CONTACT: self._emergency_contact,
            Intent.LIST_DOCTORS: self._list_doctors,
            Intent.DOCTOR_AVAILABILITY: self._doctor_availability,
            Intent.DOCTOR_BY_DAY: self._doctor_by_day,
            Intent.DOCTOR_BY_SPECIALTY: self._doctor_by_specialty,
        }

    def dispatch(
        self,
        intent: Optional[Union[Intent, str]],
        entities: Sequence[Entity],
        context: SessionContext,
    ) -> Answer:
        resolved = self._coerce_intent(intent)
        handler = self._handlers.get(resolved)
        if handler is None:
            return FALLBACK_ANSWER
        return handler(entities, context, self._cache.snapshot())

    @staticmethod
    def _coerce_intent(intent: Optional[Union[Intent, str]]) -> Intent:
        if intent is None:
            return Intent.NONE
        if isinstance(intent, Intent):
            return intent
        try:
            return Intent.from_label(intent)
        except ValueError:
            logger.debug("Unknown intent label %r, using fallback", intent)
            return Intent.NONE

    def _branch_location(self, entities, context, records) -> Answer:
        branch = _entity_text(entities, EntityKind.BRANCH) or context.branch
        if not branch:
            return "Please specify a branch name."

        catalog = self._knowledge_base.catalog
        normalized = catalog.normalize(branch)
        if not normalized:
            return f'Sorry, I don\'t have the location for "{branch}".'

        context.branch = normalized
        return f"Our {normalized} is located {catalog.location_of(normalized)}."

    def _list_branches(self, entities, context, records) -> Answer:
        return self._knowledge_base.catalog.branch_names()

    def _services(self, branch: str, entities, context, records) -> Answer:
        return self._knowledge_base.catalog.departments_of(branch)

    def _emergency_contact(self, entities, context, records) -> Answer:
        return f"Call: {', '.join(self._knowledge_base.emergency_contacts)}"

    def _list_doctors(self, entities, context, records) -> Answer:
        return [record.name for record in records]

    def _doctor_availability(self, entities, context, records) -> Answer:
        if context.doctors and len(context.doctors) > 1:
            names = list(context.doctors)
        else:
            single = _entity_text(entities, EntityKind.DOCTOR) or context.doctor
            names = [single] if single else []
        if not names:
            return "Please provide a doctor's name."

        answers: List[str] = []
        for name in names:
            record = find_by_name(records, name)
            if record is None:
                answers.append(f'Doctor "{name}" not found.')
                continue
            answers.append(f"{record.name} is available on:")
            for day in self._knowledge_base.weekdays:
                slot = record.availability_on(day)
                if slot.available:
                    answers.append(f"{day.capitalize()}: {slot.start} - {slot.end}")
            answers.append("")
        return answers

    def _doctor_by_day(self, entities, context, records) -> Answer:
        day = _entity_text(entities, EntityKind.DAY) or context.day
        if not day or not self._knowledge_base.is_weekday(day):
            return "Please specify a valid day."

        day = day.lower()
        doctors = [record.label for record in available_on(records, day)]
        if not doctors:
            return f"No doctors available on {day.capitalize()}."
        return doctors

    def _doctor_by_specialty(self, entities, context, records) -> Answer:
        specialty = _entity_text(entities, EntityKind.SPECIALTY) or context.specialty
        if not specialty:
            return "Please specify a specialty."

        specialty = specialty.lower()
        matches = match_specialty(records, specialty)
        if not matches:
            return f"No doctors found for specialty: {specialty}"

        if len(matches) == 1:
            context.set_doctor(matches[0].stripped_name)
        else:
            context.set_doctors([record.stripped_name for record in matches])
        return [record.label for record in matches]
