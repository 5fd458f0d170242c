from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from src.orchestrator.intents import Entity, EntityKind


@dataclass
class SessionContext:
    """Short-term memory of one conversation."""

    branch: Optional[str] = None
    doctor: Optional[str] = None
    doctors: Optional[List[str]] = None
    specialty: Optional[str] = None
    day: Optional[str] = None

    def set_doctor(self, name: str) -> None:
        self.doctor = name
        self.doctors = None

    def set_doctors(self, names: List[str]) -> None:
        self.doctors = list(names)
        self.doctor = None

    def remember(self, kind: EntityKind, value: str) -> None:
        if kind is EntityKind.DAY:
            self.day = value
        elif kind is EntityKind.BRANCH:
            self.branch = value
        elif kind is EntityKind.DOCTOR:
            self.set_doctor(value)
        elif kind is EntityKind.SPECIALTY:
            self.specialty = value
        else:
            raise ValueError(f"No context field for entity kind: {kind!r}")

    def is_empty(self) -> bool:
        return not any((self.branch, self.doctor, self.doctors, self.specialty, self.day))


@dataclass
class _SessionLock:
    lock: threading.RLock = field(default_factory=threading.RLock)
    users: int = 0


class SessionMemoryStore:
    """In-process map of session id to :class:`SessionContext`.

    The store-wide guard only protects the dictionaries. Work on a session runs
    under that session's own lock, so unrelated sessions never wait on each
    other.
    """

    def __init__(self) -> None:
        self._contexts: Dict[str, SessionContext] = {}
        self._locks: Dict[str, _SessionLock] = {}
        self._guard = threading.Lock()

    def get_or_create(self, session_id: str) -> SessionContext:
        with self._guard:
            context = self._contexts.get(session_id)
            if context is None:
                context = SessionContext()
                self._contexts[session_id] = context
            return context

    def get(self, session_id: str) -> Optional[SessionContext]:
        with self._guard:
            return self._contexts.get(session_id)

    def apply_entities(self, session_id: str, entities: Iterable[Entity]) -> SessionContext:
        context = self.get_or_create(session_id)
        entities = list(entities)
        doctor_names = [entity.source_text for entity in entities if entity.kind is EntityKind.DOCTOR]
        for entity in entities:
            if entity.kind is EntityKind.DOCTOR and len(doctor_names) > 1:
                continue
            context.remember(entity.kind, entity.source_text)
        # Several names in one utterance ("availability of A, B") become the list.
        if len(doctor_names) > 1:
            context.set_doctors(doctor_names)
        return context

    def reset(self, session_id: str) -> None:
        """Forget a session once any in-flight work on it has finished."""
        with self.lock(session_id):
            with self._guard:
                self._contexts.pop(session_id, None)

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = self._locks[session_id] = _SessionLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                # A forgotten session drops its lock once nobody holds or waits on it.
                if entry.users == 0 and session_id not in self._contexts:
                    if self._locks.get(session_id) is entry:
                        del self._locks[session_id]

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)
