from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from src.schemas.practitioner import PractitionerRecord

logger = logging.getLogger(__name__)

Roster = Tuple[PractitionerRecord, ...]
RosterListener = Callable[[Roster], None]


class PractitionerCache:
    """Read-only roster snapshot shared by every session.

    ``replace`` swaps the whole tuple in one assignment, so a reader holding a
    snapshot never sees a half-updated roster.
    """

    def __init__(self, records: Iterable[PractitionerRecord] = ()) -> None:
        self._records: Roster = tuple(records)
        self._refreshed_at: Optional[datetime] = None
        self._listeners: List[RosterListener] = []
        self._lock = threading.Lock()

    def snapshot(self) -> Roster:
        return self._records

    def replace(self, records: Iterable[PractitionerRecord]) -> Roster:
        roster = tuple(records)
        with self._lock:
            self._records = roster
            self._refreshed_at = datetime.now(UTC)
            listeners = list(self._listeners)
        logger.info("Practitioner cache replaced with %d records", len(roster))
        for listener in listeners:
            listener(roster)
        return roster

    def add_listener(self, listener: RosterListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    @property
    def refreshed_at(self) -> Optional[datetime]:
        return self._refreshed_at

    def __len__(self) -> int:
        return len(self._records)


def find_by_name(records: Sequence[PractitionerRecord], name: str) -> Optional[PractitionerRecord]:
    needle = name.lower()
    for record in records:
        if needle in record.name.lower():
            return record
    return None


def available_on(records: Sequence[PractitionerRecord], day: str) -> List[PractitionerRecord]:
    return [record for record in records if record.is_available_on(day)]


def match_specialty(records: Sequence[PractitionerRecord], specialty: str) -> List[PractitionerRecord]:
    needle = specialty.lower()
    matches = []
    for record in records:
        title = (record.specialty or "").lower()
        department = (record.department or "").lower()
        if needle in title or needle in department:
            matches.append(record)
    return matches
