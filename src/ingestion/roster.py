from __future__ import annotations

import logging
import threading
from typing import List, Optional, Protocol

from src.adapters.roster_client import RosterUnavailableError
from src.schemas.practitioner import PractitionerRecord
from src.services.practitioners import PractitionerCache

logger = logging.getLogger(__name__)


class RosterSource(Protocol):
    def fetch(self) -> List[PractitionerRecord]:
        ...


class RosterRefresher:
    """Keeps the practitioner cache in step with the roster endpoint."""

    def __init__(
        self,
        source: RosterSource,
        cache: PractitionerCache,
        interval_seconds: float = 900.0,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._source = source
        self._cache = cache
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def refresh_once(self) -> bool:
        try:
            records = self._source.fetch()
        except RosterUnavailableError:
            logger.exception("Roster refresh failed; keeping %d cached practitioners", len(self._cache))
            return False
        self._cache.replace(records)
        return True

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="roster-refresher", daemon=True)
        self._thread.start()
        logger.info("Roster refresher started (every %.0f seconds)", self._interval)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.refresh_once()
