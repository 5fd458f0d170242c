from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import requests
from pydantic import ValidationError

from src.schemas.practitioner import PractitionerRecord

logger = logging.getLogger(__name__)

DEFAULT_ROSTER_URL = "https://appointment.whethiopia.com/filter/getAppointmentOpdUnitList.php"


class RosterUnavailableError(RuntimeError):
    """Raised when the roster endpoint cannot be read or decoded."""


@dataclass
class RosterClient:
    url: str = DEFAULT_ROSTER_URL
    timeout: float = 10.0

    def fetch(self) -> List[PractitionerRecord]:
        if not self.url:
            raise RosterUnavailableError("Roster URL must be configured")
        try:
            response = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RosterUnavailableError(f"Failed to reach roster endpoint {self.url}") from exc

        if response.status_code != 200:
            raise RosterUnavailableError(
                f"Roster endpoint returned status {response.status_code}: {response.text[:200]}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise RosterUnavailableError("Roster endpoint did not return JSON") from exc
        if not isinstance(payload, list):
            raise RosterUnavailableError(f"Expected a list of practitioners, got {type(payload).__name__}")

        records: List[PractitionerRecord] = []
        for row in payload:
            try:
                records.append(PractitionerRecord.model_validate(row))
            except ValidationError:
                logger.warning("Skipping malformed roster row", extra={"row": row})
        return records
