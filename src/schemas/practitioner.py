from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_AVAILABLE_FLAGS = {"1", "true", "yes"}


class DayAvailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    available: bool = False
    start: Optional[str] = None
    end: Optional[str] = None


class PractitionerRecord(BaseModel):
    """One row of the OPD roster, read verbatim from the hospital endpoint."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., validation_alias=AliasChoices("doctorName", "name"))
    department: str = Field(
        default="",
        validation_alias=AliasChoices("doctorDepartment", "department"),
    )
    specialty: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("specialityTitle", "specialty"),
    )
    schedule: Dict[str, DayAvailability] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_schedule(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "schedule" in data:
            return data
        schedule = {}
        for day in WEEKDAYS:
            suffix = day.capitalize()
            flag = data.get(day)
            schedule[day] = {
                "available": str(flag).strip().lower() in _AVAILABLE_FLAGS if flag is not None else False,
                "start": data.get(f"availableStartTime{suffix}"),
                "end": data.get(f"availableEndTime{suffix}"),
            }
        return {**data, "schedule": schedule}

    @field_validator("department", mode="before")
    @classmethod
    def _blank_department(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def stripped_name(self) -> str:
        return self.name.split(" (")[0]

    @property
    def label(self) -> str:
        return f"{self.name} ({self.department})"

    def availability_on(self, day: str) -> DayAvailability:
        return self.schedule.get(day.lower(), DayAvailability())

    def is_available_on(self, day: str) -> bool:
        return self.availability_on(day).available
