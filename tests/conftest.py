from __future__ import annotations

import pytest

from src.schemas.practitioner import PractitionerRecord

ROSTER_ROWS = [
    {
        "doctorName": "Dr. Abebe Kebede (Senior Consultant)",
        "doctorDepartment": "Internal Medicine",
        "specialityTitle": "Cardiology",
        "monday": "1",
        "availableStartTimeMonday": "08:00 AM",
        "availableEndTimeMonday": "12:00 PM",
        "tuesday": "0",
        "wednesday": "1",
        "availableStartTimeWednesday": "02:00 PM",
        "availableEndTimeWednesday": "05:00 PM",
    },
    {
        "doctorName": "Dr. Selam Tesfaye",
        "doctorDepartment": "Pediatrics",
        "specialityTitle": "Pediatrician",
        "monday": "1",
        "availableStartTimeMonday": "09:00 AM",
        "availableEndTimeMonday": "01:00 PM",
        "friday": "1",
        "availableStartTimeFriday": "09:00 AM",
        "availableEndTimeFriday": "11:00 AM",
    },
    {
        "doctorName": "Dr. Hanna Girma (Resident)",
        "doctorDepartment": "Pediatrics",
        "specialityTitle": "Pediatrician",
        "tuesday": "1",
        "availableStartTimeTuesday": "10:00 AM",
        "availableEndTimeTuesday": "03:00 PM",
    },
    {
        "doctorName": "Dr. Yonas Alemu",
        "doctorDepartment": "General Surgery",
        "specialityTitle": None,
        "saturday": "1",
        "availableStartTimeSaturday": "08:30 AM",
        "availableEndTimeSaturday": "12:30 PM",
    },
]


@pytest.fixture()
def roster_rows():
    return [dict(row) for row in ROSTER_ROWS]


@pytest.fixture()
def records(roster_rows):
    return [PractitionerRecord.model_validate(row) for row in roster_rows]
