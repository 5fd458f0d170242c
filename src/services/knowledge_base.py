from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from src.schemas.practitioner import WEEKDAYS

BRANCH_DEPARTMENTS: Dict[str, List[str]] = {
    "Rwanda Branch": [
        "Internal Medicine",
        "Obstetrics and Gynecology",
        "Pediatrics",
        "Pulmonology",
        "Gastroenterology",
        "Nephrology",
        "Endocrinology",
        "Neurology",
        "Oncology",
        "Cardiology",
        "Rheumatology",
        "ENT",
        "Hematology",
        "Psychiatry",
        "Dermatology",
        "Dialysis",
        "Endoscopy",
        "Spirometry",
        "Adult ICU",
        "Out Patient Department",
        "Emergency Services",
        "Imaging Services",
        "Laboratory Services",
        "NICU",
        "Advanced Life Support Ambulance Services",
        "Travel Medicine",
    ],
    "Bulbula Branch": [
        "General Surgery",
        "Orthopedic Surgery",
        "Laparoscopic Surgery",
        "Endocrine Surgery",
        "Plastic Surgery",
        "Vascular Surgery",
        "ENT Surgery",
        "Neurosurgery",
        "Hip and Knee Replacement Surgery",
        "Uro-surgery",
        "Hepatobiliary surgery",
        "Colorectal Surgery",
        "Pediatrics Surgery",
        "Internal Medicine",
        "Obstetrics and Gynecology",
        "Pediatrics",
        "Out Patient Department",
        "Emergency Services",
        "Adult ICU",
        "Laboratory Services",
        "Advanced Life Support Ambulance Services",
    ],
}

BRANCH_LOCATIONS: Dict[str, str] = {
    "Rwanda Branch": "in front of Rwanda Embassy",
    "Bulbula Branch": "Bole Bulbula, around Mariam Mazoriya",
}

EMERGENCY_CONTACTS: Tuple[str, ...] = ("6511", "+251-939515151", "+251-939525252")


@dataclass(frozen=True)
class BranchCatalog:
    departments: Mapping[str, Tuple[str, ...]]
    locations: Mapping[str, str]

    def branch_names(self) -> List[str]:
        return list(self.departments.keys())

    def normalize(self, name: str) -> Optional[str]:
        """Return the catalog spelling of ``name`` or ``None`` when unknown."""
        lowered = name.strip().lower()
        for branch in self.locations:
            if branch.lower() == lowered:
                return branch
        return None

    def location_of(self, branch: str) -> str:
        return self.locations[branch]

    def departments_of(self, branch: str) -> List[str]:
        return list(self.departments[branch])


@dataclass(frozen=True)
class KnowledgeBase:
    catalog: BranchCatalog
    emergency_contacts: Tuple[str, ...] = EMERGENCY_CONTACTS
    weekdays: Tuple[str, ...] = field(default=WEEKDAYS)

    def is_weekday(self, token: str) -> bool:
        return token.lower() in self.weekdays


def default_knowledge_base() -> KnowledgeBase:
    catalog = BranchCatalog(
        departments={branch: tuple(items) for branch, items in BRANCH_DEPARTMENTS.items()},
        locations=dict(BRANCH_LOCATIONS),
    )
    return KnowledgeBase(catalog=catalog)
