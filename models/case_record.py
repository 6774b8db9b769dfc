"""Dental lab case record and its enumerated vocabularies.

Multi-value fields are held as ordered lists in memory. The legacy
comma-joined text form ("Zirconia, Implant") only appears at the storage
and file-format boundary, through `split_tokens` / `join_tokens`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

SCHEMA_VERSION = 1
TOKEN_SEPARATOR = ", "


class Material(str, Enum):
    ZOLID = "Zolid"
    ZIRCONIA = "Zirconia"
    NICKEL_FREE = "Nickel Free"
    N_GUARD = "N-Guard"
    IMPLANT = "Implant"
    MOOKUP = "MookUp"


class ProsthesisType(str, Enum):
    SEPARATE = "Separate"
    BRIDGE = "Bridge"


class CaseSource(str, Enum):
    MOBILE = "Mobile"
    DESKTOP = "Desktop"


# Document keys in export column order.
DOCUMENT_FIELDS = (
    "id",
    "patientName",
    "dentistName",
    "toothNumbers",
    "prosthesisType",
    "material",
    "shade",
    "notes",
    "photoDataUri",
    "createdAt",
    "source",
    "dueDate",
)


def split_tokens(text: Optional[str]) -> List[str]:
    """Split a comma-joined field into trimmed, non-empty tokens."""
    if not text:
        return []
    return [token.strip() for token in text.split(",") if token.strip()]


def join_tokens(tokens: Iterable[Any]) -> str:
    """Join tokens back into the legacy comma-joined text form."""
    return TOKEN_SEPARATOR.join(str(token) for token in tokens)


def parse_tooth_numbers(text: Optional[str]) -> List[int]:
    """Parse tooth codes from text; tokens that are not integers are dropped."""
    numbers: List[int] = []
    for token in split_tokens(text):
        try:
            numbers.append(int(token))
        except ValueError:
            continue
    return numbers


def is_fdi_tooth(number: int) -> bool:
    """Return True for a permanent-dentition FDI code (11-18, 21-28, 31-38, 41-48)."""
    quadrant, tooth = divmod(number, 10)
    return 1 <= quadrant <= 4 and 1 <= tooth <= 8


@dataclass
class CaseRecord:
    """One dental lab work order.

    Attributes:
        id: Opaque unique identifier ("" until the store assigns one).
        patient_name: Patient the prosthesis is made for.
        dentist_name: Ordering dentist; matched by exact string, no doctor table join.
        tooth_numbers: FDI tooth codes, in the order they were entered.
        prosthesis_types: Prosthesis type tokens (see `ProsthesisType`).
        materials: Material tokens (see `Material`).
        shade: Free-text colour code.
        notes: Optional free text.
        photo_data_uri: Optional embedded photo as a data URI.
        created_at: ISO-8601 UTC timestamp assigned by the store.
        source: Entry channel.
        due_date: Legacy due date carried by older exports.
    """

    id: str
    patient_name: str
    dentist_name: str
    tooth_numbers: List[int] = field(default_factory=list)
    prosthesis_types: List[str] = field(default_factory=list)
    materials: List[str] = field(default_factory=list)
    shade: str = ""
    notes: Optional[str] = None
    photo_data_uri: Optional[str] = None
    created_at: Optional[str] = None
    source: Optional[CaseSource] = None
    due_date: Optional[date] = None

    @property
    def tooth_count(self) -> int:
        return len(self.tooth_numbers)

    def to_document(self) -> Dict[str, Any]:
        """Return the camelCase document used by the API and JSON export."""
        return {
            "id": self.id,
            "patientName": self.patient_name,
            "dentistName": self.dentist_name,
            "toothNumbers": join_tokens(self.tooth_numbers),
            "prosthesisType": join_tokens(self.prosthesis_types),
            "material": join_tokens(self.materials),
            "shade": self.shade,
            "notes": self.notes,
            "photoDataUri": self.photo_data_uri,
            "createdAt": self.created_at,
            "source": self.source.value if self.source else None,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "CaseRecord":
        """Build a record from a camelCase document.

        `dueDate` is expected to already be a `date` (or None); callers parsing
        raw JSON convert it first.

        Raises:
            ValueError: If `source` is not a known entry channel.
        """
        source = doc.get("source")
        return cls(
            id=str(doc.get("id") or ""),
            patient_name=doc.get("patientName") or "",
            dentist_name=doc.get("dentistName") or "",
            tooth_numbers=parse_tooth_numbers(doc.get("toothNumbers")),
            prosthesis_types=split_tokens(doc.get("prosthesisType")),
            materials=split_tokens(doc.get("material")),
            shade=doc.get("shade") or "",
            notes=doc.get("notes"),
            photo_data_uri=doc.get("photoDataUri"),
            created_at=doc.get("createdAt"),
            source=CaseSource(source) if source else None,
            due_date=doc.get("dueDate"),
        )
