"""Request bodies for creating and editing cases.

Clients send the same camelCase keys used by the JSON export. Multi-value
fields may be sent either as lists or in the legacy comma-joined form.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.case_record import (
    CaseRecord,
    CaseSource,
    Material,
    ProsthesisType,
    is_fdi_tooth,
    split_tokens,
)
from utils.media_validation import decode_photo_data_uri

_NOT_NULLABLE = {
    "patient_name",
    "dentist_name",
    "tooth_numbers",
    "prosthesis_types",
    "materials",
    "shade",
    "source",
}


class CaseUpdatePayload(BaseModel):
    """Partial update; only the keys present in the request are changed."""

    model_config = ConfigDict(populate_by_name=True)

    patient_name: Optional[str] = Field(default=None, alias="patientName", min_length=2)
    dentist_name: Optional[str] = Field(default=None, alias="dentistName", min_length=2)
    tooth_numbers: Optional[List[int]] = Field(default=None, alias="toothNumbers", min_length=1)
    prosthesis_types: Optional[List[ProsthesisType]] = Field(default=None, alias="prosthesisType", min_length=1)
    materials: Optional[List[Material]] = Field(default=None, alias="material", min_length=1)
    shade: Optional[str] = Field(default=None, min_length=1)
    notes: Optional[str] = None
    photo_data_uri: Optional[str] = Field(default=None, alias="photoDataUri")
    source: Optional[CaseSource] = None

    @field_validator("patient_name", "dentist_name", "shade", "notes", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("tooth_numbers", "prosthesis_types", "materials", mode="before")
    @classmethod
    def split_legacy_text(cls, value: Any) -> Any:
        return split_tokens(value) if isinstance(value, str) else value

    @field_validator("tooth_numbers")
    @classmethod
    def check_teeth(cls, value: Optional[List[int]]) -> Optional[List[int]]:
        if value is None:
            return value
        invalid = [n for n in value if not is_fdi_tooth(n)]
        if invalid:
            raise ValueError(f"Not FDI tooth numbers: {', '.join(map(str, invalid))}")
        return sorted(set(value))

    @field_validator("photo_data_uri")
    @classmethod
    def check_photo(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        decode_photo_data_uri(value)
        return value

    @model_validator(mode="after")
    def reject_nulls(self):
        nulls = sorted(name for name in self.model_fields_set & _NOT_NULLABLE if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self

    def to_fields(self) -> Dict[str, Any]:
        """Return the provided fields keyed by CaseRecord attribute name."""
        fields: Dict[str, Any] = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if name in ("prosthesis_types", "materials"):
                value = [token.value for token in value]
            fields[name] = value
        return fields


class CasePayload(CaseUpdatePayload):
    """A new case as entered on the lab or mobile entry form."""

    patient_name: str = Field(alias="patientName", min_length=2)
    dentist_name: str = Field(alias="dentistName", min_length=2)
    tooth_numbers: List[int] = Field(alias="toothNumbers", min_length=1)
    prosthesis_types: List[ProsthesisType] = Field(alias="prosthesisType", min_length=1)
    materials: List[Material] = Field(alias="material", min_length=1)
    shade: str = Field(min_length=1)
    source: CaseSource = CaseSource.DESKTOP

    def to_record(self) -> CaseRecord:
        return CaseRecord(
            id="",
            patient_name=self.patient_name,
            dentist_name=self.dentist_name,
            tooth_numbers=list(self.tooth_numbers),
            prosthesis_types=[p.value for p in self.prosthesis_types],
            materials=[m.value for m in self.materials],
            shade=self.shade,
            notes=self.notes or None,
            photo_data_uri=self.photo_data_uri,
            source=self.source,
        )


class DoctorCasePayload(CasePayload):
    """A case entered from the doctor portal; the dentist comes from the session."""

    dentist_name: Optional[str] = Field(default=None, alias="dentistName")
