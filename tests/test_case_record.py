"""Tests for the case record model and legacy text helpers."""

from datetime import date

import pytest

from models.case_record import (
    CaseRecord,
    CaseSource,
    is_fdi_tooth,
    join_tokens,
    parse_tooth_numbers,
    split_tokens,
)


def test_split_tokens_trims_and_drops_empty():
    assert split_tokens(" Zirconia, ,Implant ,") == ["Zirconia", "Implant"]
    assert split_tokens("") == []
    assert split_tokens(None) == []


def test_parse_tooth_numbers_drops_non_numeric_tokens():
    assert parse_tooth_numbers("11, x, 12,, 4a") == [11, 12]


def test_join_tokens_uses_comma_space():
    assert join_tokens([11, 12]) == "11, 12"
    assert join_tokens([]) == ""


@pytest.mark.parametrize("number,expected", [(11, True), (28, True), (48, True), (19, False), (51, False), (10, False)])
def test_is_fdi_tooth(number, expected):
    assert is_fdi_tooth(number) is expected


def test_document_uses_legacy_keys_and_text_fields():
    record = CaseRecord(
        id="c1",
        patient_name="Lina",
        dentist_name="Dr. A",
        tooth_numbers=[11, 12],
        prosthesis_types=["Bridge"],
        materials=["Zirconia", "Implant"],
        shade="A2",
        source=CaseSource.MOBILE,
        due_date=date(2024, 5, 1),
    )
    doc = record.to_document()
    assert doc["toothNumbers"] == "11, 12"
    assert doc["material"] == "Zirconia, Implant"
    assert doc["source"] == "Mobile"
    assert doc["dueDate"] == "2024-05-01"
    assert doc["notes"] is None


def test_from_document_parses_legacy_text():
    record = CaseRecord.from_document(
        {"id": "1", "patientName": "P", "dentistName": "Dr. A", "toothNumbers": "11, 12", "material": "Zirconia, Implant"}
    )
    assert record.tooth_numbers == [11, 12]
    assert record.materials == ["Zirconia", "Implant"]
    assert record.prosthesis_types == []
    assert record.source is None
    assert record.tooth_count == 2


def test_from_document_rejects_unknown_source():
    with pytest.raises(ValueError):
        CaseRecord.from_document({"id": "1", "patientName": "P", "source": "Fax"})
