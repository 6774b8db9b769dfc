"""Tests for JSON, CSV and text-report serialization."""

import json
from datetime import date, datetime

import pytest

from models.case_record import CaseRecord, CaseSource
from services.case_export import (
    CSV_COLUMNS,
    NO_DATA_REPORT,
    REPORT_RULE,
    ImportFormatError,
    SerializationError,
    from_json,
    parse_csv,
    to_csv,
    to_json,
    to_report,
)


def _record(case_id="c1", **overrides):
    values = dict(
        id=case_id,
        patient_name="Lina Haddad",
        dentist_name="Dr. A",
        tooth_numbers=[11, 12],
        prosthesis_types=["Bridge"],
        materials=["Zirconia"],
        shade="A2",
        created_at="2024-04-01T09:30:00+00:00",
        source=CaseSource.DESKTOP,
    )
    values.update(overrides)
    return CaseRecord(**values)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def test_json_round_trip_preserves_every_field():
    cases = [
        _record("c1", notes="rush, please", due_date=date(2024, 5, 1)),
        _record("c2", materials=["Zirconia", "Implant"], source=CaseSource.MOBILE, photo_data_uri="data:image/png;base64,AAAA"),
    ]
    assert from_json(to_json(cases)) == cases


def test_json_is_pretty_printed_array_of_documents():
    text = to_json([_record()])
    assert text.startswith("[\n  {")
    assert json.loads(text)[0]["patientName"] == "Lina Haddad"


def test_from_json_accepts_bytes():
    assert from_json(to_json([_record()]).encode("utf-8"))[0].id == "c1"


@pytest.mark.parametrize(
    "text",
    [
        '{"not": "a list"}',
        "not json at all",
        '[{"id": "x"}]',
        '[{"patientName": "P"}]',
        '[{"id": "  ", "patientName": "P"}]',
        "[1, 2]",
        '[{"id": "a", "patientName": "P"}, {"id": "a", "patientName": "Q"}]',
        '[{"id": "a", "patientName": "P", "source": "Fax"}]',
        '[{"id": "a", "patientName": "P", "dueDate": "next week"}]',
        '[{"id": "a", "patientName": "P", "toothNumbers": [11, 12]}]',
        '[{"id": "a", "patientName": "P", "material": ["Zirconia"]}]',
        '[{"id": "a", "patientName": "P", "prosthesisType": 1}]',
        '[{"id": "a", "patientName": "P", "dentistName": ["Dr. A"]}]',
        '[{"id": "a", "patientName": "P", "shade": 2}]',
        '[{"id": "a", "patientName": "P", "notes": {"text": "x"}}]',
        '[{"id": "a", "patientName": "P", "photoDataUri": false}]',
        '[{"id": "a", "patientName": "P", "source": 3}]',
    ],
)
def test_from_json_rejects_malformed_payloads(text):
    with pytest.raises(ImportFormatError):
        from_json(text)


def test_from_json_reads_datetime_due_date_as_date():
    (record,) = from_json('[{"id": "a", "patientName": "P", "dueDate": "2024-05-01T10:00:00"}]')
    assert record.due_date == date(2024, 5, 1)


def test_from_json_normalises_timestamp_objects():
    (record,) = from_json('[{"id": "a", "patientName": "P", "createdAt": {"seconds": 0, "nanoseconds": 0}}]')
    assert record.created_at == "1970-01-01T00:00:00+00:00"


def test_json_round_trip_keeps_empty_created_at():
    cases = [_record("c1", created_at=""), _record("c2", created_at=None)]
    assert from_json(to_json(cases)) == cases


def test_from_json_empty_array_is_valid():
    assert from_json("[]") == []


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def test_csv_of_empty_collection_is_empty_string():
    assert to_csv([]) == ""


def test_csv_header_and_rows_without_trailing_newline():
    text = to_csv([_record("c1"), _record("c2")])
    lines = text.split("\n")
    assert lines[0] == ",".join(CSV_COLUMNS)
    assert len(lines) == 3
    assert not text.endswith("\n")


def test_csv_quotes_cells_with_commas_and_quotes():
    text = to_csv([_record(materials=["Zirconia", "Implant"], notes='say "hi"')])
    row = text.split("\n")[1]
    assert '"Zirconia, Implant"' in row
    assert '"say ""hi"""' in row
    assert '"11, 12"' in row


def test_csv_quotes_line_breaks_and_reads_back():
    cases = [_record(notes="line one\nline two"), _record("c2", notes=None)]
    rows = parse_csv(to_csv(cases))
    assert [r["id"] for r in rows] == ["c1", "c2"]
    assert rows[0]["notes"] == "line one\nline two"
    assert rows[1]["notes"] == ""
    assert rows[0]["material"] == "Zirconia"


def test_csv_wraps_conversion_failures():
    class BrokenRecord(CaseRecord):
        def to_document(self):
            raise TypeError("cannot render")

    with pytest.raises(SerializationError):
        to_csv([BrokenRecord(id="x", patient_name="P", dentist_name="D")])


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

def test_report_for_empty_collection_is_sentinel():
    assert to_report([]) == NO_DATA_REPORT


def test_report_layout():
    now = datetime(2024, 1, 2, 3, 4, 5)
    cases = [
        _record("c1", dentist_name="Dr. B", prosthesis_types=["Bridge"], materials=["Zirconia", "Implant"]),
        _record("c2", dentist_name="Dr. A", prosthesis_types=["Separate", "Bridge"], materials=["Zirconia"]),
    ]
    expected = (
        "Elegant Smile Dental Lab - Summary Report\n"
        f"Generated on: {now.strftime('%c')}\n"
        f"{REPORT_RULE}\n"
        "\n"
        "Total Cases: 2\n"
        "\n"
        "--- Breakdown by Prosthesis Type ---\n"
        "Bridge: 2\n"
        "Separate: 1\n"
        "\n"
        "--- Breakdown by Material ---\n"
        "Zirconia: 2\n"
        "Implant: 1\n"
        "\n"
        "--- Cases per Dentist ---\n"
        "Dr. B: 1\n"
        "Dr. A: 1\n"
        "\n"
        "\n"
        f"{REPORT_RULE}\n"
        "End of Report\n"
    )
    assert to_report(cases, now=now) == expected


def test_report_uses_lab_name():
    report = to_report([_record()], lab_name="Bright Lab", now=datetime(2024, 1, 1))
    assert report.splitlines()[0] == "Bright Lab - Summary Report"
    assert len(REPORT_RULE) == 50
