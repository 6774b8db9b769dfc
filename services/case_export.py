"""JSON, CSV and text-report serialization of case collections.

Every function here is a pure string transform; writing files or sending
downloads is left to the caller. `from_json` is the only reverse path and
validates the whole payload before returning anything.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from models.case_record import DOCUMENT_FIELDS, CaseRecord
from services.case_stats import count_by_dentist, count_tokens

CSV_COLUMNS = DOCUMENT_FIELDS
DEFAULT_LAB_NAME = "Elegant Smile Dental Lab"
NO_DATA_REPORT = "No data available to generate a report."
REPORT_RULE = "=" * 50

# Document keys that must hold text (or null) in an imported case.
TEXT_FIELDS = (
    "dentistName",
    "toothNumbers",
    "prosthesisType",
    "material",
    "shade",
    "notes",
    "photoDataUri",
    "source",
)


class ImportFormatError(ValueError):
    """Raised when an imported JSON payload does not have the case-list shape."""


class SerializationError(RuntimeError):
    """Raised when a collection cannot be rendered as CSV."""


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def to_json(cases: Sequence[CaseRecord]) -> str:
    """Serialize the full collection as a JSON array of case documents."""
    return json.dumps([case.to_document() for case in cases], indent=2, ensure_ascii=False)


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _parse_due_date(value: Any, index: int) -> Optional[date]:
    """Read the legacy `dueDate` value as a calendar date."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ImportFormatError(f"Case at index {index} has a non-text dueDate.")
    try:
        return datetime.fromisoformat(value).date()
    except ValueError as exc:
        raise ImportFormatError(f"Case at index {index} has an invalid dueDate: {value!r}") from exc


def _parse_created_at(value: Any, index: int) -> Optional[str]:
    """Normalise `createdAt` to an ISO-8601 string.

    Older exports carry the hosted database's timestamp object
    (`{"seconds": ..., "nanoseconds": ...}`) instead of a string.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("seconds"), (int, float)):
        seconds = value["seconds"] + (value.get("nanoseconds") or 0) / 1_000_000_000
        return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()
    raise ImportFormatError(f"Case at index {index} has an unreadable createdAt.")


def from_json(text: str | bytes) -> List[CaseRecord]:
    """Parse a JSON export back into case records.

    Args:
        text: JSON text holding an array of case documents.

    Returns:
        The parsed records, in file order.

    Raises:
        ImportFormatError: If the text is not JSON, is not a list, or any
            element is not an object with a non-empty `id` and `patientName`
            (also for duplicate ids, non-text field values and unknown
            `source` values).
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ImportFormatError(f"Import is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ImportFormatError("Import must be a JSON array of cases.")

    records: List[CaseRecord] = []
    seen_ids = set()
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ImportFormatError(f"Case at index {index} is not an object.")
        if not _is_filled(item.get("id")) or not _is_filled(item.get("patientName")):
            raise ImportFormatError(f"Case at index {index} is missing an id or patientName.")
        if item["id"] in seen_ids:
            raise ImportFormatError(f"Duplicate case id {item['id']!r} at index {index}.")
        seen_ids.add(item["id"])
        wrong_type = [key for key in TEXT_FIELDS if item.get(key) is not None and not isinstance(item[key], str)]
        if wrong_type:
            raise ImportFormatError(f"Case at index {index} has non-text values for: {', '.join(wrong_type)}.")

        doc = dict(item)
        doc["dueDate"] = _parse_due_date(item.get("dueDate"), index)
        doc["createdAt"] = _parse_created_at(item.get("createdAt"), index)
        try:
            records.append(CaseRecord.from_document(doc))
        except ValueError as exc:
            raise ImportFormatError(f"Case at index {index} is invalid: {exc}") from exc
    return records


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _escape_cell(cell: str) -> str:
    """Quote a cell holding a comma, quote or line break; double inner quotes."""
    if any(ch in cell for ch in (",", '"', "\n", "\r")):
        return '"' + cell.replace('"', '""') + '"'
    return cell


def to_csv(cases: Sequence[CaseRecord]) -> str:
    """Render the collection as CSV with a fixed column order.

    Returns an empty string for an empty collection. The result has no
    trailing newline.

    Raises:
        SerializationError: If a record cannot be stringified.
    """
    if not cases:
        return ""
    try:
        header = ",".join(CSV_COLUMNS)
        rows = []
        for case in cases:
            doc = case.to_document()
            rows.append(",".join(_escape_cell(_cell_text(doc.get(column))) for column in CSV_COLUMNS))
        return header + "\n" + "\n".join(rows)
    except Exception as exc:
        raise SerializationError(f"Failed to export cases as CSV: {exc}") from exc


def parse_csv(text: str) -> List[Dict[str, str]]:
    """Read a CSV export back into rows of string cells keyed by column."""
    if not text:
        return []
    reader = csv.DictReader(io.StringIO(text, newline=""))
    return [dict(row) for row in reader]


# ---------------------------------------------------------------------------
# Text report
# ---------------------------------------------------------------------------

def _breakdown(title: str, counts: Dict[str, int]) -> List[str]:
    lines = [f"--- {title} ---"]
    lines.extend(f"{name}: {count}" for name, count in counts.items())
    lines.append("")
    return lines


def to_report(
    cases: Sequence[CaseRecord],
    *,
    lab_name: str = DEFAULT_LAB_NAME,
    now: Optional[datetime] = None,
) -> str:
    """Build the plain-text summary report.

    Args:
        cases: Records to summarise.
        lab_name: Title prefix for the report.
        now: Generation time; defaults to the local wall clock.

    Returns:
        The report text, or `NO_DATA_REPORT` when `cases` is empty.
    """
    if not cases:
        return NO_DATA_REPORT

    generated = now or datetime.now()
    lines = [
        f"{lab_name} - Summary Report",
        f"Generated on: {generated.strftime('%c')}",
        REPORT_RULE,
        "",
        f"Total Cases: {len(cases)}",
        "",
    ]
    lines += _breakdown("Breakdown by Prosthesis Type", count_tokens(c.prosthesis_types for c in cases))
    lines += _breakdown("Breakdown by Material", count_tokens(c.materials for c in cases))
    lines += _breakdown("Cases per Dentist", count_by_dentist(cases))
    lines += ["", REPORT_RULE, "End of Report", ""]
    return "\n".join(lines)
