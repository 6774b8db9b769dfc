"""Dashboard statistics, exports and JSON import."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import HTTPException, Request
from fastapi.responses import Response

from dal.case_dal import CaseDAL
from models.case_record import CaseRecord
from models.session_models import AuthSession
from services.case_export import (
    ImportFormatError,
    SerializationError,
    from_json,
    to_csv,
    to_json,
    to_report,
)
from services.case_stats import compute_stats

LOGGER = logging.getLogger(__name__)

IMPORT_MODES = ("replace", "merge")


async def _visible_cases(request: Request, session: AuthSession) -> List[CaseRecord]:
    case_dal = CaseDAL(request.app.state.db_initializer)
    if session.is_owner:
        return await case_dal.list_all()
    return await case_dal.list_by_dentist(session.user_name)


def _attachment(content: str, filename: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def get_stats(request: Request, session: AuthSession) -> Dict[str, Any]:
    """Dashboard aggregates over the cases visible to `session`."""
    stats = compute_stats(await _visible_cases(request, session))
    return stats.to_dict()


async def export_json(request: Request, session: AuthSession) -> Response:
    cases = await _visible_cases(request, session)
    return _attachment(to_json(cases), "dental-cases.json", "application/json")


async def export_csv(request: Request, session: AuthSession) -> Response:
    """CSV download; an empty collection yields an empty file."""
    cases = await _visible_cases(request, session)
    try:
        content = to_csv(cases)
    except SerializationError as exc:
        LOGGER.error("CSV export failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"SerializationError: {exc}") from exc
    return _attachment(content, "dental-cases.csv", "text/csv")


async def export_report(request: Request, session: AuthSession) -> Response:
    cases = await _visible_cases(request, session)
    report = to_report(cases, lab_name=request.app.state.lab_name)
    return _attachment(report, "dental-report.txt", "text/plain")


async def import_json(request: Request, raw: bytes, mode: str = "replace") -> Dict[str, Any]:
    """Validate an uploaded JSON export and write it in one transaction.

    Args:
        request: FastAPI Request (used to access app.state.db_initializer).
        raw: Uploaded file bytes.
        mode: "replace" swaps the whole collection; "merge" upserts by id.

    Raises:
        HTTPException(400) if the file is not a valid case export; the stored
        collection is left untouched.
    """
    if mode not in IMPORT_MODES:
        raise HTTPException(status_code=400, detail=f"Unknown import mode {mode!r}")
    try:
        records = from_json(raw)
    except ImportFormatError as exc:
        LOGGER.warning("Rejected import: %s", exc)
        raise HTTPException(status_code=400, detail=f"ImportFormatError: {exc}") from exc

    case_dal = CaseDAL(request.app.state.db_initializer)
    if mode == "replace":
        written = await case_dal.replace_all(records)
    else:
        written = await case_dal.upsert_many(records)
    return {"imported": written, "mode": mode}
