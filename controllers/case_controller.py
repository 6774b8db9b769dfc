"""Case entry, listing and editing for the lab, owner and doctor pages."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.responses import Response

from dal.case_dal import CaseDAL
from models.case_record import CaseRecord
from models.session_models import AuthSession
from services.thumbnail_generator import ThumbnailGenerator


def _ensure_access(session: AuthSession, record: CaseRecord) -> None:
    """Owners see every case; doctors only cases filed under their own name."""
    if session.is_owner:
        return
    if record.dentist_name != session.user_name:
        raise HTTPException(status_code=403, detail="This case belongs to another doctor.")


def _matches(record: CaseRecord, query: str) -> bool:
    needle = query.lower()
    return needle in record.dentist_name.lower() or needle in record.patient_name.lower()


async def _load(case_dal: CaseDAL, case_id: str) -> CaseRecord:
    record = await case_dal.get(case_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Case {case_id} not found")
    return record


async def create_case(request: Request, record: CaseRecord) -> Dict[str, Any]:
    """Store a new case and return its document, including the assigned id."""
    case_dal = CaseDAL(request.app.state.db_initializer)
    await case_dal.add(record)
    return record.to_document()


async def list_cases(request: Request, session: AuthSession, query: Optional[str] = None) -> List[Dict[str, Any]]:
    """List the cases visible to `session`, optionally filtered by name."""
    case_dal = CaseDAL(request.app.state.db_initializer)
    if session.is_owner:
        records = await case_dal.list_all()
    else:
        records = await case_dal.list_by_dentist(session.user_name)
    if query and query.strip():
        records = [r for r in records if _matches(r, query.strip())]
    return [r.to_document() for r in records]


async def get_case(request: Request, session: AuthSession, case_id: str) -> Dict[str, Any]:
    case_dal = CaseDAL(request.app.state.db_initializer)
    record = await _load(case_dal, case_id)
    _ensure_access(session, record)
    return record.to_document()


async def update_case(
    request: Request,
    session: AuthSession,
    case_id: str,
    fields: Dict[str, Any],
) -> Dict[str, Any]:
    """Apply a partial update and return the stored case.

    Doctors may edit only their own cases and cannot move a case to another
    dentist.
    """
    case_dal = CaseDAL(request.app.state.db_initializer)
    record = await _load(case_dal, case_id)
    _ensure_access(session, record)
    if not session.is_owner and fields.get("dentist_name", session.user_name) != session.user_name:
        raise HTTPException(status_code=403, detail="Doctors cannot reassign cases.")

    await case_dal.update(case_id, fields)
    return (await _load(case_dal, case_id)).to_document()


async def delete_case(request: Request, session: AuthSession, case_id: str) -> Dict[str, Any]:
    case_dal = CaseDAL(request.app.state.db_initializer)
    record = await _load(case_dal, case_id)
    _ensure_access(session, record)
    await case_dal.remove(case_id)
    return {"id": case_id, "deleted": True}


async def get_photo_thumbnail(request: Request, session: AuthSession, case_id: str) -> Response:
    """Return a PNG thumbnail of the case photo.

    Raises:
        HTTPException(404) if the case or its photo is missing.
    """
    case_dal = CaseDAL(request.app.state.db_initializer)
    record = await _load(case_dal, case_id)
    _ensure_access(session, record)
    if not record.photo_data_uri:
        raise HTTPException(status_code=404, detail="No photo for this case")

    try:
        png = ThumbnailGenerator().create_thumbnail_from_data_uri(record.photo_data_uri)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return Response(content=png, media_type="image/png")
