"""FastAPI routes for lab case entry and the owner's case table."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from controllers.auth_controller import current_session, require_owner
from controllers.case_controller import (
    create_case,
    delete_case,
    get_case,
    get_photo_thumbnail,
    list_cases,
    update_case,
)
from models.case_payloads import CasePayload, CaseUpdatePayload
from models.session_models import AuthSession

router = APIRouter(prefix="/cases", tags=["cases"])


@router.post("", status_code=201)
async def create_case_route(request: Request, payload: CasePayload):
    """Add a case from the lab desktop form or the mobile entry page."""
    try:
        return await create_case(request, payload.to_record())
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("")
async def list_cases_route(
    request: Request,
    q: Optional[str] = None,
    session: AuthSession = Depends(require_owner),
):
    """List every case, newest first; `q` filters by dentist or patient name."""
    try:
        return await list_cases(request, session, q)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{case_id}")
async def get_case_route(request: Request, case_id: str, session: AuthSession = Depends(current_session)):
    try:
        return await get_case(request, session, case_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.put("/{case_id}")
async def update_case_route(
    request: Request,
    case_id: str,
    payload: CaseUpdatePayload,
    session: AuthSession = Depends(require_owner),
):
    try:
        return await update_case(request, session, case_id, payload.to_fields())
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{case_id}")
async def delete_case_route(request: Request, case_id: str, session: AuthSession = Depends(require_owner)):
    try:
        return await delete_case(request, session, case_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{case_id}/photo/thumbnail")
async def get_case_photo_thumbnail(request: Request, case_id: str, session: AuthSession = Depends(current_session)):
    """Return the PNG thumbnail of the case photo."""
    try:
        return await get_photo_thumbnail(request, session, case_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
