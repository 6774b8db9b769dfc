"""FastAPI routes for the doctor portal; every call acts on the signed-in doctor's cases."""

from fastapi import APIRouter, Depends, HTTPException, Request

from controllers.auth_controller import require_doctor
from controllers.case_controller import create_case, delete_case, list_cases, update_case
from controllers.report_controller import get_stats
from models.case_payloads import CaseUpdatePayload, DoctorCasePayload
from models.session_models import AuthSession

router = APIRouter(prefix="/doctor", tags=["doctor-portal"])


@router.get("/cases")
async def my_cases_route(request: Request, session: AuthSession = Depends(require_doctor)):
    try:
        return await list_cases(request, session)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/cases", status_code=201)
async def add_my_case_route(
    request: Request,
    payload: DoctorCasePayload,
    session: AuthSession = Depends(require_doctor),
):
    """Add a case filed under the signed-in doctor, whatever dentist name was sent."""
    try:
        record = payload.to_record()
        record.dentist_name = session.user_name
        return await create_case(request, record)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.put("/cases/{case_id}")
async def update_my_case_route(
    request: Request,
    case_id: str,
    payload: CaseUpdatePayload,
    session: AuthSession = Depends(require_doctor),
):
    try:
        return await update_case(request, session, case_id, payload.to_fields())
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/cases/{case_id}")
async def delete_my_case_route(request: Request, case_id: str, session: AuthSession = Depends(require_doctor)):
    try:
        return await delete_case(request, session, case_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/stats")
async def my_stats_route(request: Request, session: AuthSession = Depends(require_doctor)):
    try:
        return await get_stats(request, session)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
