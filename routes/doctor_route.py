"""FastAPI routes for managing doctor logins (owner only)."""

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from controllers.auth_controller import require_owner
from controllers.doctor_controller import add_doctor, delete_doctor, list_doctors

router = APIRouter(prefix="/doctors", tags=["doctors"], dependencies=[Depends(require_owner)])


class AddDoctorPayload(BaseModel):
    name: str = Field(min_length=2)
    password: str = Field(min_length=6)


@router.get("")
async def list_doctors_route(request: Request):
    try:
        return await list_doctors(request)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("", status_code=201)
async def add_doctor_route(request: Request, payload: AddDoctorPayload):
    try:
        return await add_doctor(request, payload.name.strip(), payload.password)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{doctor_id}")
async def delete_doctor_route(request: Request, doctor_id: str):
    try:
        return await delete_doctor(request, doctor_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
