"""FastAPI routes for owner and doctor login."""

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from controllers.auth_controller import current_session, login_doctor, login_owner, logout
from models.session_models import AuthSession

router = APIRouter(prefix="/auth", tags=["auth"])


class OwnerLoginPayload(BaseModel):
	password: str


class DoctorLoginPayload(BaseModel):
	name: str
	password: str


@router.post("/owner")
async def owner_login_route(request: Request, payload: OwnerLoginPayload):
	try:
		return await login_owner(request, payload.password)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/doctor")
async def doctor_login_route(request: Request, payload: DoctorLoginPayload):
	try:
		return await login_doctor(request, payload.name.strip(), payload.password)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/logout")
async def logout_route(request: Request, session: AuthSession = Depends(current_session)):
	try:
		return await logout(request, session)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
