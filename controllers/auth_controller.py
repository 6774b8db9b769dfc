"""Owner and doctor login, plus the session dependencies used by routes."""

from __future__ import annotations

import hmac
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, Request

from dal.doctor_dal import DoctorDAL
from models.session_models import AuthSession, Role
from services.session_store import SessionStore

LOGGER = logging.getLogger(__name__)


def _session_payload(session: AuthSession) -> Dict[str, Any]:
	return {"token": session.token, "role": session.role.value, "name": session.user_name}


async def login_owner(request: Request, password: str) -> Dict[str, Any]:
	"""Open an owner session when `password` matches OWNER_PASSWORD."""
	expected: Optional[str] = request.app.state.owner_password
	if not expected:
		raise HTTPException(status_code=503, detail="Owner access is not configured.")
	if not hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8")):
		LOGGER.warning("Rejected owner login")
		raise HTTPException(status_code=401, detail="Invalid password.")
	store: SessionStore = request.app.state.session_store
	return _session_payload(store.create(Role.OWNER, "owner"))


async def login_doctor(request: Request, name: str, password: str) -> Dict[str, Any]:
	"""Open a doctor session for a registered doctor."""
	doctor_dal = DoctorDAL(request.app.state.db_initializer)
	if not await doctor_dal.verify(name, password):
		LOGGER.warning("Rejected doctor login for %s", name)
		raise HTTPException(status_code=401, detail="Invalid name or password.")
	store: SessionStore = request.app.state.session_store
	return _session_payload(store.create(Role.DOCTOR, name))


async def logout(request: Request, session: AuthSession) -> Dict[str, Any]:
	store: SessionStore = request.app.state.session_store
	try:
		store.close(session.token)
	except KeyError as exc:  # pragma: no cover - translated to HTTP
		raise HTTPException(status_code=401, detail=str(exc)) from exc
	return {"closed": True}


def current_session(
	request: Request,
	x_session_token: Optional[str] = Header(default=None),
) -> AuthSession:
	"""Resolve the `X-Session-Token` header into an open session."""
	if not x_session_token:
		raise HTTPException(status_code=401, detail="Login required.")
	store: SessionStore = request.app.state.session_store
	try:
		return store.get(x_session_token)
	except KeyError as exc:
		raise HTTPException(status_code=401, detail="Session expired or unknown.") from exc


def require_owner(session: AuthSession = Depends(current_session)) -> AuthSession:
	if not session.is_owner:
		raise HTTPException(status_code=403, detail="Owner access required.")
	return session


def require_doctor(session: AuthSession = Depends(current_session)) -> AuthSession:
	if session.role is not Role.DOCTOR:
		raise HTTPException(status_code=403, detail="Doctor access required.")
	return session
