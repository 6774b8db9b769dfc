from fastapi import HTTPException, Request
from typing import Any, Dict, List

from dal.doctor_dal import DoctorDAL
from services.session_store import SessionStore


async def list_doctors(request: Request) -> List[Dict[str, Any]]:
    doctor_dal = DoctorDAL(request.app.state.db_initializer)
    return [d.to_public() for d in await doctor_dal.list_doctors()]


async def add_doctor(request: Request, name: str, password: str) -> Dict[str, Any]:
    """Create a doctor login; 409 if the name is taken."""
    doctor_dal = DoctorDAL(request.app.state.db_initializer)
    try:
        record = await doctor_dal.add_doctor(name, password)
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return record.to_public()


async def delete_doctor(request: Request, doctor_id: str) -> Dict[str, Any]:
    """Delete a doctor login and log out any of their open sessions.

    The doctor's cases are kept; they stay filed under the dentist name.
    """
    doctor_dal = DoctorDAL(request.app.state.db_initializer)
    doctor = await doctor_dal.get(doctor_id)
    if doctor is None or not await doctor_dal.delete_doctor(doctor_id):
        raise HTTPException(status_code=404, detail=f"Doctor {doctor_id} not found")

    store: SessionStore = request.app.state.session_store
    closed = store.close_user(doctor.name)
    return {"id": doctor_id, "deleted": True, "sessions_closed": closed}
