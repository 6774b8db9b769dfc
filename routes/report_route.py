"""FastAPI routes for the owner dashboard, exports and JSON import."""

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from controllers.auth_controller import require_owner
from controllers.report_controller import export_csv, export_json, export_report, get_stats, import_json
from models.session_models import AuthSession
from utils.media_validation import read_import_bytes

router = APIRouter(tags=["reports"])


@router.get("/stats")
async def stats_route(request: Request, session: AuthSession = Depends(require_owner)):
    """Dashboard aggregates over all cases."""
    try:
        return await get_stats(request, session)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/export/json")
async def export_json_route(request: Request, session: AuthSession = Depends(require_owner)):
    try:
        return await export_json(request, session)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/export/csv")
async def export_csv_route(request: Request, session: AuthSession = Depends(require_owner)):
    try:
        return await export_csv(request, session)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/export/report")
async def export_report_route(request: Request, session: AuthSession = Depends(require_owner)):
    try:
        return await export_report(request, session)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/import/json")
async def import_json_route(
    request: Request,
    file: UploadFile = File(...),
    mode: str = "replace",
    session: AuthSession = Depends(require_owner),
):
    """Import a JSON export; the collection is unchanged if the file is rejected."""
    try:
        raw = await read_import_bytes(file)
        return await import_json(request, raw, mode)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
