import inspect
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from openai import AsyncOpenAI

from routes.auth_route import router as auth_router
from routes.case_route import router as case_router
from routes.doctor_portal_route import router as doctor_portal_router
from routes.doctor_route import router as doctor_router
from routes.report_route import router as report_router
from routes.suggestion_route import router as suggestion_router
from services.case_export import DEFAULT_LAB_NAME
from services.openai.suggestion_service import DEFAULT_MODEL
from services.session_store import DEFAULT_IDLE_TIMEOUT, SessionStore
from utils.database_init import AsyncDatabaseInitializer

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


def _create_openai_client():
    """Return an AsyncOpenAI client, or None when OPENAI_API_KEY is unset."""
    if not os.getenv("OPENAI_API_KEY"):
        LOGGER.warning("OPENAI_API_KEY is not set; smart suggestions are disabled")
        return None
    try:
        return AsyncOpenAI()
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the SQLite database (at DATABASE_DIR/app.db)
      - the in-memory login session store
      - the optional OpenAI async client and the model it should use
      - owner password and lab name settings
    and attach them to `app.state`.
    """
    db_initializer = AsyncDatabaseInitializer()
    await db_initializer.ensure_database()
    app.state.db_initializer = db_initializer

    app.state.session_store = SessionStore(
        idle_timeout=float(os.getenv("SESSION_IDLE_SECONDS") or DEFAULT_IDLE_TIMEOUT)
    )
    app.state.owner_password = os.getenv("OWNER_PASSWORD") or None
    if app.state.owner_password is None:
        LOGGER.warning("OWNER_PASSWORD is not set; owner login is disabled")
    app.state.lab_name = os.getenv("LAB_NAME") or DEFAULT_LAB_NAME

    app.state.openai_client = _create_openai_client()
    app.state.openai_model = os.getenv("OPENAI_MODEL") or DEFAULT_MODEL

    try:
        yield
    finally:
        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    if inspect.iscoroutinefunction(aclose):
                        await aclose()
                    else:
                        result = aclose()
                        if inspect.isawaitable(result):
                            await result
                except Exception as exc:
                    LOGGER.warning("Error while closing OpenAI client: %s", exc)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(title="Dental Lab Case Hub", lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that verifies DB initializer and OpenAI client presence.
        """
        has_db = hasattr(request.app.state, "db_initializer")
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        return {"ok": True, "db_initialized": has_db, "openai_available": has_openai}

    # Register application routers
    app.include_router(auth_router)
    app.include_router(case_router)
    app.include_router(doctor_portal_router)
    app.include_router(doctor_router)
    app.include_router(report_router)
    app.include_router(suggestion_router)

    return app


app = create_app()
