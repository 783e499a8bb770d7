import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from academy.core.config import settings
from academy.core.errors import FunctionCallError, function_call_error_handler
from academy.db import base  # noqa: F401  (registers every model on Base.metadata)
from academy.db import session as db_session
from academy.db.base_class import Base
from academy.api.v2.api import api_router

# --- Logging ---
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# --- FastAPI application ---
app = FastAPI(
    title="Startup Academy API V2",
    openapi_url="/api/v2/openapi.json"
)


def _sanitize_origin(origin: str | None) -> str | None:
    if not origin:
        return None
    value = origin.strip()
    if not value:
        return None
    if value == "*":
        return value
    if not value.startswith("http"):
        value = f"https://{value}"
    return value.rstrip("/")


def _build_cors_origins() -> list[str]:
    origins = {_sanitize_origin(o) for o in settings.BACKEND_CORS_ORIGINS}

    additional = os.getenv("ADDITIONAL_CORS_ORIGINS")
    if additional:
        for origin in additional.split(","):
            origins.add(_sanitize_origin(origin))

    allow_origins = sorted({origin for origin in origins if origin})
    logger.info("CORS origins: %s", allow_origins)
    return allow_origins


# --- Middlewares ---
cors_origins = _build_cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    # Browsers reject credentialed requests against a wildcard origin.
    allow_credentials="*" not in cors_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Client-Info", "Apikey"],
)

app.add_exception_handler(FunctionCallError, function_call_error_handler)

app.include_router(api_router, prefix="/api/v2")


# --- Startup ---
@app.on_event("startup")
def startup():
    logger.info("Checking database tables...")
    Base.metadata.create_all(bind=db_session.engine)
    logger.info("Database tables are ready (AI provider: %s, enabled=%s).", settings.AI_PROVIDER, settings.ai_enabled)


# --- Root route ---
@app.get("/")
def read_root():
    return {"message": "Welcome to the Startup Academy API V2!"}
