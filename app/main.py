# app/main.py
from __future__ import annotations

import time
import uuid
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from starlette.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.core.logging import setup_logging
from app.core.settings import settings
from app.crud.product import ProductNotFoundError
from app.database import engine, get_db, init_db_if_requested, SessionLocal
from app.routers.product import router as products_router

# --- Logging ---
setup_logging(settings.LOG_LEVEL.upper())
logger = logging.getLogger("product-api")

# Schema de securitate declarată în OpenAPI; nu e verificată de niciun endpoint
SECURITY_SCHEME_NAME = "bearerAuth"

OPENAPI_URL = None if settings.DISABLE_DOCS else "/openapi.json"
DOCS_URL = None if settings.DISABLE_DOCS else "/docs"
REDOC_URL = None if settings.DISABLE_DOCS else "/redoc"

tags_metadata = [
    {"name": "health", "description": "Liveness/Readiness checks"},
    {"name": "Product Module", "description": "Endpoints for managing products"},
]


def _get_req_id_from_headers(request: Request) -> str:
    # Prefer X-Request-ID, apoi X-Correlation-ID; dacă lipsesc, generează unul.
    return (
        request.headers.get("x-request-id")
        or request.headers.get("x-correlation-id")
        or uuid.uuid4().hex[:12]
    )

# --- Middleware func (registered after app is created) ---
async def request_context_mw(request: Request, call_next):
    """
    - Generează/propagă X-Request-ID
    - Aplică headers de securitate
    - Server-Timing / X-Process-Time
    """
    req_id = _get_req_id_from_headers(request)
    # handler-ele de excepții citesc același id din request.state
    request.state.request_id = req_id

    start = time.perf_counter()
    response: Response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    response.headers.setdefault("X-Request-ID", req_id)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    response.headers.setdefault("Cache-Control", "no-store")
    response.headers.setdefault("X-App-Version", settings.APP_VERSION)
    response.headers.setdefault("Server-Timing", f"app;dur={duration_ms:.1f}")
    response.headers.setdefault("X-Process-Time", f"{duration_ms:.1f}ms")
    return response

def _req_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or _get_req_id_from_headers(request)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: creează tabelele (dacă e cerut) și verifică DB-ul
    try:
        init_db_if_requested()
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        logger.info("DB startup check OK (dialect=%s)", engine.dialect.name)
    except Exception:
        logger.exception("DB startup check FAILED")

    yield

    # StaticPool (SQLite in-memory) ține toată baza în singura conexiune: dispose ar goli-o
    if not isinstance(engine.pool, StaticPool):
        engine.dispose()

# --- App factory (create app BEFORE registering middleware) ---
app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    description=settings.APP_DESCRIPTION,
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    docs_url=DOCS_URL,
    redoc_url=REDOC_URL,
    openapi_url=OPENAPI_URL,
)

app.middleware("http")(request_context_mw)

# CORS din env: CORS_ORIGINS="http://localhost:3000,https://example.com"
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Server-Timing", "X-Process-Time", "X-App-Version"],
    )

# --- OpenAPI customization & caching ---
def _custom_openapi():
    """
    Generează schema OpenAPI on-demand și o cache-uiește.
    Adaugă serverul documentat și schema bearerAuth (JWT) ca cerință globală.
    """
    if getattr(app, "openapi_schema", None):
        return app.openapi_schema
    schema = get_openapi(
        title=settings.APP_TITLE,
        version=settings.APP_VERSION,
        description=settings.APP_DESCRIPTION,
        routes=app.routes,
        tags=tags_metadata,
        servers=[
            {
                "url": settings.OPENAPI_SERVER_URL,
                "description": settings.OPENAPI_SERVER_DESCRIPTION,
            }
        ],
    )
    components = schema.setdefault("components", {})
    components.setdefault("securitySchemes", {})[SECURITY_SCHEME_NAME] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    schema["security"] = [{SECURITY_SCHEME_NAME: []}]
    app.openapi_schema = schema
    return app.openapi_schema

app.openapi = _custom_openapi  # type: ignore[assignment]

# --- Exception handlers ---
@app.exception_handler(ProductNotFoundError)
async def _not_found_handler(request: Request, exc: ProductNotFoundError):
    # 404 fără body, ca în contractul API-ului
    return Response(
        status_code=status.HTTP_404_NOT_FOUND,
        headers={"X-Request-ID": _req_id(request)},
    )

@app.exception_handler(IntegrityError)
async def _integrity_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error: %s", exc.orig)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Integrity error."},
        headers={"X-Request-ID": _req_id(request)},
    )

# Body invalid / id non-numeric → 400 (nu 422)
@app.exception_handler(RequestValidationError)
async def _validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
        headers={"X-Request-ID": _req_id(request)},
    )

# Prinde 404/405 Starlette și răspunde JSON unitar
@app.exception_handler(StarletteHTTPException)
async def _starlette_http_exc_handler(request: Request, exc: StarletteHTTPException):
    headers = dict(exc.headers or {})
    headers.setdefault("X-Request-ID", _req_id(request))
    detail = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = {"message": "Not Found", "path": str(request.url.path)}
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        detail = {"message": "Method Not Allowed", "path": str(request.url.path)}
    return JSONResponse(status_code=exc.status_code, content={"detail": detail}, headers=headers)

@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
        headers={"X-Request-ID": _req_id(request)},
    )

# --- Routes: health ---
@app.get("/", tags=["health"])
def root():
    return {"name": settings.APP_TITLE, "version": settings.APP_VERSION}

@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}

@app.get("/health/db", tags=["health"])
def health_db(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("DB health check failed")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="DB not ready")
    return {"status": "ok", "db": "up", "dialect": engine.dialect.name}

# --- Routers ---
app.include_router(products_router)
