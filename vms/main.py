# vms/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, typed error handlers, and all routers.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from vms.routers import visitors, approvals, admin, health
from vms.database import create_tables
from vms.exceptions import register_exception_handlers
from vms.config import settings
from vms.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Visitor Management API",
    description="Visitor registration, check-in and check-out for facility reception.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (reception kiosk + admin dashboard) ─────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error Handlers ───────────────────────────────────────────────────────────
register_exception_handlers(app)


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(visitors.router,  prefix="/api/v1", tags=["Visitors"])
app.include_router(approvals.router, prefix="/api/v1", tags=["Approvals"])
app.include_router(health.router,    prefix="/api/v1", tags=["Health"])

# Paths the reception front-end already calls (/api/visitors, /api/admin/...)
app.include_router(visitors.router, prefix="/api", include_in_schema=False)
app.include_router(admin.router,    prefix="/api", tags=["Admin"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Visitor backend starting up...")
    create_tables()
    logger.info("Database tables ready")
    logger.info(f"Photos stored in {settings.PHOTO_DIR}")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Visitor backend shutting down...")
