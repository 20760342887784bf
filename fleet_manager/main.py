# fleet_manager/main.py
"""
FastAPI application entry point.
Includes request logging, global error handler, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fleet_manager.routers import auth, users, vehicles, movements, reference_lists, reports, health
from fleet_manager.database import create_tables
from fleet_manager.config import settings
from fleet_manager.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Fleet Manager API",
    description="Vehicles, trip movements, maintenance history and Excel reports for a small fleet.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (browser client may be served from another origin) ─────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the client origin in production
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


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,            prefix="/api/v1", tags=["Auth"])
app.include_router(users.router,           prefix="/api/v1", tags=["Users"])
app.include_router(vehicles.router,        prefix="/api/v1", tags=["Vehicles"])
app.include_router(movements.router,       prefix="/api/v1", tags=["Movements"])
app.include_router(reference_lists.router, prefix="/api/v1", tags=["Reference Lists"])
app.include_router(reports.router,         prefix="/api/v1", tags=["Reports"])
app.include_router(health.router,          prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Fleet Manager starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    if settings.JWT_SECRET == "CHANGE_ME":
        logger.warning("⚠️  JWT_SECRET is the default value: set it in .env")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Fleet Manager shutting down...")
