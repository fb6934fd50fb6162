from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import time
import logging

from .api.v1.admin import router as admin_router
from .api.v1.doctors import router as doctors_router
from .api.v1.patients import router as patients_router
from .core.config import settings
from .core.database import SessionLocal, init_db
from .scheduling.errors import SchedulingError
from .scheduling.slots import SLOT_MINUTES

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Appointment slot scheduling and booking for a clinic",
    openapi_url="/api/v1/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)

# TestClient requests would be rejected by host checking
if not settings.TESTING:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=["localhost", "127.0.0.1", "*.localhost"]
    )

@app.middleware("http")
async def log_request_timing(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    response.headers["X-Process-Time"] = f"{elapsed:.4f}"

    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"in {elapsed * 1000:.1f}ms"
    )
    return response

@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    """Render scheduling rejections as ``{"error", "message"}``."""
    logger.debug(f"{request.method} {request.url.path} rejected: {exc.error}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message}
    )

@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=404,
        content={
            "error": "NotFound",
            "message": "The requested resource was not found",
            "path": request.url.path
        }
    )

@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred"
        }
    )

app.include_router(patients_router, prefix="/api/v1")
app.include_router(doctors_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")

@app.on_event("startup")
async def startup_event():
    db_url = settings.get_database_url
    backend = db_url.split(":", 1)[0]
    logger.info(f"Starting {settings.APP_NAME} {settings.VERSION} on {backend}")

    try:
        init_db()
    except SQLAlchemyError as e:
        logger.error(f"Database initialisation failed: {e}")
        raise

    logger.info(
        f"Clinic hours {settings.CLINIC_START_TIME}-{settings.CLINIC_END_TIME}, "
        f"lunch {settings.CLINIC_LUNCH_START}-{settings.CLINIC_LUNCH_END}"
    )

@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}")

@app.get("/health")
async def health_check():
    """Liveness plus a database round trip."""
    database = "ok"
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Health check could not reach the database: {e}")
        database = "unavailable"
    finally:
        db.close()

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
        "timestamp": time.time(),
        "version": settings.VERSION
    }

@app.get("/api/v1/info")
async def api_info():
    """Service metadata and the clinic's default booking window."""
    return {
        "name": settings.APP_NAME,
        "version": settings.VERSION,
        "clinic_hours": {
            "start_time": settings.CLINIC_START_TIME,
            "end_time": settings.CLINIC_END_TIME,
            "lunch_start": settings.CLINIC_LUNCH_START,
            "lunch_end": settings.CLINIC_LUNCH_END,
        },
        "slot_minutes": SLOT_MINUTES,
        "docs": "/docs"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clinic_scheduler.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
