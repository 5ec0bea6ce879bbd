# carit/main.py
"""
FastAPI application entry point.
Includes CORS, request timing, global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from carit.routers import users, garage, car_options, flowcharts, health
from carit.database import create_tables
from carit.config import settings
from carit.exceptions import CarITError
from carit.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="CarIT API",
    description="Vehicle diagnostics assistant backend",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (frontend dev server by default) ───────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,   # Authorization headers from the frontend
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


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(CarITError)
async def carit_error_handler(request: Request, exc: CarITError):
    logger.info(f"{request.url.path} → {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
        for err in errors
    ) or "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": str(exc) or "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(users.router,       prefix="/api", tags=["Users"])
app.include_router(garage.router,      prefix="/api", tags=["Garage"])
app.include_router(car_options.router, prefix="/api", tags=["Car Options"])
app.include_router(flowcharts.router,  prefix="/api", tags=["Flowcharts"])
app.include_router(health.router,      prefix="/api", tags=["Health"])


@app.get("/", include_in_schema=False)
def root():
    return {"status": "running"}


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("CarIT backend starting up...")
    create_tables()
    logger.info("Database tables ready")
    logger.info(f"Max flowcharts per user: {settings.MAX_FLOWCHARTS}")
    logger.info(f"Flowchart generator: {settings.FLOWCHART_GENERATOR_URL or 'disabled'}")
    logger.info(f"Question generator: {settings.QUESTION_GENERATOR_URL or 'disabled'}")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("CarIT backend shutting down...")
