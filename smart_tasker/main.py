import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .config import CORS_ORIGINS, LOG_LEVEL
from .database import create_tables, get_db, store_is_ready
from .errors import InternalError, StoreUnavailableError, TaskerError
from .logging_setup import setup_logging
from .routers import auth, live, tasks

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="SmartTasker API",
    description="Task manager backend with live updates and recurring-task emails",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
)

# Include routers
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])
app.include_router(live.router, tags=["live"])


@app.exception_handler(TaskerError)
async def tasker_error_handler(request: Request, exc: TaskerError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"message": "Server error"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content={"message": error.message})


# Create tables on startup
@app.on_event("startup")
def on_startup():
    setup_logging(LOG_LEVEL)
    try:
        create_tables()
    except SQLAlchemyError:
        # Keep serving; the readiness guard answers 503 until the store is back.
        logger.exception("Database connection error")


@app.get("/", response_class=PlainTextResponse)
def read_root():
    return "SmartTasker Backend API is running!"


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    if not store_is_ready(db):
        raise StoreUnavailableError()
    return {"status": "healthy"}
