from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from database.connection import create_tables
from routers import auth, user, admin, store, rating
import logging

from core.config import settings
from core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from core.exceptions import BaseCustomException
from core.response import error_response

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

app = FastAPI(
    title="Store Ratings API",
    description="Users rate stores from 1 to 5, store owners follow their ratings and admins manage everything",
    version=API_VERSION
)

def _field_name(loc) -> str:
    # ("body", "name") -> "name"; keep the location when it is all there is
    parts = [str(x) for x in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return '.'.join(parts)

def _error_message(error: dict) -> str:
    message = error['msg']
    if error.get('type') == 'value_error' and message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return message

def _json_error(request: Request, status_code: int, message: str, error_code: str,
                details=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(
            message=message,
            error_code=error_code,
            details=details,
            request_id=getattr(request.state, 'request_id', None)
        ),
        headers=headers
    )

@app.exception_handler(BaseCustomException)
async def custom_exception_handler(request: Request, exc: BaseCustomException):
    logger.warning(f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}")
    return _json_error(request, exc.status_code, exc.message, exc.__class__.__name__, exc.details)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report every invalid field at once, keyed by field name."""
    errors = [
        {
            "field": _field_name(error['loc']),
            "message": _error_message(error),
            "type": error['type']
        }
        for error in exc.errors()
    ]
    logger.warning(f"Validation error on {request.method} {request.url.path}: {[e['field'] for e in errors]}")
    return _json_error(request, 400, "Validation error", "VALIDATION_ERROR", {"errors": errors})

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
    return _json_error(
        request,
        exc.status_code,
        str(exc.detail) if isinstance(exc.detail, str) else "HTTP error occurred",
        "HTTP_ERROR",
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error on {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return _json_error(request, 500, "An unexpected error occurred. Please try again.", "INTERNAL_SERVER_ERROR")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Last added runs first, so every request has an id before anything else sees it
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(user.router, prefix="/api/user", tags=["Profile"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(store.router, prefix="/api/stores", tags=["Stores"])
app.include_router(rating.router, prefix="/api/ratings", tags=["Ratings"])

@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting Store Ratings API ({settings.ENVIRONMENT})")
    create_tables()

@app.get("/")
def root():
    return {
        "message": "Welcome to the Store Ratings API",
        "status": "healthy",
        "version": API_VERSION
    }

@app.get("/api/health")
def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "message": "Backend is running"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
