import logging
import math
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse, Response

from app.api import deps
from app.api.routes import projects
from app.core.config import settings
from app.core.errors import AppError, InternalError, MalformedRequestError, ValidationError
from app.core.limiter import limiter
from app.core.logging import client_ip_ctx, configure_logging, request_id_ctx
from app.db.session import init_db
from app.schemas.common import ErrorResponse, FieldError, ValidationErrorResponse

configure_logging(settings.log_level)
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.auto_create_tables and not settings.is_test:
        init_db()
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
rate_limit_enabled = not settings.is_test
if rate_limit_enabled:
    from slowapi.errors import RateLimitExceeded
    from slowapi.middleware import SlowAPIMiddleware

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=settings.allowed_methods,
    allow_headers=settings.allowed_headers,
    max_age=settings.cors_max_age,
)


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content=ErrorResponse(error=message).model_dump(),
    )


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    request_id_ctx.set(request_id)
    if request.client:
        client_ip_ctx.set(request.client.host)
    start = time.monotonic()
    response: Response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    duration_ms = int((time.monotonic() - start) * 1000)
    logging.getLogger("access").info(
        "request",
        extra={
            "event": {
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }
        },
    )
    return response


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response: Response = await call_next(request)
    response.headers.setdefault("Content-Security-Policy", "default-src 'self'")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "no-referrer")
    if settings.is_production:
        response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains")
    return response


def _declared_length(request: Request) -> int:
    try:
        return int(request.headers.get("content-length") or 0)
    except ValueError:
        return 0


@app.middleware("http")
async def limit_body_size(request: Request, call_next):
    if _declared_length(request) > settings.max_body_bytes:
        return error_response(413, "Request body too large")
    return await call_next(request)


@app.middleware("http")
async def enforce_json_content_type(request: Request, call_next):
    if request.method in {"POST", "PUT", "PATCH"} and _declared_length(request) > 0:
        content_type = request.headers.get("content-type", "")
        media_type = content_type.split(";")[0].strip().lower()
        if media_type != "application/json":
            return error_response(415, "Content-Type must be application/json")
    return await call_next(request)


@app.get("/api/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/health/ready")
def ready(db: Session = Depends(deps.get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Readiness check failed")
        return error_response(503, "Database unavailable")
    return {"status": "ready"}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, ValidationError) and exc.errors:
        return JSONResponse(
            status_code=exc.status_code,
            content=ValidationErrorResponse(
                errors=[FieldError(**e) for e in exc.errors]
            ).model_dump(),
        )
    return error_response(exc.status_code, exc.message)


def _field_errors(exc: RequestValidationError) -> list[FieldError]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        location = loc[0] if loc else "body"
        field = loc[-1] if len(loc) > 1 else location
        errors.append(FieldError(field=field, message=err.get("msg", "Invalid value"), location=location))
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        error = MalformedRequestError()
        return error_response(error.status_code, error.message)
    return JSONResponse(
        status_code=400,
        content=ValidationErrorResponse(errors=_field_errors(exc)).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == 404:
        message = f"Route {request.method} {request.url.path} not found"
    return error_response(exc.status_code, str(message), headers=getattr(exc, "headers", None))


def _retry_after(request: Request, exc) -> int:
    # slowapi records the limit it just evaluated on request.state.
    current = getattr(request.state, "view_rate_limit", None)
    active_limiter = getattr(request.app.state, "limiter", None)
    if current is not None and active_limiter is not None:
        reset_at, _remaining = active_limiter.limiter.get_window_stats(current[0], *current[1])
        return max(1, math.ceil(reset_at - time.time()))
    return exc.limit.limit.get_expiry()


async def rate_limit_handler(request: Request, exc: Exception):
    headers = {"Retry-After": str(_retry_after(request, exc))}
    return error_response(429, "Too many requests", headers=headers)


if rate_limit_enabled:
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled exception",
        extra={
            "event": {
                "method": request.method,
                "path": request.url.path,
                "request_id": getattr(request.state, "request_id", None),
            }
        },
    )
    error = InternalError()
    return error_response(error.status_code, error.message)


app.include_router(projects.router, prefix="/api")
