"""
Centralized Error Handling and Logging System
Renders every failure as a uniform JSON body and logs it with request context.
"""

import json
import logging
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Optional, Union

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from user_catalog.models.user import WIRE_FIELD_NAMES
from user_catalog.services.errors import NotFoundError, UserValidationError, ValidationError

# Context variable for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)

class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    # Security settings
    SANITIZE_SENSITIVE_FIELDS = True
    SENSITIVE_FIELD_PATTERNS = [
        'password', 'token', 'key', 'secret', 'authorization',
        'auth', 'bearer', 'credential', 'api_key', 'cookie'
    ]

    # Logging settings
    LOG_REQUEST_BODIES = True
    LOG_HEADERS = True
    MAX_BODY_LOG_SIZE = 5000

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        """Check if a field contains sensitive data"""
        field_lower = field_name.lower()
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data: Union[Dict, str, Any]) -> Any:
        """Recursively sanitize sensitive data from logs"""
        if not cls.SANITIZE_SENSITIVE_FIELDS:
            return data

        if isinstance(data, dict):
            return {
                key: "***REDACTED***" if cls.is_sensitive_field(key) else cls.sanitize_data(value)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [cls.sanitize_data(item) for item in data]
        elif isinstance(data, str) and len(data) > cls.MAX_BODY_LOG_SIZE:
            return data[:cls.MAX_BODY_LOG_SIZE] + "...[TRUNCATED]"
        else:
            return data

class StructuredLogger:
    """Structured logging with consistent format and context"""

    @staticmethod
    def log_error(
        error_type: str,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        extra_context: Optional[Dict] = None,
        include_traceback: bool = True,
        level: int = logging.ERROR
    ) -> str:
        """Log structured error with full context, returning its trace ID"""

        trace_id = getattr(request.state, 'trace_id', None) if request else None
        trace_id = trace_id or request_id_var.get('') or str(uuid.uuid4())[:8]

        log_entry = {
            "timestamp": _utc_timestamp(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": logging.getLevelName(level)
        }

        if request:
            headers = dict(request.headers)
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "headers": ErrorHandlingConfig.sanitize_data(headers) if ErrorHandlingConfig.LOG_HEADERS else {},
                "client_ip": request.client.host if request.client else None,
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception),
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = "".join(
                    traceback.format_exception(type(exception), exception, exception.__traceback__)
                )

        if extra_context:
            log_entry["context"] = ErrorHandlingConfig.sanitize_data(extra_context)

        logger.log(level, json.dumps(log_entry, indent=2, default=str))

        return trace_id

class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to capture request context and add request IDs"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)

        body = None
        if ErrorHandlingConfig.LOG_REQUEST_BODIES:
            body = await request.body()

        request.state.captured_body = body
        request.state.trace_id = trace_id

        try:
            response = await call_next(request)
        except Exception as e:
            StructuredLogger.log_error(
                "unhandled_exception",
                f"Unhandled exception in request processing: {str(e)}",
                request=request,
                exception=e,
                extra_context={"request_body": _captured_body(request)}
            )
            raise

        # Add trace ID to response headers for client-side debugging
        response.headers["X-Trace-ID"] = trace_id
        return response


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _captured_body(request: Request) -> Optional[str]:
    body = getattr(request.state, 'captured_body', None)
    if not body:
        return None
    try:
        return ErrorHandlingConfig.sanitize_data(body.decode('utf-8'))
    except UnicodeDecodeError:
        return "DECODE_ERROR"


def error_response(
    status_code: int,
    error: str,
    message: str,
    trace_id: Optional[str] = None,
    fields: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """Build the uniform error body shared by every handler"""
    content: Dict[str, Any] = {
        "timestamp": _utc_timestamp(),
        "status": status_code,
        "error": error,
        "message": message,
    }
    if fields is not None:
        content["fields"] = fields
    if trace_id:
        content["trace_id"] = trace_id

    return JSONResponse(status_code=status_code, content=content)


# Global Exception Handlers
async def user_validation_exception_handler(request: Request, exc: UserValidationError) -> JSONResponse:
    """Handle shape validation failures detected by the routes"""
    trace_id = StructuredLogger.log_error(
        "validation_error",
        f"User validation failed: {len(exc.fields)} field errors",
        request=request,
        extra_context={"fields": exc.fields, "request_body": _captured_body(request)},
        include_traceback=False,
        level=logging.WARNING
    )
    return error_response(400, "Validation Failed", exc.message, trace_id, fields=exc.fields)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle FastAPI parsing errors as shape validation failures"""
    fields: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        field = str(loc[-1])
        fields.setdefault(WIRE_FIELD_NAMES.get(field, field), error.get("msg", "Invalid value"))

    trace_id = StructuredLogger.log_error(
        "validation_error",
        f"Request validation failed: {len(exc.errors())} validation errors",
        request=request,
        extra_context={"fields": fields, "request_body": _captured_body(request)},
        include_traceback=False,
        level=logging.WARNING
    )
    return error_response(400, "Validation Failed", "Invalid data provided", trace_id, fields=fields)


async def business_exception_handler(request: Request, exc: Union[ValidationError, NotFoundError]) -> JSONResponse:
    """Handle business-rule failures the routes did not intercept"""
    trace_id = StructuredLogger.log_error(
        "invalid_argument",
        exc.message,
        request=request,
        exception=exc,
        include_traceback=False,
        level=logging.WARNING
    )
    return error_response(400, "Invalid Argument", exc.message, trace_id)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions raised by routes or the framework"""
    trace_id = StructuredLogger.log_error(
        f"http_{exc.status_code}",
        f"HTTP {exc.status_code}: {exc.detail}",
        request=request,
        include_traceback=False,
        level=logging.ERROR if exc.status_code >= 500 else logging.INFO
    )
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = f"HTTP {exc.status_code}"

    response = error_response(exc.status_code, phrase, str(exc.detail), trace_id)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other exceptions without exposing internal details"""
    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        extra_context={"request_body": _captured_body(request)},
        include_traceback=True
    )
    return error_response(500, "Internal Server Error", "An unexpected error occurred", trace_id)


def setup_error_handling(app):
    """Setup centralized error handling for FastAPI app"""

    app.add_middleware(RequestContextMiddleware)

    # Most specific first
    app.add_exception_handler(UserValidationError, user_validation_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, business_exception_handler)
    app.add_exception_handler(NotFoundError, business_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling system initialized")
