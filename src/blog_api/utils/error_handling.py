"""
Centralized Error Handling and Logging
Structured error logs with trace IDs, and one JSON error body shape for every non-2xx response.
"""

import json
import logging
import traceback
from typing import Any, Dict, List, Optional, Union
from contextvars import ContextVar

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from blog_api.utils.helpers import short_trace_id, utc_now

# Context variable for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)

ERROR_CODES = {
    400: "INVALID_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    503: "SERVICE_UNAVAILABLE",
}


class APIError(StarletteHTTPException):
    """HTTPException that names its own error code instead of deriving it from the status"""

    def __init__(self, status_code: int, detail: str, code: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code


class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    SANITIZE_SENSITIVE_FIELDS = True
    SENSITIVE_FIELD_PATTERNS = [
        'password', 'token', 'key', 'secret', 'authorization',
        'auth', 'bearer', 'credential', 'api_key', 'cookie'
    ]

    LOG_REQUEST_BODIES = True
    LOG_HEADERS = True
    MAX_BODY_LOG_SIZE = 5000

    INCLUDE_TRACE_ID = True
    INCLUDE_TIMESTAMP = True

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        field_lower = field_name.lower()
        # "author" is a blog post field, not credentials
        if field_lower == "author":
            return False
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data: Union[Dict, str, Any]) -> Any:
        """Recursively redact sensitive fields and truncate large strings"""
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
        """Log a JSON error entry and return its trace ID"""
        trace_id = request_id_var.get('')
        if not trace_id and request is not None:
            trace_id = getattr(request.state, "trace_id", None)
        trace_id = trace_id or short_trace_id()

        log_entry = {
            "timestamp": utc_now().isoformat(),
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
                "user_agent": headers.get("user-agent", "unknown")
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception),
                "module": getattr(exception, '__module__', 'unknown')
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
    """Assign a trace ID to every request and keep its body for error logs"""

    async def dispatch(self, request: Request, call_next):
        trace_id = short_trace_id()
        token = request_id_var.set(trace_id)

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
                extra_context={"body": _captured_body(request)}
            )
            raise
        finally:
            request_id_var.reset(token)

        response.headers["X-Trace-ID"] = trace_id
        return response


def _captured_body(request: Request) -> Any:
    body = getattr(request.state, "captured_body", None)
    if not body:
        return None
    try:
        return ErrorHandlingConfig.sanitize_data(json.loads(body))
    except (UnicodeDecodeError, ValueError):
        return ErrorHandlingConfig.sanitize_data(body.decode("utf-8", errors="replace"))


def error_body(
    error: str,
    message: str,
    code: str,
    trace_id: Optional[str] = None,
    **extra: Any
) -> Dict[str, Any]:
    """The JSON body shared by every error response"""
    content = {
        "error": error,
        "message": message,
        "code": code,
    }
    content.update(extra)

    if ErrorHandlingConfig.INCLUDE_TRACE_ID and trace_id:
        content["trace_id"] = trace_id

    if ErrorHandlingConfig.INCLUDE_TIMESTAMP:
        content["timestamp"] = utc_now().isoformat()

    return content


def describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Human readable summary of the first request validation error"""
    if not errors:
        return "Request validation failed"

    first = errors[0]
    location = [str(part) for part in first.get("loc", ())]
    source = location[0] if location else "body"
    field = ".".join(location[1:])

    if first.get("type") == "json_invalid":
        return "Request body is not valid JSON"
    if first.get("type") == "missing":
        if not field:
            return f"Missing request {source}"
        return f"Missing `{field}` in request {source}"
    return f"Invalid `{field or source}` in request {source}: {first.get('msg', 'invalid value')}"


# Global Exception Handlers
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions, including routing 404/405s"""
    trace_id = None
    if exc.status_code >= 400:
        trace_id = StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            exception=exc,
            extra_context={
                "status_code": exc.status_code,
                "request_body": _captured_body(request)
            },
            include_traceback=exc.status_code >= 500,
            level=logging.ERROR if exc.status_code >= 500 else logging.WARNING
        )

    code = getattr(exc, "code", None) or ERROR_CODES.get(
        exc.status_code, "INTERNAL_ERROR" if exc.status_code >= 500 else "HTTP_ERROR"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(f"HTTP {exc.status_code}", str(exc.detail), code, trace_id),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body/path validation errors are client errors (HTTP 400)"""
    validation_details = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "unknown")
        }
        for error in exc.errors()
    ]
    message = describe_validation_errors(list(exc.errors()))

    trace_id = StructuredLogger.log_error(
        "validation_error_400",
        f"Request validation failed: {message}",
        request=request,
        extra_context={
            "validation_errors": validation_details,
            "request_body": _captured_body(request)
        },
        include_traceback=False,
        level=logging.WARNING
    )

    return JSONResponse(
        status_code=400,
        content=error_body(
            "Validation Error",
            message,
            "VALIDATION_ERROR",
            trace_id,
            detail=validation_details
        )
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else is a 500 with a generic message"""
    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        extra_context={"request_body": _captured_body(request)},
        include_traceback=True
    )

    # Don't expose internal details
    return JSONResponse(
        status_code=500,
        content=error_body("Internal Server Error", "An unexpected error occurred", "INTERNAL_ERROR", trace_id),
        headers={"X-Trace-ID": trace_id}
    )


def setup_error_handling(app):
    """Install request context middleware and exception handlers"""
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling initialized")
