"""
RFC 7807 Problem Details exception handling.

Every error the API returns carries a short ``title`` and a human-readable
``detail``; the front end shows exactly that pair in its error dialog.

See: https://datatracker.ietf.org/doc/html/rfc7807
"""

from typing import Optional, Dict, Any, List
from enum import Enum
from pydantic import BaseModel, Field
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import traceback
import uuid
from datetime import datetime

logger = logging.getLogger(__name__)

PROBLEM_TYPE_BASE = "https://job-cards.local/problems"


def _get_trace_id() -> str:
    """Get trace ID from correlation context or generate a new one."""
    from app.middleware.correlation import get_request_id

    request_id = get_request_id()
    if request_id and request_id != "unknown":
        return request_id
    return str(uuid.uuid4())[:12]


class ErrorCode(str, Enum):
    """Standardized error codes for the job card API."""

    # Validation
    VALIDATION_ERROR = "VAL_001"

    # Resource
    NOT_FOUND = "RES_001"
    ALREADY_EXISTS = "RES_002"
    CONFLICT = "RES_003"

    # Business Logic
    OPERATION_NOT_ALLOWED = "BIZ_003"

    # Storage
    DATABASE_ERROR = "EXT_004"

    # Server
    INTERNAL_ERROR = "SRV_001"
    SERVICE_UNAVAILABLE = "SRV_002"


class ProblemDetail(BaseModel):
    """
    RFC 7807 Problem Details response schema.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary
        status: HTTP status code
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying this specific occurrence
        code: Machine-readable error code for client handling
        timestamp: ISO 8601 timestamp of when the error occurred
        trace_id: Unique identifier for tracing in logs
        errors: List of field-level validation errors (for 422)
    """

    type: str = Field(
        default="about:blank",
        description="URI reference identifying the problem type"
    )
    title: str = Field(
        description="Short, human-readable summary of the problem"
    )
    status: int = Field(
        description="HTTP status code"
    )
    detail: str = Field(
        description="Human-readable explanation specific to this occurrence"
    )
    instance: Optional[str] = Field(
        default=None,
        description="URI reference for this specific occurrence"
    )
    code: str = Field(
        description="Machine-readable error code"
    )
    timestamp: str = Field(
        description="ISO 8601 timestamp"
    )
    trace_id: str = Field(
        description="Unique trace ID for debugging"
    )
    errors: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Field-level validation errors"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "type": f"{PROBLEM_TYPE_BASE}/res-002",
                "title": "Duplicate Entry",
                "status": 409,
                "detail": "Job number JC-2025-03-001 already exists.",
                "instance": "/api/v2/job-cards",
                "code": "RES_002",
                "timestamp": "2025-03-04T10:30:00Z",
                "trace_id": "abc123def456"
            }
        }
    }


def _problem_type(code: "ErrorCode") -> str:
    return f"{PROBLEM_TYPE_BASE}/{code.value.lower().replace('_', '-')}"


class JobCardAPIException(HTTPException):
    """
    Base exception for the job card API with RFC 7807 support.

    Usage:
        raise JobCardAPIException(
            status_code=404,
            code=ErrorCode.NOT_FOUND,
            detail="Job card not found",
        )
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        title: Optional[str] = None,
        instance: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.code = code
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.errors = errors
        self.trace_id = _get_trace_id()
        self.timestamp = datetime.utcnow().isoformat() + "Z"

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title based on status code."""
        titles = {
            400: "Bad Request",
            404: "Not Found",
            409: "Conflict",
            422: "Validation Error",
            500: "Internal Server Error",
            503: "Service Unavailable",
        }
        return titles.get(status_code, "Error")

    def to_problem_detail(self, instance: Optional[str] = None) -> ProblemDetail:
        """Convert to RFC 7807 ProblemDetail."""
        return ProblemDetail(
            type=_problem_type(self.code),
            title=self.title,
            status=self.status_code,
            detail=self.detail,
            instance=self.instance or instance,
            code=self.code.value,
            timestamp=self.timestamp,
            trace_id=self.trace_id,
            errors=self.errors,
        )


# Convenience exception classes

class NotFoundError(JobCardAPIException):
    """Resource not found (404)."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            status_code=404,
            code=ErrorCode.NOT_FOUND,
            detail=f"{resource} with ID {resource_id} was not found",
        )


class ValidationError(JobCardAPIException):
    """Validation error (422)."""

    def __init__(
        self,
        detail: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        title: Optional[str] = None,
    ):
        super().__init__(
            status_code=422,
            code=ErrorCode.VALIDATION_ERROR,
            detail=detail,
            title=title,
            errors=errors,
        )


class DuplicateEntryError(JobCardAPIException):
    """Unique constraint hit on insert or update (409)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=409,
            code=ErrorCode.ALREADY_EXISTS,
            title="Duplicate Entry",
            detail=detail,
        )


class ConflictError(JobCardAPIException):
    """Resource conflict (409), e.g. no job sequence left in a month."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=409,
            code=ErrorCode.CONFLICT,
            detail=detail,
        )


class DatabaseError(JobCardAPIException):
    """Storage round trip failed (503). Nothing was written."""

    def __init__(self, detail: str = "The database could not complete the request. Please try again."):
        super().__init__(
            status_code=503,
            code=ErrorCode.DATABASE_ERROR,
            title="Error",
            detail=detail,
        )


# Exception handlers for FastAPI

def create_problem_response(
    status_code: int,
    code: ErrorCode,
    detail: str,
    request: Request,
    errors: Optional[List[Dict[str, Any]]] = None,
    trace_id: Optional[str] = None,
    allowed_origins: Optional[List[str]] = None,
) -> JSONResponse:
    """Create a RFC 7807 compliant JSON response with CORS headers."""
    problem = ProblemDetail(
        type=_problem_type(code),
        title=JobCardAPIException._default_title(status_code),
        status=status_code,
        detail=detail,
        instance=str(request.url.path),
        code=code.value,
        timestamp=datetime.utcnow().isoformat() + "Z",
        trace_id=trace_id or _get_trace_id(),
        errors=errors,
    )

    response = JSONResponse(
        status_code=status_code,
        content=problem.model_dump(exclude_none=True),
        media_type="application/problem+json",
    )
    _add_cors_headers(response, request, allowed_origins)
    return response


def _add_cors_headers(
    response: JSONResponse,
    request: Request,
    allowed_origins: Optional[List[str]],
) -> None:
    if allowed_origins:
        origin = request.headers.get("origin", "")
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"


async def job_card_exception_handler(
    request: Request,
    exc: JobCardAPIException,
    allowed_origins: Optional[List[str]] = None,
) -> JSONResponse:
    """Handle JobCardAPIException with RFC 7807 response."""
    logger.warning(
        f"JobCardAPIException: {exc.code.value} - {exc.detail}",
        extra={
            "trace_id": exc.trace_id,
            "status_code": exc.status_code,
            "path": request.url.path,
        }
    )

    response = JSONResponse(
        status_code=exc.status_code,
        content=exc.to_problem_detail(instance=str(request.url.path)).model_dump(exclude_none=True),
        media_type="application/problem+json",
        headers=exc.headers,
    )
    _add_cors_headers(response, request, allowed_origins)
    return response


def create_exception_handlers(allowed_origins: List[str]):
    """
    Create exception handlers with configured allowed origins for CORS.

    Usage in main.py:
        handlers = create_exception_handlers(allowed_origins)
        app.add_exception_handler(JobCardAPIException, handlers["job_card"])
        app.add_exception_handler(RequestValidationError, handlers["validation"])
        app.add_exception_handler(Exception, handlers["generic"])
    """

    async def handle_job_card_exception(request: Request, exc: JobCardAPIException) -> JSONResponse:
        return await job_card_exception_handler(request, exc, allowed_origins)

    async def handle_http_exception(
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle standard HTTPException with RFC 7807 response."""
        code_map = {
            400: ErrorCode.VALIDATION_ERROR,
            404: ErrorCode.NOT_FOUND,
            405: ErrorCode.OPERATION_NOT_ALLOWED,
            409: ErrorCode.CONFLICT,
            422: ErrorCode.VALIDATION_ERROR,
            500: ErrorCode.INTERNAL_ERROR,
            503: ErrorCode.SERVICE_UNAVAILABLE,
        }

        code = code_map.get(exc.status_code, ErrorCode.INTERNAL_ERROR)

        return create_problem_response(
            status_code=exc.status_code,
            code=code,
            detail=str(exc.detail),
            request=request,
            allowed_origins=allowed_origins,
        )

    async def handle_validation_exception(
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors with field-level details."""
        errors = []
        for error in exc.errors():
            errors.append({
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            })

        # The first message doubles as the dialog text (e.g. "Customer name is required.")
        detail = "Request validation failed"
        if errors:
            detail = errors[0]["message"].removeprefix("Value error, ")

        return create_problem_response(
            status_code=422,
            code=ErrorCode.VALIDATION_ERROR,
            detail=detail,
            request=request,
            errors=errors,
            allowed_origins=allowed_origins,
        )

    async def handle_generic_exception(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions with RFC 7807 response."""
        trace_id = str(uuid.uuid4())[:12]

        logger.error(
            f"Unhandled exception: {type(exc).__name__}",
            extra={"trace_id": trace_id, "path": request.url.path},
        )
        logger.error(traceback.format_exc())

        # Don't expose internal details in production
        from app.config import settings
        detail = str(exc) if settings.DEBUG else "An unexpected error occurred. Please try again."

        return create_problem_response(
            status_code=500,
            code=ErrorCode.INTERNAL_ERROR,
            detail=detail,
            request=request,
            trace_id=trace_id,
            allowed_origins=allowed_origins,
        )

    return {
        "job_card": handle_job_card_exception,
        "http": handle_http_exception,
        "validation": handle_validation_exception,
        "generic": handle_generic_exception,
    }
