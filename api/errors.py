"""
Module 09D - API Error Handling

Standardized error handling for the API.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import AtstException, ErrorCodes


# Pipeline error code -> HTTP status
_STATUS_BY_CODE = {
    ErrorCodes.INTEGRITY_MISMATCH: 409,
    ErrorCodes.WELL_FORMEDNESS_VIOLATION: 400,
    ErrorCodes.CANONICALIZATION_ERROR: 400,
    ErrorCodes.UNSUPPORTED_VERSION: 400,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: AtstException) -> "APIError":
        error = exc.to_error_model()
        return cls(
            code=error.code,
            message=error.message,
            status_code=_STATUS_BY_CODE.get(error.code, 400),
            details=error.details,
        )

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def atst_error_handler(request: Request, exc: AtstException) -> JSONResponse:
    """Handle pipeline exceptions raised inside routes."""
    return await api_error_handler(request, APIError.from_exception(exc))


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
