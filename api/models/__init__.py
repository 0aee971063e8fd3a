"""API request and response models."""

from api.models.requests import PackRequest, RehashRequest, VerifyRequest
from api.models.responses import (
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    PackResponse,
    RehashResponse,
    VerifyResponse,
)

__all__ = [
    "PackRequest",
    "RehashRequest",
    "VerifyRequest",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "PackResponse",
    "RehashResponse",
    "VerifyResponse",
]
