"""
Custom exception hierarchy for the Life RPG API.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.

The pure calculators in `liferpg.services` raise these too, so a bad rating
or an exhausted recovery quota surfaces with the same envelope whether it
was caught by a request schema or by the business rule itself.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from liferpg.schemas.common import ErrorDetail, ErrorResponse

logger = logging.getLogger("liferpg.errors")


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class LifeRPGException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidInputError(LifeRPGException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_INPUT"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            details={"field": field} if field else {},
        )


class UnauthorizedError(LifeRPGException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Missing or unknown X-User-Id header."):
        super().__init__(message=message)


class NotFoundError(LifeRPGException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            message=f"{resource} {resource_id} not found.",
            details={"resource": resource, "id": resource_id},
        )


class RecoveryLimitReachedError(LifeRPGException):
    http_status = status.HTTP_409_CONFLICT
    code = "RECOVERY_LIMIT_REACHED"

    def __init__(self, recovery_type: str, max_per_day: int):
        super().__init__(
            message=f"Daily limit of {max_per_day} reached for {recovery_type}.",
            details={"recovery_type": recovery_type, "max_per_day": max_per_day},
        )


class InsufficientCoinsError(LifeRPGException):
    http_status = status.HTTP_409_CONFLICT
    code = "INSUFFICIENT_COINS"

    def __init__(self, required: int, available: int):
        super().__init__(
            message=f"Reward costs {required} coins, only {available} available.",
            details={"required": required, "available": available},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def liferpg_exception_handler(request: Request, exc: LifeRPGException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append(ErrorDetail(
            field=".".join(str(loc) for loc in error["loc"] if loc != "body"),
            message=error["msg"],
            type=error["type"],
        ).model_dump())
    body = ErrorResponse(
        code="VALIDATION_ERROR",
        message="Request validation failed.",
        details={"errors": field_errors},
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=body.model_dump(),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
