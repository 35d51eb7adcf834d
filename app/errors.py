"""Domain errors and their HTTP rendering"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

logger = structlog.get_logger()


class ReservationError(Exception):
    """Base error type for domain errors."""

    kind = "error"
    status_code = 400

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class ValidationError(ReservationError):
    """Malformed or out-of-range input."""

    kind = "validation_error"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, details=[{"field": field, "message": message}])


class NotFoundError(ReservationError):
    """Referenced entity does not exist or was soft-deleted."""

    kind = "not_found"
    status_code = 404


class PolicyError(ReservationError):
    """Operation violates a business rule."""

    kind = "policy_error"


class ConflictError(ReservationError):
    """Slot already booked, or the entity is already in the target state."""

    kind = "conflict"


class InvalidTransitionError(ReservationError):
    """Lifecycle transition not allowed from the current state."""

    kind = "invalid_transition"


class AuthorizationError(ReservationError):
    """Actor lacks rights over the target entity."""

    kind = "forbidden"
    status_code = 403


async def reservation_error_handler(request: Request, exc: ReservationError) -> JSONResponse:
    logger.info(
        "Request rejected",
        path=request.url.path,
        error=exc.kind,
        message=exc.message,
    )
    body: Dict[str, Any] = {"detail": exc.message, "error": exc.kind}
    if exc.details:
        body["errors"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(
            {"detail": "Validation failed", "error": ValidationError.kind, "errors": errors}
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach domain error handlers to the application"""
    app.add_exception_handler(ReservationError, reservation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
