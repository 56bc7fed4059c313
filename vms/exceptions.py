# vms/exceptions.py
"""
Typed service errors and their HTTP mapping.

Services raise these; register_exception_handlers() turns each kind into a
distinct status code at the API boundary so callers can tell bad input from
an unknown id from an illegal state transition.
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vms.utils.logger import get_logger

logger = get_logger(__name__)


class VisitorServiceError(Exception):
    kind = "VisitorServiceError"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message}


class ValidationError(VisitorServiceError):
    """Malformed or missing input. The caller can fix it and retry."""
    kind = "ValidationError"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class NotFoundError(VisitorServiceError):
    kind = "NotFoundError"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidTransitionError(VisitorServiceError):
    """The approval is not in a state that allows the requested transition."""
    kind = "InvalidTransitionError"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, approval_id, current_status: str, transition: str):
        super().__init__(f"Cannot {transition} approval {approval_id} in state {current_status}")
        self.approval_id = approval_id
        self.current_status = current_status
        self.transition = transition

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["current_status"] = self.current_status
        return body


class StorageError(VisitorServiceError):
    """Persistence failure. Lock timeouts and dropped connections are retryable."""
    kind = "StorageError"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str, retryable: bool = True):
        super().__init__(message)
        self.retryable = retryable

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["retryable"] = self.retryable
        return body


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(VisitorServiceError)
    async def _service_error_handler(request: Request, exc: VisitorServiceError):
        logger.info(f"{request.method} {request.url.path} rejected: {exc.kind}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [{"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                  for err in exc.errors()]
        body = ValidationError("Invalid request", errors=errors).to_dict()
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
