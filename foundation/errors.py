from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from foundation.config import GENERIC_SERVER_ERROR, is_production
from foundation.logging import get_logger

logger = get_logger(__name__)


class TeamError(Exception):
    """Base class for failures raised by the teams core."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TeamError):
    status_code = status.HTTP_400_BAD_REQUEST


class EmptyRosterError(ValidationError):
    def __init__(self, message: str = "The team must have at least one athlete."):
        super().__init__(message)


class DuplicateNameError(TeamError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(TeamError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(TeamError):
    status_code = status.HTTP_400_BAD_REQUEST


class PersistenceError(TeamError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: TeamError) -> Dict[str, Any]:
    """Shape a TeamError as the JSON body returned to callers."""
    if exc.status_code >= 500 and is_production():
        return {"success": False, "message": GENERIC_SERVER_ERROR}
    return {"success": False, "message": exc.message}


def _location(loc) -> str:
    # ("body", "deportistasIds") -> "deportistasIds"
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TeamError)
    async def team_error_handler(request: Request, exc: TeamError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("persistence_error", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        message = str(first.get("msg", "Invalid request"))
        # Pydantic prefixes errors raised from validators with "Value error, "
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        content = {
            "success": False,
            "message": message,
            "field": _location(first.get("loc", ())),
            "errors": [
                {"field": _location(error.get("loc", ())), "message": str(error.get("msg"))}
                for error in errors
            ],
        }
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        content = {"success": False, "message": GENERIC_SERVER_ERROR}
        if not is_production():
            content["error"] = str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content
        )
