"""Service-level errors and their HTTP rendering.

Learn: Services raise these instead of fastapi.HTTPException so the same
code works from the CLI and from tests without an HTTP context. Each error
carries its status code; register_error_handlers() turns them into JSON
responses of the shape {"detail": "..."} — the same shape FastAPI uses for
its own HTTPException, so clients see one error format.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class ServiceError(Exception):
    """Base class for expected, caller-caused failures."""

    status_code = 500
    headers: dict[str, str] | None = None

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadRequestError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    """Missing, invalid, expired or revoked credentials."""

    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(ServiceError):
    """Authenticated, but the role does not allow the operation."""

    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """A uniqueness rule would be violated (duplicate email, category name)."""

    status_code = 409


def register_error_handlers(app: FastAPI) -> None:
    """Map ServiceError subclasses and unexpected exceptions to JSON."""

    @app.exception_handler(ServiceError)
    async def service_error(request: Request, exc: ServiceError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(
            "request.unhandled_error",
            method=request.method,
            path=request.url.path,
        )
        content = {"detail": "Internal server error"}
        if request.app.state.settings.environment == "development":
            content["error"] = str(exc)
        return JSONResponse(status_code=500, content=content)
