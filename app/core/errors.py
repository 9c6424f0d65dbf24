import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base for failures a caller can see and act on."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    @classmethod
    def for_fields(cls, errors: dict[str, str]) -> "ValidationError":
        fields = ", ".join(errors)
        return cls(f"Invalid or missing fields: {fields}", errors)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class AuthenticationError(AuthorizationError):
    # no usable credential at all, as opposed to a credential without the right
    status_code = status.HTTP_401_UNAUTHORIZED


class StoreError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def _body(exc: AppError) -> dict:
    body: dict = {"message": exc.message}
    if exc.errors:
        body["errors"] = exc.errors
    return body


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, AuthorizationError):
            logger.warning("%s refused on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = {}
        for err in exc.errors():
            loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
            errors[".".join(loc) or "request"] = err.get("msg", "invalid")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_body(ValidationError.for_fields(errors)))

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Store failure for request {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=StoreError.status_code,
            content={"message": "The data store is unavailable, please retry."},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": "An internal server error occurred."},
        )
