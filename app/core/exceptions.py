from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from app.schemas.error_schemas import ErrorResponse

logger = structlog.get_logger()


class ProductsAPIError(Exception):
    """Base error; anything not more specific is a 500."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class BadRequestError(ProductsAPIError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ProductsAPIError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(ProductsAPIError):
    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class ThirdPartyError(ProductsAPIError):
    pass


def map_status(exc: Exception) -> int:
    if isinstance(exc, ProductsAPIError):
        return exc.status_code
    if isinstance(exc, StarletteHTTPException):
        return exc.status_code
    if isinstance(exc, RequestValidationError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def _message(exc: Exception) -> str:
    if isinstance(exc, StarletteHTTPException):
        return str(exc.detail)
    if isinstance(exc, RequestValidationError):
        return _validation_message(exc)
    return str(exc)


def build_error_body(exc: Exception, path: str) -> Dict[str, Any]:
    status_code = map_status(exc)
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Unknown"
    body = ErrorResponse(
        status=status_code,
        error=reason,
        message=_message(exc),
        path=path,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    return body.model_dump()


async def error_response_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = map_status(exc)
    body = build_error_body(exc, request.url.path)
    if status_code >= 500:
        logger.error(
            "Unhandled Exception",
            status_code=status_code,
            error=body["message"],
            path=request.url.path,
            method=request.method,
            exc_info=exc,
        )
    else:
        logger.warning(
            "Request failed",
            status_code=status_code,
            detail=body["message"],
            path=request.url.path,
            method=request.method,
        )
    headers = getattr(exc, "headers", None)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProductsAPIError, error_response_handler)
    app.add_exception_handler(StarletteHTTPException, error_response_handler)
    app.add_exception_handler(RequestValidationError, error_response_handler)
    app.add_exception_handler(Exception, error_response_handler)
