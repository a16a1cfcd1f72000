"""Catalog error taxonomy and the handlers that render it as HTTP responses.

Every error leaves the service in the same body shape (see ``ErrorResponse``),
whatever raised it: a manager, request validation, or Starlette itself.
"""
import logging
from datetime import datetime
from http import HTTPStatus
from typing import Any, Iterable

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from schemas.shared import ErrorResponse, FieldError

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, key_name: str, key_value: Any):
        if isinstance(key_value, (set, frozenset, list, tuple)):
            key_value = sorted(key_value)
        self.entity = entity
        self.key_name = key_name
        self.key_value = key_value
        super().__init__(f"{entity} not found with {key_name}: {key_value}")


class HasDependents(CatalogError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, author_id: int):
        self.author_id = author_id
        super().__init__(
            f"Cannot delete author with id '{author_id}' because they have associated books"
        )


class BadRequest(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailed(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field_errors: list[FieldError]):
        self.field_errors = field_errors
        super().__init__("Validation failed")

    @classmethod
    def from_errors(cls, errors: Iterable[dict]) -> "ValidationFailed":
        """Build from pydantic-style error dicts (``loc`` / ``msg``)."""
        field_errors = []
        for err in errors:
            # drop the "body" / "query" / "path" prefix FastAPI puts in front
            loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
            field_errors.append(
                FieldError(field=".".join(loc) or "request", message=err.get("msg", "invalid value"))
            )
        return cls(field_errors)


def error_body(
    status_code: int,
    message: str,
    path: str,
    field_errors: list[FieldError] | None = None,
) -> dict:
    body = ErrorResponse(
        timestamp=datetime.now(),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        path=path,
        field_errors=field_errors,
    )
    return jsonable_encoder(body.model_dump(by_alias=True))


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    field_errors = exc.field_errors if isinstance(exc, ValidationFailed) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.message, request.url.path, field_errors),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError | ValidationError
) -> JSONResponse:
    failed = ValidationFailed.from_errors(exc.errors())
    logger.debug(
        "Validation failed on %s", request.url.path,
        extra={"field_errors": [f.field for f in failed.field_errors]},
    )
    return await catalog_error_handler(request, failed)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(exc.detail), request.url.path),
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(
        status_code=code,
        content=error_body(code, "An unexpected error occurred", request.url.path),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
