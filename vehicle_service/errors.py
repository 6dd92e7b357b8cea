"""
Exception handlers and validation helpers.
"""
import logging
from typing import Type, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def field_errors(errors) -> list:
    """Flatten pydantic error dicts into ``[{field, message}]``."""
    result = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        result.append({
            "field": ".".join(loc) or None,
            "message": error.get("msg", "Invalid value"),
        })
    return result


def validate_form(schema: Type[SchemaT], data: dict) -> SchemaT:
    """
    Build ``schema`` from form fields, reporting failures like body validation.

    Unset form fields are dropped so schema defaults apply.
    """
    data = {key: value for key, value in data.items() if value is not None}
    try:
        return schema(**data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return 400 with a list of field errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Validation failed",
            "errors": field_errors(exc.errors()),
        },
    )


async def database_exception_handler(request: Request, exc: PyMongoError):
    """Handle database errors."""
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PyMongoError, database_exception_handler)
