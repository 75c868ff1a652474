# catalog_api/errors.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base for every error surfaced to API callers.

    Subclasses pin the HTTP status and a default message; the class name is
    sent as ``code`` so clients can branch without parsing text.
    """

    status_code = 400
    message = "Bad request"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class InvalidIdentifier(CatalogError):
    message = "Invalid resource id"


class NotFound(CatalogError):
    status_code = 404
    message = "Resource not found"


class MissingFields(CatalogError):
    message = "Missing required fields"

    def __init__(self, fields: List[str]):
        super().__init__()
        self.fields = fields

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["fields"] = self.fields
        return body


class EmptyPayload(CatalogError):
    message = "Update payload is empty"


class InvalidQuery(CatalogError):
    message = "Invalid query parameter"


class InvalidPayload(CatalogError):
    message = "Invalid request body"


class DependencyUnavailable(CatalogError):
    status_code = 503
    message = "Store unavailable"


def _error_response(status_code: int, body: Dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.to_dict())


def invalid_payload(errors: List[Dict[str, Any]]) -> InvalidPayload:
    # first schema error is enough for the caller to fix the body
    message = InvalidPayload.message
    if errors:
        loc = ".".join(str(p) for p in errors[0].get("loc", ()) if p != "body")
        detail = " ".join(part for part in (loc, errors[0].get("msg", "")) if part)
        message = f"{message}: {detail}"
    return InvalidPayload(message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(400, invalid_payload(exc.errors()).to_dict())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # unmatched path or method on a known path
    if exc.status_code in (404, 405):
        return _error_response(404, {"error": "API endpoint not found"})
    return _error_response(exc.status_code, {"error": str(exc.detail)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
