"""
Error Taxonomy
==============

Domain exceptions raised by services and translated to `{error}` JSON
responses once, at the HTTP boundary.

  - ValidationError         -> 400
  - NotFoundError           -> 404
  - UpstreamProviderError   -> 500 (LLM / image provider)
  - ImageGenerationExhausted-> 500 (no image payload after all attempts)
  - StorageError            -> 500 (document / blob store)

ParseError and InvalidAiRecipe never reach HTTP: the AI normalizer
catches them and drops the offending payload or entry.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class RecipeAppError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RecipeAppError):
    """Malformed required input (missing prompt, bad id, missing saved_id)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(RecipeAppError):
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamProviderError(RecipeAppError):
    """LLM or image provider failed or returned an unusable shape."""


class ImageGenerationExhausted(UpstreamProviderError):
    """Every image attempt came back without a payload."""

    def __init__(self, attempts: int):
        super().__init__(f"No image data returned after {attempts} attempts")
        self.attempts = attempts


class StorageError(RecipeAppError):
    """Blob upload or row read/write failure."""


class ParseError(RecipeAppError):
    """AI text could not be coerced into JSON, even after repair."""


class InvalidAiRecipe(RecipeAppError):
    """AI recipe without ingredients or steps after normalization."""


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as `{error}` with the matching status code."""

    @app.exception_handler(RecipeAppError)
    async def handle_domain_error(request: Request, exc: RecipeAppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
            message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        else:
            message = "Invalid request"
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("%s %s crashed: %s", request.method, request.url.path, exc, exc_info=True)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
