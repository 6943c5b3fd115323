"""Exception handlers that give every error response a ``{"message": ...}`` body."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from finance_backend.core import config

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = 'Value error, '


def format_validation_errors(errors) -> list[dict]:
    formatted = []
    for error in errors:
        location = [str(part) for part in error.get('loc', ())]
        if location and location[0] == 'body':
            location = location[1:]
        # The location of a JSON decode error is a character offset, not a field.
        if error.get('type') == 'json_invalid':
            location = []
        message = str(error.get('msg', 'Invalid value'))
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        formatted.append({'field': '.'.join(location) or 'body', 'message': message})
    return formatted


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'message': 'Validation failed', 'errors': format_validation_errors(exc.errors())},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={'message': exc.detail},
        headers=getattr(exc, 'headers', None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    content = {'message': 'Something went wrong'}
    if config.is_development():
        content['error'] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
