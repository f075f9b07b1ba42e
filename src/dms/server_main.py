import logging
import os
import time

import uvicorn
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from sqlalchemy.orm import configure_mappers
from starlette import status
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette_context.plugins import (
    CorrelationIdPlugin,
    RequestIdPlugin,
    UserAgentPlugin,
)

from dms import __version__
from dms.lib.exceptions import InvalidPermissionError
from dms.lib.logging.canonical import log_request
from dms.lib.logging.context import (
    PopulatedRawContextMiddleware,
    format_raised_exception_info_as_dict,
    logging_context,
    save_to_logging_context,
)
from dms.lib.permissions import PermissionException
from dms.models import *  # noqa: F403
from dms.routers import dms_files, dms_permissions, permissions

logger = logging.getLogger(__name__)

# Scan all our model classes and create backref attributes. Otherwise, these attributes only get added to classes once
# an instance of the related class has been created.
configure_mappers()

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

app = FastAPI()
app.add_middleware(
    PopulatedRawContextMiddleware,
    plugins=(
        CorrelationIdPlugin(force_new_uuid=True),
        RequestIdPlugin(force_new_uuid=True),
        UserAgentPlugin(),
    ),
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(dms_files.router)
app.include_router(dms_permissions.router)
app.include_router(permissions.router)


def logged_error_response(request: Request, err: BaseException, status_code: int, content: dict) -> JSONResponse:
    """
    Build the response for a raised exception and write the canonical log line the route would otherwise have written.
    """
    response = JSONResponse(status_code=status_code, content=content)
    save_to_logging_context(format_raised_exception_info_as_dict(err))
    log_request(request, response, time.time_ns())
    return response


@app.exception_handler(PermissionException)
async def permission_exception_handler(request: Request, exc: PermissionException):
    return logged_error_response(request, exc, exc.http_code, {"detail": exc.message})


@app.exception_handler(InvalidPermissionError)
async def invalid_permission_exception_handler(request: Request, exc: InvalidPermissionError):
    return logged_error_response(request, exc, status.HTTP_422_UNPROCESSABLE_ENTITY, {"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return logged_error_response(
        request, exc, status.HTTP_422_UNPROCESSABLE_ENTITY, jsonable_encoder({"detail": exc.errors()})
    )


@app.exception_handler(Exception)
async def exception_handler(request: Request, err: Exception):
    logger.error(msg="Uncaught exception.", extra=logging_context(), exc_info=err)
    return logged_error_response(
        request, err, status.HTTP_500_INTERNAL_SERVER_ERROR, {"message": "Internal server error"}
    )


def customize_openapi_schema():
    title = "DMS API"
    version = __version__
    openapi_schema = get_openapi(title=title, version=version, routes=app.routes)
    openapi_schema["info"] = {
        "title": title,
        "version": version,
        "description": "Document sharing and access control for the document management service.",
    }
    openapi_schema["tags"] = [dms_files.metadata, dms_permissions.metadata, permissions.metadata]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


customize_openapi_schema()


# If the application is not already being run within a uvicorn server, start uvicorn here.
if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
