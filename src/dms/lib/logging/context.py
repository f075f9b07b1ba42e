"""
Request-scoped logging context.

Each request carries a dictionary, kept by ``starlette-context``, that code handling the request adds to with
:py:func:`save_to_logging_context`. The dictionary is attached to log records through ``extra=logging_context()``
and emitted in full on the canonical log line written when the request completes.
"""

import logging
import os
import sys
import time
import traceback
from typing import Any, Optional, Union

from starlette.datastructures import Headers
from starlette.requests import HTTPConnection, Request
from starlette_context import context
from starlette_context.middleware import RawContextMiddleware

from dms import __project__, __version__
from dms.lib.logging.models import Source

FRONTEND_URL = os.getenv("FRONTEND_URL", "")
API_URL = os.getenv("API_URL", "")

logger = logging.getLogger(__name__)


def request_source(headers: Headers) -> Source:
    if FRONTEND_URL and headers.get("origin") == FRONTEND_URL:
        return Source.web
    if headers.get("referer") == f"{API_URL}/docs":
        return Source.docs

    return Source.other


class PopulatedRawContextMiddleware(RawContextMiddleware):
    """
    Context middleware seeding every request context with the request line, its source and the service version.
    """

    async def set_context(self, request: Union[Request, HTTPConnection]) -> dict:
        ctx: dict[str, Any] = {
            "request_ns": time.time_ns(),
            "path": request.url.path,
            "method": request.scope.get("method"),
            "source": request_source(request.headers),
            "application": __project__,
            "version": __version__,
        }

        # Correlation and request IDs, user agent.
        for plugin in self.plugins:
            ctx[plugin.key] = await plugin.process_request(request)

        return ctx


def save_to_logging_context(ctx: dict) -> dict:
    """
    Add *ctx* to the logging context of the current request.

    A key saved more than once accumulates its values in a list. Outside of a request this does nothing.
    """
    if not context.exists():
        logger.debug("Skipped saving to context. Context does not exist.")
        return {}

    for key, value in ctx.items():
        if key not in context:
            context[key] = value
        elif isinstance(context[key], list):
            context[key].append(value)
        else:
            context[key] = [context[key], value]

    return context.data


def logging_context() -> dict:
    if not context.exists():
        return {}

    return context.data


def _last_own_frame(tb) -> Optional[traceback.FrameSummary]:
    own_frames = [frame for frame in traceback.extract_tb(tb) if f"{os.sep}dms{os.sep}" in frame.filename]
    return own_frames[-1] if own_frames else None


def format_raised_exception_info_as_dict(err: BaseException) -> dict:
    """
    Summarize *err* for the logging context, locating the innermost frame of this package that it passed through.
    """
    info: dict[str, Any] = {"type": err.__class__.__name__, "string": str(err)}

    frame = _last_own_frame(err.__traceback__ or sys.exc_info()[2])
    if frame is not None:
        info.update({"file": frame.filename, "line": frame.lineno, "func": frame.name})

    return {"captured_exception_info": info}
