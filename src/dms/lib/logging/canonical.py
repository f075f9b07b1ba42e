import logging
import time
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from dms.lib.logging.context import logging_context, save_to_logging_context
from dms.lib.logging.models import LogType

logger = logging.getLogger(__name__)


def _level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING

    return logging.INFO


def log_request(request: Request, response: Response, end: int) -> None:
    """
    Write the canonical log line of a request, carrying everything saved to its logging context.
    """
    save_to_logging_context({"log_type": LogType.api_request, "response_code": response.status_code})

    start: Optional[int] = logging_context().get("time_ns")
    if start:
        save_to_logging_context({"duration_ns": end - start})

    save_to_logging_context({"canonical": True})
    logger.log(_level_for_status(response.status_code), msg="Request completed.", extra=logging_context())


def log_script(script: str, action: str, succeeded: bool, start: int) -> None:
    """
    Write the canonical log line of a command line script run. Scripts have no request context of their own.
    """
    ctx = {
        "log_type": LogType.script,
        "script": script,
        "database_action": action,
        "succeeded": succeeded,
        "duration_ns": time.time_ns() - start,
        "canonical": True,
    }
    logger.log(logging.INFO if succeeded else logging.ERROR, msg="Script completed.", extra=ctx)
