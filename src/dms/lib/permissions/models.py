import logging
from typing import Optional

from dms.lib.logging.context import logging_context, save_to_logging_context

logger = logging.getLogger(__name__)


class PermissionResponse:
    """
    Outcome of an access check.

    A denial carries the HTTP status code and message reported to the client. Both are ``None`` when access is
    permitted.
    """

    def __init__(self, permitted: bool, http_code: int = 403, message: Optional[str] = None):
        self.permitted = permitted
        self.http_code = None if permitted else http_code
        self.message = None if permitted else message

        save_to_logging_context({"permission_message": self.message, "access_permitted": self.permitted})
        logger.debug(
            msg=f"Access to the requested resource is {'permitted' if permitted else 'not permitted'}.",
            extra=logging_context(),
        )

    def __repr__(self) -> str:
        if self.permitted:
            return "<PermissionResponse permitted>"

        return f"<PermissionResponse denied {self.http_code}: {self.message}>"
