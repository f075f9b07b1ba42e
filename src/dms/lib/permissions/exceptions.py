class PermissionException(Exception):
    """Raised when an access check fails. Reported to clients with *http_code* and *message*."""

    def __init__(self, http_code: int, message: str):
        super().__init__(message)
        self.http_code = http_code
        self.message = message
