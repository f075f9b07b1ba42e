class InvalidPermissionError(ValueError):
    """Raised when a document sharing record is saved without a valid target file."""

    pass
