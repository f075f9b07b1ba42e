import logging


class CanonicalOnlyFilter(logging.Filter):
    """Passes only the canonical log lines written when a request or script completes."""

    def filter(self, record: logging.LogRecord) -> bool:
        return bool(getattr(record, "canonical", False))
