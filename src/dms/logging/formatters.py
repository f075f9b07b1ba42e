import logging
from typing import Any

from pythonjsonlogger.json import JsonFormatter


class DmsJsonFormatter(JsonFormatter):
    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict[str, Any]) -> None:
        """
        Add the level, logger name and source file to every emitted document.
        """
        message_dict["level"] = record.levelname
        message_dict["logger"] = record.name
        message_dict["filepath"] = record.pathname

        super().add_fields(log_record, record, message_dict)
