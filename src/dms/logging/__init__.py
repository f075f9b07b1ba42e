import logging
import logging.config
import os
import sys

from .config import load_named_config

LOG_CONFIG = os.environ.get("LOG_CONFIG")


def configure():
    """
    Configures logging for the DMS service.

    ``LOG_CONFIG`` names one of the stock configurations in ``dms/logging/configurations`` or points to a YAML file
    of its own. The ``default`` configuration logs readable lines to the console, while ``json`` emits only the
    canonical log lines as JSON documents.

    Python library warnings are captured and logged at the ``WARNING`` level.
    Uncaught exceptions are logged at the ``CRITICAL`` level before they cause
    the process to exit.
    """
    logging.config.dictConfig(load_named_config(LOG_CONFIG or "default"))

    logging.captureWarnings(True)

    sys.excepthook = lambda *args: logging.getLogger().critical("Uncaught exception:", exc_info=args)  # type: ignore
