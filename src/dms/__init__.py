import logging as module_logging

import dms.logging as application_logging

application_logging.configure()
logger = module_logging.getLogger(__name__)

__project__ = "dms-api"
__version__ = "2026.1.0"

logger.info(f"DMS {__version__}")
