"""Package logger shared by dashflags modules."""

import logging

logger: logging.Logger = logging.getLogger("dashflags")
