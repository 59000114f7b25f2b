# quiz_app/utils/logger.py
import logging
import sys
from quiz_app.utils.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Unknown level names fall back to INFO.
log_level = getattr(logging, settings.log_level, logging.INFO)

def _build_logger(name: str, level: int) -> logging.Logger:
    """Named logger writing to stdout only; reloads replace the handler instead of stacking another."""
    named = logging.getLogger(name)
    named.setLevel(level)
    named.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    named.addHandler(handler)
    named.propagate = False
    return named

logger = _build_logger("quiz_app", log_level)

# httpx logs one INFO line per provider request, which would drown out session lifecycle logs.
logging.getLogger("httpx").setLevel(logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING)
