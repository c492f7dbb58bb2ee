import logging
import sys

from config.settings import LOG_LEVEL


def get_logger(name: str):
    logger = logging.getLogger(name)

    # Avoid duplicate handlers (Uvicorn already adds one)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # LOG_LEVEL wins; otherwise follow Uvicorn's level
    if LOG_LEVEL:
        logger.setLevel(LOG_LEVEL.upper())
    else:
        logger.setLevel(logging.getLogger("uvicorn").level or logging.INFO)

    # Records stop here; the root handler would print them twice
    logger.propagate = False

    return logger
