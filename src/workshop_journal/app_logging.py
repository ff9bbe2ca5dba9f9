"""Logging configuration helpers."""

import logging


def configure_logging() -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("workshop_journal")
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False


def truncate_log_line(line: str, limit: int = 80) -> str:
    """Shorten a request log line to a single terminal row."""
    if len(line) > limit:
        return line[: limit - 1] + "…"
    return line
