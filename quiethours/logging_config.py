"""Root logger setup shared by the HTTP app and the batch scripts."""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

from quiethours.config import settings


def configure_logging(level: str | None = None, json_format: bool | None = None) -> None:
    """Install a single stdout handler on the root logger.

    JSON lines (for Loki) unless ``json_format`` is False, in which case a
    plain text formatter is used for local runs of the scripts.
    """
    if json_format is None:
        json_format = settings.log_json
    level_name = (level or settings.log_level).upper()

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level_name, logging.INFO))

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
