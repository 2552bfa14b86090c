"""Logging configuration for the DevBytes playlist cache."""

import json
import logging
import sys
from datetime import datetime, timezone

from devbytes.config import get_settings


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for production log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure the root logger based on environment."""
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)

    if settings.env == "prod":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
