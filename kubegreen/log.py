"""
Logging setup for kubegreen.

Usage:
    from kubegreen.log import get_logger
    logger = get_logger(__name__)
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

_LOG_LEVEL = os.environ.get("KUBEGREEN_LOG_LEVEL", "INFO").upper()
_LOG_FORMAT = os.environ.get("KUBEGREEN_LOG_FORMAT", "text")  # "json" or "text"
_configured = False


class JSONFormatter(logging.Formatter):
    """Emits each log record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in ("namespace", "source", "workload", "resource", "duration_ms"):
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(
    level: str = _LOG_LEVEL,
    fmt: str = _LOG_FORMAT,
    stream=None,
    force: bool = False,
) -> None:
    """
    Configure the ``kubegreen`` logger hierarchy.

    Subsequent calls are no-ops unless ``force`` is set (the CLI uses it to
    apply ``--verbose`` after import-time configuration).
    """
    global _configured
    if _configured and not force:
        return
    _configured = True

    root = logging.getLogger("kubegreen")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        ))
    root.addHandler(handler)

    for noisy in ("urllib3", "kubernetes"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the ``kubegreen`` namespace."""
    configure_logging()

    name = name or "kubegreen"
    if not name.startswith("kubegreen"):
        name = f"kubegreen.{name}"

    return logging.getLogger(name)
