from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


EXTRA_WHITELIST = {"fetch_stats", "parse_stats", "season_window"}


class JsonFormatter(logging.Formatter):
    """Formatter JSON con supporto campi extra selezionati."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        # Extra whitelisted
        for key in EXTRA_WHITELIST:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


# livello condiviso da tutti i logger creati con get_logger
_LEVEL = "INFO"
_MANAGED = set()


def set_log_level(level: str) -> None:
    """Imposta il livello di default e lo applica ai logger già creati."""
    global _LEVEL
    _LEVEL = level.upper()
    for name in _MANAGED:
        logging.getLogger(name).setLevel(_LEVEL)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(_LEVEL)
        logger.propagate = False
        _MANAGED.add(name)
    if level:
        logger.setLevel(level.upper())
    return logger
