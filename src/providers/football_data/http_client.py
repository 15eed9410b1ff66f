import os
from typing import Any, Dict, Optional

import requests

from core.logging import get_logger
from providers.exceptions import FetchError

log = get_logger(__name__)


class FootballDataClient:
    BASE_URL = "https://api.football-data.org/v4"

    def __init__(self, api_key: Optional[str] = None, timeout: float = 20) -> None:
        self.api_key = api_key or os.getenv("FOOTBALL_DATA_TOKEN")
        if not self.api_key:
            raise ValueError("Missing FOOTBALL_DATA_TOKEN env var")
        self.timeout = timeout
        self._last_status: Optional[int] = None

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.BASE_URL}{path}"
        headers = {"X-Auth-Token": self.api_key}
        log.info("GET %s params=%s", url, params)
        try:
            resp = requests.get(url, headers=headers, params=params or {}, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"football-data {path}: {e.__class__.__name__}: {e}") from e
        self._last_status = resp.status_code
        if not resp.ok:
            raise FetchError(f"football-data {path}", status=resp.status_code, body=resp.text or "")
        try:
            return resp.json()
        except ValueError as e:
            raise FetchError(f"football-data {path}: risposta non JSON") from e

    def last_status(self) -> Optional[int]:
        return self._last_status
