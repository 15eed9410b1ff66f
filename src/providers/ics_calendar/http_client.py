from __future__ import annotations

from typing import Optional

import requests

from core.config import DEFAULT_USER_AGENT
from core.logging import get_logger
from providers.exceptions import FetchError

log = get_logger(__name__)


class IcsHttpClient:
    """
    GET singola del feed calendario (nessun retry).
    Status != 2xx o errori di rete -> FetchError.
    """

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, timeout: float = 20.0) -> None:
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"user-agent": user_agent})
        self._last_status: Optional[int] = None

    def get_text(self, url: str) -> str:
        log.info("GET calendario ics")
        try:
            resp = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch ICS: {e.__class__.__name__}: {e}") from e
        self._last_status = resp.status_code
        if not 200 <= resp.status_code < 300:
            raise FetchError("Failed to fetch ICS", status=resp.status_code, body=resp.text or "")
        return resp.text

    def last_status(self) -> Optional[int]:
        return self._last_status
