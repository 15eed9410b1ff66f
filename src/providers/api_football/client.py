import time
from typing import Any, Dict, Optional

import httpx

from core.logging import get_logger
from providers.exceptions import FetchError

logger = get_logger(__name__)


class ApiFootballClient:
    """
    Client HTTP minimale per l'API Football (api-sports).
    Gestisce header API key e logging basilare (debug/errore); nessun retry.
    """

    BASE_URL = "https://v3.football.api-sports.io"

    def __init__(self, api_key: str, timeout: float = 30) -> None:
        if not api_key:
            raise ValueError("Missing API_FOOTBALL_KEY env var")
        self.api_key = api_key
        self.timeout = timeout
        self._headers = {
            "x-apisports-key": self.api_key,
            "Accept": "application/json",
        }
        self._last_status: Optional[int] = None

    def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Esegue una GET sincrona e ritorna il JSON decodificato.
        Errori di rete o status != 200 -> FetchError.
        """
        params = params or {}
        url = f"{self.BASE_URL.rstrip('/')}/{path.lstrip('/')}"
        logger.debug("GET %s params=%s", url, params)
        start = time.perf_counter()
        try:
            resp = httpx.get(url, params=params, headers=self._headers, timeout=self.timeout)
        except httpx.RequestError as exc:
            elapsed = (time.perf_counter() - start) * 1000
            logger.error("Errore rete %s dopo %.1fms: %s", url, elapsed, exc)
            raise FetchError(f"api-football {path}: {exc.__class__.__name__}: {exc}") from exc
        elapsed = (time.perf_counter() - start) * 1000
        self._last_status = resp.status_code
        if resp.status_code != 200:
            logger.error(
                "Status %s %s (%.1fms) body=%s",
                resp.status_code,
                url,
                elapsed,
                resp.text[:300],
            )
            raise FetchError(f"api-football {path}", status=resp.status_code, body=resp.text)
        logger.debug("OK %s %s %.1fms", url, resp.status_code, elapsed)
        try:
            return resp.json()
        except ValueError as exc:
            raise FetchError(f"api-football {path}: risposta non JSON") from exc

    def last_status(self) -> Optional[int]:
        return self._last_status
