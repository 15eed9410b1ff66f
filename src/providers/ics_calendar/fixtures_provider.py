from __future__ import annotations

from typing import Optional

from core.logging import get_logger
from core.models import FixtureDataset, NormalizerConfig
from core.normalization import normalize_ics_events
from ics_feed.parser import extract_raw_events
from providers.base import FixturesProviderBase
from .http_client import IcsHttpClient

log = get_logger(__name__)


class IcsFixturesProvider(FixturesProviderBase):
    """
    Provider basato su feed ICS (es. calendario Google pubblico del club).
    Competizione e venue sono dedotte dal testo dell'evento.
    """

    source = "google-ics"

    def __init__(
        self,
        url: str,
        config: Optional[NormalizerConfig] = None,
        client: Optional[IcsHttpClient] = None,
    ) -> None:
        self.url = url
        self.config = config or NormalizerConfig()
        self._client = client or IcsHttpClient()

    def fetch_fixtures(self) -> FixtureDataset:
        text = self._client.get_text(self.url)
        events = extract_raw_events(text)
        fixtures = normalize_ics_events(events, self.config)
        log.info(
            "ics: eventi=%s fixtures=%s",
            len(events),
            len(fixtures),
            extra={"fetch_stats": {"last_status": self._client.last_status(), "bytes": len(text)}},
        )
        return fixtures
