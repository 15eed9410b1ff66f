from __future__ import annotations

from typing import Any, Dict, List, Optional

from core.logging import get_logger
from core.models import FixtureDataset, NormalizerConfig, SeasonWindow
from core.normalization import normalize_api_football_fixture
from providers.base import FixturesProviderBase
from providers.exceptions import FetchError
from .client import ApiFootballClient

log = get_logger(__name__)


class ApiFootballFixturesProvider(FixturesProviderBase):
    """
    Provider API-Football.
    - Se team_id non è configurato lo risolve con /teams?search=<nome club>
    - Poi interroga /fixtures?team=&season= e normalizza i record
    """

    source = "api-football"

    def __init__(
        self,
        client: ApiFootballClient,
        team_id: Optional[int] = None,
        team_search: str = "Liverpool",
        config: Optional[NormalizerConfig] = None,
    ) -> None:
        self._client = client
        self.team_id = team_id
        self.team_search = team_search
        self.config = config or NormalizerConfig()

    def _season(self) -> int:
        window = self.config.season_window or SeasonWindow.current()
        return window.start_year

    def resolve_team_id(self) -> int:
        if self.team_id is not None:
            return self.team_id
        raw = self._client.get("/teams", params={"search": self.team_search})
        response = raw.get("response", [])
        if not isinstance(response, list) or not response:
            raise FetchError(f"api-football: nessuna squadra trovata per {self.team_search!r}")
        team = (response[0] or {}).get("team") or {}
        if team.get("id") is None:
            raise FetchError(f"api-football: risposta /teams senza id per {self.team_search!r}")
        self.team_id = int(team["id"])
        log.info("api-football: team %r -> id=%s", team.get("name"), self.team_id)
        return self.team_id

    def fetch_fixtures(self) -> FixtureDataset:
        team_id = self.resolve_team_id()
        raw = self._client.get("/fixtures", params={"team": team_id, "season": self._season()})
        response: List[Dict[str, Any]] = raw.get("response", [])
        if not isinstance(response, list):
            log.warning("Formato inatteso: 'response' non è una lista")
            return []
        out: FixtureDataset = []
        for item in response:
            rec = normalize_api_football_fixture(item, team_id, self.config)
            if rec is not None:
                out.append(rec)
        log.info(
            "api-football: response=%s fixtures=%s",
            len(response),
            len(out),
            extra={"fetch_stats": {"last_status": self._client.last_status()}},
        )
        return out


__all__ = ["ApiFootballFixturesProvider"]
