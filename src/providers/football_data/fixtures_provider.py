from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from core.classification import detect_competition
from core.logging import get_logger
from core.models import Competition, FixtureDataset, FixtureRecord, NormalizerConfig, SeasonWindow
from core.normalization import build_fixture_id, utc_parts
from providers.base import FixturesProviderBase
from .http_client import FootballDataClient

log = get_logger(__name__)

LIVERPOOL_TEAM_ID = 64  # Liverpool FC su football-data.org
LONDON_TZ = ZoneInfo("Europe/London")

# codici competizione football-data -> enumerazione interna
FD_COMPETITION_MAP: Dict[str, Competition] = {
    "PL": "PL",
    "CL": "UCL",
    "FAC": "FAC",
}


class FootballDataFixtureRecord(FixtureRecord, total=False):
    # campi aggiuntivi disponibili solo da football-data
    matchId: Optional[int]
    status: Optional[str]     # SCHEDULED / TIMED / IN_PLAY / FINISHED / POSTPONED ...
    stage: Optional[str]
    matchday: Optional[int]
    londonDateTime: str       # ISO 8601 con offset Europe/London


def _map_competition(comp: Dict[str, Any], default: Competition) -> Competition:
    code = comp.get("code")
    if code in FD_COMPETITION_MAP:
        return FD_COMPETITION_MAP[code]
    return detect_competition(comp.get("name") or "", default=default)


def _extract_score(m: Dict[str, Any]) -> Dict[str, Optional[int]]:
    full = (m.get("score") or {}).get("fullTime") or {}
    h = full.get("home")
    a = full.get("away")
    return {
        "home": int(h) if isinstance(h, int) else None,
        "away": int(a) if isinstance(a, int) else None,
    }


def _london_iso(datetime_utc: str) -> str:
    dt = datetime.fromisoformat(datetime_utc.replace("Z", "+00:00"))
    return dt.astimezone(LONDON_TZ).isoformat()


def _opt_int(v: Any) -> Optional[int]:
    return v if isinstance(v, int) else None


def _normalize(
    m: Dict[str, Any], team_id: int, config: NormalizerConfig
) -> Optional[FootballDataFixtureRecord]:
    when = utc_parts(m.get("utcDate") or "")
    if when is None:
        return None
    home = m.get("homeTeam") or {}
    away = m.get("awayTeam") or {}
    if home.get("id") == team_id:
        venue, opponent = "H", away.get("name") or away.get("shortName") or ""
    elif away.get("id") == team_id:
        venue, opponent = "A", home.get("name") or home.get("shortName") or ""
    else:
        return None

    competition = _map_competition(m.get("competition") or {}, config.competition_default)
    score = _extract_score(m)
    return {
        "id": build_fixture_id(when["date"], competition, opponent, venue, when["time"]),
        "date": when["date"],
        "time": when["time"],
        "datetime_utc": when["datetime_utc"],
        "competition": competition,
        "opponent": opponent,
        "venue": venue,  # type: ignore[typeddict-item]
        "homeGoals": score["home"],
        "awayGoals": score["away"],
        "location": m.get("venue") or "",
        "matchId": _opt_int(m.get("id")),
        "status": m.get("status"),
        "stage": m.get("stage"),
        "matchday": _opt_int(m.get("matchday")),
        "londonDateTime": _london_iso(when["datetime_utc"]),
    }


class FootballDataFixturesProvider(FixturesProviderBase):
    """Partite della squadra tracciata da /teams/{id}/matches nella finestra stagione."""

    source = "football-data"

    def __init__(
        self,
        api_key: Optional[str] = None,
        team_id: int = LIVERPOOL_TEAM_ID,
        config: Optional[NormalizerConfig] = None,
        client: Optional[FootballDataClient] = None,
    ) -> None:
        self.client = client or FootballDataClient(api_key=api_key)
        self.team_id = team_id
        self.config = config or NormalizerConfig()

    def _window(self) -> SeasonWindow:
        return self.config.season_window or SeasonWindow.current()

    def fetch_fixtures(self) -> FixtureDataset:
        window = self._window()
        data = self.client.get(
            f"/teams/{self.team_id}/matches",
            params={"dateFrom": window.date_from, "dateTo": window.date_to},
        )
        matches = data.get("matches") or []
        out: FixtureDataset = []
        for m in matches:
            if not isinstance(m, dict):
                continue
            rec = _normalize(m, self.team_id, self.config)
            if rec is not None:
                out.append(rec)
        log.info(
            "football-data: matches=%s fixtures=%s",
            len(matches),
            len(out),
            extra={"fetch_stats": {"last_status": self.client.last_status()}},
        )
        return out
