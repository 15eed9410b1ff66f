import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from core.models import NormalizerConfig, SeasonWindow

SOURCES = ("ics", "football-data", "api-football")
SOURCE_TAGS = {
    "ics": "google-ics",
    "football-data": "football-data",
    "api-football": "api-football",
}

DEFAULT_OUTPUT = os.path.join("public", "data", "lfc-fixtures.json")
DEFAULT_USER_AGENT = "TicketHelpLFC-CreditTracker/1.0"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    v = value.strip().lower()
    if v in {"0", "false", "no"}:
        return False
    return True


def _opt_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"Variabile {name} deve essere un intero (valore: {raw!r})") from e


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"Variabile {name} deve essere un numero (valore: {raw!r})") from e


def _opt_date(name: str) -> Optional[str]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    if not _DATE_RE.match(raw):
        raise ValueError(f"Variabile {name} deve essere una data YYYY-MM-DD (valore: {raw!r})")
    return raw


@dataclass
class Settings:
    fixtures_source: str
    ics_url: Optional[str]
    football_data_token: Optional[str]
    football_data_team_id: int
    api_football_key: Optional[str]
    api_football_team_id: Optional[int]

    club_name: str
    club_token: str

    season_window_enabled: bool
    season_from: str
    season_to: str
    competition_default: str

    output_path: str
    log_level: str
    http_timeout: float
    user_agent: str

    @classmethod
    def from_env(cls) -> "Settings":
        source = (os.getenv("FIXTURES_SOURCE") or "ics").strip().lower()
        if source not in SOURCES:
            raise ValueError(
                f"FIXTURES_SOURCE deve essere uno tra {', '.join(SOURCES)} (valore: {source!r})"
            )

        club_name = (os.getenv("CLUB_NAME") or "Liverpool").strip()
        club_token = (os.getenv("CLUB_TOKEN") or club_name).strip().lower()

        # Default: stagione corrente (1 agosto -> 31 luglio)
        current = SeasonWindow.current()
        season_from = _opt_date("SEASON_FROM") or current.date_from
        season_to = _opt_date("SEASON_TO") or current.date_to
        if season_from > season_to:
            raise ValueError(f"SEASON_FROM ({season_from}) successiva a SEASON_TO ({season_to})")

        competition_default = (os.getenv("COMPETITION_DEFAULT") or "OTHER").strip().upper()
        if competition_default not in {"OTHER", "PL"}:
            raise ValueError(
                f"COMPETITION_DEFAULT deve essere 'OTHER' o 'PL' (valore: {competition_default!r})"
            )

        return cls(
            fixtures_source=source,
            ics_url=(os.getenv("LFC_ICS_URL") or "").strip() or None,
            football_data_token=(os.getenv("FOOTBALL_DATA_TOKEN") or "").strip() or None,
            football_data_team_id=_opt_int("FOOTBALL_DATA_TEAM_ID") or 64,
            api_football_key=(os.getenv("API_FOOTBALL_KEY") or "").strip() or None,
            api_football_team_id=_opt_int("API_FOOTBALL_TEAM_ID"),
            club_name=club_name,
            club_token=club_token,
            season_window_enabled=_parse_bool(os.getenv("SEASON_WINDOW_ENABLED"), True),
            season_from=season_from,
            season_to=season_to,
            competition_default=competition_default,
            output_path=os.getenv("FIXTURES_OUTPUT") or DEFAULT_OUTPUT,
            log_level=os.getenv("FIXTURES_LOG_LEVEL", "INFO").upper(),
            http_timeout=_float("HTTP_TIMEOUT", 20.0),
            user_agent=os.getenv("HTTP_USER_AGENT") or DEFAULT_USER_AGENT,
        )

    @property
    def source_tag(self) -> str:
        return SOURCE_TAGS[self.fixtures_source]

    @property
    def season_window(self) -> Optional[SeasonWindow]:
        if not self.season_window_enabled:
            return None
        return SeasonWindow(self.season_from, self.season_to)

    def require_source_credentials(self) -> None:
        """
        Verifica che la sorgente selezionata abbia URL / chiave impostati.
        Solleva ValueError con messaggio descrittivo (errore di configurazione fatale).
        """
        if self.fixtures_source == "ics" and not self.ics_url:
            raise ValueError("Missing LFC_ICS_URL env var (set it as a GitHub Actions secret).")
        if self.fixtures_source == "football-data" and not self.football_data_token:
            raise ValueError("Missing FOOTBALL_DATA_TOKEN env var")
        if self.fixtures_source == "api-football" and not self.api_football_key:
            raise ValueError("Missing API_FOOTBALL_KEY env var")

    def normalizer_config(self) -> NormalizerConfig:
        return NormalizerConfig(
            club_token=self.club_token,
            season_window=self.season_window,
            competition_default=self.competition_default,  # type: ignore[arg-type]
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def _reset_settings_cache_for_tests() -> None:
    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "_reset_settings_cache_for_tests", "SOURCES", "SOURCE_TAGS"]
