import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from core.config import _reset_settings_cache_for_tests  # noqa: E402
from core.logging import set_log_level  # noqa: E402

_ENV_VARS = (
    "FIXTURES_SOURCE",
    "LFC_ICS_URL",
    "FOOTBALL_DATA_TOKEN",
    "FOOTBALL_DATA_TEAM_ID",
    "API_FOOTBALL_KEY",
    "API_FOOTBALL_TEAM_ID",
    "CLUB_NAME",
    "CLUB_TOKEN",
    "SEASON_FROM",
    "SEASON_TO",
    "SEASON_WINDOW_ENABLED",
    "COMPETITION_DEFAULT",
    "FIXTURES_OUTPUT",
    "FIXTURES_LOG_LEVEL",
    "HTTP_TIMEOUT",
    "HTTP_USER_AGENT",
)


@pytest.fixture(autouse=True)
def reset_settings_cache(monkeypatch):
    # Ambiente pulito: nessuna variabile della macchina di sviluppo deve filtrare nei test
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    _reset_settings_cache_for_tests()
    yield
    _reset_settings_cache_for_tests()
    set_log_level("INFO")


SAMPLE_ICS = (
    "BEGIN:VCALENDAR\r\n"
    "VERSION:2.0\r\n"
    "PRODID:-//Google Inc//Google Calendar 70.9054//EN\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTART:20250816T190000Z\r\n"
    "SUMMARY:⚽ Liverpool 4-2 AFC Bournemouth\r\n"
    "DESCRIPTION:Premier League\r\n"
    "LOCATION:Anfield\r\n"
    "END:VEVENT\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTART;TZID=Europe/London:20250917T200000\r\n"
    "SUMMARY:Atlético Madrid v Liverpool\r\n"
    "DESCRIPTION:UEFA Champions League - League\r\n"
    "  phase\r\n"
    "LOCATION:Estadio Metropolitano\r\n"
    "END:VEVENT\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTART;VALUE=DATE:20250618\r\n"
    "SUMMARY:Premier League fixture release\r\n"
    "END:VEVENT\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTART:20250730T180000Z\r\n"
    "SUMMARY:Liverpool v Athletic Club\r\n"
    "DESCRIPTION:Pre-season friendly\r\n"
    "END:VEVENT\r\n"
    "BEGIN:VEVENT\r\n"
    "SUMMARY:Liverpool v Nobody (no start)\r\n"
    "END:VEVENT\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTART:20250816T190000Z\r\n"
    "SUMMARY:Liverpool 4-2 AFC Bournemouth\r\n"
    "DESCRIPTION:Premier League\r\n"
    "END:VEVENT\r\n"
    "END:VCALENDAR\r\n"
)


@pytest.fixture
def sample_ics() -> str:
    return SAMPLE_ICS
