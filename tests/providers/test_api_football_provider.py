import httpx
import pytest

from core.models import NormalizerConfig, SeasonWindow
from providers.api_football.client import ApiFootballClient
from providers.api_football.fixtures_provider import ApiFootballFixturesProvider
from providers.exceptions import FetchError

WINDOW = SeasonWindow("2025-08-01", "2026-07-31")

TEAMS = {"response": [{"team": {"id": 40, "name": "Liverpool"}}]}
FIXTURES = {
    "response": [
        {
            "fixture": {"id": 1, "date": "2025-08-15T20:00:00+01:00", "venue": {"name": "Anfield", "city": "Liverpool"}},
            "league": {"id": 39, "name": "Premier League", "season": 2025},
            "teams": {"home": {"id": 40, "name": "Liverpool"}, "away": {"id": 35, "name": "Bournemouth"}},
            "goals": {"home": 4, "away": 2},
        },
        {
            "fixture": {"id": 2, "date": "2026-01-10T17:30:00+00:00", "venue": {}},
            "league": {"id": 45, "name": "FA Cup", "season": 2025},
            "teams": {"home": {"id": 41, "name": "Southampton"}, "away": {"id": 40, "name": "Liverpool"}},
            "goals": {"home": None, "away": None},
        },
    ]
}


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self):
        return self._payload


@pytest.fixture
def fake_httpx(monkeypatch):
    calls = []

    def fake_get(url, params=None, headers=None, timeout=None):
        calls.append({"url": url, "params": params, "headers": headers})
        if url.endswith("/teams"):
            return FakeResponse(200, TEAMS)
        return FakeResponse(200, FIXTURES)

    monkeypatch.setattr("providers.api_football.client.httpx.get", fake_get)
    return calls


def test_resolves_team_then_fetches(fake_httpx):
    provider = ApiFootballFixturesProvider(
        client=ApiFootballClient(api_key="KEY"),
        team_search="Liverpool",
        config=NormalizerConfig(season_window=WINDOW),
    )
    fixtures = provider.fetch_fixtures()

    assert [c["url"].rsplit("/", 1)[-1] for c in fake_httpx] == ["teams", "fixtures"]
    assert fake_httpx[0]["params"] == {"search": "Liverpool"}
    assert fake_httpx[1]["params"] == {"team": 40, "season": 2025}
    assert fake_httpx[1]["headers"]["x-apisports-key"] == "KEY"
    assert provider.team_id == 40

    assert [f["id"] for f in fixtures] == [
        "2025-08-15-pl-bournemouth-h-1900",
        "2026-01-10-fac-southampton-a-1730",
    ]
    assert fixtures[1]["location"] == ""


def test_configured_team_id_skips_lookup(fake_httpx):
    provider = ApiFootballFixturesProvider(client=ApiFootballClient(api_key="KEY"), team_id=40)
    provider.fetch_fixtures()
    assert len(fake_httpx) == 1
    assert fake_httpx[0]["url"].endswith("/fixtures")


def test_team_not_found(monkeypatch):
    monkeypatch.setattr(
        "providers.api_football.client.httpx.get",
        lambda *a, **k: FakeResponse(200, {"response": []}),
    )
    provider = ApiFootballFixturesProvider(client=ApiFootballClient(api_key="KEY"), team_search="Nope")
    with pytest.raises(FetchError):
        provider.fetch_fixtures()


def test_http_errors(monkeypatch):
    monkeypatch.setattr(
        "providers.api_football.client.httpx.get",
        lambda *a, **k: FakeResponse(499, {"errors": {"token": "invalid"}}),
    )
    with pytest.raises(FetchError) as exc:
        ApiFootballClient(api_key="KEY").get("/fixtures")
    assert exc.value.status == 499

    def boom(*a, **k):
        raise httpx.ConnectError("boom")

    monkeypatch.setattr("providers.api_football.client.httpx.get", boom)
    with pytest.raises(FetchError):
        ApiFootballClient(api_key="KEY").get("/fixtures")


def test_missing_key():
    with pytest.raises(ValueError):
        ApiFootballClient(api_key="")
