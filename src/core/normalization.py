from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from core.classification import (
    clean_summary,
    detect_competition,
    is_non_fixture,
    resolve_home_club,
    split_teams_and_score,
)
from core.logging import get_logger
from core.models import FixtureDataset, FixtureRecord, NormalizerConfig, SeasonWindow
from ics_feed.parser import RawEvent

logger = get_logger("core.normalization")

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slug(value: Any) -> str:
    s = str(value or "").lower().replace("&", "and")
    return _NON_ALNUM_RE.sub("", s)


def build_fixture_id(date: str, competition: str, opponent: str, venue: str, time: str) -> str:
    return f"{date}-{slug(competition)}-{slug(opponent)}-{venue.lower()}-{time.replace(':', '')}"


def in_season_window(date: str, window: Optional[SeasonWindow]) -> bool:
    if window is None:
        return True
    return window.contains(date)


def dedupe_by_id(fixtures: Iterable[FixtureRecord]) -> FixtureDataset:
    """Mantiene solo la prima occorrenza per id, preservando l'ordine relativo."""
    seen = set()
    out: FixtureDataset = []
    for f in fixtures:
        if f["id"] in seen:
            continue
        seen.add(f["id"])
        out.append(f)
    return out


def sort_fixtures(fixtures: Iterable[FixtureRecord]) -> FixtureDataset:
    # sorted() è stabile: a parità di date+time resta l'ordine precedente
    return sorted(fixtures, key=lambda f: f["date"] + f["time"])


def finalize_batch(fixtures: FixtureDataset, window: Optional[SeasonWindow]) -> FixtureDataset:
    """
    Dedupe per id -> ordinamento (date, time) -> filtro finestra stagione.
    Logga le statistiche del batch (campo extra parse_stats).
    """
    unique = dedupe_by_id(fixtures)
    ordered = sort_fixtures(unique)
    kept = [f for f in ordered if in_season_window(f["date"], window)]
    logger.info(
        "batch finalizzato: %s fixtures",
        len(kept),
        extra={
            "parse_stats": {
                "input": len(fixtures),
                "duplicates": len(fixtures) - len(unique),
                "out_of_window": len(ordered) - len(kept),
                "kept": len(kept),
            },
            "season_window": window.to_dict() if window else None,
        },
    )
    return kept


def _record(
    *,
    date: str,
    time: str,
    datetime_utc: str,
    competition: str,
    opponent: str,
    venue: str,
    home_goals: Optional[int],
    away_goals: Optional[int],
    location: str,
) -> FixtureRecord:
    return {
        "id": build_fixture_id(date, competition, opponent, venue, time),
        "date": date,
        "time": time,
        "datetime_utc": datetime_utc,
        "competition": competition,  # type: ignore[typeddict-item]
        "opponent": opponent,
        "venue": venue,  # type: ignore[typeddict-item]
        "homeGoals": home_goals,
        "awayGoals": away_goals,
        "location": location or "",
    }


def normalize_ics_event(event: RawEvent, config: NormalizerConfig) -> Optional[FixtureRecord]:
    """
    RawEvent -> FixtureRecord. Ritorna None per voci non-partita
    (summary vuoto, annunci calendario, sorteggi).
    """
    summary = clean_summary(event.summary)
    if is_non_fixture(summary):
        return None

    split = split_teams_and_score(summary)
    opponent, venue = resolve_home_club(split, summary, config.club_token)
    competition = detect_competition(
        summary, event.description, event.location, default=config.competition_default
    )
    return _record(
        date=event.date,
        time=event.time,
        datetime_utc=f"{event.date}T{event.hh}:{event.mm}:00Z",
        competition=competition,
        opponent=opponent,
        venue=venue,
        home_goals=split.home_goals,
        away_goals=split.away_goals,
        location=event.location,
    )


def normalize_ics_events(events: Iterable[RawEvent], config: NormalizerConfig) -> FixtureDataset:
    out: FixtureDataset = []
    for ev in events:
        rec = normalize_ics_event(ev, config)
        if rec is not None:
            out.append(rec)
    return out


def _as_int(v: Any) -> Optional[int]:
    try:
        return int(v) if v is not None else None
    except (ValueError, TypeError):
        return None


def utc_parts(iso_value: str) -> Optional[Dict[str, str]]:
    """
    ISO 8601 (Z o offset) -> {date, time, datetime_utc} in UTC.
    None se il valore non è interpretabile.
    """
    if not iso_value:
        return None
    try:
        dt = datetime.fromisoformat(iso_value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return {
        "date": dt.strftime("%Y-%m-%d"),
        "time": dt.strftime("%H:%M"),
        "datetime_utc": dt.strftime("%Y-%m-%dT%H:%M:00Z"),
    }


def normalize_api_football_fixture(
    item: Dict[str, Any], team_id: int, config: NormalizerConfig
) -> Optional[FixtureRecord]:
    """
    Normalizza record grezzo dell'API-Football (fixture, league, teams, goals)
    nel formato FixtureRecord. Venue determinata dall'id squadra tracciata.
    """
    fixture = item.get("fixture", {}) or {}
    league = item.get("league", {}) or {}
    teams = item.get("teams", {}) or {}
    goals = item.get("goals", {}) or {}

    when = utc_parts(fixture.get("date") or "")
    if when is None:
        return None

    home = teams.get("home") or {}
    away = teams.get("away") or {}
    if _as_int(home.get("id")) == team_id:
        venue, opponent = "H", away.get("name") or ""
    elif _as_int(away.get("id")) == team_id:
        venue, opponent = "A", home.get("name") or ""
    else:
        logger.warning("fixture %s senza squadra tracciata (team_id=%s)", fixture.get("id"), team_id)
        return None

    competition = detect_competition(
        league.get("name") or "", default=config.competition_default
    )
    venue_info = fixture.get("venue") or {}
    location = ", ".join(p for p in (venue_info.get("name"), venue_info.get("city")) if p)

    return _record(
        date=when["date"],
        time=when["time"],
        datetime_utc=when["datetime_utc"],
        competition=competition,
        opponent=opponent,
        venue=venue,
        home_goals=_as_int(goals.get("home")),
        away_goals=_as_int(goals.get("away")),
        location=location,
    )


__all__ = [
    "slug",
    "build_fixture_id",
    "in_season_window",
    "dedupe_by_id",
    "sort_fixtures",
    "finalize_batch",
    "normalize_ics_event",
    "normalize_ics_events",
    "utc_parts",
    "normalize_api_football_fixture",
]
