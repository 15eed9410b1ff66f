from __future__ import annotations

from dataclasses import dataclass
from datetime import date as date_cls
from typing import Dict, List, Literal, Optional, TypedDict

Competition = Literal["PL", "UCL", "FAC", "LC", "OTHER"]
Venue = Literal["H", "A"]


class FixtureRecord(TypedDict):
    id: str
    date: str                 # YYYY-MM-DD
    time: str                 # HH:MM (24h)
    datetime_utc: str         # ISO 8601, suffisso Z
    competition: Competition
    opponent: str
    venue: Venue              # H / A dal punto di vista del club
    homeGoals: Optional[int]
    awayGoals: Optional[int]
    location: str


FixtureDataset = List[FixtureRecord]


@dataclass(frozen=True)
class SeasonWindow:
    """Finestra stagione inclusiva su date YYYY-MM-DD (confronto lessicografico)."""

    date_from: str
    date_to: str

    def contains(self, day: str) -> bool:
        return self.date_from <= day <= self.date_to

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.date_from, "to": self.date_to}

    @property
    def start_year(self) -> int:
        return int(self.date_from[:4])

    @classmethod
    def for_season(cls, start_year: int) -> "SeasonWindow":
        return cls(f"{start_year:04d}-08-01", f"{start_year + 1:04d}-07-31")

    @classmethod
    def current(cls, today: Optional[date_cls] = None) -> "SeasonWindow":
        # la stagione parte a luglio/agosto
        today = today or date_cls.today()
        year = today.year if today.month >= 7 else today.year - 1
        return cls.for_season(year)


@dataclass(frozen=True)
class NormalizerConfig:
    club_token: str = "liverpool"
    season_window: Optional[SeasonWindow] = None
    competition_default: Competition = "OTHER"


__all__ = [
    "Competition",
    "Venue",
    "FixtureRecord",
    "FixtureDataset",
    "SeasonWindow",
    "NormalizerConfig",
]
