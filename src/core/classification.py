from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Tuple

from core.models import Competition, Venue

# Ordine dei pattern = priorità: punteggio, "v"/"vs", trattino generico
SCORE_PATTERN = re.compile(r"^(.+?)\s+(\d+)\s*[-–—]\s*(\d+)\s+(.+?)$")
VERSUS_PATTERN = re.compile(r"^(.+?)\s+vs?\.?\s+(.+?)$", re.IGNORECASE)
DASH_PATTERN = re.compile(r"^(.+?)\s+[-–—]\s+(.+?)$")

_WHITESPACE_RE = re.compile(r"\s+")
# variation selector / zero-width joiner usati nelle emoji composte
_INVISIBLE_CHARS = {"\ufe0e", "\ufe0f", "\u200d"}


@dataclass(frozen=True)
class TeamSplit:
    a: str
    b: str
    home_goals: Optional[int]
    away_goals: Optional[int]


@dataclass(frozen=True)
class CompetitionRule:
    """
    Regola di classificazione: `phrases` sono sottostringhe (case-insensitive),
    `codes` sigle brevi confrontate come parola intera.
    """

    code: Competition
    phrases: Tuple[str, ...]
    codes: Tuple[str, ...] = ()

    def _code_pattern(self) -> Optional[Pattern[str]]:
        if not self.codes:
            return None
        return re.compile(r"\b(?:" + "|".join(re.escape(c) for c in self.codes) + r")\b")

    def matches(self, haystack: str) -> bool:
        if any(p in haystack for p in self.phrases):
            return True
        pattern = self._code_pattern()
        return bool(pattern and pattern.search(haystack))


COMPETITION_RULES: Tuple[CompetitionRule, ...] = (
    CompetitionRule("UCL", ("champions league",), ("ucl",)),
    CompetitionRule("FAC", ("fa cup",), ("fac",)),
    CompetitionRule("LC", ("carabao", "league cup", "efl cup"), ("lc", "efl")),
    CompetitionRule("PL", ("premier league",), ("pl", "epl")),
)

NON_FIXTURE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"fixtures? release", re.IGNORECASE),
    re.compile(r"fixtures? (?:list|announce)", re.IGNORECASE),
    # solo annunci di sorteggio, non partite terminate in pareggio
    re.compile(r"\b(?:round|cup|stage|phase|league|group|knockout)\s+draw\b", re.IGNORECASE),
    re.compile(r"\bdraw\s+(?:for|made)\b", re.IGNORECASE),
)


def clean_summary(text: str) -> str:
    """Rimuove simboli decorativi (emoji, pittogrammi) e normalizza gli spazi."""
    chars = []
    for ch in text or "":
        if ch in _INVISIBLE_CHARS:
            continue
        if unicodedata.category(ch) in ("So", "Sk", "Cs", "Co"):
            continue
        chars.append(ch)
    return _WHITESPACE_RE.sub(" ", "".join(chars)).strip()


def split_teams_and_score(summary: str) -> TeamSplit:
    s = (summary or "").strip()

    # "Team A 2-0 Team B"
    m = SCORE_PATTERN.match(s)
    if m:
        return TeamSplit(m.group(1).strip(), m.group(4).strip(), int(m.group(2)), int(m.group(3)))

    # "Team A v Team B" / "Team A vs. Team B"
    m = VERSUS_PATTERN.match(s)
    if m:
        return TeamSplit(m.group(1).strip(), m.group(2).strip(), None, None)

    # "Team A – Team B"
    m = DASH_PATTERN.match(s)
    if m:
        return TeamSplit(m.group(1).strip(), m.group(2).strip(), None, None)

    return TeamSplit("", "", None, None)


def resolve_home_club(split: TeamSplit, summary: str, club_token: str) -> Tuple[str, Venue]:
    """
    Ritorna (opponent, venue). Match del token club per sottostringa case-insensitive:
    lato sinistro -> H, lato destro -> A. Se nessun lato contiene il token
    l'intero summary diventa l'avversario con venue H.
    """
    token = club_token.lower()
    if split.a and token in split.a.lower():
        return (split.b or summary), "H"
    if split.b and token in split.b.lower():
        return (split.a or summary), "A"
    return summary, "H"


def detect_competition(
    summary: str,
    description: str = "",
    location: str = "",
    default: Competition = "OTHER",
    rules: Sequence[CompetitionRule] = COMPETITION_RULES,
) -> Competition:
    haystack = f"{summary} {description} {location}".lower()
    for rule in rules:
        if rule.matches(haystack):
            return rule.code
    return default


def is_non_fixture(summary: str) -> bool:
    """Voci amministrative (uscita calendario, sorteggi) o summary vuoto."""
    if not summary:
        return True
    return any(p.search(summary) for p in NON_FIXTURE_PATTERNS)


__all__ = [
    "TeamSplit",
    "CompetitionRule",
    "COMPETITION_RULES",
    "NON_FIXTURE_PATTERNS",
    "clean_summary",
    "split_teams_and_score",
    "resolve_home_club",
    "detect_competition",
    "is_non_fixture",
]
