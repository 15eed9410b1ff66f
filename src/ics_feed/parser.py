from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from core.logging import get_logger

logger = get_logger("ics_feed.parser")

# RFC5545: riga che inizia con spazio/tab subito dopo un a capo = continuazione
_FOLD_RE = re.compile(r"\r?\n[ \t]")
_DATE_DIGITS_RE = re.compile(r"(\d{8})")
_TIME_DIGITS_RE = re.compile(r"^(\d{2})(\d{2})(\d{2})?")
# escape dei valori TEXT: \\ \; \, \n \N
_TEXT_ESCAPE_RE = re.compile(r"\\([\\;,nN])")

EVENT_BEGIN = "BEGIN:VEVENT"


@dataclass
class DtStart:
    date: str
    time: str
    hh: str
    mm: str


@dataclass
class RawEvent:
    date: str
    time: str
    hh: str
    mm: str
    summary: str
    description: str
    location: str


def unfold_ics_text(raw: str) -> str:
    return _FOLD_RE.sub("", raw)


def split_event_blocks(text: str) -> List[str]:
    """
    Divide il testo (già unfolded) in blocchi VEVENT.
    Il testo prima del primo BEGIN:VEVENT viene scartato; nessuna validazione qui.
    """
    parts = text.split(EVENT_BEGIN)[1:]
    return [EVENT_BEGIN + p for p in parts]


def unescape_text(value: str) -> str:
    return _TEXT_ESCAPE_RE.sub(lambda m: "\n" if m.group(1) in "nN" else m.group(1), value)


def get_field(block: str, key: str) -> str:
    """
    Ritorna il valore della prima riga KEY[;param=...]:valore (match esatto a inizio riga),
    già trimmato. Stringa vuota se il campo manca.
    """
    pattern = re.compile(rf"^{re.escape(key)}(?:;[^:\r\n]*)?:(.*)$", re.MULTILINE)
    m = pattern.search(block)
    return (m.group(1) or "").strip() if m else ""


def parse_dtstart(value: str) -> Optional[DtStart]:
    # Formati gestiti:
    #   20260131T200000Z
    #   20260131T200000
    #   20260131T200000+0100  (offset ignorato)
    #   20260131
    s = (value or "").strip()
    date_digits = _DATE_DIGITS_RE.search(s)
    if not date_digits:
        return None

    ymd = date_digits.group(1)
    date = f"{ymd[0:4]}-{ymd[4:6]}-{ymd[6:8]}"

    hh, mm = "00", "00"
    t_index = s.find("T")
    if t_index != -1:
        time_digits = _TIME_DIGITS_RE.match(s[t_index + 1:])
        if time_digits:
            hh, mm = time_digits.group(1), time_digits.group(2)

    return DtStart(date=date, time=f"{hh}:{mm}", hh=hh, mm=mm)


def extract_raw_events(ics_raw: str) -> List[RawEvent]:
    """Unfold + split + estrazione campi. Blocchi senza DTSTART valido vengono saltati."""
    blocks = split_event_blocks(unfold_ics_text(ics_raw))
    events: List[RawEvent] = []
    skipped = 0
    for block in blocks:
        dt = parse_dtstart(get_field(block, "DTSTART"))
        if dt is None:
            skipped += 1
            continue
        events.append(
            RawEvent(
                date=dt.date,
                time=dt.time,
                hh=dt.hh,
                mm=dt.mm,
                summary=unescape_text(get_field(block, "SUMMARY")),
                description=unescape_text(get_field(block, "DESCRIPTION")),
                location=unescape_text(get_field(block, "LOCATION")),
            )
        )
    logger.debug("VEVENT blocchi=%s eventi=%s senza_dtstart=%s", len(blocks), len(events), skipped)
    return events


__all__ = [
    "DtStart",
    "RawEvent",
    "unfold_ics_text",
    "split_event_blocks",
    "get_field",
    "unescape_text",
    "parse_dtstart",
    "extract_raw_events",
]
