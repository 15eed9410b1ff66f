from ics_feed.parser import (
    extract_raw_events,
    get_field,
    parse_dtstart,
    split_event_blocks,
    unescape_text,
    unfold_ics_text,
)


def test_unfold_joins_continuation_lines():
    raw = "DESCRIPTION:UEFA Champions\r\n  League\nSUMMARY:A\n\tB"
    assert unfold_ics_text(raw) == "DESCRIPTION:UEFA Champions League\nSUMMARY:AB"


def test_unfold_idempotent_on_unfolded_text():
    text = "BEGIN:VEVENT\r\nSUMMARY:Liverpool v Chelsea\r\nEND:VEVENT\r\n"
    once = unfold_ics_text(text)
    assert once == text
    assert unfold_ics_text(once) == once


def test_split_event_blocks_discards_preamble():
    text = "BEGIN:VCALENDAR\nBEGIN:VEVENT\nSUMMARY:A\nEND:VEVENT\nBEGIN:VEVENT\nSUMMARY:B\nEND:VEVENT\nEND:VCALENDAR"
    blocks = split_event_blocks(text)
    assert len(blocks) == 2
    assert all(b.startswith("BEGIN:VEVENT") for b in blocks)
    assert "SUMMARY:A" in blocks[0]
    assert "SUMMARY:B" in blocks[1]


def test_split_event_blocks_no_events():
    assert split_event_blocks("BEGIN:VCALENDAR\nEND:VCALENDAR") == []


def test_get_field_ignores_params_and_trims():
    block = "BEGIN:VEVENT\r\nDTSTART;TZID=Europe/London:20260131T200000 \r\nSUMMARY;LANGUAGE=en:  Liverpool v Chelsea  \r\n"
    assert get_field(block, "DTSTART") == "20260131T200000"
    assert get_field(block, "SUMMARY") == "Liverpool v Chelsea"


def test_get_field_exact_key_at_line_start():
    block = "DTSTAMP:20250101T000000Z\nX-SUMMARY:nope\nsummary:lower\n"
    assert get_field(block, "DTSTART") == ""
    assert get_field(block, "SUMMARY") == ""
    assert get_field(block, "LOCATION") == ""


def test_get_field_first_match_wins():
    block = "SUMMARY:first\nSUMMARY:second\n"
    assert get_field(block, "SUMMARY") == "first"


def test_parse_dtstart_utc():
    dt = parse_dtstart("20260131T200000Z")
    assert (dt.date, dt.time, dt.hh, dt.mm) == ("2026-01-31", "20:00", "20", "00")


def test_parse_dtstart_floating_and_offset():
    assert parse_dtstart("20260131T194500").time == "19:45"
    # offset ignorato, nessuna conversione
    dt = parse_dtstart("20260131T200000+0100")
    assert (dt.date, dt.time) == ("2026-01-31", "20:00")


def test_parse_dtstart_date_only_defaults_midnight():
    dt = parse_dtstart("20260131")
    assert (dt.date, dt.time, dt.hh, dt.mm) == ("2026-01-31", "00:00", "00", "00")


def test_parse_dtstart_invalid():
    assert parse_dtstart("") is None
    assert parse_dtstart("2026-01-31") is None
    assert parse_dtstart("TBC") is None


def test_extract_raw_events_skips_blocks_without_start(sample_ics):
    events = extract_raw_events(sample_ics)
    # 6 VEVENT, uno senza DTSTART
    assert len(events) == 5
    assert all("no start" not in e.summary for e in events)
    second = events[1]
    assert second.date == "2025-09-17"
    assert second.time == "20:00"
    assert second.description == "UEFA Champions League - League phase"
    assert second.location == "Estadio Metropolitano"


def test_unescape_text_values():
    assert unescape_text(r"Chelsea\, Premier League") == "Chelsea, Premier League"
    assert unescape_text(r"A\;B\nC\ND") == "A;B\nC\nD"
    assert unescape_text(r"back\\slash\\n") == "back\\slash\\n"
    assert unescape_text("plain") == "plain"


def test_extract_raw_events_unescapes_text_fields():
    ics = (
        "BEGIN:VCALENDAR\r\n"
        "BEGIN:VEVENT\r\n"
        "DTSTART:20260131T200000Z\r\n"
        "SUMMARY:Liverpool v Chelsea\\, Premier League\r\n"
        "DESCRIPTION:Kick-off 20:00\\nAnfield\r\n"
        "LOCATION:Anfield\\, Liverpool\r\n"
        "END:VEVENT\r\n"
        "END:VCALENDAR\r\n"
    )
    (event,) = extract_raw_events(ics)
    assert event.summary == "Liverpool v Chelsea, Premier League"
    assert event.description == "Kick-off 20:00\nAnfield"
    assert event.location == "Anfield, Liverpool"
