from __future__ import annotations

import argparse
import dataclasses
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from core.config import SOURCES, Settings, get_settings
from core.logging import get_logger, set_log_level
from core.normalization import finalize_batch
from core.persistence import load_fixtures_document, write_fixtures_document
from providers.api_football.client import ApiFootballClient
from providers.api_football.fixtures_provider import ApiFootballFixturesProvider
from providers.base import FixturesProviderBase
from providers.exceptions import FetchError
from providers.football_data.fixtures_provider import FootballDataFixturesProvider
from providers.football_data.http_client import FootballDataClient
from providers.ics_calendar.fixtures_provider import IcsFixturesProvider
from providers.ics_calendar.http_client import IcsHttpClient

log = get_logger("fixture_sync.pipeline")


def build_provider(settings: Settings) -> FixturesProviderBase:
    settings.require_source_credentials()
    config = settings.normalizer_config()
    if settings.fixtures_source == "ics":
        return IcsFixturesProvider(
            url=settings.ics_url or "",
            config=config,
            client=IcsHttpClient(user_agent=settings.user_agent, timeout=settings.http_timeout),
        )
    if settings.fixtures_source == "football-data":
        return FootballDataFixturesProvider(
            team_id=settings.football_data_team_id,
            config=config,
            client=FootballDataClient(api_key=settings.football_data_token, timeout=settings.http_timeout),
        )
    return ApiFootballFixturesProvider(
        client=ApiFootballClient(api_key=settings.api_football_key or "", timeout=settings.http_timeout),
        team_id=settings.api_football_team_id,
        team_search=settings.club_name,
        config=config,
    )


def run(settings: Optional[Settings] = None) -> Path:
    """
    Fetch -> normalizzazione -> dedupe/sort/finestra -> scrittura documento.
    Il file viene scritto solo se l'intero batch è stato prodotto.
    """
    settings = settings or get_settings()
    provider = build_provider(settings)
    window = settings.season_window

    fixtures = finalize_batch(provider.fetch_fixtures(), window)

    output = Path(settings.output_path)
    previous = load_fixtures_document(output)
    path = write_fixtures_document(output, fixtures, provider.source, window)
    log.info(
        "Saved %s fixtures to %s (previous=%s)",
        len(fixtures),
        path,
        previous.get("count") if previous else None,
        extra={"season_window": window.to_dict() if window else None},
    )
    return path


def _iso_date(value: str) -> str:
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"data non valida (atteso YYYY-MM-DD): {value!r}") from e


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    changes = {}
    if args.source:
        changes["fixtures_source"] = args.source
    if args.output:
        changes["output_path"] = args.output
    if args.date_from:
        changes["season_from"] = args.date_from
    if args.date_to:
        changes["season_to"] = args.date_to
    if args.no_window:
        changes["season_window_enabled"] = False
    if not changes:
        return settings
    updated = dataclasses.replace(settings, **changes)
    if updated.season_from > updated.season_to:
        raise ValueError(f"--from ({updated.season_from}) successiva a --to ({updated.season_to})")
    return updated


def _load_dotenv() -> None:
    # Carica .env se presente (senza sovrascrivere variabili già impostate)
    from dotenv import find_dotenv, load_dotenv

    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path, override=False)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Fetch club fixtures and write the front end JSON")
    ap.add_argument("--source", choices=SOURCES, default=None)
    ap.add_argument("--output", default=None, type=str)
    ap.add_argument("--from", dest="date_from", default=None, type=_iso_date, help="YYYY-MM-DD")
    ap.add_argument("--to", dest="date_to", default=None, type=_iso_date, help="YYYY-MM-DD")
    ap.add_argument("--no-window", action="store_true", help="disable the season window filter")
    args = ap.parse_args(argv)

    _load_dotenv()
    try:
        settings = _apply_overrides(get_settings(), args)
        set_log_level(settings.log_level)
        run(settings)
    except ValueError as e:
        sys.stderr.write(f"[fixtures] config error: {e}\n")
        return 1
    except FetchError as e:
        sys.stderr.write(f"[fixtures] fetch error: {e}\n")
        return 1
    except Exception as e:  # noqa: BLE001
        log.error("errore non gestito", exc_info=True)
        sys.stderr.write(f"[fixtures] unexpected error: {e!r}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
