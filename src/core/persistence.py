from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models import FixtureDataset, SeasonWindow

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]

# ---------------------------------------------------------------------------
# Low level
# ---------------------------------------------------------------------------


def _ensure_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _write_json_atomic(path: Path, data: Any, indent: int = 2) -> None:
    _ensure_dir(path)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=indent)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Documento fixtures
# ---------------------------------------------------------------------------


def build_document(
    fixtures: FixtureDataset,
    source: str,
    season_window: Optional[SeasonWindow] = None,
    generated_at: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Struttura del file per il front end:
      { generatedAt, source, seasonWindow?, count, fixtures }
    seasonWindow è omesso quando il filtro stagione non è attivo.
    """
    doc: Dict[str, Any] = {
        "generatedAt": generated_at or _now_iso(),
        "source": source,
    }
    if season_window is not None:
        doc["seasonWindow"] = season_window.to_dict()
    doc["count"] = len(fixtures)
    doc["fixtures"] = list(fixtures)
    return doc


def write_fixtures_document(
    path: PathLike,
    fixtures: FixtureDataset,
    source: str,
    season_window: Optional[SeasonWindow] = None,
    generated_at: Optional[str] = None,
) -> Path:
    """
    Sovrascrive interamente il file di output (nessun merge con il precedente).
    """
    target = Path(path)
    _write_json_atomic(target, build_document(fixtures, source, season_window, generated_at))
    return target


def load_fixtures_document(path: PathLike) -> Optional[Dict[str, Any]]:
    """
    Carica il documento precedente (se esiste), altrimenti None.
    JSON corrotto o struttura inattesa -> warning e None.
    """
    target = Path(path)
    if not target.exists():
        return None
    try:
        with target.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except JSONDecodeError:
        LOGGER.warning("Invalid / corrupt fixtures JSON at %s", target)
        return None
    except OSError as e:
        LOGGER.warning("Error reading fixtures file %s: %s", target, e)
        return None
    if not isinstance(raw, dict) or not isinstance(raw.get("fixtures"), list):
        LOGGER.warning("Invalid structure in fixtures JSON (expected object with 'fixtures' list) at %s", target)
        return None
    return raw


__all__ = ["build_document", "write_fixtures_document", "load_fixtures_document"]
