"""Snapshot Loader — reads agency dump files from disk into a Snapshot.

Invariants:
    - The dump file is read exactly once, up front
    - Missing, unreadable, or non-JSON files raise SnapshotReadError (never a bare OSError)
    - The optional stores file supplies pending callbacks; its absence is not an error
"""

import json
import logging
from pathlib import Path
from typing import Any

from clusterlint.core.errors import SnapshotReadError
from clusterlint.core.snapshot import Snapshot, load_snapshot

logger = logging.getLogger(__name__)


def read_json_file(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SnapshotReadError(str(path), "file not found") from None
    except OSError as exc:
        raise SnapshotReadError(str(path), exc.strerror or str(exc)) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotReadError(
            str(path), f"invalid JSON at line {exc.lineno} column {exc.colno}",
        ) from exc


def read_snapshot_file(dump_path: Path, stores_path: Path | None = None) -> Snapshot:
    """Load a Snapshot from a dump file and an optional agency stores file."""
    payload = read_json_file(dump_path)
    stores = read_json_file(stores_path) if stores_path is not None else None
    snapshot = load_snapshot(payload, stores)
    logger.info(
        f"Loaded snapshot from {dump_path}",
        extra={"path": str(dump_path)},
    )
    return snapshot
