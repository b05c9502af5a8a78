from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from .errors import StoreReadError, StoreWriteError
from .utils import atomic_write_json, load_json

LOGGER = logging.getLogger(__name__)


class ProcessedStore:
    """JSON array of artifact ids that earlier runs have already handled."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> set[str]:
        try:
            payload = load_json(self.path, default=None)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StoreReadError(f"Cannot read processed artifacts from {self.path}: {exc}") from exc
        if payload is None:
            LOGGER.info("No processed artifacts record at %s, starting empty", self.path)
            return set()
        if not isinstance(payload, list):
            raise StoreReadError(f"{self.path}: expected a JSON array, got {type(payload).__name__}")
        ids: set[str] = set()
        for item in payload:
            if isinstance(item, bool) or not isinstance(item, (str, int)):
                raise StoreReadError(f"{self.path}: invalid artifact id {item!r}")
            ids.add(str(item))
        return ids

    def save(self, ids: Iterable[str]) -> None:
        try:
            atomic_write_json(self.path, sorted(ids))
        except OSError as exc:
            raise StoreWriteError(f"Cannot write processed artifacts to {self.path}: {exc}") from exc
        LOGGER.debug("Saved processed artifacts to %s", self.path)
