# app/history.py
"""Saved final plans, newest first, optionally mirrored to a JSON file."""
from __future__ import annotations

import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from app.schemas import SavedPlan

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("VIBE_PLANNER_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False


class PlanHistory:
    """Keeps final plan composites verbatim.

    With ``path`` set the history is loaded from and written back to that file
    on every save; an unreadable file starts an empty history instead of
    failing the planning flow.
    """

    def __init__(self, path: str | Path | None = None, *, limit: int = 50):
        self.path = Path(path) if path else None
        self.limit = max(1, limit)
        self._lock = threading.Lock()
        self._entries: List[SavedPlan] = self._load()

    def _load(self) -> List[SavedPlan]:
        if self.path is None or not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [SavedPlan.model_validate(item) for item in raw][: self.limit]
        except (OSError, ValueError, TypeError, ValidationError):
            logger.warning("Unable to read plan history from %s; starting empty", self.path, exc_info=True)
            return []

    def _persist(self) -> None:
        if self.path is None:
            return
        payload = [entry.model_dump(mode="json", by_alias=True) for entry in self._entries]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError:
            logger.warning("Failed to save plan history to %s", self.path, exc_info=True)

    def save(self, plan_content: str) -> SavedPlan:
        stamp = datetime.now(timezone.utc).isoformat()
        entry = SavedPlan(id=uuid.uuid4().hex, plan_content=plan_content, saved_at=stamp)
        with self._lock:
            self._entries = [entry, *self._entries][: self.limit]
            self._persist()
        logger.info("Saved plan to history (%d entries)", len(self._entries))
        return entry

    def entries(self) -> List[SavedPlan]:
        with self._lock:
            return list(self._entries)

    def rate(self, entry_id: str, rating: int) -> Optional[SavedPlan]:
        """Set the rating of one saved plan; ``None`` when the id is unknown."""
        with self._lock:
            for idx, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    updated = entry.model_copy(update={"rating": rating})
                    self._entries[idx] = updated
                    self._persist()
                    break
            else:
                logger.info("No saved plan with id %s to rate", entry_id)
                return None
        logger.info("Rated saved plan %s with %d", entry_id, rating)
        return updated

    def clear(self) -> None:
        with self._lock:
            self._entries = []
            self._persist()
