"""NEST Auth - Session snapshot.

Persists the active mock session across restarts in a single JSON file,
keyed by a fixed storage key. Table contents are never persisted.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from nest.auth.schemas import MockSession

logger = logging.getLogger(__name__)

STORAGE_KEY = "nest_mock_session"


class SessionSnapshot:
    """Single-client key-value snapshot of the current session."""

    def __init__(self, path: str | Path | None):
        self.path = Path(path) if path else None

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def load(self) -> MockSession | None:
        if self.path is None or not self.path.exists():
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                stored = json.load(f)
            raw = stored.get(STORAGE_KEY) if isinstance(stored, dict) else None
            return MockSession.model_validate(raw) if raw else None
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable session snapshot {self.path}: {e}")
            return None

    def save(self, session: MockSession | None) -> None:
        if self.path is None:
            return

        if session is None:
            self.path.unlink(missing_ok=True)
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({STORAGE_KEY: session.model_dump(mode="json")}, f, indent=2)
