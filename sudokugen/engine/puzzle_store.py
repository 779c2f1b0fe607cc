"""Persistent puzzle document store.

Every generated puzzle can be saved as a JSON document under
``local_db/collections/puzzles/``. Documents hold the compact board and
solution strings plus enough metadata to reproduce the run.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..utils.logger import get_logger

if TYPE_CHECKING:
    from .generator import Puzzle


LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("local_db/collections/puzzles")


class PuzzleStore:
    """Save generated puzzles as structured JSON documents."""

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    def save(self, puzzle: "Puzzle", unique: Optional[bool] = None) -> str:
        """Persist ``puzzle`` and return its document ID."""

        doc_id = self._new_id()
        doc: Dict[str, Any] = {
            "id": doc_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
            **puzzle.to_dict(),
            "guess_points": len(puzzle.guesses),
            "unique": unique,
        }
        path = self.store_dir / f"{doc_id}.json"
        path.write_text(json.dumps(doc, indent=2), encoding="utf-8")
        LOGGER.info("Puzzle saved: %s", doc_id)
        return doc_id

    def load(self, doc_id: str) -> Dict[str, Any]:
        path = self.store_dir / f"{doc_id}.json"
        return json.loads(path.read_text(encoding="utf-8"))

    def list_ids(self) -> List[str]:
        return sorted(path.stem for path in self.store_dir.glob("*.json"))

    @staticmethod
    def _new_id() -> str:
        ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        short_uuid = uuid.uuid4().hex[:8]
        return f"{ts}_{short_uuid}"
