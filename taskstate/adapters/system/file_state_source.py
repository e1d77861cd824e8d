# /taskstate/adapters/system/file_state_source.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

LOG = logging.getLogger("adapter.state_source.file")


class FileStateSource:
    """Reads a /state snapshot previously saved as a JSON file."""

    def __init__(self, path: str) -> None:
        self._path = Path(path)

    def load(self) -> dict[str, Any]:
        if not self._path.exists():
            raise FileNotFoundError(f"state snapshot not found: {self._path}")
        doc = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(doc, dict):
            raise ValueError(f"state snapshot must be a JSON object: {self._path}")
        LOG.info(
            "state snapshot loaded",
            extra={"extra": {"path": str(self._path), "frameworks": len(doc.get("frameworks") or [])}},
        )
        return doc
