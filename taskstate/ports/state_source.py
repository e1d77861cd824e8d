# /taskstate/ports/state_source.py
from __future__ import annotations

from typing import Any, Protocol


class StateSourcePort(Protocol):
    def load(self) -> dict[str, Any]:
        """Return the raw state document as decoded JSON."""
