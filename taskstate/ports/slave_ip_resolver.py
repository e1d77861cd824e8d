# /taskstate/ports/slave_ip_resolver.py
from __future__ import annotations

from typing import Protocol


class SlaveIPResolverPort(Protocol):
    def resolve(self, hostname: str) -> list[str]:
        """Return 0..N IP addresses (v4 and/or v6) for a slave hostname."""
