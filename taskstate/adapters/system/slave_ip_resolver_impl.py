# /taskstate/adapters/system/slave_ip_resolver_impl.py
from __future__ import annotations

import logging
import socket
from ipaddress import ip_address

LOG = logging.getLogger("adapter.slave_ip_resolver")


class SlaveIPResolver:
    def resolve(self, hostname: str) -> list[str]:
        host = hostname.strip()
        if not host:
            return []
        try:
            ip_address(host)  # already an address
            return [host]
        except ValueError:
            pass

        try:
            infos = socket.getaddrinfo(host, None, type=socket.SOCK_STREAM)
        except (OSError, UnicodeError) as e:
            LOG.warning("slave host lookup failed", extra={"extra": {"host": host, "error": str(e)}})
            return []

        v4: list[str] = []
        v6: list[str] = []
        for family, _, _, _, sockaddr in infos:
            addr = str(sockaddr[0]).split("%", 1)[0]
            bucket = v4 if family == socket.AF_INET else v6
            if addr not in bucket:
                bucket.append(addr)
        return v4 + v6
