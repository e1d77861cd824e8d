# /taskstate/domain/upid.py
from __future__ import annotations

import socket
from dataclasses import dataclass


class UPIDError(ValueError):
    """Raised when a peer identifier cannot be parsed."""


@dataclass(frozen=True, slots=True)
class UPID:
    """Process address of the form ``id@host:port``."""

    id: str
    host: str
    port: str

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.id}@{host}:{self.port}"


def split_host_port(hostport: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[v6host]:port`` into its two parts."""
    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise UPIDError(f"missing ']' in address {hostport!r}")
        host, rest = hostport[1:end], hostport[end + 1 :]
        if not rest.startswith(":"):
            raise UPIDError(f"missing port in address {hostport!r}")
        port = rest[1:]
    else:
        host, sep, port = hostport.rpartition(":")
        if not sep:
            raise UPIDError(f"missing port in address {hostport!r}")
        if ":" in host:
            raise UPIDError(f"too many colons in address {hostport!r}")
    if not port:
        raise UPIDError(f"missing port in address {hostport!r}")
    return host, port


def parse_upid(text: str) -> UPID:
    splits = text.split("@")
    if len(splits) != 2:
        raise UPIDError(f"expected exactly one '@' in {text!r}")
    pid, hostport = splits

    host, port = split_host_port(hostport)
    if port.isascii() and port.isdigit() and int(port) > 65535:
        raise UPIDError(f"invalid port in address {hostport!r}")
    # getaddrinfo accepts both address families and numeric or named ports
    try:
        socket.getaddrinfo(host, port, type=socket.SOCK_STREAM, proto=socket.IPPROTO_TCP)
    except (OSError, UnicodeError) as e:
        raise UPIDError(f"cannot resolve {hostport!r}: {e}") from e

    return UPID(id=pid, host=host, port=port)
