# tests/test_slave_ip_resolver.py
import socket

from taskstate.adapters.system.slave_ip_resolver_impl import SlaveIPResolver


def test_ip_literal_is_returned_as_is():
    r = SlaveIPResolver()
    assert r.resolve("10.0.0.1") == ["10.0.0.1"]
    assert r.resolve(" fd00::1 ") == ["fd00::1"]
    assert r.resolve("") == []


def test_hostname_lookup_orders_v4_first(monkeypatch):
    def fake_getaddrinfo(host, port, *args, **kwargs):
        assert host == "agent-1"
        return [
            (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("fd00::2", 0, 0, 0)),
            (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("10.0.0.2", 0)),
            (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("10.0.0.2", 0)),
        ]

    monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)
    assert SlaveIPResolver().resolve("agent-1") == ["10.0.0.2", "fd00::2"]


def test_lookup_failure_yields_nothing(monkeypatch):
    def boom(*args, **kwargs):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr(socket, "getaddrinfo", boom)
    assert SlaveIPResolver().resolve("nowhere") == []
