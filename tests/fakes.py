# tests/fakes.py
from __future__ import annotations

import asyncio
import copy
from typing import Any


class FakeStateSource:
    def __init__(self, doc: dict[str, Any] | None = None, error: Exception | None = None):
        self.doc = doc or {}
        self.error = error
        self.loads = 0

    def load(self) -> dict[str, Any]:
        self.loads += 1
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.doc)


class FakeSlaveIPResolver:
    def __init__(self, hosts: dict[str, list[str]]):
        self.hosts = hosts
        self.calls: list[str] = []

    def resolve(self, hostname):
        self.calls.append(hostname)
        return list(self.hosts.get(hostname, []))


def status(state="TASK_RUNNING", ts=1.0, labels=None, network_infos=None) -> dict[str, Any]:
    return {
        "timestamp": ts,
        "state": state,
        "labels": labels or [],
        "container_status": {"network_infos": network_infos or []},
    }


def sample_state() -> dict[str, Any]:
    return {
        "leader": "master@10.0.0.1:5050",
        "slaves": [
            {"id": "s1", "hostname": "agent-1", "pid": "slave(1)@10.0.1.1:5051"},
            {"id": "s2", "hostname": "10.0.1.2", "pid": "slave(1)@10.0.1.2:5051"},
        ],
        "frameworks": [
            {
                "name": "marathon",
                "hostname": "sched-host",
                "pid": "scheduler-1@10.0.0.5:8080",
                "tasks": [
                    {
                        "framework_id": "fw1",
                        "id": "web.1",
                        "name": "web",
                        "slave_id": "s1",
                        "state": "TASK_RUNNING",
                        "resources": {"ports": "[31000-31001]"},
                        "discovery": {"name": "web", "visibility": "FRAMEWORK"},
                        "statuses": [
                            status(
                                ts=5.0,
                                labels=[
                                    {"key": "Docker.NetworkSettings.IPAddress", "value": "172.17.0.2"}
                                ],
                                network_infos=[
                                    {
                                        "ip_addresses": [{"ip_address": "192.168.0.9"}],
                                        "port_mappings": [
                                            {"host_port": 31000, "container_port": 80, "protocol": "tcp"}
                                        ],
                                    }
                                ],
                            )
                        ],
                    },
                    {
                        "framework_id": "fw1",
                        "id": "db.1",
                        "name": "db",
                        "slave_id": "s2",
                        "state": "TASK_STAGING",
                        "statuses": [],
                    },
                ],
            },
            {"name": "chronos", "hostname": "chronos-host", "tasks": []},
        ],
    }


class LoopCheckingStateSource(FakeStateSource):
    """Records whether load() ran on a thread with a running event loop."""

    def __init__(self, doc: dict[str, Any] | None = None):
        super().__init__(doc)
        self.on_loop: list[bool] = []

    def load(self) -> dict[str, Any]:
        try:
            asyncio.get_running_loop()
            self.on_loop.append(True)
        except RuntimeError:
            self.on_loop.append(False)
        return super().load()
