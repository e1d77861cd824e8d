# /taskstate/domain/state.py
"""
Decoded view of the orchestrator's /state document.

Models ignore unknown keys and treat ``null`` like a missing key (a ``null``
list entry becomes a zero-valued element), so older and newer snapshot
shapes decode into the same types. They are frozen once validated; the only
out-of-band data is a task's slave IPs, attached with ``Task.with_slave_ips``.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    InstanceOf,
    PrivateAttr,
    field_validator,
    model_validator,
)

from taskstate.domain.upid import UPID, parse_upid

LOG = logging.getLogger("domain.state")

TASK_RUNNING = "TASK_RUNNING"

_PORT_NUM = re.compile(r"[+-]?[0-9]+")


def _atoi(s: str) -> int:
    if not _PORT_NUM.fullmatch(s):
        raise ValueError(f"invalid port number {s!r}")
    return int(s)


def expand_port_ranges(port_ranges: str) -> list[str]:
    """Expand ``[31000-31001, 32000-32000]`` into individual ports."""
    text = port_ranges.strip()
    if text in ("", "[]"):
        return []

    inner = text.partition("[")[2] or text
    inner = inner.partition("]")[0]

    ports: list[str] = []
    for chunk in inner.split(","):
        chunk = chunk.strip()
        lo_s, sep, hi_s = chunk.partition("-")
        try:
            if not sep:
                raise ValueError(f"missing '-' in port range {chunk!r}")
            lo, hi = _atoi(lo_s), _atoi(hi_s)
        except ValueError as e:
            LOG.error("ports.range_invalid", extra={"extra": {"range": chunk, "error": str(e)}})
            continue
        ports.extend(str(p) for p in range(lo, hi + 1))
    return ports


def pid_from_raw(raw: Any) -> UPID | None:
    """Decode hook for PID fields: strip quotes/blanks, then parse."""
    if raw is None or isinstance(raw, UPID):
        return raw
    if not isinstance(raw, str):
        raise ValueError(f"pid must be a string, got {type(raw).__name__}")
    return parse_upid(raw.strip('" \t\r\n'))


class StateModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: [{} if item is None else item for item in v] if isinstance(v, list) else v
                for k, v in data.items()
                if v is not None
            }
        return data


class Label(StateModel):
    key: str = ""
    value: str = ""


class Resources(StateModel):
    port_ranges: str = Field(default="", alias="ports")

    def ports(self) -> list[str]:
        return expand_port_ranges(self.port_ranges)


class IPAddress(StateModel):
    ip_address: str = ""


class PortMapping(StateModel):
    protocol: str = ""
    host_port: int = 0
    container_port: int = 0


class NetworkInfo(StateModel):
    ip_addresses: list[IPAddress] = Field(default_factory=list)
    port_mappings: list[PortMapping] = Field(default_factory=list)
    # single-address shape used by older masters
    ip_address: str = ""


class ContainerStatus(StateModel):
    network_infos: list[NetworkInfo] = Field(default_factory=list)


class Status(StateModel):
    timestamp: float = 0.0
    state: str = ""
    labels: list[Label] = Field(default_factory=list)
    container_status: ContainerStatus = Field(default_factory=ContainerStatus)


class DiscoveryPort(StateModel):
    protocol: str = ""
    number: int = 0
    name: str = ""


class DiscoveryLabels(StateModel):
    labels: list[Label] = Field(default_factory=list)


class DiscoveryPorts(StateModel):
    ports: list[DiscoveryPort] = Field(default_factory=list)


class DiscoveryInfo(StateModel):
    visibility: str = ""
    version: str = ""
    name: str = ""
    location: str = ""
    environment: str = ""
    labels: DiscoveryLabels = Field(default_factory=DiscoveryLabels)
    ports: DiscoveryPorts = Field(default_factory=DiscoveryPorts)


class Task(StateModel):
    framework_id: str = ""
    id: str = ""
    name: str = ""
    slave_id: str = ""
    state: str = ""
    statuses: list[Status] = Field(default_factory=list)
    resources: Resources = Field(default_factory=Resources)
    discovery: DiscoveryInfo = Field(default_factory=DiscoveryInfo)

    # ipv4, ipv6 or both; never read from the document
    _slave_ips: list[str] = PrivateAttr(default_factory=list)

    @property
    def slave_ips(self) -> list[str]:
        return list(self._slave_ips)

    @property
    def has_discovery_info(self) -> bool:
        return self.discovery.name != ""

    def ports(self) -> list[str]:
        return self.resources.ports()

    def with_slave_ips(self, ips: Iterable[str]) -> Task:
        task = self.model_copy()
        task._slave_ips = list(ips)
        return task


class Framework(StateModel):
    tasks: list[Task] = Field(default_factory=list)
    pid: InstanceOf[UPID] | None = None
    name: str = ""
    hostname: str = ""

    @field_validator("pid", mode="before")
    @classmethod
    def _decode_pid(cls, v: Any) -> UPID | None:
        return pid_from_raw(v)

    def host_port(self) -> tuple[str, str]:
        """Where the framework's scheduler listens."""
        if self.pid is not None:
            return self.pid.host, self.pid.port
        return self.hostname, ""


class Slave(StateModel):
    id: str = ""
    hostname: str = ""
    pid: InstanceOf[UPID] | None = None

    @field_validator("pid", mode="before")
    @classmethod
    def _decode_pid(cls, v: Any) -> UPID | None:
        return pid_from_raw(v)


class State(StateModel):
    frameworks: list[Framework] = Field(default_factory=list)
    slaves: list[Slave] = Field(default_factory=list)
    leader: str = ""

    def tasks(self) -> Iterable[tuple[Framework, Task]]:
        for fw in self.frameworks:
            for task in fw.tasks:
                yield fw, task
