# /taskstate/domain/ip_sources.py
"""
Task IP resolution.

Each source is a plain function ``Task -> list[str]``. ``IPResolver`` walks the
requested sources in order, concatenates their candidates and keeps the ones
that parse as IPv4/IPv6 addresses.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from ipaddress import IPv4Address, IPv6Address, ip_address
from types import MappingProxyType

from taskstate.domain.state import TASK_RUNNING, Status, Task

LOG = logging.getLogger("domain.ip_sources")

IPSourceFn = Callable[[Task], list[str]]
IP = IPv4Address | IPv6Address

# Label keys holding the container IP for each containerizer
DOCKER_IP_LABEL = "Docker.NetworkSettings.IPAddress"
MESOS_IP_LABEL = "MesosContainerizer.NetworkSettings.IPAddress"


class IPSource(str, Enum):
    HOST = "host"
    MESOS = "mesos"
    DOCKER = "docker"
    NETINFO = "netinfo"


def running_status(statuses: Sequence[Status]) -> Status | None:
    """Latest TASK_RUNNING status by timestamp; first one wins on a tie."""
    # statuses come in no particular order, so the last one is not the latest
    ts, latest = -1.0, None
    for st in statuses:
        if st.state == TASK_RUNNING and st.timestamp > ts:
            ts, latest = st.timestamp, st
    return latest


def status_ips(statuses: Sequence[Status], extract: Callable[[Status], list[str]]) -> list[str]:
    st = running_status(statuses)
    if st is None:
        return []
    return extract(st)


def label_values(key: str) -> Callable[[Status], list[str]]:
    def extract(st: Status) -> list[str]:
        return [lbl.value for lbl in st.labels if lbl.key == key]

    return extract


def network_info_addresses(st: Status) -> list[str]:
    ips: list[str] = []
    for netinfo in st.container_status.network_infos:
        if netinfo.ip_addresses:
            ips.extend(a.ip_address for a in netinfo.ip_addresses)
        elif netinfo.ip_address:
            ips.append(netinfo.ip_address)
    return ips


def host_ips(task: Task) -> list[str]:
    return task.slave_ips


def mesos_ips(task: Task) -> list[str]:
    return status_ips(task.statuses, label_values(MESOS_IP_LABEL))


def docker_ips(task: Task) -> list[str]:
    return status_ips(task.statuses, label_values(DOCKER_IP_LABEL))


def network_info_ips(task: Task) -> list[str]:
    return status_ips(task.statuses, network_info_addresses)


DEFAULT_SOURCES: Mapping[str, IPSourceFn] = MappingProxyType(
    {
        IPSource.HOST.value: host_ips,
        IPSource.MESOS.value: mesos_ips,
        IPSource.DOCKER.value: docker_ips,
        IPSource.NETINFO.value: network_info_ips,
    }
)


class IPResolver:
    """Resolves task IPs through a fixed registry of named sources."""

    def __init__(self, sources: Mapping[str, IPSourceFn] = DEFAULT_SOURCES) -> None:
        self._sources: Mapping[str, IPSourceFn] = MappingProxyType(dict(sources))

    @property
    def source_names(self) -> list[str]:
        return list(self._sources)

    def ips(self, task: Task | None, *srcs: str) -> list[IP]:
        """IPs from the given sources, in the order the sources were given."""
        if task is None:
            return []
        out: list[IP] = []
        for name in srcs:
            key = name.value if isinstance(name, IPSource) else name
            src = self._sources.get(key)
            if src is None:
                continue
            for candidate in src(task):
                try:
                    out.append(ip_address(candidate))
                except ValueError:
                    LOG.debug(
                        "ip.unparsable",
                        extra={"extra": {"task": task.id, "source": key, "value": candidate}},
                    )
        return out

    def ip(self, task: Task | None, *srcs: str) -> str:
        ips = self.ips(task, *srcs)
        return str(ips[0]) if ips else ""


_default_resolver = IPResolver()


def task_ips(task: Task | None, *srcs: str) -> list[IP]:
    return _default_resolver.ips(task, *srcs)


def task_ip(task: Task | None, *srcs: str) -> str:
    return _default_resolver.ip(task, *srcs)


def map_port(task: Task, host_port: int) -> int:
    """Container port mapped to host_port, or host_port itself."""
    if not task.statuses:
        return host_port
    for netinfo in task.statuses[0].container_status.network_infos:
        for pm in netinfo.port_mappings:
            if pm.host_port == host_port:
                return pm.container_port
    return host_port
