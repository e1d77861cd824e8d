# /taskstate/domain/state_service.py
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from taskstate.adapters.system.logging_cfg import configure_logger
from taskstate.config import settings
from taskstate.domain.ip_sources import IPResolver, map_port
from taskstate.domain.state import Framework, State, Task
from taskstate.domain.upid import UPID, parse_upid
from taskstate.ports.slave_ip_resolver import SlaveIPResolverPort
from taskstate.ports.state_source import StateSourcePort

LOG = logging.getLogger("state_service")
configure_logger(settings.LOG_LEVEL)

# ==== DTOs ====


@dataclass(slots=True)
class PortDTO:
    host_port: int
    container_port: int


@dataclass(slots=True)
class TaskRecordDTO:
    framework: str
    task_id: str
    name: str
    slave_id: str
    state: str
    ip: str
    ips: list[str] = field(default_factory=list)
    ports: list[PortDTO] = field(default_factory=list)
    has_discovery_info: bool = False


# ==== Service ====


class StateService:
    """Answers task network queries over injected snapshot/lookup ports."""

    def __init__(
        self,
        source: StateSourcePort,
        resolver: SlaveIPResolverPort,
        *,
        ip_sources: Sequence[str],
        ip_resolver: IPResolver | None = None,
    ) -> None:
        self.source = source
        self.resolver = resolver
        self.ip_sources = list(ip_sources)
        self.ip_resolver = ip_resolver or IPResolver()

    # --- helpers ---

    def _slave_ips(self, state: State) -> dict[str, list[str]]:
        by_host: dict[str, list[str]] = {}
        out: dict[str, list[str]] = {}
        for slave in state.slaves:
            if slave.hostname not in by_host:
                by_host[slave.hostname] = self.resolver.resolve(slave.hostname)
            out[slave.id] = by_host[slave.hostname]
        return out

    @staticmethod
    def _ports(task: Task) -> list[PortDTO]:
        out: list[PortDTO] = []
        for p in task.ports():
            hp = int(p)
            out.append(PortDTO(host_port=hp, container_port=map_port(task, hp)))
        return out

    def _record(self, fw: Framework, task: Task, sources: Sequence[str]) -> TaskRecordDTO:
        ips = [str(ip) for ip in self.ip_resolver.ips(task, *sources)]
        return TaskRecordDTO(
            framework=fw.name,
            task_id=task.id,
            name=task.name,
            slave_id=task.slave_id,
            state=task.state,
            ip=ips[0] if ips else "",
            ips=ips,
            ports=self._ports(task),
            has_discovery_info=task.has_discovery_info,
        )

    # --- entrypoints ---

    def snapshot(self) -> State:
        """Load and decode the snapshot, attaching each task's slave IPs."""
        state = State.model_validate(self.source.load())
        slave_ips = self._slave_ips(state)

        frameworks = [
            fw.model_copy(
                update={"tasks": [t.with_slave_ips(slave_ips.get(t.slave_id, [])) for t in fw.tasks]}
            )
            for fw in state.frameworks
        ]
        LOG.info(
            "state.decoded",
            extra={
                "extra": {
                    "leader": state.leader,
                    "frameworks": len(frameworks),
                    "slaves": len(state.slaves),
                }
            },
        )
        return state.model_copy(update={"frameworks": frameworks})

    def tasks(self, sources: Sequence[str] | None = None) -> list[TaskRecordDTO]:
        srcs = list(sources) if sources else self.ip_sources
        state = self.snapshot()
        return [self._record(fw, t, srcs) for fw, t in state.tasks()]

    def task(self, task_id: str, sources: Sequence[str] | None = None) -> TaskRecordDTO | None:
        srcs = list(sources) if sources else self.ip_sources
        for fw, t in self.snapshot().tasks():
            if t.id == task_id:
                return self._record(fw, t, srcs)
        return None

    def framework_host_port(self, name: str) -> tuple[str, str] | None:
        for fw in self.snapshot().frameworks:
            if fw.name == name:
                return fw.host_port()
        return None

    def leader(self) -> UPID | None:
        leader = self.snapshot().leader
        if not leader:
            return None
        return parse_upid(leader)
