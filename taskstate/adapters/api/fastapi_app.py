# /taskstate/adapters/api/fastapi_app.py
from __future__ import annotations
import logging
from dataclasses import asdict

from fastapi import FastAPI, Header, HTTPException, Query
from pydantic import ValidationError

from taskstate.config import settings
from taskstate.adapters.system.file_state_source import FileStateSource
from taskstate.adapters.system.logging_cfg import configure_logger
from taskstate.adapters.system.slave_ip_resolver_impl import SlaveIPResolver
from taskstate.domain.state_service import StateService
from taskstate.domain.upid import UPIDError

LOG = logging.getLogger("adapter.api")
app = FastAPI(title="taskstate")
configure_logger(settings.LOG_LEVEL)

_service: StateService | None = None


def _get_service() -> StateService:
    global _service
    if _service is None:
        _service = StateService(
            source=FileStateSource(settings.STATE_PATH),
            resolver=SlaveIPResolver(),
            ip_sources=settings.IP_SOURCES,
        )
    return _service


def _check_key(x_api_key: str | None) -> None:
    if settings.API_KEY and x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="invalid api key")


def _unavailable(e: Exception) -> HTTPException:
    if isinstance(e, FileNotFoundError):
        LOG.warning("state.missing", extra={"extra": {"error": str(e)}})
        return HTTPException(status_code=503, detail=str(e))
    LOG.warning("state.invalid", extra={"extra": {"error": str(e)}})
    return HTTPException(status_code=502, detail=str(e))


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/tasks")
def list_tasks(
    source: list[str] | None = Query(default=None),
    x_api_key: str | None = Header(default=None),
) -> list[dict]:
    _check_key(x_api_key)
    try:
        records = _get_service().tasks(source)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        raise _unavailable(e) from e
    return [asdict(r) for r in records]


@app.get("/tasks/{task_id}")
def get_task(
    task_id: str,
    source: list[str] | None = Query(default=None),
    x_api_key: str | None = Header(default=None),
) -> dict:
    _check_key(x_api_key)
    try:
        record = _get_service().task(task_id, source)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        raise _unavailable(e) from e
    if record is None:
        raise HTTPException(status_code=404, detail="task not found")
    return asdict(record)


@app.get("/frameworks/{name}")
def get_framework(name: str, x_api_key: str | None = Header(default=None)) -> dict:
    _check_key(x_api_key)
    try:
        hp = _get_service().framework_host_port(name)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        raise _unavailable(e) from e
    if hp is None:
        raise HTTPException(status_code=404, detail="framework not found")
    host, port = hp
    return {"name": name, "host": host, "port": port}


@app.get("/leader")
def get_leader(x_api_key: str | None = Header(default=None)) -> dict:
    _check_key(x_api_key)
    try:
        leader = _get_service().leader()
    except UPIDError as e:
        LOG.warning("leader.invalid", extra={"extra": {"error": str(e)}})
        raise HTTPException(status_code=502, detail=f"invalid leader: {e}") from e
    except (FileNotFoundError, ValidationError, ValueError) as e:
        raise _unavailable(e) from e
    if leader is None:
        raise HTTPException(status_code=404, detail="no leader in state")
    return {"id": leader.id, "host": leader.host, "port": leader.port}
