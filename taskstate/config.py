# /taskstate/config.py
from __future__ import annotations

import os

from pydantic import BaseModel


class Settings(BaseModel):
    API_KEY: str | None = os.getenv("API_KEY")

    # Snapshot
    STATE_PATH: str = os.getenv("STATE_PATH", "./data/state.json")

    # IP resolution order, comma separated (host, mesos, docker, netinfo)
    IP_SOURCES: list[str] = [
        s.strip() for s in os.getenv("IP_SOURCES", "netinfo,mesos,host").split(",") if s.strip()
    ]

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
