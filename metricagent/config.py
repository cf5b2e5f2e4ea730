"""Agent settings read from the environment."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_SERVER_ADDRESS = "http://localhost:8080/update"
DEFAULT_POLL_INTERVAL = 2
DEFAULT_REPORT_INTERVAL = 10

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Config:
    """Where to report and how often to poll and report, in seconds."""

    server_addr: str = DEFAULT_SERVER_ADDRESS
    poll_interval: float = float(DEFAULT_POLL_INTERVAL)
    report_interval: float = float(DEFAULT_REPORT_INTERVAL)


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, "")
    if _INTEGER.fullmatch(raw):
        return int(raw)
    return default


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Read SERVER_ADDRESS, POLL_INTERVAL and REPORT_INTERVAL, falling back to defaults."""
    env = os.environ if environ is None else environ
    return Config(
        server_addr=env.get("SERVER_ADDRESS", DEFAULT_SERVER_ADDRESS),
        poll_interval=float(_env_int(env, "POLL_INTERVAL", DEFAULT_POLL_INTERVAL)),
        report_interval=float(_env_int(env, "REPORT_INTERVAL", DEFAULT_REPORT_INTERVAL)),
    )