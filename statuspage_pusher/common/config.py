from __future__ import annotations

import math
import os
import re
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "PROM_SP_PUSHER_"

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def load_env_file() -> Optional[Path]:
    """Load a dotenv file if present. Real environment variables win."""
    env_file = Path(os.getenv(f"{ENV_PREFIX}ENV_FILE", ".env"))
    if env_file.exists():
        load_dotenv(env_file, override=False)
        return env_file
    return None


def env_name(flag: str) -> str:
    """Environment variable backing a flag: --sp-token -> PROM_SP_PUSHER_SP_TOKEN."""
    return ENV_PREFIX + flag.lstrip("-").replace("-", "_").upper()


def env_default(flag: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(env_name(flag), default)


def env_flag(flag: str, default: bool = False) -> bool:
    value = env_default(flag)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def parse_duration(value: str | float | int) -> float:
    """Parse a duration into seconds.

    Accepts plain numbers (seconds) and Go-style strings such as
    ``30s``, ``1m30s``, ``500ms`` or ``1h``.
    """
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = value.strip()
        try:
            seconds = float(text)
        except ValueError:
            seconds = _parse_duration_string(text)
    if not math.isfinite(seconds):
        raise ValueError(f"duration must be finite: {value!r}")
    if seconds < 0:
        raise ValueError(f"negative duration: {value!r}")
    return seconds


def _parse_duration_string(text: str) -> float:
    sign = 1.0
    if text[:1] in ("+", "-"):
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if not text:
        raise ValueError("empty duration")

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if not match:
            raise ValueError(f"invalid duration: {text!r}")
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    return sign * total


def parse_listen_address(addr: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts. An empty host binds every interface."""
    host, sep, port = addr.strip().rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address: {addr!r}")
    host = host.strip("[]") or "0.0.0.0"
    port_number = int(port)
    if not 0 <= port_number <= 65535:
        raise ValueError(f"port out of range: {addr!r}")
    return host, port_number


def expand_path(path: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(path)))
