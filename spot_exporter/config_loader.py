# spot_exporter/config_loader.py
import os
import yaml
from pathlib import Path

RUNTIME_CONFIG_PATH = Path("config/runtime.yaml")

DEFAULTS = {
    "listen_address": ":9190",
    "metrics_path": "/metrics",
    "session_region": "eu-west-1",
    "aws_profile": None,
    "log_level": "INFO",
    "connect_timeout": None,
    "read_timeout": None,
}


def _as_float(value):
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise SystemExit(f"Invalid timeout value: {value!r}")


def load_runtime_config(path=None):
    """
    Loads runtime configuration for the exporter.
    Priority:
      1) Environment variables
      2) config/runtime.yaml (if present)
      3) Built-in defaults
    """
    cfg = {}
    path = Path(path) if path else RUNTIME_CONFIG_PATH

    if path.exists():
        with open(path) as f:
            cfg = yaml.safe_load(f) or {}

    def pick(env, key):
        value = os.getenv(env)
        if value is None:
            value = cfg.get(key)
        if value is None:
            value = DEFAULTS[key]
        return value

    return {
        "listen_address": pick("LISTEN_ADDRESS", "listen_address"),
        "metrics_path": pick("METRICS_PATH", "metrics_path"),
        "session_region": pick("AWS_SESSION_REGION", "session_region"),
        "aws_profile": pick("AWS_PROFILE", "aws_profile"),
        "log_level": str(pick("LOG_LEVEL", "log_level")).upper(),
        "connect_timeout": _as_float(pick("AWS_CONNECT_TIMEOUT", "connect_timeout")),
        "read_timeout": _as_float(pick("AWS_READ_TIMEOUT", "read_timeout")),
        "raw": cfg,
    }


def parse_listen_address(address):
    """Split a ":9190" / "127.0.0.1:9190" style address into (host, port)."""
    host, sep, port = str(address).rpartition(":")
    if not sep or not port.isdigit():
        raise SystemExit(f"Invalid listen address: {address!r}")
    return host or "0.0.0.0", int(port)
