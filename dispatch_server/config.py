"""
Server configuration from environment variables.

Environment Variables:
    DISPATCH_HOST: Listen address - default: 0.0.0.0
    PORT: Listen port - default: 4000
    DISPATCH_DATA_FILE: Snapshot path - default: ./data.json
    DISPATCH_CORS_ORIGINS: Comma-separated allowed origins - default: *
    DISPATCH_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR - default: INFO
    DISPATCH_LOG_FORMAT: json, text - default: json
    METRICS_ENABLED: Start the Prometheus exporter (true/false) - default: false
    METRICS_PORT: Exporter port - default: 8080
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import List, Optional, Union


def _env_int(key: str, default: int) -> int:
    val = os.getenv(key)
    if not val:
        return default
    try:
        parsed = int(val)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _env_origins(key: str) -> Union[str, List[str]]:
    raw = os.getenv(key, "*").strip()
    if not raw or raw == "*":
        return "*"
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 4000
    data_file: str = "data.json"
    cors_origins: Union[str, List[str]] = "*"
    log_level: str = "INFO"
    log_format: str = "json"
    metrics_enabled: bool = False
    metrics_port: int = 8080

    @staticmethod
    def from_env() -> "ServerConfig":
        return ServerConfig(
            host=os.getenv("DISPATCH_HOST", "0.0.0.0"),
            port=_env_int("PORT", 4000),
            data_file=os.getenv("DISPATCH_DATA_FILE", "data.json"),
            cors_origins=_env_origins("DISPATCH_CORS_ORIGINS"),
            log_level=os.getenv("DISPATCH_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("DISPATCH_LOG_FORMAT", "json").lower(),
            metrics_enabled=os.getenv("METRICS_ENABLED", "false").lower() == "true",
            metrics_port=_env_int("METRICS_PORT", 8080),
        )

    def with_overrides(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        data_file: Optional[str] = None,
    ) -> "ServerConfig":
        """Return a copy with the given non-None fields replaced (CLI flags)."""
        changes = {}
        if host is not None:
            changes["host"] = host
        if port is not None:
            changes["port"] = port
        if data_file is not None:
            changes["data_file"] = data_file
        return replace(self, **changes)
