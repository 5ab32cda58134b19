#!/usr/bin/env python3
"""
contmon Server Configuration Management

Sources, lowest priority first:
- defaults declared on ServerConfig
- YAML config file (missing file -> defaults)
- command line flags (only flags explicitly given override the file)

HTTP authentication:
- http_auth_file set     -> Basic auth (htpasswd), wins over digest
- http_digest_file set   -> Digest auth (htdigest)
- neither                -> static assets and pages are unauthenticated
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel

logger = logging.getLogger("contmon.server")


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    # HTTP authentication for static assets and dashboard pages
    http_auth_file: str = ""
    http_auth_realm: str = "localhost"
    http_digest_file: str = ""
    http_digest_realm: str = "localhost"
    # Scrape path for the Prometheus exposition endpoint
    prometheus_endpoint: str = "/metrics"


def load_config_from(path: Optional[str]) -> ServerConfig:
    """Load server configuration from YAML file, defaults if the file is absent."""
    if not path or not Path(path).exists():
        logger.info(f"Config file not found ({path}), using defaults")
        return ServerConfig()

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    logger.info(f"Loaded configuration from: {path}")
    return ServerConfig(**data)


def apply_overrides(cfg: ServerConfig, overrides: Dict[str, Any]) -> ServerConfig:
    """Return a copy of cfg with every non-None override applied."""
    updates = {k: v for k, v in overrides.items() if v is not None and k in ServerConfig.model_fields}
    if not updates:
        return cfg
    return cfg.model_copy(update=updates)
