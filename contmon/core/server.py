#!/usr/bin/env python3
"""
contmon application factory
"""

import logging
from typing import Optional

from fastapi import FastAPI

from .. import __version__
from ..manager import ContainerManager, LocalManager
from ..metrics import MetricsExporter
from ..web import Mux, register_all
from .config import ServerConfig

logger = logging.getLogger("contmon.server")


def create_app(config: ServerConfig, manager: Optional[ContainerManager] = None,
               exporter: Optional[MetricsExporter] = None) -> FastAPI:
    """Build the FastAPI app with every endpoint group registered.

    Raises RegistrationError if any fatal registration stage fails.
    """
    app = FastAPI(title="contmon", version=__version__, docs_url=None, redoc_url=None, openapi_url=None)
    manager = manager if manager is not None else LocalManager()

    register_all(
        Mux(app),
        manager,
        http_auth_file=config.http_auth_file,
        http_auth_realm=config.http_auth_realm,
        http_digest_file=config.http_digest_file,
        http_digest_realm=config.http_digest_realm,
        prometheus_endpoint=config.prometheus_endpoint,
        exporter=exporter,
    )
    app.state.manager = manager
    logger.info(f"contmon {__version__} handlers registered")
    return app
