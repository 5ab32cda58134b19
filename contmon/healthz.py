#!/usr/bin/env python3
"""
Liveness endpoint
"""

import logging
from typing import Optional

from starlette.requests import Request
from starlette.responses import PlainTextResponse

from .manager import ContainerManager

logger = logging.getLogger("contmon.server")

HEALTHZ_PATH = "/healthz"


def register_handler(mux, manager: Optional[ContainerManager] = None) -> None:
    """Register GET /healthz; with a manager, also probe it on every request."""

    def healthz(request: Request) -> PlainTextResponse:
        if manager is not None:
            try:
                manager.health_check()
            except Exception as e:
                logger.error(f"Health check failed: {e}")
                return PlainTextResponse(f"unhealthy: {e}", status_code=503)
        return PlainTextResponse("ok")

    mux.handle(HEALTHZ_PATH, healthz)
