#!/usr/bin/env python3
"""
Dashboard Pages - container overview rendered with Jinja2 templates

Pages take an optional authenticated user; with no authenticator configured the
identity dependency always yields None.
"""

import logging
import time
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..auth import Authenticator, identity_dependency
from ..manager import ContainerManager, ContainerNotFound
from .filters import setup_template_filters

logger = logging.getLogger("contmon.server")

CONTAINERS_PAGE = "/containers/"
TEMPLATE_DIR = Path(__file__).parent / "templates"


def create_page_routes(manager: ContainerManager, authenticator: Optional[Authenticator]) -> APIRouter:
    """Create dashboard page routes protected by authenticator (None = open)."""
    router = APIRouter()
    templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
    setup_template_filters(templates)
    current_user = identity_dependency(authenticator)

    @router.get(CONTAINERS_PAGE + "{subpath:path}", response_class=HTMLResponse)
    def containers_page(subpath: str, request: Request, user: Optional[str] = Depends(current_user)):
        """Container page; the URL below /containers/ is the container name."""
        name = "/" + subpath.strip("/")
        logger.debug(f"Rendering container page for {name}")

        try:
            container = manager.container_info(name)
        except ContainerNotFound:
            return templates.TemplateResponse(request, "containers.html", {
                "page_title": f"contmon - {name}",
                "error": f"unknown container {name!r}",
                "user": user,
                "timestamp": int(time.time()),
            }, status_code=404)

        return templates.TemplateResponse(request, "containers.html", {
            "page_title": f"contmon - {name}",
            "container": container,
            "machine": manager.machine_info(),
            "subcontainers": [n for n in manager.container_names() if n != name],
            "user": user,
            "timestamp": int(time.time()),
        })

    return router


def register_handlers(mux, manager: ContainerManager, authenticator: Optional[Authenticator]) -> None:
    """Register dashboard pages on mux under the given authenticator."""
    if manager is None:
        raise ValueError("page handlers require a container manager")
    mux.include_router(create_page_routes(manager, authenticator))
