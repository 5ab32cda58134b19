#!/usr/bin/env python3
"""
Static assets (css/js) bundled with the dashboard pages
"""

import mimetypes
from pathlib import Path

from starlette.responses import Response

STATIC_RESOURCE = "/static/"
ASSET_DIR = Path(__file__).parent / "assets"


class StaticResourceError(Exception):
    """Requested asset does not exist or cannot be read."""


def handle_request(resource: str) -> Response:
    """Return the bundled asset named resource (path below /static/)."""
    name = resource.strip("/")
    assets = {p.name: p for p in ASSET_DIR.iterdir() if p.is_file()}
    # Only flat names from the bundle are served; no traversal outside ASSET_DIR
    if name not in assets:
        raise StaticResourceError(f"unknown static resource {resource!r}")

    try:
        content = assets[name].read_bytes()
    except OSError as e:
        raise StaticResourceError(f"failed to read static resource {name!r}: {e}") from e

    content_type, _ = mimetypes.guess_type(name)
    return Response(content, media_type=content_type or "application/octet-stream")
