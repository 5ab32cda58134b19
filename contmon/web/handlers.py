#!/usr/bin/env python3
"""
HTTP handler registration for the contmon daemon

register_all() wires every endpoint group onto one Mux in a fixed order:

    /healthz      liveness
    /validate/    plain-text debug dump (errors rendered into the body)
    /api/...      JSON API
    /             307 -> /containers/
    /static/      assets      } protected by the selected authenticator
    /containers/  pages       } (Basic wins over Digest; none if unset)
    <metrics>     Prometheus scrape endpoint

The first fatal failure aborts with RegistrationError; routes registered
before it stay in place.
"""

import logging
from typing import Optional

from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response

from .. import api, healthz, pages, validate
from ..auth import Authenticator, describe_strategy, select_authenticator
from ..manager import ContainerManager
from ..metrics import MetricsExporter, get_exporter
from ..pages import static
from .mux import SUBPATH_PARAM, Mux

logger = logging.getLogger("contmon.server")


class RegistrationError(Exception):
    """A fatal endpoint group registration failure; startup must abort."""

    def __init__(self, stage: str, cause: Exception):
        super().__init__(f"failed to register {stage} handlers: {cause}")
        self.stage = stage
        self.cause = cause


def render_error(error: Exception, status_code: int = 500) -> Response:
    """Diagnostic rendering: the error text as a plain-text body."""
    return PlainTextResponse(f"{error}", status_code=status_code)


def static_handler(request: Request, user: Optional[str] = None) -> Response:
    """Serve a bundled asset; user is set when an authenticator let the request through."""
    try:
        return static.handle_request(request.path_params.get(SUBPATH_PARAM, ""))
    except static.StaticResourceError as e:
        return render_error(e, status_code=404)


def register_all(mux: Mux, container_manager: ContainerManager,
                 http_auth_file: str = "", http_auth_realm: str = "localhost",
                 http_digest_file: str = "", http_digest_realm: str = "localhost",
                 prometheus_endpoint: str = "/metrics",
                 exporter: Optional[MetricsExporter] = None) -> None:
    """Register every endpoint group; raise RegistrationError on the first fatal failure."""
    # Liveness
    try:
        healthz.register_handler(mux, container_manager)
    except Exception as e:
        raise RegistrationError("healthz", e) from e

    # Assigned once the strategy is selected below; read by the validation page per request.
    authenticator = None

    # Debug dump; errors are shown in the page, never raised
    def validate_handler(request: Request) -> Response:
        try:
            return PlainTextResponse(validate.handle_request(container_manager, describe_strategy(authenticator)))
        except validate.ValidationError as e:
            logger.warning(f"Validation page error: {e}")
            return render_error(e)

    mux.handle(validate.VALIDATE_PAGE, validate_handler)

    # JSON API
    try:
        api.register_handlers(mux, container_manager)
    except Exception as e:
        raise RegistrationError("API", e) from e

    # Root always lands on the dashboard
    mux.handle("/", lambda request: RedirectResponse(pages.CONTAINERS_PAGE, status_code=307))

    authenticator = select_authenticator(http_auth_file, http_auth_realm, http_digest_file, http_digest_realm)
    register_protected(mux, container_manager, authenticator)

    # Scrape endpoint on the same mux as everything else
    exporter = exporter if exporter is not None else get_exporter()
    try:
        exporter.install(container_manager)
        mux.handle(prometheus_endpoint, exporter.scrape)
    except Exception as e:
        raise RegistrationError("metrics", e) from e
    logger.info(f"Prometheus metrics exposed at {prometheus_endpoint}")


def register_protected(mux: Mux, container_manager: ContainerManager,
                       authenticator: Optional[Authenticator]) -> None:
    """Register static assets and pages behind authenticator (None = unauthenticated)."""
    if authenticator is None:
        mux.handle(static.STATIC_RESOURCE, static_handler)
        stage = "pages"
    else:
        mux.handle(static.STATIC_RESOURCE, authenticator.wrap(static_handler))
        stage = f"pages {authenticator.auth_type}"

    try:
        pages.register_handlers(mux, container_manager, authenticator)
    except Exception as e:
        raise RegistrationError(stage, e) from e
