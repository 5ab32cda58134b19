#!/usr/bin/env python3
"""
contmon server entry point

Loads the YAML config, applies command line overrides, registers all HTTP
handlers and serves them with uvicorn. Exits non-zero if registration fails.
"""

import argparse
import logging
import sys

import uvicorn

from .core.config import apply_overrides, load_config_from
from .core.server import create_app
from .web import RegistrationError

logger = logging.getLogger("contmon.server")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="contmon server")
    parser.add_argument("-c", "--config", help="Path to YAML config", default="config.yaml")
    parser.add_argument("--host", help="Address to listen on")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--http-auth-file", dest="http_auth_file", help="HTTP auth file for the web UI (htpasswd)")
    parser.add_argument("--http-auth-realm", dest="http_auth_realm", help="HTTP auth realm for the web UI")
    parser.add_argument("--http-digest-file", dest="http_digest_file", help="HTTP digest file for the web UI (htdigest)")
    parser.add_argument("--http-digest-realm", dest="http_digest_realm", help="HTTP digest realm for the web UI")
    parser.add_argument("--prometheus-endpoint", dest="prometheus_endpoint", help="Endpoint to expose Prometheus metrics on")
    return parser


def main(argv=None):
    """Main entry point for contmon server."""
    args = build_parser().parse_args(argv)

    overrides = vars(args)
    config_path = overrides.pop("config")
    config = apply_overrides(load_config_from(config_path), overrides)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app = create_app(config)
    except RegistrationError as e:
        logger.error(f"Startup aborted: {e}")
        sys.exit(1)

    uvicorn.run(app, host=config.host, port=config.port, reload=False, access_log=False)


if __name__ == "__main__":
    main()
