#!/usr/bin/env python3
"""
Authentication strategy selection

Precedence (first match wins):
1. htpasswd file configured -> Basic
2. htdigest file configured -> Digest
3. otherwise                -> None (unauthenticated)

Only the choice is made here; the credential file itself is read when the
strategy is first exercised.
"""

import logging
from typing import Optional

from .authenticators import (
    BASIC, DIGEST, Authenticator, BasicAuthenticator, CredentialSource, DigestAuthenticator,
)

logger = logging.getLogger("contmon.server")


def select_authenticator(http_auth_file: str, http_auth_realm: str,
                         http_digest_file: str, http_digest_realm: str) -> Optional[Authenticator]:
    """Pick the single authentication strategy for this process."""
    if http_auth_file:
        logger.info(f"Using auth file {http_auth_file}")
        return BasicAuthenticator(CredentialSource(BASIC, http_auth_file, http_auth_realm))

    if http_digest_file:
        logger.info(f"Using digest file {http_digest_file}")
        return DigestAuthenticator(CredentialSource(DIGEST, http_digest_file, http_digest_realm))

    logger.info("No HTTP authentication configured")
    return None


def describe_strategy(authenticator: Optional[Authenticator]) -> str:
    return authenticator.auth_type if authenticator is not None else "none"
