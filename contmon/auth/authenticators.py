#!/usr/bin/env python3
"""
HTTP authenticators for protected endpoint groups

An Authenticator verifies a request against a credential file and exposes the
same handler in two shapes:
- wrap(handler)        -> Starlette endpoint calling handler(request, user)
- require_user(request) -> FastAPI dependency returning the username

Handlers are written once as handler(request, user=None); the unauthenticated
path calls them with the request only.
"""

import base64
import functools
import hashlib
import hmac
import logging
import secrets
import time
from dataclasses import dataclass
from secrets import compare_digest
from typing import Callable, Dict, Optional, Tuple
from urllib.request import parse_http_list, parse_keqv_list

from fastapi import HTTPException, status
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from ..core.audit import audit_logger
from .providers import HtdigestFileProvider, HtpasswdFileProvider

logger = logging.getLogger("contmon.server")

Handler = Callable[..., Response]

BASIC = "basic"
DIGEST = "digest"


@dataclass(frozen=True)
class CredentialSource:
    kind: str
    file_path: str
    realm: str


class Authenticator:
    """Base class: subclasses implement authenticate() and challenge_headers()."""

    auth_type = ""

    def __init__(self, source: CredentialSource) -> None:
        self.source = source
        self.realm = source.realm

    def authenticate(self, request: Request) -> Optional[str]:
        """Return the authenticated username, or None to reject."""
        raise NotImplementedError

    def challenge_headers(self, request: Request) -> Dict[str, str]:
        raise NotImplementedError

    def challenge(self, request: Request) -> Response:
        return PlainTextResponse(
            "401 Unauthorized\n",
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers=self.challenge_headers(request),
        )

    def wrap(self, handler: Handler) -> Callable[[Request], Response]:
        """Adapt handler(request, user) to a plain request endpoint behind this authenticator."""
        @functools.wraps(handler)
        def endpoint(request: Request) -> Response:
            user = self.authenticate(request)
            if user is None:
                return self.challenge(request)
            return handler(request, user)
        return endpoint

    def require_user(self, request: Request) -> str:
        """FastAPI dependency: username or 401 with the authentication challenge."""
        user = self.authenticate(request)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
                headers=self.challenge_headers(request),
            )
        return user

    def _audit(self, success: bool, request: Request, **details) -> None:
        audit_logger.auth_attempt(
            success=success,
            auth_type=self.auth_type,
            details={"realm": self.realm, **details},
            request=request,
        )


def identity_dependency(authenticator: Optional[Authenticator]) -> Callable:
    """Dependency yielding the request's user, always None when no authenticator is active."""
    if authenticator is None:
        def anonymous() -> None:
            return None
        return anonymous
    return authenticator.require_user


class BasicAuthenticator(Authenticator):
    auth_type = BASIC

    def __init__(self, source: CredentialSource) -> None:
        super().__init__(source)
        self.secrets = HtpasswdFileProvider(source.file_path)

    def authenticate(self, request: Request) -> Optional[str]:
        auth_header = request.headers.get("authorization", "")
        if not auth_header.startswith("Basic "):
            self._audit(False, request, reason="missing_credentials")
            return None

        try:
            credentials = base64.b64decode(auth_header[6:]).decode("utf-8")
        except ValueError as e:
            logger.debug(f"Basic Auth parsing failed: {e}")
            self._audit(False, request, reason="malformed_header")
            return None
        if ":" not in credentials:
            self._audit(False, request, reason="malformed_header")
            return None

        username, password = credentials.split(":", 1)
        if not self.secrets.check_password(username, password):
            logger.warning(f"Basic authentication failed for user {username!r}")
            self._audit(False, request, reason="invalid_credentials", username=username)
            return None

        self._audit(True, request, username=username)
        return username

    def challenge_headers(self, request: Request) -> Dict[str, str]:
        return {"WWW-Authenticate": f'Basic realm="{self.realm}"'}


def _md5_hex(data: str) -> str:
    return hashlib.md5(data.encode("utf-8")).hexdigest()


class DigestAuthenticator(Authenticator):
    """RFC 2617 digest authentication (MD5, qop=auth) with stateless signed nonces.

    A nonce is "<issued>.<hmac>" where the HMAC covers the issue time and realm
    with a per-process key, so any worker can validate it without shared state.
    """

    auth_type = DIGEST

    def __init__(self, source: CredentialSource, nonce_lifetime: int = 300) -> None:
        super().__init__(source)
        self.secrets = HtdigestFileProvider(source.file_path)
        self.nonce_lifetime = int(nonce_lifetime)
        self._key = secrets.token_bytes(32)
        self.opaque = self._sign(f"opaque:{self.realm}")

    # ---------- Nonces ----------

    def _sign(self, message: str) -> str:
        return hmac.new(self._key, message.encode("utf-8"), hashlib.sha256).hexdigest()[:32]

    def new_nonce(self, now: Optional[float] = None) -> str:
        issued = int(time.time() if now is None else now)
        return f"{issued}.{self._sign(f'{issued}:{self.realm}')}"

    def check_nonce(self, nonce: str, now: Optional[float] = None) -> Tuple[bool, bool]:
        """Return (authentic, fresh) for a nonce previously issued by this authenticator."""
        issued_str, _, signature = nonce.partition(".")
        try:
            issued = int(issued_str)
        except ValueError:
            return False, False
        if not compare_digest(signature.encode("utf-8"), self._sign(f"{issued}:{self.realm}").encode("utf-8")):
            return False, False
        age = (time.time() if now is None else now) - issued
        return True, 0 <= age <= self.nonce_lifetime

    # ---------- Header parsing / verification ----------

    @staticmethod
    def parse_authorization(auth_header: str) -> Optional[Dict[str, str]]:
        if not auth_header.startswith("Digest "):
            return None
        try:
            return parse_keqv_list(parse_http_list(auth_header[7:]))
        except ValueError:
            return None

    def authenticate(self, request: Request) -> Optional[str]:
        params = self.parse_authorization(request.headers.get("authorization", ""))
        if params is None:
            self._audit(False, request, reason="missing_credentials")
            return None

        username = params.get("username")
        nonce = params.get("nonce")
        uri = params.get("uri")
        response = params.get("response")
        if not (username and nonce and uri and response):
            self._audit(False, request, reason="malformed_header")
            return None

        reason = self._reject_reason(request, params)
        if reason is None:
            ha1 = self.secrets.get_ha1(username, self.realm)
            if ha1 is None or not compare_digest(
                    response.encode("utf-8"), self._expected_response(request.method, ha1, params).encode("utf-8")):
                reason = "invalid_credentials"

        if reason is not None:
            logger.warning(f"Digest authentication failed for user {username!r}: {reason}")
            self._audit(False, request, reason=reason, username=username)
            return None

        self._audit(True, request, username=username)
        return username

    def _reject_reason(self, request: Request, params: Dict[str, str]) -> Optional[str]:
        if params.get("realm") != self.realm:
            return "realm_mismatch"
        if params.get("algorithm", "MD5").upper() != "MD5":
            return "unsupported_algorithm"
        if params.get("opaque") not in (None, self.opaque):
            return "opaque_mismatch"
        qop = params.get("qop")
        if qop is not None and (qop != "auth" or not params.get("nc") or not params.get("cnonce")):
            return "unsupported_qop"

        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        if params["uri"] not in (target, request.url.path):
            return "uri_mismatch"

        authentic, fresh = self.check_nonce(params["nonce"])
        if not authentic:
            return "invalid_nonce"
        if not fresh:
            return "stale_nonce"
        return None

    @staticmethod
    def _expected_response(method: str, ha1: str, params: Dict[str, str]) -> str:
        ha2 = _md5_hex(f"{method}:{params['uri']}")
        if params.get("qop"):
            return _md5_hex(f"{ha1}:{params['nonce']}:{params['nc']}:{params['cnonce']}:{params['qop']}:{ha2}")
        return _md5_hex(f"{ha1}:{params['nonce']}:{ha2}")

    def challenge_headers(self, request: Request) -> Dict[str, str]:
        challenge = (
            f'Digest realm="{self.realm}", nonce="{self.new_nonce()}", '
            f'opaque="{self.opaque}", algorithm="MD5", qop="auth"'
        )
        # Tell the client to retry with a fresh nonce instead of prompting again
        params = self.parse_authorization(request.headers.get("authorization", ""))
        if params and params.get("nonce") and self.check_nonce(params["nonce"]) == (True, False):
            challenge += ', stale="true"'
        return {"WWW-Authenticate": challenge}
