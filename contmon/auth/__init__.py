"""
contmon HTTP authentication (Basic / Digest over credential files)
"""

from .authenticators import (
    Authenticator, BasicAuthenticator, CredentialSource, DigestAuthenticator, identity_dependency,
)
from .providers import CredentialFileError
from .selector import describe_strategy, select_authenticator

__all__ = [
    "Authenticator",
    "BasicAuthenticator",
    "CredentialFileError",
    "CredentialSource",
    "DigestAuthenticator",
    "describe_strategy",
    "identity_dependency",
    "select_authenticator",
]
