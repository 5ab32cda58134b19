"""Unit tests for authentication strategy selection

Covers the precedence rules (Basic over Digest over none), realm propagation
and the operator-facing log line.
"""
import logging

import pytest

from contmon.auth import BasicAuthenticator, DigestAuthenticator, describe_strategy, select_authenticator


class TestSelectAuthenticator:
    """Test strategy precedence"""

    @pytest.mark.parametrize("auth_file,digest_file,expected", [
        ("", "", None),
        ("", "/etc/contmon/htdigest", DigestAuthenticator),
        ("/etc/contmon/htpasswd", "", BasicAuthenticator),
        ("/etc/contmon/htpasswd", "/etc/contmon/htdigest", BasicAuthenticator),
    ])
    def test_precedence(self, auth_file, digest_file, expected):
        """Basic if an auth file is set, else Digest if a digest file is set, else none"""
        authenticator = select_authenticator(auth_file, "basic-realm", digest_file, "digest-realm")

        if expected is None:
            assert authenticator is None
        else:
            assert type(authenticator) is expected

    def test_basic_uses_basic_file_and_realm(self):
        authenticator = select_authenticator("/a/htpasswd", "basic-realm", "/a/htdigest", "digest-realm")

        assert authenticator.source.file_path == "/a/htpasswd"
        assert authenticator.realm == "basic-realm"
        assert authenticator.source.kind == "basic"

    def test_digest_uses_digest_file_and_realm(self):
        authenticator = select_authenticator("", "basic-realm", "/a/htdigest", "digest-realm")

        assert authenticator.source.file_path == "/a/htdigest"
        assert authenticator.realm == "digest-realm"
        assert authenticator.source.kind == "digest"

    def test_missing_file_is_not_checked_at_selection(self, tmp_path):
        """Selection never touches the filesystem"""
        missing = str(tmp_path / "does-not-exist")

        authenticator = select_authenticator(missing, "realm", "", "")

        assert isinstance(authenticator, BasicAuthenticator)

    def test_logs_active_file(self, caplog):
        with caplog.at_level(logging.INFO, logger="contmon.server"):
            select_authenticator("", "", "/a/htdigest", "realm")

        assert "Using digest file /a/htdigest" in caplog.text


class TestDescribeStrategy:

    def test_names(self):
        assert describe_strategy(None) == "none"
        assert describe_strategy(select_authenticator("/x", "r", "", "")) == "basic"
        assert describe_strategy(select_authenticator("", "", "/y", "r")) == "digest"
