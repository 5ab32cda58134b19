#!/usr/bin/env python3
"""
Credential file providers (htpasswd / htdigest)

Files are parsed by passlib.apache. Each lookup re-checks the file's mtime, so
credentials can be rotated without restarting the daemon. passlib file objects
are not thread-safe, so every access goes through a per-provider lock.
"""

import logging
import threading
from typing import Optional

from passlib.apache import HtdigestFile, HtpasswdFile

logger = logging.getLogger("contmon.server")


class CredentialFileError(Exception):
    """Credential file is missing, unreadable or malformed."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"failed to load credential file {path}: {cause}")
        self.path = path
        self.cause = cause


class _FileProvider:
    file_class = None

    def __init__(self, path: str) -> None:
        self.path = path
        self._file = None
        self._lock = threading.Lock()

    def _current(self):
        """Load on first use, reload when the file changed. Caller holds the lock."""
        try:
            if self._file is None:
                self._file = self.file_class(self.path)
            else:
                self._file.load_if_changed()
        except (OSError, ValueError) as e:
            logger.error(f"Credential file {self.path} could not be loaded: {e}")
            raise CredentialFileError(self.path, e) from e
        return self._file


class HtpasswdFileProvider(_FileProvider):
    """Basic auth secrets (`user:hash` lines, apache htpasswd formats)."""

    file_class = HtpasswdFile

    def check_password(self, user: str, password: str) -> bool:
        with self._lock:
            htpasswd = self._current()
            try:
                result = htpasswd.check_password(user, password)
            except ValueError as e:
                # Usernames passlib cannot store (":", control chars, too long) are unknown users
                logger.debug(f"Rejected unusable username: {e}")
                return False
        # passlib returns None for unknown users
        return bool(result)


class HtdigestFileProvider(_FileProvider):
    """Digest auth secrets (`user:realm:HA1` lines)."""

    file_class = HtdigestFile

    def get_ha1(self, user: str, realm: str) -> Optional[str]:
        """Return the hex HA1 for (user, realm), or None if not present."""
        with self._lock:
            htdigest = self._current()
            try:
                return htdigest.get_hash(user, realm)
            except ValueError as e:
                logger.debug(f"Rejected unusable username or realm: {e}")
                return None
