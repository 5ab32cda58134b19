"""Pytest configuration and shared fixtures"""
import hashlib
import time
from urllib.request import parse_http_list, parse_keqv_list

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from passlib.apache import HtdigestFile, HtpasswdFile
from prometheus_client import CollectorRegistry

from contmon.manager import ContainerInfo, ContainerManager, ContainerNotFound, ContainerStats
from contmon.metrics import MetricsExporter
from contmon.web import Mux, register_all

USER = "admin"
PASSWORD = "s3cret"
REALM = "contmon"


class FakeManager(ContainerManager):
    """In-memory manager with a root container and one child"""

    def __init__(self, names=("/", "/docker/web")):
        self.names = list(names)
        self.start_time = time.time() - 7200

    def machine_info(self):
        return {"hostname": "test-host", "num_cores": 4, "num_physical_cores": 2,
                "memory_capacity": 8 * 1024**3, "boot_time": int(self.start_time)}

    def version_info(self):
        return {"contmon_version": "test", "python_version": "3", "os": "TestOS", "kernel_version": "6.0.0-test"}

    def container_names(self):
        return list(self.names)

    def container_info(self, name):
        if name not in self.names:
            raise ContainerNotFound(name)
        stats = ContainerStats(
            timestamp=time.time(),
            cpu_usage_seconds=12.5,
            memory_usage_bytes=512 * 1024**2,
            memory_working_set_bytes=256 * 1024**2,
            network_rx_bytes=1000,
            network_tx_bytes=2000,
            fs_usage_bytes=10 * 1024**3,
            fs_limit_bytes=100 * 1024**3,
        )
        return ContainerInfo(name=name, start_time=self.start_time, stats=stats)


class BrokenManager(FakeManager):
    """Manager whose every query fails"""

    def machine_info(self):
        raise RuntimeError("manager unavailable")

    def version_info(self):
        raise RuntimeError("manager unavailable")

    def container_names(self):
        raise RuntimeError("manager unavailable")


@pytest.fixture
def manager():
    return FakeManager()


@pytest.fixture
def exporter():
    """Exporter bound to a private registry so tests never touch the global one"""
    return MetricsExporter(CollectorRegistry())


@pytest.fixture
def htpasswd_file(tmp_path):
    path = tmp_path / "htpasswd"
    ht = HtpasswdFile(str(path), new=True, default_scheme="apr_md5_crypt")
    ht.set_password(USER, PASSWORD)
    ht.save()
    return str(path)


@pytest.fixture
def htdigest_file(tmp_path):
    path = tmp_path / "htdigest"
    ht = HtdigestFile(str(path), new=True)
    ht.set_password(USER, REALM, PASSWORD)
    ht.save()
    return str(path)


@pytest.fixture
def build_client(manager, exporter):
    """Factory: register_all on a fresh app with the given auth settings"""
    def _build(**auth_kwargs):
        app = FastAPI()
        mux = Mux(app)
        register_all(mux, manager, exporter=exporter, **auth_kwargs)
        return TestClient(app)
    return _build


def _md5(text):
    return hashlib.md5(text.encode("utf-8")).hexdigest()


@pytest.fixture
def digest_auth():
    """Build a Digest Authorization header answering a WWW-Authenticate challenge"""
    def _answer(challenge, method, uri, username=USER, password=PASSWORD, realm=None, nc="00000001", cnonce="0a4f113b"):
        params = parse_keqv_list(parse_http_list(challenge[len("Digest "):]))
        realm = realm if realm is not None else params["realm"]
        ha1 = _md5(f"{username}:{realm}:{password}")
        ha2 = _md5(f"{method}:{uri}")
        response = _md5(f"{ha1}:{params['nonce']}:{nc}:{cnonce}:auth:{ha2}")
        return (
            f'Digest username="{username}", realm="{realm}", nonce="{params["nonce"]}", '
            f'uri="{uri}", qop=auth, nc={nc}, cnonce="{cnonce}", '
            f'response="{response}", opaque="{params["opaque"]}", algorithm=MD5'
        )
    return _answer
