"""Shared fixtures for the privnote test suite."""

import json
import os
from urllib.parse import parse_qs

import httpx
import pytest
from cryptography.exceptions import UnsupportedAlgorithm

from privnote.utils import config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the default config file at an empty temporary location."""
    config_path = tmp_path / ".privnote"
    monkeypatch.setattr(config, "DEFAULT_CONFIG_FILE", config_path)
    return config_path


class RecordingService:
    """Stand-in for the remote service, recording every request it receives."""

    def __init__(self, note_link="https://privnote.com/abc123", status_code=200, body=None):
        self.note_link = note_link
        self.status_code = status_code
        self.body = body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, content=self.body)

        form = self.form(request)
        payload = {
            "has_manual_pass": form["has_manual_pass"] == "true",
            "policy": 0,
            "expires_js": "",
            "note_link": self.note_link,
            "dont_ask": form["dont_ask"] == "true",
        }
        return httpx.Response(self.status_code, content=json.dumps(payload).encode())

    @staticmethod
    def form(request: httpx.Request) -> dict:
        parsed = parse_qs(request.content.decode(), keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def service():
    return RecordingService()


@pytest.fixture
def piped_stdin():
    """Build a real pipe carrying the given bytes, usable as stdin."""
    opened = []

    def _make(content: bytes):
        read_fd, write_fd = os.pipe()
        os.write(write_fd, content)
        os.close(write_fd)
        stream = os.fdopen(read_fd, "rb")
        opened.append(stream)
        return stream

    yield _make

    for stream in opened:
        stream.close()


class UnsupportedBackend:
    """Cryptography backend double reporting AES-CBC as unsupported."""

    def cipher_supported(self, cipher, mode):
        return False

    def hash_supported(self, algorithm):
        return True


class NoMd5Backend(UnsupportedBackend):
    """Cryptography backend double supporting AES-CBC but not MD5."""

    def cipher_supported(self, cipher, mode):
        return True

    def hash_supported(self, algorithm):
        return False


class RaisingBackend(UnsupportedBackend):
    """Cryptography backend double raising on the capability query."""

    def cipher_supported(self, cipher, mode):
        raise UnsupportedAlgorithm("AES is disabled")
