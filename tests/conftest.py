"""
Shared fixtures: fake command execution, fake downloads and a quiet display.

Nothing in the suite touches the real package managers, service manager or
network.
"""

import io
import subprocess
from pathlib import Path

import pytest
import requests
from rich.console import Console

from installer_core.display import Display
from installer_core.host_profile import HostProfile
from installer_core.system_utils import SystemUtility


class FakeCommands:
    """Records executed commands and answers them from canned results."""

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.installed = set()

    def install(self, *names):
        self.installed.update(names)

    def respond(self, command, returncode=0, stdout="", stderr=""):
        self.responses[tuple(command)] = (returncode, stdout, stderr)

    def which(self, name, *args, **kwargs):
        return f"/usr/bin/{name}" if name in self.installed else None

    def run(self, command, *args, **kwargs):
        command = [str(part) for part in command]
        self.calls.append(command)
        if command[0] not in self.installed and not Path(command[0]).is_absolute():
            raise FileNotFoundError(command[0])
        returncode, stdout, stderr = self._lookup(command)
        return subprocess.CompletedProcess(command, returncode, stdout, stderr)

    def _lookup(self, command):
        best = None
        for key, response in self.responses.items():
            if tuple(command[:len(key)]) == key and (best is None or len(key) > len(best[0])):
                best = (key, response)
        return best[1] if best else (0, "", "")

    def ran(self, *prefix):
        return any(call[:len(prefix)] == list(prefix) for call in self.calls)


class FakeResponse:

    def __init__(self, url, content=b"", status_code=200):
        self.url = url
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} for {self.url}")

    def iter_content(self, chunk_size=8192):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]


class FakeDownloads:

    def __init__(self):
        self.urls = []
        self.failures = {}

    def fail(self, url, error=None):
        self.failures[url] = error or requests.exceptions.ConnectionError(f"cannot reach {url}")

    def get(self, url, *args, **kwargs):
        self.urls.append(url)
        if url in self.failures:
            raise self.failures[url]
        return FakeResponse(url, b"#!/bin/sh\nexit 0\n")


@pytest.fixture
def fake_commands(monkeypatch):
    fake = FakeCommands()
    monkeypatch.setattr("installer_core.system_utils.subprocess.run", fake.run)
    monkeypatch.setattr("installer_core.system_utils.shutil.which", fake.which)
    return fake


@pytest.fixture
def fake_downloads(monkeypatch):
    fake = FakeDownloads()
    monkeypatch.setattr("installer_core.procedure_steps.requests.get", fake.get)
    return fake


@pytest.fixture
def elevated(monkeypatch):
    monkeypatch.setattr(SystemUtility, "is_admin", staticmethod(lambda: True))


@pytest.fixture
def not_elevated(monkeypatch):
    monkeypatch.setattr(SystemUtility, "is_admin", staticmethod(lambda: False))


@pytest.fixture
def display():
    console = Console(file=io.StringIO(), width=120, force_terminal=False, color_system=None)
    return Display(console=console, pacing=False)


@pytest.fixture
def output(display):
    """Callable returning everything printed on the display so far."""
    return lambda: display.console.file.getvalue()


@pytest.fixture
def jammy():
    return HostProfile("ubuntu", "22.04", "jammy", "x86_64", "Ubuntu 22.04.4 LTS", ("debian",))
