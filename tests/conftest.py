"""Shared pytest fixtures for all test modules."""

import os
import subprocess
import sys

import pytest
import yaml

from rigbox.errors import SSHFailed
from rigbox.transport.ssh import LoginCommand

PROJECT_ROOT = os.path.normpath(os.path.join(os.path.dirname(__file__), ".."))


@pytest.fixture(scope="session")
def project_root():
    """Absolute path to the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def run_cli(project_root):
    """Return a callable that invokes the rigbox CLI as a subprocess."""

    def _run(*args):
        result = subprocess.run(
            [sys.executable, "-m", "rigbox.rigbox", *args],
            capture_output=True,
            text=True,
            cwd=project_root,
        )
        return result.returncode, result.stdout, result.stderr

    return _run


@pytest.fixture
def make_rigbox_config(tmp_path):
    """Return a factory that writes a rigbox.yaml (plus script and suite) into tmp_path."""

    def _make(driver=None, provisioner=None, with_suite=True):
        script = tmp_path / "bootstrap.sh"
        script.write_text("#!/bin/sh\necho converging\n")
        if with_suite:
            suite = tmp_path / "test" / "integration" / "default"
            suite.mkdir(parents=True, exist_ok=True)
            (suite / "smoke.sh").write_text("test -f /etc/hostname\n")

        config = {
            "instance": "default-ubuntu",
            "suite": "default",
            "driver": driver
            if driver is not None
            else {
                "name": "static",
                "hostname": "10.0.0.5",
                "username": "ubuntu",
                "ssh_key": "~/.ssh/id_ed25519",
            },
            "provisioner": provisioner if provisioner is not None else {"name": "shell", "script": "bootstrap.sh"},
            "verifier": {"test_base_path": "test/integration"},
        }
        config_path = tmp_path / "rigbox.yaml"
        with open(config_path, "w") as f:
            yaml.dump(config, f)
        return str(config_path)

    return _make


# ── Fake transport ──────────────────────────────────────────────────


class FakeConnection:
    """Records exec/upload calls instead of talking to a host."""

    def __init__(self, hostname, username=None, options=None, fail_on=None):
        self.hostname = hostname
        self.username = username
        self.options = options or {}
        self.fail_on = fail_on
        self.calls = []
        self.entered = False
        self.closed = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    def exec(self, command):
        self.calls.append(("exec", command))
        if self.fail_on and self.fail_on in command:
            raise SSHFailed(f"SSH exited (1) for command: [{command}]")

    def upload_path(self, local, remote):
        self.calls.append(("upload", local, remote))

    def login_command(self):
        return LoginCommand("ssh", [f"{self.username}@{self.hostname}"])

    def wait(self):
        self.calls.append(("wait",))
        return True


class FakeTransport:
    """Connection factory that keeps every connection it opened."""

    def __init__(self):
        self.connections = []
        self.fail_on = None

    def __call__(self, hostname, username=None, options=None):
        conn = FakeConnection(hostname, username, options, fail_on=self.fail_on)
        self.connections.append(conn)
        return conn

    @property
    def last(self):
        return self.connections[-1]


@pytest.fixture
def fake_transport():
    return FakeTransport()
