"""SSH driver: take an existing instance through converge, setup and verify.

Each phase opens exactly one connection, runs its steps in order and closes
the connection on every exit path. Instance creation and destruction are
delegated to an InstanceLifecycle, e.g. StaticLifecycle.
"""

import logging
from typing import Protocol

from rigbox.driver.env import inject_real_hostname_into_proxy_configs
from rigbox.driver.remote import run_remote, transfer_path
from rigbox.driver.ssh_args import build_ssh_args
from rigbox.errors import ActionFailed, ClientError, TransportError
from rigbox.logging_setup import level_name
from rigbox.provisioner import for_plugin
from rigbox.redact import register_secret
from rigbox.transport.ssh import SSHConnection
from rigbox.types import Instance
from rigbox.verifier import SuiteRunner

DEFAULT_CONFIG = {
    "sudo": True,
    "port": 22,
    "provisioner": "shell",
}


class InstanceLifecycle(Protocol):
    """Creates and destroys the instance a driver converges."""

    def create(self, state: dict) -> None: ...

    def destroy(self, state: dict) -> None: ...


class SSHDriver:
    """Runs the lifecycle phases of one instance over SSH.

    Phases must not run concurrently on the same driver; separate drivers
    for separate instances are independent.
    """

    def __init__(self, config, instance=None, lifecycle=None, verifier=None, connection_factory=SSHConnection, logger=None):
        self.config = {**DEFAULT_CONFIG, **config}
        self.instance = instance or Instance()
        self.lifecycle = lifecycle
        self.verifier = verifier or SuiteRunner(self.instance, {"sudo": self.config["sudo"]})
        self.connection_factory = connection_factory
        self.logger = logger or logging.getLogger(f"{__name__}.{self.instance.name}")
        register_secret(self.config.get("password"))

    def create(self, state):
        if self.lifecycle is None:
            raise ClientError(f"{type(self).__name__}.create must be implemented")
        self.lifecycle.create(state)

    def converge(self, state):
        provisioner = None
        try:
            provisioner = self.new_provisioner()
            config = self.phase_config()
            with self.connection_factory(*self.build_ssh_args(state)) as conn:
                run_remote(provisioner.install_command, conn, config)
                run_remote(provisioner.init_command, conn, config)
                transfer_path(provisioner.create_sandbox(), provisioner.home_path, conn)
                run_remote(provisioner.prepare_command, conn, config)
                run_remote(provisioner.run_command, conn, config)
        finally:
            if provisioner is not None:
                provisioner.cleanup_sandbox()

    def setup(self, state):
        config = self.phase_config()
        with self.connection_factory(*self.build_ssh_args(state)) as conn:
            run_remote(self.verifier.setup_cmd, conn, config)

    def verify(self, state):
        config = self.phase_config()
        with self.connection_factory(*self.build_ssh_args(state)) as conn:
            run_remote(self.verifier.sync_cmd, conn, config)
            transfer_path(self.verifier.sync_source, self.verifier.remote_suite_path, conn)
            run_remote(self.verifier.run_cmd, conn, config)

    def destroy(self, state):
        if self.lifecycle is None:
            raise ClientError(f"{type(self).__name__}.destroy must be implemented")
        self.lifecycle.destroy(state)

    def login_command(self, state):
        return self.connection_factory(*self.build_ssh_args(state)).login_command()

    def ssh(self, ssh_args, command):
        """Run one command with caller-supplied connection args."""
        with self.connection_factory(*ssh_args) as conn:
            run_remote(command, conn, self.phase_config())

    def wait_for_sshd(self, hostname, username=None, options=None):
        conn = self.connection_factory(hostname, username, {"logger": self.logger, **(options or {})})
        try:
            return conn.wait()
        except (TransportError, OSError) as e:
            raise ActionFailed(str(e)) from e

    def phase_config(self) -> dict:
        """Configuration for one phase, with proxy placeholders resolved."""
        return inject_real_hostname_into_proxy_configs(self.config)

    def build_ssh_args(self, state):
        register_secret(state.get("password"))
        return build_ssh_args(self.config, state, self.logger)

    def new_provisioner(self):
        combined = dict(self.config)
        combined["log_level"] = level_name(self.logger)
        return for_plugin(combined["provisioner"], self.instance, combined)
