"""Provisioner base: remote commands and a local sandbox for converge."""

import logging
import shutil
import tempfile

logger = logging.getLogger(__name__)

DEFAULT_ROOT_PATH = "/tmp/rigbox"


class Provisioner:
    """Provisioner that installs nothing and runs nothing.

    Subclasses override the command properties; any that return None are
    skipped by the driver. The sandbox is a local temp directory uploaded
    to ``home_path`` before ``prepare_command`` runs.
    """

    name = "dummy"

    def __init__(self, instance, config):
        self.instance = instance
        self.config = config
        self.sandbox_path = None

    @property
    def home_path(self) -> str:
        return self.config.get("root_path", DEFAULT_ROOT_PATH)

    @property
    def install_command(self) -> str | None:
        return None

    @property
    def init_command(self) -> str | None:
        return None

    @property
    def prepare_command(self) -> str | None:
        return None

    @property
    def run_command(self) -> str | None:
        return None

    def sudo(self, command) -> str:
        """Prefix *command* with sudo when the config asks for it."""
        return f"sudo -E {command}" if self.config.get("sudo") else command

    def create_sandbox(self) -> str | None:
        """Create the local sandbox directory and return its path."""
        self.sandbox_path = tempfile.mkdtemp(prefix=f"{self.instance.name}-sandbox-")
        logger.debug(f"Created local sandbox in {self.sandbox_path}")
        return self.sandbox_path

    def cleanup_sandbox(self):
        """Remove the local sandbox. Safe to call when none was created."""
        if self.sandbox_path is None:
            return
        logger.debug(f"Cleaning up local sandbox in {self.sandbox_path}")
        shutil.rmtree(self.sandbox_path, ignore_errors=True)
        self.sandbox_path = None
