"""Shell provisioner: upload a script (and optional data directory) and run it."""

import logging
import os
import shutil

from rigbox.errors import ClientError
from rigbox.provisioner.base import Provisioner

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT_NAME = "bootstrap.sh"
DEFAULT_SCRIPT = """#!/bin/sh
echo "NO BOOTSTRAP SCRIPT PRESENT"
"""


class ShellProvisioner(Provisioner):
    """Runs a single shell script on the instance.

    Config keys:
        script: local path of the script to run (default: a no-op script)
        data_path: local directory uploaded alongside the script as ``data/``
        root_path: remote directory the sandbox is uploaded to
    """

    name = "shell"

    @property
    def script_name(self) -> str:
        script = self.config.get("script")
        return os.path.basename(script) if script else DEFAULT_SCRIPT_NAME

    @property
    def init_command(self) -> str:
        root = self.home_path
        return f"{self.sudo('rm')} -rf {root} ; mkdir -p {root}"

    @property
    def run_command(self) -> str:
        return self.sudo(f"{self.home_path}/{self.script_name}")

    def create_sandbox(self):
        sandbox = super().create_sandbox()
        self._prepare_script(sandbox)
        self._prepare_data(sandbox)
        return sandbox

    def _prepare_script(self, sandbox):
        script = self.config.get("script")
        target = os.path.join(sandbox, self.script_name)
        if script:
            script = os.path.expanduser(script)
            if not os.path.isfile(script):
                raise ClientError(f"Provisioner script '{script}' not found")
            logger.info(f"Preparing script: {script}")
            shutil.copyfile(script, target)
        else:
            logger.info("No provisioner script configured, using a placeholder.")
            with open(target, "w") as f:
                f.write(DEFAULT_SCRIPT)
        os.chmod(target, 0o755)

    def _prepare_data(self, sandbox):
        data_path = self.config.get("data_path")
        if not data_path:
            return
        data_path = os.path.expanduser(data_path)
        if not os.path.isdir(data_path):
            raise ClientError(f"Provisioner data_path '{data_path}' is not a directory")
        logger.info(f"Preparing data: {data_path}")
        shutil.copytree(data_path, os.path.join(sandbox, "data"))
