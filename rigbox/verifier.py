"""Suite runner: ship a local test suite to the instance and run its scripts.

Suites live in ``<test_base_path>/<suite>/``. Every file is synced; every
``*.sh`` file is executed in sorted order and the first failure fails the
verify phase.
"""

import logging
import os
import shlex
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TEST_BASE_PATH = "test/integration"
DEFAULT_ROOT_PATH = "/tmp/rigbox-verifier"


class SuiteRunner:
    """Builds the setup, sync and run commands for one instance's suite.

    Every command is None when the suite has no local files, so instances
    without tests skip setup and verify.
    """

    def __init__(self, instance, config=None):
        config = config or {}
        self.instance = instance
        self.test_base_path = config.get("test_base_path", DEFAULT_TEST_BASE_PATH)
        self.root_path = config.get("root_path", DEFAULT_ROOT_PATH)
        self.use_sudo = config.get("sudo", False)

    @property
    def local_suite_path(self) -> Path:
        return Path(os.path.expanduser(self.test_base_path)) / self.instance.suite

    @property
    def remote_suite_path(self) -> str:
        return f"{self.root_path}/suites/{self.instance.suite}"

    def local_suite_files(self) -> list[Path]:
        suite = self.local_suite_path
        if not suite.is_dir():
            return []
        return sorted(p for p in suite.rglob("*") if p.is_file())

    def _sudo(self, command):
        return f"sudo -E {command}" if self.use_sudo else command

    @property
    def setup_cmd(self) -> str | None:
        if not self.local_suite_files():
            return None
        root = shlex.quote(self.root_path)
        return f"{self._sudo('mkdir')} -p {root}/suites && {self._sudo('chmod')} 0777 {root}/suites"

    @property
    def sync_cmd(self) -> str | None:
        """Empty the remote suite directory ahead of the upload of ``sync_source``."""
        if not self.local_suite_files():
            return None
        remote = shlex.quote(self.remote_suite_path)
        return f"rm -rf {remote} && mkdir -p {remote}"

    @property
    def sync_source(self) -> str | None:
        """Local suite directory whose contents are uploaded into ``remote_suite_path``."""
        files = self.local_suite_files()
        if not files:
            return None
        logger.debug(f"Syncing {len(files)} suite file(s) to {self.remote_suite_path}")
        return str(self.local_suite_path)

    @property
    def run_cmd(self) -> str | None:
        if not self.local_suite_files():
            return None
        remote = shlex.quote(self.remote_suite_path)
        return (
            f"cd {remote} && "
            "for t in $(find . -name '*.sh' | sort); do "
            'echo "-----> Running $t"; '
            f'{self._sudo("sh")} "$t" || exit 1; '
            "done"
        )
