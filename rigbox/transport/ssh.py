"""SSH transport: run commands and upload paths on remote instances via OpenSSH.

A connection is a ControlMaster socket opened lazily on first use and torn
down by close(), so every command and upload of one phase shares a single
authenticated session.
"""

import logging
import os
import shutil
import subprocess
import tempfile
import time
from dataclasses import dataclass, field

from rigbox.errors import SSHFailed

logger = logging.getLogger(__name__)


@dataclass
class LoginCommand:
    """Interactive login descriptor: the executable and its arguments."""

    command: str
    arguments: list[str] = field(default_factory=list)

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.arguments]


class SSHConnection:
    """One SSH session to a single host.

    Options follow the driver's connection args: ``user_known_hosts_file``,
    ``paranoid``, ``port``, ``keys``, ``forward_agent``, ``password`` and
    ``logger``. Use as a context manager so the session is always closed.
    """

    def __init__(self, hostname, username=None, options=None, dry_run=False):
        self.hostname = hostname
        self.username = username
        self.options = dict(options or {})
        self.logger = self.options.pop("logger", None) or logger
        self.dry_run = dry_run
        self._control_dir = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def address(self) -> str:
        """SSH address string (user@host)."""
        return f"{self.username}@{self.hostname}" if self.username else self.hostname

    @property
    def control_path(self) -> str | None:
        return os.path.join(self._control_dir, "control") if self._control_dir else None

    # ── argument building ──────────────────────────────────────────

    def _option_args(self, interactive=False) -> list[str]:
        opts = self.options
        args = []
        if opts.get("user_known_hosts_file"):
            args += ["-o", f"UserKnownHostsFile={opts['user_known_hosts_file']}"]
        if opts.get("paranoid") is False:
            args += ["-o", "StrictHostKeyChecking=no"]
        if "forward_agent" in opts:
            args += ["-o", f"ForwardAgent={'yes' if opts['forward_agent'] else 'no'}"]
        for key in opts.get("keys") or []:
            args += ["-i", os.path.expanduser(key)]
        if interactive:
            return args
        if not opts.get("password"):
            args += ["-o", "BatchMode=yes"]
        args += ["-o", "ServerAliveInterval=60", "-o", "ServerAliveCountMax=5"]
        if self.control_path:
            args += ["-o", f"ControlPath={self.control_path}"]
        return args

    def _port_args(self, flag="-p") -> list[str]:
        port = self.options.get("port")
        return [flag, str(port)] if port else []

    def ssh_args(self, *extra, interactive=False) -> list[str]:
        """Build an ssh argv targeting this host, with *extra* options before the address."""
        return ["ssh", *self._option_args(interactive), *extra, *self._port_args("-p"), self.address]

    def _wrap(self, argv):
        # sshpass reads the password from $SSHPASS so it never shows up in argv
        if self.options.get("password"):
            return ["sshpass", "-e", *argv]
        return argv

    def _env(self):
        if not self.options.get("password"):
            return None
        env = dict(os.environ)
        env["SSHPASS"] = str(self.options["password"])
        return env

    # ── session lifecycle ──────────────────────────────────────────

    def _open(self):
        if self._control_dir:
            return
        self._control_dir = tempfile.mkdtemp(prefix="rigbox-ssh-")
        argv = self.ssh_args("-o", "ControlMaster=yes", "-o", "ControlPersist=yes", "-N", "-f")
        self.logger.debug(f"[SSH] opening session to {self.address}")

        # The backgrounded master inherits stdio, so stderr goes to a file rather than a pipe
        with tempfile.TemporaryFile(mode="w+") as err:
            try:
                rc = subprocess.run(self._wrap(argv), stdin=subprocess.DEVNULL, stdout=subprocess.DEVNULL, stderr=err, env=self._env()).returncode
            except FileNotFoundError as e:
                self._discard_control_dir()
                raise SSHFailed(f"'{e.filename}' not found. Is it installed and on PATH?") from e
            if rc != 0:
                err.seek(0)
                self._discard_control_dir()
                raise SSHFailed(f"SSH session could not be established to {self.address} ({rc}): {err.read().strip()}")

    def _discard_control_dir(self):
        shutil.rmtree(self._control_dir, ignore_errors=True)
        self._control_dir = None

    def close(self):
        """Tear down the session. No-op if it was never opened."""
        if not self._control_dir:
            return
        try:
            result = subprocess.run(self.ssh_args("-O", "exit"), capture_output=True, text=True)
        except OSError as e:
            # close runs from __exit__; never mask the error already propagating
            self.logger.debug(f"[SSH] closing {self.address} failed: {e}")
        else:
            if result.returncode != 0:
                self.logger.debug(f"[SSH] closing {self.address} returned {result.returncode}: {result.stderr.strip()}")
            else:
                self.logger.debug(f"[SSH] closed {self.address}")
        finally:
            self._discard_control_dir()

    # ── operations ─────────────────────────────────────────────────

    def exec(self, command):
        """Run *command* remotely, streaming its output into the logger.

        Raises:
            SSHFailed: the command exited non-zero or the session failed.
        """
        if self.dry_run:
            self.logger.info(f"[dry-run] ssh {self.address}: {command}")
            return
        self._open()
        self.logger.debug(f"[SSH] {self.address} (cmd: '{command}')")

        argv = self._wrap(self.ssh_args() + [command])
        try:
            proc = subprocess.Popen(argv, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, env=self._env())
        except FileNotFoundError as e:
            raise SSHFailed(f"'{argv[0]}' not found. Is it installed and on PATH?") from e
        with proc:
            for line in proc.stdout:
                self.logger.info(line.rstrip("\n"))
            rc = proc.wait()
        if rc != 0:
            raise SSHFailed(f"SSH exited ({rc}) for command: [{command}]")

    def upload_path(self, local, remote):
        """Upload *local* to *remote*. Directories have their contents copied into *remote*."""
        if os.path.isdir(local):
            sources = [os.path.join(local, name) for name in sorted(os.listdir(local))]
        else:
            sources = [local]
        if not sources:
            self.logger.debug(f"[SSH] nothing to upload from {local}")
            return
        if self.dry_run:
            self.logger.info(f"[dry-run] scp {local} -> {self.address}:{remote}")
            return
        self._open()
        self.logger.info(f"Transferring files to {self.address}:{remote}")

        option_args = self._option_args()
        argv = self._wrap(["scp", "-r", *option_args, *self._port_args("-P"), *sources, f"{self.address}:{remote}"])
        try:
            result = subprocess.run(argv, capture_output=True, text=True, env=self._env())
        except FileNotFoundError as e:
            raise SSHFailed(f"'{argv[0]}' not found. Is it installed and on PATH?") from e
        if result.returncode != 0:
            raise SSHFailed(f"SCP upload of {local} to {self.address}:{remote} failed ({result.returncode}): {result.stderr.strip()}")

    def login_command(self) -> LoginCommand:
        """Describe an interactive ssh login without opening a session."""
        argv = self.ssh_args(interactive=True)
        return LoginCommand(argv[0], argv[1:])

    def wait(self, timeout=120, interval=5) -> bool:
        """Poll SSH connectivity until success or timeout.

        Returns:
            True if SSH connected, False on timeout.

        Raises:
            SSHFailed: the ssh (or sshpass) binary is missing.
        """
        if self.dry_run:
            self.logger.info(f"[dry-run] wait for SSH on {self.address}")
            return True
        self.logger.info(f"Waiting for SSH service on {self.address}...")
        elapsed = 0
        while elapsed < timeout:
            argv = self._wrap(self.ssh_args("-o", "ConnectTimeout=5") + ["true"])
            try:
                result = subprocess.run(argv, capture_output=True, env=self._env())
            except FileNotFoundError as e:
                raise SSHFailed(f"'{argv[0]}' not found. Is it installed and on PATH?") from e
            if result.returncode == 0:
                self.logger.info(f"SSH service ready on {self.address}")
                return True
            time.sleep(interval)
            elapsed += interval

        self.logger.error(f"Timeout after {timeout}s waiting for SSH connectivity to {self.address}")
        return False
