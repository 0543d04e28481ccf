"""Connection args: merge driver config with per-instance state."""

from dataclasses import dataclass, field


@dataclass
class SSHArgs:
    """Positional arguments for opening a connection: ``Transport(*args)``."""

    hostname: str | None
    username: str | None
    options: dict = field(default_factory=dict)

    def __iter__(self):
        return iter((self.hostname, self.username, self.options))


def build_ssh_args(config, state, logger) -> SSHArgs:
    """Build connection args for an instance.

    State wins over config on conflicting keys. Host key verification is
    always disabled: instances are ephemeral and their keys change on
    every create.
    """
    combined = {**config, **state}

    opts = {
        "user_known_hosts_file": "/dev/null",
        "paranoid": False,
    }
    if combined.get("password"):
        opts["password"] = combined["password"]
    if "forward_agent" in combined:
        opts["forward_agent"] = combined["forward_agent"]
    if combined.get("port"):
        opts["port"] = combined["port"]
    if combined.get("ssh_key"):
        ssh_key = combined["ssh_key"]
        opts["keys"] = list(ssh_key) if isinstance(ssh_key, (list, tuple)) else [ssh_key]
    opts["logger"] = logger

    return SSHArgs(combined.get("hostname"), combined.get("username"), opts)
