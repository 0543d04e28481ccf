"""Run commands and transfer paths through an open connection."""

from rigbox.driver.env import env_cmd
from rigbox.errors import ActionFailed, TransportError


def run_remote(command, connection, config, probe=None):
    """Run *command* on *connection* inside the configured remote environment.

    A ``None`` command is skipped. Transport failures surface as ActionFailed.
    """
    if command is None:
        return
    try:
        connection.exec(env_cmd(command, config, probe=probe))
    except (TransportError, OSError) as e:
        raise ActionFailed(str(e)) from e


def transfer_path(local, remote, connection):
    """Upload *local* to *remote* on *connection*. A ``None`` path is skipped."""
    if local is None:
        return
    try:
        connection.upload_path(local, remote)
    except (TransportError, OSError) as e:
        raise ActionFailed(str(e)) from e
