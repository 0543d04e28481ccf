"""Login and exec commands: interactive and ad-hoc access to an instance."""

import logging
import os
import shlex

from rigbox.commands import build_driver, run_command
from rigbox.errors import ClientError

logger = logging.getLogger(__name__)


def _created_state(driver, state):
    if not state.get("hostname"):
        raise ClientError(f"Instance '{driver.instance.name}' has not been created. Run 'rigbox create' first.")
    return state


@run_command
def handle_login(args):
    """Handle the login command."""
    driver, state = build_driver(args)
    login = driver.login_command(_created_state(driver, state))
    if args.exec:
        os.execvp(login.command, login.argv)
    logger.info(shlex.join(login.argv))


@run_command
def handle_exec(args):
    """Handle the exec command."""
    driver, state = build_driver(args)
    driver.ssh(driver.build_ssh_args(_created_state(driver, state)), shlex.join(args.remote_command))


def register_login_commands(subparsers, parent):
    """Register the login and exec subcommands."""
    parser = subparsers.add_parser("login", help="Print (or run) the SSH login command", parents=[parent])
    parser.add_argument("--exec", action="store_true", help="Replace this process with the login session")
    parser.set_defaults(func=handle_login)

    parser = subparsers.add_parser("exec", help="Run a command on the instance", parents=[parent])
    parser.add_argument("remote_command", nargs="+", help="Command to run remotely")
    parser.set_defaults(func=handle_exec)
