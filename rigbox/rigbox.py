#!/usr/bin/env python3
"""rigbox CLI entrypoint."""

import argparse
import logging

from rigbox.commands.lifecycle import register_lifecycle_commands
from rigbox.commands.login import register_login_commands
from rigbox.config import DEFAULT_CONFIG_PATH, DEFAULT_STATE_DIR
from rigbox.logging_setup import setup_cli_logging


def _common_parser():
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--config", default=DEFAULT_CONFIG_PATH, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    parent.add_argument("--state-dir", default=DEFAULT_STATE_DIR, help=f"Instance state directory (default: {DEFAULT_STATE_DIR})")
    parent.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"], help="Log level")
    parent.add_argument("--dry-run", action="store_true", help="Print remote commands without executing")
    return parent


def main():
    parser = argparse.ArgumentParser(description="Drive test instances through converge, setup and verify over SSH")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parent = _common_parser()
    register_lifecycle_commands(subparsers, parent)
    register_login_commands(subparsers, parent)

    args = parser.parse_args()
    setup_cli_logging(getattr(logging, args.log_level.upper()))
    args.func(args)


if __name__ == "__main__":
    main()
