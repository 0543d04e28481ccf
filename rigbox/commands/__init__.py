"""CLI command helpers shared by the lifecycle and login commands."""

import functools
import logging
import sys

from rigbox.config import load_config, load_state
from rigbox.driver import SSHDriver, for_lifecycle
from rigbox.errors import RigboxError
from rigbox.transport.ssh import SSHConnection
from rigbox.verifier import SuiteRunner

logger = logging.getLogger(__name__)


def build_driver(args):
    """Build an SSHDriver and its instance state from CLI args."""
    config = load_config(args.config)
    verifier_config = {"sudo": config.driver.get("sudo", True), **config.verifier}
    driver = SSHDriver(
        config.driver,
        instance=config.instance,
        lifecycle=for_lifecycle(config.driver_name, config.driver),
        verifier=SuiteRunner(config.instance, verifier_config),
        connection_factory=functools.partial(SSHConnection, dry_run=args.dry_run),
    )
    return driver, load_state(args.state_dir, config.instance)


def run_command(handler):
    """Wrap a CLI handler so rigbox errors exit 1 with a logged message."""

    @functools.wraps(handler)
    def _run(args):
        try:
            handler(args)
        except RigboxError as e:
            logger.error(f"{type(e).__name__}: {e}")
            sys.exit(1)

    return _run
