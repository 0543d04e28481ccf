"""Lifecycle commands: create, converge, setup, verify, destroy and test."""

import logging

from rigbox.commands import build_driver, run_command
from rigbox.config import destroy_state, save_state
from rigbox.errors import ActionFailed, ClientError

logger = logging.getLogger(__name__)

PHASES = ("create", "converge", "setup", "verify", "destroy")


def _require_created(driver, state):
    if not state.get("hostname"):
        raise ClientError(f"Instance '{driver.instance.name}' has not been created. Run 'rigbox create' first.")


def do_create(driver, state, args):
    logger.info(f"-----> Creating {driver.instance.name}")
    driver.create(state)
    ssh_args = driver.build_ssh_args(state)
    if not driver.wait_for_sshd(ssh_args.hostname, ssh_args.username, ssh_args.options):
        raise ActionFailed(f"SSH never became available on {state['hostname']}")
    save_state(args.state_dir, driver.instance, state)


def do_converge(driver, state, args):
    _require_created(driver, state)
    logger.info(f"-----> Converging {driver.instance.name}")
    driver.converge(state)


def do_setup(driver, state, args):
    _require_created(driver, state)
    logger.info(f"-----> Setting up {driver.instance.name}")
    driver.setup(state)


def do_verify(driver, state, args):
    _require_created(driver, state)
    logger.info(f"-----> Verifying {driver.instance.name}")
    driver.verify(state)


def do_destroy(driver, state, args):
    logger.info(f"-----> Destroying {driver.instance.name}")
    if state:
        driver.destroy(state)
    destroy_state(args.state_dir, driver.instance)
    logger.info(f"Finished destroying {driver.instance.name}")


_ACTIONS = {
    "create": do_create,
    "converge": do_converge,
    "setup": do_setup,
    "verify": do_verify,
    "destroy": do_destroy,
}


@run_command
def handle_phase(args):
    """Handle a single lifecycle phase command."""
    driver, state = build_driver(args)
    _ACTIONS[args.command](driver, state, args)


@run_command
def handle_test(args):
    """Handle the test command: create, converge, setup, verify, then destroy."""
    driver, state = build_driver(args)
    try:
        for phase in ("create", "converge", "setup", "verify"):
            _ACTIONS[phase](driver, state, args)
    finally:
        if args.destroy:
            do_destroy(driver, state, args)
        else:
            logger.info(f"Leaving {driver.instance.name} running (--no-destroy)")
    logger.info(f"Finished testing {driver.instance.name}")


def register_lifecycle_commands(subparsers, parent):
    """Register one subcommand per phase plus 'test'."""
    helps = {
        "create": "Create the instance and wait for SSH",
        "converge": "Provision the instance",
        "setup": "Prepare the instance for verification",
        "verify": "Sync and run the test suite on the instance",
        "destroy": "Destroy the instance",
    }
    for phase in PHASES:
        parser = subparsers.add_parser(phase, help=helps[phase], parents=[parent])
        parser.set_defaults(func=handle_phase)

    parser = subparsers.add_parser("test", help="Run create, converge, setup, verify and destroy", parents=[parent])
    parser.add_argument("--no-destroy", dest="destroy", action="store_false", help="Keep the instance after the run")
    parser.set_defaults(func=handle_test)
