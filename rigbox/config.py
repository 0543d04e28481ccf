"""Configuration and instance state loading."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from rigbox.errors import ClientError
from rigbox.types import Instance

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "rigbox.yaml"
DEFAULT_STATE_DIR = ".rigbox"
PASSWORD_ENV_VAR = "RIGBOX_SSH_PASSWORD"

# Config keys holding local paths, resolved relative to the config file
_LOCAL_PATH_KEYS = ("script", "data_path", "test_base_path")


@dataclass
class RigboxConfig:
    """Parsed rigbox.yaml."""

    instance: Instance = field(default_factory=Instance)
    driver: dict = field(default_factory=dict)
    verifier: dict = field(default_factory=dict)

    @property
    def driver_name(self) -> str | None:
        return self.driver.get("name")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> RigboxConfig:
    """Load configuration from a YAML file.

    The provisioner section is merged over the driver section, so
    provisioners see the full driver config plus their own keys.
    """
    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ClientError(f"Config file '{config_path}' not found.")
    except yaml.YAMLError as e:
        raise ClientError(f"Error parsing YAML config: {e}")
    if not isinstance(raw, dict):
        raise ClientError(f"Config file '{config_path}' must contain a mapping.")

    base_dir = os.path.dirname(os.path.abspath(config_path))
    driver = _section(raw, "driver")
    provisioner = _section(raw, "provisioner")
    verifier = _section(raw, "verifier")

    config = dict(driver)
    config.update({k: v for k, v in provisioner.items() if k != "name"})
    if provisioner.get("name"):
        config["provisioner"] = provisioner["name"]
    if not config.get("password") and os.environ.get(PASSWORD_ENV_VAR):
        config["password"] = os.environ[PASSWORD_ENV_VAR]

    instance = Instance(name=str(raw.get("instance", "default")), suite=str(raw.get("suite", "default")))
    return RigboxConfig(
        instance=instance,
        driver=_resolve_local_paths(config, base_dir),
        verifier=_resolve_local_paths(verifier, base_dir),
    )


def _section(raw, name) -> dict:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ClientError(f"'{name}' section must be a mapping.")
    return section


def _resolve_local_paths(section, base_dir) -> dict:
    resolved = dict(section)
    for key in _LOCAL_PATH_KEYS:
        value = resolved.get(key)
        if value:
            resolved[key] = os.path.join(base_dir, os.path.expanduser(value))
    return resolved


def state_path(state_dir, instance: Instance) -> Path:
    return Path(state_dir) / instance.state_filename


def load_state(state_dir, instance: Instance) -> dict:
    """Load an instance's state; empty if it was never created."""
    path = state_path(state_dir, instance)
    if not path.exists():
        return {}
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ClientError(f"State file '{path}' is corrupt: {e}")


def save_state(state_dir, instance: Instance, state: dict) -> None:
    path = state_path(state_dir, instance)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(state, indent=2))
    logger.debug(f"Saved state to {path}")


def destroy_state(state_dir, instance: Instance) -> None:
    path = state_path(state_dir, instance)
    if path.exists():
        path.unlink()
        logger.debug(f"Removed {path}")
