"""SSH driver: connection args, remote environment, remote execution and phases."""

from rigbox.driver.env import env_cmd, inject_real_hostname_into_proxy_configs
from rigbox.driver.remote import run_remote, transfer_path
from rigbox.driver.ssh_args import SSHArgs, build_ssh_args
from rigbox.driver.ssh_base import DEFAULT_CONFIG, InstanceLifecycle, SSHDriver
from rigbox.driver.static import StaticLifecycle, for_lifecycle

__all__ = [
    "DEFAULT_CONFIG",
    "InstanceLifecycle",
    "SSHArgs",
    "SSHDriver",
    "StaticLifecycle",
    "build_ssh_args",
    "env_cmd",
    "for_lifecycle",
    "inject_real_hostname_into_proxy_configs",
    "run_remote",
    "transfer_path",
]
