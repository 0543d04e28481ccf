"""Transports: SSH sessions and proxy probes."""

from rigbox.transport.proxy import check_proxy
from rigbox.transport.ssh import LoginCommand, SSHConnection

__all__ = [
    "LoginCommand",
    "SSHConnection",
    "check_proxy",
]
