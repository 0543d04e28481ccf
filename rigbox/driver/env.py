"""Remote environment: proxy exports and PATH extension around remote commands."""

import logging
import socket

from rigbox.transport import proxy

logger = logging.getLogger(__name__)

HOST_MACHINE = "HOST_MACHINE"
PROXY_KEYS = ("http_proxy", "https_proxy")
PROXY_CHECK_URLS = {
    "http_proxy": "http://www.google.com",
    "https_proxy": "https://www.google.com",
}
PATH_KEYS = ("ruby_binpath", "path")


def local_hostname() -> str:
    """Canonical hostname of the machine running rigbox."""
    return socket.getfqdn()


def inject_real_hostname_into_proxy_configs(config, hostname=None) -> dict:
    """Return a copy of *config* with HOST_MACHINE in proxy URLs replaced by the local hostname.

    Lets proxy settings written relative to this machine resolve from the
    remote instance. The input is never modified, and the hostname is only
    looked up when a placeholder is present.
    """
    resolved = dict(config)
    for key in PROXY_KEYS:
        value = resolved.get(key)
        if value and HOST_MACHINE in value:
            hostname = hostname or local_hostname()
            resolved[key] = value.replace(HOST_MACHINE, hostname)
    return resolved


def _working_proxies(config, probe) -> dict:
    """Map each configured proxy key to whether it should be exported."""
    configured = [key for key in PROXY_KEYS if config.get(key)]
    if not config.get("proxy_health_checking"):
        return {key: True for key in configured}

    logger.info("proxy_health_checking enabled, testing...")
    working = {}
    for key in configured:
        working[key] = probe(config[key], PROXY_CHECK_URLS[key])
        if working[key]:
            logger.info(f"{key} configured and working. enabling.")
        else:
            logger.warning(f"{key} configured, but not reachable! disabling.")
    return working


def env_cmd(command, config, probe=None) -> str:
    """Prefix *command* with ``env`` assignments for proxies and extra PATH entries.

    Proxies that fail their health check are left out rather than failing
    the command. Returns *command* unchanged when there is nothing to export.
    """
    probe = probe or proxy.check_proxy
    assignments = []

    if any(config.get(key) for key in PROXY_KEYS):
        config = inject_real_hostname_into_proxy_configs(config)
        working = _working_proxies(config, probe)
        for key in PROXY_KEYS:
            if working.get(key):
                assignments.append(f"{key}={config[key]}")

    additional_paths = [config[key] for key in PATH_KEYS if config.get(key)]
    if additional_paths:
        assignments.append(f"PATH=$PATH:{':'.join(additional_paths)}")

    if not assignments:
        return command
    return f"env {' '.join(assignments)} {command}"
