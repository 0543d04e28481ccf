"""Proxy reachability probe."""

import logging

import httpx

logger = logging.getLogger(__name__)


def check_proxy(proxy_url, target_url, timeout=10) -> bool:
    """Return True if *target_url* answers when fetched through *proxy_url*.

    Any HTTP response counts as reachable; only connection-level failures
    (refused, timeout, TLS, proxy errors) mark the proxy as not working.
    """
    try:
        with httpx.Client(proxy=proxy_url, timeout=timeout) as client:
            resp = client.get(target_url)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.debug(f"Proxy probe {proxy_url} -> {target_url} failed: {e}")
        return False
    logger.debug(f"Proxy probe {proxy_url} -> {target_url}: HTTP {resp.status_code}")
    return True
