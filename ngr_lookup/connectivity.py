"""Host connectivity probe, used to tell "offline" from "service down"."""

import logging
import socket

from . import config

logger = logging.getLogger(__name__)


def is_online(
    host: str = config.CONNECTIVITY_PROBE_HOST,
    port: int = config.CONNECTIVITY_PROBE_PORT,
    timeout: float = config.CONNECTIVITY_PROBE_TIMEOUT,
) -> bool:
    """Return True if a TCP connection to *host*:*port* can be opened."""
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError as e:
        logger.debug("Connectivity probe to %s:%s failed: %s", host, port, e)
        return False
