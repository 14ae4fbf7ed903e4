"""Raw TCP reachability check used to explain translation failures."""

from __future__ import annotations

import logging
import socket
from typing import Callable

logger = logging.getLogger("cliptranslator.connectivity")

PROBE_HOST = "www.google.com"
PROBE_PORT = 443
PROBE_TIMEOUT = 5.0

PROVIDER_FAILURE_MESSAGE = "Translation failed.\nCheck internet."
NETWORK_FAILURE_MESSAGE = (
    "DNS is broken.\n\n"
    "Fix:\n"
    "• Toggle Wi-Fi\n"
    "• Restart your computer\n"
    "• Use 8.8.8.8 as DNS server"
)


def failure_message(reachable: bool) -> str:
    return PROVIDER_FAILURE_MESSAGE if reachable else NETWORK_FAILURE_MESSAGE


class ConnectivityProbe:
    """Open and immediately close a TCP connection to a well-known host."""

    def __init__(
        self,
        host: str = PROBE_HOST,
        port: int = PROBE_PORT,
        *,
        timeout: float = PROBE_TIMEOUT,
        connection_factory: Callable[..., socket.socket] = socket.create_connection,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self._connection_factory = connection_factory

    def is_reachable(self) -> bool:
        try:
            connection = self._connection_factory((self.host, self.port), timeout=self.timeout)
        except OSError as exc:
            logger.info("Connectivity probe to %s:%d failed: %s", self.host, self.port, exc)
            return False
        connection.close()
        return True
