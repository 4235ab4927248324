"""Network reachability probes. Implement IConnectivityProbe port."""

from __future__ import annotations

import socket
from typing import Optional, Tuple

import structlog

from carve.infrastructure.config import get_connectivity_target

logger = structlog.get_logger(__name__)


class NetworkMonitor:
    """
    TCP reachability check.

    Opens (and closes) a connection to a well-known host. Any socket
    error counts as offline.

    Example:
        >>> monitor = NetworkMonitor(host="1.1.1.1", port=53)
        >>> monitor.is_connected()
        True
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        timeout_seconds: float = 1.5,
    ) -> None:
        default_host, default_port = get_connectivity_target()
        self.host = host or default_host
        self.port = port or default_port
        self.timeout_seconds = timeout_seconds

    @property
    def target(self) -> Tuple[str, int]:
        return self.host, self.port

    def is_connected(self) -> bool:
        try:
            with socket.create_connection(self.target, timeout=self.timeout_seconds):
                return True
        except OSError as e:
            logger.info(
                "No network connection",
                host=self.host,
                port=self.port,
                error=str(e),
            )
            return False


class StaticConnectivityProbe:
    """Probe with a fixed answer (offline mode, wiring, tests)."""

    def __init__(self, connected: bool = True) -> None:
        self.connected = connected

    def is_connected(self) -> bool:
        return self.connected
