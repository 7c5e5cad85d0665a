"""Focus bridge configuration.

Settings for where the focus server listens and how long clients wait for
it, plus the discovery file the server writes once it has bound a port.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from focus_grpc import DEFAULT_HOST, DEFAULT_PORT

logger = logging.getLogger(__name__)


@dataclass
class FocusConfig:
    """
    Connection settings shared by the focus server and its clients.

    When ``discovery_path`` is set the server records the port it actually
    bound there, and clients prefer that port over ``port``.
    """
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout_sec: float = 1.0                # Client RPC deadline
    discovery_path: Optional[str] = None    # JSON file: {"port": N}
    log_level: str = "INFO"

    @property
    def target(self) -> str:
        """Address clients should dial, honouring the discovery file."""
        return f"{self.host}:{self.resolve_port()}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FocusConfig":
        """Create config from dictionary."""
        return cls(
            host=data.get("host", DEFAULT_HOST),
            port=int(data.get("port", DEFAULT_PORT)),
            timeout_sec=float(data.get("timeout_sec", 1.0)),
            discovery_path=data.get("discovery_path"),
            log_level=data.get("log_level", "INFO"),
        )

    @classmethod
    def from_env(cls) -> "FocusConfig":
        """Create config from environment variables."""
        config = cls()

        if host := os.environ.get("FOCUS_HOST"):
            config.host = host
        if port := os.environ.get("FOCUS_PORT"):
            config.port = int(port)
        if timeout := os.environ.get("FOCUS_TIMEOUT"):
            config.timeout_sec = float(timeout)
        if discovery_path := os.environ.get("FOCUS_DISCOVERY_PATH"):
            config.discovery_path = discovery_path
        if log_level := os.environ.get("FOCUS_LOG_LEVEL"):
            config.log_level = log_level

        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "timeout_sec": self.timeout_sec,
            "discovery_path": self.discovery_path,
            "log_level": self.log_level,
        }

    def resolve_port(self) -> int:
        """Port clients should dial: the discovered one if any, else ``port``."""
        if self.discovery_path:
            discovered = load_discovered_port(self.discovery_path)
            if discovered is not None:
                return discovered
        return self.port


# ---------------------------------------------------------------------------
# Discovery file
# ---------------------------------------------------------------------------

def save_discovered_port(path: str, port: int) -> None:
    """Write the bound port to ``path``, creating parent directories."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        json.dump({"port": port}, f)
    logger.debug("Wrote focus port %d to %s", port, path)


def load_discovered_port(path: str) -> Optional[int]:
    """Read the port written by ``save_discovered_port``.

    Returns None when the file does not exist or cannot be understood.
    """
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.warning("Unreadable focus discovery file %s: %s", path, e)
        return None

    port = data.get("port") if isinstance(data, dict) else None
    if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
        logger.warning("Invalid port in focus discovery file %s: %r", path, port)
        return None
    return port


def remove_discovered_port(path: str) -> None:
    """Delete the discovery file so clients fall back to the configured port."""
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    logger.debug("Removed focus discovery file %s", path)
