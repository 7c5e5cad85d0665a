"""Focus gRPC server.

Implements the focus.Focus service so that a second application instance can
ask the running one to raise its window and report its version.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

import grpc
from google.protobuf import empty_pb2

from focus_grpc import focus_pb2, focus_pb2_grpc
from focus_bridge.config import (
    FocusConfig,
    remove_discovered_port,
    save_discovered_port,
)

logger = logging.getLogger(__name__)


class FocusServicer(focus_pb2_grpc.FocusServicer):
    """gRPC implementation of the Focus service."""

    def __init__(
        self,
        version: str,
        on_raise: Optional[Callable[[], None]] = None,
    ) -> None:
        self._version = version
        self._on_raise = on_raise
        self._raise_event = asyncio.Event()
        self.raise_count = 0

    async def Raise(self, request, context):
        """ウィンドウ前面化の要求を通知"""
        self.raise_count += 1
        logger.info("Raise requested (%d)", self.raise_count)
        self._raise_event.set()
        if self._on_raise is not None:
            self._on_raise()
        return empty_pb2.Empty()

    async def Version(self, request, context):
        return focus_pb2.VersionResponse(version=self._version)

    async def wait_for_raise(self, timeout_sec: Optional[float] = None) -> None:
        """Wait for the next Raise call. Raises asyncio.TimeoutError on timeout."""
        await asyncio.wait_for(self._raise_event.wait(), timeout=timeout_sec)
        self._raise_event.clear()


class FocusService:
    """Owns the grpc.aio server hosting a FocusServicer."""

    def __init__(
        self,
        config: FocusConfig,
        version: str,
        on_raise: Optional[Callable[[], None]] = None,
    ) -> None:
        self._config = config
        self.servicer = FocusServicer(version, on_raise=on_raise)
        # Without this, grpc on Linux happily shares a port with another
        # running instance.
        self._server = grpc.aio.server(options=[("grpc.so_reuseport", 0)])
        focus_pb2_grpc.add_FocusServicer_to_server(self.servicer, self._server)
        self._port: Optional[int] = None

    @property
    def port(self) -> Optional[int]:
        return self._port

    def _bind(self) -> int:
        """Bind the preferred port, or an ephemeral one if it is taken."""
        host = self._config.host
        try:
            port = self._server.add_insecure_port(f"{host}:{self._config.port}")
        except RuntimeError:
            port = 0
        if port == 0:
            logger.warning(
                "Focus port %d unavailable, falling back to an ephemeral port",
                self._config.port,
            )
            port = self._server.add_insecure_port(f"{host}:0")
        return port

    async def start(self) -> int:
        """Bind, start serving and publish the port. Returns the bound port."""
        self._port = self._bind()
        await self._server.start()
        if self._config.discovery_path:
            save_discovered_port(self._config.discovery_path, self._port)
        logger.info("Focus gRPC server listening on %s:%d", self._config.host, self._port)
        return self._port

    async def stop(self, grace: Optional[float] = None) -> None:
        logger.info("Stopping focus gRPC server")
        await self._server.stop(grace)
        if self._config.discovery_path and self._port is not None:
            remove_discovered_port(self._config.discovery_path)

    async def wait_for_termination(self) -> None:
        await self._server.wait_for_termination()


async def serve(config: FocusConfig, version: str) -> None:
    """Start the focus server and block until it terminates."""
    service = FocusService(config, version)
    await service.start()
    try:
        await service.wait_for_termination()
    finally:
        await service.stop(grace=0)
