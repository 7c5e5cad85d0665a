"""Focus gRPC client.

Used by a freshly launched application instance to find out whether another
instance is already running, and if so to hand focus over to it.
"""

from __future__ import annotations

import logging
from typing import Optional

import grpc
from google.protobuf import empty_pb2

from focus_grpc import focus_pb2_grpc
from focus_bridge.config import FocusConfig

logger = logging.getLogger(__name__)


async def try_raise(config: Optional[FocusConfig] = None) -> bool:
    """Ask the running instance to raise itself.

    Returns True if an instance answered, False otherwise. Never raises on
    RPC failure.
    """
    config = config or FocusConfig()
    target = config.target
    async with grpc.aio.insecure_channel(target) as channel:
        stub = focus_pb2_grpc.FocusStub(channel)
        try:
            await stub.Raise(empty_pb2.Empty(), timeout=config.timeout_sec)
        except grpc.aio.AioRpcError as e:
            logger.info("No focus server at %s: %s", target, e.code())
            return False
    logger.debug("Raised focus server at %s", target)
    return True


async def try_version(config: Optional[FocusConfig] = None) -> str:
    """Return the running instance's version.

    Raises grpc.aio.AioRpcError when no instance answers in time.
    """
    config = config or FocusConfig()
    async with grpc.aio.insecure_channel(config.target) as channel:
        stub = focus_pb2_grpc.FocusStub(channel)
        response = await stub.Version(empty_pb2.Empty(), timeout=config.timeout_sec)
    return response.version
