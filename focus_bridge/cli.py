"""
Focus Bridge Command Line Interface

Run the focus server, talk to a running one, or inspect VersionResponse
payloads.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

import grpc

from focus_bridge import __version__, codec
from focus_bridge.config import FocusConfig
from focus_grpc import VersionResponse

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Configure logging format and level."""
    import coloredlogs
    coloredlogs.install(
        level=level,
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _config_from_args(args) -> FocusConfig:
    config = FocusConfig.from_env()
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.discovery_path is not None:
        config.discovery_path = args.discovery_path
    if args.timeout is not None:
        config.timeout_sec = args.timeout
    if args.log_level is not None:
        config.log_level = args.log_level
    return config


def cmd_serve(args) -> int:
    """Run the focus server until interrupted."""
    config = _config_from_args(args)
    setup_logging(config.log_level)

    from focus_bridge.server import serve
    try:
        asyncio.run(serve(config, args.app_version))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


def cmd_raise(args) -> int:
    """Raise the running instance."""
    config = _config_from_args(args)
    setup_logging(config.log_level)

    from focus_bridge.client import try_raise
    if asyncio.run(try_raise(config)):
        print("raised")
        return 0
    print("no running instance", file=sys.stderr)
    return 1


def cmd_version(args) -> int:
    """Print the running instance's version."""
    config = _config_from_args(args)
    setup_logging(config.log_level)

    from focus_bridge.client import try_version
    try:
        print(asyncio.run(try_version(config)))
    except grpc.aio.AioRpcError as e:
        print(f"no running instance: {e.code()}", file=sys.stderr)
        return 1
    return 0


def cmd_encode(args) -> int:
    """Print the hex encoding of a VersionResponse."""
    print(codec.encode(VersionResponse(version=args.value)).hex())
    return 0


def cmd_decode(args) -> int:
    """Print the version carried by a hex-encoded VersionResponse."""
    try:
        data = bytes.fromhex(args.payload)
    except ValueError:
        print(f"not a hex string: {args.payload!r}", file=sys.stderr)
        return 2
    try:
        message = codec.decode(data)
    except codec.DecodeError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 2
    print(message.version)
    return 0


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", default=None, help="Focus server host")
    parser.add_argument("--port", type=int, default=None, help="Focus server port")
    parser.add_argument(
        "--discovery-path", default=None,
        help="JSON file holding the port the server bound",
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="RPC deadline in seconds",
    )
    parser.add_argument(
        "--log-level", "-l", default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )


def main(argv: Optional[list] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="focus-bridge",
        description="Focus Bridge: single-instance focus and version RPC",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the focus server")
    serve_parser.add_argument(
        "--app-version", required=True,
        help="Version reported to clients",
    )
    _add_connection_args(serve_parser)
    serve_parser.set_defaults(func=cmd_serve)

    raise_parser = subparsers.add_parser("raise", help="Raise the running instance")
    _add_connection_args(raise_parser)
    raise_parser.set_defaults(func=cmd_raise)

    version_parser = subparsers.add_parser(
        "version", help="Query the running instance's version",
    )
    _add_connection_args(version_parser)
    version_parser.set_defaults(func=cmd_version)

    encode_parser = subparsers.add_parser("encode", help="Encode a VersionResponse")
    encode_parser.add_argument("value", help="Version string")
    encode_parser.set_defaults(func=cmd_encode)

    decode_parser = subparsers.add_parser("decode", help="Decode a VersionResponse")
    decode_parser.add_argument("payload", help="Hex-encoded bytes")
    decode_parser.set_defaults(func=cmd_decode)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
