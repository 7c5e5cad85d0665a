"""Focus gRPC definitions (bridge-local copy of focus.proto)."""

from focus_grpc.focus_pb2 import VersionResponse

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 1042
