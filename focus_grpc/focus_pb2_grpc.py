"""Client and server classes for the ``focus.Focus`` gRPC service.

Same shape as ``grpc_tools.protoc --grpc_python_out`` output for
``focus.proto``.
"""

import grpc
from google.protobuf import empty_pb2 as google_dot_protobuf_dot_empty__pb2

from focus_grpc import focus_pb2 as focus__pb2

SERVICE_NAME = "focus.Focus"


class FocusStub(object):
    """Lets a second application instance reach the running one."""

    def __init__(self, channel):
        """Constructor.

        Args:
            channel: A grpc.Channel or grpc.aio.Channel.
        """
        self.Raise = channel.unary_unary(
            f"/{SERVICE_NAME}/Raise",
            request_serializer=google_dot_protobuf_dot_empty__pb2.Empty.SerializeToString,
            response_deserializer=google_dot_protobuf_dot_empty__pb2.Empty.FromString,
        )
        self.Version = channel.unary_unary(
            f"/{SERVICE_NAME}/Version",
            request_serializer=google_dot_protobuf_dot_empty__pb2.Empty.SerializeToString,
            response_deserializer=focus__pb2.VersionResponse.FromString,
        )


class FocusServicer(object):
    """Lets a second application instance reach the running one."""

    def Raise(self, request, context):
        """Bring the running application to the front."""
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details("Method not implemented!")
        raise NotImplementedError("Method not implemented!")

    def Version(self, request, context):
        """Report the running application's version."""
        context.set_code(grpc.StatusCode.UNIMPLEMENTED)
        context.set_details("Method not implemented!")
        raise NotImplementedError("Method not implemented!")


def add_FocusServicer_to_server(servicer, server):
    rpc_method_handlers = {
        "Raise": grpc.unary_unary_rpc_method_handler(
            servicer.Raise,
            request_deserializer=google_dot_protobuf_dot_empty__pb2.Empty.FromString,
            response_serializer=google_dot_protobuf_dot_empty__pb2.Empty.SerializeToString,
        ),
        "Version": grpc.unary_unary_rpc_method_handler(
            servicer.Version,
            request_deserializer=google_dot_protobuf_dot_empty__pb2.Empty.FromString,
            response_serializer=focus__pb2.VersionResponse.SerializeToString,
        ),
    }
    generic_handler = grpc.method_handlers_generic_handler(
        SERVICE_NAME, rpc_method_handlers
    )
    server.add_generic_rpc_handlers((generic_handler,))
