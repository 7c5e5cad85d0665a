"""
Focus Bridge

Single-instance helper for desktop applications: a small gRPC service that
lets a second instance raise the running one and query its version, plus a
typed codec for the VersionResponse message it exchanges.
"""

__version__ = "0.1.0"
