"""Example client programs for the Cottontail DB gRPC interface."""

__version__ = "0.1.0"
