"""Cottontail DB wire protocol.

Message classes and service stubs are generated at import time from the
bundled ``cottontail.proto`` via :func:`grpc.protos_and_services`, so no
generated ``*_pb2.py`` files live in the tree.

``pb`` holds the message classes (``pb.SchemaName``, ``pb.QueryMessage``...),
``rpc`` the stubs, servicers and ``add_*Servicer_to_server`` helpers.
"""

import grpc

PROTO_PATH = "cottontail_examples/protocol/cottontail.proto"

pb, rpc = grpc.protos_and_services(PROTO_PATH)

__all__ = ["pb", "rpc", "PROTO_PATH"]
