"""gRPC clients for the pachd control plane.

Only a handful of unary RPCs are needed, so the ``Version`` message type is
assembled from a descriptor instead of shipping generated stubs.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import grpc
from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.empty_pb2 import Empty

from pachctl.domain.version import Version
from pachctl.logging_setup import LogConfig
from pachctl.ports.cluster import ClusterAdmin, VersionSource

LOGGER = logging.getLogger(__name__)

GET_VERSION = "/versionpb.API/GetVersion"
PFS_DELETE_ALL = "/pfs.API/DeleteAll"
PPS_DELETE_ALL = "/pps.API/DeleteAll"
PPS_GARBAGE_COLLECT = "/pps.API/GarbageCollect"


def _build_version_message() -> Any:
    proto = descriptor_pb2.FileDescriptorProto(
        name="client/version/versionpb/version.proto",
        package="versionpb",
        syntax="proto3",
    )
    message = proto.message_type.add(name="Version")
    fields = (
        ("major", 1, descriptor_pb2.FieldDescriptorProto.TYPE_UINT32),
        ("minor", 2, descriptor_pb2.FieldDescriptorProto.TYPE_UINT32),
        ("micro", 3, descriptor_pb2.FieldDescriptorProto.TYPE_UINT32),
        ("additional", 4, descriptor_pb2.FieldDescriptorProto.TYPE_STRING),
    )
    for name, number, field_type in fields:
        message.field.add(
            name=name,
            number=number,
            type=field_type,
            label=descriptor_pb2.FieldDescriptorProto.LABEL_OPTIONAL,
        )
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(proto.SerializeToString())
    return message_factory.GetMessageClass(pool.FindMessageTypeByName("versionpb.Version"))


VersionMessage = _build_version_message()


def version_from_message(message: Any) -> Version:
    return Version(
        major=int(message.major),
        minor=int(message.minor),
        micro=int(message.micro),
        additional=str(message.additional),
    )


class _PachdChannel:
    """Lazily dialled insecure channel to ``address``."""

    def __init__(self, address: str, log_config: LogConfig | None = None) -> None:
        self.address = address
        self.log_config = log_config or LogConfig()
        self._channel: grpc.Channel | None = None

    def channel(self) -> grpc.Channel:
        if self._channel is None:
            LOGGER.debug("dialling pachd at %s", self.address)
            self._channel = grpc.insecure_channel(self.address)
        return self._channel

    def unary(
        self,
        method: str,
        response_deserializer: Callable[[bytes], Any],
        *,
        timeout: float | None = None,
    ) -> Any:
        call = self.channel().unary_unary(
            method,
            request_serializer=Empty.SerializeToString,
            response_deserializer=response_deserializer,
        )
        with self.log_config.scoped_rpc_logging():
            return call(Empty(), timeout=timeout)

    def close(self) -> None:
        if self._channel is not None:
            self._channel.close()
            self._channel = None


class GrpcVersionSource(VersionSource):
    def __init__(self, address: str, log_config: LogConfig | None = None) -> None:
        self._conn = _PachdChannel(address, log_config)

    @property
    def address(self) -> str:
        return self._conn.address

    def get_version(self, timeout: float) -> Version:
        try:
            message = self._conn.unary(GET_VERSION, VersionMessage.FromString, timeout=timeout)
        finally:
            self._conn.close()
        return version_from_message(message)


class GrpcClusterAdmin(ClusterAdmin):
    def __init__(self, address: str, log_config: LogConfig | None = None) -> None:
        self._conn = _PachdChannel(address, log_config)

    def delete_all(self) -> None:
        try:
            self._conn.unary(PPS_DELETE_ALL, Empty.FromString)
            self._conn.unary(PFS_DELETE_ALL, Empty.FromString)
        finally:
            self._conn.close()

    def garbage_collect(self) -> None:
        try:
            self._conn.unary(PPS_GARBAGE_COLLECT, Empty.FromString)
        finally:
            self._conn.close()


__all__ = ["GrpcClusterAdmin", "GrpcVersionSource", "VersionMessage", "version_from_message"]
