from __future__ import annotations

from ..config.loader import ImportConfig
from .base import BulkRegistrar, ChunkedChannel, RegistrationError, RegistrationStatus
from .mock import MockChannel, MockRegistrar
from .nmcli import NmcliChannel, NmcliRegistrar

__all__ = [
    "BulkRegistrar",
    "ChunkedChannel",
    "MockChannel",
    "MockRegistrar",
    "NmcliChannel",
    "NmcliRegistrar",
    "RegistrationError",
    "RegistrationStatus",
    "build_channel",
    "build_registrar",
]


def build_registrar(config: ImportConfig) -> BulkRegistrar:
    """Select the bulk registrar for the configured backend."""
    if config.backend == "nmcli":
        return NmcliRegistrar(
            binary=config.nmcli.binary,
            connection_prefix=config.nmcli.connection_prefix,
        )
    return MockRegistrar()


def build_channel(config: ImportConfig) -> ChunkedChannel:
    """Select the chunked registration channel for the configured backend."""
    if config.backend == "nmcli":
        return NmcliChannel(
            binary=config.nmcli.binary,
            connection_prefix=config.nmcli.connection_prefix,
        )
    return MockChannel()
