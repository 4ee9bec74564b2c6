"""Session layer: boot the dongle, lock it, and run requests against it.

Usage::

    dongle = Dongle(logger=logging.getLogger("hacklet"))
    with dongle.open_session(SerialConfig(port="/dev/ttyUSB0")) as session:
        session.select_network(0x7A4B)
        samples = session.request_samples(0x7A4B, 0x0000)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from .errors import SessionAlreadyOpen, SessionNotOpen
from .protocol.commands import (
    BootConfirmRequest,
    BootRequest,
    HandshakeRequest,
    LockRequest,
    SamplesRequest,
)
from .protocol.framing import hexlify, read_sample_frame
from .protocol.parser import (
    AckResponse,
    BootConfirmResponse,
    BootResponse,
    HandshakeResponse,
    LockResponse,
    SamplesResponse,
)
from .transport.base import Transport
from .transport.serial_connection import SerialConfig, SerialConnection

T = TypeVar("T")


class Dongle:
    """One dongle and at most one open session on it.

    Args:
        transport_factory: Builds an unopened transport from a config.
        logger: Receives the boot progress and a hex trace of every record
            sent and received. Nothing is logged when omitted.
    """

    def __init__(
        self,
        transport_factory: Callable[[SerialConfig], Transport] = SerialConnection,
        logger: logging.Logger | None = None,
    ) -> None:
        self._transport_factory = transport_factory
        self._logger = logger
        self._transport: Transport | None = None
        self._open = False
        self.boot_response: BootResponse | None = None

    @property
    def is_open(self) -> bool:
        return self._open

    @contextmanager
    def open_session(self, config: SerialConfig | None = None) -> Iterator[Dongle]:
        """Boot and lock the dongle, yield it, and always release the port.

        Raises:
            SessionAlreadyOpen: If this dongle already has a session.
            TransportFailure: If the port cannot be opened, written or read.
            DecodeFailure: If a boot step gets an unexpected reply.
        """
        if self._transport is not None:
            raise SessionAlreadyOpen()

        transport = self._transport_factory(config or SerialConfig())
        self._transport = transport
        try:
            transport.open()
            self._log(logging.INFO, "Booting")
            boot_response = self._boot()
            self._boot_confirm()
            self._log(logging.INFO, "Booting complete")
            self._log(logging.INFO, "Locking network")
            self._lock_network()
            self._log(logging.INFO, "Locking complete")

            self.boot_response = boot_response
            self._open = True
            yield self
        finally:
            self._open = False
            self.boot_response = None
            self._transport = None
            transport.close()

    def run_session(
        self,
        operation: Callable[[Dongle], T],
        config: SerialConfig | None = None,
    ) -> T:
        """Run ``operation`` inside a session and return its result."""
        with self.open_session(config) as session:
            return operation(session)

    def select_network(self, network_id: int) -> HandshakeResponse:
        """Select the network.

        Args:
            network_id: 2-byte identifier for the network.
        """
        self._require_session()

        self._transmit(HandshakeRequest(network_id=network_id).encode())
        return HandshakeResponse.decode(self._receive(HandshakeResponse.SIZE))

    def request_samples(self, network_id: int, channel_id: int) -> SamplesResponse:
        """Request the samples stored for a channel.

        Args:
            network_id: 2-byte identifier for the network.
            channel_id: 2-byte identifier for the channel.
        """
        self._require_session()

        request = SamplesRequest(network_id=network_id, channel_id=channel_id)
        self._transmit(request.encode())
        AckResponse.decode(self._receive(AckResponse.SIZE))
        buffer = read_sample_frame(self._receive)
        return SamplesResponse.decode(buffer)

    def _boot(self) -> BootResponse:
        self._transmit(BootRequest().encode())
        return BootResponse.decode(self._receive(BootResponse.SIZE))

    def _boot_confirm(self) -> BootConfirmResponse:
        self._transmit(BootConfirmRequest().encode())
        return BootConfirmResponse.decode(self._receive(BootConfirmResponse.SIZE))

    def _lock_network(self) -> LockResponse:
        self._transmit(LockRequest().encode())
        return LockResponse.decode(self._receive(LockResponse.SIZE))

    def _transmit(self, data: bytes) -> None:
        self._log(logging.DEBUG, "TX: %s", hexlify(data))
        self._transport.write(data)

    def _receive(self, size: int) -> bytes:
        data = self._transport.read(size)
        self._log(logging.DEBUG, "RX: %s", hexlify(data))
        return data

    def _log(self, level: int, msg: str, *args) -> None:
        if self._logger is not None:
            self._logger.log(level, msg, *args)

    def _require_session(self) -> None:
        if not self._open:
            raise SessionNotOpen()
