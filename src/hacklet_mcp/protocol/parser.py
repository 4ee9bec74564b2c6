"""Response parsing for dongle replies.

Every response decodes from a buffer already known to have the right size
for its variant; the session decides how many bytes to read.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, ClassVar

from ..errors import DecodeFailure
from .commands import Command
from .framing import CHECKSUM_SIZE, HEADER_SIZE, hexlify, parse_record

BOOT_RESPONSE_SIZE = 27
STATUS_RESPONSE_SIZE = 6


@dataclass(frozen=True)
class BootResponse:
    """Parsed boot reply (27 bytes)."""

    payload: bytes

    SIZE: ClassVar[int] = BOOT_RESPONSE_SIZE

    @property
    def device_id(self) -> str:
        return self.payload[:8].hex()

    @classmethod
    def decode(cls, data: bytes) -> BootResponse:
        record = parse_record(data, Command.BOOT_REPLY, cls.SIZE)
        return cls(payload=record.payload)

    def to_dict(self) -> dict[str, Any]:
        return {"device_id": self.device_id, "raw_hex": hexlify(self.payload)}


@dataclass(frozen=True)
class _StatusResponse:
    """A 6-byte reply carrying a single status byte."""

    status: int

    SIZE: ClassVar[int] = STATUS_RESPONSE_SIZE
    COMMAND: ClassVar[int] = 0

    @classmethod
    def decode(cls, data: bytes):
        record = parse_record(data, cls.COMMAND, cls.SIZE)
        return cls(status=record.payload[0])

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status}


@dataclass(frozen=True)
class BootConfirmResponse(_StatusResponse):
    COMMAND = Command.BOOT_CONFIRM_REPLY


@dataclass(frozen=True)
class LockResponse(_StatusResponse):
    COMMAND = Command.LOCK_REPLY


@dataclass(frozen=True)
class HandshakeResponse(_StatusResponse):
    COMMAND = Command.HANDSHAKE_REPLY


@dataclass(frozen=True)
class AckResponse(_StatusResponse):
    """Acknowledgement sent before the sample data."""

    COMMAND = Command.SAMPLES


@dataclass(frozen=True)
class SamplesResponse:
    """Parsed sample reply.

    Payload layout::

        network_id (u16 BE) | channel_id (u16 BE) | timestamp (u32 LE) | samples (u16 LE)*

    The number of samples follows from the length byte of the header.
    """

    network_id: int
    channel_id: int
    timestamp: int
    samples: tuple[int, ...]

    FIXED_SIZE: ClassVar[int] = 8

    @classmethod
    def decode(cls, data: bytes) -> SamplesResponse:
        if len(data) < HEADER_SIZE:
            raise DecodeFailure(f"Sample record too short: {len(data)} bytes")
        size = HEADER_SIZE + data[3] + CHECKSUM_SIZE
        payload = parse_record(data, Command.SAMPLES_REPLY, size).payload

        sample_bytes = len(payload) - cls.FIXED_SIZE
        if sample_bytes < 0 or sample_bytes % 2:
            raise DecodeFailure(
                f"Sample payload of {len(payload)} bytes does not hold "
                f"a whole number of samples"
            )

        network_id = int.from_bytes(payload[0:2], "big")
        channel_id = int.from_bytes(payload[2:4], "big")
        timestamp = int.from_bytes(payload[4:8], "little")
        count = sample_bytes // 2
        samples = struct.unpack(f"<{count}H", payload[cls.FIXED_SIZE:])
        return cls(
            network_id=network_id,
            channel_id=channel_id,
            timestamp=timestamp,
            samples=tuple(samples),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "network_id": f"0x{self.network_id:04X}",
            "channel_id": f"0x{self.channel_id:04X}",
            "timestamp": self.timestamp,
            "samples": list(self.samples),
            "sample_count": len(self.samples),
        }
