"""Command codes and outbound request records.

Each request is an immutable value whose ``encode()`` returns the full
record. Sizes and field order are fixed by the dongle firmware.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .framing import build_record


class Command(IntEnum):
    """Two-byte command codes for requests and their replies."""

    BOOT_CONFIRM = 0x4000
    HANDSHAKE = 0x4003
    BOOT = 0x4004
    HANDSHAKE_REPLY = 0x4023
    SAMPLES = 0x4024
    BOOT_CONFIRM_REPLY = 0x4080
    BOOT_REPLY = 0x4084
    SAMPLES_REPLY = 0x40A4
    LOCK_REPLY = 0xA0F9
    LOCK = 0xA236


LOCK_PAYLOAD = bytes([0xFC, 0xFF, 0x90, 0x01])
HANDSHAKE_SUFFIX = bytes([0x05, 0x00])
SAMPLES_SUFFIX = bytes([0x0A, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00])


def check_identifier(name: str, value: int) -> None:
    """Raise ``ValueError`` unless ``value`` fits in two bytes."""
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} must be 0x0000-0xFFFF, got {value}")


@dataclass(frozen=True)
class BootRequest:
    """Wake the dongle up."""

    def encode(self) -> bytes:
        return build_record(Command.BOOT)


@dataclass(frozen=True)
class BootConfirmRequest:
    def encode(self) -> bytes:
        return build_record(Command.BOOT_CONFIRM)


@dataclass(frozen=True)
class LockRequest:
    """Lock the dongle onto its network before any data request."""

    def encode(self) -> bytes:
        return build_record(Command.LOCK, LOCK_PAYLOAD)


@dataclass(frozen=True)
class HandshakeRequest:
    """Select a logical network.

    Args:
        network_id: 2-byte network identifier.
    """

    network_id: int

    def __post_init__(self) -> None:
        check_identifier("network_id", self.network_id)

    def encode(self) -> bytes:
        payload = self.network_id.to_bytes(2, "big") + HANDSHAKE_SUFFIX
        return build_record(Command.HANDSHAKE, payload)


@dataclass(frozen=True)
class SamplesRequest:
    """Ask for the samples stored on one channel of a network.

    Args:
        network_id: 2-byte network identifier.
        channel_id: 2-byte channel identifier.
    """

    network_id: int
    channel_id: int

    def __post_init__(self) -> None:
        check_identifier("network_id", self.network_id)
        check_identifier("channel_id", self.channel_id)

    def encode(self) -> bytes:
        payload = (
            self.network_id.to_bytes(2, "big")
            + self.channel_id.to_bytes(2, "big")
            + SAMPLES_SUFFIX
        )
        return build_record(Command.SAMPLES, payload)
