"""Shared helpers: canned dongle replies and a scripted transport."""

from __future__ import annotations

from hacklet_mcp.errors import TransportFailure
from hacklet_mcp.protocol.commands import Command
from hacklet_mcp.protocol.framing import build_record

DEVICE_ID = bytes.fromhex("0011223344556677")


def boot_reply() -> bytes:
    """27-byte boot reply."""
    return build_record(Command.BOOT_REPLY, DEVICE_ID + bytes(14))


def status_reply(command: Command, status: int = 0x00) -> bytes:
    """6-byte single status byte reply."""
    return build_record(command, bytes([status]))


def boot_sequence_replies() -> list[bytes]:
    return [
        boot_reply(),
        status_reply(Command.BOOT_CONFIRM_REPLY, 0x10),
        status_reply(Command.LOCK_REPLY),
    ]


def samples_reply(
    network_id: int,
    channel_id: int,
    timestamp: int,
    samples: list[int],
) -> bytes:
    payload = (
        network_id.to_bytes(2, "big")
        + channel_id.to_bytes(2, "big")
        + timestamp.to_bytes(4, "little")
        + b"".join(s.to_bytes(2, "little") for s in samples)
    )
    return build_record(Command.SAMPLES_REPLY, payload)


class FakeTransport:
    """Replays canned bytes and records everything the session does."""

    def __init__(self, replies: list[bytes] | None = None, fail_write_on: bytes | None = None):
        self._pending = bytearray(b"".join(replies or []))
        self._fail_write_on = fail_write_on
        self.config = None
        self.writes: list[bytes] = []
        self.reads: list[int] = []
        self.open_count = 0
        self.close_count = 0

    def __call__(self, config):
        # Lets the instance double as the Dongle's transport factory.
        self.config = config
        return self

    def open(self) -> None:
        self.open_count += 1

    def write(self, data: bytes) -> None:
        if self._fail_write_on is not None and data == self._fail_write_on:
            raise TransportFailure("write failed")
        self.writes.append(bytes(data))

    def read(self, size: int) -> bytes:
        self.reads.append(size)
        if len(self._pending) < size:
            raise TransportFailure(f"Timed out after {len(self._pending)} of {size} bytes")
        data = bytes(self._pending[:size])
        del self._pending[:size]
        return data

    def close(self) -> None:
        self.close_count += 1

    @property
    def io_count(self) -> int:
        return len(self.writes) + len(self.reads)
