"""Record builder and parser for the dongle's serial protocol.

Record layout::

    +-------+---------+--------+------------------+----------+
    | Start | Command | Length |     Payload      | Checksum |
    | 1 byte| 2 bytes | 1 byte |  ``Length`` bytes|  1 byte  |
    +-------+---------+--------+------------------+----------+

- Start: always 0x02
- Command: big-endian command code
- Length: number of payload bytes
- Checksum: XOR of command, length and payload bytes. Written on every
  outbound record, never checked on inbound ones.

Sample replies are the only records whose size is not known before reading;
see :func:`read_sample_frame`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..errors import DecodeFailure

START_BYTE = 0x02
HEADER_SIZE = 4  # start(1) + command(2) + length(1)
CHECKSUM_SIZE = 1
LENGTH_TOKEN_INDEX = 3


@dataclass(frozen=True)
class Record:
    """A parsed protocol record."""

    command: int
    payload: bytes
    checksum: int

    def __repr__(self) -> str:
        return (
            f"Record(command=0x{self.command:04X}, "
            f"payload={hexlify(self.payload) if self.payload else '(empty)'}, "
            f"checksum=0x{self.checksum:02X})"
        )


def hexlify(data: bytes) -> str:
    """Render bytes as space separated two-character hex pairs."""
    return data.hex(" ")


def checksum(body: bytes) -> int:
    """XOR of every byte in ``body``."""
    value = 0
    for b in body:
        value ^= b
    return value


def build_record(command: int, payload: bytes = b"") -> bytes:
    """Build a complete outbound record.

    Args:
        command: Two-byte command code.
        payload: Command-specific payload bytes (at most 255).

    Returns:
        The record bytes ready to write to the transport.
    """
    if not 0 <= command <= 0xFFFF:
        raise ValueError(f"Command code must be 0x0000-0xFFFF, got {command:#x}")
    if len(payload) > 0xFF:
        raise ValueError(f"Payload must be at most 255 bytes, got {len(payload)}")
    body = command.to_bytes(2, "big") + bytes([len(payload)]) + payload
    return bytes([START_BYTE]) + body + bytes([checksum(body)])


def parse_record(data: bytes, command: int, size: int | None = None) -> Record:
    """Parse an inbound record and check it against the expected shape.

    Args:
        data: Raw record bytes as read from the transport.
        command: Command code the record must carry.
        size: Expected total record size, if fixed for this response.

    Raises:
        DecodeFailure: If the bytes do not match the record layout.
    """
    if size is not None and len(data) != size:
        raise DecodeFailure(f"Expected {size} bytes, got {len(data)}")
    if len(data) < HEADER_SIZE + CHECKSUM_SIZE:
        raise DecodeFailure(f"Record too short: {len(data)} bytes")
    if data[0] != START_BYTE:
        raise DecodeFailure(f"Bad start byte 0x{data[0]:02X}")

    actual_command = int.from_bytes(data[1:3], "big")
    if actual_command != command:
        raise DecodeFailure(
            f"Expected command 0x{command:04X}, got 0x{actual_command:04X}"
        )

    length = data[3]
    payload = data[HEADER_SIZE:-CHECKSUM_SIZE]
    if length != len(payload):
        raise DecodeFailure(
            f"Length byte says {length} payload bytes, record has {len(payload)}"
        )

    return Record(command=actual_command, payload=payload, checksum=data[-1])


def declared_length(header_text: str) -> int:
    """Extract the declared payload length from a rendered sample header.

    The header is split on whitespace and the fourth token is read as a
    hexadecimal integer.

    Raises:
        DecodeFailure: If fewer than four tokens are present or the fourth
            token is not hexadecimal.
    """
    tokens = header_text.split()
    if len(tokens) <= LENGTH_TOKEN_INDEX:
        raise DecodeFailure(
            f"Sample header {header_text!r} has {len(tokens)} tokens, "
            f"need at least {LENGTH_TOKEN_INDEX + 1}"
        )
    token = tokens[LENGTH_TOKEN_INDEX]
    try:
        return int(token, 16)
    except ValueError as e:
        raise DecodeFailure(f"Sample length token {token!r} is not hex") from e


def read_sample_frame(read: Callable[[int], bytes]) -> bytes:
    """Read one variable-length sample record.

    Reads the 4-byte header, takes the declared length from it and reads
    ``declared_length + 1`` further bytes (payload plus checksum).

    Args:
        read: Callable returning exactly ``n`` bytes from the transport.

    Returns:
        The full record, header included.
    """
    header = read(HEADER_SIZE)
    remaining = declared_length(hexlify(header)) + CHECKSUM_SIZE
    return header + read(remaining)
