"""
Transport interface definition.

Defines the byte-stream protocol the session drives. The serial connection
implements it, as do the scripted transports used in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """
    Protocol (interface) for a reliable, blocking byte stream.

    Implementations raise ``TransportFailure`` for every failure; the
    session never sees the underlying library's exceptions.
    """

    def open(self) -> None:
        """Acquire the underlying device."""
        ...

    def write(self, data: bytes) -> None:
        """Write all of ``data`` to the device."""
        ...

    def read(self, size: int) -> bytes:
        """
        Block until exactly ``size`` bytes have arrived and return them.

        Raises:
            TransportFailure: On error, or if the device stops short of
                ``size`` bytes before the timeout.
        """
        ...

    def close(self) -> None:
        """Release the device. Safe to call when not open."""
        ...
