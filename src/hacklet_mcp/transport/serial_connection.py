"""Serial connection to the dongle.

The dongle enumerates as a USB serial adapter (FTDI) and talks 115200 8N1.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import serial

from ..errors import TransportFailure

logger = logging.getLogger(__name__)

DEFAULT_PORT = "/dev/ttyUSB0"
BAUD_RATE = 115200
READ_TIMEOUT_S = 1.0


@dataclass(frozen=True)
class SerialConfig:
    """Serial line settings for opening the dongle."""

    port: str = DEFAULT_PORT
    baudrate: int = BAUD_RATE
    bytesize: int = serial.EIGHTBITS
    stopbits: int = serial.STOPBITS_ONE
    parity: str = serial.PARITY_NONE
    timeout: float = READ_TIMEOUT_S


class SerialConnection:
    """Manages the serial connection to the dongle.

    Usage::

        conn = SerialConnection(SerialConfig(port="/dev/ttyUSB0"))
        conn.open()
        conn.write(record)
        reply = conn.read(6)
        conn.close()
    """

    def __init__(self, config: SerialConfig | None = None) -> None:
        self._config = config or SerialConfig()
        self._serial: serial.Serial | None = None

    @property
    def connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def open(self) -> None:
        """Open the serial port.

        Raises:
            TransportFailure: If the port cannot be opened.
        """
        cfg = self._config
        try:
            self._serial = serial.Serial(
                port=cfg.port,
                baudrate=cfg.baudrate,
                bytesize=cfg.bytesize,
                stopbits=cfg.stopbits,
                parity=cfg.parity,
                timeout=cfg.timeout,
            )
        except (serial.SerialException, OSError) as e:
            raise TransportFailure(
                f"Could not open dongle on {cfg.port}. "
                f"Ensure the device is connected and you have permissions. "
                f"Last error: {e}"
            ) from e
        logger.info("Connected to %s at %d baud", cfg.port, cfg.baudrate)

    def close(self) -> None:
        """Close the serial port."""
        if self._serial is None:
            return

        try:
            self._serial.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error closing port: %s", e)
        finally:
            self._serial = None
            logger.info("Disconnected")

    def write(self, data: bytes) -> None:
        """Write a record to the dongle.

        Raises:
            TransportFailure: If not connected or the write fails.
        """
        if not self.connected:
            raise TransportFailure("Not connected to device")

        try:
            written = self._serial.write(data)
            self._serial.flush()
        except (serial.SerialException, OSError) as e:
            raise TransportFailure(f"Write failed: {e}") from e
        if written is not None and written != len(data):
            raise TransportFailure(f"Short write: {written} of {len(data)} bytes")

    def read(self, size: int) -> bytes:
        """Read exactly ``size`` bytes from the dongle.

        Raises:
            TransportFailure: If not connected, the read fails, or the
                timeout expires before ``size`` bytes arrive.
        """
        if not self.connected:
            raise TransportFailure("Not connected to device")

        try:
            data = self._serial.read(size)
        except (serial.SerialException, OSError) as e:
            raise TransportFailure(f"Read failed: {e}") from e
        if len(data) != size:
            raise TransportFailure(
                f"Timed out after {len(data)} of {size} bytes"
            )
        return bytes(data)
