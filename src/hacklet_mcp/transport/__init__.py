"""Byte-stream transports for the dongle."""

from .base import Transport
from .serial_connection import SerialConfig, SerialConnection
