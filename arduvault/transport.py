"""Serial link to the vault device."""

from __future__ import annotations

from collections.abc import Iterable

import serial
from serial.tools import list_ports

from .constants import BAUD_RATE

_PORT_MARKERS = ("ttyACM", "ttyUSB")
_READ_TIMEOUT = 0.5


def find_port(port_names: Iterable[str]) -> str:
    """Return the first ACM/USB serial port name; raise if there is none."""
    for name in port_names:
        if any(marker in name for marker in _PORT_MARKERS):
            return name
    raise serial.SerialException("No AMC/USB serial port found.")


class SerialLink:
    """Line and byte oriented I/O over an open serial port.

    Reads that time out are retried until the requested data arrives.
    """

    def __init__(self, port) -> None:
        self.port = port

    @classmethod
    def open(cls) -> SerialLink:
        """Open the first ACM/USB serial port found on the system."""
        name = find_port(info.device for info in list_ports.comports())
        return cls(serial.Serial(name, BAUD_RATE, timeout=_READ_TIMEOUT))

    def close(self) -> None:
        self.port.close()

    def __enter__(self) -> SerialLink:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def write_str(self, data: str) -> None:
        self.write_bytes(data.encode("utf-8"))

    def write_bytes(self, data: bytes) -> None:
        self.port.write(bytes(data))
        self.port.flush()

    def read_line(self) -> str:
        """Read up to the next newline and return the line without it."""
        line = bytearray()
        while True:
            byte = self.port.read(1)
            if not byte:
                continue
            if byte == b"\n":
                break
            line += byte
        return line.decode("utf-8")

    def read_exact(self, size: int) -> bytes:
        """Read exactly size bytes."""
        buffer = bytearray()
        while len(buffer) < size:
            try:
                chunk = self.port.read(size - len(buffer))
            except (OSError, serial.SerialException) as exc:
                raise serial.SerialException(f"Serial read exact failed: {exc}") from exc
            buffer += chunk
        return bytes(buffer)