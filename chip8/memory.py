"""Memory model for the CHIP-8 interpreter."""

import logging

from .errors import CapacityExceeded

logger = logging.getLogger(__name__)

RAM_SIZE = 4096
ADDRESS_MASK = RAM_SIZE - 1
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = RAM_SIZE - PROGRAM_START

FONT_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5

# Hex digits 0-F, 5 rows of 4 pixels each (upper nibble)
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


class Memory:
    """4 KiB byte-addressed memory. Addresses wrap to 12 bits."""

    def __init__(self, size: int = RAM_SIZE):
        self.size = size
        self._data = bytearray(size)

    def _addr(self, addr: int) -> int:
        return addr % self.size

    def read(self, addr: int) -> int:
        """Read byte at address."""
        return self._data[self._addr(addr)]

    def write(self, addr: int, value: int) -> None:
        """Write byte at address, keeping the low 8 bits of value."""
        self._data[self._addr(addr)] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """Read a big-endian 16-bit word starting at address."""
        return (self.read(addr) << 8) | self.read(addr + 1)

    def read_block(self, addr: int, length: int) -> bytes:
        """Read length consecutive bytes, wrapping past the end of memory."""
        return bytes(self.read(addr + offset) for offset in range(length))

    def load(self, data: bytes, start: int = PROGRAM_START) -> None:
        """Copy a program image into memory starting at start.

        Raises CapacityExceeded before writing if the image does not fit.
        """
        data = bytes(data)
        capacity = self.size - start
        if len(data) > capacity:
            raise CapacityExceeded(
                f"Program of {len(data)} bytes exceeds capacity of {capacity} bytes",
                addr=start,
            )
        self._data[start:start + len(data)] = data
        logger.debug("Loaded %d bytes at 0x%03X", len(data), start)

    def load_font(self, start: int = FONT_ADDRESS) -> None:
        """Install the built-in hex font set."""
        self._data[start:start + len(FONTSET)] = FONTSET

    def snapshot(self) -> bytes:
        """Return a copy of the entire memory."""
        return bytes(self._data)

    def clear(self) -> None:
        """Zero every byte."""
        self._data = bytearray(self.size)
