"""An in-memory disk image addressed in 512-byte sectors."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

SECTOR_SIZE = 512

PathLike = Union[str, "os.PathLike[str]"]


class BlockDeviceError(Exception):
    """Raised when a sector transfer cannot be carried out."""


class BlockDevice:
    """A disk made of fixed-size sectors, held in memory."""

    def __init__(self, data: bytes | bytearray) -> None:
        buffer = bytearray(data)
        if len(buffer) % SECTOR_SIZE:
            raise BlockDeviceError(
                f"image size {len(buffer)} is not a multiple of {SECTOR_SIZE}"
            )
        self._data = buffer

    @property
    def sector_count(self) -> int:
        """Number of sectors on the device."""
        return len(self._data) // SECTOR_SIZE

    def _check_range(self, lba: int, count: int) -> None:
        if count < 1:
            raise BlockDeviceError(f"sector count must be positive, got {count}")
        if lba < 0 or lba + count > self.sector_count:
            raise BlockDeviceError(
                f"sectors {lba}..{lba + count - 1} outside device of "
                f"{self.sector_count} sectors"
            )

    def read_sectors(self, lba: int, count: int = 1) -> bytes:
        """Return ``count`` sectors starting at ``lba``."""
        self._check_range(lba, count)
        start = lba * SECTOR_SIZE
        return bytes(self._data[start:start + count * SECTOR_SIZE])

    def write_sectors(self, lba: int, data: bytes | bytearray) -> None:
        """Write whole sectors starting at ``lba``."""
        payload = bytes(data)
        if not payload or len(payload) % SECTOR_SIZE:
            raise BlockDeviceError(
                f"write of {len(payload)} bytes is not a whole number of sectors"
            )
        self._check_range(lba, len(payload) // SECTOR_SIZE)
        start = lba * SECTOR_SIZE
        self._data[start:start + len(payload)] = payload

    def to_bytes(self) -> bytes:
        """Return a copy of the whole image."""
        return bytes(self._data)

    def save(self, path: PathLike) -> None:
        """Write the image to a file."""
        Path(path).write_bytes(self._data)


def load_image(path: PathLike) -> BlockDevice:
    """Load a disk image file into a :class:`BlockDevice`."""
    return BlockDevice(Path(path).read_bytes())