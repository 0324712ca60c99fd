"""A FAT32 volume on a block device: directory walking and editing."""

from __future__ import annotations

import errno
import re
from typing import Iterable, Iterator, Optional

from .blockdev import SECTOR_SIZE, BlockDevice
from .records import (
    ATTR_DIRECTORY,
    DELETED_MARKER,
    END_MARKER,
    ENTRY_SIZE,
    FAT_ENTRY_EOC,
    BootParameters,
    DirectoryEntry,
    LongNameBuffer,
    LongNameEntry,
    is_long_name,
    partition_start_lba,
)

_CHAIN_END = 0x0FFFFFF8
_ENTRY_MASK = 0x0FFFFFFF
_FAT_ENTRY_SIZE = 4
_SEPARATORS = re.compile(r"[/\\]")


def _raw_entries(sector: bytes) -> Iterator[tuple[int, bytes]]:
    """Yield each 32-byte slot of a sector with its byte offset."""
    for offset in range(0, SECTOR_SIZE, ENTRY_SIZE):
        yield offset, sector[offset:offset + ENTRY_SIZE]


def _split_parent(path: str) -> tuple[str, str]:
    """Split a path at its last '/' into parent directory and leaf name."""
    parent, slash, leaf = path.rpartition("/")
    if not slash:
        raise ValueError(f"path {path!r} has no directory separator")
    if not leaf:
        raise ValueError(f"path {path!r} has no final name")
    return parent or "/", leaf


def _padded_name(name: str) -> bytes:
    """The raw 11-byte name field for a new directory entry."""
    return name.encode("latin-1")[:11].ljust(11, b" ")


def _raw_short_name(raw: bytes) -> str:
    """The raw name field with trailing blanks removed."""
    return raw[:11].split(b"\0", 1)[0].decode("latin-1").rstrip(" ")


class Fat32Volume:
    """A FAT32 file system found through the first partition of a disk."""

    def __init__(self, device: BlockDevice) -> None:
        self.device = device
        self.partition_start = partition_start_lba(device.read_sectors(0))
        self.params = BootParameters.parse(
            device.read_sectors(self.partition_start)
        )

    def fat_start_sector(self) -> int:
        """The sector holding the first FAT entries."""
        return self.params.reserved_sector_count

    def cluster_to_sector(self, cluster: int) -> int:
        """The first sector of a data cluster."""
        params = self.params
        return (
            params.reserved_sector_count
            + params.num_fats * params.fat_size
            + (cluster - 2) * params.sectors_per_cluster
        )

    def _fat_location(self, cluster: int) -> tuple[int, int]:
        offset = cluster * _FAT_ENTRY_SIZE
        return self.fat_start_sector() + offset // SECTOR_SIZE, offset % SECTOR_SIZE

    def get_fat_entry(self, cluster: int) -> int:
        """The FAT value for ``cluster`` with its top four bits masked."""
        sector_number, offset = self._fat_location(cluster)
        sector = self.device.read_sectors(sector_number)
        value = int.from_bytes(sector[offset:offset + 4], "little")
        return value & _ENTRY_MASK

    def set_fat_entry(self, cluster: int, value: int) -> None:
        """Store a full 32-bit FAT value for ``cluster``."""
        sector_number, offset = self._fat_location(cluster)
        sector = bytearray(self.device.read_sectors(sector_number))
        sector[offset:offset + 4] = (value & 0xFFFFFFFF).to_bytes(4, "little")
        self.device.write_sectors(sector_number, sector)

    def _cluster_sectors(self, cluster: int) -> range:
        first = self.cluster_to_sector(cluster)
        return range(first, first + self.params.sectors_per_cluster)

    def _walk(
        self, sector_numbers: Iterable[int], reset_each_sector: bool = False
    ) -> Iterator[tuple[str, DirectoryEntry]]:
        names = LongNameBuffer()
        for number in sector_numbers:
            if reset_each_sector:
                names.clear()
            for _offset, raw in _raw_entries(self.device.read_sectors(number)):
                marker = raw[0]
                if marker == END_MARKER:
                    return
                if marker == DELETED_MARKER:
                    continue
                if is_long_name(raw):
                    names.add(LongNameEntry.parse(raw))
                    continue
                entry = DirectoryEntry.parse(raw)
                yield names.take() or entry.short_name(), entry

    def iter_dir(self, cluster: int) -> Iterator[tuple[str, DirectoryEntry]]:
        """Yield ``(name, entry)`` for each live entry in a directory cluster.

        Long names are used where present; only the given cluster is read.
        """
        return self._walk(self._cluster_sectors(cluster))

    def resolve_path(self, path: str) -> Optional[int]:
        """The first cluster of the directory at ``path``, or ``None``."""
        if path[:1] in ("/", "\\"):
            path = path[1:]
        if not path:
            return self.params.root_cluster

        segments = _SEPARATORS.split(path)
        if len(segments) > 1 and segments[-1] == "":
            segments.pop()

        current = self.params.root_cluster
        for segment in segments:
            match = next(
                (
                    entry
                    for name, entry in self.iter_dir(current)
                    if entry.is_dir() and name == segment
                ),
                None,
            )
            if match is None:
                return None
            current = match.cluster()
            if current == 0:
                return None
        return current

    def dir_exists(self, path: str) -> bool:
        """Whether ``path`` names a directory."""
        return self.resolve_path(path) is not None

    def _chain_sectors(self, cluster: int) -> Iterator[int]:
        while 2 <= cluster < _CHAIN_END:
            yield from self._cluster_sectors(cluster)
            cluster = self.get_fat_entry(cluster)

    def list_root(self) -> list[str]:
        """Names in the root directory, following its cluster chain."""
        sectors = self._chain_sectors(self.params.root_cluster)
        return [name for name, _ in self._walk(sectors, reset_each_sector=True)]

    def list_directory(self, path: str) -> list[tuple[str, DirectoryEntry]]:
        """Entries of the directory at ``path``, without '.' and '..'."""
        cluster = self.resolve_path(path)
        if cluster is None:
            raise FileNotFoundError(errno.ENOENT, "Directory not found", path)
        return [
            (name, entry)
            for name, entry in self.iter_dir(cluster)
            if name not in (".", "..")
        ]

    def find_free_cluster(self) -> int:
        """Claim the first free cluster, marking it end-of-chain."""
        entries_per_sector = SECTOR_SIZE // _FAT_ENTRY_SIZE
        total = self.params.fat_size * entries_per_sector
        start = self.fat_start_sector()
        for index in range(self.params.fat_size):
            sector_number = start + index
            sector = bytearray(self.device.read_sectors(sector_number))
            for offset in range(0, SECTOR_SIZE, _FAT_ENTRY_SIZE):
                cluster = index * entries_per_sector + offset // _FAT_ENTRY_SIZE
                if cluster < 2 or cluster >= total:
                    continue
                value = int.from_bytes(sector[offset:offset + 4], "little")
                if value & _ENTRY_MASK == 0:
                    sector[offset:offset + 4] = FAT_ENTRY_EOC.to_bytes(4, "little")
                    self.device.write_sectors(sector_number, sector)
                    return cluster
        raise OSError(errno.ENOSPC, "No free cluster")

    def create_dir(self, path: str) -> int:
        """Create an empty directory and return its first cluster."""
        parent, name = _split_parent(path)
        parent_cluster = self.resolve_path(parent)
        if parent_cluster is None:
            raise FileNotFoundError(errno.ENOENT, "Parent directory not found", parent)
        if any(existing == name for existing, _ in self.iter_dir(parent_cluster)):
            raise FileExistsError(errno.EEXIST, "Entry already exists", path)
        raw_name = _padded_name(name)

        new_cluster = self.find_free_cluster()
        dot = DirectoryEntry(
            name=b".          ",
            attr=ATTR_DIRECTORY,
            first_cluster_high=(new_cluster >> 16) & 0xFFFF,
            first_cluster_low=new_cluster & 0xFFFF,
        )
        dotdot = DirectoryEntry(
            name=b"..         ",
            attr=ATTR_DIRECTORY,
            first_cluster_high=(parent_cluster >> 16) & 0xFFFF,
            first_cluster_low=parent_cluster & 0xFFFF,
        )
        contents = (dot.pack() + dotdot.pack()).ljust(SECTOR_SIZE, b"\0")
        self.device.write_sectors(self.cluster_to_sector(new_cluster), contents)

        entry = DirectoryEntry(
            name=raw_name,
            attr=ATTR_DIRECTORY,
            first_cluster_high=(new_cluster >> 16) & 0xFFFF,
            first_cluster_low=new_cluster & 0xFFFF,
        )
        for number in self._cluster_sectors(parent_cluster):
            sector = bytearray(self.device.read_sectors(number))
            for offset, raw in _raw_entries(sector):
                if raw[0] in (END_MARKER, DELETED_MARKER):
                    sector[offset:offset + ENTRY_SIZE] = entry.pack()
                    self.device.write_sectors(number, sector)
                    return new_cluster
        raise OSError(errno.ENOSPC, "Parent directory is full", parent)

    def delete_dir(self, path: str) -> None:
        """Remove an empty directory."""
        cluster = self.resolve_path(path)
        if cluster is None:
            raise FileNotFoundError(errno.ENOENT, "Directory not found", path)
        if any(name not in (".", "..") for name, _ in self.iter_dir(cluster)):
            raise OSError(errno.ENOTEMPTY, "Directory not empty", path)
        parent, leaf = _split_parent(path)

        self.set_fat_entry(cluster, 0)

        parent_cluster = self.resolve_path(parent)
        if parent_cluster is None:
            raise FileNotFoundError(errno.ENOENT, "Parent directory not found", parent)
        for number in self._cluster_sectors(parent_cluster):
            sector = bytearray(self.device.read_sectors(number))
            for offset, raw in _raw_entries(sector):
                if raw[0] == END_MARKER:
                    break
                if raw[0] == DELETED_MARKER:
                    continue
                if _raw_short_name(raw) == leaf:
                    sector[offset] = DELETED_MARKER
                    self.device.write_sectors(number, sector)
                    return
        raise FileNotFoundError(errno.ENOENT, "Entry not found in parent", path)