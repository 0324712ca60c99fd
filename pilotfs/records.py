"""On-disk FAT32 structures: boot parameters and directory entries."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

ENTRY_SIZE = 32
ATTR_DIRECTORY = 0x10
ATTR_LONG_NAME = 0x0F
END_MARKER = 0x00
DELETED_MARKER = 0xE5
FAT_ENTRY_EOC = 0x0FFFFFFF

_PARTITION_LBA_OFFSET = 454
_LFN_CHARS_PER_ENTRY = 13

_DIR_STRUCT = struct.Struct("<11sBBBHHHHHHHI")
_LFN_STRUCT = struct.Struct("<B5HBBB6HH2H")


@dataclass(frozen=True)
class BootParameters:
    """The BIOS parameter block fields the file system uses."""

    bytes_per_sector: int
    sectors_per_cluster: int
    reserved_sector_count: int
    num_fats: int
    fat_size: int
    root_cluster: int

    @classmethod
    def parse(cls, sector: bytes) -> "BootParameters":
        """Read the parameters from a volume boot sector."""
        if len(sector) < 48:
            raise ValueError("boot sector too short")
        (bytes_per_sector,) = struct.unpack_from("<H", sector, 11)
        (reserved,) = struct.unpack_from("<H", sector, 14)
        (fat_size,) = struct.unpack_from("<I", sector, 36)
        (root_cluster,) = struct.unpack_from("<I", sector, 44)
        return cls(
            bytes_per_sector=bytes_per_sector,
            sectors_per_cluster=sector[13],
            reserved_sector_count=reserved,
            num_fats=sector[16],
            fat_size=fat_size,
            root_cluster=root_cluster,
        )


@dataclass
class DirectoryEntry:
    """A 32-byte short-name directory entry."""

    name: bytes = b" " * 11
    attr: int = 0
    ntres: int = 0
    crt_time_tenth: int = 0
    crt_time: int = 0
    crt_date: int = 0
    lst_acc_date: int = 0
    first_cluster_high: int = 0
    wrt_time: int = 0
    wrt_date: int = 0
    first_cluster_low: int = 0
    file_size: int = 0

    def __post_init__(self) -> None:
        if len(self.name) != 11:
            raise ValueError("short name must be exactly 11 bytes")

    @classmethod
    def parse(cls, raw: bytes) -> "DirectoryEntry":
        """Decode an entry from its 32 bytes."""
        if len(raw) < ENTRY_SIZE:
            raise ValueError("directory entry too short")
        return cls(*_DIR_STRUCT.unpack_from(raw))

    def pack(self) -> bytes:
        """Encode the entry to 32 bytes."""
        return _DIR_STRUCT.pack(
            bytes(self.name),
            self.attr,
            self.ntres,
            self.crt_time_tenth,
            self.crt_time,
            self.crt_date,
            self.lst_acc_date,
            self.first_cluster_high,
            self.wrt_time,
            self.wrt_date,
            self.first_cluster_low,
            self.file_size,
        )

    def is_dir(self) -> bool:
        """Whether the entry names a directory."""
        return bool(self.attr & ATTR_DIRECTORY)

    def cluster(self) -> int:
        """The first cluster of the entry's data."""
        return (self.first_cluster_high << 16) | self.first_cluster_low

    def short_name(self) -> str:
        """The 8.3 name as text."""
        return format_short_name(self.name)


@dataclass(frozen=True)
class LongNameEntry:
    """One 32-byte piece of a long file name."""

    order: int
    name1: tuple[int, ...] = field(default=(0xFFFF,) * 5)
    attr: int = ATTR_LONG_NAME
    type: int = 0
    checksum: int = 0
    name2: tuple[int, ...] = field(default=(0xFFFF,) * 6)
    zero: int = 0
    name3: tuple[int, ...] = field(default=(0xFFFF,) * 2)

    @classmethod
    def parse(cls, raw: bytes) -> "LongNameEntry":
        """Decode a long-name piece from its 32 bytes."""
        if len(raw) < ENTRY_SIZE:
            raise ValueError("long name entry too short")
        values = _LFN_STRUCT.unpack_from(raw)
        return cls(
            order=values[0],
            name1=tuple(values[1:6]),
            attr=values[6],
            type=values[7],
            checksum=values[8],
            name2=tuple(values[9:15]),
            zero=values[15],
            name3=tuple(values[16:18]),
        )

    @property
    def index(self) -> int:
        """The 1-based position of this piece within the name."""
        return self.order & 0x1F

    def text(self) -> str:
        """The characters this piece carries."""
        chars = []
        for group in (self.name1, self.name2, self.name3):
            for unit in group:
                if unit in (0x0000, 0xFFFF):
                    break
                chars.append(chr(unit))
        return "".join(chars)


class LongNameBuffer:
    """Collects long-name pieces until the short entry that owns them."""

    def __init__(self) -> None:
        self._parts: dict[int, str] = {}

    def add(self, part: LongNameEntry) -> None:
        """Store one piece of the name."""
        if part.index:
            self._parts[part.index] = part.text()

    def clear(self) -> None:
        """Drop any collected pieces."""
        self._parts.clear()

    def take(self) -> str:
        """Return the assembled name, or an empty string, and reset."""
        parts, self._parts = self._parts, {}
        pieces = []
        index = 1
        while index in parts:
            pieces.append(parts[index])
            index += 1
        return "".join(pieces)


def is_long_name(raw: bytes) -> bool:
    """Whether a raw 32-byte entry is a long-name piece."""
    return (raw[11] & ATTR_LONG_NAME) == ATTR_LONG_NAME


def format_short_name(raw_name: bytes) -> str:
    """Turn an 11-byte padded 8.3 name into ``NAME.EXT`` form."""
    base = raw_name[:8].split(b" ", 1)[0]
    name = base.decode("latin-1")
    if raw_name[8:9] != b" ":
        extension = raw_name[8:11].split(b" ", 1)[0]
        name += "." + extension.decode("latin-1")
    return name


def partition_start_lba(mbr: bytes) -> int:
    """Start sector of the first partition recorded in a master boot record."""
    if len(mbr) < 512:
        raise ValueError("master boot record must be 512 bytes")
    (lba,) = struct.unpack_from("<I", mbr, _PARTITION_LBA_OFFSET)
    return lba