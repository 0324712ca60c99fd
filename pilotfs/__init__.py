"""FAT32 disk image toolkit: sector device, on-disk records, volume operations and a directory shell."""

__version__ = "0.1.0"