"""An interactive command shell over a FAT32 volume."""

from __future__ import annotations

import argparse
import errno
import sys
from typing import Iterable, Iterator, Optional, Sequence

from .blockdev import BlockDeviceError, load_image
from .console import hex_dump
from .fat32 import Fat32Volume
from .keyboard import read_line

MAX_LINE = 512
_BOOT_PREVIEW = 8


class Shell:
    """Parses command lines and runs them against a volume."""

    def __init__(self, volume: Fat32Volume) -> None:
        self.volume = volume
        self.path = "/"
        self.running = True

    def prompt(self) -> str:
        """The prompt shown before each command."""
        return f"{self.path}> "

    def cd(self, arg: str) -> str:
        """Change the working directory and return the new path."""
        if arg == "..":
            new_path = self._parent_path()
        else:
            new_path = ("/" + arg) if self.path == "/" else self.path + arg
            if not new_path.endswith("/"):
                new_path += "/"
        if not self.volume.dir_exists(new_path):
            raise FileNotFoundError(errno.ENOENT, "Directory does not exist", new_path)
        self.path = new_path
        return new_path

    def _parent_path(self) -> str:
        if len(self.path) <= 1:
            return "/"
        trimmed = self.path[:-1] if self.path.endswith("/") else self.path
        head, slash, _leaf = trimmed.rpartition("/")
        return head + slash if slash else "/"

    def execute(self, line: str) -> str:
        """Run one command line and return what it prints."""
        text = read_line(line + "\n", MAX_LINE)

        if text.startswith("echo "):
            return text[5:] + "\n" + "\n"
        if text.startswith("ls"):
            return self._ls() + "\n"
        if text.startswith("shutdown"):
            self.running = False
            return ""
        if text.startswith("cd "):
            try:
                self.cd(text[3:])
            except FileNotFoundError:
                return "Directory does not exist.\n\n"
            return "\n"
        if text.startswith("mkdir "):
            target = self.path + text[6:]
            try:
                self.volume.create_dir(target)
            except (ValueError, OSError):
                return "invalid syntax or directory exists\n\n"
            return f"created directory {target}\n\n"
        if text.startswith("rmdir "):
            target = self.path + text[6:]
            try:
                self.volume.delete_dir(target)
            except (ValueError, OSError):
                return "invalid syntax or directory doesnt exists\n\n"
            return f"created directory {target}\n\n"
        if text.startswith("test"):
            return "".join(f"{name}\n" for name in self.volume.list_root()) + "\n"
        return "invalid syntax or command not found!\n\n"

    def _ls(self) -> str:
        try:
            entries = self.volume.list_directory(self.path)
        except FileNotFoundError:
            return "Directory not found\n"
        lines = ["Directory listing:\n"]
        for name, entry in entries:
            lines.append(f"{name} [DIR]\n" if entry.is_dir() else f"{name}\n")
        return "".join(lines)

    def run(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield prompts and command output until shutdown or end of input."""
        source = iter(lines)
        while self.running:
            yield self.prompt()
            line = next(source, None)
            if line is None:
                return
            yield self.execute(line)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open a disk image and run the shell on standard input."""
    parser = argparse.ArgumentParser(
        prog="pilotfs", description="Browse and edit a FAT32 disk image."
    )
    parser.add_argument("image", help="disk image file")
    parser.add_argument(
        "--write",
        action="store_true",
        help="save changes back to the image when the shell exits",
    )
    args = parser.parse_args(argv)

    try:
        device = load_image(args.image)
        volume = Fat32Volume(device)
    except (OSError, BlockDeviceError, ValueError) as exc:
        print(f"pilotfs: cannot open {args.image}: {exc}", file=sys.stderr)
        return 1

    preview = device.read_sectors(0)[:_BOOT_PREVIEW]
    print("First bytes: " + hex_dump(preview))

    shell = Shell(volume)
    for chunk in shell.run(sys.stdin):
        print(chunk, end="", flush=True)
    if shell.running:
        print()

    if args.write:
        device.save(args.image)
    return 0


if __name__ == "__main__":
    sys.exit(main())