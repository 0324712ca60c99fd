# pilotfs

pilotfs reads and changes FAT32 disk images. It has no dependencies outside the standard library. It is made of these modules:

- `pilotfs.blockdev` holds a disk image in memory and reads and writes it in 512-byte sectors.
- `pilotfs.records` parses and packs the on-disk structures: the MBR partition start, the boot parameters, short directory entries and long-name pieces.
- `pilotfs.fat32` provides `Fat32Volume`. It finds the volume through the first MBR partition, walks directories (long names are used where present), follows FAT chains, and creates and deletes empty directories.
- `pilotfs.shell` is a small command shell over a volume, and the `pilotfs` command.
- `pilotfs.console` is a text-screen model with number formatting helpers.
- `pilotfs.keyboard` translates scan codes and edits lines.

## Install

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
pilotfs disk.img
pilotfs --write disk.img
```

The command loads the image and prints its first eight bytes in hex. It then reads commands from standard input, one per line. Each command is preceded by a prompt showing the working directory, such as `/> `. Without `--write`, changes exist only in memory. With `--write`, the image is saved back to the file when the shell ends. If the image cannot be opened or has no readable volume, the command prints an error and exits with status 1.

| Command        | Effect                                                         |
|----------------|----------------------------------------------------------------|
| `echo TEXT`    | print `TEXT`                                                   |
| `ls`           | list the current directory; directories are marked ` [DIR]`    |
| `cd NAME`      | change into `NAME`; `cd ..` goes up one level                  |
| `mkdir NAME`   | create an empty directory in the current one                   |
| `rmdir NAME`   | delete an empty directory in the current one                   |
| `test`         | list the root directory, following its cluster chain           |
| `shutdown`     | leave the shell                                                |

A command the shell does not recognise prints `invalid syntax or command not found!`. On success, `rmdir` reports `created directory PATH`, which is the same wording `mkdir` uses.

## Library use

```python
from pilotfs.blockdev import load_image
from pilotfs.fat32 import Fat32Volume

device = load_image("disk.img")
volume = Fat32Volume(device)

for name, entry in volume.list_directory("/"):
    print(name, "[DIR]" if entry.is_dir() else "")

cluster = volume.create_dir("/reports")   # returns the new directory's first cluster
print(volume.dir_exists("/reports"))      # True
volume.delete_dir("/reports")
device.save("disk.img")
```

`Fat32Volume` reports failures by raising exceptions:

- `resolve_path` returns `None` when the path does not exist.
- `list_directory`, `create_dir` and `delete_dir` raise `FileNotFoundError` for a missing directory or parent.
- `create_dir` raises `FileExistsError` if the name is already taken. It raises `OSError` with `ENOSPC` when no cluster is free or the parent directory is full.
- `delete_dir` raises `OSError` with `ENOTEMPTY` for a directory that is not empty.
- A path with no `/` raises `ValueError`.
- `BlockDevice` raises `BlockDeviceError` for out-of-range or partial-sector transfers.

The lower-level methods are `cluster_to_sector`, `fat_start_sector`, `get_fat_entry`, `set_fat_entry`, `iter_dir`, `list_root` and `find_free_cluster`.

The shell can also be driven from code. `execute` returns the text a command prints. `run` yields prompts and output for a sequence of lines, and stops at `shutdown` or when the lines run out.

```python
from pilotfs.shell import Shell

shell = Shell(volume)
shell.execute("mkdir notes")
shell.cd("notes")
print(shell.prompt())     # "/notes/> "
```

### Helpers

- `pilotfs.console.Console(width=80, height=25, color=0x0F)` is a character grid. It wraps long lines, scrolls at the bottom and handles backspace. Its methods are `put_char`, `write`, `clear`, `set_color`, `set_cursor`, `row_text` and `lines`.
- `format_uint`, `format_hex16`, `format_hex32`, `format_int(value, base)` and `hex_dump` produce the number formats used for output.
- `pilotfs.keyboard.scancode_to_char` maps set-1 scan codes to characters. It returns `None` for key releases and for keys that produce no character.
- `pilotfs.keyboard.read_line` builds a line from typed characters the same way the shell does.
- `pilotfs.records` offers `BootParameters.parse`, `DirectoryEntry.parse` and `pack`, `LongNameEntry.parse`, `LongNameBuffer`, `is_long_name`, `format_short_name` and `partition_start_lba`.

## What it does not do

- It works only on disk image files. It does not access physical disks or controllers.
- It cannot read, write or create files. It handles directories only.
- It cannot format a new volume.
- New directory names are written straight into the 11-byte short-name field, truncated and padded with blanks. No long-name entries are written, and names are not converted to 8.3 form.
- Directory lookups and edits use only the first cluster of a directory. Only `list_root` follows a directory's cluster chain.