import io
import struct

import pytest

from pilotfs.blockdev import BlockDevice, load_image
from pilotfs.fat32 import Fat32Volume
from pilotfs.shell import Shell, main

SECTORS = 140


def _image() -> bytes:
    image = bytearray(SECTORS * 512)
    struct.pack_into("<H", image, 11, 512)
    image[13] = 1
    struct.pack_into("<H", image, 14, 2)
    image[16] = 1
    struct.pack_into("<I", image, 36, 1)
    struct.pack_into("<I", image, 44, 2)
    struct.pack_into("<III", image, 2 * 512, 0x0FFFFFF8, 0x0FFFFFFF, 0x0FFFFFFF)
    return bytes(image)


@pytest.fixture
def shell():
    return Shell(Fat32Volume(BlockDevice(_image())))


def test_initial_prompt(shell):
    assert shell.prompt() == "/> "


def test_echo(shell):
    assert shell.execute("echo hello") == "hello\n\n"


def test_unknown_command(shell):
    assert shell.execute("frobnicate") == "invalid syntax or command not found!\n\n"


def test_cd_without_argument_is_unknown(shell):
    assert shell.execute("cd") == "invalid syntax or command not found!\n\n"


def test_mkdir_then_ls(shell):
    assert shell.execute("mkdir DOCS") == "created directory /DOCS\n\n"
    assert shell.execute("ls") == "Directory listing:\nDOCS [DIR]\n\n"


def test_ls_empty_root(shell):
    assert shell.execute("ls") == "Directory listing:\n\n"


def test_mkdir_twice_fails(shell):
    shell.execute("mkdir DOCS")
    assert shell.execute("mkdir DOCS") == "invalid syntax or directory exists\n\n"


def test_cd_into_and_out(shell):
    shell.execute("mkdir DOCS")
    assert shell.execute("cd DOCS") == "\n"
    assert shell.prompt() == "/DOCS/> "
    shell.execute("cd ..")
    assert shell.path == "/"


def test_cd_missing_directory(shell):
    assert shell.execute("cd NOPE") == "Directory does not exist.\n\n"
    assert shell.path == "/"


def test_cd_method_raises_for_missing(shell):
    with pytest.raises(FileNotFoundError):
        shell.cd("NOPE")
    assert shell.path == "/"


def test_nested_directories(shell):
    shell.execute("mkdir A")
    assert shell.cd("A") == "/A/"
    shell.execute("mkdir B")
    assert shell.cd("B") == "/A/B/"
    assert shell.cd("..") == "/A/"
    assert shell.cd("..") == "/"
    assert shell.cd("..") == "/"


def test_ls_in_subdirectory_hides_dot_entries(shell):
    shell.execute("mkdir A")
    shell.cd("A")
    shell.execute("mkdir B")
    assert shell.execute("ls") == "Directory listing:\nB [DIR]\n\n"


def test_rmdir_removes_directory(shell):
    shell.execute("mkdir X")
    assert shell.volume.dir_exists("/X")
    assert shell.execute("rmdir X") == "created directory /X\n\n"
    assert not shell.volume.dir_exists("/X")


def test_rmdir_missing(shell):
    assert (
        shell.execute("rmdir GONE")
        == "invalid syntax or directory doesnt exists\n\n"
    )


def test_rmdir_non_empty_fails(shell):
    shell.execute("mkdir A")
    shell.cd("A")
    shell.execute("mkdir B")
    shell.cd("..")
    assert shell.execute("rmdir A").startswith("invalid syntax")
    assert shell.volume.dir_exists("/A")


def test_test_command_lists_root(shell):
    shell.execute("mkdir ONE")
    shell.execute("mkdir TWO")
    assert shell.execute("test") == "ONE\nTWO\n\n"


def test_shutdown_stops_run(shell):
    output = "".join(shell.run(["echo a", "shutdown", "echo b"]))
    assert output == "/> a\n\n/> "
    assert shell.running is False


def test_run_ends_with_input(shell):
    output = "".join(shell.run(["echo x"]))
    assert output == "/> x\n\n/> "
    assert shell.running is True


def test_main_prints_boot_bytes(tmp_path, monkeypatch, capsys):
    path = tmp_path / "disk.img"
    path.write_bytes(_image())
    monkeypatch.setattr("sys.stdin", io.StringIO("echo hi\nshutdown\n"))
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("First bytes: 00 00 00 00 00 00 00 00 \n")
    assert "/> hi\n" in out


def test_main_write_saves_changes(tmp_path, monkeypatch):
    path = tmp_path / "disk.img"
    path.write_bytes(_image())
    monkeypatch.setattr("sys.stdin", io.StringIO("mkdir SAVED\nshutdown\n"))
    assert main([str(path), "--write"]) == 0
    assert Fat32Volume(load_image(path)).dir_exists("/SAVED")


def test_main_without_write_leaves_image(tmp_path, monkeypatch):
    path = tmp_path / "disk.img"
    original = _image()
    path.write_bytes(original)
    monkeypatch.setattr("sys.stdin", io.StringIO("mkdir TEMP\n"))
    assert main([str(path)]) == 0
    assert path.read_bytes() == original


def test_main_missing_image(tmp_path, capsys):
    assert main([str(tmp_path / "absent.img")]) == 1
    assert "cannot open" in capsys.readouterr().err