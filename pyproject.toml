[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pilotfs"
version = "0.1.0"
description = "FAT32 disk image toolkit with a small interactive directory shell"
requires-python = ">=3.10"
dependencies = []
keywords = ["fat32", "filesystem", "disk-image", "shell", "mbr"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pilotfs = "pilotfs.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["pilotfs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
