"""Shared fixtures of the test cases."""

import os
import sys

import pytest

@pytest.fixture
def scenario_a():
    """Return a disassembly with a morestack function and a leaf function."""
    return [
        "0000000000001000 <foo>:",
        "  1001:\tcallq  2000 <__morestack>",
        "0000000000002000 <bar>:",
    ]


@pytest.fixture
def objdump(tmp_path):
    """Return a factory for a fake objdump which prints a fixed listing.

    The fake ignores its arguments, prints the lines and exits with the given status.
    """

    def create(lines=(), status=0):
        listing = tmp_path / "listing.txt"
        listing.write_text("".join(line + "\n" for line in lines))

        script = tmp_path / "objdump"
        script.write_text("#!/bin/sh\ncat '{}'\nexit {}\n".format(listing, status))
        script.chmod(0o755)

        return str(script)

    return create


@pytest.fixture
def elf_binary():
    """Return the path of an ELF file, the running interpreter."""
    path = os.path.realpath(sys.executable)

    with open(path, "rb") as file:
        if file.read(4) != b"\x7fELF":
            pytest.skip("the interpreter is no ELF file")

    return path


@pytest.fixture
def text_file(tmp_path):
    """Return the path of a file which is no ELF file."""
    path = tmp_path / "notes.txt"
    path.write_text("no binary\n")

    return str(path)
