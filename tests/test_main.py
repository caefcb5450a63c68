"""Test cases for methods and classes defined in main.py file."""

import pytest

from stacksplit.datastructure import Accumulator, Category
from stacksplit.main import (
    EXIT_CORRUPTED,
    EXIT_OK,
    EXIT_TOOL_ERROR,
    EXIT_USAGE,
    create_parser,
    main,
)


def run(argv):
    """Run main() and return its exit status."""
    with pytest.raises(SystemExit) as error:
        main(argv)

    return error.value.code


def test_create_parser_defaults():
    """Test the default values of the command line."""
    args = create_parser().parse_args(["a.out"])

    assert args.binary == ["a.out"]
    assert args.verbose == 0
    assert not args.detail
    assert args.arch is None
    assert args.objdump is None
    assert not args.no_color


def test_create_parser():
    """Test the command line with all options."""
    args = create_parser().parse_args(
        ["-v", "3", "--detail", "-a", "x86", "-o", "gobjdump", "-c", "a", "b"]
    )

    assert args.binary == ["a", "b"]
    assert args.verbose == 3
    assert args.detail
    assert args.arch == "x86"
    assert args.objdump == "gobjdump"
    assert args.no_color


def test_main_without_binaries(capsys):
    """Test main() without any binary."""
    assert run([]) == EXIT_USAGE
    assert "usage: stacksplit" in capsys.readouterr().err


def test_main_documentation(capsys):
    """Test main() with the documentation option."""
    assert run(["-D"]) == 0
    assert "EXIT STATUS" in capsys.readouterr().out


def test_main(objdump, elf_binary, text_file, scenario_a, capsys):
    """Test main() skips files which are no ELF files and continues."""
    status = run(
        ["-c", "-a", "x86_64", "-o", objdump(scenario_a), text_file, elf_binary]
    )
    captured = capsys.readouterr()

    assert status == EXIT_OK
    assert "stats for '{}'".format(text_file) not in captured.out
    assert "stats for '{}':\n".format(elf_binary) in captured.out
    assert "+ morestack functions: 1\n" in captured.out
    assert "{} does not appear to be an ELF file".format(text_file) in captured.err


def test_main_detail(objdump, elf_binary, scenario_a, capsys):
    """Test main() with the detailed report."""
    status = run(
        ["-c", "--detail", "-a", "x86_64", "-o", objdump(scenario_a), elf_binary]
    )

    assert status == EXIT_OK
    assert "\n'MoreStack' functions by name:\nfoo\n" in capsys.readouterr().out


def test_main_without_objdump(tmp_path, elf_binary):
    """Test main() with an objdump which cannot be found."""
    assert run(["-o", str(tmp_path / "missing"), elf_binary]) == EXIT_TOOL_ERROR


def test_main_with_unknown_arch(objdump, elf_binary):
    """Test main() with an unsupported architecture."""
    assert run(["-a", "sparc", "-o", objdump(), elf_binary]) == EXIT_TOOL_ERROR


def test_main_with_failing_objdump(objdump, elf_binary, capsys):
    """Test main() stops at the first objdump error."""
    status = run(
        ["-c", "-a", "x86_64", "-o", objdump(status=2), elf_binary, elf_binary]
    )
    captured = capsys.readouterr()

    assert status == EXIT_TOOL_ERROR
    assert "stats for" not in captured.out
    assert "exited with status 2" in captured.err


def test_main_with_corrupted_table(
    objdump, elf_binary, scenario_a, monkeypatch, capsys
):
    """Test main() aborts if a function couldn't be classified."""
    monkeypatch.setattr(Accumulator, "category", lambda self: Category.Unknown)

    status = run(["-c", "-a", "x86_64", "-o", objdump(scenario_a), elf_binary])

    assert status == EXIT_CORRUPTED
    assert "corrupted funcs table entry at" in capsys.readouterr().err
