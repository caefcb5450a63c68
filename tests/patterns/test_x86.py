"""Test cases for methods and classes defined in patterns/x86.py file."""

import re

import pytest

from stacksplit.patterns import LineKind, x86

lines = [
    # fmt: off
    (" 8049186:\tjmp    8049030 <puts@plt>",      LineKind.PLT_JUMP,    "puts@plt"),
    (" 8049186:\tjmpl   8049030 <puts@plt>",      LineKind.PLT_JUMP,    "puts@plt"),
    (" 8049186:\tcall   8049040 <__morestack>",   LineKind.DIRECT_CALL, "__morestack"),
    (" 8049186:\tcalll  8049040 <__morestack>",   LineKind.DIRECT_CALL, "__morestack"),
    (" 8049186:\tcall   *%eax",                   LineKind.CALL,        "*%eax"),
    (" 8049186:\tcall   *0x804c00c",              LineKind.CALL,        "*0x804c00c"),
    (" 8049186:\tpush   %ebp",                    None,                 None),
    (" 8049186:\tjmp    8049190 <main+0x10>",     None,                 None),
    # fmt: on
]


@pytest.mark.parametrize("line, kind, target", lines)
def test_x86_get_call(line, kind, target):
    """Test x86.get_call()."""
    assert x86.get_call(line) == (kind, target)


def test_x86_direct_call_with_64bit_mnemonic():
    """Test x86.DirectCall with the 64bit mnemonic."""
    assert re.match(x86.DirectCall, "  401136:\tcallq  401126 <foo>") == None
