#!/bin/python3

# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Patterns for the x86 64bit architecture."""

from .base import Pattern
from .x86 import x86


class x86_64(x86):
    """Extend the x86 class with the x86 64bit mnemonics.

    The 64bit binutils print a "q" suffix for calls and jumps.
    """

    arch = ["x86_64"]

    #   401136:	jmpq   401030 <puts@plt>
    PltJump = Pattern._instruction("jmp(q|)", Pattern._target(r"\S+@plt"))

    #   401136:	callq  401126 <__morestack>
    DirectCall = Pattern._instruction("call(q|)", Pattern._target(r"\S+"))

    #   401136:	callq  *%rax
    #   401136:	callq  *0x2eb4(%rip)        # 403ff0 <__libc_start_main@GLIBC_2.34>
    FunctionCall = Pattern._instruction("call(q|)", "(?P<operand>.+)$")
