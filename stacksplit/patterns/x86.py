#!/bin/python3

# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Patterns for the x86 32bit architecture."""

from .base import Pattern


class x86(Pattern):
    """Contain the call grammar of the x86 32bit AT&T syntax.

    Depending on the binutils version the mnemonics are printed with or without the
    operand size suffix. Both forms are accepted.
    """

    arch = ["x86"]

    #  8049186:	jmp    8049030 <puts@plt>
    #  8049186:	jmpl   8049030 <puts@plt>
    PltJump = Pattern._instruction("jmp(l|)", Pattern._target(r"\S+@plt"))

    #  8049186:	call   8049040 <__morestack>
    #  8049186:	calll  8049040 <__morestack>
    DirectCall = Pattern._instruction("call(l|)", Pattern._target(r"\S+"))

    #  8049186:	call   *%eax
    #  8049186:	call   *0x804c00c
    FunctionCall = Pattern._instruction("call(l|)", "(?P<operand>.+)$")
