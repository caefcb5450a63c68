#!/bin/python3

# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""The base class to implement patterns for a specific architecture."""

import re
from abc import ABC


class LineKind:
    """The kinds of call lines a pattern can recognize."""

    # jmp    401030 <puts@plt>
    PLT_JUMP = "PltJump"
    # call   401126 <__morestack>
    DIRECT_CALL = "DirectCall"
    # call   *%rax
    CALL = "Call"


class Pattern(ABC):
    """Contain the line grammar of the objdump output for one architecture.

    The patterns are the only place where assumptions about the text format of the
    disassembler are made. A line is checked for a function start and, independently,
    for a call. It is at most one of PltJump, DirectCall and FunctionCall.

    Attributes:
        arch (list[str]):    the supported architectures
        Function (str):      regex of function starts
        PltJump (str):       regex of unconditional jumps into the procedure linkage
                             table
        DirectCall (str):    regex of calls with a symbolic target
        FunctionCall (str):  regex of any other call, e.g. through a register
    """

    arch = ["x86", "x86_64"]

    # 000000000040076d <main>:
    Function = r"^\S+\s<(?P<name>\S+)>:\s*$"

    PltJump = None
    DirectCall = None
    FunctionCall = None

    @staticmethod
    def _instruction(mnemonic, operand):
        """Generate the regex of an instruction line without raw instruction bytes.

        > address:    mnemonic operand

        Args:
            mnemonic (str): regex of the mnemonic
            operand (str):  regex of the operand, including the whitespace in front of it

        Returns:
            str: the regex
        """
        return r"^\s*\S+:\s+{}{}".format(mnemonic, operand)

    @staticmethod
    def _target(target):
        """Generate the regex of a symbolic jump or call target.

        > 401126 <target>

        Args:
            target (str): regex of the symbol

        Returns:
            str: the regex, including the whitespace in front of the address
        """
        return r"\s+\S+\s+<(?P<target>{})>\s*$".format(target)

    @classmethod
    def get_function(cls, line):
        """Filter the name of the function which starts at this line.

        Args:
            line (str): a text line of the objdump output

        Returns:
            str: the name of the function or None if the line is no function start
        """
        match = re.match(cls.Function, line)
        if not match:
            return None

        return match.group("name")

    @classmethod
    def get_call(cls, line):
        """Classify the line as a call.

        Args:
            line (str): a text line of the objdump output

        Returns:
            (str, str): the LineKind and the target of the call, or (None, None) if
                        the line is no call. The target of a LineKind.CALL is the
                        operand as printed by objdump.

        Raises:
            NotImplementedError: the pattern defines no call grammar
        """
        if cls.PltJump is None or cls.DirectCall is None or cls.FunctionCall is None:
            raise NotImplementedError

        match = re.match(cls.PltJump, line)
        if match:
            return LineKind.PLT_JUMP, match.group("target")

        match = re.match(cls.DirectCall, line)
        if match:
            return LineKind.DIRECT_CALL, match.group("target")

        match = re.match(cls.FunctionCall, line)
        if match:
            return LineKind.CALL, match.group("operand").strip()

        return None, None
