#!/bin/python3

# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Classify the functions of a binary by the shape of their stack split prologue."""

import subprocess
from os import environ
from os.path import isfile

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile

from .datastructure import CATEGORIES, Accumulator, Category, CorruptedTableError
from .output import Color, Message, Verbosity
from .patterns import LineKind, Pattern, x86, x86_64

PATH = [path + "/" for path in ["."] + environ.get("PATH", "").split(":")]

# Alternative names of the architectures, e.g. from ELFFile.get_machine_arch()
ARCH_ALIASES = {
    "x64": "x86_64",
    "amd64": "x86_64",
}

TITLES = {
    Category.Leaf: "leaf",
    Category.NoSplit: "nonsplit",
    Category.SplitSmall: "morestack",
    Category.SplitLarge: "morestack_non_split",
}


def get_arch(arch):
    """Determine the architecture.

    Note: 80386 is recognized as x86

    Args:
        arch (str): the string to determine the architecture

    Returns:
        str: the architecture defined in Pattern.arch
    """
    if not arch:
        return None

    arch = arch.lower().replace("-", "_")
    arch = ARCH_ALIASES.get(arch, arch)

    for supported_arch in Pattern.arch:
        if arch == supported_arch:
            return arch

        # Match "80386" as x86
        if supported_arch[0] == "x":
            temp = supported_arch[1:]
            if temp in arch and temp[-1] == arch[-1]:
                return supported_arch

    return None


def get_pattern(arch):
    """Return the pattern class of a supported architecture.

    Args:
        arch (str): an architecture defined in Pattern.arch

    Returns:
        Pattern: the pattern class or None if the architecture isn't supported
    """
    if arch in x86_64.arch:
        return x86_64
    if arch in x86.arch:
        return x86
    return None


class Stacksplit:
    """Infrastructure to classify the functions of binaries.

    Attributes:
        arch (str):         the architecture forced by the user, None to read it from
                            each binary
        color (bool):       show messages in color
        detail (bool):      print the names of the functions of each category
        verbose (int):      the trace level, see Verbosity
        objdump_path (str): the path to the objdump binary
    """

    arch = None
    color = None
    detail = None
    verbose = None

    objdump_path = None

    def __init__(self, verbose=0, detail=False, color=False, arch=None, objdump=None):
        """Create the object.

        Args:
            verbose (int, optional):
                The trace level. 0 prints no trace, 1 the processed files, 2 every
                function and call and 3 every line of objdump. Defaults to 0.
            detail (bool, optional):
                Print the names of the functions of each category. Defaults to False.
            color (bool, optional):
                Show messages in color. Defaults to False.
            arch (str, optional):
                The architecture the binaries were compiled for. If not defined it is
                read from each binary. Defaults to None.
            objdump (str, optional):
                The path to or name of the objdump binary. Defaults to "objdump".

        Raises:
            ValueError: arch parameter was set with an unknown value
            ValueError: objdump couldn't be found
        """
        self.verbose = verbose
        self.detail = detail
        self.color = color

        if arch:
            self.arch = get_arch(arch)
            if not self.arch:
                self._print(
                    Message.ERROR,
                    "Unsupported platform '{}'. Supported platforms are: {}.".format(
                        arch, ", ".join(Pattern.arch)
                    ),
                )
                raise ValueError()

        self.objdump_path = self._get_tool_path(objdump or "objdump")
        self._print(
            Message.TRACE,
            "Using '" + self._bold(self.objdump_path) + "'",
            level=Verbosity.FILE,
        )

    def _bold(self, msg):
        if self.color:
            return Color.BOLD + msg + Color.END
        else:
            return msg

    def _func(self, msg):
        if self.color:
            return Color.CYAN + msg + Color.END
        else:
            return msg

    def _get_tool_path(self, tool):
        for dir in [""] + PATH:
            path = dir + tool
            if isfile(path):
                return path

        self._print(Message.ERROR, "Couldn't find '" + self._bold(tool) + "'")
        raise ValueError()

    def _get_pattern(self, binary):
        try:
            with open(binary, "rb") as file:
                machine = ELFFile(file).get_machine_arch()
        except (ELFError, OSError):
            self._print(
                Message.WARN,
                "{} does not appear to be an ELF file -- ignoring".format(binary),
            )
            return None

        arch = self.arch or get_arch(machine)
        pattern = get_pattern(arch)

        if not pattern:
            self._print(
                Message.WARN,
                "{} has the unsupported architecture '{}' -- ignoring".format(
                    binary, machine
                ),
            )
            return None

        self._print(
            Message.TRACE,
            "Using architecture " + self._bold(pattern.arch[0]),
            level=Verbosity.FILE,
        )
        return pattern

    def _print(self, kind, *objects, sep=" ", end="\n", prefix=True, level=1):
        if kind is Message.TRACE and self.verbose < level:
            return

        file = kind.file()
        if prefix and kind.prefix:
            if self.color and kind.color:
                text = kind.color + kind.prefix + Color.END
            else:
                text = kind.prefix
            print(text, end="", file=file)
        print(*objects, sep=sep, end=end, file=file)

    def _trace_call(self, kind, target):
        if kind == LineKind.PLT_JUMP:
            text = ".. plt jump to "
        elif kind == LineKind.DIRECT_CALL:
            text = ".. direct call to "
        else:
            text = ".. anycall to "

        self._print(Message.TRACE, text + self._func(target), level=Verbosity.FUNCTION)

    def _finish(self, accumulator):
        name = accumulator.current
        key = accumulator.finish()

        if key is not None:
            category = accumulator.table[key]
            if key != name:
                self._print(
                    Message.TRACE,
                    "Name collision, recorded {} as {}".format(
                        self._func(name), self._func(key)
                    ),
                    level=Verbosity.FUNCTION,
                )
            self._print(
                Message.TRACE,
                "{} is {}".format(self._func(key), category.name),
                level=Verbosity.FUNCTION,
            )

    def scan(self, lines, pattern):
        """Classify the functions of a disassembly.

        Args:
            lines (iterable[str]): the text lines of the objdump output without line
                                   endings
            pattern (Pattern):     the grammar of the objdump output

        Returns:
            Accumulator: the accumulator holding the table of all functions
        """
        accumulator = Accumulator()

        for line in lines:
            self._print(Message.TRACE, "line is " + line, level=Verbosity.LINE)

            name = pattern.get_function(line)
            if name is not None:
                # Start of new function. Record info for old function.
                self._finish(accumulator)
                accumulator.start_function(name)
                self._print(
                    Message.TRACE,
                    "starting function " + self._func(name),
                    level=Verbosity.FUNCTION,
                )

            kind, target = pattern.get_call(line)
            if kind is None:
                continue

            if accumulator.current is None:
                self._print(
                    Message.TRACE,
                    "Ignore call outside of a function: " + line,
                    level=Verbosity.FUNCTION,
                )
                continue

            if kind == LineKind.PLT_JUMP:
                accumulator.plt_jump()
            elif kind == LineKind.DIRECT_CALL:
                accumulator.direct_call(target)
            else:
                accumulator.any_call()
            self._trace_call(kind, target)

        # Final function
        self._finish(accumulator)

        return accumulator

    def parse(self, binary, pattern):
        """Disassemble the text section of the binary and classify its functions.

        The objdump process is always waited for, even if the parsing fails.

        Args:
            binary (str):      the path to the binary file
            pattern (Pattern): the grammar of the objdump output

        Returns:
            Accumulator: the accumulator holding the table of all functions

        Raises:
            OSError: objdump couldn't be started
            subprocess.CalledProcessError: objdump failed
        """
        objdump_cmd = [
            self.objdump_path,
            "-d",
            "--section=.text",
            "--no-show-raw-insn",
            binary,
        ]

        try:
            objdump = subprocess.Popen(objdump_cmd, stdout=subprocess.PIPE)
        except OSError as error:
            self._print(
                Message.ERROR,
                "Couldn't start '{}': {}".format(self._bold(self.objdump_path), error),
            )
            raise

        self._print(
            Message.TRACE,
            "cmd started: " + " ".join(objdump_cmd),
            level=Verbosity.FILE,
        )

        with objdump:
            lines = (
                line.decode("utf-8", errors="replace").rstrip("\r\n")
                for line in objdump.stdout
            )
            accumulator = self.scan(lines, pattern)

        if objdump.returncode != 0:
            self._print(
                Message.ERROR,
                "'{}' exited with status {}".format(
                    " ".join(objdump_cmd), objdump.returncode
                ),
            )
            raise subprocess.CalledProcessError(objdump.returncode, objdump_cmd)

        return accumulator

    def examine(self, binary):
        """Classify the functions of a binary and print the result.

        Args:
            binary (str): the path to the binary file

        Returns:
            bool: False if the binary was skipped, because it isn't a supported ELF file

        Raises:
            OSError: objdump couldn't be started
            subprocess.CalledProcessError: objdump failed
            CorruptedTableError: a function couldn't be classified
        """
        self._print(
            Message.TRACE, "loading ELF for " + self._bold(binary), level=Verbosity.FILE
        )

        pattern = self._get_pattern(binary)
        if not pattern:
            return False

        table = self.parse(binary, pattern).table

        try:
            counts = table.count()
        except CorruptedTableError as error:
            self._print(Message.ERROR, str(error))
            raise

        self.print_statistic(binary, counts)
        if self.detail:
            self.print_detail(table)

        return True

    def print_statistic(self, binary, counts):
        """Print the number of functions per category.

        Args:
            binary (str):                the path to the binary file
            counts (dict[Category, int]): the result of Table.count()
        """
        self._print(Message.INFO, "stats for '{}':".format(binary))

        for category in CATEGORIES:
            self._print(
                Message.INFO,
                "+ {} functions: {}".format(TITLES[category], counts[category]),
            )

    def print_detail(self, table):
        """Print the sorted function names of each category.

        Args:
            table (Table): the classified functions
        """
        for category in CATEGORIES:
            self._print(Message.INFO)
            self._print(Message.INFO, "'{}' functions by name:".format(category.label))

            for name in table.names(category):
                self._print(Message.INFO, name)
