#!/bin/python3

# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""The entrance point when executing the tool from a shell."""

import argparse
import subprocess
import sys

from stacksplit import __version__
from stacksplit.datastructure import CorruptedTableError
from stacksplit.stacksplit import Stacksplit

EXIT_OK = 0
EXIT_TOOL_ERROR = 1
EXIT_USAGE = 2
EXIT_CORRUPTED = 3
EXIT_ABORT = 130


def print_documentation():
    """Print the tool documentation."""
    # All printed lines are < 83 characters long.
    print(
        "stacksplit - classifies the functions of an ELF binary by their stack split\n"
        "prologue.\n"
        "\n"
        "DESCRIPTION\n"
        "        The tool disassembles the .text section with objdump and collects the\n"
        "        calls of each function. Depending on the called symbols a function is\n"
        "        put into exactly one category. The most severe category wins:\n"
        "            • MoreStackNonSplit: calls __morestack_non_split\n"
        "            • MoreStack:         calls __morestack\n"
        "            • NoSplit:           calls any other function, including jumps\n"
        "                                 into the procedure linkage table\n"
        "            • Leaf:              calls nothing\n"
        "\n"
        "        Functions with the same name (e.g. static functions of different\n"
        "        compilation units) are listed as name%N for the second and later\n"
        "        occurrences. Such an entry gets the more severe category of itself and\n"
        "        the first occurrence, while the first occurrence is left unchanged.\n"
        "\n"
        "        Files which are not ELF files are skipped with a warning.\n"
        "\n"
        "SUPPORTED ARCHITECTURES\n"
        "        x86 and x86_64 with the AT&T syntax of GNU objdump. Lines of an unknown\n"
        "        shape are ignored silently.\n"
        "\n"
        "TRACE LEVELS\n"
        "        • 0 no trace\n"
        "        • 1 processed files and objdump command lines\n"
        "        • 2 functions, calls and their categories\n"
        "        • 3 every line of objdump\n"
        "\n"
        "EXIT STATUS\n"
        "        •   0 OK\n"
        "        •   1 objdump error\n"
        "        •   2 usage error\n"
        "        •   3 program error (corrupted function table)\n"
        "        • 130 user abort the program",
    )


class DocumentationAction(argparse.Action):
    """The action class for printing the documentation."""

    def __init__(self, option_strings, dest=None, default=None, help=None):
        """Create the object."""
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            default=default,
            nargs=0,
            help=help,
        )

    def __call__(self, parser, namespace, values, option_string=None):
        """Execute the action."""
        print_documentation()
        parser.exit()


def create_parser():
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="stacksplit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Classify the functions of ELF binaries by their stack split "
        "prologue.",
    )
    parser.add_argument(
        "-D",
        "--documentation",
        action=DocumentationAction,
        help="print the tool documentation",
    )
    parser.add_argument("binary", nargs="+", help="the ELF binaries")
    parser.add_argument(
        "-v",
        "--verbose",
        type=int,
        default=0,
        metavar="LEVEL",
        help="verbose trace output level",
    )
    parser.add_argument(
        "--detail",
        action="store_true",
        help="show names of functions in each category",
    )
    parser.add_argument("-a", "--arch", help="the architecture of the binaries")
    parser.add_argument("-o", "--objdump", help="path to or name of the objdump")
    parser.add_argument("-c", "--no-color", action="store_true", help="suppress color")
    parser.add_argument(
        "--version", action="version", version="%(prog)s " + __version__
    )

    return parser


def main(argv=None):
    """Entry point for the command prompt."""
    args = create_parser().parse_args(argv)

    try:
        stacksplit = Stacksplit(
            args.verbose,
            args.detail,
            not args.no_color,
            args.arch,
            args.objdump,
        )
    except ValueError:
        sys.exit(EXIT_TOOL_ERROR)

    try:
        for binary in args.binary:
            stacksplit.examine(binary)
    except CorruptedTableError:
        sys.exit(EXIT_CORRUPTED)
    except (OSError, subprocess.CalledProcessError):
        sys.exit(EXIT_TOOL_ERROR)
    except KeyboardInterrupt:
        sys.exit(EXIT_ABORT)

    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
