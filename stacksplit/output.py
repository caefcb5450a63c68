# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Collection of output utilities."""

import sys


class Color:
    """ANSI color codes."""

    CYAN = "\033[96m"
    DARK = "\033[90m"
    RED = "\033[91m"
    PURPLE = "\033[95m"
    YELLOW = "\033[93m"
    END = "\033[0m"
    BOLD = "\033[1m"


class MessageType:
    """Definition of the shape of a message.

    Attributes:
        color (str):  the color of the message prefix
        prefix (str): the prefix of the message
        stream (str): the name of the stream the message is written to, either
                      "stdout" or "stderr"
    """

    color = None
    prefix = None
    stream = None

    def __init__(self, prefix=None, color=None, stream="stdout"):
        """Create the object.

        Args:
            prefix (str, optional):  the prefix of the message. Defaults to None.
            color (Color, optional): the color of the message prefix. Defaults to None.
            stream (str, optional):  "stdout" or "stderr". Defaults to "stdout".
        """
        self.color = color
        self.prefix = prefix
        self.stream = stream

    def file(self):
        """Return the file object the message is written to.

        The lookup happens on every call so that redirected streams are honored.
        """
        return getattr(sys, self.stream)


class Message:
    """Line format for different message types."""

    TRACE = MessageType("Trace: ", Color.YELLOW)
    ERROR = MessageType("Error: ", Color.RED, "stderr")
    INFO = MessageType()
    WARN = MessageType("Warning: ", Color.PURPLE, "stderr")


class Verbosity:
    """Trace levels of the verbose output."""

    SILENT = 0
    # loading of binaries, objdump command lines
    FILE = 1
    # function starts and calls
    FUNCTION = 2
    # every line of the objdump output
    LINE = 3
