# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Patterns for specific architectures."""

from .base import LineKind, Pattern
from .x86 import x86
from .x86_64 import x86_64
