# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Classify the functions of ELF binaries by their stack split prologue."""

__version__ = "0.1"
