# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Run the tool with "python -m stacksplit"."""

from stacksplit.main import main

main()
