#!/bin/python3

# SPDX-FileCopyrightText: 2022 CETITEC GmbH <https://www.cetitec.com>
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""The data structure for classifying the functions of a binary by their prologue."""

from enum import IntEnum

MORESTACK = "__morestack"
MORESTACK_NON_SPLIT = "__morestack_non_split"


class Category(IntEnum):
    """The stack split categories ordered by severity.

    Unknown is never a valid result. It marks an uninitialized table entry.
    """

    Unknown = 0
    # no calls
    Leaf = 1
    # calls, but no morestack calls
    NoSplit = 2
    # calls __morestack
    SplitSmall = 3
    # calls __morestack_non_split
    SplitLarge = 4

    @property
    def label(self):
        """Return the name used in the detailed report."""
        return LABELS[self]


LABELS = {
    Category.Unknown: "Unknown",
    Category.Leaf: "Leaf",
    Category.NoSplit: "NoSplit",
    Category.SplitSmall: "MoreStack",
    Category.SplitLarge: "MoreStackNonSplit",
}

# The order of the statistic and of the detailed report
CATEGORIES = [
    Category.Leaf,
    Category.NoSplit,
    Category.SplitSmall,
    Category.SplitLarge,
]


class CorruptedTableError(ValueError):
    """A table entry holds no valid category.

    Attributes:
        name (str): the name of the broken entry
    """

    def __init__(self, name):
        """Create the object.

        Args:
            name (str): the name of the broken entry
        """
        super().__init__("corrupted funcs table entry at {}".format(name))
        self.name = name


class Table:
    """The function database of a binary.

    Function names are not unique in a binary, e.g. for static functions of different
    compilation units. If a name is recorded again, the new entry is stored under
    "name%N" with N counting the collisions of the table. The entry under the original
    name keeps the category of its first occurrence, while the renamed entry gets the
    more severe category of both.

    Attributes:
        table (dict[str, Category]): the category of each function
        collisions (int):            the number of name collisions so far
    """

    table = None
    collisions = 0

    def __init__(self, table=None):
        """Create the object.

        Args:
            table (dict[str, Category], optional): initial entries. Defaults to None.
        """
        self.table = dict(table) if table else {}
        self.collisions = 0

    def __contains__(self, name):
        """Return if the Table contains the function."""
        return name in self.table

    def __getitem__(self, name):
        """Return the category of the function."""
        return self.table[name]

    def __iter__(self):
        """Return the iterator over the function names."""
        return iter(self.table)

    def __len__(self):
        """Return the number of functions."""
        return len(self.table)

    def __repr__(self):
        """Return repr(self.table)."""
        return repr(self.table)

    def record(self, name, category):
        """Store the category of a function.

        Args:
            name (str):          the function name
            category (Category): the category of the function

        Returns:
            str: the key the category was stored under
        """
        if name in self.table:
            self.collisions += 1
            category = max(category, self.table[name])
            name = "{}%{}".format(name, self.collisions)

        self.table[name] = category
        return name

    def count(self):
        """Count the functions per category.

        Returns:
            dict[Category, int]: the number of functions for each category in CATEGORIES

        Raises:
            CorruptedTableError: an entry holds no valid category
        """
        counts = {category: 0 for category in CATEGORIES}

        for name, category in self.table.items():
            if category not in counts:
                raise CorruptedTableError(name)
            counts[category] += 1

        return counts

    def names(self, category):
        """Return the sorted names of all functions of a category.

        Args:
            category (Category): the category

        Returns:
            list[str]: the function names in ascending order
        """
        return sorted(name for name, value in self.table.items() if value == category)


class Accumulator:
    """Collect the calls of the currently parsed function.

    The accumulator is fed with the lines of the disassembler in order. Each function
    start closes the previous function and records its category in the table.

    Attributes:
        current (str):  the name of the open function, None if no function is open
        short (bool):   if the open function calls __morestack
        long (bool):    if the open function calls __morestack_non_split
        call (bool):    if the open function calls anything
        table (Table):  the categories of all closed functions
    """

    current = None
    short = False
    long = False
    call = False
    table = None

    def __init__(self):
        """Create the object."""
        self.current = None
        self.table = Table()
        self._reset()

    def _reset(self):
        self.short = False
        self.long = False
        self.call = False

    def category(self):
        """Return the category of the open function based on the calls seen so far."""
        if self.long:
            return Category.SplitLarge
        if self.short:
            return Category.SplitSmall
        if self.call:
            return Category.NoSplit
        return Category.Leaf

    def start_function(self, name):
        """Close the open function and open a new one.

        Args:
            name (str): the name of the new function
        """
        self.finish()
        self.current = name

    def plt_jump(self):
        """Note a jump into the procedure linkage table."""
        if self.current is not None:
            self.call = True

    def direct_call(self, target):
        """Note a call of a symbol.

        Args:
            target (str): the name of the called symbol
        """
        if self.current is None:
            return

        self.call = True
        if target == MORESTACK:
            self.short = True
        elif target == MORESTACK_NON_SPLIT:
            self.long = True

    def any_call(self):
        """Note a call without a resolvable symbol."""
        if self.current is not None:
            self.call = True

    def finish(self):
        """Record the open function and close it.

        Returns:
            str: the key the function was stored under or None if no function was open
        """
        if self.current is None:
            return None

        key = self.table.record(self.current, self.category())
        self.current = None
        self._reset()

        return key
