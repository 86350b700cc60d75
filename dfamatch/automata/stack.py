#! /usr/bin/env python3

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import dataclasses
import logging
import sys
import typing

log = logging.getLogger(__name__)

_dataclass_args = {} \
    if sys.version_info < (3, 10) \
    else {'slots': True}

DEFAULT_CAPACITY = 100

# returned by pop() on an empty stack
EMPTY = -1


class StackError(Exception):
    pass


class StackOverflow(StackError):
    pass


class StackUnderflow(StackError):
    pass


@dataclasses.dataclass(init=False, **_dataclass_args)
class BoundedStack:
    """A last-in-first-out container of integers with a fixed capacity.

       If ``strict`` is false, pushing onto a full stack logs a warning
       and drops the value, and popping an empty stack logs a warning
       and returns ``EMPTY``.  If ``strict`` is true, the two cases raise
       ``StackOverflow`` and ``StackUnderflow`` respectively."""

    items: list[int]
    top: int
    strict: bool
    dropped: int

    def __init__(self, capacity: int = DEFAULT_CAPACITY, strict: bool = False) -> None:
        if capacity <= 0:
            raise ValueError(f"invalid stack capacity {capacity}")
        self.items = [0] * capacity
        self.strict = strict
        self.dropped = 0
        self.clear()

    @property
    def capacity(self) -> int:
        return len(self.items)

    def is_empty(self) -> bool:
        return self.top == -1

    def is_full(self) -> bool:
        return self.top == len(self.items) - 1

    def push(self, state: int) -> None:
        if self.is_full():
            if self.strict:
                raise StackOverflow(f"stack is full (capacity {self.capacity})")
            log.warning("stack is full, dropping %d", state)
            self.dropped += 1
            return
        self.top += 1
        self.items[self.top] = state

    def pop(self) -> int:
        if self.is_empty():
            if self.strict:
                raise StackUnderflow("stack is empty")
            log.warning("stack is empty")
            return EMPTY
        state = self.items[self.top]
        self.top -= 1
        return state

    def peek(self) -> int:
        """Return the top element without removing it, or ``EMPTY``."""
        return EMPTY if self.is_empty() else self.items[self.top]

    def clear(self) -> None:
        """Discard all the elements.  The storage is not touched."""
        self.top = -1

    def __len__(self) -> int:
        return self.top + 1

    def __iter__(self) -> typing.Iterator[int]:
        """Iterate from the bottom to the top of the stack."""
        return iter(self.items[:self.top + 1])
