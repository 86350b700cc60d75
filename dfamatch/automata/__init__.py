#! /usr/bin/env python3

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import abc
import logging
import typing

from .stack import BoundedStack, DEFAULT_CAPACITY

log = logging.getLogger(__name__)

# pushed before entering the initial state
START_MARKER = -1

# terminates the input even if the feed has more symbols
END_OF_INPUT = '\0'


class Visitor:
    """A single traversal of an automaton.  The visit records the states
       it goes through on its own ``BoundedStack``; every accepting state
       that consumes a symbol clears the stack first, so that the stack
       holds the path since the last accepting state."""

    def __init__(self, automaton: 'Automaton') -> None:
        self.automaton = automaton
        self.stack = BoundedStack(automaton.capacity, automaton.strict)
        self.stack.push(START_MARKER)
        self.state = automaton.initial()
        self.halted = False
        self.consumed = 0

    def visit(self, symbol: str) -> bool:
        """Feed ``symbol`` to the automaton.  Return False if the visit
           has halted, either now or before; later symbols are ignored."""
        if self.halted:
            return False
        if symbol == END_OF_INPUT:
            self.halted = True
            return False

        self.consumed += 1
        if self.automaton.is_final(self.state):
            self.stack.clear()
        self.stack.push(self.state)

        dest = self.automaton.advance(self.state, symbol)
        if dest is None:
            log.debug("halt in %d on %r", self.state, symbol)
            self.halted = True
            return False

        log.debug("%d -> %d on %r", self.state, dest, symbol)
        self.state = dest
        return True

    def success(self) -> bool:
        return self.automaton.is_final(self.state)

    def path(self) -> list[int]:
        """Return the recorded states, from the oldest to the newest."""
        return list(self.stack)


class Automaton(metaclass=abc.ABCMeta):
    capacity: int = DEFAULT_CAPACITY
    strict: bool = False

    @abc.abstractmethod
    def initial(self) -> int:
        """Return the initial state of a visit of ``self``."""
        pass

    @abc.abstractmethod
    def advance(self, source: int, symbol: str) -> typing.Optional[int]:
        """Return the state reached by the automaton when fed
           ``symbol`` from the state ``source``, or None if the
           automaton halts in ``source``."""
        pass

    @abc.abstractmethod
    def is_final(self, state: int) -> bool:
        """Return True if ``state`` is an accepting state."""
        pass

    def run(self, feed: typing.Iterable[str]) -> Visitor:
        """Visit the automaton with the symbols in ``feed`` until
           it halts or the input ends, and return the visit."""
        v = self.visit()
        for symbol in feed:
            if not v.visit(symbol):
                break
        return v

    def matches(self, feed: typing.Iterable[str]) -> bool:
        """Return True if the automaton matches the sequence
           of symbols in ``feed``."""
        return self.run(feed).success()

    def visit(self) -> Visitor:
        """Return an object that will perform a visit on the automaton."""
        return Visitor(self)
