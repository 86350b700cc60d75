#! /usr/bin/env python3

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from . import Automaton
from .stack import DEFAULT_CAPACITY
from ..charclass import ClassOr, Literal
import dataclasses
import typing


Predicate = typing.Callable[[str], bool]


@dataclasses.dataclass
class TableAutomaton(Automaton):
    """A deterministic automaton described by a transition table.  Each
       state has a list of (predicate, destination) pairs, which are tried
       in order; a symbol that does not satisfy any predicate halts the
       automaton in the current state."""

    transition: list[list[tuple[Predicate, int]]]
    accepting: list[bool]
    start: int
    capacity: int
    strict: bool

    def __init__(self, capacity: int = DEFAULT_CAPACITY, strict: bool = False) -> None:
        super().__init__()
        self.capacity = capacity
        self.strict = strict
        self.reset()

    def reset(self) -> None:
        """Remove all states, leaving the stack configuration alone."""
        self.transition = []
        self.accepting = []
        self.start = 0

    def __len__(self) -> int:
        return len(self.transition)

    def has_state(self, state: int) -> bool:
        return state >= 0 and state < len(self.transition)

    def add_state(self) -> int:
        """Add a state to the automaton and return its integer identifier."""
        self.transition.append([])
        self.accepting.append(False)
        return len(self.transition) - 1

    def mark_final(self, state: int, final: bool = True) -> None:
        """Mark a state as accepting.  A visit that terminates on the state
           will be considered successful."""
        assert self.has_state(state)
        self.accepting[state] = final

    def set_start(self, state: int) -> None:
        assert self.has_state(state)
        self.start = state

    def add_transition(self, source: int, predicate: Predicate, dest: int) -> None:
        """Add a transition from ``source`` to ``dest``, taken for the
           symbols that satisfy ``predicate`` and that no earlier
           transition out of ``source`` accepts."""
        assert self.has_state(source) and self.has_state(dest)
        self.transition[source].append((predicate, dest))

    def initial(self) -> int:
        if not self.transition:
            raise ValueError("automaton has no states")
        return self.start

    def advance(self, source: int, symbol: str) -> typing.Optional[int]:
        for predicate, dest in self.transition[source]:
            if predicate(symbol):
                return dest
        return None

    def is_final(self, state: int) -> bool:
        return self.accepting[state]


def build_example(automaton: TableAutomaton) -> TableAutomaton:
    """Fill ``automaton`` with a three-state chain that accepts the
       strings starting with ``a`` or ``b``.  State 2 is the initial
       state and goes to state 1 on ``a|b``; state 1 is accepting
       and goes to state 0 on ``c``; state 0 is accepting and has
       no transitions."""
    automaton.reset()
    s0 = automaton.add_state()
    s1 = automaton.add_state()
    s2 = automaton.add_state()
    automaton.mark_final(s0)
    automaton.mark_final(s1)
    automaton.add_transition(s2, ClassOr(Literal('a'), Literal('b')), s1)
    automaton.add_transition(s1, Literal('c'), s0)
    automaton.set_start(s2)
    return automaton


def example() -> TableAutomaton:
    return build_example(TableAutomaton())
