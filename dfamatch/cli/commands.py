"""Implementation of the commands for the dfamatch tool."""

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import argparse
from . import serialize_automaton, write_dot
from ..automata.stack import StackError
from ..automata.table import TableAutomaton, build_example, example
from ..charclass import ParseError, parse_charclass
from contextlib import contextmanager
import glob
import io
import os
import subprocess
import sys
import typing


AUTOMATON: TableAutomaton = example()


@contextmanager
def open_unlink_on_error(filename: str) -> typing.Iterator[typing.TextIO]:
    # only unlink regular files that did not exist before
    do_unlink = not os.path.exists(filename)
    f = open(filename, "w")
    do_unlink = do_unlink and os.path.isfile(filename)
    try:
        with f:
            yield f
    except Exception:
        if do_unlink:
            os.unlink(filename)
        raise


class Completer:
    def try_to_expand(self, text: str) -> str:
        return text

    def get_completions(self, text: str) -> typing.Iterable[str]:
        return []


class FileCompleter(Completer):
    def __init__(self, glob_patterns: list[str] = ['*']) -> None:
        self.glob_patterns = glob_patterns

    def try_to_expand(self, text: str) -> str:
        expanded = text
        if text.startswith('~'):
            expanded = os.path.expanduser(expanded)
        if not expanded.endswith("/") and os.path.isdir(expanded):
            expanded += "/"
        return expanded

    def get_completions(self, text: str) -> typing.Iterable[str]:
        result = glob.glob(text + "*/")
        path = os.path.dirname(text)
        if path:
            path += "/"
        for i in self.glob_patterns:
            expanded = glob.glob(path + i)
            result += (x for x in expanded if not os.path.isdir(x))
        return result


class StateCompleter(Completer):
    def get_completions(self, text: str) -> typing.Iterable[str]:
        return [str(state) for state in range(len(AUTOMATON))]


class DFACommand:

    NAME: typing.Optional[tuple[str, ...]] = None

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        """Setup argument parser"""
        pass

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return Completer()

    @staticmethod
    def check_state(state: int) -> None:
        if not AUTOMATON.has_state(state):
            raise argparse.ArgumentError(None, f"state not found in automaton: {state}")

    def run(self, args: argparse.Namespace) -> None:
        pass


class ChdirCommand(DFACommand):
    """Change current directory."""
    NAME = ("cd",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("dir", metavar="DIR",
                            help="New current directory")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        # complete by directory only
        return FileCompleter([]) if nwords == 1 else Completer()

    def run(self, args: argparse.Namespace) -> None:
        os.chdir(os.path.expanduser(args.dir))


class NewCommand(DFACommand):
    """Removes all states from the automaton."""
    NAME = ("new",)

    def run(self, args: argparse.Namespace) -> None:
        AUTOMATON.reset()


class ExampleCommand(DFACommand):
    """Replaces the automaton with one that accepts strings
       starting with "a" or "b"."""
    NAME = ("example",)

    def run(self, args: argparse.Namespace) -> None:
        build_example(AUTOMATON)


class StateCommand(DFACommand):
    """Adds one or more states to the automaton.  States are numbered
       from 0 in the order they are created."""
    NAME = ("state",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--accepting", action="store_true",
                            help="Make the new states accepting.")
        parser.add_argument("--start", action="store_true",
                            help="Make the (first) new state the initial state.")
        parser.add_argument("count", metavar="COUNT", type=int, nargs="?", default=1,
                            help="Number of states to add")

    def run(self, args: argparse.Namespace) -> None:
        if args.count <= 0:
            raise argparse.ArgumentError(None, f"invalid number of states: {args.count}")
        for i in range(args.count):
            state = AUTOMATON.add_state()
            AUTOMATON.mark_final(state, args.accepting)
            if args.start and i == 0:
                AUTOMATON.set_start(state)


class StartCommand(DFACommand):
    """Sets the initial state of the automaton."""
    NAME = ("start",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("state", metavar="STATE", type=int,
                            help="The new initial state")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return StateCompleter() if nwords == 1 else Completer()

    def run(self, args: argparse.Namespace) -> None:
        self.check_state(args.state)
        AUTOMATON.set_start(args.state)


class AcceptCommand(DFACommand):
    """Makes states accepting, or non-accepting with --no."""
    NAME = ("accept",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--no", action="store_true",
                            help="Make the states non-accepting.")
        parser.add_argument("states", metavar="STATE", type=int, nargs="+",
                            help="The states to be changed")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return StateCompleter()

    def run(self, args: argparse.Namespace) -> None:
        for state in args.states:
            self.check_state(state)
        for state in args.states:
            AUTOMATON.mark_final(state, not args.no)


class EdgeCommand(DFACommand):
    """Creates a new transition.  Transitions out of a state are tried
       in the order they were created."""
    NAME = ("edge",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("source", metavar="SOURCE", type=int,
                            help="Source state for the new transition")
        parser.add_argument("dest", metavar="DEST", type=int,
                            help="Target state for the new transition")
        parser.add_argument("charclass", metavar="CLASS",
                            help="Characters that trigger the transition")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return StateCompleter() if nwords < 3 else Completer()

    def run(self, args: argparse.Namespace) -> None:
        self.check_state(args.source)
        self.check_state(args.dest)
        try:
            predicate = parse_charclass(args.charclass)
        except ParseError as e:
            raise argparse.ArgumentError(None, e.message)
        AUTOMATON.add_transition(args.source, predicate, args.dest)


class StackCommand(DFACommand):
    """Configures the stack that records the states visited by "match".
       Without arguments, prints the current configuration."""
    NAME = ("stack",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        group = parser.add_mutually_exclusive_group()
        group.add_argument("--strict", action="store_true", default=None,
                           help="Fail the match if the stack overflows.")
        group.add_argument("--lenient", action="store_false", dest="strict", default=None,
                           help="Drop states that do not fit in the stack.")
        parser.add_argument("capacity", metavar="CAPACITY", type=int, nargs="?",
                            help="Maximum number of recorded states")

    def run(self, args: argparse.Namespace) -> None:
        if args.capacity is None and args.strict is None:
            mode = "strict" if AUTOMATON.strict else "lenient"
            print(f"capacity {AUTOMATON.capacity}, {mode}")
            return

        if args.capacity is not None:
            if args.capacity <= 0:
                raise argparse.ArgumentError(None, f"invalid stack capacity: {args.capacity}")
            AUTOMATON.capacity = args.capacity
        if args.strict is not None:
            AUTOMATON.strict = args.strict


class MatchCommand(DFACommand):
    """Runs the automaton on each string and prints whether it matches."""
    NAME = ("match",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--trace", action="store_true",
                            help="Print the final state and the recorded path.")
        parser.add_argument("strings", metavar="STRING", nargs="+",
                            help="The strings to be matched")

    def run(self, args: argparse.Namespace) -> None:
        for s in args.strings:
            try:
                v = AUTOMATON.run(s)
            except (StackError, ValueError) as e:
                print(f"{s!r}: {e}", file=sys.stderr)
                continue

            print(f"{s!r}: {'match' if v.success() else 'no match'}")
            if args.trace:
                path = " ".join(str(state) for state in v.path())
                print(f"    state {v.state} after {v.consumed} symbols, path: {path}")
                if v.stack.dropped:
                    print(f"    {v.stack.dropped} states not recorded")


class SaveCommand(DFACommand):
    """Creates a command file with the automaton."""
    NAME = ("save", )

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("file", metavar="FILE", nargs="?")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return FileCompleter() if nwords == 1 else Completer()

    def run(self, args: argparse.Namespace) -> None:
        try:
            if args.file:
                fn = os.path.expanduser(args.file)
                with open_unlink_on_error(fn) as f:
                    serialize_automaton(AUTOMATON, f)
            else:
                serialize_automaton(AUTOMATON, sys.stdout)
        except ValueError as e:
            raise argparse.ArgumentError(None, str(e))


class OutputCommand(DFACommand):
    """Creates a DOT file with the automaton.  If invoked as "dotty" and
       with no arguments, the graph is laid out and showed in a graphical
       window."""
    NAME = ("output", "dotty")

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("file", metavar="FILE", nargs="?")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return FileCompleter() if nwords == 1 else Completer()

    def run(self, args: argparse.Namespace) -> None:
        if args.file:
            fn = os.path.expanduser(args.file)
            with open_unlink_on_error(fn) as f:
                write_dot(AUTOMATON, f)
        elif args.cmd == "dotty":
            graph = io.StringIO()
            write_dot(AUTOMATON, graph)
            dotty = subprocess.Popen("dotty -", stdin=subprocess.PIPE, shell=True,
                                     errors="backslashreplace", encoding="ascii")
            dotty.communicate(graph.getvalue())
        else:
            write_dot(AUTOMATON, sys.stdout)
