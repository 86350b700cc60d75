from ..automata.table import TableAutomaton
from ..charclass import CharClass
import shlex
import typing


def serialize_automaton(automaton: TableAutomaton, f: typing.TextIO) -> None:
    print("new", file=f)
    for state in range(len(automaton)):
        if automaton.is_final(state):
            print("state", "--accepting", file=f)
        else:
            print("state", file=f)

    if len(automaton):
        print("start", automaton.start, file=f)

    for source, edges in enumerate(automaton.transition):
        for predicate, dest in edges:
            if not isinstance(predicate, CharClass):
                raise ValueError(f"cannot save transition {source} -> {dest}")
            print("edge", source, dest, shlex.quote(str(predicate)), file=f)


def write_dot(automaton: TableAutomaton, f: typing.TextIO) -> None:
    print("digraph automaton {", file=f)
    print("\trankdir=LR;", file=f)
    print("\tnode [shape = circle];", file=f)
    print('\t"" [shape = none];', file=f)
    for state in range(len(automaton)):
        if automaton.is_final(state):
            print(f"\t{state} [shape = doublecircle];", file=f)

    if len(automaton):
        print(f'\t"" -> {automaton.start};', file=f)

    for source, edges in enumerate(automaton.transition):
        for predicate, dest in edges:
            label = str(predicate).replace('\\', '\\\\').replace('"', '\\"')
            print(f'\t{source} -> {dest} [label = "{label}"];', file=f)

    print("}", file=f)


def source(inf: typing.Iterator[str], exit_first: bool) -> None:
    from . import main
    main.SourceCommand.do_source(inf, exit_first)
