from .automata import Automaton, Visitor, START_MARKER, END_OF_INPUT
from .automata.stack import BoundedStack, StackError, StackOverflow, StackUnderflow
from .automata.table import TableAutomaton, example
from .charclass import ParseError, parse_charclass

__all__ = [
    'Automaton', 'Visitor', 'START_MARKER', 'END_OF_INPUT',
    'BoundedStack', 'StackError', 'StackOverflow', 'StackUnderflow',
    'TableAutomaton', 'example',
    'ParseError', 'parse_charclass',
]
