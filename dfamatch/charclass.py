"""Character classes for the transitions of an automaton."""

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import abc
import compynator.core         # type: ignore
import dataclasses
import string
import typing


# characters that must be escaped with a backslash outside and inside
# brackets respectively
_SPECIAL = '\\.[]()|!'
_BRACKET_SPECIAL = '\\]^-'


def _escape(c: str, special: str) -> str:
    if len(c) == 1 and (c < ' ' or c == '\x7f'):
        return f'\\x{ord(c):02x}'
    return '\\' + c if c in special else c


class CharClass(metaclass=abc.ABCMeta):
    """A predicate over a single input character.  ``str(cls)`` gives
       back the syntax accepted by ``parse_charclass``."""

    @abc.abstractmethod
    def __call__(self, c: str) -> bool:
        pass

    @abc.abstractmethod
    def __str__(self) -> str:
        pass


@dataclasses.dataclass
class Literal(CharClass):
    char: str

    def __call__(self, c: str) -> bool:
        return c == self.char

    def __str__(self) -> str:
        return _escape(self.char, _SPECIAL)


@dataclasses.dataclass
class AnyChar(CharClass):
    def __call__(self, c: str) -> bool:
        return True

    def __str__(self) -> str:
        return '.'


@dataclasses.dataclass
class Bracket(CharClass):
    ranges: tuple[tuple[str, str], ...]
    negated: bool = False

    def __call__(self, c: str) -> bool:
        return any(lo <= c <= hi for lo, hi in self.ranges) != self.negated

    def __str__(self) -> str:
        items = []
        for lo, hi in self.ranges:
            if lo == hi:
                items.append(_escape(lo, _BRACKET_SPECIAL))
            else:
                items.append(_escape(lo, _BRACKET_SPECIAL) + '-' + _escape(hi, _BRACKET_SPECIAL))
        return ('[^' if self.negated else '[') + ''.join(items) + ']'


@dataclasses.dataclass
class ClassNot(CharClass):
    cls: CharClass

    def __call__(self, c: str) -> bool:
        return not self.cls(c)

    def __str__(self) -> str:
        if isinstance(self.cls, ClassOr):
            return f'!({self.cls})'
        return f'!{self.cls}'


@dataclasses.dataclass
class ClassOr(CharClass):
    classes: tuple[CharClass, ...]

    def __init__(self, *classes: CharClass):
        self.classes = classes

    def __call__(self, c: str) -> bool:
        return any(cls(c) for cls in self.classes)

    def __str__(self) -> str:
        return '|'.join(str(cls) for cls in self.classes)


Parser = typing.Callable[[str], typing.Union[compynator.core.Success, compynator.core.Failure]]


@typing.no_type_check
def _charclass_parser() -> Parser:
    from compynator.core import One, Terminal
    from compynator.niceties import Forward                # type: ignore

    # \xHH gives any character by its code, \ followed by anything
    # else gives that character
    Hex = One.where(lambda c: c in string.hexdigits)
    Code = Terminal('\\x').then(Hex).then(Hex, reducer=lambda x, y: x + y).value(lambda h: chr(int(h, 16)))
    Escaped = Code | Terminal('\\').then(One.where(lambda c: c != 'x'))
    Char = Escaped | One.where(lambda c: c not in _SPECIAL)
    BracketChar = Escaped | One.where(lambda c: c not in _BRACKET_SPECIAL)

    Range = BracketChar.skip(Terminal('-')).then(BracketChar, reducer=lambda lo, hi: [(lo, hi)]) \
        | BracketChar.value(lambda c: [(c, c)])
    Ranges = Range.repeat(lower=1, value=[], reducer=lambda x, y: x + y)
    Set = \
        Terminal('[^').then(Ranges).skip(Terminal(']')).value(lambda r: Bracket(tuple(r), True)) | \
        Terminal('[').then(Ranges).skip(Terminal(']')).value(lambda r: Bracket(tuple(r)))

    Alt = Forward()
    Paren = Terminal('(').then(Alt).skip(Terminal(')'))
    Atom = Terminal('.').value(lambda x: AnyChar()) | Set | Paren | Char.value(Literal)

    Term = Forward()
    Term.is_(Terminal('!').then(Term).value(ClassNot) | Atom)

    Rest = Terminal('|').then(Term).value(lambda x: [x]).repeat(value=[], reducer=lambda x, y: x + y)
    Alt.is_(Term.then(Rest, reducer=lambda x, y: ClassOr(x, *y) if y else x))
    return Alt


CharClassParser = _charclass_parser()


class ParseError(Exception):
    @property
    def message(self) -> str:
        return str(self.args[0])


def _compynator_parse(p: Parser, s: str) -> typing.Any:
    results = p(s)
    if not isinstance(results, compynator.core.Success):
        raise ParseError(f"invalid character class at '{s}'")
    remain = s
    for result in results:
        if not result.remain:
            return result.value
        if len(result.remain) < len(remain):
            remain = result.remain
    raise ParseError(f"invalid character class at '{remain}'")


def _check_ranges(cls: CharClass) -> None:
    if isinstance(cls, Bracket):
        for lo, hi in cls.ranges:
            if lo > hi:
                raise ParseError(f"invalid character class at '{lo}-{hi}'")
    elif isinstance(cls, ClassNot):
        _check_ranges(cls.cls)
    elif isinstance(cls, ClassOr):
        for c in cls.classes:
            _check_ranges(c)


def parse_charclass(s: str) -> CharClass:
    result: CharClass = _compynator_parse(CharClassParser, s)
    _check_ranges(result)
    return result
