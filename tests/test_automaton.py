import logging
import pytest

from dfamatch.automata import END_OF_INPUT, START_MARKER
from dfamatch.automata.stack import StackOverflow
from dfamatch.automata.table import TableAutomaton
from dfamatch.charclass import AnyChar, Literal, parse_charclass


class TestExample:
    @pytest.mark.parametrize("s,result", [
        ("", False),
        ("x", False),
        ("a", True),
        ("ac", True),
        ("acx", True),
        ("bc", True),
        ("b", True),
        ("ab", True),
        ("acc", True),
        ("xa", False),
        ("c", False),
    ])
    def test_matches(self, automaton: TableAutomaton, s: str, result: bool) -> None:
        assert automaton.matches(s) == result

    def test_table(self, automaton: TableAutomaton) -> None:
        assert automaton.accepting == [True, True, False]
        assert automaton.initial() == 2
        assert len(automaton) == 3

    @pytest.mark.parametrize("s,state,consumed,path", [
        ("", 2, 0, [START_MARKER]),
        ("x", 2, 1, [START_MARKER, 2]),
        ("a", 1, 1, [START_MARKER, 2]),
        ("ab", 1, 2, [1]),
        ("ac", 0, 2, [1]),
        ("acx", 0, 3, [0]),
    ])
    def test_path(self, automaton: TableAutomaton, s: str, state: int,
                  consumed: int, path: list[int]) -> None:
        v = automaton.run(s)
        assert v.state == state
        assert v.consumed == consumed
        assert v.path() == path

    def test_visit(self, automaton: TableAutomaton) -> None:
        v = automaton.visit()
        assert not v.success()
        assert v.visit("a")
        assert v.success()
        assert v.visit("c")
        assert v.success()
        assert not v.visit("c")
        assert v.halted
        assert v.success()

        v = automaton.visit()
        assert not v.visit("x")
        assert not v.visit("a")
        assert v.state == 2
        assert v.consumed == 1
        assert not v.success()

    def test_end_of_input(self, automaton: TableAutomaton) -> None:
        assert automaton.matches("a" + END_OF_INPUT + "x")
        assert not automaton.matches(END_OF_INPUT + "a")
        v = automaton.run("ac" + END_OF_INPUT + "x")
        assert v.state == 0
        assert v.consumed == 2
        assert v.path() == [1]

    def test_feed(self, automaton: TableAutomaton) -> None:
        assert automaton.matches(["a", "c"])
        assert automaton.matches(iter("bc"))
        assert not automaton.matches([])

    def test_deterministic(self, automaton: TableAutomaton) -> None:
        first = automaton.run("acx")
        second = automaton.run("acx")
        assert first.stack is not second.stack
        assert first.path() == second.path()
        for _ in range(3):
            assert automaton.matches("ac")
            assert not automaton.matches("x")


class TestTableAutomaton:
    @staticmethod
    def identifier() -> TableAutomaton:
        a = TableAutomaton()
        s0 = a.add_state()
        s1 = a.add_state()
        a.mark_final(s1)
        a.add_transition(s0, parse_charclass("[a-zA-Z_]"), s1)
        a.add_transition(s1, parse_charclass("[a-zA-Z0-9_]"), s1)
        return a

    def test_empty(self) -> None:
        a = TableAutomaton()
        assert len(a) == 0
        with pytest.raises(ValueError):
            a.matches("")

    def test_add_state(self) -> None:
        a = TableAutomaton()
        assert a.add_state() == 0
        assert a.add_state() == 1
        assert a.accepting == [False, False]
        a.mark_final(1)
        assert a.accepting == [False, True]
        a.mark_final(1, False)
        assert a.accepting == [False, False]
        assert a.initial() == 0

    def test_reset(self, automaton: TableAutomaton) -> None:
        automaton.capacity = 10
        automaton.reset()
        assert len(automaton) == 0
        assert automaton.accepting == []
        assert automaton.capacity == 10

    def test_loop(self) -> None:
        a = self.identifier()
        assert a.matches("foo_1")
        assert a.matches("_")
        assert not a.matches("1foo")
        assert not a.matches("")
        assert a.matches("foo bar")
        assert a.run("foo").path() == [1]

    def test_first_transition_wins(self) -> None:
        a = TableAutomaton()
        s0 = a.add_state()
        s1 = a.add_state()
        s2 = a.add_state()
        a.mark_final(s1)
        a.add_transition(s0, Literal("a"), s1)
        a.add_transition(s0, AnyChar(), s2)
        assert a.matches("a")
        assert not a.matches("b")
        assert a.run("b").state == s2

    def test_callable_predicate(self) -> None:
        a = TableAutomaton()
        s0 = a.add_state()
        s1 = a.add_state()
        a.mark_final(s1)
        a.add_transition(s0, str.isdigit, s1)
        a.add_transition(s1, str.isdigit, s1)
        assert a.matches("1234")
        assert not a.matches("x")

    @staticmethod
    def sink(capacity: int, strict: bool, final: bool) -> TableAutomaton:
        a = TableAutomaton(capacity, strict)
        s0 = a.add_state()
        a.mark_final(s0, final)
        a.add_transition(s0, AnyChar(), s0)
        return a

    def test_strict_overflow(self) -> None:
        a = self.sink(3, True, False)
        assert not a.matches("ab")
        with pytest.raises(StackOverflow):
            a.matches("abc")

    def test_lenient_overflow(self, caplog: pytest.LogCaptureFixture) -> None:
        a = self.sink(3, False, False)
        with caplog.at_level(logging.WARNING):
            v = a.run("abcde")
        assert "stack is full" in caplog.text
        assert not v.success()
        assert v.consumed == 5
        assert v.stack.dropped == 3
        assert v.path() == [START_MARKER, 0, 0]

    def test_accepting_clears(self) -> None:
        a = self.sink(2, True, True)
        v = a.run("x" * 500)
        assert v.success()
        assert v.stack.dropped == 0
        assert v.path() == [0]
