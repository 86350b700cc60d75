import pytest

from dfamatch.automata.table import TableAutomaton, example


@pytest.fixture
def automaton() -> TableAutomaton:
    return example()
