import pytest

from automaton import Automaton, build


@pytest.fixture()
def silent_then_symbol() -> Automaton:
    """0 -ε-> 1 -a-> 2, with 2 accepting."""
    return build(3, ["a"], 0, {2}, {(1, 0, 2)}, {(0, 1)})


@pytest.fixture()
def silent_to_final() -> Automaton:
    """Like silent_then_symbol, plus 0 -ε-> 2."""
    return build(3, ["a"], 0, {2}, {(1, 0, 2)}, {(0, 1), (0, 2)})


@pytest.fixture()
def a_star_b_star() -> Automaton:
    """
    Thompson-style automaton for a*b*:

        0 -ε-> 1, 1 -a-> 1, 1 -ε-> 2, 2 -b-> 2, 2 -ε-> 3 (accepting)
    """
    return build(
        4,
        ["a", "b"],
        0,
        {3},
        {(1, 0, 1), (2, 1, 2)},
        {(0, 1), (1, 2), (2, 3)},
    )


@pytest.fixture()
def epsilon_chain() -> Automaton:
    """0 -ε-> 1 -ε-> 2 -ε-> 3 -a-> 4 -ε-> 5, with 5 accepting."""
    return build(
        6,
        ["a"],
        0,
        {5},
        {(3, 0, 4)},
        {(0, 1), (1, 2), (2, 3), (4, 5)},
    )
