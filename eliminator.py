from collections import defaultdict
from typing_extensions import *

from automaton import Automaton
from closure import EpsilonClosure


def eliminate_epsilon_transitions(
    automaton: Automaton, closure: EpsilonClosure
) -> FrozenSet[Tuple[int, int, int]]:
    """
    Build symbol transitions that no longer need epsilon moves.

    `source` reaches `dest` on `sym` when `source` silently reaches some
    `via`, `via` moves on `sym` to `mid`, and `mid` silently reaches `dest`.
    """
    trans_dict = defaultdict(set)
    for src, sym, tgt in automaton.symbol_transitions:
        trans_dict[src].add((sym, tgt))

    return frozenset(
        (source, sym, dest)
        for source in automaton.states
        for via in closure[source]
        for (sym, mid) in trans_dict.get(via, ())
        for dest in closure[mid]
    )


def extend_final_states(
    automaton: Automaton, closure: EpsilonClosure
) -> FrozenSet[int]:
    """Mark every state final whose closure contains an original final state."""
    return frozenset(
        state
        for state in automaton.states
        if closure[state] & automaton.final_states
    )
