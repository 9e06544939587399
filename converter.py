from dataclasses import dataclass, field
from typing_extensions import *

from graphviz import Digraph

from automaton import Automaton, build, render_digraph
from closure import EpsilonClosure, compute_epsilon_closure
from eliminator import eliminate_epsilon_transitions, extend_final_states


class TransitionView:
    """
    Restartable view over (from_state, symbol, to_state) triples.

    Iteration is ordered by from-state, then alphabet index, then to-state.
    Every call to iter() starts from the beginning.
    """

    def __init__(
        self, alphabet: Tuple[str, ...], triples: FrozenSet[Tuple[int, int, int]]
    ):
        self._alphabet = alphabet
        self._triples = triples

    def __iter__(self) -> Iterator[Tuple[int, str, int]]:
        for src, sym, tgt in sorted(self._triples):
            yield (src, self._alphabet[sym], tgt)

    def __len__(self) -> int:
        return len(self._triples)

    def __contains__(self, item) -> bool:
        try:
            src, symbol, tgt = item
        except (TypeError, ValueError):
            return False
        if symbol not in self._alphabet:
            return False
        return (src, self._alphabet.index(symbol), tgt) in self._triples

    def __repr__(self) -> str:
        return f"TransitionView({list(self)!r})"


@dataclass(frozen=True)
class ConvertedAutomaton:
    """Epsilon-free automaton produced by `convert`."""

    num_states: int
    alphabet: Tuple[str, ...]
    initial_state: int
    final_states: FrozenSet[int]
    symbol_transitions: FrozenSet[Tuple[int, int, int]]
    closure: Optional[EpsilonClosure] = field(default=None, compare=False)

    @property
    def transitions(self) -> TransitionView:
        return TransitionView(self.alphabet, self.symbol_transitions)

    def sorted_final_states(self) -> List[int]:
        return sorted(self.final_states)

    def to_automaton(self) -> Automaton:
        """Return the result as an Automaton with no epsilon transitions."""
        return build(
            self.num_states,
            self.alphabet,
            self.initial_state,
            self.final_states,
            self.symbol_transitions,
            (),
        )

    def accepts(self, word: Iterable[str]) -> bool:
        return self.to_automaton().accepts(word)

    def to_graphviz(self, filename: str = "automaton", view: bool = True) -> Digraph:
        """Generate a Graphviz visualization of the epsilon-free automaton."""
        dot = render_digraph(
            "NFA",
            range(self.num_states),
            self.initial_state,
            self.final_states,
            self.transitions,
        )
        dot.render(filename, view=view, cleanup=True)
        return dot


def project(
    automaton: Automaton,
    transitions: Iterable[Tuple[int, int, int]],
    final_states: Iterable[int],
    closure: Optional[EpsilonClosure] = None,
) -> ConvertedAutomaton:
    """Assemble the converted automaton; states, alphabet and start are kept."""
    return ConvertedAutomaton(
        num_states=automaton.num_states,
        alphabet=automaton.alphabet,
        initial_state=automaton.initial_state,
        final_states=frozenset(final_states),
        symbol_transitions=frozenset(transitions),
        closure=closure,
    )


def convert(automaton: Automaton) -> ConvertedAutomaton:
    """Remove all epsilon transitions from `automaton`, keeping its language."""
    closure = compute_epsilon_closure(automaton)
    transitions = eliminate_epsilon_transitions(automaton, closure)
    final_states = extend_final_states(automaton, closure)
    return project(automaton, transitions, final_states, closure)
