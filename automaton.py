from collections import defaultdict
from dataclasses import dataclass, field
from typing_extensions import *

from graphviz import Digraph


EPSILON_MARKERS = ("eps", "epsilon", "ε")


class AutomatonError(Exception):
    """Base exception for all automaton errors."""

    pass


class InvalidAutomatonError(AutomatonError, ValueError):
    """Raised when an automaton description is malformed."""

    def __init__(self, message: str, line: int = -1) -> None:
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        if self.line >= 0:
            return f"{super().__str__()} (line {self.line})"
        return super().__str__()


@dataclass(frozen=True)
class Automaton:
    """
    Nondeterministic finite automaton with epsilon transitions.

    States are the integers 0..num_states-1. Symbol transitions refer to
    symbols by their index in `alphabet`:

        symbol_transitions:  Set[Tuple[from_state, symbol_index, to_state]]
        epsilon_transitions: Set[Tuple[from_state, to_state]]
    """

    num_states: int
    alphabet: Tuple[str, ...]
    initial_state: int = 0
    final_states: FrozenSet[int] = field(default_factory=frozenset)
    symbol_transitions: FrozenSet[Tuple[int, int, int]] = field(
        default_factory=frozenset
    )
    epsilon_transitions: FrozenSet[Tuple[int, int]] = field(
        default_factory=frozenset
    )

    def __post_init__(self):
        """Validate counts and every referenced index."""
        if self.num_states <= 0:
            raise InvalidAutomatonError(
                f"Number of states must be positive, got {self.num_states}"
            )
        if len(self.alphabet) <= 0:
            raise InvalidAutomatonError("Alphabet must contain at least one symbol")
        if len(set(self.alphabet)) != len(self.alphabet):
            duplicates = sorted(
                {s for s in self.alphabet if self.alphabet.count(s) > 1}
            )
            raise InvalidAutomatonError(
                f"Duplicate alphabet symbols: {', '.join(duplicates)}"
            )

        self._check_state(self.initial_state, "initial state")
        for state in self.final_states:
            self._check_state(state, "final state")
        for src, sym, tgt in self.symbol_transitions:
            self._check_state(src, "transition source")
            self._check_symbol(sym)
            self._check_state(tgt, "transition target")
        for src, tgt in self.epsilon_transitions:
            self._check_state(src, "epsilon transition source")
            self._check_state(tgt, "epsilon transition target")

    def _check_state(self, state: int, role: str) -> None:
        if not isinstance(state, int) or not 0 <= state < self.num_states:
            raise InvalidAutomatonError(
                f"Invalid {role}: {state!r} (expected 0..{self.num_states - 1})"
            )

    def _check_symbol(self, index: int) -> None:
        if not isinstance(index, int) or not 0 <= index < len(self.alphabet):
            raise InvalidAutomatonError(
                f"Invalid symbol index: {index!r} (expected 0..{len(self.alphabet) - 1})"
            )

    # -------------------------------------------------------------------------
    # Transition helpers
    # -------------------------------------------------------------------------

    @property
    def states(self) -> range:
        return range(self.num_states)

    @property
    def num_symbols(self) -> int:
        return len(self.alphabet)

    def symbol_index(self, symbol: str) -> int:
        """Return the column index of `symbol` in the alphabet."""
        try:
            return self.alphabet.index(symbol)
        except ValueError:
            raise InvalidAutomatonError(f"Unknown symbol: {symbol!r}") from None

    def epsilon_targets(self, state: int) -> FrozenSet[int]:
        return frozenset(
            tgt for (src, tgt) in self.epsilon_transitions if src == state
        )

    def symbol_targets(self, state: int, symbol_index: int) -> FrozenSet[int]:
        return frozenset(
            tgt
            for (src, sym, tgt) in self.symbol_transitions
            if src == state and sym == symbol_index
        )

    def _get_transition_dict(self) -> Dict[Tuple[int, Optional[int]], frozenset]:
        """Transition relation as a dict; epsilon moves use the key symbol None."""
        result = defaultdict(set)
        for src, sym, tgt in self.symbol_transitions:
            result[(src, sym)].add(tgt)
        for src, tgt in self.epsilon_transitions:
            result[(src, None)].add(tgt)
        return {k: frozenset(v) for k, v in result.items()}

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def accepts(self, word: Iterable[str]) -> bool:
        """
        Check if the automaton accepts a word.

        Epsilon moves are followed before the first symbol and after every
        symbol. A symbol outside the alphabet rejects the word.
        """
        trans_dict = self._get_transition_dict()

        def follow_epsilon(states):
            reached = set(states)
            stack = list(states)
            while stack:
                s = stack.pop()
                for next_state in trans_dict.get((s, None), frozenset()):
                    if next_state not in reached:
                        reached.add(next_state)
                        stack.append(next_state)
            return reached

        current = follow_epsilon({self.initial_state})
        for symbol in word:
            if symbol not in self.alphabet:
                return False
            index = self.alphabet.index(symbol)
            step = set()
            for s in current:
                step.update(trans_dict.get((s, index), frozenset()))
            current = follow_epsilon(step)
            if not current:
                return False

        return bool(current & self.final_states)

    # -------------------------------------------------------------------------
    # Construction / loading
    # -------------------------------------------------------------------------

    @staticmethod
    def load_from_file(file_path: str) -> List["Automaton"]:
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()

        return Automaton.from_string(content)

    @staticmethod
    def from_string(content: str) -> List["Automaton"]:
        """Parse one or more automata separated by `---`."""
        automata = []
        line_offset = 0
        for block in content.split("---"):
            if block.strip():
                automata.append(Automaton._parse_block(block, line_offset))
            line_offset += block.count("\n")

        return automata

    @staticmethod
    def _parse_block(block: str, line_offset: int = 0) -> "Automaton":
        num_states = None
        alphabet: List[str] = []
        start_state = 0
        accepting_states = set()
        transitions = []

        for number, line in enumerate(block.split("\n"), start=line_offset + 1):
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            # Parse state count
            elif line.startswith("states:"):
                num_states = _parse_int(line[7:].strip(), number)

            # Parse alphabet
            elif line.startswith("alphabet:"):
                for symbol in line[9:].strip().split():
                    alphabet.append(symbol)

            # Parse start state
            elif line.startswith("start:"):
                start_state = _parse_int(line[6:].strip(), number)

            # Parse accepting states
            elif line.startswith("accept:"):
                for state in line[7:].strip().split():
                    accepting_states.add(_parse_int(state, number))

            # Parse transitions (format: 0 a 1 or 0 -> a -> 1)
            elif "->" in line:
                parts = [p.strip() for p in line.split("->")]
                if len(parts) != 3:
                    raise InvalidAutomatonError(
                        f"Malformed transition: {line!r}", number
                    )
                transitions.append((parts, number))

            elif len(line.split()) == 3:
                transitions.append((line.split(), number))

            else:
                raise InvalidAutomatonError(f"Unrecognized line: {line!r}", number)

        symbol_transitions = set()
        epsilon_transitions = set()
        implicit_alphabet = not alphabet

        for (src, symbol, tgt), number in transitions:
            src = _parse_int(src, number)
            tgt = _parse_int(tgt, number)

            if symbol in EPSILON_MARKERS and symbol not in alphabet:
                epsilon_transitions.add((src, tgt))
                continue

            if symbol not in alphabet:
                if not implicit_alphabet:
                    raise InvalidAutomatonError(
                        f"Symbol {symbol!r} is not in the alphabet", number
                    )
                alphabet.append(symbol)

            symbol_transitions.add((src, alphabet.index(symbol), tgt))

        if num_states is None:
            referenced = {start_state} | accepting_states
            for src, _, tgt in symbol_transitions:
                referenced.update((src, tgt))
            for src, tgt in epsilon_transitions:
                referenced.update((src, tgt))
            num_states = max(referenced) + 1

        return build(
            num_states,
            alphabet,
            start_state,
            accepting_states,
            symbol_transitions,
            epsilon_transitions,
        )

    # -------------------------------------------------------------------------
    # Visualization
    # -------------------------------------------------------------------------

    def to_graphviz(self, filename: str = "automaton", view: bool = True) -> Digraph:
        """Generate a Graphviz visualization for this automaton."""
        labelled = [
            (src, self.alphabet[sym], tgt) for src, sym, tgt in self.symbol_transitions
        ]
        labelled.extend((src, None, tgt) for src, tgt in self.epsilon_transitions)

        dot = render_digraph(
            "NFA+ε",
            self.states,
            self.initial_state,
            self.final_states,
            labelled,
        )
        dot.render(filename, view=view, cleanup=True)
        return dot


def build(
    num_states: int,
    alphabet: Iterable[str],
    initial_state: int,
    final_states: Iterable[int],
    symbol_transitions: Iterable[Tuple[int, int, int]],
    epsilon_transitions: Iterable[Tuple[int, int]],
) -> Automaton:
    """
    Build a validated automaton from plain containers.

    Raises InvalidAutomatonError when a count is non-positive, the alphabet
    repeats a symbol, or any state or symbol index is out of range.
    """
    return Automaton(
        num_states=num_states,
        alphabet=tuple(alphabet),
        initial_state=initial_state,
        final_states=frozenset(final_states),
        symbol_transitions=frozenset(tuple(t) for t in symbol_transitions),
        epsilon_transitions=frozenset(tuple(t) for t in epsilon_transitions),
    )


def _parse_int(text: str, line: int) -> int:
    try:
        return int(text)
    except ValueError:
        raise InvalidAutomatonError(f"Expected a state number, got {text!r}", line) from None


def render_digraph(
    name: str,
    states: Iterable[int],
    start_state: int,
    accepting_states: AbstractSet[int],
    transitions: Iterable[Tuple[int, Optional[str], int]],
) -> Digraph:
    """Build the Digraph shared by source and converted automata."""
    dot = Digraph(
        name=name,
        format="png",
        graph_attr={
            "rankdir": "LR",
            "splines": "true",
            "nodesep": "0.8",
            "ranksep": "1.2",
            "label": name,
            "labelloc": "t",
            "fontsize": "14",
            "fontname": "Arial",
            "bgcolor": "white",
            "pad": "0.5",
            "dpi": "300",
        },
        node_attr={
            "shape": "circle",
            "fontsize": "14",
            "fontname": "Arial",
            "width": "0.6",
            "height": "0.6",
            "fixedsize": "true",
            "style": "filled",
            "fillcolor": "lightblue",
            "color": "black",
            "penwidth": "2",
        },
        edge_attr={
            "fontsize": "12",
            "fontname": "Arial",
            "arrowsize": "0.8",
            "penwidth": "1.5",
            "color": "black",
        },
    )

    # Invisible start arrow
    dot.node("__start__", shape="point", width="0.01", style="invis")

    for state in states:
        node_id = f"q{state}"
        if state in accepting_states:
            dot.node(
                node_id,
                label=str(state),
                shape="doublecircle",
                fillcolor="lightgreen",
                peripheries="2",
            )
        else:
            dot.node(node_id, label=str(state))

    dot.edge("__start__", f"q{start_state}", penwidth="2")

    # Merge parallel edges into one labelled edge
    edges = defaultdict(list)
    for src, sym, tgt in transitions:
        edges[(src, tgt)].append("ε" if sym is None else str(sym))

    for (src, tgt), symbols in sorted(edges.items()):
        label = ", ".join(sorted(symbols))
        if src == tgt:
            dot.edge(f"q{src}", f"q{tgt}", label=label, headport="n", tailport="n")
        else:
            dot.edge(f"q{src}", f"q{tgt}", label=label)

    return dot
