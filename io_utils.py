import os
import re
from typing_extensions import *

from automaton import Automaton, InvalidAutomatonError, build
from closure import EpsilonClosure
from converter import ConvertedAutomaton


def load_from_file(filename: str) -> Dict[str, Automaton]:
    """
    Load automata from a file, keyed by name.

    A file may hold named sections (`NAME:` on a line of its own) or a
    single unnamed definition, which is keyed by the file's base name.
    Sections that fail to parse are reported and skipped.
    """
    automata: Dict[str, Automaton] = {}

    with open(filename, "r", encoding="utf-8") as f:
        content = f.read()

    # Format keys with an empty value are not section names
    name_pattern = re.compile(
        r"^(?!(?:states|alphabet|start|accept)\s*:)([A-Za-z]\w*):\s*$", re.MULTILINE
    )

    if name_pattern.search(content):
        # Named sections: NAME:\n...definition...
        sections = name_pattern.split(content)

        for i in range(1, len(sections), 2):
            if i + 1 >= len(sections):
                continue

            name = sections[i].strip()
            definition = sections[i + 1].strip()

            if not definition:
                continue

            try:
                loaded = Automaton.from_string(definition)
                if loaded:
                    automata[name] = loaded[0]
            except InvalidAutomatonError as e:
                print(f"Warning: Failed to load automaton '{name}': {e}")
    else:
        # Single unnamed item
        base_name = os.path.basename(filename).rsplit(".", 1)[0]

        try:
            loaded = Automaton.from_string(content)
            for idx, aut in enumerate(loaded):
                key = f"{base_name}{idx if idx > 0 else ''}"
                automata[key] = aut
        except InvalidAutomatonError as e:
            print(f"Warning: Failed to load automaton: {e}")

    return automata


class _TokenReader:
    """Whitespace-separated tokens read from a line-based input function."""

    def __init__(self, input_fn: Callable[[str], str]):
        self._input_fn = input_fn
        self._tokens: List[str] = []

    def next(self, prompt: str = "") -> str:
        while not self._tokens:
            self._tokens = self._input_fn(prompt).split()
            prompt = ""
        return self._tokens.pop(0)

    def next_char(self, prompt: str = "") -> str:
        """Next non-blank character; the rest of its token stays buffered."""
        token = self.next(prompt)
        if len(token) > 1:
            self._tokens.insert(0, token[1:])
        return token[0]

    def next_int(self, prompt: str = "") -> int:
        token = self.next(prompt)
        try:
            return int(token)
        except ValueError:
            raise InvalidAutomatonError(f"Expected a number, got {token!r}") from None


def read_automaton_interactive(
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> Automaton:
    """
    Ask for an automaton one value at a time.

    Transition lists end with -1. Symbol transitions on a symbol outside
    the alphabet are skipped. Raises InvalidAutomatonError on bad input and
    EOFError when the input runs out.
    """
    reader = _TokenReader(input_fn)

    num_states = reader.next_int("Number of states: ")
    num_symbols = reader.next_int("Number of symbols: ")
    if num_symbols <= 0:
        raise InvalidAutomatonError(
            f"Number of symbols must be positive, got {num_symbols}"
        )

    alphabet = [reader.next_char("Alphabet symbols: ")]
    for _ in range(num_symbols - 1):
        alphabet.append(reader.next_char())

    initial_state = reader.next_int("Initial state: ")

    final_count = reader.next_int("Number of final states: ")
    final_states = set()
    if final_count > 0:
        final_states.add(reader.next_int("Final states: "))
        for _ in range(final_count - 1):
            final_states.add(reader.next_int())

    output_fn("Symbol transitions (-1 to stop):")
    symbol_transitions = set()
    while True:
        src = reader.next_int()
        if src == -1:
            break
        symbol = reader.next_char()
        tgt = reader.next_int()
        if symbol in alphabet:
            symbol_transitions.add((src, alphabet.index(symbol), tgt))

    output_fn("Epsilon transitions (-1 to stop):")
    epsilon_transitions = set()
    while True:
        src = reader.next_int()
        if src == -1:
            break
        epsilon_transitions.add((src, reader.next_int()))

    return build(
        num_states,
        alphabet,
        initial_state,
        final_states,
        symbol_transitions,
        epsilon_transitions,
    )


def format_result(converted: ConvertedAutomaton) -> str:
    """Render the epsilon-free automaton: start, sorted finals, transitions."""
    lines = [
        "===== ε-free NFA =====",
        f"Start state: {converted.initial_state}",
        "Final states: " + " ".join(str(s) for s in converted.sorted_final_states()),
        "Transitions:",
    ]
    for src, symbol, tgt in converted.transitions:
        lines.append(f"{src} --{symbol}--> {tgt}")
    return "\n".join(lines)


def format_closure(closure: EpsilonClosure) -> str:
    lines = []
    for state, reachable in enumerate(closure):
        members = ", ".join(str(s) for s in sorted(reachable))
        lines.append(f"ε-closure({state}) = {{{members}}}")
    return "\n".join(lines)
