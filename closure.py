from dataclasses import dataclass
from typing_extensions import *

from automaton import Automaton


@dataclass(frozen=True)
class EpsilonClosure:
    """
    Epsilon-closure of every state of an automaton.

    `sets[s]` holds the states reachable from `s` using zero or more
    epsilon transitions, `s` itself included.
    """

    sets: Tuple[FrozenSet[int], ...]
    passes: int = 0

    def __getitem__(self, state: int) -> FrozenSet[int]:
        return self.sets[state]

    def __len__(self) -> int:
        return len(self.sets)

    def __iter__(self) -> Iterator[FrozenSet[int]]:
        return iter(self.sets)

    def reaches(self, source: int, target: int) -> bool:
        return target in self.sets[source]


def compute_epsilon_closure(automaton: Automaton) -> EpsilonClosure:
    """
    Compute the epsilon-closure of each state by fixed-point iteration.

    Every state starts with itself. Each pass extends every closure with the
    epsilon successors of its members; the loop stops after a pass in which
    no closure grew. The result does not depend on the iteration order.
    """
    successors: Dict[int, Set[int]] = {s: set() for s in automaton.states}
    for src, tgt in automaton.epsilon_transitions:
        successors[src].add(tgt)

    closure = [{s} for s in automaton.states]
    passes = 0

    changed = True
    while changed:
        changed = False
        passes += 1

        for i in automaton.states:
            # Snapshot: states added during this scan are picked up next pass
            for j in list(closure[i]):
                for k in successors[j]:
                    if k not in closure[i]:
                        closure[i].add(k)
                        changed = True

    return EpsilonClosure(sets=tuple(frozenset(c) for c in closure), passes=passes)
