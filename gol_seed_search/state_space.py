"""Bounded cache of explored seeds and their fitness scores."""

import heapq
import logging
import math
from typing import Dict, Iterator, List, Optional, Tuple

from .state import State

logger = logging.getLogger(__name__)

# None marks an entry that has not been evaluated yet
Score = Optional[float]


def comparable(score: Score) -> float:
    """Score used for ordering: unscored and NaN count as 0.0."""
    if score is None or math.isnan(score):
        return 0.0
    return score


class StateSpace:
    """Mapping of State -> score, iterated in insertion order.

    Tie-breaks follow insertion order: ``best()`` returns the earliest
    inserted of the highest-scoring entries, ``worst()`` the earliest
    inserted of the lowest-scoring ones. Overwriting an existing key keeps
    its original position.
    """

    def __init__(self):
        self._scores: Dict[State, Score] = {}

    def add(self, state: State):
        """Insert ``state`` unscored, resetting any previous score."""
        self._scores[state] = None

    def set_score(self, state: State, score: float):
        if state not in self._scores:
            raise KeyError(state)
        self._scores[state] = score

    def get(self, state: State) -> Score:
        return self._scores.get(state)

    def remove(self, state: State):
        del self._scores[state]

    def unscored(self) -> List[State]:
        return [s for s, score in self._scores.items() if score is None]

    def items(self) -> List[Tuple[State, Score]]:
        return list(self._scores.items())

    def states(self) -> List[State]:
        return list(self._scores)

    def best(self) -> Optional[Tuple[State, Score]]:
        """Highest-scoring entry, or None when empty."""
        best = None
        best_value = -math.inf
        for state, score in self._scores.items():
            value = comparable(score)
            if value > best_value:
                best, best_value = (state, score), value
        return best

    def worst(self) -> Optional[Tuple[State, Score]]:
        """Lowest-scoring entry, or None when empty."""
        worst = None
        worst_value = math.inf
        for state, score in self._scores.items():
            value = comparable(score)
            if value < worst_value:
                worst, worst_value = (state, score), value
        return worst

    def top(self, n: int = 10) -> List[Tuple[State, Score]]:
        """The ``n`` best entries, best first."""
        return heapq.nlargest(n, self._scores.items(), key=lambda item: comparable(item[1]))

    def prune(self, max_size: int) -> List[Tuple[State, Score]]:
        """Drop the lowest-scoring entries until at most ``max_size`` remain.

        Removes the same entries as calling ``worst()`` repeatedly (nsmallest
        is stable, so ties still go to the earliest inserted).
        """
        excess = len(self._scores) - max_size
        if excess <= 0:
            return []
        removed = heapq.nsmallest(
            excess, self._scores.items(), key=lambda item: comparable(item[1])
        )
        for state, _ in removed:
            del self._scores[state]
        logger.debug("Pruned %d states, %d remain", len(removed), len(self._scores))
        return removed

    def mean_score(self) -> float:
        """Mean of evaluated scores; NaN when there are none."""
        values = [
            score for score in self._scores.values()
            if score is not None and not math.isnan(score)
        ]
        if not values:
            return math.nan
        return math.fsum(values) / len(values)

    def __contains__(self, state):
        return state in self._scores

    def __len__(self):
        return len(self._scores)

    def __iter__(self) -> Iterator[State]:
        return iter(self._scores)
