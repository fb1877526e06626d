"""Genetic operators for evolving Game of Life seeds."""

import math
import numpy as np
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

from .config import GAConfig
from .state import State
from .state_space import Score, comparable


class EvolutionFailure(Enum):
    """Why a genetic operator could not run."""
    EMPTY_POPULATION = "empty_population"
    SINGLE_CANDIDATE = "single_candidate"
    DEGENERATE_GRID = "degenerate_grid"
    EMPTY_BATCH = "empty_batch"
    TOO_MANY_WINNERS = "too_many_winners"


class EvolutionError(Exception):
    """Raised when the population cannot support an operator."""

    def __init__(self, reason: EvolutionFailure, message: str = ""):
        self.reason = reason
        super().__init__(message or reason.value)


def make_batches(keys: Sequence[State], num_batches: int) -> List[List[State]]:
    """Split ``keys`` in order into ``num_batches`` near-equal batches.

    The first ``len(keys) % num_batches`` batches get one extra member.
    """
    batch_size, remainder = divmod(len(keys), num_batches)
    batches = []
    start = 0
    for i in range(num_batches):
        end = start + batch_size + (1 if i < remainder else 0)
        batches.append(list(keys[start:end]))
        start = end
    return batches


class GeneticAlgorithm:
    """Tournament selection, 2D block crossover and point mutation over seeds."""

    def __init__(
        self,
        config: Optional[GAConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config or GAConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

    def evolve(self, population: Mapping[State, Score]) -> List[State]:
        """Select, cross over and mutate ``population`` into unscored candidates.

        Raises EvolutionError when the population is too small.
        """
        winners = self.tournament_selection(population)
        children = self.crossover(list(winners))
        return self.mutate(children)

    def number_of_winners(self, population_size: int) -> int:
        return math.ceil(population_size * self.config.winners_percentage)

    def tournament_selection(self, population: Mapping[State, Score]) -> Dict[State, Score]:
        """One winner per batch.

        With probability ``selection_pressure`` a batch's fittest member wins
        (ties go to the first found); otherwise a random member does.
        """
        population_size = len(population)
        if population_size == 0:
            raise EvolutionError(EvolutionFailure.EMPTY_POPULATION)

        number_of_winners = self.number_of_winners(population_size)
        if number_of_winners == 0:
            raise EvolutionError(EvolutionFailure.EMPTY_POPULATION)
        if number_of_winners > population_size:
            raise EvolutionError(
                EvolutionFailure.TOO_MANY_WINNERS,
                f"{number_of_winners} winners from {population_size} states",
            )

        winners: Dict[State, Score] = {}
        for batch in make_batches(list(population), number_of_winners):
            if not batch:
                raise EvolutionError(EvolutionFailure.EMPTY_BATCH)

            if self.rng.random() < self.config.selection_pressure:
                winner = batch[0]
                max_fitness = comparable(population[winner])
                for candidate in batch[1:]:
                    fitness = comparable(population[candidate])
                    if fitness > max_fitness:
                        winner, max_fitness = candidate, fitness
            else:
                winner = batch[int(self.rng.integers(len(batch)))]

            winners[winner] = population[winner]

        return winners

    def crossover(self, winners: Sequence[State]) -> List[State]:
        """Copy square blocks from a random partner into each winner.

        States are treated as a ``side x side`` grid, ``side = floor(sqrt(len))``,
        row-major. Each winner is kept as-is with probability
        ``1 - crossover_rate``.
        """
        num_states = len(winners)
        if num_states == 0:
            raise EvolutionError(EvolutionFailure.EMPTY_POPULATION)
        if num_states == 1:
            raise EvolutionError(EvolutionFailure.SINGLE_CANDIDATE)

        length = min(len(s) for s in winners)
        side = math.isqrt(length)
        if side == 0:
            raise EvolutionError(EvolutionFailure.DEGENERATE_GRID)

        new_states: List[State] = []
        for i, parent in enumerate(winners):
            if self.rng.random() >= self.config.crossover_rate:
                new_states.append(parent)
                continue

            # Uniform over every index but i
            j = int(self.rng.integers(num_states - 1))
            if j >= i:
                j += 1
            partner = winners[j]

            child = parent.bits.copy()
            child_view = child[:side * side].reshape(side, side)
            partner_view = partner.bits[:side * side].reshape(side, side)

            max_section = max(1, math.floor(self.config.max_crossover_section_size * side))
            num_points = max(
                1, math.ceil(self.rng.uniform(0, self.config.max_crossover_points) * len(parent))
            )
            for _ in range(num_points):
                x = int(self.rng.integers(side))
                y = int(self.rng.integers(side))
                limit = min(max_section, side - x, side - y)
                size = int(self.rng.integers(1, limit + 1))
                child_view[y:y + size, x:x + size] = partner_view[y:y + size, x:x + size]

            new_states.append(State(child))

        return new_states

    def mutate(self, states: Sequence[State]) -> List[State]:
        """Flip random bits in each state with probability ``mutation_rate``.

        Indices are drawn independently, so a bit picked twice flips back.
        """
        if len(states) == 0:
            raise EvolutionError(EvolutionFailure.EMPTY_POPULATION)
        if any(len(s) == 0 for s in states):
            raise EvolutionError(EvolutionFailure.DEGENERATE_GRID)

        mutated: List[State] = []
        for state in states:
            if self.rng.random() >= self.config.mutation_rate:
                mutated.append(state)
                continue
            num_points = max(
                1, math.ceil(self.rng.uniform(0, self.config.max_mutation_points) * len(state))
            )
            indices = self.rng.integers(len(state), size=num_points)
            mutated.append(state.flip(indices))
        return mutated
