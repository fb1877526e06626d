"""Population-survival fitness for Game of Life seeds."""

import numpy as np
from dataclasses import dataclass, asdict
from typing import Dict, Optional

from .automaton import SimulationResult, simulate
from .config import NEUTRAL_SCORE, SimulationConfig
from .state import State


@dataclass(frozen=True)
class MetricsResult:
    """A finished run together with its score."""
    simulation: SimulationResult
    score: float

    def to_dict(self) -> Dict:
        data = asdict(self.simulation)
        data["termination"] = self.simulation.termination.value
        data["score"] = self.score
        return data


def fitness_score(
    initial_population: int,
    final_population: int,
    age: int,
    standard_deviation: float,
    num_cells: int,
    max_age: int,
) -> float:
    """
    Score a finished run in [0, 1].

    The product of three normalised terms:
    - sigmoid of net growth per cell (growth pushes towards 1)
    - age as a fraction of ``max_age`` (longevity)
    - population standard deviation per cell (dynamic rather than frozen)

    The weighting is a tunable heuristic. A NaN result (e.g. zero cells)
    becomes NEUTRAL_SCORE.
    """
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        cells = np.float64(num_cells)
        growth = (np.float64(final_population) - initial_population) / cells
        longevity = np.float64(age) / np.float64(max_age)
        volatility = np.float64(standard_deviation) / cells
        score = (1.0 / (1.0 + np.exp(-growth))) * longevity * volatility

    if np.isnan(score):
        return NEUTRAL_SCORE
    return float(np.clip(score, 0.0, 1.0))


def score_result(result: SimulationResult, num_cells: int, max_age: int) -> float:
    return fitness_score(
        result.initial_population,
        result.final_population,
        result.age,
        result.standard_deviation,
        num_cells,
        max_age,
    )


def evaluate_state(
    state: State,
    columns: int,
    rows: int,
    config: Optional[SimulationConfig] = None,
) -> MetricsResult:
    """Simulate ``state`` to termination and score it."""
    if config is None:
        config = SimulationConfig()
    result = simulate(state, columns, rows, config)
    score = score_result(result, columns * rows, config.max_age)
    return MetricsResult(simulation=result, score=score)
