"""Bounded 2D Game of Life engine used to score seed states."""

import math
import numpy as np
from dataclasses import dataclass
from enum import Enum
from scipy import ndimage
from typing import List, Optional, Tuple

from .config import CYCLE_LENGTH, SCALE, SimulationConfig
from .state import State

# Moore neighbourhood, centre excluded
NEIGHBOR_KERNEL = np.array(
    [[1, 1, 1],
     [1, 0, 1],
     [1, 1, 1]],
    dtype=np.uint8,
)


def grid_dimensions(width: float, height: float, scale: float = SCALE) -> Tuple[int, int]:
    """Columns and rows for a window, with cells sized ``scale`` of each side."""
    if width <= 0 or height <= 0:
        raise ValueError(f"window dimensions must be positive, got {width}x{height}")
    cell_width = scale * width
    cell_height = scale * height
    # Tolerance keeps 1/scale from flooring to one less on float error
    columns = math.floor(width / cell_width + 1e-9)
    rows = math.floor(height / cell_height + 1e-9)
    return columns, rows


def num_cells(width: float, height: float, scale: float = SCALE) -> int:
    columns, rows = grid_dimensions(width, height, scale)
    return columns * rows


class Termination(Enum):
    EXTINCT = "extinct"
    MAX_AGE = "max_age"
    STAGNANT = "stagnant"


@dataclass(frozen=True)
class SimulationResult:
    """Statistics of one finished run."""
    initial_population: int
    final_population: int
    age: int
    standard_deviation: float
    cycle_average: float
    termination: Termination


class Grid:
    """Game of Life (B3/S23) on a fixed grid without wraparound.

    Cells beyond the edge count as dead. Population statistics are updated
    incrementally after every step.
    """

    def __init__(self, columns: int, rows: int, state: State, cycle_length: int = CYCLE_LENGTH):
        if columns * rows != len(state):
            raise ValueError(
                f"state of length {len(state)} does not fit a {columns}x{rows} grid"
            )
        self.columns = columns
        self.rows = rows
        self.num_cells = columns * rows
        self.state = state
        self.grid = state.to_grid(columns, rows)
        self.cycle_length = cycle_length

        self.population = state.population
        self.initial_population = self.population
        self.final_population = self.population
        self.age = 0

        # Welford accumulators over post-step populations
        self.population_mean = 0.0
        self.sum_sq_diff = 0.0
        self.standard_deviation = 0.0

        self.cycle_sum = 0
        self.cycle_average = 0.0
        self.population_repeats = 0

        self.population_history: List[int] = []
        self._history: List[np.ndarray] = []

    @classmethod
    def from_window(
        cls,
        width: float,
        height: float,
        state: State,
        scale: float = SCALE,
        cycle_length: int = CYCLE_LENGTH,
    ) -> "Grid":
        columns, rows = grid_dimensions(width, height, scale)
        return cls(columns, rows, state, cycle_length=cycle_length)

    def count_neighbors(self) -> np.ndarray:
        """Live neighbour count for each cell."""
        return ndimage.convolve(
            self.grid, NEIGHBOR_KERNEL, mode="constant", cval=0
        )

    def step(self, record_history: bool = False):
        """Advance one generation."""
        if record_history:
            self._history.append(self.grid.copy())

        self.age += 1

        if self.age % self.cycle_length == 0:
            self.cycle_average = self.cycle_sum / self.cycle_length
            self.cycle_sum = 0
        else:
            self.cycle_sum += self.population

        # The convolution reads the previous generation only
        neighbors = self.count_neighbors()
        alive = self.grid == 1
        born = ~alive & (neighbors == 3)
        survive = alive & ((neighbors == 2) | (neighbors == 3))
        self.grid = (born | survive).astype(np.uint8)

        self.population = int(np.count_nonzero(self.grid))
        self.final_population = self.population
        self.population_history.append(self.population)

        delta = self.population - self.population_mean
        self.population_mean += delta / self.age
        delta2 = self.population - self.population_mean
        self.sum_sq_diff += delta * delta2

        if self.age > 1:
            self.standard_deviation = math.sqrt(self.sum_sq_diff / (self.age - 1))
        else:
            self.standard_deviation = 0.0

    def run(self, steps: int, record_history: bool = False) -> List[np.ndarray]:
        """Run a fixed number of steps, ignoring termination."""
        for _ in range(steps):
            self.step(record_history=record_history)
        if record_history:
            self._history.append(self.grid.copy())
        return self._history

    def run_to_completion(
        self,
        max_age: int,
        max_repeats: int,
        record_history: bool = False,
    ) -> Termination:
        """Step until extinction, ``max_age`` steps, or ``max_repeats``
        consecutive steps without a population change."""
        last_population = self.population
        self.population_repeats = 0
        while True:
            if self.population == 0:
                reason = Termination.EXTINCT
                break
            if self.population_repeats >= max_repeats:
                reason = Termination.STAGNANT
                break
            if self.age >= max_age:
                reason = Termination.MAX_AGE
                break

            self.step(record_history=record_history)
            if self.population == last_population:
                self.population_repeats += 1
            else:
                self.population_repeats = 0
            last_population = self.population

        if record_history:
            self._history.append(self.grid.copy())
        return reason

    def get_history(self) -> List[np.ndarray]:
        return self._history

    def current_state(self) -> State:
        return State(self.grid)

    def result(self, termination: Termination) -> SimulationResult:
        return SimulationResult(
            initial_population=self.initial_population,
            final_population=self.final_population,
            age=self.age,
            standard_deviation=self.standard_deviation,
            cycle_average=self.cycle_average,
            termination=termination,
        )


def simulate(
    state: State,
    columns: int,
    rows: int,
    config: Optional[SimulationConfig] = None,
) -> SimulationResult:
    """Run ``state`` to termination and collect its statistics."""
    if config is None:
        config = SimulationConfig()
    grid = Grid(columns, rows, state, cycle_length=config.cycle_length)
    termination = grid.run_to_completion(config.max_age, config.max_repeats)
    return grid.result(termination)
