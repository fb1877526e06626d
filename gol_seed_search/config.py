"""Search constants and the config dataclasses that group them."""

from dataclasses import dataclass, field

# Grid
SCALE = 0.02
WINDOW_WIDTH_MAX = 800.0
WINDOW_HEIGHT_MAX = 800.0

# Simulation limits
MAX_POPULATION_REPEATS = 50
MAX_POPULATION_AGE = 3000
CYCLE_LENGTH = 10

# Agent
INITIAL_PROBABILITY = 0.5
MAX_STATE_SPACE_SIZE = 1000
MIN_STATE_SPACE_SIZE = 10

# Exploration / exploitation
EPSILON = 0.31
MAX_EPSILON = 0.7
MIN_EPSILON = 0.1
INCREASE_FACTOR = 0.07
DECREASE_FACTOR = 0.025

# Genetic operators
TOURNAMENT_WINNERS_PERCENTAGE = 0.6
SELECTION_PRESSURE = 0.8
MUTATION_RATE = 0.1
CROSSOVER_RATE = 0.5
MAX_CROSSOVER_POINTS = 0.01
MAX_CROSSOVER_SECTION_SIZE = 0.25
MAX_MUTATION_POINTS = 0.01

# Substituted for a score that came out as NaN
NEUTRAL_SCORE = 0.5


def _check_probability(name: str, value: float):
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")


@dataclass(frozen=True)
class SimulationConfig:
    """Limits for one Game of Life run."""
    scale: float = SCALE
    max_age: int = MAX_POPULATION_AGE
    max_repeats: int = MAX_POPULATION_REPEATS
    cycle_length: int = CYCLE_LENGTH

    def __post_init__(self):
        if not 0.0 < self.scale <= 1.0:
            raise ValueError(f"scale must be in (0, 1], got {self.scale}")
        if self.max_age < 1:
            raise ValueError("max_age must be >= 1")
        if self.max_repeats < 1:
            raise ValueError("max_repeats must be >= 1")
        if self.cycle_length < 1:
            raise ValueError("cycle_length must be >= 1")


@dataclass(frozen=True)
class GAConfig:
    """Rates and bounds for the genetic operators.

    The ``max_*`` fields are fractions of the state length (points) or of
    the grid side (section size).
    """
    winners_percentage: float = TOURNAMENT_WINNERS_PERCENTAGE
    selection_pressure: float = SELECTION_PRESSURE
    mutation_rate: float = MUTATION_RATE
    crossover_rate: float = CROSSOVER_RATE
    max_crossover_points: float = MAX_CROSSOVER_POINTS
    max_crossover_section_size: float = MAX_CROSSOVER_SECTION_SIZE
    max_mutation_points: float = MAX_MUTATION_POINTS

    def __post_init__(self):
        if self.winners_percentage <= 0.0:
            raise ValueError("winners_percentage must be > 0")
        _check_probability("selection_pressure", self.selection_pressure)
        _check_probability("mutation_rate", self.mutation_rate)
        _check_probability("crossover_rate", self.crossover_rate)
        _check_probability("max_crossover_points", self.max_crossover_points)
        _check_probability("max_crossover_section_size", self.max_crossover_section_size)
        _check_probability("max_mutation_points", self.max_mutation_points)


@dataclass(frozen=True)
class AgentConfig:
    """Everything the state-space agent needs besides its starting epsilon."""
    min_epsilon: float = MIN_EPSILON
    max_epsilon: float = MAX_EPSILON
    increase_factor: float = INCREASE_FACTOR
    decrease_factor: float = DECREASE_FACTOR
    max_state_space_size: int = MAX_STATE_SPACE_SIZE
    min_state_space_size: int = MIN_STATE_SPACE_SIZE
    initial_density: float = INITIAL_PROBABILITY
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    ga: GAConfig = field(default_factory=GAConfig)

    def __post_init__(self):
        _check_probability("min_epsilon", self.min_epsilon)
        _check_probability("max_epsilon", self.max_epsilon)
        if self.min_epsilon > self.max_epsilon:
            raise ValueError("min_epsilon must be <= max_epsilon")
        if self.increase_factor < 0.0 or self.decrease_factor < 0.0:
            raise ValueError("epsilon factors must be >= 0")
        if self.max_state_space_size < 1:
            raise ValueError("max_state_space_size must be >= 1")
        if self.min_state_space_size < 0:
            raise ValueError("min_state_space_size must be >= 0")
        _check_probability("initial_density", self.initial_density)
