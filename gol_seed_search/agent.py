"""Epsilon-greedy search agent over a bounded state-space cache."""

import logging
import math
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .automaton import grid_dimensions
from .config import AgentConfig
from .metrics import evaluate_state
from .search import EvolutionError, GeneticAlgorithm
from .state import State
from .state_space import StateSpace

logger = logging.getLogger(__name__)


class Action(Enum):
    EXPLORE = "explore"
    EXPLOIT = "exploit"


@dataclass
class IterationReport:
    """Telemetry for one search iteration."""
    iteration: int
    action: Action
    new_states: int
    evaluated: int
    best_score: float
    epsilon: float
    state_space_size: int
    previous_avg_value: float


class Agent:
    """Owns the state-space cache and the genetic operators.

    Each iteration either explores (one fresh random seed) or exploits (GA
    offspring of the cache); new entries are unscored until ``update``
    simulates them. Epsilon adapts to the trend of the mean cache score.
    """

    def __init__(
        self,
        epsilon: float,
        num_cells: int,
        config: Optional[AgentConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if num_cells < 0:
            raise ValueError(f"num_cells must be >= 0, got {num_cells}")
        self.config = config or AgentConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.num_cells = num_cells
        self.epsilon = self._clamp_epsilon(epsilon)
        self.previous_avg_value = 0.0
        self.state_space = StateSpace()
        self.ga = GeneticAlgorithm(self.config.ga, rng=self.rng)
        self.iteration = 0
        self.last_action: Optional[Action] = None

    @property
    def state_space_size(self) -> int:
        return len(self.state_space)

    def _clamp_epsilon(self, epsilon: float) -> float:
        return min(max(epsilon, self.config.min_epsilon), self.config.max_epsilon)

    def explore(self) -> State:
        """Insert and return a random seed not already in the cache."""
        if len(self.state_space) >= 2 ** self.num_cells:
            raise RuntimeError(
                f"all {2 ** self.num_cells} states of {self.num_cells} cells are cached"
            )
        while True:
            state = State.random(self.num_cells, self.rng, self.config.initial_density)
            if state not in self.state_space:
                break
        self.state_space.add(state)
        return state

    def exploit(self) -> Optional[List[State]]:
        """Insert GA offspring of the cache; None if the GA could not run.

        Offspring already in the cache are reset to unscored so they get
        evaluated again.
        """
        try:
            new_states = self.ga.evolve(dict(self.state_space.items()))
        except EvolutionError as e:
            logger.info("Skipping exploit (%s): %s", e.reason.value, e)
            return None
        for state in new_states:
            self.state_space.add(state)
        return new_states

    def choose_action(self) -> Action:
        """Explore with probability epsilon, and always while the cache is
        below the diversity floor."""
        if len(self.state_space) < self.config.min_state_space_size:
            return Action.EXPLORE
        if self.rng.random() < self.epsilon:
            return Action.EXPLORE
        return Action.EXPLOIT

    def get_new_state(self) -> List[State]:
        """Explore or exploit once and return the states added."""
        self.last_action = self.choose_action()
        if self.last_action is Action.EXPLORE:
            return [self.explore()]
        return self.exploit() or []

    def update(self, sim_width: float, sim_height: float) -> int:
        """Score unscored entries, prune to capacity, adapt epsilon.

        Returns the number of states evaluated.
        """
        sim_config = self.config.simulation
        columns, rows = grid_dimensions(sim_width, sim_height, sim_config.scale)

        pending = self.state_space.unscored()
        for state in pending:
            metrics = evaluate_state(state, columns, rows, sim_config)
            self.state_space.set_score(state, metrics.score)

        if len(self.state_space) > self.config.max_state_space_size:
            self.state_space.prune(self.config.max_state_space_size)

        self.update_epsilon()
        return len(pending)

    def update_epsilon(self):
        avg = self.state_space.mean_score()
        if math.isnan(avg):
            avg = 0.0

        trend = avg - self.previous_avg_value
        if trend > 0:
            self.epsilon *= 1.0 - trend * self.config.decrease_factor
        else:
            self.epsilon += self.config.increase_factor * -trend
        self.epsilon = self._clamp_epsilon(self.epsilon)

        logger.debug("avg=%.5f trend=%+.5f epsilon=%.4f", avg, trend, self.epsilon)
        self.previous_avg_value = avg

    def get_best_state(self) -> State:
        """Highest-scoring cached seed (earliest inserted on ties).

        Explores first if the cache is empty.
        """
        if len(self.state_space) == 0:
            self.explore()
        best = self.state_space.best()
        assert best is not None, "state space empty after explore"
        return best[0]

    def best_score(self) -> float:
        best = self.state_space.best()
        if best is None or best[1] is None:
            return 0.0
        return best[1]

    def step(self, sim_width: float, sim_height: float) -> IterationReport:
        """One driver iteration: new states, evaluation, telemetry."""
        new_states = self.get_new_state()
        evaluated = self.update(sim_width, sim_height)
        self.iteration += 1
        return IterationReport(
            iteration=self.iteration,
            action=self.last_action,
            new_states=len(new_states),
            evaluated=evaluated,
            best_score=self.best_score(),
            epsilon=self.epsilon,
            state_space_size=len(self.state_space),
            previous_avg_value=self.previous_avg_value,
        )

    def run(
        self,
        iterations: int,
        sim_width: float,
        sim_height: float,
        callback: Optional[Callable[[IterationReport], None]] = None,
    ) -> State:
        """Run ``iterations`` driver steps and return the best seed."""
        for _ in range(iterations):
            report = self.step(sim_width, sim_height)
            if callback:
                callback(report)
        return self.get_best_state()
