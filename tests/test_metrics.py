"""Tests for gol_seed_search.metrics."""

import math

import numpy as np
import pytest

from gol_seed_search.automaton import Termination
from gol_seed_search.config import NEUTRAL_SCORE, SimulationConfig
from gol_seed_search.metrics import evaluate_state, fitness_score
from gol_seed_search.state import State


class TestFitnessScore:
    def test_formula(self) -> None:
        score = fitness_score(
            initial_population=10,
            final_population=30,
            age=50,
            standard_deviation=20.0,
            num_cells=100,
            max_age=100,
        )
        expected = (1.0 / (1.0 + math.exp(-0.2))) * 0.5 * 0.2
        assert score == pytest.approx(expected)

    def test_zero_age_scores_zero(self) -> None:
        assert fitness_score(5, 0, 0, 0.0, 9, 100) == 0.0

    def test_zero_cells_gives_neutral_score(self) -> None:
        assert fitness_score(0, 0, 0, 0.0, 0, 100) == NEUTRAL_SCORE

    def test_clamped_to_one(self) -> None:
        assert fitness_score(0, 100, 1000, 500.0, 100, 10) == 1.0

    def test_never_negative(self) -> None:
        assert fitness_score(100, 0, 10, 1.0, 100, 100) >= 0.0

    @pytest.mark.parametrize("seed", range(5))
    def test_random_inputs_stay_in_range(self, seed) -> None:
        rng = np.random.default_rng(seed)
        for _ in range(50):
            cells = int(rng.integers(1, 500))
            score = fitness_score(
                int(rng.integers(0, cells + 1)),
                int(rng.integers(0, cells + 1)),
                int(rng.integers(0, 300)),
                float(rng.uniform(0, cells)),
                cells,
                int(rng.integers(1, 300)),
            )
            assert 0.0 <= score <= 1.0


class TestEvaluateState:
    def test_dead_seed_scores_without_nan(self) -> None:
        metrics = evaluate_state(State.zeros(9), 3, 3)
        assert metrics.simulation.termination is Termination.EXTINCT
        assert metrics.score == 0.0
        assert not math.isnan(metrics.score)

    def test_random_seed_in_range(self) -> None:
        state = State.random(400, np.random.default_rng(5), density=0.3)
        metrics = evaluate_state(state, 20, 20, SimulationConfig(max_age=100, max_repeats=10))
        assert 0.0 <= metrics.score <= 1.0
        assert metrics.simulation.age <= 100

    def test_to_dict(self) -> None:
        data = evaluate_state(State.zeros(9), 3, 3).to_dict()
        assert data["termination"] == "extinct"
        assert data["score"] == 0.0
        assert data["initial_population"] == 0
