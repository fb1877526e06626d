"""Tests for gol_seed_search.automaton."""

import numpy as np
import pytest

from gol_seed_search.automaton import (
    Grid,
    Termination,
    grid_dimensions,
    num_cells,
    simulate,
)
from gol_seed_search.config import SimulationConfig
from gol_seed_search.state import State

BLINKER = [[1, 1, 1]]
BLOCK = [[1, 1], [1, 1]]


class TestGridDimensions:
    def test_default_scale_gives_fifty_by_fifty(self) -> None:
        assert grid_dimensions(800.0, 800.0) == (50, 50)

    @pytest.mark.parametrize("width,height", [
        (800.0, 800.0), (600.0, 600.0), (400.0, 400.0), (123.0, 123.0), (1000.0, 250.0),
    ])
    def test_cell_count_invariant_to_window_size(self, width, height) -> None:
        assert num_cells(width, height) == 2500

    def test_custom_scale(self) -> None:
        assert grid_dimensions(100.0, 100.0, scale=0.1) == (10, 10)

    def test_rejects_non_positive(self) -> None:
        with pytest.raises(ValueError):
            grid_dimensions(0.0, 100.0)


class TestGridStep:
    def test_state_length_must_match(self) -> None:
        with pytest.raises(ValueError):
            Grid(3, 3, State.zeros(10))

    def test_from_window(self) -> None:
        grid = Grid.from_window(100.0, 100.0, State.zeros(100), scale=0.1)
        assert (grid.columns, grid.rows) == (10, 10)

    def test_all_dead_three_by_three_goes_extinct(self) -> None:
        grid = Grid(3, 3, State.zeros(9))
        grid.step()
        assert grid.population == 0
        assert grid.age == 1
        assert grid.standard_deviation == 0.0

    def test_lone_cell_dies(self) -> None:
        grid = Grid(3, 3, State.from_pattern([[1]], 3, 3, x=1, y=1))
        grid.step()
        assert grid.population == 0

    def test_block_is_still_life(self) -> None:
        state = State.from_pattern(BLOCK, 4, 4, x=1, y=1)
        grid = Grid(4, 4, state)
        grid.run(5)
        assert grid.current_state() == state

    def test_blinker_oscillates(self) -> None:
        state = State.from_pattern(BLINKER, 5, 5, x=1, y=2)
        grid = Grid(5, 5, state)
        grid.step()
        vertical = State.from_pattern([[1], [1], [1]], 5, 5, x=2, y=1)
        assert grid.current_state() == vertical
        grid.step()
        assert grid.current_state() == state

    def test_no_wraparound(self) -> None:
        # A horizontal blinker on the top edge loses its upper arm
        state = State.from_pattern(BLINKER, 5, 5, x=1, y=0)
        grid = Grid(5, 5, state)
        grid.step()
        expected = State.from_pattern([[1], [1]], 5, 5, x=2, y=0)
        assert grid.current_state() == expected

    def test_corner_neighbors_are_counted(self) -> None:
        grid = Grid(3, 3, State.from_pattern(BLOCK, 3, 3))
        counts = grid.count_neighbors()
        assert counts[0, 0] == 3
        assert counts[2, 2] == 1

    def test_standard_deviation_matches_numpy(self) -> None:
        state = State.random(400, np.random.default_rng(3), density=0.4)
        grid = Grid(20, 20, state)
        grid.run(30)
        expected = np.std(grid.population_history, ddof=1)
        assert grid.standard_deviation == pytest.approx(expected)

    def test_cycle_average_sampled(self) -> None:
        state = State.from_pattern(BLOCK, 6, 6, x=2, y=2)
        grid = Grid(6, 6, state, cycle_length=4)
        grid.run(4)
        # Steps 1-3 add the pre-step population of 4, step 4 divides by 4
        assert grid.cycle_average == pytest.approx(3.0)
        assert grid.cycle_sum == 0

    def test_record_history(self) -> None:
        grid = Grid(5, 5, State.from_pattern(BLINKER, 5, 5, x=1, y=2))
        history = grid.run(4, record_history=True)
        assert len(history) == 5
        assert np.array_equal(history[0], history[2])


class TestRunToCompletion:
    def test_extinction_terminates(self) -> None:
        result = simulate(State.zeros(9), 3, 3)
        assert result.termination is Termination.EXTINCT
        assert result.age == 0
        assert result.final_population == 0

    def test_blinker_stagnates_before_max_age(self) -> None:
        config = SimulationConfig(max_age=100, max_repeats=10)
        state = State.from_pattern(BLINKER, 5, 5, x=1, y=2)
        grid = Grid(5, 5, state)
        reason = grid.run_to_completion(config.max_age, config.max_repeats)

        assert reason is Termination.STAGNANT
        assert grid.population_repeats == config.max_repeats
        assert grid.age == config.max_repeats
        populations = grid.population_history
        for t in range(len(populations) - 2):
            assert populations[t] == populations[t + 2]

    def test_max_age_terminates(self) -> None:
        # A glider always has 5 cells, so the repeat limit must exceed the age limit
        glider = [[0, 1, 0], [0, 0, 1], [1, 1, 1]]
        state = State.from_pattern(glider, 20, 20)
        result = simulate(state, 20, 20, SimulationConfig(max_age=12, max_repeats=50))
        assert result.termination is Termination.MAX_AGE
        assert result.age == 12

    def test_simulation_is_deterministic(self) -> None:
        state = State.random(900, np.random.default_rng(11), density=0.35)
        config = SimulationConfig(max_age=200, max_repeats=20)
        first = simulate(state, 30, 30, config)
        second = simulate(state, 30, 30, config)
        assert first == second
