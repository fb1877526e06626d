"""Tests for gol_seed_search.state_space."""

import math

import numpy as np
import pytest

from gol_seed_search.state import State
from gol_seed_search.state_space import StateSpace, comparable


def _states(n: int, length: int = 16) -> list:
    length = max(length, n)
    return [State.zeros(length).flip([i]) for i in range(n)]


class TestStateSpaceBasics:
    def test_add_is_unscored(self) -> None:
        space = StateSpace()
        state = State.zeros(4)
        space.add(state)
        assert state in space
        assert space.get(state) is None
        assert space.unscored() == [state]

    def test_re_adding_resets_score(self) -> None:
        space = StateSpace()
        state = State.zeros(4)
        space.add(state)
        space.set_score(state, 0.7)
        space.add(state)
        assert space.get(state) is None
        assert len(space) == 1

    def test_set_score_requires_existing_key(self) -> None:
        with pytest.raises(KeyError):
            StateSpace().set_score(State.zeros(4), 0.5)

    def test_comparable_treats_unscored_and_nan_as_zero(self) -> None:
        assert comparable(None) == 0.0
        assert comparable(math.nan) == 0.0
        assert comparable(0.4) == 0.4


class TestBestWorst:
    def test_empty(self) -> None:
        space = StateSpace()
        assert space.best() is None
        assert space.worst() is None

    def test_ties_go_to_earliest_inserted(self) -> None:
        space = StateSpace()
        a, b, c = _states(3)
        for state, score in ((a, 0.5), (b, 0.5), (c, 0.1)):
            space.add(state)
            space.set_score(state, score)
        assert space.best()[0] == a
        space.set_score(c, 0.5)
        assert space.worst()[0] == a

    def test_top(self) -> None:
        space = StateSpace()
        states = _states(5)
        for i, state in enumerate(states):
            space.add(state)
            space.set_score(state, i / 10)
        assert [s for s, _ in space.top(2)] == [states[4], states[3]]


class TestPrune:
    def test_no_op_under_capacity(self) -> None:
        space = StateSpace()
        space.add(State.zeros(4))
        assert space.prune(5) == []
        assert len(space) == 1

    def test_removes_lowest_scores(self) -> None:
        rng = np.random.default_rng(0)
        space = StateSpace()
        for state in _states(30):
            space.add(state)
            space.set_score(state, float(rng.random()))

        removed = space.prune(20)

        assert len(space) == 20
        assert len(removed) == 10
        min_kept = min(space.get(s) for s in space)
        max_removed = max(score for _, score in removed)
        assert min_kept >= max_removed

    def test_matches_repeated_worst(self) -> None:
        scores = [0.3, 0.1, 0.1, 0.5, 0.1, 0.2]
        states = _states(len(scores))

        def build() -> StateSpace:
            space = StateSpace()
            for state, score in zip(states, scores):
                space.add(state)
                space.set_score(state, score)
            return space

        expected = build()
        expected_removed = []
        while len(expected) > 3:
            state, _ = expected.worst()
            expected.remove(state)
            expected_removed.append(state)

        space = build()
        removed = [s for s, _ in space.prune(3)]
        assert removed == expected_removed
        assert space.states() == expected.states()


class TestMeanScore:
    def test_empty_is_nan(self) -> None:
        assert math.isnan(StateSpace().mean_score())

    def test_ignores_unscored_and_nan(self) -> None:
        space = StateSpace()
        a, b, c, d = _states(4)
        for state in (a, b, c, d):
            space.add(state)
        space.set_score(a, 0.2)
        space.set_score(b, 0.4)
        space.set_score(c, math.nan)
        assert space.mean_score() == pytest.approx(0.3)
