import numpy as np
import pytest

from gol_seed_search.config import AgentConfig, GAConfig, SimulationConfig


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def small_agent_config() -> AgentConfig:
    """Short runs and a small cache so agent tests stay fast."""
    return AgentConfig(
        max_state_space_size=20,
        min_state_space_size=4,
        simulation=SimulationConfig(scale=0.1, max_age=60, max_repeats=8),
        ga=GAConfig(),
    )
