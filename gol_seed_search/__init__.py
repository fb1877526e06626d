"""Game of Life Seed Search - find seeds that grow, last and stay dynamic via epsilon-greedy genetic search."""

from .agent import Agent
from .automaton import Grid, simulate
from .metrics import evaluate_state, fitness_score
from .search import EvolutionError, GeneticAlgorithm
from .state import State
from .state_space import StateSpace

__all__ = [
    "Agent",
    "Grid",
    "simulate",
    "evaluate_state",
    "fitness_score",
    "EvolutionError",
    "GeneticAlgorithm",
    "State",
    "StateSpace",
]
