#!/usr/bin/env python3
"""CLI for the Game of Life seed search."""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from .agent import Agent, IterationReport
from .automaton import grid_dimensions
from .config import (
    AgentConfig,
    EPSILON,
    MAX_POPULATION_AGE,
    MAX_POPULATION_REPEATS,
    MAX_STATE_SPACE_SIZE,
    SCALE,
    SimulationConfig,
    WINDOW_HEIGHT_MAX,
    WINDOW_WIDTH_MAX,
)
from .metrics import evaluate_state
from .state import State
from .visualize import visualize_state


def _simulation_config(args) -> SimulationConfig:
    return SimulationConfig(
        scale=args.scale,
        max_age=args.max_age,
        max_repeats=args.max_repeats,
    )


def _load_state(args, columns: int, rows: int) -> State:
    """Seed from a plaintext pattern file, or a random one."""
    if args.pattern is None:
        return State.random(columns * rows, np.random.default_rng(args.seed))
    try:
        text = Path(args.pattern).read_text()
        return State.from_plaintext(text, columns, rows)
    except (OSError, ValueError) as e:
        print(f"Error loading pattern '{args.pattern}': {e}")
        sys.exit(1)


def cmd_search(args):
    """Run the explore/exploit search."""
    sim_config = _simulation_config(args)
    columns, rows = grid_dimensions(args.width, args.height, sim_config.scale)

    print("Starting seed search...")
    print(f"  Grid: {columns}x{rows}")
    print(f"  Iterations: {args.iterations}")
    print(f"  Epsilon: {args.epsilon}")
    print(f"  Max state space: {args.max_states}")
    print()

    config = AgentConfig(max_state_space_size=args.max_states, simulation=sim_config)
    agent = Agent(
        args.epsilon,
        columns * rows,
        config=config,
        rng=np.random.default_rng(args.seed),
    )

    def on_iteration(report: IterationReport):
        if report.iteration % args.report_every == 0:
            print(
                f"Iter {report.iteration:4d}: {report.action.value:7s} "
                f"+{report.new_states:<4d} Best={report.best_score:.5f} "
                f"Avg={report.previous_avg_value:.5f} "
                f"eps={report.epsilon:.3f} States={report.state_space_size}"
            )

    best = agent.run(args.iterations, args.width, args.height, callback=on_iteration)

    print(f"\nBest score: {agent.best_score():.5f}")
    print(f"Best seed population: {best.population}/{len(best)}")
    print("\nTop seeds:")
    for i, (state, score) in enumerate(agent.state_space.top(5), 1):
        print(f"  {i}. population {state.population:5d}  Score: {score or 0.0:.5f}")

    if args.visualize:
        print("\nGenerating visualization...")
        gif_path, _ = visualize_state(
            best, columns, rows, output_dir=args.output, name="best", config=sim_config
        )
        print(f"Saved animation to: {gif_path}")


def cmd_evaluate(args):
    """Simulate one seed and show its statistics."""
    sim_config = _simulation_config(args)
    columns, rows = grid_dimensions(args.width, args.height, sim_config.scale)
    state = _load_state(args, columns, rows)

    metrics = evaluate_state(state, columns, rows, sim_config)
    result = metrics.simulation

    print(f"Evaluating seed on a {columns}x{rows} grid")
    print()
    print("Simulation:")
    print(f"  Initial population:  {result.initial_population}")
    print(f"  Final population:    {result.final_population}")
    print(f"  Age:                 {result.age}")
    print(f"  Std deviation:       {result.standard_deviation:.4f}")
    print(f"  Cycle average:       {result.cycle_average:.4f}")
    print(f"  Termination:         {result.termination.value}")
    print()
    print(f"Score: {metrics.score:.6f}")


def cmd_visualize(args):
    """Save an animation of one seed's run."""
    sim_config = _simulation_config(args)
    columns, rows = grid_dimensions(args.width, args.height, sim_config.scale)
    state = _load_state(args, columns, rows)

    gif_path, snapshot_paths = visualize_state(
        state,
        columns,
        rows,
        output_dir=args.output,
        name=Path(args.pattern).stem if args.pattern else "random",
        config=sim_config,
        cell_size=args.cell_size,
    )

    print("Saved:")
    print(f"  Animation: {gif_path}")
    for path in snapshot_paths:
        print(f"  Snapshot: {path}")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _add_grid_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--width", type=float, default=WINDOW_WIDTH_MAX, help="Window width")
    parser.add_argument("--height", type=float, default=WINDOW_HEIGHT_MAX, help="Window height")
    parser.add_argument("--scale", type=float, default=SCALE, help="Cell size as a fraction of the window")
    parser.add_argument("--max-age", type=int, default=MAX_POPULATION_AGE, help="Maximum simulation steps")
    parser.add_argument("--max-repeats", type=int, default=MAX_POPULATION_REPEATS,
                        help="Stop after this many steps without a population change")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Game of Life seed search - find seeds whose populations grow, last and stay dynamic"
    )
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    search_parser = subparsers.add_parser("search", help="Run the explore/exploit seed search")
    search_parser.add_argument("-n", "--iterations", type=int, default=100, help="Number of iterations")
    search_parser.add_argument("-e", "--epsilon", type=float, default=EPSILON, help="Initial exploration rate")
    search_parser.add_argument("--max-states", type=int, default=MAX_STATE_SPACE_SIZE, help="State space capacity")
    search_parser.add_argument("--report-every", type=_positive_int, default=10, help="Print progress every N iterations")
    search_parser.add_argument("-o", "--output", type=str, default="output", help="Output directory")
    search_parser.add_argument("-v", "--visualize", action="store_true", help="Visualize best seed")
    _add_grid_arguments(search_parser)
    search_parser.set_defaults(func=cmd_search)

    eval_parser = subparsers.add_parser("evaluate", help="Simulate and score one seed")
    eval_parser.add_argument("pattern", type=str, nargs="?", default=None,
                             help="Plaintext pattern file (random seed if omitted)")
    _add_grid_arguments(eval_parser)
    eval_parser.set_defaults(func=cmd_evaluate)

    viz_parser = subparsers.add_parser("visualize", help="Animate one seed's run")
    viz_parser.add_argument("pattern", type=str, nargs="?", default=None,
                            help="Plaintext pattern file (random seed if omitted)")
    viz_parser.add_argument("--cell-size", type=int, default=8, help="Cell size in pixels")
    viz_parser.add_argument("-o", "--output", type=str, default="output", help="Output directory")
    _add_grid_arguments(viz_parser)
    viz_parser.set_defaults(func=cmd_visualize)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
