"""Headless runner for fire propagation simulations.

Loads a ``.cfg`` file (or uses the defaults), optionally places random walls,
ignites a cell and runs the simulation back to back until the fire can't
spread any further, writing run logs when enabled.

Example:
    $ python -m firegrid.main --config sim.cfg --walls --ignite 10 10
"""

import argparse
from typing import List, Optional

from firegrid.exceptions import FireGridError
from firegrid.fire_simulator.fire import FireSim
from firegrid.base_classes.scheduler import ManualScheduler
from firegrid.utilities.data_classes import SimParams, load_sim_params
from firegrid.utilities.logger import Logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a fire propagation simulation to saturation")
    parser.add_argument("--config", default=None, help="Path to a .cfg file")
    parser.add_argument("--walls", action="store_true", help="Place random walls before starting")
    parser.add_argument("--ignite", nargs=2, type=int, metavar=("ROW", "COL"), default=None,
                        help="Cell to ignite; a random cell is used when omitted")
    parser.add_argument("--runs", type=int, default=1, help="Number of runs")
    return parser


def run_sim(sim: FireSim, walls: bool, ignite: Optional[List[int]]) -> int:
    """Set up and run one simulation. Returns the number of ticks run."""
    sim.reset_fire()
    if walls:
        sim.randomize_walls()

    if ignite is not None:
        sim.ignite(ignite[0], ignite[1])

    return sim.run_to_completion()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        sim_params = load_sim_params(args.config) if args.config else SimParams()
    except FireGridError as e:
        print(f"Invalid configuration: {e}")
        return 1

    sim = FireSim(sim_params, scheduler=ManualScheduler())

    logger = None
    if sim_params.write_logs:
        logger = Logger(sim_params.log_folder)
        logger.log_metadata(sim_params, sim)

    for i in range(args.runs):
        if logger:
            logger.start_new_run()
            sim.set_logger(logger)

        try:
            ticks = run_sim(sim, args.walls, args.ignite)
        except KeyboardInterrupt:
            if logger:
                logger.finish(sim, on_interrupt=True)
            return 130
        except FireGridError as e:
            print(f"Run {i} failed: {e}")
            if logger:
                logger.finish(sim)
            return 1

        stats = sim.stats()
        print(f"Run {i}: {ticks} ticks, {stats['burning']} cells burning, "
              f"{stats['walls']} walls, {stats['safe']} cells safe")

        if logger:
            logger.finish(sim)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
