"""Run a headless simulation and log how residents spend their time."""
import argparse

from streetsim.config import Config
from streetsim.utils.load_json import bundled_maps
from streetsim.utils.logger import Logger
from streetsim.world import Simulation


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a headless StreetSim simulation.")
    parser.add_argument("--map", type=str, default=None, help="Map JSON file (default: the bundled sample map).")
    parser.add_argument("--config", type=str, default=None, help="YAML file merged over the default config.")
    parser.add_argument("--ticks", type=int, default=1800, help="Number of ticks to run.")
    parser.add_argument("--delta", type=float, default=1 / 30, help="Real seconds per tick.")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: simulation.seed).")
    parser.add_argument("--residents", type=int, default=None, help="Residents to spawn (default: simulation.resident_count).")
    parser.add_argument("--report-every", type=int, default=300, help="Log a state histogram every N ticks.")
    parser.add_argument("--list-maps", action="store_true", help="List the bundled maps and exit.")
    args = parser.parse_args()

    if args.list_maps:
        print("\n".join(bundled_maps()))
        return 0

    config = Config(args.config)
    if args.seed is not None:
        config.set('simulation.seed', args.seed)
    if args.residents is not None:
        config.set('simulation.resident_count', args.residents)

    Logger.configure_from(config)
    logger = Logger.get_logger('RunSimulation')

    simulation = Simulation.from_config(config, map_path=args.map)
    for tick in range(1, args.ticks + 1):
        simulation.tick(args.delta)
        if args.report_every and tick % args.report_every == 0:
            logger.info(f'{simulation.clock.time_string()} | {simulation.state_histogram()}')

    logger.info(f'Finished {simulation.tick_count} ticks at {simulation.clock.time_string()}')
    logger.info(f'Final states: {simulation.state_histogram()}')
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
