import argparse
import asyncio
import sys
import os
import logging

# Ensure project root is in path so we can import 'algoviz' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from algoviz.algo.pathfinding import PATHFINDERS
from algoviz.algo.sorting import SORTERS
from algoviz.playback.runner import DEFAULT_DELAY_MS, speed_to_delay

DEFAULT_ROWS = 20
DEFAULT_COLS = 40


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def parse_cell(text: str):
    try:
        row, col = (int(p) for p in text.split(","))
    except ValueError:
        raise ValueError(f"Expected 'row,col', got '{text}'") from None
    return row, col


def parse_cells(text: str):
    return [parse_cell(part) for part in text.split(";") if part.strip()]


def resolve_delay(args) -> float:
    if args.speed is not None:
        return speed_to_delay(args.speed)
    return args.delay


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="algoviz: step-by-step sorting and pathfinding visualizer")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Sort Command
    sort_parser = subparsers.add_parser("sort", help="Run a sorting algorithm")
    sort_parser.add_argument("--algo", type=str, default="bubble", choices=list(SORTERS), help="Sorting algorithm")
    sort_parser.add_argument("--size", type=int, default=30, help="Random array size")
    sort_parser.add_argument("--values", type=str, help="Custom values, e.g. '5,3,8,1'")
    sort_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    sort_parser.add_argument("--delay", type=float, default=DEFAULT_DELAY_MS, help="Delay between steps (ms)")
    sort_parser.add_argument("--speed", type=int, default=None, help="Speed 1-500 (overrides --delay)")
    sort_parser.add_argument("--visual", action="store_true", help="Show visualization")
    sort_parser.add_argument("--record", action="store_true", help="Record video")
    sort_parser.add_argument("--record-events", type=str, help="Save sorting steps to binary file")

    # Pathfind Command
    path_parser = subparsers.add_parser("pathfind", help="Run a pathfinding algorithm on a grid")
    path_parser.add_argument("--algo", type=str, default="dijkstra", choices=list(PATHFINDERS), help="Search algorithm")
    path_parser.add_argument("--rows", type=int, default=DEFAULT_ROWS, help="Grid rows")
    path_parser.add_argument("--cols", type=int, default=DEFAULT_COLS, help="Grid columns")
    path_parser.add_argument("--start", type=str, default=None, help="Start cell 'row,col'")
    path_parser.add_argument("--end", type=str, default=None, help="End cell 'row,col'")
    path_parser.add_argument("--walls", type=str, default="", help="Walls 'r,c;r,c;...'")
    path_parser.add_argument("--grid", type=str, help="Load grid layout from file")
    path_parser.add_argument("--save", type=str, help="Save grid layout to file")
    path_parser.add_argument("--delay", type=float, default=DEFAULT_DELAY_MS, help="Delay between steps (ms)")
    path_parser.add_argument("--speed", type=int, default=None, help="Speed 1-500 (overrides --delay)")
    path_parser.add_argument("--visual", action="store_true", help="Show visualization")
    path_parser.add_argument("--record", action="store_true", help="Record video")

    # Replay Command
    replay_parser = subparsers.add_parser("replay", help="Replay a recorded sorting run")
    replay_parser.add_argument("event_file", help="Path to step log file")
    replay_parser.add_argument("--algo", type=str, default="replay", help="Algorithm name for the stats")
    replay_parser.add_argument("--delay", type=float, default=DEFAULT_DELAY_MS, help="Delay between steps (ms)")
    replay_parser.add_argument("--visual", action="store_true", help="Show visualization")
    replay_parser.add_argument("--record", action="store_true", help="Record video")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Compare comparisons/swaps across sorting algorithms")
    bench_parser.add_argument("--size", type=int, default=50, help="Array size")
    bench_parser.add_argument("--runs", type=int, default=5, help="Runs per algorithm")
    bench_parser.add_argument("--seed", type=int, default=None, help="Random Seed")

    return parser


def cmd_sort(args, logger) -> int:
    from algoviz.core.cancel import StopFlag
    from algoviz.core.elements import parse_values
    from algoviz.core.events import StepLogWriter
    from algoviz.playback.board import SortingBoard
    from algoviz.playback.runner import run_sort

    board = SortingBoard(algorithm=args.algo)
    if args.values:
        board.set_values(parse_values(args.values))
    else:
        board.generate_random(args.size, seed=args.seed)
    delay = resolve_delay(args)
    logger.info(f"Initial array: {board.values()}")

    stop = StopFlag()
    callbacks = []

    evt_writer = None
    renderer = None

    def forward(step):
        for cb in callbacks:
            cb(step)

    try:
        if args.record_events:
            evt_writer = StepLogWriter(args.record_events)
            evt_writer.write_header(board.values())
            callbacks.append(evt_writer.log_step)
            logger.info(f"Recording steps to {args.record_events}...")

        if args.visual or args.record:
            from algoviz.viz.renderer import Renderer
            renderer = Renderer(board=board, record=args.record, stop=stop, title=f"{args.algo} sort")
            callbacks.append(renderer.on_step)
            renderer.init_window()

        outcome = asyncio.run(run_sort(board, args.algo, delay, stop, forward))
        if renderer:
            renderer.hold()
    finally:
        if renderer:
            renderer.close()
        if evt_writer:
            evt_writer.close()
            logger.info(f"Saved {evt_writer.count} steps to {args.record_events}")

    print(f"Result: {board.values()}")
    print(f"Completed: {outcome.completed} | Steps: {outcome.steps} | "
          f"Comparisons: {board.comparisons} | Swaps: {board.swaps}")
    return 0


def build_grid(args, logger):
    from algoviz.core.grid import PathGrid

    if args.grid:
        from algoviz.io.serializer import GridSerializer
        logger.info(f"Loading {args.grid}...")
        grid, meta = GridSerializer.load(args.grid)
        logger.info(f"Loaded {grid.rows}x{grid.cols} grid. Meta: {meta}")
    else:
        grid = PathGrid(args.rows, args.cols)

    if args.start:
        grid.set_start(*parse_cell(args.start))
    elif grid.start_node is None:
        grid.set_start(grid.rows // 2, grid.cols // 8)
    if args.end:
        grid.set_end(*parse_cell(args.end))
    elif grid.end_node is None:
        grid.set_end(grid.rows // 2, grid.cols - 1 - grid.cols // 8)

    for row, col in parse_cells(args.walls):
        grid.set_wall(row, col)
    return grid


def cmd_pathfind(args, logger) -> int:
    from algoviz.core.cancel import StopFlag
    from algoviz.playback.runner import run_pathfinding

    grid = build_grid(args, logger)
    if args.save:
        from algoviz.io.serializer import GridSerializer
        GridSerializer.save(grid, args.save, meta={"algo": args.algo})
        logger.info(f"Saved grid layout to {args.save}")

    stop = StopFlag()
    renderer = None
    on_visit = None
    if args.visual or args.record:
        from algoviz.viz.renderer import Renderer
        renderer = Renderer(grid=grid, record=args.record, stop=stop, title=f"{args.algo} search")
        on_visit = renderer.on_visit

    try:
        if renderer:
            renderer.init_window()
        result = asyncio.run(run_pathfinding(grid, args.algo, resolve_delay(args), stop, on_visit))
        if renderer:
            renderer.frame()
            renderer.hold()
    finally:
        if renderer:
            renderer.close()

    status = "cancelled" if result.cancelled else ("found" if result.success else "unreachable")
    print(f"Status: {status} | Path Length: {len(result.path)} | Visited: {len(result.visited_nodes)}")
    return 0


def cmd_replay(args, logger) -> int:
    from algoviz.core.cancel import StopFlag
    from algoviz.core.events import StepLogReader
    from algoviz.playback.board import SortingBoard
    from algoviz.viz.replay import StepReplay

    logger.info(f"Replaying {args.event_file}...")
    board = SortingBoard(algorithm=args.algo)
    stop = StopFlag()

    renderer = None
    on_step = None
    if args.visual or args.record:
        from algoviz.viz.renderer import Renderer
        renderer = Renderer(board=board, record=args.record, stop=stop, title="replay")
        on_step = renderer.on_step

    with StepLogReader(args.event_file) as reader:
        replay = StepReplay(board, reader)
        try:
            if renderer:
                renderer.init_window()
            completed = asyncio.run(replay.run(args.delay, on_step, stop))
            if renderer:
                renderer.hold()
        finally:
            if renderer:
                renderer.close()

    print(f"Replayed {replay.step_count} steps. Completed: {completed}")
    print(f"Result: {board.values()}")
    return 0


def cmd_benchmark(args, logger) -> int:
    import numpy as np
    from algoviz.core.stats import PerformanceHistory
    from algoviz.playback.board import SortingBoard
    from algoviz.playback.runner import run_sort

    logger.info(f"Running sorting benchmark (size={args.size}, runs={args.runs})...")
    history = PerformanceHistory()
    rng = np.random.default_rng(args.seed)
    # Every algorithm sees the same arrays
    seeds = [int(s) for s in rng.integers(0, 2**31 - 1, size=args.runs)]

    async def run_all():
        for name in SORTERS:
            for seed in seeds:
                board = SortingBoard(algorithm=name, history=history)
                board.generate_random(args.size, seed=seed)
                await run_sort(board, name)

    asyncio.run(run_all())

    print(f"\n{'ALGORITHM':<12} | {'RUNS':<5} | {'AVG COMPARISONS':<16} | {'AVG SWAPS':<10} | {'COMPLEXITY':<10}")
    print("-" * 66)
    for name, row in history.summary().items():
        complexity = history.for_algorithm(name)[0].time_complexity
        print(f"{name:<12} | {row['runs']:<5} | {row['avg_comparisons']:<16.1f} | "
              f"{row['avg_swaps']:<10.1f} | {complexity:<10}")
    return 0


COMMANDS = {
    "sort": cmd_sort,
    "pathfind": cmd_pathfind,
    "replay": cmd_replay,
    "benchmark": cmd_benchmark,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("algoviz")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")
    try:
        return COMMANDS[args.command](args, logger)
    except (ValueError, IndexError) as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
