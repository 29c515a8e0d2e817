import logging
import time
from dataclasses import dataclass
from typing import Optional

from algoviz.algo.base import StepCallback
from algoviz.algo.pathfinding import PathResult, VisitCallback, get_pathfinder
from algoviz.algo.sorting import get_sorter
from algoviz.core.cancel import StopFlag
from algoviz.core.elements import SortingStep
from algoviz.core.grid import PathGrid
from algoviz.playback.board import SortingBoard

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 0
MAX_SPEED = 500


def speed_to_delay(speed: int) -> int:
    """Maps a 1..500 speed setting to a per-step delay in ms (faster = shorter)."""
    if not 1 <= speed <= MAX_SPEED:
        raise ValueError(f"Speed must be between 1 and {MAX_SPEED}, got {speed}")
    return MAX_SPEED + 1 - speed


@dataclass
class RunOutcome:
    algorithm: str
    completed: bool
    steps: int
    elapsed: float


async def run_sort(board: SortingBoard, algorithm: str, delay: float = DEFAULT_DELAY_MS,
                   stop: Optional[StopFlag] = None, on_step: Optional[StepCallback] = None) -> RunOutcome:
    """
    Runs one sorting algorithm against the board's current values.
    Every step is applied to the board first, then handed to `on_step`
    (renderer, step log, ...).
    """
    sorter_cls = get_sorter(algorithm)
    stop = stop if stop is not None else StopFlag()

    board.algorithm = algorithm
    board.reset_states()
    board.reset_stats()

    def handle(step: SortingStep):
        board.apply(step)
        if on_step:
            on_step(step)

    sorter = sorter_cls(handle, delay, stop)
    logger.info(f"Running {sorter.label} on {len(board.elements)} elements (delay={delay}ms)")

    t0 = time.perf_counter()
    completed = await sorter.run(board.snapshot())
    elapsed = time.perf_counter() - t0

    if completed:
        logger.info(f"{sorter.label} finished in {elapsed:.4f}s: "
                    f"{board.comparisons} comparisons, {board.swaps} swaps")
    else:
        logger.info(f"{sorter.label} stopped after {sorter.step_count} steps")

    return RunOutcome(algorithm, completed, sorter.step_count, elapsed)


async def run_pathfinding(grid: PathGrid, algorithm: str, delay: float = DEFAULT_DELAY_MS,
                          stop: Optional[StopFlag] = None,
                          on_visit: Optional[VisitCallback] = None) -> PathResult:
    finder_cls = get_pathfinder(algorithm)
    stop = stop if stop is not None else StopFlag()
    finder = finder_cls(grid, on_visit, delay, stop)

    start, end = grid.start_node, grid.end_node
    logger.info(f"Running {finder.label} from {start.pos if start else None} to {end.pos if end else None}")

    t0 = time.perf_counter()
    result = await finder.run(start, end)
    elapsed = time.perf_counter() - t0

    if result.success:
        grid.mark_path(result.path)
        logger.info(f"{finder.label} found a path of {len(result.path)} nodes "
                    f"({len(result.visited_nodes)} visited, {elapsed:.4f}s)")
    elif result.cancelled:
        logger.info(f"{finder.label} stopped after visiting {len(result.visited_nodes)} nodes")
    else:
        logger.info(f"{finder.label}: no path ({len(result.visited_nodes)} visited)")
    return result
