import sys
import os
import time
import argparse

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from algoviz.algo.pathfinding import PATHFINDERS
from algoviz.core.grid import PathGrid

# Names from PATHFINDERS to include in the race.
ENABLED_SEARCHES = ["bfs", "dfs", "dijkstra", "astar"]


def random_grid(rows: int, cols: int, density: float, seed=None) -> PathGrid:
    grid = PathGrid(rows, cols)
    grid.set_start(0, 0)
    grid.set_end(rows - 1, cols - 1)

    rng = np.random.default_rng(seed)
    mask = rng.random((rows, cols)) < density
    for r, c in zip(*np.nonzero(mask)):
        grid.set_wall(int(r), int(c))
    return grid


def run_benchmark():
    parser = argparse.ArgumentParser(description="Pathfinder Benchmark")
    parser.add_argument("--rows", type=int, default=60, help="Grid rows")
    parser.add_argument("--cols", type=int, default=100, help="Grid columns")
    parser.add_argument("--density", type=float, default=0.25, help="Wall density (0.0-1.0)")
    parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    args = parser.parse_args()

    print("=== PATHFINDER BENCHMARK ===")
    print(f"Size: {args.rows}x{args.cols} | Wall density: {args.density}")
    print(f"Searches: {', '.join(ENABLED_SEARCHES)}")
    print("-" * 50)

    grid = random_grid(args.rows, args.cols, args.density, args.seed)
    walls = sum(n.is_wall for n in grid.iter_nodes())
    print(f"Placed {walls} walls.")
    print("-" * 50)

    results = []
    for name in ENABLED_SEARCHES:
        print(f"Running {name.upper()}...", end="", flush=True)

        # Each search resets the per-run node fields itself, walls stay
        finder = PATHFINDERS[name](grid)
        t_start = time.time()
        result = finder.run_all()
        duration = time.time() - t_start

        status = "found" if result.success else "unreachable"
        print(f" Done ({duration:.4f}s) | {status}")
        results.append({
            "name": name,
            "time": duration,
            "path": len(result.path),
            "visited": len(result.visited_nodes),
        })

    print("=" * 60)
    print(f"{'RANK':<5} | {'ALGORITHM':<12} | {'TIME (s)':<10} | {'PATH':<8} | {'VISITED':<8}")
    print("-" * 60)

    results.sort(key=lambda x: x['visited'])
    for i, res in enumerate(results):
        print(f"{i+1:<5} | {res['name'].upper():<12} | {res['time']:<10.4f} | {res['path']:<8} | {res['visited']:<8}")
    print("=" * 60)


if __name__ == "__main__":
    run_benchmark()
