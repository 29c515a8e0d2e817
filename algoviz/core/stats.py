import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

import numpy as np

TIME_COMPLEXITY = {
    "bubble": "O(n²)",
    "selection": "O(n²)",
    "insertion": "O(n²)",
    "merge": "O(n log n)",
    "quick": "O(n log n)",
}
DEFAULT_COMPLEXITY = "O(n²)"


def time_complexity(algorithm: str) -> str:
    return TIME_COMPLEXITY.get(algorithm, DEFAULT_COMPLEXITY)


@dataclass(frozen=True)
class PerformanceData:
    algorithm: str
    array_size: int
    comparisons: int
    swaps: int
    time_complexity: str
    timestamp: float = field(default_factory=lambda: time.time() * 1000)


class PerformanceHistory:
    """Append-only, in-memory record of completed sorting runs."""

    def __init__(self):
        self._runs: List[PerformanceData] = []

    def add(self, data: PerformanceData):
        self._runs.append(data)

    def all(self) -> List[PerformanceData]:
        return list(self._runs)

    def for_algorithm(self, algorithm: str) -> List[PerformanceData]:
        return [run for run in self._runs if run.algorithm == algorithm]

    def summary(self) -> Dict[str, Dict[str, float]]:
        """
        Averages per algorithm, keyed in first-seen order:
        {name: {"runs", "avg_comparisons", "avg_swaps", "avg_array_size"}}
        """
        stats = {}
        for name in dict.fromkeys(run.algorithm for run in self._runs):
            runs = self.for_algorithm(name)
            comparisons = np.array([r.comparisons for r in runs], dtype=float)
            swaps = np.array([r.swaps for r in runs], dtype=float)
            sizes = np.array([r.array_size for r in runs], dtype=float)
            stats[name] = {
                "runs": len(runs),
                "avg_comparisons": float(comparisons.mean()),
                "avg_swaps": float(swaps.mean()),
                "avg_array_size": float(sizes.mean()),
            }
        return stats

    def __len__(self):
        return len(self._runs)

    def __iter__(self) -> Iterator[PerformanceData]:
        return iter(list(self._runs))
