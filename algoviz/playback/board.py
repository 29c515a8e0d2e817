import logging
from typing import Iterable, List, Optional

import numpy as np

from algoviz.core.elements import (
    ArrayElement, ElementState, Number, SortingStep, StepType, element_values, make_elements
)
from algoviz.core.stats import PerformanceData, PerformanceHistory, time_complexity

logger = logging.getLogger(__name__)

RANDOM_MIN = 5
RANDOM_MAX = 100


class SortingBoard:
    """
    Display-side model of a sorting run. Applies each step by its indices to
    its own array of cells, counts comparisons and swaps, and appends a
    PerformanceData to the history when a run completes.

    The algorithms never see this object; they only talk to it through the
    step callback (board.apply).
    """

    def __init__(self, values: Iterable[Number] = (), algorithm: str = "bubble",
                 history: Optional[PerformanceHistory] = None):
        self.algorithm = algorithm
        self.history = history if history is not None else PerformanceHistory()
        self.elements: List[ArrayElement] = []
        self.comparisons = 0
        self.swaps = 0
        self.step_count = 0
        self.completed = False
        self.last_message = ""
        self.set_values(values)

    def set_values(self, values: Iterable[Number]):
        self.elements = make_elements(values)
        self.reset_stats()

    def generate_random(self, size: int, low: int = RANDOM_MIN, high: int = RANDOM_MAX, seed: int = None):
        rng = np.random.default_rng(seed)
        values = rng.integers(low, high, size=size, endpoint=True)
        self.set_values(int(v) for v in values)

    def values(self) -> List[Number]:
        return element_values(self.elements)

    def states(self) -> List[ElementState]:
        return [e.state for e in self.elements]

    def reset_states(self):
        for e in self.elements:
            e.state = ElementState.NORMAL

    def reset_stats(self):
        self.comparisons = 0
        self.swaps = 0
        self.step_count = 0
        self.completed = False
        self.last_message = ""

    def snapshot(self) -> List[ArrayElement]:
        return [e.copy() for e in self.elements]

    def _flag(self, indices, state: ElementState):
        for i in indices:
            self.elements[i].state = state

    def apply(self, step: SortingStep):
        if step.type == StepType.COMPARE:
            self._flag(step.indices, ElementState.COMPARING)
            self.comparisons += 1

        elif step.type == StepType.SWAP:
            self._flag(step.indices, ElementState.SWAPPING)
            if len(step.indices) == 2:
                a, b = self.elements[step.indices[0]], self.elements[step.indices[1]]
                a.value, b.value = b.value, a.value
            self.swaps += 1

        elif step.type == StepType.SET_VALUE:
            self._flag(step.indices, ElementState.SWAPPING)
            if step.value is not None and len(step.indices) == 1:
                self.elements[step.indices[0]].value = step.value
            self.swaps += 1

        elif step.type == StepType.SET_SORTED:
            self._flag(step.indices, ElementState.SORTED)

        elif step.type == StepType.COMPLETE:
            self._flag(range(len(self.elements)), ElementState.SORTED)
            self.completed = True
            self.record_performance()

        self.step_count += 1
        if step.message:
            self.last_message = step.message
        logger.debug(f"{step.type.value} {list(step.indices)}")

    # Usable directly as an algorithm callback
    on_step = apply

    def record_performance(self) -> PerformanceData:
        data = PerformanceData(
            algorithm=self.algorithm,
            array_size=len(self.elements),
            comparisons=self.comparisons,
            swaps=self.swaps,
            time_complexity=time_complexity(self.algorithm),
        )
        self.history.add(data)
        return data
