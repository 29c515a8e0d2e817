import asyncio
from abc import ABC, abstractmethod
from typing import Callable, List, Sequence, Union

from algoviz.core.cancel import ShouldStop, never_stop
from algoviz.core.elements import ArrayElement, Number, SortingStep

StepCallback = Callable[[SortingStep], None]


class RunCancelled(Exception):
    """Raised at a suspension point once the stop predicate turns true."""


class SteppedAlgorithm(ABC):
    name = ""
    label = ""

    def __init__(self, delay: float = 0, should_stop: ShouldStop = never_stop):
        if delay < 0:
            raise ValueError(f"Delay must be >= 0, got {delay}")
        self.delay = delay  # milliseconds
        self.should_stop = should_stop
        self.step_count = 0

    def check_stop(self):
        if self.should_stop():
            raise RunCancelled()

    async def pause(self):
        """The only suspension point: poll, sleep for the delay, poll again."""
        self.check_stop()
        await asyncio.sleep(self.delay / 1000)
        self.check_stop()


class SortAlgorithm(SteppedAlgorithm):
    def __init__(self, on_step: StepCallback, delay: float = 0, should_stop: ShouldStop = never_stop):
        super().__init__(delay, should_stop)
        self.on_step = on_step

    async def emit(self, step: SortingStep):
        self.check_stop()
        self.on_step(step)
        self.step_count += 1
        await self.pause()

    async def run(self, elements: Sequence[Union[ArrayElement, Number]]) -> bool:
        """
        Sorts a private copy of `elements`, reporting progress through on_step.
        Returns True when the run finished with a COMPLETE step, False when it
        was stopped early.
        """
        arr = [e.value if isinstance(e, ArrayElement) else e for e in elements]
        try:
            await self.sort(arr)
            self.check_stop()
        except RunCancelled:
            return False

        self.on_step(SortingStep.complete(f"{self.label} completed!"))
        self.step_count += 1
        return True

    def run_all(self, elements) -> bool:
        """Helper to run the sort to completion outside an event loop."""
        return asyncio.run(self.run(elements))

    @abstractmethod
    async def sort(self, arr: List[Number]):
        """Sorts `arr` in place, awaiting self.emit() for every step."""
        pass
