import asyncio
from typing import Callable, Optional

from algoviz.core.cancel import ShouldStop, never_stop
from algoviz.core.elements import SortingStep
from algoviz.core.events import StepLogReader
from algoviz.playback.board import SortingBoard


class StepReplay:
    """
    Feeds a recorded step log back into a SortingBoard, the same way a live
    algorithm would, so the renderer cannot tell the difference.
    """
    def __init__(self, board: SortingBoard, reader: StepLogReader):
        self.board = board
        self.reader = reader
        self.step_count = 0

    async def run(self, delay: float = 0, on_step: Optional[Callable[[SortingStep], None]] = None,
                  should_stop: ShouldStop = never_stop) -> bool:
        self.board.set_values(self.reader.read_header())
        for step in self.reader.stream_steps():
            if should_stop():
                return False
            self.board.apply(step)
            if on_step:
                on_step(step)
            self.step_count += 1
            await asyncio.sleep(delay / 1000)
        return self.board.completed
