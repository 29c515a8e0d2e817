from typing import Callable

ShouldStop = Callable[[], bool]


def never_stop() -> bool:
    return False


class StopFlag:
    """
    Shared cancellation flag. Set from outside the running algorithm
    (a stop button, a closed window) and polled by the algorithm at its
    suspension points. Calling the instance returns the current state, so it
    can be handed over anywhere a zero-argument predicate is expected.
    """
    __slots__ = ('_stopped',)

    def __init__(self):
        self._stopped = False

    def set(self):
        self._stopped = True

    def clear(self):
        self._stopped = False

    def is_set(self) -> bool:
        return self._stopped

    def __call__(self) -> bool:
        return self._stopped
