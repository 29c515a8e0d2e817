import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

Number = Union[int, float]

# Custom input limits
MAX_CUSTOM_ELEMENTS = 100
# Step logs store values as doubles, which hold integers exactly up to 2**53
MAX_CUSTOM_MAGNITUDE = 2 ** 53


class ElementState(Enum):
    NORMAL = "normal"
    COMPARING = "comparing"
    SWAPPING = "swapping"
    SORTED = "sorted"
    PIVOT = "pivot"


class StepType(Enum):
    COMPARE = "compare"
    SWAP = "swap"
    SET_VALUE = "set_value"
    SET_SORTED = "set_sorted"
    COMPLETE = "complete"


class ArrayElement:
    __slots__ = ('value', 'index', 'state')

    def __init__(self, value: Number, index: int, state: ElementState = ElementState.NORMAL):
        self.value = value
        self.index = index
        self.state = state

    def copy(self) -> "ArrayElement":
        return ArrayElement(self.value, self.index, self.state)

    def __eq__(self, other):
        if not isinstance(other, ArrayElement):
            return NotImplemented
        return (self.value, self.index, self.state) == (other.value, other.index, other.state)

    def __repr__(self):
        return f"ArrayElement(value={self.value!r}, index={self.index}, state={self.state.value})"


@dataclass(frozen=True)
class SortingStep:
    """
    One externally observable unit of sorting progress.

    indices: positions involved, in operation order.
        compare/swap  -> two positions, left to right
        merge compare -> the whole block being merged, or the write slot
        set_sorted    -> any number of positions
        complete      -> always empty
    value: only for SET_VALUE, assigned at indices[0].
    """
    type: StepType
    indices: Tuple[int, ...] = ()
    value: Optional[Number] = None
    message: Optional[str] = None

    @classmethod
    def compare(cls, *indices: int, message: str = None) -> "SortingStep":
        return cls(StepType.COMPARE, tuple(indices), message=message)

    @classmethod
    def swap(cls, i: int, j: int, message: str = None) -> "SortingStep":
        return cls(StepType.SWAP, (i, j), message=message)

    @classmethod
    def set_value(cls, index: int, value: Number, message: str = None) -> "SortingStep":
        return cls(StepType.SET_VALUE, (index,), value=value, message=message)

    @classmethod
    def set_sorted(cls, *indices: int, message: str = None) -> "SortingStep":
        return cls(StepType.SET_SORTED, tuple(indices), message=message)

    @classmethod
    def complete(cls, message: str = None) -> "SortingStep":
        return cls(StepType.COMPLETE, (), message=message)


def make_elements(values: Iterable[Number]) -> List[ArrayElement]:
    return [ArrayElement(v, i) for i, v in enumerate(values)]


def element_values(elements: Sequence[ArrayElement]) -> List[Number]:
    return [e.value for e in elements]


def parse_values(text: str) -> List[int]:
    """
    Parses user input like "5, 3 8,1" into integers.
    Raises ValueError on empty input, a non-integer or oversized token, or too
    many elements.
    """
    tokens = [t for t in re.split(r"[\s,]+", text.strip()) if t]
    values = []
    for token in tokens:
        try:
            value = int(token)
        except ValueError:
            raise ValueError(f"Invalid number: {token}") from None
        if abs(value) > MAX_CUSTOM_MAGNITUDE:
            raise ValueError(f"Number out of range: {token} (limit is ±{MAX_CUSTOM_MAGNITUDE})")
        values.append(value)

    if not values:
        raise ValueError("Please enter at least one number")
    if len(values) > MAX_CUSTOM_ELEMENTS:
        raise ValueError(f"Maximum {MAX_CUSTOM_ELEMENTS} elements allowed")
    return values
