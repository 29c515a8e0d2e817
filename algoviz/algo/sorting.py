from typing import Dict, List, Sequence, Type

from algoviz.algo.base import SortAlgorithm, StepCallback
from algoviz.core.cancel import ShouldStop, never_stop
from algoviz.core.elements import Number, SortingStep


class BubbleSort(SortAlgorithm):
    name = "bubble"
    label = "Bubble sort"

    async def sort(self, arr: List[Number]):
        n = len(arr)
        for i in range(n - 1):
            for j in range(n - i - 1):
                await self.emit(SortingStep.compare(j, j + 1, message=f"Comparing {arr[j]} and {arr[j + 1]}"))

                if arr[j] > arr[j + 1]:
                    await self.emit(SortingStep.swap(j, j + 1, message=f"Swapping {arr[j]} and {arr[j + 1]}"))
                    arr[j], arr[j + 1] = arr[j + 1], arr[j]

            last = n - 1 - i
            await self.emit(SortingStep.set_sorted(last, message=f"Element {arr[last]} is in its final position"))

        if n:
            await self.emit(SortingStep.set_sorted(0, message="First element is in its final position"))


class SelectionSort(SortAlgorithm):
    name = "selection"
    label = "Selection sort"

    async def sort(self, arr: List[Number]):
        n = len(arr)
        for i in range(n - 1):
            min_index = i
            for j in range(i + 1, n):
                await self.emit(SortingStep.compare(min_index, j, message=f"Comparing {arr[min_index]} and {arr[j]}"))
                if arr[j] < arr[min_index]:
                    min_index = j

            if min_index != i:
                await self.emit(SortingStep.swap(i, min_index, message=f"Swapping {arr[i]} and {arr[min_index]}"))
                arr[i], arr[min_index] = arr[min_index], arr[i]

            await self.emit(SortingStep.set_sorted(i, message=f"{arr[i]} is in its final position"))

        if n:
            await self.emit(SortingStep.set_sorted(n - 1, message="Last element is in its final position"))


class InsertionSort(SortAlgorithm):
    """
    Shifts are reported as adjacent swaps carrying the key to the left, so an
    observer that only applies SWAP steps ends up with the same array.
    """
    name = "insertion"
    label = "Insertion sort"

    async def sort(self, arr: List[Number]):
        for i in range(1, len(arr)):
            key = arr[i]
            j = i - 1
            await self.emit(SortingStep.compare(i, message=f"Inserting {key} into sorted portion"))

            while j >= 0 and arr[j] > key:
                await self.emit(SortingStep.compare(j, j + 1, message=f"Comparing {arr[j]} and {key}"))
                await self.emit(SortingStep.swap(j, j + 1, message=f"Moving {arr[j]} to the right"))
                arr[j + 1] = arr[j]
                j -= 1

            arr[j + 1] = key
            await self.emit(SortingStep.set_sorted(j + 1, message=f"{key} is now in its correct position"))


class MergeSort(SortAlgorithm):
    """Bottom-up merge sort with doubling block size. Copies, never swaps."""
    name = "merge"
    label = "Merge sort"

    async def sort(self, arr: List[Number]):
        n = len(arr)
        size = 1
        while size < n:
            left = 0
            while left < n - 1:
                mid = min(left + size - 1, n - 1)
                right = min(left + size * 2 - 1, n - 1)
                if mid < right:
                    await self.merge(arr, left, mid, right)
                left += size * 2
            size *= 2

    async def merge(self, arr: List[Number], left: int, mid: int, right: int):
        block = range(left, right + 1)
        await self.emit(SortingStep.compare(
            *block, message=f"Merging subarrays from {left} to {mid} and {mid + 1} to {right}"))

        left_part = arr[left:mid + 1]
        right_part = arr[mid + 1:right + 1]
        i = j = 0
        k = left

        while i < len(left_part) and j < len(right_part):
            await self.emit(SortingStep.compare(k, message=f"Comparing {left_part[i]} and {right_part[j]}"))

            # <= keeps equal elements in their original order
            if left_part[i] <= right_part[j]:
                value = left_part[i]
                i += 1
            else:
                value = right_part[j]
                j += 1
            arr[k] = value
            await self.emit(SortingStep.set_value(k, value, message=f"Placing {value} at position {k}"))
            k += 1

        for value in left_part[i:] + right_part[j:]:
            arr[k] = value
            await self.emit(SortingStep.set_value(k, value, message=f"Placing remaining {value} at position {k}"))
            k += 1

        await self.emit(SortingStep.set_sorted(
            *block, message=f"Section from {left} to {right} is now merged and sorted"))


class QuickSort(SortAlgorithm):
    """
    Lomuto partition around the last element. Only values strictly below the
    pivot advance the partition index, so equal values stay where they are
    and the sort is not stable.
    """
    name = "quick"
    label = "Quick sort"

    async def sort(self, arr: List[Number]):
        # Explicit stack instead of recursion; the low part is always
        # finished before the high part, same order as the recursive version.
        ranges = [(0, len(arr) - 1)]
        while ranges:
            low, high = ranges.pop()
            if low < high:
                p = await self.partition(arr, low, high)
                ranges.append((p + 1, high))
                ranges.append((low, p - 1))

    async def partition(self, arr: List[Number], low: int, high: int) -> int:
        pivot = arr[high]
        i = low - 1

        for j in range(low, high):
            await self.emit(SortingStep.compare(j, high, message=f"Comparing {arr[j]} with pivot {pivot}"))

            if arr[j] < pivot:
                i += 1
                if i != j:
                    await self.emit(SortingStep.swap(i, j, message=f"Swapping {arr[i]} and {arr[j]}"))
                    arr[i], arr[j] = arr[j], arr[i]

        await self.emit(SortingStep.swap(i + 1, high, message=f"Placing pivot {pivot} in its correct position"))
        arr[i + 1], arr[high] = arr[high], arr[i + 1]
        return i + 1


SORTERS: Dict[str, Type[SortAlgorithm]] = {
    cls.name: cls for cls in (BubbleSort, SelectionSort, InsertionSort, MergeSort, QuickSort)
}


def get_sorter(name: str) -> Type[SortAlgorithm]:
    try:
        return SORTERS[name]
    except KeyError:
        raise ValueError(f"Unknown sorting algorithm '{name}'. Choose from: {', '.join(SORTERS)}") from None


async def bubble_sort(elements: Sequence, on_step: StepCallback, delay: float = 0,
                      should_stop: ShouldStop = never_stop) -> bool:
    return await BubbleSort(on_step, delay, should_stop).run(elements)


async def selection_sort(elements: Sequence, on_step: StepCallback, delay: float = 0,
                         should_stop: ShouldStop = never_stop) -> bool:
    return await SelectionSort(on_step, delay, should_stop).run(elements)


async def insertion_sort(elements: Sequence, on_step: StepCallback, delay: float = 0,
                         should_stop: ShouldStop = never_stop) -> bool:
    return await InsertionSort(on_step, delay, should_stop).run(elements)


async def merge_sort(elements: Sequence, on_step: StepCallback, delay: float = 0,
                     should_stop: ShouldStop = never_stop) -> bool:
    return await MergeSort(on_step, delay, should_stop).run(elements)


async def quick_sort(elements: Sequence, on_step: StepCallback, delay: float = 0,
                     should_stop: ShouldStop = never_stop) -> bool:
    return await QuickSort(on_step, delay, should_stop).run(elements)
