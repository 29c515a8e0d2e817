import math
from typing import Iterable, Iterator, List, Optional, Tuple

INF = math.inf


class PathNode:
    __slots__ = ('row', 'col', 'is_start', 'is_end', 'is_wall',
                 'is_visited', 'is_path', 'distance', 'previous', 'heuristic')

    def __init__(self, row: int, col: int):
        self.row = row
        self.col = col
        self.is_start = False
        self.is_end = False
        self.is_wall = False
        # Per-run fields
        self.is_visited = False
        self.is_path = False
        self.distance = INF
        self.previous: Optional[int] = None  # index into the owning grid's arena
        self.heuristic: Optional[float] = None

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def reset_run(self):
        self.is_visited = False
        self.is_path = False
        self.distance = INF
        self.previous = None
        self.heuristic = None

    def __repr__(self):
        return f"PathNode({self.row}, {self.col})"


class PathGrid:
    """
    Fixed size rows x cols grid of PathNodes stored row-major in one list.
    Node identity is stable for the grid's lifetime; backlinks between nodes
    are arena indices, never direct references.
    """
    __slots__ = ('rows', 'cols', 'nodes', '_start', '_end')

    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid size must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.nodes: List[PathNode] = [PathNode(r, c) for r in range(rows) for c in range(cols)]
        self._start: Optional[int] = None
        self._end: Optional[int] = None

    def get_index(self, row: int, col: int) -> int:
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return row * self.cols + col
        raise IndexError(f"Coordinate ({row}, {col}) out of bounds")

    def index_of(self, node: PathNode) -> int:
        idx = self.get_index(node.row, node.col)
        if self.nodes[idx] is not node:
            raise ValueError(f"{node!r} does not belong to this grid")
        return idx

    def node(self, row: int, col: int) -> PathNode:
        return self.nodes[self.get_index(row, col)]

    def node_at(self, index: int) -> PathNode:
        return self.nodes[index]

    def iter_nodes(self) -> Iterator[PathNode]:
        return iter(self.nodes)

    @property
    def start_node(self) -> Optional[PathNode]:
        return None if self._start is None else self.nodes[self._start]

    @property
    def end_node(self) -> Optional[PathNode]:
        return None if self._end is None else self.nodes[self._end]

    def set_start(self, row: int, col: int):
        idx = self.get_index(row, col)
        if idx == self._end:
            raise ValueError(f"({row}, {col}) is already the end node")
        if self._start is not None:
            self.nodes[self._start].is_start = False
        node = self.nodes[idx]
        node.is_start = True
        node.is_wall = False
        self._start = idx

    def set_end(self, row: int, col: int):
        idx = self.get_index(row, col)
        if idx == self._start:
            raise ValueError(f"({row}, {col}) is already the start node")
        if self._end is not None:
            self.nodes[self._end].is_end = False
        node = self.nodes[idx]
        node.is_end = True
        node.is_wall = False
        self._end = idx

    def toggle_wall(self, row: int, col: int) -> bool:
        """Flips the wall flag. Start and end nodes are left untouched."""
        node = self.node(row, col)
        if not node.is_start and not node.is_end:
            node.is_wall = not node.is_wall
        return node.is_wall

    def set_wall(self, row: int, col: int, wall: bool = True):
        node = self.node(row, col)
        if node.is_start or node.is_end:
            return
        node.is_wall = wall

    def clear_walls(self):
        for node in self.nodes:
            node.is_wall = False

    def neighbors(self, node: PathNode) -> Iterator[PathNode]:
        """
        Yields the walkable 4-connected neighbors in up, down, left, right order.
        """
        r, c = node.row, node.col
        if r > 0:
            n = self.nodes[(r - 1) * self.cols + c]
            if not n.is_wall:
                yield n
        if r < self.rows - 1:
            n = self.nodes[(r + 1) * self.cols + c]
            if not n.is_wall:
                yield n
        if c > 0:
            n = self.nodes[r * self.cols + c - 1]
            if not n.is_wall:
                yield n
        if c < self.cols - 1:
            n = self.nodes[r * self.cols + c + 1]
            if not n.is_wall:
                yield n

    def reset_run(self):
        for node in self.nodes:
            node.reset_run()

    def clear_path(self):
        for node in self.nodes:
            node.is_visited = False
            node.is_path = False

    def mark_path(self, path: Iterable[PathNode]):
        for node in path:
            node.is_path = True

    def previous_of(self, node: PathNode) -> Optional[PathNode]:
        return None if node.previous is None else self.nodes[node.previous]
