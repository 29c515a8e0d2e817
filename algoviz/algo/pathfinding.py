import asyncio
from abc import abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Type

from algoviz.algo.base import RunCancelled, SteppedAlgorithm
from algoviz.core.cancel import ShouldStop, never_stop
from algoviz.core.grid import INF, PathGrid, PathNode

VisitCallback = Callable[[PathNode], None]


@dataclass
class PathResult:
    path: List[PathNode] = field(default_factory=list)
    visited_nodes: List[PathNode] = field(default_factory=list)
    success: bool = False
    cancelled: bool = False


def reconstruct_path(grid: PathGrid, end: PathNode) -> List[PathNode]:
    """Walks previous-links from `end` back to the search root, returned root-first."""
    path = []
    curr: Optional[PathNode] = end
    while curr is not None:
        path.append(curr)
        curr = grid.previous_of(curr)
    path.reverse()
    return path


def manhattan(a: PathNode, b: PathNode) -> int:
    return abs(a.row - b.row) + abs(a.col - b.col)


class Pathfinder(SteppedAlgorithm):
    def __init__(self, grid: PathGrid, on_visit: VisitCallback = None, delay: float = 0,
                 should_stop: ShouldStop = never_stop):
        super().__init__(delay, should_stop)
        self.grid = grid
        self.on_visit = on_visit
        self.visited_nodes: List[PathNode] = []

    def visit(self, node: PathNode):
        self.check_stop()
        self.visited_nodes.append(node)
        if self.on_visit:
            self.on_visit(node)
        self.step_count += 1
        self.check_stop()

    def found(self, end: PathNode) -> PathResult:
        return PathResult(reconstruct_path(self.grid, end), self.visited_nodes, True)

    def not_found(self) -> PathResult:
        return PathResult([], self.visited_nodes, False)

    async def run(self, start: PathNode = None, end: PathNode = None) -> PathResult:
        """
        Searches from start to end (defaults: the grid's own markers).
        Per-run node fields are reset here, so repeated runs on one grid are
        independent of each other.
        """
        start = start if start is not None else self.grid.start_node
        end = end if end is not None else self.grid.end_node
        if start is None or end is None:
            raise ValueError("Both a start and an end node are required")
        self.grid.index_of(start)
        self.grid.index_of(end)

        self.grid.reset_run()
        self.visited_nodes = []
        self.step_count = 0
        try:
            return await self.search(start, end)
        except RunCancelled:
            return PathResult([], self.visited_nodes, False, cancelled=True)

    def run_all(self, start: PathNode = None, end: PathNode = None) -> PathResult:
        return asyncio.run(self.run(start, end))

    @abstractmethod
    async def search(self, start: PathNode, end: PathNode) -> PathResult:
        pass


class BFS(Pathfinder):
    name = "bfs"
    label = "Breadth-First Search"

    async def search(self, start: PathNode, end: PathNode) -> PathResult:
        grid = self.grid
        queue = deque([start])
        start.is_visited = True
        start.distance = 0

        while queue:
            current = queue.popleft()
            self.visit(current)

            if current is end:
                return self.found(end)

            current_idx = grid.index_of(current)
            for neighbor in grid.neighbors(current):
                # Marked on enqueue so nothing is queued twice
                if not neighbor.is_visited:
                    neighbor.is_visited = True
                    neighbor.distance = current.distance + 1
                    neighbor.previous = current_idx
                    queue.append(neighbor)

            await self.pause()

        return self.not_found()


class DFS(Pathfinder):
    name = "dfs"
    label = "Depth-First Search"

    async def search(self, start: PathNode, end: PathNode) -> PathResult:
        grid = self.grid
        stack = [start]

        while stack:
            current = stack.pop()
            # A node can sit on the stack several times; only the first pop counts
            if current.is_visited:
                continue

            current.is_visited = True
            self.visit(current)

            if current is end:
                return self.found(end)

            current_idx = grid.index_of(current)
            for neighbor in grid.neighbors(current):
                if not neighbor.is_visited:
                    neighbor.previous = current_idx
                    stack.append(neighbor)

            await self.pause()

        return self.not_found()


class Dijkstra(Pathfinder):
    """
    Unit-weight Dijkstra with a linear scan for the closest unvisited node.
    No heap: the grids are small and the scan keeps the visiting order simple.
    """
    name = "dijkstra"
    label = "Dijkstra's Algorithm"

    async def search(self, start: PathNode, end: PathNode) -> PathResult:
        grid = self.grid
        unvisited = list(grid.iter_nodes())
        start.distance = 0

        while unvisited:
            closest_at = min(range(len(unvisited)), key=lambda i: unvisited[i].distance)
            closest = unvisited.pop(closest_at)

            if closest.is_wall:
                continue
            if closest.distance == INF:
                return self.not_found()

            closest.is_visited = True
            self.visit(closest)

            if closest is end:
                return self.found(end)

            closest_idx = grid.index_of(closest)
            for neighbor in grid.neighbors(closest):
                if neighbor.is_visited:
                    continue
                tentative = closest.distance + 1
                if tentative < neighbor.distance:
                    neighbor.distance = tentative
                    neighbor.previous = closest_idx

            await self.pause()

        return self.not_found()


class AStar(Pathfinder):
    """
    A* ranked by distance + Manhattan heuristic. Ties keep open-list insertion
    order (stable sort); that order carries no meaning.
    """
    name = "astar"
    label = "A* Search"

    def estimate(self, node: PathNode, end: PathNode) -> float:
        return manhattan(node, end)

    async def search(self, start: PathNode, end: PathNode) -> PathResult:
        grid = self.grid
        open_list = [start]
        open_set = {id(start)}
        closed = set()

        start.distance = 0
        start.heuristic = self.estimate(start, end)

        while open_list:
            open_list.sort(key=lambda n: n.distance + (n.heuristic or 0))
            current = open_list.pop(0)
            open_set.discard(id(current))
            closed.add(id(current))

            current.is_visited = True
            self.visit(current)

            if current is end:
                return self.found(end)

            current_idx = grid.index_of(current)
            for neighbor in grid.neighbors(current):
                if id(neighbor) in closed:
                    continue

                tentative = current.distance + 1
                if id(neighbor) not in open_set:
                    open_list.append(neighbor)
                    open_set.add(id(neighbor))
                elif tentative >= neighbor.distance:
                    continue

                neighbor.previous = current_idx
                neighbor.distance = tentative
                neighbor.heuristic = self.estimate(neighbor, end)

            await self.pause()

        return self.not_found()


PATHFINDERS: Dict[str, Type[Pathfinder]] = {
    cls.name: cls for cls in (BFS, DFS, Dijkstra, AStar)
}


def get_pathfinder(name: str) -> Type[Pathfinder]:
    try:
        return PATHFINDERS[name]
    except KeyError:
        raise ValueError(f"Unknown pathfinding algorithm '{name}'. Choose from: {', '.join(PATHFINDERS)}") from None


async def breadth_first_search(grid: PathGrid, start: PathNode, end: PathNode, on_visit: VisitCallback = None,
                               delay: float = 0, should_stop: ShouldStop = never_stop) -> PathResult:
    return await BFS(grid, on_visit, delay, should_stop).run(start, end)


async def depth_first_search(grid: PathGrid, start: PathNode, end: PathNode, on_visit: VisitCallback = None,
                             delay: float = 0, should_stop: ShouldStop = never_stop) -> PathResult:
    return await DFS(grid, on_visit, delay, should_stop).run(start, end)


async def dijkstra(grid: PathGrid, start: PathNode, end: PathNode, on_visit: VisitCallback = None,
                   delay: float = 0, should_stop: ShouldStop = never_stop) -> PathResult:
    return await Dijkstra(grid, on_visit, delay, should_stop).run(start, end)


async def a_star(grid: PathGrid, start: PathNode, end: PathNode, on_visit: VisitCallback = None,
                 delay: float = 0, should_stop: ShouldStop = never_stop) -> PathResult:
    return await AStar(grid, on_visit, delay, should_stop).run(start, end)
