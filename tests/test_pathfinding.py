import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from algoviz.algo.pathfinding import (
    PATHFINDERS, AStar, BFS, DFS, Dijkstra, a_star, breadth_first_search, depth_first_search, dijkstra,
    get_pathfinder, manhattan
)
from algoviz.core.cancel import StopFlag
from algoviz.core.grid import PathGrid

OPTIMAL = (BFS, Dijkstra, AStar)


class TestPathfinders(unittest.TestCase):
    def create_grid(self, rows, cols, start, end, walls=()):
        grid = PathGrid(rows, cols)
        grid.set_start(*start)
        grid.set_end(*end)
        for r, c in walls:
            grid.set_wall(r, c)
        return grid

    def create_corridor_maze(self):
        # 5x5, single winding corridor:
        # S . # . .
        # # . # . #
        # . . # . .
        # . # # # .
        # . . . . E
        walls = [(0, 2), (1, 0), (1, 2), (1, 4), (2, 2), (3, 1), (3, 2), (3, 3)]
        return self.create_grid(5, 5, (0, 0), (4, 4), walls)

    def assert_valid_path(self, grid, path, start, end):
        self.assertIs(path[0], start)
        self.assertIs(path[-1], end)
        for a, b in zip(path, path[1:]):
            self.assertEqual(manhattan(a, b), 1, f"{a} and {b} are not adjacent")
            self.assertFalse(b.is_wall)
        self.assertEqual(len(set(map(id, path))), len(path), "path revisits a node")

    def test_bfs_3x3(self):
        grid = self.create_grid(3, 3, (0, 0), (2, 2))
        result = BFS(grid).run_all()
        self.assertTrue(result.success)
        self.assertEqual(len(result.path), 5)
        self.assert_valid_path(grid, result.path, grid.start_node, grid.end_node)

    def test_open_grid_is_manhattan_optimal(self):
        for cls in OPTIMAL:
            grid = self.create_grid(6, 9, (1, 1), (4, 7))
            result = cls(grid).run_all()
            with self.subTest(algo=cls.name):
                self.assertTrue(result.success)
                self.assertEqual(len(result.path), manhattan(grid.start_node, grid.end_node) + 1)
                self.assert_valid_path(grid, result.path, grid.start_node, grid.end_node)

    def test_corridor_maze(self):
        for cls in PATHFINDERS.values():
            grid = self.create_corridor_maze()
            result = cls(grid).run_all()
            with self.subTest(algo=cls.name):
                self.assertTrue(result.success)
                self.assert_valid_path(grid, result.path, grid.start_node, grid.end_node)

        # Only one route exists, so every optimal search agrees on its length
        lengths = {cls.name: len(cls(self.create_corridor_maze()).run_all().path) for cls in OPTIMAL}
        self.assertEqual(set(lengths.values()), {11}, lengths)

    def test_walled_off_target(self):
        walls = [(2, c) for c in range(6)]
        for cls in PATHFINDERS.values():
            grid = self.create_grid(5, 6, (0, 0), (4, 5), walls)
            result = cls(grid).run_all()
            with self.subTest(algo=cls.name):
                self.assertFalse(result.success)
                self.assertFalse(result.cancelled)
                self.assertEqual(result.path, [])
                # Everything above the wall gets explored
                self.assertEqual(len(result.visited_nodes), 12)

    def test_start_equals_end(self):
        for cls in PATHFINDERS.values():
            grid = PathGrid(3, 3)
            node = grid.node(1, 1)
            result = cls(grid).run_all(node, node)
            with self.subTest(algo=cls.name):
                self.assertTrue(result.success)
                self.assertEqual(result.path, [node])

    def test_visit_callback(self):
        for cls in PATHFINDERS.values():
            grid = self.create_corridor_maze()
            seen = []
            result = cls(grid, seen.append).run_all()
            with self.subTest(algo=cls.name):
                self.assertEqual(seen, result.visited_nodes)
                self.assertEqual(len(set(map(id, seen))), len(seen), "node reported twice")
                self.assertTrue(all(not n.is_wall for n in seen))
                self.assertIs(seen[0], grid.start_node)
                self.assertIs(seen[-1], grid.end_node)

    def test_repeated_runs_are_independent(self):
        grid = self.create_grid(6, 6, (0, 0), (5, 5), [(2, 2), (3, 3)])
        first = BFS(grid).run_all()
        DFS(grid).run_all()
        second = BFS(grid).run_all()
        self.assertEqual([n.pos for n in first.path], [n.pos for n in second.path])
        self.assertEqual(len(first.visited_nodes), len(second.visited_nodes))

    def test_dfs_discards_stale_entries(self):
        # On an open grid DFS pushes shared neighbors more than once
        grid = self.create_grid(4, 4, (0, 0), (3, 3))
        result = DFS(grid).run_all()
        self.assertTrue(result.success)
        self.assertEqual(len(set(map(id, result.visited_nodes))), len(result.visited_nodes))
        self.assert_valid_path(grid, result.path, grid.start_node, grid.end_node)

    def test_astar_explores_no_more_than_dijkstra(self):
        grid = self.create_grid(10, 10, (0, 0), (9, 9))
        astar = AStar(grid).run_all()
        astar_visited = len(astar.visited_nodes)
        self.assertEqual(grid.end_node.heuristic, 0)
        dijkstra_visited = len(Dijkstra(grid).run_all().visited_nodes)
        self.assertLessEqual(astar_visited, dijkstra_visited)

    def test_astar_updates_open_node_on_shorter_route(self):
        # S . . .
        # . # # .
        # . . X .
        # # # E #
        walls = [(1, 1), (1, 2), (3, 0), (3, 1), (3, 3)]
        grid = self.create_grid(4, 4, (0, 0), (3, 2), walls)
        bias = {(1, 0): 10, (2, 2): 20}

        class BiasedAStar(AStar):
            # Steers the search round the long right-hand side first
            def estimate(self, node, end):
                return bias.get(node.pos, 0)

        result = BiasedAStar(grid).run_all()
        x = grid.node(2, 2)

        self.assertTrue(result.success)
        self.assertEqual([n.pos for n in result.visited_nodes], [
            (0, 0), (0, 1), (0, 2), (0, 3), (1, 3), (2, 3), (1, 0), (2, 0), (2, 1), (2, 2), (3, 2)
        ])
        # Reached from (2, 3) at distance 6 first, then improved through (2, 1)
        self.assertEqual(x.distance, 4)
        self.assertIs(grid.previous_of(x), grid.node(2, 1))
        self.assertEqual([n.pos for n in result.path], [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2), (3, 2)])

    def test_distances_recorded(self):
        grid = self.create_grid(4, 4, (0, 0), (3, 3))
        result = Dijkstra(grid).run_all()
        self.assertEqual([n.distance for n in result.path], list(range(7)))

    def test_missing_endpoints(self):
        grid = PathGrid(3, 3)
        with self.assertRaises(ValueError):
            BFS(grid).run_all()
        grid.set_start(0, 0)
        with self.assertRaises(ValueError):
            BFS(grid).run_all()

    def test_foreign_nodes(self):
        grid = self.create_grid(3, 3, (0, 0), (2, 2))
        other = PathGrid(3, 3)
        with self.assertRaises(ValueError):
            BFS(grid).run_all(grid.start_node, other.node(2, 2))

    def test_unknown_algorithm(self):
        with self.assertRaises(ValueError):
            get_pathfinder("bellman-ford")


class TestPathfindingCancellation(unittest.IsolatedAsyncioTestCase):
    async def test_cancel_mid_search(self):
        for cls in PATHFINDERS.values():
            grid = PathGrid(8, 8)
            grid.set_start(0, 0)
            grid.set_end(7, 7)
            stop = StopFlag()
            seen = []

            def on_visit(node):
                seen.append(node)
                if len(seen) == 3:
                    stop.set()

            result = await cls(grid, on_visit, 0, stop).run()
            with self.subTest(algo=cls.name):
                self.assertTrue(result.cancelled)
                self.assertFalse(result.success)
                self.assertEqual(result.path, [])
                self.assertEqual(len(result.visited_nodes), 3)

    async def test_cancel_before_start(self):
        grid = PathGrid(4, 4)
        grid.set_start(0, 0)
        grid.set_end(3, 3)
        stop = StopFlag()
        stop.set()
        seen = []
        result = await breadth_first_search(grid, grid.start_node, grid.end_node, seen.append, 0, stop)
        self.assertTrue(result.cancelled)
        self.assertEqual(seen, [])

    async def test_function_wrappers(self):
        for fn in (breadth_first_search, depth_first_search, dijkstra, a_star):
            grid = PathGrid(3, 4)
            grid.set_start(0, 0)
            grid.set_end(2, 3)
            result = await fn(grid, grid.start_node, grid.end_node)
            self.assertTrue(result.success, fn.__name__)
            self.assertIs(result.path[-1], grid.end_node)


if __name__ == '__main__':
    unittest.main()
