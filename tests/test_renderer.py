import importlib.util
import unittest
import sys
import os
import shutil

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from algoviz.core.elements import ElementState, SortingStep
from algoviz.core.grid import PathGrid
from algoviz.playback.board import SortingBoard

HAS_VIZ = all(importlib.util.find_spec(m) for m in ("pygame", "cv2"))


@unittest.skipUnless(HAS_VIZ, "pygame/opencv not installed")
class TestRenderer(unittest.TestCase):
    def make(self, **kwargs):
        from algoviz.viz.renderer import Renderer
        renderer = Renderer(width=200, height=100, **kwargs)
        renderer.init_offscreen()
        return renderer

    def pixel(self, renderer, x, y):
        return tuple(renderer.surface.get_at((x, y)))[:3]

    def test_needs_exactly_one_model(self):
        from algoviz.viz.renderer import Renderer
        with self.assertRaises(ValueError):
            Renderer()
        with self.assertRaises(ValueError):
            Renderer(board=SortingBoard([1]), grid=PathGrid(2, 2))

    def test_bars_follow_states(self):
        board = SortingBoard([10, 10])
        renderer = self.make(board=board)
        renderer.frame()
        self.assertEqual(self.pixel(renderer, 30, 70), renderer.STATE_COLORS[ElementState.NORMAL])

        step = SortingStep.compare(0, 1, message="Comparing 10 and 10")
        board.apply(step)
        renderer.on_step(step)
        self.assertEqual(self.pixel(renderer, 30, 70), renderer.STATE_COLORS[ElementState.COMPARING])
        self.assertEqual(renderer.status, "Comparing 10 and 10")
        # Background above the bars
        self.assertEqual(self.pixel(renderer, 30, 10), renderer.COLOR_BG)

    def test_grid_cells(self):
        grid = PathGrid(2, 2)
        grid.set_start(0, 0)
        grid.set_end(1, 1)
        grid.set_wall(0, 1)
        renderer = self.make(grid=grid)
        renderer.frame()

        # 20px cells, centred horizontally, 40px from the top
        self.assertEqual(self.pixel(renderer, 85, 45), renderer.COLOR_START)
        self.assertEqual(self.pixel(renderer, 105, 45), renderer.COLOR_WALL)
        self.assertEqual(self.pixel(renderer, 85, 65), renderer.COLOR_EMPTY)
        self.assertEqual(self.pixel(renderer, 105, 65), renderer.COLOR_END)

        grid.node(1, 0).is_visited = True
        renderer.on_visit(grid.node(1, 0))
        self.assertEqual(self.pixel(renderer, 85, 65), renderer.COLOR_VISITED)
        self.assertEqual(renderer.status, "Visiting (1, 0)")

    def test_hold_returns_offscreen(self):
        renderer = self.make(board=SortingBoard([3, 1]))
        renderer.hold()
        renderer.close()


@unittest.skipUnless(HAS_VIZ, "pygame/opencv not installed")
class TestVideoRecorder(unittest.TestCase):
    def setUp(self):
        os.makedirs("test_out", exist_ok=True)

    def tearDown(self):
        shutil.rmtree("test_out", ignore_errors=True)

    def test_inactive_records_nothing(self):
        import pygame
        from algoviz.viz.recorder import VideoRecorder
        recorder = VideoRecorder(active=False)
        recorder.capture_frame(pygame.Surface((32, 32)))
        recorder.capture_still(pygame.Surface((32, 32)))
        recorder.stop()
        self.assertEqual(recorder.frame_count, 0)
        self.assertIsNone(recorder.output_file)

    def test_frames_keep_first_size(self):
        import pygame
        from algoviz.viz.recorder import VideoRecorder
        recorder = VideoRecorder(active=True, output_file="test_out/run.mp4", fps=10)
        recorder.capture_frame(pygame.Surface((64, 48)))
        recorder.capture_frame(pygame.Surface((80, 60)))
        recorder.capture_still(pygame.Surface((64, 48)), seconds=0.5)
        self.assertEqual(recorder.frame_size, (64, 48))
        self.assertEqual(recorder.frame_count, 7)
        recorder.stop()
        self.assertIsNone(recorder.writer)


if __name__ == '__main__':
    unittest.main()
