import pygame
from algoviz.core.cancel import StopFlag
from algoviz.core.elements import ElementState


class Renderer:
    COLOR_BG = (10, 10, 10)
    COLOR_WALL = (200, 200, 200)
    COLOR_EMPTY = (30, 30, 36)
    COLOR_VISITED = (60, 100, 160)  # Blue tint
    COLOR_PATH = (255, 215, 0)  # Gold
    COLOR_START = (40, 200, 90)
    COLOR_END = (220, 60, 60)

    STATE_COLORS = {
        ElementState.NORMAL: (100, 150, 200),
        ElementState.COMPARING: (250, 200, 40),
        ElementState.SWAPPING: (230, 70, 70),
        ElementState.SORTED: (60, 190, 110),
        ElementState.PIVOT: (170, 90, 220),
    }

    def __init__(self, board=None, grid=None, width=1280, height=720, record=False, stop: StopFlag = None,
                 title="algoviz"):
        if (board is None) == (grid is None):
            raise ValueError("Renderer needs exactly one of board or grid")
        self.board = board
        self.grid = grid
        self.screen_width = width
        self.screen_height = height
        self.title = title
        self.stop = stop if stop is not None else StopFlag()
        self.padding = 20

        from algoviz.viz.recorder import VideoRecorder
        self.recorder = VideoRecorder(active=record, prefix=title.replace(" ", "_").lower())

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.windowed = False
        self.status = ""

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(self.title)
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.windowed = True

    def init_offscreen(self):
        """Draw into a plain surface, no window or event queue."""
        self.surface = pygame.Surface((self.screen_width, self.screen_height))

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT or (event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE):
                # Closing the window also stops a run in progress
                self.running = False
                self.stop.set()
            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h

    def draw_bars(self):
        elements = self.board.elements
        if not elements:
            return

        area_w = self.screen_width - self.padding * 2
        area_h = self.screen_height - self.padding * 3
        bar_w = area_w / len(elements)
        top = max(max(e.value for e in elements), 1)

        for i, e in enumerate(elements):
            h = max(1, int(area_h * max(e.value, 0) / top))
            x = int(self.padding + i * bar_w)
            y = self.screen_height - self.padding - h
            w = max(1, int(bar_w) - 1)
            pygame.draw.rect(self.surface, self.STATE_COLORS[e.state], (x, y, w, h))

    def cell_size(self) -> int:
        avail_w = (self.screen_width - self.padding * 2) // self.grid.cols
        avail_h = (self.screen_height - self.padding * 3) // self.grid.rows
        return max(1, min(avail_w, avail_h))

    def cell_color(self, node):
        if node.is_start:
            return self.COLOR_START
        if node.is_end:
            return self.COLOR_END
        if node.is_wall:
            return self.COLOR_WALL
        if node.is_path:
            return self.COLOR_PATH
        if node.is_visited:
            return self.COLOR_VISITED
        return self.COLOR_EMPTY

    def draw_grid(self):
        size = self.cell_size()
        off_x = (self.screen_width - size * self.grid.cols) // 2
        off_y = self.padding * 2

        for node in self.grid.iter_nodes():
            px = off_x + node.col * size
            py = off_y + node.row * size
            inner = size - 1 if size > 3 else size
            pygame.draw.rect(self.surface, self.cell_color(node), (px, py, inner, inner))

    def draw(self):
        self.surface.fill(self.COLOR_BG)
        if self.board is not None:
            self.draw_bars()
        else:
            self.draw_grid()

    def draw_hud(self):
        if self.font is None:
            return
        if self.board is not None:
            info = f"{self.board.algorithm}  comparisons: {self.board.comparisons}  swaps: {self.board.swaps}"
        else:
            info = f"{self.grid.rows}x{self.grid.cols}"
        rec_status = "  REC" if self.recorder.active else ""
        for i, text in enumerate([info + rec_status, self.status]):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 4 + i * 18))

    def frame(self):
        if self.windowed:
            self.handle_input()
        self.draw()
        self.draw_hud()
        if self.windowed:
            pygame.display.flip()
            self.clock.tick()
        self.recorder.capture_frame(self.surface)

    def on_step(self, step):
        if step.message:
            self.status = step.message
        self.frame()

    def on_visit(self, node):
        self.status = f"Visiting ({node.row}, {node.col})"
        self.frame()

    def hold(self):
        """Keeps the final frame on screen until the window is closed."""
        self.draw()
        self.draw_hud()
        self.recorder.capture_still(self.surface)
        while self.running and self.windowed:
            self.handle_input()
            self.draw()
            self.draw_hud()
            pygame.display.flip()
            self.clock.tick(30)

    def close(self):
        self.recorder.stop()
        # init_window may have failed after pygame.init()
        if pygame.get_init():
            pygame.quit()
