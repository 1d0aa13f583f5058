#Pygame replay viewer for search traces

from __future__ import annotations

import pygame

from maze_gen import CellState, MazeConfig
from solvers import Algorithm, TracePlayer

#color schemes for cell states
CELL_COLORS = {
    CellState.PATH: (255, 255, 255),
    CellState.WALL: (0, 10, 0),
    CellState.VISITED: (135, 206, 235),
    CellState.BACKTRACK: (255, 106, 106),
    CellState.START_END: (255, 255, 0),
    CellState.FINAL_PATH: (127, 255, 212),
}


def arrow_polygon(x, y, tile_size, direction, offset=(0, 0)):
    #Triangle inside cell (x, y) pointing along direction, None for the last cell
    dx, dy = direction.delta
    if (dx, dy) == (0, 0):
        return None
    cx = offset[0] + x * tile_size + tile_size / 2
    cy = offset[1] + y * tile_size + tile_size / 2
    half = tile_size * 0.35
    tip = (cx + dx * half, cy + dy * half)
    left = (cx - dx * half - dy * half, cy - dy * half + dx * half)
    right = (cx - dx * half + dy * half, cy - dy * half - dx * half)
    return [tip, left, right]


class MazeVisualizer:
    #Replays one trace per algorithm side by side on the same maze

    def __init__(self, config: MazeConfig, stats_height=120, max_cols=2):
        self.config = config
        self.tile_size = config.cell_size
        self.stats_height = stats_height
        self.max_cols = max_cols
        self.algorithms = [Algorithm.from_name(name) for name in config.algorithms]
        self.grid = None
        self.players = []

    def new_maze(self, seed=None):
        self.grid = self.config.build_grid(seed)
        self.players = [TracePlayer.for_algorithm(self.grid, algorithm) for algorithm in self.algorithms]

    def _compute_layout(self, grid_cols, grid_rows, num_visualizers, container_w, container_h):
        num_cols = min(self.max_cols, max(1, num_visualizers))
        num_rows = (num_visualizers + num_cols - 1) // num_cols

        usable_w = max(320, container_w - 16)
        usable_h = max(240, container_h - 16)

        tile_size = self.tile_size
        stats_height = self.stats_height
        for _ in range(4):
            max_tile_w = max(2, usable_w // (grid_cols * num_cols))
            max_tile_h = max(2, (usable_h - stats_height * num_rows) // (grid_rows * num_rows))
            tile_size = max(2, min(max_tile_w, max_tile_h))
            line_height = max(16, int(18 * tile_size / 10))
            stats_height = max(70, line_height * 4)

        view_width = grid_cols * tile_size
        panel_height = grid_rows * tile_size + stats_height
        return tile_size, stats_height, view_width, panel_height, num_cols, num_rows

    def run(self):
        self.new_maze()
        grid_rows = self.grid.n + 1
        grid_cols = self.grid.m + 1

        pygame.init()
        display_info = pygame.display.Info()
        default_w = max(640, int(display_info.current_w * 0.9))
        default_h = max(480, int(display_info.current_h * 0.8))
        screen = pygame.display.set_mode((default_w, default_h), pygame.RESIZABLE)
        pygame.display.set_caption("Maze Search Replay")
        tile_size, stats_height, view_width, panel_height, num_cols, num_rows = (
            self._compute_layout(grid_cols, grid_rows, len(self.players), *screen.get_size())
        )
        font_size = max(14, int(18 * tile_size / 10))
        font = pygame.font.SysFont(None, font_size)
        clock = pygame.time.Clock()
        fullscreen = False
        paused = False
        show_arrows = True
        last_window_size = screen.get_size()
        line_height = max(16, int(18 * tile_size / 10))

        running = True
        while running:
            clock.tick(self.config.fps)
            tile_size, stats_height, view_width, panel_height, num_cols, num_rows = (
                self._compute_layout(grid_cols, grid_rows, len(self.players), *screen.get_size())
            )
            line_height = max(16, int(18 * tile_size / 10))
            new_font_size = max(14, line_height - 2)
            if new_font_size != font_size:
                font_size = new_font_size
                font = pygame.font.SysFont(None, font_size)
            for event in pygame.event.get():
                if event.type == pygame.QUIT or (
                    event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE
                ):
                    running = False
                if event.type == pygame.VIDEORESIZE and not fullscreen:
                    last_window_size = (event.w, event.h)
                    screen = pygame.display.set_mode(last_window_size, pygame.RESIZABLE)
                if event.type != pygame.KEYDOWN:
                    continue
                if event.key == pygame.K_f:
                    fullscreen = not fullscreen
                    if fullscreen:
                        display_info = pygame.display.Info()
                        screen = pygame.display.set_mode((display_info.current_w, display_info.current_h), pygame.FULLSCREEN)
                    else:
                        screen = pygame.display.set_mode(last_window_size, pygame.RESIZABLE)
                elif event.key == pygame.K_SPACE:
                    paused = not paused
                elif event.key == pygame.K_RIGHT:
                    for player in self.players:
                        player.advance()
                elif event.key == pygame.K_LEFT:
                    for player in self.players:
                        player.step_backward()
                elif event.key == pygame.K_r:
                    for player in self.players:
                        player.reset()
                elif event.key == pygame.K_n:
                    self.new_maze()
                elif event.key == pygame.K_a:
                    show_arrows = not show_arrows

            if not paused:
                for player in self.players:
                    player.advance(self.config.steps_per_frame)

            screen.fill((10, 10, 10))

            for idx, player in enumerate(self.players):
                col = idx % num_cols
                row = idx // num_cols
                offset_x = col * view_width
                offset_y = row * panel_height

                for gy, grid_row in enumerate(player.view.lattice):
                    for gx, value in enumerate(grid_row):
                        rect = pygame.Rect(
                            offset_x + gx * tile_size,
                            offset_y + gy * tile_size,
                            tile_size,
                            tile_size,
                        )
                        pygame.draw.rect(screen, CELL_COLORS[CellState(value)], rect)

                if show_arrows and player.finished:
                    for px, py, direction in player.path_points():
                        polygon = arrow_polygon(px, py, tile_size, direction, (offset_x, offset_y))
                        if polygon:
                            pygame.draw.polygon(screen, (40, 40, 160), polygon)

                pygame.draw.rect(
                    screen,
                    player.color,
                    pygame.Rect(offset_x, offset_y, view_width, grid_rows * tile_size),
                    width=2,
                )

                path_len = player.path_length if player.finished and player.found else "-"
                lines = [
                    f"{player.name}{' (paused)' if paused else ''}",
                    f"found: {player.found if player.finished else '...'}",
                    f"step: {player.step_index}/{len(player.steps)}",
                    f"path length: {path_len}",
                ]
                pad = 6
                overlay_height = line_height * len(lines) + pad * 2
                stats_rect = pygame.Rect(
                    offset_x,
                    offset_y + grid_rows * tile_size,
                    view_width,
                    max(stats_height, overlay_height),
                )
                pygame.draw.rect(screen, (25, 25, 25), stats_rect)

                for i, text in enumerate(lines):
                    surface = font.render(text, True, (235, 235, 235))
                    screen.blit(
                        surface,
                        (
                            stats_rect.x + pad,
                            stats_rect.y + pad + i * line_height,
                        ),
                    )

            pygame.display.flip()

        pygame.quit()
