#Maze generation and search playground
#Builds a perfect maze (randomized Kruskal over a union-find) on an odd/even lattice
#Then runs DFS, BFS, bidirectional BFS and A* over the same maze and records a replayable trace
#
#To run this code, open terminal, follow directories to where the files are then run "python3 maze_gen.py"
#To print metrics for several mazes, run "python3 maze_gen.py --mode cli --runs 10 --csv-output results.csv"

from __future__ import annotations

import argparse
import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


class CellState(IntEnum):
    PATH = 0
    WALL = 1
    VISITED = 2
    BACKTRACK = 3
    START_END = 4
    FINAL_PATH = 5


class Direction(Enum):
    NONE = (0, 0)
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> Coord:
        return self.value


#Expansion order shared by every engine
DIRS: Sequence[Direction] = (Direction.DOWN, Direction.RIGHT, Direction.UP, Direction.LEFT)


def direction_between(a: Coord, b: Coord) -> Direction:
    delta = (b[0] - a[0], b[1] - a[1])
    for direction in DIRS:
        if direction.delta == delta:
            return direction
    return Direction.NONE


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class Tag(Enum):
    #Role of a trace entry, each one paints a cell state on replay
    PLAIN = None
    MARKER = CellState.START_END
    FRONTIER = CellState.VISITED
    BACKTRACK = CellState.BACKTRACK
    FINAL_PATH = CellState.FINAL_PATH

    @property
    def cell_state(self) -> Optional[CellState]:
        return self.value


@dataclass(eq=False)
class Point:
    """A grid position plus the search metadata attached to it.

    Identity is the coordinate alone: two points at the same (x, y) compare
    equal and hash alike whatever their cost, direction or tag.
    """

    x: int
    y: int
    step: int = 0
    h_cost: int = 0
    direction: Direction = Direction.NONE
    tag: Tag = Tag.PLAIN

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)

    @property
    def f_cost(self) -> int:
        return self.step + self.h_cost

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.pos == other.pos

    def __hash__(self) -> int:
        return hash(self.pos)


class UnionFind:
    #Disjoint sets over logical cell ids, path compression + union by size

    def __init__(self, n: int):
        self.parent = list(range(n))
        self.size = [1] * n

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.size[ra] < self.size[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        self.size[ra] += self.size[rb]
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)


TEXT_GLYPHS = {
    CellState.PATH: " ",
    CellState.WALL: "#",
    CellState.VISITED: ".",
    CellState.BACKTRACK: "x",
    CellState.START_END: "o",
    CellState.FINAL_PATH: "*",
}


class Grid:
    #(m+1) x (n+1) lattice, only [1, m] x [1, n] is addressable
    #Odd coordinates are logical cells, even coordinates between them are walls

    def __init__(self, m: int, n: int, width: int = 0, height: int = 0):
        if m < 2 or n < 2:
            raise ValueError(f"grid must be at least 2x2, got {m}x{n}")
        self.m = m
        self.n = n
        self.width = width
        self.height = height
        self.sx = 1
        self.sy = 1
        self.lattice: List[List[int]] = [
            [int(CellState.WALL) for _ in range(m + 1)] for _ in range(n + 1)
        ]

    @classmethod
    def with_size(
        cls,
        m: int,
        n: int,
        width: int,
        height: int,
        rng_seed: Optional[int] = None,
    ) -> "Grid":
        grid = cls(m, n, width, height)
        grid.generate(rng_seed)
        return grid

    @classmethod
    def new(cls, rng_seed: Optional[int] = None) -> "Grid":
        return cls.with_size(56, 56, 560, 560, rng_seed)

    def generate(self, rng_seed: Optional[int] = None) -> int:
        #Kruskal with unit weights: shuffle every candidate wall, knock it down when it joins two components
        rng = random.Random(rng_seed)
        cells_x = self.m // 2
        cells_y = self.n // 2

        edges: List[Tuple[Coord, Coord]] = []
        for y in range(1, self.n, 2):
            for x in range(1, self.m, 2):
                if x + 2 < self.m:
                    edges.append(((x, y), (x + 2, y)))
                if y + 2 < self.n:
                    edges.append(((x, y), (x, y + 2)))
        rng.shuffle(edges)

        uf = UnionFind(cells_x * cells_y)

        sx, sy = self.start()
        ex, ey = self.end()
        self.set_cell(sx, sy, CellState.PATH)
        self.set_cell(ex, ey, CellState.PATH)

        carved = 0
        for (x1, y1), (x2, y2) in edges:
            if not uf.union(self._cell_index(x1, y1, cells_x), self._cell_index(x2, y2, cells_x)):
                continue
            self.set_cell(x1, y1, CellState.PATH)
            self.set_cell(x2, y2, CellState.PATH)
            self.set_cell((x1 + x2) // 2, (y1 + y2) // 2, CellState.PATH)
            carved += 1

        logger.debug(
            "Generated %dx%d maze: %d logical cells, %d passages carved",
            self.m, self.n, cells_x * cells_y, carved,
        )
        return carved

    @staticmethod
    def _cell_index(x: int, y: int, cells_x: int) -> int:
        return (y // 2) * cells_x + (x // 2)

    def in_bounds(self, x: int, y: int) -> bool:
        return 1 <= x <= self.m and 1 <= y <= self.n

    def is_passable(self, x: int, y: int) -> bool:
        return self.get_cell(x, y) == CellState.PATH

    def get_cell(self, x: int, y: int) -> CellState:
        if not self.in_bounds(x, y):
            return CellState.WALL
        return CellState(self.lattice[y][x])

    def set_cell(self, x: int, y: int, state: CellState) -> None:
        if self.in_bounds(x, y):
            self.lattice[y][x] = int(state)

    def start(self) -> Coord:
        return (self.sx, self.sy)

    def end(self) -> Coord:
        return (self.m - 1, self.n - 1)

    def cells(self) -> Iterator[Coord]:
        for y in range(1, self.n + 1):
            for x in range(1, self.m + 1):
                yield x, y

    def clone(self) -> "Grid":
        copy = Grid(self.m, self.n, self.width, self.height)
        copy.sx, copy.sy = self.sx, self.sy
        copy.lattice = [list(row) for row in self.lattice]
        return copy

    def render_text(self) -> str:
        start, end = self.start(), self.end()
        lines = []
        for y in range(self.n + 1):
            row = []
            for x in range(self.m + 1):
                if (x, y) == start:
                    row.append("S")
                elif (x, y) == end:
                    row.append("E")
                else:
                    row.append(TEXT_GLYPHS.get(self.get_cell(x, y), "?"))
            lines.append("".join(row))
        return "\n".join(lines)


@dataclass
class MazeConfig:
    width: int = 56
    height: int = 56
    cell_size: int = 10
    seed: Optional[int] = None
    steps_per_frame: int = 1
    fps: int = 60
    algorithms: List[str] = field(default_factory=lambda: ["DFS", "BFS", "DBFS", "A*"])

    def build_grid(self, seed: Optional[int] = None) -> Grid:
        return Grid.with_size(
            self.width,
            self.height,
            self.width * self.cell_size,
            self.height * self.cell_size,
            seed if seed is not None else self.seed,
        )


#CLI + visualization


def maze_dimension(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text!r} is not an integer")
    if value < 4 or value % 2:
        raise argparse.ArgumentTypeError(f"maze dimensions must be even and at least 4, got {value}")
    return value


def build_config(args) -> MazeConfig:
    names = ["DFS", "BFS", "DBFS", "A*"] if args.algorithm == "all" else [args.algorithm]
    return MazeConfig(
        width=args.width,
        height=args.height,
        cell_size=args.tile_size,
        seed=args.seed,
        steps_per_frame=args.steps_per_frame,
        algorithms=names,
    )


def run_visual_mode(config: MazeConfig):
    from visualizer import MazeVisualizer

    print(f"Launching visualizer for a {config.width}x{config.height} maze")
    viewer = MazeVisualizer(config)
    viewer.run()


def run_cli_mode(config: MazeConfig, runs: int, csv_output: Optional[str], print_maze: bool):
    from solvers import Algorithm, run

    algorithms = [Algorithm.from_name(name) for name in config.algorithms]
    rows = []
    for run_idx in range(runs):
        seed = config.seed + run_idx if config.seed is not None else random.randint(0, 1_000_000_000)
        seed_desc = seed if config.seed is not None else f"random({seed})"
        grid = config.build_grid(seed)
        print(f"\nRun {run_idx + 1}/{runs} | maze {config.width}x{config.height} | seed: {seed_desc}")
        if print_maze:
            print(grid.render_text())
        for algorithm in algorithms:
            start_time = time.perf_counter()
            result = run(grid, algorithm)
            elapsed = time.perf_counter() - start_time
            found = "yes" if result.found else "no"
            print(f"[{algorithm.short_name}] found={found} elapsed={elapsed:.3f}s steps={len(result.steps)} path_len={result.path_length}")
            rows.append({
                "run": run_idx + 1,
                "seed": seed,
                "algorithm": algorithm.short_name,
                "found": result.found,
                "elapsed": f"{elapsed:.6f}",
                "steps": len(result.steps),
                "path_length": result.path_length,
            })

    if csv_output:
        import csv

        fieldnames = ["run", "seed", "algorithm", "found", "elapsed", "steps", "path_length"]
        with open(csv_output, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)
        print(f"\nWrote {len(rows)} rows to {csv_output}")
    return rows


def prompt_for_mode():
    response = input("Run visualizer? (y/n): ").strip().lower()
    return "visual" if response.startswith("y") else "cli"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Maze generator with DFS/BFS/bidirectional BFS/A* search traces.")
    parser.add_argument("--mode", choices=["visual", "cli"], help="Choose 'visual' for the pygame viewer or 'cli' for text metrics.")
    parser.add_argument("--width", type=maze_dimension, default=56, help="Lattice width (even, logical cells = width/2).")
    parser.add_argument("--height", type=maze_dimension, default=56, help="Lattice height (even, logical cells = height/2).")
    parser.add_argument("--algorithm", choices=["all", "DFS", "BFS", "DBFS", "A*"], default="all", help="Which search to run.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for maze generation (default: random).")
    parser.add_argument("--runs", type=int, default=1, help="Number of mazes to generate in CLI mode.")
    parser.add_argument("--csv-output", type=str, default=None, help="Path to write CSV metrics.")
    parser.add_argument("--print-maze", action="store_true", help="Print each generated maze as text in CLI mode.")
    parser.add_argument("--tile-size", type=int, default=10, help="Base tile size for visual mode; auto-scales to fit the screen.")
    parser.add_argument("--steps-per-frame", type=int, default=1, help="Trace entries replayed per frame in visual mode.")
    parser.add_argument("--verbose", action="store_true", help="Log generation and search details.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")
    config = build_config(args)
    mode = args.mode or prompt_for_mode()
    if mode == "visual":
        run_visual_mode(config)
    else:
        run_cli_mode(config, args.runs, args.csv_output, args.print_maze)


if __name__ == "__main__":
    main()
