#Search engines over a generated maze
#Each engine works on a private copy of the grid, marks cells as it explores,
#and returns every event it produced so the run can be replayed frame by frame

from __future__ import annotations

import heapq
import itertools
import logging
from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Tuple

from maze_gen import (
    DIRS,
    CellState,
    Coord,
    Direction,
    Grid,
    Point,
    Tag,
    direction_between,
    manhattan,
)

logger = logging.getLogger(__name__)

Predecessors = Dict[Coord, Point]


@dataclass
class SearchResult:
    found: bool
    steps: List[Point]
    path: List[Point]
    path_length: int
    grid: Grid


# Solver utilities


def walk_predecessors(pre: Predecessors, node: Point, root: Point) -> Tuple[List[Point], bool]:
    #Follows predecessor links from node back to root, returns (chain node..root, complete)
    #Bounded by the size of the map so a corrupted chain can never loop
    chain = [node]
    current = node
    budget = len(pre)
    while current != root:
        prev = pre.get(current.pos)
        if prev is None or budget <= 0:
            logger.warning("Predecessor chain broken at %s before reaching %s", current.pos, root.pos)
            return chain, False
        chain.append(prev)
        current = prev
        budget -= 1
    return chain, True


def orient_path(cells: List[Point]) -> List[Point]:
    #Rebuilds directions from consecutive coordinates, last cell points nowhere
    path = []
    for i, cell in enumerate(cells):
        direction = direction_between(cell.pos, cells[i + 1].pos) if i + 1 < len(cells) else Direction.NONE
        path.append(Point(cell.x, cell.y, i, 0, direction, Tag.FINAL_PATH))
    return path


def reconstruct_path(pre: Predecessors, start: Point, goal: Point) -> List[Point]:
    chain, complete = walk_predecessors(pre, goal, start)
    if not complete:
        return []
    chain.reverse()
    return orient_path(chain)


def trace_path(grid: Grid, path: List[Point], steps: List[Point]) -> None:
    #Paints the interior of a found path and records it goal-first, as the walk back produced it
    for cell in reversed(path[1:-1]):
        grid.set_cell(cell.x, cell.y, CellState.FINAL_PATH)
        steps.append(replace(cell, tag=Tag.FINAL_PATH))


def _finish(pristine: Grid, found: bool, steps: List[Point], path: List[Point], path_length: int) -> SearchResult:
    #The returned grid is the trace replayed, the engine's scratch copy is dropped
    return SearchResult(found, steps, path, path_length, replay(pristine, steps))


def _trivial(pristine: Grid, start: Point) -> SearchResult:
    marker = replace(start, tag=Tag.MARKER)
    return _finish(pristine, True, [marker, replace(marker)], orient_path([start]), 0)


#Engines


def dfs_search(grid: Grid, start: Coord, goal: Coord) -> SearchResult:
    #Stack holds the path in progress, first open neighbor in DIRS order wins
    #No path list, the depth at which the goal is reached is the reported length
    pristine, grid = grid, grid.clone()
    origin = Point(*start, tag=Tag.MARKER)
    target = Point(*goal)
    if origin == target:
        return _trivial(pristine, origin)

    steps: List[Point] = [replace(origin)]
    stack: List[Point] = [origin]
    grid.set_cell(origin.x, origin.y, CellState.START_END)
    found = False
    final_step = 0

    while stack:
        current = stack[-1]
        steps.append(replace(current))

        if current == target:
            grid.set_cell(current.x, current.y, CellState.START_END)
            steps.append(replace(current, direction=Direction.NONE, tag=Tag.MARKER))
            found = True
            final_step = current.step
            break

        for direction in DIRS:
            dx, dy = direction.delta
            nx, ny = current.x + dx, current.y + dy
            if grid.is_passable(nx, ny):
                stack.append(Point(nx, ny, current.step + 1, 0, direction, Tag.FRONTIER))
                grid.set_cell(nx, ny, CellState.VISITED)
                break
        else:
            stack.pop()
            grid.set_cell(current.x, current.y, CellState.BACKTRACK)
            steps.append(replace(current, step=current.step - 1, direction=Direction.NONE, tag=Tag.BACKTRACK))

    logger.debug("DFS %s -> %s: found=%s depth=%d trace=%d", start, goal, found, final_step, len(steps))
    return _finish(pristine, found, steps, [], final_step)


def bfs_search(grid: Grid, start: Coord, goal: Coord) -> SearchResult:
    #FIFO frontier, cells are marked on enqueue so the first dequeue of the goal is the shortest depth
    pristine, grid = grid, grid.clone()
    origin = Point(*start, tag=Tag.MARKER)
    target = Point(*goal)
    if origin == target:
        return _trivial(pristine, origin)

    steps: List[Point] = [replace(origin)]
    queue: Deque[Point] = deque([origin])
    pre: Predecessors = {}
    grid.set_cell(origin.x, origin.y, CellState.START_END)
    found = False
    final_step = 0
    path: List[Point] = []

    while queue:
        current = queue.popleft()
        steps.append(replace(current))

        if current == target:
            found = True
            final_step = current.step
            grid.set_cell(current.x, current.y, CellState.START_END)
            steps.append(replace(current, tag=Tag.MARKER))
            path = reconstruct_path(pre, origin, current)
            trace_path(grid, path, steps)
            steps.append(replace(origin))
            break

        for direction in DIRS:
            dx, dy = direction.delta
            nx, ny = current.x + dx, current.y + dy
            if not grid.is_passable(nx, ny):
                continue
            queue.append(Point(nx, ny, current.step + 1, 0, direction, Tag.FRONTIER))
            pre[(nx, ny)] = replace(current, direction=direction)
            grid.set_cell(nx, ny, CellState.VISITED)

    logger.debug("BFS %s -> %s: found=%s length=%d visited=%d", start, goal, found, final_step, len(pre))
    return _finish(pristine, found, steps, path, final_step)


def bidirectional_search(grid: Grid, start: Coord, goal: Coord) -> SearchResult:
    #Two FIFO frontiers, the smaller queue expands next (ties go to the start side)
    #Start side marks VISITED, end side marks BACKTRACK, touching the other side's mark is the meeting
    pristine, grid = grid, grid.clone()
    origin = Point(*start, tag=Tag.MARKER)
    target = Point(*goal, tag=Tag.MARKER)
    if origin == target:
        return _trivial(pristine, origin)

    sides = {
        True: (deque([origin]), {}, CellState.VISITED, Tag.FRONTIER, target),
        False: (deque([target]), {}, CellState.BACKTRACK, Tag.BACKTRACK, origin),
    }
    start_queue, start_pre = sides[True][0], sides[True][1]
    end_queue, end_pre = sides[False][0], sides[False][1]

    steps: List[Point] = [replace(origin), replace(target)]
    grid.set_cell(origin.x, origin.y, CellState.START_END)
    grid.set_cell(target.x, target.y, CellState.START_END)
    meeting: Optional[Tuple[Point, Point]] = None

    while start_queue and end_queue and meeting is None:
        expand_start = len(start_queue) <= len(end_queue)
        queue, pre, mark, tag, other_root = sides[expand_start]
        _, _, other_mark, _, _ = sides[not expand_start]

        current = queue.popleft()
        steps.append(Point(current.x, current.y, current.step, 0, Direction.NONE, current.tag))

        for direction in DIRS:
            dx, dy = direction.delta
            nx, ny = current.x + dx, current.y + dy
            cell = grid.get_cell(nx, ny)
            if cell == CellState.PATH:
                grid.set_cell(nx, ny, mark)
                queue.append(Point(nx, ny, current.step + 1, 0, direction, tag))
                pre[(nx, ny)] = Point(current.x, current.y, current.step, 0, direction)
            elif cell == other_mark or (nx, ny) == other_root.pos:
                near, far = Point(current.x, current.y), Point(nx, ny)
                meeting = (near, far) if expand_start else (far, near)
                break

    if meeting is None:
        logger.debug("DBFS %s -> %s: frontiers exhausted without meeting", start, goal)
        return _finish(pristine, False, steps, [], 0)

    start_meet, end_meet = meeting
    head, head_complete = walk_predecessors(start_pre, start_meet, origin)
    tail, tail_complete = walk_predecessors(end_pre, end_meet, target)
    if not (head_complete and tail_complete):
        return _finish(pristine, False, steps, [], 0)
    head.reverse()
    path = orient_path(head + tail)

    for i, cell in enumerate(path[1:-1], start=1):
        grid.set_cell(cell.x, cell.y, CellState.FINAL_PATH)
        steps.append(replace(cell, step=i))
    steps.append(replace(origin))
    steps.append(Point(target.x, target.y, len(path) - 1, 0, Direction.NONE, Tag.MARKER))

    path_length = max(len(path) - 1, 0)
    logger.debug(
        "DBFS %s -> %s: met at %s|%s length=%d",
        start, goal, start_meet.pos, end_meet.pos, path_length,
    )
    return _finish(pristine, True, steps, path, path_length)


def astar_search(grid: Grid, start: Coord, goal: Coord) -> SearchResult:
    #Min-heap on f = g + manhattan, equal f pops in insertion order
    #Duplicates are allowed in the heap, cells are closed when first generated
    pristine, grid = grid, grid.clone()
    origin = Point(*start, 0, manhattan(start, goal), tag=Tag.MARKER)
    target = Point(*goal)
    if origin == target:
        return _trivial(pristine, origin)

    counter = itertools.count()
    open_heap: List[Tuple[int, int, Point]] = [(origin.f_cost, next(counter), origin)]
    pre: Predecessors = {}
    steps: List[Point] = [replace(origin)]
    grid.set_cell(origin.x, origin.y, CellState.START_END)
    found = False
    final_step = 0
    path: List[Point] = []

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        steps.append(replace(current))

        if current == target:
            found = True
            final_step = current.step
            grid.set_cell(current.x, current.y, CellState.START_END)
            steps.append(replace(current, tag=Tag.MARKER))
            path = reconstruct_path(pre, origin, current)
            trace_path(grid, path, steps)
            steps.append(replace(origin))
            break

        for direction in DIRS:
            dx, dy = direction.delta
            nx, ny = current.x + dx, current.y + dy
            if not grid.is_passable(nx, ny):
                continue
            neighbor = Point(nx, ny, current.step + 1, manhattan((nx, ny), goal), direction, Tag.FRONTIER)
            heapq.heappush(open_heap, (neighbor.f_cost, next(counter), neighbor))
            pre[(nx, ny)] = current
            grid.set_cell(nx, ny, CellState.VISITED)

    logger.debug("A* %s -> %s: found=%s length=%d visited=%d", start, goal, found, final_step, len(pre))
    return _finish(pristine, found, steps, path, final_step)


#Dispatch

Engine = Callable[[Grid, Coord, Coord], SearchResult]


class Algorithm(Enum):
    DFS = ("DFS (Depth-First Search)", "DFS", (240, 144, 41))
    BFS = ("BFS (Breadth-First Search)", "BFS", (66, 135, 245))
    DBFS = ("DBFS (Bidirectional Breadth-First Search)", "DBFS", (177, 110, 235))
    ASTAR = ("A* (A-Star Heuristic Search)", "A*", (62, 201, 115))

    @property
    def full_name(self) -> str:
        return self.value[0]

    @property
    def short_name(self) -> str:
        return self.value[1]

    @property
    def color(self) -> Tuple[int, int, int]:
        return self.value[2]

    @property
    def engine(self) -> Engine:
        return ENGINES[self]

    @classmethod
    def from_name(cls, text: str) -> "Algorithm":
        wanted = text.strip().upper()
        for algorithm in cls:
            if wanted in (algorithm.short_name, algorithm.name):
                return algorithm
        raise ValueError(f"unknown algorithm {text!r}, expected one of {[a.short_name for a in cls]}")


ENGINES: Dict[Algorithm, Engine] = {
    Algorithm.DFS: dfs_search,
    Algorithm.BFS: bfs_search,
    Algorithm.DBFS: bidirectional_search,
    Algorithm.ASTAR: astar_search,
}


def run(
    grid: Grid,
    algorithm: Algorithm,
    start: Optional[Coord] = None,
    goal: Optional[Coord] = None,
) -> SearchResult:
    return algorithm.engine(
        grid,
        start if start is not None else grid.start(),
        goal if goal is not None else grid.end(),
    )


def run_algorithm(grid: Grid, algorithm: Algorithm) -> Tuple[List[Point], bool, int]:
    result = run(grid, algorithm)
    return result.steps, result.found, result.path_length


#Replay


def apply_step(grid: Grid, step: Point) -> None:
    state = step.tag.cell_state
    if state is not None:
        grid.set_cell(step.x, step.y, state)


def replay(pristine: Grid, steps: List[Point], upto: Optional[int] = None) -> Grid:
    view = pristine.clone()
    for step in steps[:upto]:
        apply_step(view, step)
    return view


@dataclass
class TracePlayer:
    #Moves a step index through a precomputed trace, forwards or backwards
    name: str
    color: Tuple[int, int, int]
    pristine: Grid
    steps: List[Point]
    found: bool = False
    path_length: int = 0
    path: List[Point] = field(default_factory=list)
    step_index: int = field(default=0, init=False)
    view: Grid = field(init=False)

    def __post_init__(self):
        self.view = self.pristine.clone()

    @classmethod
    def for_algorithm(cls, grid: Grid, algorithm: Algorithm) -> "TracePlayer":
        result = run(grid, algorithm)
        return cls(algorithm.short_name, algorithm.color, grid, result.steps, result.found, result.path_length, result.path)

    @property
    def finished(self) -> bool:
        return self.step_index >= len(self.steps)

    def advance(self, count: int = 1):
        for _ in range(count):
            if self.finished:
                break
            apply_step(self.view, self.steps[self.step_index])
            self.step_index += 1

    def step_backward(self):
        if self.step_index == 0:
            return
        self.step_index -= 1
        self.view = replay(self.pristine, self.steps, self.step_index)

    def reset(self):
        self.step_index = 0
        self.view = self.pristine.clone()

    def path_points(self) -> List[Tuple[int, int, Direction]]:
        return [(p.x, p.y, p.direction) for p in orient_path(self.path)]
