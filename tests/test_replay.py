import csv

import pytest

from maze_gen import CellState, Direction, Grid, MazeConfig, main, parse_args, run_cli_mode
from solvers import Algorithm, TracePlayer, replay, run


@pytest.fixture
def maze():
    return Grid.with_size(12, 12, 120, 120, rng_seed=42)


def test_player_walks_forward_and_back(maze):
    player = TracePlayer.for_algorithm(maze, Algorithm.BFS)
    assert player.step_index == 0
    assert not player.finished

    player.advance(5)
    assert player.step_index == 5
    after_five = [list(row) for row in player.view.lattice]

    player.advance(len(player.steps))
    assert player.finished
    assert player.step_index == len(player.steps)

    while player.step_index > 5:
        player.step_backward()
    assert player.view.lattice == after_five

    player.reset()
    assert player.step_index == 0
    assert player.view.lattice == maze.lattice


def test_step_backward_at_start_is_noop(maze):
    player = TracePlayer.for_algorithm(maze, Algorithm.DFS)
    player.step_backward()
    assert player.step_index == 0


def test_replay_matches_incremental_playback(maze):
    result = run(maze, Algorithm.ASTAR)
    player = TracePlayer("A*", (0, 0, 0), maze, result.steps)
    player.advance(len(result.steps) // 2)
    assert player.view.lattice == replay(maze, result.steps, len(result.steps) // 2).lattice


def test_replay_paints_final_path(maze):
    result = run(maze, Algorithm.DBFS)
    view = replay(maze, result.steps)
    for cell in result.path[1:-1]:
        assert view.get_cell(cell.x, cell.y) == CellState.FINAL_PATH
    assert view.get_cell(*maze.start()) == CellState.START_END
    assert view.get_cell(*maze.end()) == CellState.START_END
    # the pristine maze is untouched
    assert maze.get_cell(*maze.start()) == CellState.PATH


@pytest.mark.parametrize("algorithm", [Algorithm.BFS, Algorithm.DBFS, Algorithm.ASTAR])
def test_path_points_run_start_to_end(maze, algorithm):
    player = TracePlayer.for_algorithm(maze, algorithm)
    points = player.path_points()
    assert (points[0][0], points[0][1]) == maze.start()
    assert (points[-1][0], points[-1][1]) == maze.end()
    assert points[-1][2] is Direction.NONE
    assert len(points) == player.path_length + 1


def test_dfs_has_no_path_points(maze):
    assert TracePlayer.for_algorithm(maze, Algorithm.DFS).path_points() == []


def test_cli_mode_writes_csv(tmp_path, capsys):
    out = tmp_path / "results.csv"
    rows = run_cli_mode(MazeConfig(width=10, height=10, seed=7), runs=2, csv_output=str(out), print_maze=True)
    assert len(rows) == 8
    with open(out, newline="") as f:
        written = list(csv.DictReader(f))
    assert [r["algorithm"] for r in written[:4]] == ["DFS", "BFS", "DBFS", "A*"]
    assert all(r["found"] == "True" for r in written)
    printed = capsys.readouterr().out
    assert "[DBFS] found=yes" in printed
    assert "S" in printed and "E" in printed


def test_cli_same_seed_same_lengths(tmp_path):
    config = MazeConfig(width=16, height=16, seed=11, algorithms=["BFS", "A*"])
    first = run_cli_mode(config, runs=1, csv_output=None, print_maze=False)
    second = run_cli_mode(config, runs=1, csv_output=None, print_maze=False)
    assert [r["path_length"] for r in first] == [r["path_length"] for r in second]
    assert first[0]["path_length"] == first[1]["path_length"]


def test_main_cli(capsys):
    main(["--mode", "cli", "--width", "10", "--height", "10", "--seed", "3", "--algorithm", "BFS"])
    printed = capsys.readouterr().out
    assert "[BFS] found=yes" in printed
    assert "[DFS]" not in printed


@pytest.mark.parametrize("width", ["7", "2", "ten"])
def test_bad_dimensions_rejected(width):
    with pytest.raises(SystemExit):
        parse_args(["--width", width])


def test_visualizer_layout():
    pytest.importorskip("pygame")
    from visualizer import CELL_COLORS, MazeVisualizer

    viewer = MazeVisualizer(MazeConfig(width=10, height=10, seed=1))
    viewer.new_maze()
    assert [p.name for p in viewer.players] == ["DFS", "BFS", "DBFS", "A*"]
    tile, stats, view_w, panel_h, cols, rows = viewer._compute_layout(11, 11, 4, 1280, 720)
    assert (cols, rows) == (2, 2)
    assert tile >= 2
    assert view_w == 11 * tile
    assert panel_h == 11 * tile + stats
    assert set(CELL_COLORS) == set(CellState)


def test_path_points_for_adjacent_endpoints():
    grid = Grid(2, 3)
    grid.set_cell(1, 1, CellState.PATH)
    grid.set_cell(1, 2, CellState.PATH)
    assert grid.end() == (1, 2)
    player = TracePlayer.for_algorithm(grid, Algorithm.BFS)
    assert player.found
    assert player.path_length == 1
    assert player.path_points() == [(1, 1, Direction.DOWN), (1, 2, Direction.NONE)]


def test_arrow_polygon_points_along_direction():
    pytest.importorskip("pygame")
    from visualizer import arrow_polygon

    assert arrow_polygon(2, 3, 10, Direction.NONE) is None
    tip, left, right = arrow_polygon(2, 3, 10, Direction.RIGHT, offset=(100, 0))
    assert tip == pytest.approx((128.5, 35.0))
    assert left[0] == pytest.approx(121.5) and right[0] == pytest.approx(121.5)
    assert sorted([left[1], right[1]]) == pytest.approx([31.5, 38.5])
    tip, _, _ = arrow_polygon(1, 1, 10, Direction.UP)
    assert tip == pytest.approx((15.0, 11.5))
