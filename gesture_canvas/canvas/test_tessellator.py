import numpy as np
import pytest

from gesture_canvas.config import StrokeConfig
from gesture_canvas.canvas.surface import RecordingSurface
from gesture_canvas.canvas.tessellator import PointQueue, StrokePoint, StrokeTessellator, distance


def consecutive_distances(points):
    return [distance(a, b) for a, b in zip(points, points[1:])]


def test_large_jump_is_subdivided():
    queue = PointQueue(StrokeConfig(gap_threshold=15, step_length=5))
    queue.begin(StrokePoint(10, 10))

    added = queue.add(StrokePoint(10, 200))

    # 190 px при шаге 5: 37 промежуточных и сама точка
    assert added == 38
    assert len(queue) == 39
    assert queue.points[-1] == StrokePoint(10, 200)
    assert all(p.x == 10 for p in queue.points)
    assert max(consecutive_distances(queue.points)) <= 5 + 1e-9


@pytest.mark.parametrize("seed", range(3))
def test_no_gap_larger_than_step_after_jumps(seed):
    rng = np.random.default_rng(seed)
    queue = PointQueue(StrokeConfig(gap_threshold=15, step_length=5))
    queue.begin(StrokePoint(400, 300))

    for _ in range(10):
        angle = rng.uniform(0, 2 * np.pi)
        length = rng.uniform(16, 300)
        last = queue.last
        queue.add(StrokePoint(last.x + length * np.cos(angle), last.y + length * np.sin(angle)))

    assert max(consecutive_distances(queue.points)) <= 5 + 1e-9


def test_small_moves_are_kept_as_is():
    queue = PointQueue()
    queue.begin(StrokePoint(0, 0))
    assert queue.add(StrokePoint(10, 0)) == 1
    assert queue.points == [StrokePoint(0, 0), StrokePoint(10, 0)]


def test_tiny_moves_are_dropped():
    queue = PointQueue(StrokeConfig(min_distance=1.0))
    queue.begin(StrokePoint(0, 0))
    assert queue.add(StrokePoint(0.5, 0.5)) == 0
    assert len(queue) == 1


def test_add_without_session_is_ignored():
    queue = PointQueue()
    assert queue.add(StrokePoint(5, 5)) == 0
    assert len(queue) == 0


def test_pressure_is_interpolated():
    queue = PointQueue(StrokeConfig(gap_threshold=15, step_length=5))
    queue.begin(StrokePoint(0, 0, 0.2))
    queue.add(StrokePoint(20, 0, 0.6))

    pressures = [p.pressure for p in queue.points]
    assert pressures == pytest.approx([0.2, 0.3, 0.4, 0.5, 0.6])


def test_render_step_needs_two_points():
    surface = RecordingSurface()
    tessellator = StrokeTessellator()
    tessellator.begin(StrokePoint(1, 1))

    assert tessellator.render_step(surface) is False
    assert surface.ops == []


def test_render_step_builds_midpoint_curve_and_collapses_queue():
    surface = RecordingSurface()
    tessellator = StrokeTessellator(StrokeConfig(gap_threshold=50))
    tessellator.begin(StrokePoint(0, 0))
    for p in [StrokePoint(10, 0), StrokePoint(20, 10), StrokePoint(30, 10)]:
        tessellator.add(p)

    assert tessellator.render_step(surface) is True

    [(kind, path, style)] = surface.ops
    assert kind == "stroke"
    assert path == (
        ("move", 0, 0),
        ("quad", 10, 0, 15.0, 5.0),
        ("quad", 20, 10, 25.0, 10.0),
        ("line", 30, 10),
    )
    assert style == ("#000000", 5.0)
    assert tessellator.queue.points == [StrokePoint(30, 10)]


def test_next_step_continues_from_last_point():
    surface = RecordingSurface()
    tessellator = StrokeTessellator()
    tessellator.begin(StrokePoint(0, 0))
    tessellator.add(StrokePoint(10, 0))
    tessellator.render_step(surface)

    tessellator.add(StrokePoint(10, 10))
    tessellator.render_step(surface)

    second_path = surface.ops[1][1]
    assert second_path[0] == ("move", 10, 0)
    assert second_path[-1] == ("line", 10, 10)


def test_end_flushes_remaining_points():
    surface = RecordingSurface()
    tessellator = StrokeTessellator()
    tessellator.begin(StrokePoint(0, 0))
    tessellator.add(StrokePoint(10, 0))

    tessellator.end(surface)

    assert len(surface.strokes("stroke")) == 1
    assert not tessellator.active
    assert len(tessellator.queue) == 0


def test_single_point_stroke_becomes_dot():
    surface = RecordingSurface()
    tessellator = StrokeTessellator()
    tessellator.begin(StrokePoint(7, 8))
    tessellator.end(surface)

    assert surface.ops == [("dot", 7, 8, ("#000000", 5.0))]


def test_no_dot_when_segments_were_drawn():
    surface = RecordingSurface()
    tessellator = StrokeTessellator()
    tessellator.begin(StrokePoint(0, 0))
    tessellator.add(StrokePoint(10, 0))
    tessellator.render_step(surface)
    tessellator.end(surface)

    assert surface.strokes("dot") == []


def test_pressure_changes_line_width():
    surface = RecordingSurface()
    tessellator = StrokeTessellator(StrokeConfig(width=4.0, pressure_gain=1.5))
    tessellator.begin(StrokePoint(0, 0, 0.5))
    tessellator.add(StrokePoint(10, 0, 0.5))
    tessellator.render_step(surface)

    assert surface.ops[0][2] == ("#000000", pytest.approx(3.0))


def test_missing_surface_keeps_queue():
    tessellator = StrokeTessellator()
    tessellator.begin(StrokePoint(0, 0))
    tessellator.add(StrokePoint(10, 0))

    assert tessellator.render_step(None) is False
    assert len(tessellator.queue) == 2


def test_two_point_batch_is_a_straight_segment():
    surface = RecordingSurface()
    tessellator = StrokeTessellator()
    tessellator.begin(StrokePoint(0, 0))
    tessellator.add(StrokePoint(10, 5))
    tessellator.render_step(surface)

    assert surface.ops[0][1] == (("move", 0, 0), ("line", 10, 5))


def test_width_follows_pressure_of_last_point_in_batch():
    surface = RecordingSurface()
    tessellator = StrokeTessellator(StrokeConfig(width=4.0, pressure_gain=1.5, gap_threshold=50))
    tessellator.begin(StrokePoint(0, 0, 0.2))
    tessellator.add(StrokePoint(10, 0, 0.4))
    tessellator.add(StrokePoint(20, 0, 1.0))
    tessellator.render_step(surface)

    tessellator.add(StrokePoint(30, 0, 0.5))
    tessellator.render_step(surface)

    widths = [style[1] for _, _, style in surface.strokes("stroke")]
    assert widths == pytest.approx([6.0, 3.0])
