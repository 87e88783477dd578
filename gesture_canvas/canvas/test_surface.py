import pytest

from gesture_canvas.canvas.surface import QImageSurface, RecordingSurface


@pytest.fixture
def surface(qt_app):
    return QImageSurface(200, 100)


def alpha(surface, x, y):
    return surface.image.pixelColor(x, y).alpha()


def test_new_surface_is_transparent(surface):
    assert surface.image.width() == 200
    assert alpha(surface, 50, 50) == 0


def test_stroke_paints_path(surface):
    surface.set_stroke_style("#ff0000", 6)
    surface.begin_path()
    surface.move_to(10, 50)
    surface.quadratic_curve_to(50, 50, 100, 50)
    surface.line_to(150, 50)
    surface.stroke()

    assert alpha(surface, 120, 50) == 255
    assert surface.image.pixelColor(120, 50).red() == 255
    assert alpha(surface, 120, 10) == 0


def test_stroke_rect_and_arc(surface):
    surface.stroke_rect(20, 20, 60, 40)
    surface.begin_path()
    surface.arc(150, 50, 30)
    surface.stroke()

    assert alpha(surface, 20, 40) > 0
    assert alpha(surface, 50, 40) == 0
    assert alpha(surface, 180, 50) > 0
    assert alpha(surface, 150, 50) == 0


def test_dot_and_clear_disc(surface):
    surface.set_stroke_style("#000000", 20)
    surface.dot(100, 50)
    assert alpha(surface, 100, 50) == 255

    surface.clear_disc(100, 50, 15)
    assert alpha(surface, 100, 50) == 0


def test_clear_rect_only_touches_region(surface):
    surface.set_stroke_style("#000000", 10)
    surface.dot(20, 20)
    surface.dot(150, 50)

    surface.clear_rect(0, 0, 100, 100)

    assert alpha(surface, 20, 20) == 0
    assert alpha(surface, 150, 50) == 255


def test_snapshot_round_trip(surface):
    surface.dot(30, 30)
    snapshot = surface.capture_snapshot()

    surface.dot(150, 60)
    surface.restore_snapshot(snapshot)

    assert surface.capture_snapshot() == snapshot
    assert alpha(surface, 150, 60) == 0


def test_snapshot_is_independent_copy(surface):
    snapshot = surface.capture_snapshot()
    surface.dot(30, 30)
    assert snapshot.pixelColor(30, 30).alpha() == 0


def test_clear_makes_surface_blank(surface):
    surface.dot(30, 30)
    surface.clear()
    assert surface.image == QImageSurface(200, 100).image


def test_resize_keeps_drawing(surface):
    surface.set_stroke_style("#000000", 10)
    surface.dot(30, 30)

    surface.resize(400, 300)

    assert (surface.width, surface.height) == (400, 300)
    assert surface.image.width() == 400
    assert alpha(surface, 30, 30) == 255


def test_device_pixel_ratio_scales_buffer(qt_app):
    surface = QImageSurface(100, 50, device_pixel_ratio=2.0)
    assert (surface.image.width(), surface.image.height()) == (200, 100)
    assert (surface.width, surface.height) == (100, 50)

    surface.set_stroke_style("#000000", 10)
    surface.dot(40, 20)
    assert surface.image.pixelColor(80, 40).alpha() == 255


def test_save_writes_png(surface, tmp_path):
    surface.dot(50, 50)
    path = tmp_path / "canvas.png"

    assert surface.save(str(path)) is True
    assert path.stat().st_size > 0


def test_recording_surface_full_clear_resets_ops():
    surface = RecordingSurface(100, 100)
    surface.dot(1, 1)
    surface.clear_rect(10, 10, 5, 5)
    assert len(surface.ops) == 2

    surface.clear()
    assert surface.ops == []
