from gesture_canvas.config import PipelineConfig
from gesture_canvas.core.core import AppCore, demo_script, parse_args
from gesture_canvas.core.render_loop import RenderLoop
from gesture_canvas.vision.landmarks import Tool


def test_render_loop_start_stop(qt_app):
    calls = []
    loop = RenderLoop(lambda: calls.append(1), interval_ms=16)

    loop.start()
    loop.start()
    assert loop.active

    loop._tick()
    assert calls == [1]

    loop.stop()
    loop.stop()
    assert not loop.active


def test_demo_script_covers_tools():
    steps = list(demo_script(60))
    tools = {tool for tool, _, _, _ in steps}
    poses = {pose for _, pose, _, _ in steps}

    assert tools == {Tool.DRAW, Tool.CIRCLE, Tool.ERASE}
    assert poses == {"point", "open", "pinch"}
    assert all(0.0 <= x <= 1.0 and 0.0 <= y <= 1.0 for _, _, x, y in steps)


def test_parse_args_defaults():
    args = parse_args([])
    assert args.frames == 240
    assert args.history_limit is None
    assert not args.no_mirror


def test_demo_draws_and_saves(qt_app, tmp_path):
    output = tmp_path / "demo.png"
    config = PipelineConfig.from_mapping({
        "render": {"width": 320, "height": 240},
        "classifier": {"debounce_ms": 0},
    })
    core = AppCore([], config=config, frames=60, output=str(output), jitter=0.0, seed=1)
    core.timer.stop()

    for _ in range(200):
        if output.exists():
            break
        core._game_loop()

    assert output.exists()
    assert len(core.session.history) >= 2
    assert not core.session.is_drawing
