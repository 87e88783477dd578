import argparse
import logging
import math
import os
import sys
from typing import Iterator, Optional, Tuple

from PySide6.QtCore import QTimer
from PySide6.QtGui import QGuiApplication

from gesture_canvas.config import PipelineConfig
from gesture_canvas.canvas.session import DrawingSession
from gesture_canvas.canvas.surface import QImageSurface
from gesture_canvas.core.pipeline import GesturePipeline
from gesture_canvas.core.render_loop import RenderLoop
from gesture_canvas.vision.landmarks import Tool
from gesture_canvas.vision.mock_hand import MockHand

logger = logging.getLogger(__name__)

DemoStep = Tuple[Tool, str, float, float]


def demo_script(frames: int) -> Iterator[DemoStep]:
    """Сценарий демо-режима: (инструмент, поза, x запястья, y запястья) на каждый кадр."""
    part = max(frames // 3, 1)
    rest = 10
    settle = 8  # кадры на месте, пока сглаживание догоняет новую позу

    # Волна кистью
    for _ in range(settle):
        yield Tool.DRAW, "point", 0.3, 0.7
    for i in range(part):
        t = i / part
        yield Tool.DRAW, "point", 0.3 + 0.4 * t, 0.7 + 0.08 * math.sin(t * 4 * math.pi)
    for _ in range(rest):
        yield Tool.DRAW, "open", 0.7, 0.7

    # Окружность от центра наружу
    for _ in range(settle):
        yield Tool.CIRCLE, "point", 0.5, 0.75
    for i in range(part // 2):
        t = i / max(part // 2, 1)
        yield Tool.CIRCLE, "point", 0.5 + 0.1 * t, 0.75
    for _ in range(rest):
        yield Tool.CIRCLE, "open", 0.6, 0.75

    # Ластиком поперёк волны
    for _ in range(settle):
        yield Tool.ERASE, "pinch", 0.5, 0.6
    for i in range(part // 2):
        t = i / max(part // 2, 1)
        yield Tool.ERASE, "pinch", 0.5, 0.6 + 0.3 * t
    for _ in range(rest):
        yield Tool.ERASE, "open", 0.5, 0.9


class AppCore:
    def __init__(self, sys_argv, config: Optional[PipelineConfig] = None, frames: int = 240,
                 output: str = "gesture_canvas.png", jitter: float = 0.002, seed: Optional[int] = None,
                 frame_interval_ms: int = 33):
        self.app = QGuiApplication.instance() or QGuiApplication(sys_argv)
        self.config = config or PipelineConfig()
        render = self.config.render

        self.surface = QImageSurface(render.width, render.height, render.device_pixel_ratio)
        self.render_loop = RenderLoop(interval_ms=render.interval_ms)
        self.session = DrawingSession(self.surface, self.config.stroke, self.render_loop)
        self.render_loop.callback = self.session.render_step
        self.pipeline = GesturePipeline(self.session, self.config)

        # Камеры нет: руку заменяет генератор
        self.hand = MockHand(jitter=jitter, seed=seed)
        self.script = demo_script(frames)
        self.output = output

        self.timer = QTimer()
        self.timer.timeout.connect(self._game_loop)
        self.timer.start(frame_interval_ms)

    def run(self) -> int:
        logger.info("Demo started")
        return self.app.exec()

    def _game_loop(self):
        step = next(self.script, None)
        if step is None:
            self._finish()
            return

        tool, pose, x, y = step
        if tool != self.pipeline.tool:
            self.pipeline.select_tool(tool)

        data = self.pipeline.process(self.hand.frame(x, y, pose))
        if self.pipeline.frame_count % 30 == 0:
            logger.info("FPS: %.1f | Render FPS: %.1f | Gesture: %s",
                        data.fps, self.render_loop.fps, data.gesture.value)

    def _finish(self):
        self.timer.stop()
        self.session.end_stroke()
        if self.surface.save(self.output):
            logger.info("Canvas saved to %s (%d strokes in history)", self.output, len(self.session.history))
        else:
            logger.error("Failed to save canvas to %s", self.output)
        self.app.quit()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Gesture canvas demo: draws with a simulated hand")
    parser.add_argument("--frames", type=int, default=240, help="Number of simulated camera frames")
    parser.add_argument("--output", default="gesture_canvas.png", help="Where to save the canvas")
    parser.add_argument("--width", type=int, default=1280)
    parser.add_argument("--height", type=int, default=960)
    parser.add_argument("--stroke-width", type=float, default=5.0)
    parser.add_argument("--color", default="#3498DB")
    parser.add_argument("--debounce-ms", type=float, default=120.0)
    parser.add_argument("--history-limit", type=int, default=None)
    parser.add_argument("--jitter", type=float, default=0.002, help="Std of landmark noise")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--no-mirror", action="store_true")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = PipelineConfig.from_mapping({
            "render": {"width": args.width, "height": args.height, "mirror": not args.no_mirror},
            "stroke": {"width": args.stroke_width, "color": args.color, "history_limit": args.history_limit},
            "classifier": {"debounce_ms": args.debounce_ms},
        })
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    # Окно не нужно, рисуем в память
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    core = AppCore(sys.argv[:1], config=config, frames=args.frames, output=args.output,
                   jitter=args.jitter, seed=args.seed)
    return core.run()
