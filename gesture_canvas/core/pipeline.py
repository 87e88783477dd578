import logging
import time
from typing import Callable, Optional, Sequence

from gesture_canvas.config import PipelineConfig
from gesture_canvas.canvas.session import DrawingSession
from gesture_canvas.canvas.tessellator import StrokePoint
from gesture_canvas.vision.frame_data import FrameData
from gesture_canvas.vision.gesture_detector import GestureClassifier
from gesture_canvas.vision.landmarks import INDEX_TIP, Gesture, Tool
from gesture_canvas.vision.metrics import MetricsCollector

logger = logging.getLogger(__name__)


class GesturePipeline:
    """
    Кадр с точками руки -> сглаживание и классификация -> штрих на холсте.
    Другие модули используют только process() и команды.
    """

    def __init__(
        self,
        session: DrawingSession,
        config: Optional[PipelineConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or PipelineConfig()
        self.session = session
        self.clock = clock
        self.classifier = GestureClassifier(self.config.classifier, self.config.smoother, clock)
        self.metrics = MetricsCollector(clock=clock)

        self.last_frame_time: Optional[float] = None
        self.frame_count = 0
        self._tool = session.tool

    @property
    def tool(self) -> Tool:
        return self.session.tool

    def select_tool(self, tool: Tool):
        logger.debug("Tool selected: %s", tool.value)
        self.session.select_tool(tool)

    def process(self, frame: Optional[Sequence], now: Optional[float] = None) -> FrameData:
        if now is None:
            now = self.clock()

        data = FrameData()
        if self.last_frame_time is not None:
            data.latency_ms = (now - self.last_frame_time) * 1000
        self.last_frame_time = now
        self.frame_count += 1

        tool = self.session.tool
        if tool != self._tool:
            # Стабильный жест считался для старого инструмента: он не должен пережить смену
            self._tool = tool
            self.classifier.debouncer.reset()

        data.gesture = self.classifier.classify(frame, tool, now)

        point = None
        smoothed = self.classifier.last_frame
        if smoothed is not None:
            point = self.to_surface(smoothed[INDEX_TIP].x, smoothed[INDEX_TIP].y)
            data.cursor_x, data.cursor_y = point.x, point.y
            data.is_tracking = True

        self.session.update(data.gesture, point if data.gesture != Gesture.NONE else None)

        data.fps = self.metrics.update()
        return data

    def to_surface(self, x: float, y: float) -> StrokePoint:
        """Нормализованные координаты камеры -> пиксели холста (с зеркалом)."""
        surface = self.session.surface
        width = surface.width if surface is not None else self.config.render.width
        height = surface.height if surface is not None else self.config.render.height

        if self.config.render.mirror:
            x = 1.0 - x
        return StrokePoint(x * width, y * height)

    def reset(self):
        self.session.end_stroke()
        self.classifier.reset()
        self.metrics.reset()
        self.last_frame_time = None
