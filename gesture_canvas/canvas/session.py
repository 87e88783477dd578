import logging
from typing import Optional

from gesture_canvas.config import StrokeConfig
from gesture_canvas.canvas.history import StrokeHistory
from gesture_canvas.canvas.surface import ColorLike, DrawingSurface
from gesture_canvas.canvas.tessellator import StrokePoint, StrokeTessellator, distance
from gesture_canvas.vision.landmarks import Gesture, Tool

logger = logging.getLogger(__name__)

FREEHAND = "freehand"
ERASE = "erase"
SHAPE = "shape"

# Как рендерить штрих для каждого жеста. None: жест ничего не рисует
GESTURE_MODES = {
    Gesture.NONE: None,
    Gesture.DRAWING: FREEHAND,
    Gesture.ERASING: ERASE,
    Gesture.LINE: SHAPE,
    Gesture.RECTANGLE: SHAPE,
    Gesture.CIRCLE: SHAPE,
    Gesture.SELECTING: None,
}

# Жест, который даёт мышь/стилус при выбранном инструменте
TOOL_GESTURES = {
    Tool.DRAW: Gesture.DRAWING,
    Tool.ERASE: Gesture.ERASING,
    Tool.LINE: Gesture.LINE,
    Tool.RECTANGLE: Gesture.RECTANGLE,
    Tool.CIRCLE: Gesture.CIRCLE,
    Tool.SELECT: Gesture.SELECTING,
}


class DrawingSession:
    """
    Состояние рисования на одном холсте: инструмент, стиль, текущий штрих и история.
    Точки приходят из двух источников (жесты и указатель) в одну очередь.
    """

    def __init__(
        self,
        surface: Optional[DrawingSurface] = None,
        config: Optional[StrokeConfig] = None,
        render_loop=None,
    ):
        self.config = config or StrokeConfig()
        self.surface = surface
        self.render_loop = render_loop

        self.tool = Tool.DRAW
        self.gesture = Gesture.NONE
        self.tessellator = StrokeTessellator(self.config)
        self.history = StrokeHistory(self.config.history_limit)

        # Для фигур: холст до начала жеста и текущие концы
        self._base_snapshot = None
        self._shape_start: Optional[StrokePoint] = None
        self._shape_end: Optional[StrokePoint] = None

        if surface is not None:
            self._apply_style()

    @property
    def is_drawing(self) -> bool:
        return self.tessellator.active

    @property
    def mode(self) -> Optional[str]:
        return GESTURE_MODES[self.gesture]

    def attach_surface(self, surface: DrawingSurface):
        self.surface = surface
        self._apply_style()

    def detach_surface(self):
        if self.is_drawing:
            self._abort_stroke()
        self.surface = None

    # --- команды для UI ---

    def select_tool(self, tool: Tool):
        if self.is_drawing:
            self.end_stroke()
        self.tool = tool

    def set_stroke_style(self, color: ColorLike, width: float):
        self.tessellator.color = color
        self.tessellator.width = float(width)
        self._apply_style()

    def clear(self):
        if self.is_drawing:
            self._abort_stroke()
        self.history.clear(self.surface)
        logger.info("Canvas cleared")

    def undo(self) -> bool:
        if self.is_drawing:
            self.end_stroke()
        return self.history.undo(self.surface) is not None

    # --- ввод ---

    def update(self, gesture: Gesture, point: Optional[StrokePoint]):
        """Один кадр от классификатора: жест и позиция курсора в пикселях."""
        if GESTURE_MODES[gesture] is None or point is None:
            if self.is_drawing:
                self.end_stroke()
            return

        if self.is_drawing and gesture != self.gesture:
            self.end_stroke()

        if self.is_drawing:
            self.continue_stroke(point)
        else:
            self.begin_stroke(gesture, point)

    def pointer_down(self, x: float, y: float, pressure: Optional[float] = None):
        if self.is_drawing:
            self.end_stroke()
        self.begin_stroke(TOOL_GESTURES[self.tool], self._pointer_point(x, y, pressure))

    def pointer_move(self, x: float, y: float, pressure: Optional[float] = None):
        if self.is_drawing:
            self.continue_stroke(self._pointer_point(x, y, pressure))

    def pointer_up(self):
        self.end_stroke()

    # Отмена и уход указателя с холста завершают штрих так же, как отпускание
    pointer_cancel = pointer_up
    pointer_leave = pointer_up

    # --- жизненный цикл штриха ---

    def begin_stroke(self, gesture: Gesture, point: StrokePoint):
        if GESTURE_MODES[gesture] is None:
            return

        self.gesture = gesture
        self.tessellator.begin(point)

        if self.mode == SHAPE:
            self._base_snapshot = self.surface.capture_snapshot() if self.surface is not None else None
            self._shape_start = point
            self._shape_end = point

        if self.render_loop is not None:
            self.render_loop.start()

    def continue_stroke(self, point: StrokePoint):
        if not self.is_drawing:
            return
        if self.mode == SHAPE:
            self._shape_end = point
        else:
            self.tessellator.add(point)

    def render_step(self) -> bool:
        """Один кадр отрисовки. Вызывается циклом отрисовки с частотой экрана."""
        if not self.is_drawing:
            if self.render_loop is not None:
                self.render_loop.stop()
            return False

        if self.surface is None:
            return False

        mode = self.mode
        if mode == FREEHAND:
            return self.tessellator.render_step(self.surface)
        if mode == ERASE:
            return self._erase_step()
        if mode == SHAPE:
            return self._shape_step()
        return False

    def end_stroke(self):
        if not self.is_drawing:
            return

        if self.render_loop is not None:
            self.render_loop.stop()

        mode = self.mode
        if mode == FREEHAND:
            self.tessellator.end(self.surface)
        else:
            if self.surface is not None and mode == ERASE:
                self._erase_step()
            elif self.surface is not None:
                self._shape_step()
            self.tessellator.queue.clear()

        if self.surface is not None:
            self.history.push(self.surface.capture_snapshot())
            logger.info("Stroke committed (%s), history size %d", self.gesture.value, len(self.history))

        self._reset_stroke_state()

    def _abort_stroke(self):
        if self.render_loop is not None:
            self.render_loop.stop()
        if self.mode == SHAPE and self._base_snapshot is not None and self.surface is not None:
            self.surface.restore_snapshot(self._base_snapshot)
        self.tessellator.queue.clear()
        self._reset_stroke_state()

    def _reset_stroke_state(self):
        self.gesture = Gesture.NONE
        self._base_snapshot = None
        self._shape_start = None
        self._shape_end = None

    def _erase_step(self) -> bool:
        queue = self.tessellator.queue
        for point in queue.points:
            self.surface.clear_disc(point.x, point.y, self.config.eraser_radius)
        queue.collapse()
        return True

    def _shape_step(self) -> bool:
        # Превью не должно оставаться на холсте: каждый кадр начинаем с базового снимка
        if self._base_snapshot is not None:
            self.surface.restore_snapshot(self._base_snapshot)

        start, end = self._shape_start, self._shape_end
        self._apply_style()

        if self.gesture == Gesture.LINE:
            self.surface.begin_path()
            self.surface.move_to(start.x, start.y)
            self.surface.line_to(end.x, end.y)
            self.surface.stroke()
        elif self.gesture == Gesture.RECTANGLE:
            self.surface.stroke_rect(
                min(start.x, end.x), min(start.y, end.y),
                abs(end.x - start.x), abs(end.y - start.y),
            )
        elif self.gesture == Gesture.CIRCLE:
            self.surface.begin_path()
            self.surface.arc(start.x, start.y, distance(start, end))
            self.surface.stroke()
        return True

    def _apply_style(self):
        if self.surface is not None:
            self.surface.set_stroke_style(self.tessellator.color, self.tessellator.width)

    def _pointer_point(self, x: float, y: float, pressure: Optional[float]) -> StrokePoint:
        return StrokePoint(x, y, pressure if pressure is not None and pressure > 0 else None)
