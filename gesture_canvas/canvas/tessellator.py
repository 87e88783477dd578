import math
from typing import List, NamedTuple, Optional

from gesture_canvas.config import StrokeConfig
from gesture_canvas.canvas.surface import DrawingSurface


class StrokePoint(NamedTuple):
    x: float
    y: float
    pressure: Optional[float] = None


def distance(p1: StrokePoint, p2: StrokePoint) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def midpoint(p1: StrokePoint, p2: StrokePoint) -> StrokePoint:
    return StrokePoint((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)


class PointQueue:
    """
    Очередь точек текущего штриха.
    Каждый add() меняет очередь целиком за один вызов, поэтому
    шаг отрисовки никогда не видит половину интерполяции.
    """

    def __init__(self, config: Optional[StrokeConfig] = None):
        self.config = config or StrokeConfig()
        self.points: List[StrokePoint] = []
        self.last: Optional[StrokePoint] = None
        self.active = False

    def __len__(self):
        return len(self.points)

    def begin(self, point: StrokePoint):
        self.points = [point]
        self.last = point
        self.active = True

    def add(self, point: StrokePoint) -> int:
        """Возвращает число реально добавленных точек (с промежуточными)."""
        if not self.active:
            return 0

        dist = distance(self.last, point)
        if dist <= self.config.min_distance:
            return 0

        new_points = []
        if dist > self.config.gap_threshold:
            # Заполняем разрыв, чтобы соседние точки были не дальше шага
            steps = math.ceil(dist / self.config.step_length)
            for i in range(1, steps):
                new_points.append(self._interpolate(self.last, point, i / steps))

        new_points.append(point)
        self.points.extend(new_points)
        self.last = point
        return len(new_points)

    def collapse(self):
        self.points = self.points[-1:]

    def clear(self):
        self.points = []
        self.last = None
        self.active = False

    def _interpolate(self, a: StrokePoint, b: StrokePoint, t: float) -> StrokePoint:
        pressure = None
        if a.pressure is not None and b.pressure is not None:
            pressure = a.pressure + (b.pressure - a.pressure) * t
        return StrokePoint(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t, pressure)


class StrokeTessellator:
    def __init__(self, config: Optional[StrokeConfig] = None):
        self.config = config or StrokeConfig()
        self.queue = PointQueue(self.config)
        self.color = self.config.color
        self.width = self.config.width
        self._segments_drawn = 0

    @property
    def active(self) -> bool:
        return self.queue.active

    def begin(self, point: StrokePoint):
        self.queue.begin(point)
        self._segments_drawn = 0

    def add(self, point: StrokePoint) -> int:
        return self.queue.add(point)

    def render_step(self, surface: Optional[DrawingSurface]) -> bool:
        """
        Рисует накопленные точки одним путём и оставляет в очереди последнюю,
        чтобы следующий шаг продолжил линию с неё.
        """
        points = self.queue.points
        if surface is None or len(points) < 2:
            return False

        # Путь обводится одним пером: толщина на весь шаг по давлению последней точки
        surface.set_stroke_style(self.color, self._line_width(points[-1]))
        surface.begin_path()
        surface.move_to(points[0].x, points[0].y)

        # Кривая проходит через середины отрезков, сами точки служат контрольными
        for i in range(1, len(points) - 1):
            mid = midpoint(points[i], points[i + 1])
            surface.quadratic_curve_to(points[i].x, points[i].y, mid.x, mid.y)

        # Хвост прямой: из двух точек получается просто отрезок
        last = points[-1]
        surface.line_to(last.x, last.y)
        surface.stroke()

        self.queue.collapse()
        self._segments_drawn += 1
        return True

    def end(self, surface: Optional[DrawingSurface]):
        """Дорисовывает остаток очереди и закрывает сессию."""
        if not self.queue.active:
            return

        if not self.render_step(surface) and self._segments_drawn == 0 and surface is not None:
            # Штрих из одной точки: ставим точку
            point = self.queue.points[0]
            surface.set_stroke_style(self.color, self._line_width(point))
            surface.dot(point.x, point.y)

        self.queue.clear()

    def _line_width(self, point: StrokePoint) -> float:
        if point.pressure:
            return self.width * point.pressure * self.config.pressure_gain
        return self.width
