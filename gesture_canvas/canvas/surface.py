from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple, Union

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPainterPath, QPen

Snapshot = Any
ColorLike = Union[str, QColor]


class DrawingSurface(ABC):
    """Растровый холст, в который рисует конвейер. Снимки непрозрачны для остального кода."""

    @property
    @abstractmethod
    def width(self) -> int: ...

    @property
    @abstractmethod
    def height(self) -> int: ...

    @abstractmethod
    def set_stroke_style(self, color: ColorLike, width: float): ...

    @abstractmethod
    def begin_path(self): ...

    @abstractmethod
    def move_to(self, x: float, y: float): ...

    @abstractmethod
    def line_to(self, x: float, y: float): ...

    @abstractmethod
    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float): ...

    @abstractmethod
    def arc(self, cx: float, cy: float, radius: float): ...

    @abstractmethod
    def stroke(self): ...

    @abstractmethod
    def stroke_rect(self, x: float, y: float, w: float, h: float): ...

    @abstractmethod
    def dot(self, x: float, y: float):
        """Закрашенный круг диаметром в текущую толщину линии."""

    @abstractmethod
    def clear_rect(self, x: float, y: float, w: float, h: float): ...

    @abstractmethod
    def clear_disc(self, cx: float, cy: float, radius: float): ...

    @abstractmethod
    def capture_snapshot(self) -> Snapshot: ...

    @abstractmethod
    def restore_snapshot(self, snapshot: Snapshot): ...

    @abstractmethod
    def resize(self, width: int, height: int, device_pixel_ratio: float = 1.0): ...

    def clear(self):
        self.clear_rect(0, 0, self.width, self.height)


class QImageSurface(DrawingSurface):
    def __init__(self, width: int = 1280, height: int = 960, device_pixel_ratio: float = 1.0):
        self._width = width
        self._height = height
        self.device_pixel_ratio = device_pixel_ratio
        self._image = self._new_image(width, height, device_pixel_ratio)
        self._path = QPainterPath()
        self._color = QColor(0, 0, 0)
        self._line_width = 5.0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def image(self) -> QImage:
        return self._image

    def set_stroke_style(self, color: ColorLike, width: float):
        self._color = QColor(color)
        self._line_width = float(width)

    def begin_path(self):
        self._path = QPainterPath()

    def move_to(self, x: float, y: float):
        self._path.moveTo(x, y)

    def line_to(self, x: float, y: float):
        self._path.lineTo(x, y)

    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float):
        self._path.quadTo(cx, cy, x, y)

    def arc(self, cx: float, cy: float, radius: float):
        self._path.addEllipse(QPointF(cx, cy), radius, radius)

    def stroke(self):
        painter = self._painter()
        painter.setPen(self._pen())
        painter.setBrush(Qt.NoBrush)
        painter.drawPath(self._path)
        painter.end()

    def stroke_rect(self, x: float, y: float, w: float, h: float):
        painter = self._painter()
        painter.setPen(self._pen())
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(QRectF(x, y, w, h))
        painter.end()

    def dot(self, x: float, y: float):
        painter = self._painter()
        painter.setPen(Qt.NoPen)
        painter.setBrush(self._color)
        r = self._line_width / 2
        painter.drawEllipse(QPointF(x, y), r, r)
        painter.end()

    def clear_rect(self, x: float, y: float, w: float, h: float):
        painter = self._painter()
        painter.setCompositionMode(QPainter.CompositionMode_Clear)
        painter.fillRect(QRectF(x, y, w, h), Qt.transparent)
        painter.end()

    def clear_disc(self, cx: float, cy: float, radius: float):
        painter = self._painter()
        painter.setCompositionMode(QPainter.CompositionMode_Clear)
        painter.setPen(Qt.NoPen)
        painter.setBrush(Qt.black)
        painter.drawEllipse(QPointF(cx, cy), radius, radius)
        painter.end()

    def clear(self):
        self._image.fill(Qt.transparent)

    def capture_snapshot(self) -> QImage:
        return self._image.copy()

    def restore_snapshot(self, snapshot: QImage):
        if snapshot.size() == self._image.size():
            self._image = snapshot.copy()
            self._image.setDevicePixelRatio(self.device_pixel_ratio)
            return

        # Снимок другого размера (холст меняли): кладём в левый верхний угол
        self._image.fill(Qt.transparent)
        painter = QPainter(self._image)
        painter.drawImage(0, 0, snapshot)
        painter.end()

    def resize(self, width: int, height: int, device_pixel_ratio: float = 1.0):
        """Новый буфер с сохранением нарисованного."""
        old = self._image
        self._width = width
        self._height = height
        self.device_pixel_ratio = device_pixel_ratio
        self._image = self._new_image(width, height, device_pixel_ratio)

        painter = QPainter(self._image)
        painter.drawImage(0, 0, old)
        painter.end()

    def save(self, filename: str) -> bool:
        """Сохранение в растровый формат (PNG/JPG) на белом фоне"""
        result = QImage(self._image.size(), QImage.Format.Format_ARGB32)
        result.fill(Qt.white)

        painter = QPainter(result)
        painter.drawImage(0, 0, self._image)
        painter.end()

        return result.save(filename)

    def _new_image(self, width: int, height: int, dpr: float) -> QImage:
        image = QImage(round(width * dpr), round(height * dpr), QImage.Format.Format_ARGB32_Premultiplied)
        image.setDevicePixelRatio(dpr)
        image.fill(Qt.transparent)
        return image

    def _painter(self) -> QPainter:
        painter = QPainter(self._image)
        painter.setRenderHint(QPainter.Antialiasing)
        return painter

    def _pen(self) -> QPen:
        pen = QPen(self._color)
        pen.setWidthF(self._line_width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        return pen


class RecordingSurface(DrawingSurface):
    """
    Холст без пикселей: просто записывает вызовы.
    Удобен для отладки и проверки геометрии штрихов.
    """

    def __init__(self, width: int = 800, height: int = 600):
        self._width = width
        self._height = height
        self.ops: List[Tuple] = []
        self.style: Tuple[str, float] = ("#000000", 5.0)
        self._path: List[Tuple] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def set_stroke_style(self, color: ColorLike, width: float):
        name = color.name() if isinstance(color, QColor) else str(color)
        self.style = (name, float(width))

    def begin_path(self):
        self._path = []

    def move_to(self, x: float, y: float):
        self._path.append(("move", x, y))

    def line_to(self, x: float, y: float):
        self._path.append(("line", x, y))

    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float):
        self._path.append(("quad", cx, cy, x, y))

    def arc(self, cx: float, cy: float, radius: float):
        self._path.append(("arc", cx, cy, radius))

    def stroke(self):
        self.ops.append(("stroke", tuple(self._path), self.style))

    def stroke_rect(self, x: float, y: float, w: float, h: float):
        self.ops.append(("stroke_rect", x, y, w, h, self.style))

    def dot(self, x: float, y: float):
        self.ops.append(("dot", x, y, self.style))

    def clear_rect(self, x: float, y: float, w: float, h: float):
        if x <= 0 and y <= 0 and x + w >= self._width and y + h >= self._height:
            self.ops = []
        else:
            self.ops.append(("clear_rect", x, y, w, h))

    def clear_disc(self, cx: float, cy: float, radius: float):
        self.ops.append(("clear_disc", cx, cy, radius))

    def capture_snapshot(self) -> Tuple:
        return tuple(self.ops)

    def restore_snapshot(self, snapshot: Tuple):
        self.ops = list(snapshot)

    def resize(self, width: int, height: int, device_pixel_ratio: float = 1.0):
        self._width = width
        self._height = height

    def strokes(self, kind: Optional[str] = None) -> List[Tuple]:
        return [op for op in self.ops if kind is None or op[0] == kind]
