from dataclasses import dataclass

from gesture_canvas.vision.landmarks import Gesture


@dataclass
class FrameData:
    # Стабильный (после антидребезга) жест
    gesture: Gesture = Gesture.NONE

    # Координаты курсора в пикселях холста, кончик указательного пальца.
    # -1, если руки нет
    cursor_x: float = -1
    cursor_y: float = -1

    # Метрики качества
    fps: float = 0.0
    latency_ms: float = 0.0

    # Служебные флаги
    is_tracking: bool = False      # Был ли в кадре валидный набор точек

    @property
    def has_cursor(self) -> bool:
        return self.cursor_x != -1 and self.cursor_y != -1
