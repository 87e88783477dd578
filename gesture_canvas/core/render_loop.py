from typing import Callable, Optional

from PySide6.QtCore import QTimer

from gesture_canvas.vision.metrics import MetricsCollector


class RenderLoop:
    """
    Цикл отрисовки на таймере Qt с частотой экрана.
    start/stop можно звать сколько угодно раз: таймер всегда один.
    """

    def __init__(self, callback: Optional[Callable[[], object]] = None, interval_ms: int = 16):
        self.callback = callback
        self.metrics = MetricsCollector()

        self.timer = QTimer()
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self._tick)

    @property
    def active(self) -> bool:
        return self.timer.isActive()

    @property
    def fps(self) -> float:
        return self.metrics.fps

    def start(self):
        if not self.timer.isActive():
            self.metrics.reset()
            self.timer.start()

    def stop(self):
        if self.timer.isActive():
            self.timer.stop()

    def _tick(self):
        self.metrics.update()
        if self.callback is not None:
            self.callback()
