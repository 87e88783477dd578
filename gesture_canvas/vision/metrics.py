import time
from collections import deque
from typing import Callable


class MetricsCollector:
    def __init__(self, window: int = 30, clock: Callable[[], float] = time.perf_counter):
        self.frame_times = deque(maxlen=window)
        self.clock = clock

    def update(self) -> float:
        """Вызывается каждый кадр. Возвращает текущий FPS."""
        self.frame_times.append(self.clock())
        return self.fps

    @property
    def fps(self) -> float:
        if len(self.frame_times) < 2:
            return 0.0

        # FPS = (число кадров - 1) / (время между первым и последним)
        elapsed = self.frame_times[-1] - self.frame_times[0]
        if elapsed <= 0:
            return 0.0
        return (len(self.frame_times) - 1) / elapsed

    def reset(self):
        self.frame_times.clear()
