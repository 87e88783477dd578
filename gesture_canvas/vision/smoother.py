from typing import List, Optional, Sequence

import numpy as np

from gesture_canvas.config import SmootherConfig
from gesture_canvas.vision.landmarks import Landmark, array_to_frame, frame_to_array


class LandmarkSmoother:
    def __init__(self, config: Optional[SmootherConfig] = None):
        """
        Сглаживание с весом, зависящим от скорости каждой точки.
        Пока рука почти неподвижна, вес истории большой и дрожание гасится.
        При быстром штрихе вес падает до min_weight, и курсор не отстаёт.
        """
        self.config = config or SmootherConfig()
        self._prev: Optional[np.ndarray] = None

    @property
    def state(self) -> Optional[np.ndarray]:
        return None if self._prev is None else self._prev.copy()

    def smooth(self, frame: Sequence) -> List[Landmark]:
        current = frame_to_array(frame)

        # Первый кадр или другое число точек: смешивать не с чем
        if self._prev is None or self._prev.shape != current.shape:
            self._prev = current
            return array_to_frame(current)

        smoothed = self.blend(self._prev, current)
        self._prev = smoothed
        return array_to_frame(smoothed)

    def blend(self, prev: np.ndarray, current: np.ndarray) -> np.ndarray:
        """Чистая функция: результат зависит только от prev и current."""
        cfg = self.config
        velocity = np.linalg.norm(current - prev, axis=1)
        weights = np.maximum(cfg.min_weight, cfg.base_weight - velocity * cfg.velocity_gain)
        weights = weights[:, np.newaxis]
        return prev * weights + current * (1.0 - weights)

    def reset(self):
        self._prev = None
