from typing import List, Optional

import numpy as np

from gesture_canvas.vision.landmarks import (
    INDEX_TIP, MIDDLE_MCP, MIDDLE_PIP, MIDDLE_TIP, THUMB_TIP, Landmark, array_to_frame,
)

POSES = ("open", "point", "pinch")


class MockHand:
    """
    Генератор правдоподобной руки для демо-режима без камеры.
    Раскладка точек как у MediaPipe: запястье, затем по 4 точки на палец.
    """

    def __init__(self, jitter: float = 0.0, seed: Optional[int] = None):
        self.jitter = jitter
        self.rng = np.random.default_rng(seed)

    def frame(self, x: float = 0.5, y: float = 0.6, pose: str = "open") -> List[Landmark]:
        if pose not in POSES:
            raise ValueError(f"Unknown pose {pose!r}, expected one of {POSES}")

        points = self._open_hand(x, y)

        if pose in ("point", "pinch"):
            # Средний палец согнут: кончик ниже своего сустава
            points[MIDDLE_PIP + 1, 1] = points[MIDDLE_MCP, 1] + 0.01
            points[MIDDLE_TIP, 1] = points[MIDDLE_MCP, 1] + 0.02
            # Указательный вытянут сильнее обычного
            points[INDEX_TIP, 1] = y - 0.25

        if pose == "pinch":
            points[THUMB_TIP] = points[INDEX_TIP] + (0.003, 0.0, 0.0)

        if self.jitter > 0:
            points = points + self.rng.normal(0.0, self.jitter, points.shape)

        return array_to_frame(points)

    def _open_hand(self, x: float, y: float) -> np.ndarray:
        points = [(x, y, 0.0)]
        # (смещение по x, шаг по y) для большого, указательного, среднего, безымянного, мизинца
        fingers = [(-0.05, 0.03), (-0.02, 0.05), (0.0, 0.04), (0.02, 0.03), (0.04, 0.02)]
        for finger, (dx, dy) in enumerate(fingers):
            for i in range(1, 5):
                if finger == 0:
                    points.append((x + dx * i, y - dy * i, 0.0))
                else:
                    points.append((x + dx, y - dy * i, 0.0))
        return np.array(points, dtype=float)
