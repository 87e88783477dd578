from enum import Enum
from typing import List, NamedTuple, Optional, Sequence

import numpy as np

NUM_LANDMARKS = 21

# Индексы точек MediaPipe Hands, которые нам нужны
WRIST = 0
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_TIP = 12


class Landmark(NamedTuple):
    x: float
    y: float
    z: float = 0.0


class Tool(Enum):
    DRAW = "draw"
    ERASE = "erase"
    LINE = "line"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    SELECT = "select"


class Gesture(Enum):
    NONE = "none"
    DRAWING = "drawing"
    ERASING = "erasing"
    LINE = "line"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    SELECTING = "selecting"


def is_valid_frame(frame) -> bool:
    return frame is not None and len(frame) >= NUM_LANDMARKS


def frame_to_array(frame: Sequence) -> np.ndarray:
    """
    Переводит кадр в массив (N, 3).
    Понимает Landmark, объекты MediaPipe (lm.x, lm.y, lm.z) и обычные тройки.
    """
    rows = []
    for lm in frame:
        if hasattr(lm, "x"):
            rows.append((lm.x, lm.y, getattr(lm, "z", 0.0)))
        else:
            rows.append(tuple(lm))
    return np.asarray(rows, dtype=float).reshape(len(rows), 3)


def array_to_frame(points: np.ndarray) -> List[Landmark]:
    return [Landmark(float(x), float(y), float(z)) for x, y, z in points]


def scale_frame(frame: Sequence, factor: float, origin: Optional[int] = WRIST) -> List[Landmark]:
    """Масштабирует руку относительно точки origin (по умолчанию запястья)."""
    points = frame_to_array(frame)
    center = points[origin] if origin is not None else np.zeros(3)
    return array_to_frame(center + (points - center) * factor)
