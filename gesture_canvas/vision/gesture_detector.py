import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from gesture_canvas.config import ClassifierConfig, SmootherConfig
from gesture_canvas.vision.landmarks import (
    INDEX_MCP, INDEX_PIP, INDEX_TIP, MIDDLE_MCP, MIDDLE_PIP, MIDDLE_TIP, THUMB_TIP,
    Gesture, Landmark, Tool, is_valid_frame,
)
from gesture_canvas.vision.smoother import LandmarkSmoother

logger = logging.getLogger(__name__)

# Какой жест даёт вытянутый указательный палец при каждом инструменте
POINTING_GESTURES = {
    Tool.DRAW: Gesture.DRAWING,
    Tool.LINE: Gesture.LINE,
    Tool.RECTANGLE: Gesture.RECTANGLE,
    Tool.CIRCLE: Gesture.CIRCLE,
    Tool.ERASE: Gesture.NONE,
    Tool.SELECT: Gesture.NONE,
}

GEOMETRY_ERRORS = (IndexError, AttributeError, TypeError, ValueError, ZeroDivisionError, FloatingPointError)


@dataclass(frozen=True)
class Pending:
    candidate: Gesture
    deadline: float


class GestureDebouncer:
    """
    Состояния: Stable(gesture) или Pending(candidate, deadline).
    Новый жест становится стабильным, только если держится delay секунд.
    Время передаётся снаружи, поэтому в тестах его легко подделать.
    """

    def __init__(self, delay: float = 0.12, initial: Gesture = Gesture.NONE):
        self.delay = delay
        self.stable = initial
        self.pending: Optional[Pending] = None

    def update(self, raw: Gesture, now: float) -> Gesture:
        if raw == self.stable:
            # Вернулись к стабильному жесту: кандидат был помехой
            self.pending = None
            return self.stable

        if self.pending is None or self.pending.candidate != raw:
            # Один отложенный кандидат за раз: новый заменяет старый
            self.pending = Pending(raw, now + self.delay)

        if now >= self.pending.deadline:
            logger.debug("Gesture %s -> %s", self.stable.value, raw.value)
            self.stable = raw
            self.pending = None

        return self.stable

    def reset(self, gesture: Gesture = Gesture.NONE):
        self.stable = gesture
        self.pending = None


@dataclass
class HandPose:
    hand_scale: float
    index_extended: bool
    middle_extended: bool
    pinching: bool


class GestureClassifier:
    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        smoother_config: Optional[SmootherConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or ClassifierConfig()
        self.smoother = LandmarkSmoother(smoother_config)
        self.debouncer = GestureDebouncer(self.config.debounce_ms / 1000.0)
        self.clock = clock

        # Последний сглаженный кадр, из него берём курсор
        self.last_frame: Optional[List[Landmark]] = None

    @property
    def stable_gesture(self) -> Gesture:
        return self.debouncer.stable

    def classify(self, frame: Optional[Sequence], tool: Tool, now: Optional[float] = None) -> Gesture:
        self.last_frame = None
        if not is_valid_frame(frame):
            return Gesture.NONE

        if now is None:
            now = self.clock()

        try:
            smoothed = self.smoother.smooth(frame)
            self.last_frame = smoothed
            raw = self._decide(self.analyze(smoothed), tool)
        except GEOMETRY_ERRORS as e:
            logger.debug("Gesture classification failed: %s", e)
            raw = Gesture.NONE

        return self.debouncer.update(raw, now)

    def analyze(self, lm: Sequence[Landmark]) -> HandPose:
        """Геометрия позы. Все пороги в долях масштаба руки."""
        hand_scale = self._dist(lm[INDEX_MCP], lm[MIDDLE_MCP])
        pinch_distance = self._dist(lm[THUMB_TIP], lm[INDEX_TIP])

        return HandPose(
            hand_scale=hand_scale,
            index_extended=self._is_extended(lm[INDEX_MCP], lm[INDEX_PIP], lm[INDEX_TIP]),
            middle_extended=self._is_extended(lm[MIDDLE_MCP], lm[MIDDLE_PIP], lm[MIDDLE_TIP]),
            pinching=pinch_distance < hand_scale * self.config.pinch_ratio,
        )

    def reset(self):
        self.smoother.reset()
        self.debouncer.reset()
        self.last_frame = None

    def _decide(self, pose: HandPose, tool: Tool) -> Gesture:
        if pose.pinching and tool == Tool.ERASE:
            return Gesture.ERASING
        if pose.index_extended and not pose.middle_extended and not pose.pinching:
            return POINTING_GESTURES[tool]
        return Gesture.NONE

    def _is_extended(self, mcp, pip, tip) -> bool:
        # Кончик должен подняться над суставом больше чем на половину длины пальца
        offset = mcp.y - tip.y
        segment = abs(mcp.y - pip.y) * 2
        return offset > segment / 2

    def _dist(self, p1, p2):
        return np.hypot(p1.x - p2.x, p1.y - p2.y)
