import logging
from collections import deque
from typing import Optional

from gesture_canvas.canvas.surface import DrawingSurface, Snapshot

logger = logging.getLogger(__name__)


class StrokeHistory:
    """
    Стек снимков холста: один снимок на каждый завершённый штрих.
    limit=None означает без ограничения; иначе самые старые снимки вытесняются.
    """

    def __init__(self, limit: Optional[int] = None):
        self.limit = limit
        self._snapshots = deque(maxlen=limit)

    def __len__(self):
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return bool(self._snapshots)

    @property
    def top(self) -> Optional[Snapshot]:
        return self._snapshots[-1] if self._snapshots else None

    def push(self, snapshot: Snapshot):
        self._snapshots.append(snapshot)

    def undo(self, surface: Optional[DrawingSurface]) -> Optional[Snapshot]:
        if not self._snapshots:
            logger.info("Nothing to undo")
            return None

        popped = self._snapshots.pop()
        if surface is not None:
            if self._snapshots:
                surface.restore_snapshot(self._snapshots[-1])
            else:
                surface.clear()
        return popped

    def clear(self, surface: Optional[DrawingSurface]):
        self._snapshots.clear()
        if surface is not None:
            surface.clear()
