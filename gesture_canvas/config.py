from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional


@dataclass
class SmootherConfig:
    """
    base_weight: вес предыдущего кадра, когда рука неподвижна.
    velocity_gain: насколько быстро вес падает с ростом скорости точки.
    min_weight: нижняя граница веса. Быстрое движение никогда не бывает
                отзывчивее, чем (1 - min_weight).
    """
    base_weight: float = 0.6
    velocity_gain: float = 0.55
    min_weight: float = 0.25

    def __post_init__(self):
        for name in ("base_weight", "min_weight"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.velocity_gain < 0:
            raise ValueError(f"velocity_gain must be non-negative, got {self.velocity_gain}")


@dataclass
class ClassifierConfig:
    pinch_ratio: float = 0.3       # доля от масштаба руки
    debounce_ms: float = 120.0

    def __post_init__(self):
        if self.pinch_ratio <= 0:
            raise ValueError(f"pinch_ratio must be positive, got {self.pinch_ratio}")
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be non-negative, got {self.debounce_ms}")


@dataclass
class StrokeConfig:
    gap_threshold: float = 15.0    # px, выше этого вставляем промежуточные точки
    step_length: float = 5.0       # px, шаг интерполяции
    min_distance: float = 1.0      # px, более близкие точки отбрасываются
    eraser_radius: float = 20.0
    color: str = "#000000"
    width: float = 5.0
    pressure_gain: float = 1.5
    history_limit: Optional[int] = None  # None = без ограничения

    def __post_init__(self):
        if self.step_length <= 0:
            raise ValueError(f"step_length must be positive, got {self.step_length}")
        if self.gap_threshold < self.step_length:
            raise ValueError("gap_threshold must not be smaller than step_length")
        if self.min_distance < 0:
            raise ValueError(f"min_distance must be non-negative, got {self.min_distance}")
        if self.width <= 0 or self.eraser_radius <= 0:
            raise ValueError("width and eraser_radius must be positive")
        if self.history_limit is not None and self.history_limit < 1:
            raise ValueError(f"history_limit must be at least 1, got {self.history_limit}")


@dataclass
class RenderConfig:
    width: int = 1280
    height: int = 960
    device_pixel_ratio: float = 1.0
    interval_ms: int = 16
    mirror: bool = True

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"surface size must be positive, got {self.width}x{self.height}")
        if self.device_pixel_ratio <= 0:
            raise ValueError("device_pixel_ratio must be positive")
        if self.interval_ms <= 0:
            raise ValueError("interval_ms must be positive")


@dataclass
class PipelineConfig:
    smoother: SmootherConfig = field(default_factory=SmootherConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    stroke: StrokeConfig = field(default_factory=StrokeConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> "PipelineConfig":
        """Собирает конфиг из вложенного словаря, например {"stroke": {"width": 8}}."""
        config = cls()
        known = {f.name for f in fields(cls)}
        for section, overrides in data.items():
            if section not in known:
                raise ValueError(f"Unknown config section: {section}")
            current = getattr(config, section)
            allowed = {f.name for f in fields(current)}
            unknown = set(overrides) - allowed
            if unknown:
                raise ValueError(f"Unknown keys in [{section}]: {', '.join(sorted(unknown))}")
            setattr(config, section, replace(current, **overrides))
        return config
