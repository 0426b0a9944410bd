"""
Maps smoothed source-frame coordinates onto the output surface.

No clamping is applied: a fingertip near the frame edge can put the cursor
outside the surface. Callers that need an on-surface cursor use
CursorPosition.clamped().
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import CursorConfig, validate_cursor

Size = Tuple[float, float]


@dataclass(frozen=True)
class CursorPosition:
    x: float
    y: float

    def clamped(self, output_size: Size) -> "CursorPosition":
        width, height = output_size
        return CursorPosition(
            x=min(max(self.x, 0.0), float(width)),
            y=min(max(self.y, 0.0), float(height)),
        )

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


def project(smoothed_x: float, smoothed_y: float, source_size: Size, output_size: Size) -> CursorPosition:
    """Scale a source-frame point to output space."""
    source_w, source_h = source_size
    output_w, output_h = output_size
    return CursorPosition(
        x=(smoothed_x / source_w) * output_w,
        y=(smoothed_y / source_h) * output_h,
    )


class CursorProjector:
    def __init__(self, config: Optional[CursorConfig] = None):
        self._config = config or CursorConfig()
        validate_cursor(self._config)

    @property
    def source_size(self) -> Size:
        return self._config.source_frame_size

    @property
    def output_size(self) -> Size:
        return self._config.output_size

    def project(self, smoothed_x: float, smoothed_y: float) -> CursorPosition:
        return project(smoothed_x, smoothed_y, self.source_size, self.output_size)
