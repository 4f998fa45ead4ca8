"""Click-density overlay rendering.

Each point paints a radial falloff whose alpha drops linearly from the peak at
its center to zero at ``radius``. Contributions are composited source-over, so
overlapping clicks build up density instead of replacing each other.
"""
from typing import Any, Iterable, Tuple

import numpy as np

DEFAULT_RADIUS = 30
DEFAULT_PEAK_ALPHA = 0.35
DEFAULT_COLOR = (255, 0, 0)


def _coords(point: Any) -> Tuple[float, float]:
    if isinstance(point, dict):
        return float(point["x"]), float(point["y"])
    x, y = point
    return float(x), float(y)


def render_heatmap(
    points: Iterable[Any],
    width: int,
    height: int,
    radius: float = DEFAULT_RADIUS,
    peak_alpha: float = DEFAULT_PEAK_ALPHA,
    color: Tuple[int, int, int] = DEFAULT_COLOR,
) -> np.ndarray:
    """
    Render normalized points onto a transparent RGBA surface.

    Args:
        points: ``{"x", "y"}`` mappings or ``(x, y)`` pairs in ``[0, 1]``
        width: Surface width in pixels
        height: Surface height in pixels
        radius: Falloff radius in pixels
        peak_alpha: Opacity at each point's center
        color: RGB color of the overlay

    Returns:
        Float array of shape ``(height, width, 4)`` with values in ``[0, 1]``
    """
    surface = np.zeros((height, width, 4), dtype=np.float32)
    surface[..., :3] = np.asarray(color, dtype=np.float32) / 255.0
    alpha = surface[..., 3]

    if width <= 0 or height <= 0 or radius <= 0:
        return surface

    reach = int(np.ceil(radius))
    for point in points:
        x, y = _coords(point)
        cx, cy = x * width, y * height

        # Only touch the pixels a point can reach
        x0, x1 = max(int(cx) - reach, 0), min(int(cx) + reach + 1, width)
        y0, y1 = max(int(cy) - reach, 0), min(int(cy) + reach + 1, height)
        if x0 >= x1 or y0 >= y1:
            continue

        # Sample at pixel centers
        xs = np.arange(x0, x1, dtype=np.float32) + 0.5
        ys = np.arange(y0, y1, dtype=np.float32) + 0.5
        dist = np.hypot(xs[np.newaxis, :] - cx, ys[:, np.newaxis] - cy)
        contribution = np.clip(peak_alpha * (1.0 - dist / radius), 0.0, None)

        region = alpha[y0:y1, x0:x1]
        region += contribution * (1.0 - region)

    return surface


def to_rgba8(surface: np.ndarray) -> np.ndarray:
    """Convert a float RGBA surface to ``uint8`` pixels."""
    return np.clip(np.rint(surface * 255.0), 0, 255).astype(np.uint8)
