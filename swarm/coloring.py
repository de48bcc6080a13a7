"""Per-body colors: an HSL hue sweep across the population.

Body i of N gets hue 255 * i / (N - 1) degrees at full saturation and
80% lightness, so neighbouring bodies (which differ only by a tiny theta2
offset) get neighbouring colors and the fan-out reads as a gradient.
"""

import numpy as np

# Hue range covered by the sweep, in degrees
DEFAULT_HUE_SPAN = 255.0
DEFAULT_SATURATION = 1.0
DEFAULT_LIGHTNESS = 0.8
DEFAULT_ALPHA = 0.25


def hsl_to_rgb(hue, saturation, lightness):
    """Convert HSL to RGB floats in [0, 1], elementwise over hue.

    Args:
        hue: Array of hues in degrees (any real value, wrapped to [0, 360)).
        saturation: Saturation in [0, 1].
        lightness: Lightness in [0, 1].

    Returns:
        (N, 3) float64 array of [r, g, b].
    """
    hue = np.mod(np.asarray(hue, dtype=np.float64), 360.0)

    chroma = (1.0 - abs(2.0 * lightness - 1.0)) * saturation
    h_sector = hue / 60.0
    sector = h_sector.astype(np.int32) % 6
    x = chroma * (1.0 - np.abs(np.mod(h_sector, 2.0) - 1.0))
    zero = np.zeros_like(hue)
    c = np.full_like(hue, chroma)

    # (r, g, b) before lightness offset, one column per sector
    r = np.select(
        [sector == 0, sector == 1, sector == 2, sector == 3, sector == 4],
        [c, x, zero, zero, x],
        default=c,
    )
    g = np.select(
        [sector == 0, sector == 1, sector == 2, sector == 3, sector == 4],
        [x, c, c, x, zero],
        default=zero,
    )
    b = np.select(
        [sector == 0, sector == 1, sector == 2, sector == 3, sector == 4],
        [zero, zero, x, c, c],
        default=x,
    )

    m = lightness - chroma / 2.0
    return np.column_stack((r + m, g + m, b + m))


def build_palette(
    count: int,
    hue_span: float = DEFAULT_HUE_SPAN,
    saturation: float = DEFAULT_SATURATION,
    lightness: float = DEFAULT_LIGHTNESS,
    alpha: float = DEFAULT_ALPHA,
) -> np.ndarray:
    """Build one RGBA color per body.

    Returns:
        (count, 4) uint8 array in RGBA order.
    """
    if count <= 1:
        hues = np.zeros(count, dtype=np.float64)
    else:
        hues = hue_span * np.arange(count, dtype=np.float64) / (count - 1)

    rgb = hsl_to_rgb(hues, saturation, lightness)

    palette = np.empty((count, 4), dtype=np.uint8)
    palette[:, :3] = np.clip(np.round(rgb * 255.0), 0, 255).astype(np.uint8)
    palette[:, 3] = int(round(alpha * 255.0))
    return palette
