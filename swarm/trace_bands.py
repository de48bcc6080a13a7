"""Trace geometry for drawing: fading-width polylines grouped in bands.

A trace of k points has k - 1 segments whose pen width shrinks by a
constant factor per segment, newest first. Instead of one pen and one
draw call per segment, consecutive segments are grouped into a few bands
of shared width so each body is drawn with one polyline per band.
"""

import numpy as np

DEFAULT_BANDS = 8


def segment_widths(n_segments, base_width, decay):
    """Pen width of every segment, newest first."""
    return base_width * decay ** np.arange(n_segments, dtype=np.float64)


def band_edges(n_segments, n_bands=DEFAULT_BANDS):
    """Segment boundaries [0, ..., n_segments] splitting the trace into bands.

    Never yields an empty band: with fewer segments than bands, every
    segment gets a band of its own.
    """
    if n_segments <= 0:
        return np.zeros(1, dtype=np.intp)
    n_bands = max(1, min(n_bands, n_segments))
    return (np.arange(n_bands + 1) * n_segments) // n_bands


def trace_bands(offsets, origin, base_width, decay, n_bands=DEFAULT_BANDS):
    """Split (N, k, 2) trace offsets into polylines of shared width.

    Returns a list of (width, points) pairs, newest band first, where
    points is an (N, m, 2) array in absolute pixel coordinates. Adjacent
    bands share their boundary point, so the drawn trace has no gaps.
    A band's width is the mean of the segment widths it replaces.
    """
    offsets = np.asarray(offsets, dtype=np.float64)
    n_segments = offsets.shape[1] - 1
    if n_segments < 1:
        return []

    points = offsets + np.asarray(origin, dtype=np.float64)
    widths = segment_widths(n_segments, base_width, decay)
    edges = band_edges(n_segments, n_bands)

    bands = []
    for start, stop in zip(edges[:-1], edges[1:]):
        # segments start..stop-1 run through points start..stop
        bands.append((float(widths[start:stop].mean()),
                      points[:, start:stop + 1]))
    return bands
