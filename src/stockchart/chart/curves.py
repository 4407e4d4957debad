"""
Curve helpers for path strokes.

basis_curve samples a clamped uniform cubic B-spline through a polyline:
the stroke starts and ends on the first and last points and passes near,
not through, the interior ones.
"""

from __future__ import annotations

import numpy as np

LINEAR = "linear"
BASIS = "basis"


def basis_curve(points, samples: int = 8) -> np.ndarray:
    """
    Args:
        points: (n, 2) array-like of control points
        samples: points sampled per cubic segment

    Returns:
        (m, 2) array of stroke vertices
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    n = len(pts)
    if n < 3:
        return pts.copy()

    # the last control point is repeated once to close the spline
    ext = np.vstack([pts, pts[-1:]])
    x0, x1, x = ext[0:n - 1], ext[1:n], ext[2:n + 1]

    c1 = (2 * x0 + x1) / 3
    c2 = (x0 + 2 * x1) / 3
    end = (x0 + 4 * x1 + x) / 6
    first = (5 * pts[0] + pts[1]) / 6
    start = np.vstack([first, end[:-1]])

    t = np.linspace(0.0, 1.0, samples + 1)[1:, None, None]
    mt = 1.0 - t
    segments = (mt ** 3 * start + 3 * mt ** 2 * t * c1
                + 3 * mt * t ** 2 * c2 + t ** 3 * end)
    # (samples, segments, 2) -> segment-major vertex order
    body = segments.transpose(1, 0, 2).reshape(-1, 2)
    return np.vstack([pts[:1], first, body, pts[-1:]])


def stroke_points(points, curve: str = LINEAR, samples: int = 8) -> np.ndarray:
    """Vertices to draw for a path with the given curve interpolation."""
    if curve == BASIS:
        return basis_curve(points, samples)
    return np.asarray(points, dtype=float).reshape(-1, 2)


__all__ = ["basis_curve", "stroke_points", "LINEAR", "BASIS"]
