"""Fixed-step spatial resampling of captured strokes.

Pointer devices report samples at irregular, device-dependent rates, so a
raw stroke has dense points where the pen moved slowly and sparse points
where it moved fast. resample() walks the stroke and emits points at a
constant arc-length step, interpolating time and pressure at every inserted
point so the motion timing of the original capture is preserved.

Example:
    >>> from handset.domain import RawPoint
    >>> pts = [RawPoint(0, 0, 0, 0.5), RawPoint(10, 0, 100, 0.8), RawPoint(20, 0, 200, 0.3)]
    >>> [p.x for p in resample(pts, 5)]
    [0, 5.0, 10, 15.0, 20]
"""

from __future__ import annotations

from typing import Sequence

from ..domain.points import RawPoint

# Slack within which an original point counts as lying exactly on a step, so
# that resampling an already resampled stroke at the same step does not drift.
STEP_TOLERANCE = 1e-9


def resample(points: Sequence[RawPoint], step: float) -> list[RawPoint]:
    """Resample a stroke to near-constant spatial spacing.

    Consecutive original points are walked while accumulating distance. When
    the accumulated distance plus the current segment reaches step, a point
    is interpolated at the exact position where the running distance equals
    step. The inserted point then becomes the start of the remaining segment,
    so one long segment can yield several output points.

    Args:
        points: Ordered points in one coordinate space (pixels before
            normalization, em units after).
        step: Spacing between output points, in the units of points.

    Returns:
        New list of points. Every gap except the last equals step within
        floating-point tolerance. The last input point is always the last
        output point. Inputs with fewer than 2 points are returned as-is.

    Raises:
        ValueError: If step is not positive.
    """
    if step <= 0:
        raise ValueError(f"resample step must be positive, got {step}")
    if len(points) < 2:
        return list(points)

    out = [points[0]]
    acc = 0.0
    a = points[0]
    i = 1
    while i < len(points):
        b = points[i]
        d = a.distance_to(b)
        if d > 0 and acc + d + STEP_TOLERANCE >= step:
            if acc + d <= step + STEP_TOLERANCE:
                # b itself lies on the step
                a = b
            else:
                a = a.lerp(b, (step - acc) / d)
            out.append(a)
            acc = 0.0
            # b is not consumed: keep scanning from the inserted point
            continue
        acc += d
        a = b
        i += 1

    last = points[-1]
    if out[-1] is not last:
        if out[-1].same_position(last) and len(out) > 1:
            out[-1] = last
        else:
            out.append(last)
    return out
