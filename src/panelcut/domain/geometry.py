"""Rectangle kernel for free-space tracking.

Pure functions over integer Rect values. Free rectangles produced by
``subtract`` are maximal: each one spans the full extent of the source
rectangle on the axis it does not cut, so neighbouring results may
overlap each other. ``prune_contained`` keeps the set from growing with
redundant entries.
"""

from __future__ import annotations

from typing import Iterable

from .value_objects import Rect


def overlaps(a: Rect, b: Rect) -> bool:
    """Check strict interior overlap. Touching edges do not overlap."""
    return a.x < b.right and b.x < a.right and a.y < b.top and b.y < a.top


def contains(outer: Rect, inner: Rect) -> bool:
    """Check that ``inner`` lies entirely inside ``outer`` (edges may coincide)."""
    return (
        inner.x >= outer.x
        and inner.y >= outer.y
        and inner.right <= outer.right
        and inner.top <= outer.top
    )


def subtract(free: Rect, occupied: Rect) -> list[Rect]:
    """Remove ``occupied`` from ``free``.

    Yields up to four maximal rectangles (left, right, below, above the
    occupied area). Zero-area remainders are dropped. If the rectangles do
    not overlap, ``free`` is returned unchanged.

    Args:
        free: The free rectangle to split.
        occupied: The area being claimed, usually a kerf-inflated footprint.

    Returns:
        Remaining free rectangles, in left/right/below/above order.
    """
    if not overlaps(free, occupied):
        return [free]

    remainders: list[Rect] = []

    if occupied.x > free.x:
        remainders.append(Rect(free.x, free.y, occupied.x - free.x, free.height))
    if occupied.right < free.right:
        remainders.append(
            Rect(occupied.right, free.y, free.right - occupied.right, free.height)
        )
    if occupied.y > free.y:
        remainders.append(Rect(free.x, free.y, free.width, occupied.y - free.y))
    if occupied.top < free.top:
        remainders.append(
            Rect(free.x, occupied.top, free.width, free.top - occupied.top)
        )

    return [r for r in remainders if r.area > 0]


def prune_contained(rects: Iterable[Rect]) -> list[Rect]:
    """Drop rectangles fully contained in another one.

    Exact duplicates keep their first occurrence. Input order is preserved
    for the survivors, which keeps packing deterministic.
    """
    candidates = [r for r in rects if r.area > 0]
    kept: list[Rect] = []
    for i, rect in enumerate(candidates):
        redundant = False
        for j, other in enumerate(candidates):
            if i == j or not contains(other, rect):
                continue
            # Identical rects: only the first one survives
            if other == rect and j > i:
                continue
            redundant = True
            break
        if not redundant:
            kept.append(rect)
    return kept


def inflate(rect: Rect, kerf: int, bounds: Rect) -> Rect:
    """Grow ``rect`` by ``kerf`` on its right and top edges, clipped to ``bounds``.

    The saw cut that separates a piece from its neighbours is charged to
    the piece's trailing edges. Along the sheet edge no cut is needed, so
    the inflation is clipped there.
    """
    right = min(rect.right + kerf, bounds.right)
    top = min(rect.top + kerf, bounds.top)
    return Rect(rect.x, rect.y, max(right - rect.x, 0), max(top - rect.y, 0))
