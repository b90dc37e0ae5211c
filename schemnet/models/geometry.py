"""
Geometry primitives shared by the whole data model.

Points are plain (x, y) tuples and rectangles are (x, y, width, height)
tuples, so nothing here depends on Qt. Every "same point" and
"point lies on a segment" decision made by the topology engine goes
through grid_point() and point_on_segment() below.
"""

import math
from typing import Sequence

Point = tuple[float, float]
Rect = tuple[float, float, float, float]
Segment = tuple[Point, Point]

# Distance (in scene units) below which a point is considered to be on a segment
ON_SEGMENT_TOLERANCE = 1.0


def grid_point(point: Point) -> tuple[int, int]:
    """Round a point to the integer grid used for topological comparisons."""
    return (int(round(point[0])), int(round(point[1])))


def same_point(a: Point, b: Point) -> bool:
    """Check whether two points fall onto the same integer grid coordinate."""
    return grid_point(a) == grid_point(b)


def add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1])


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def point_to_segment_distance(point: Point, a: Point, b: Point) -> tuple[float, Point]:
    """
    Calculate the distance from a point to a line segment.

    Returns:
        (distance, closest_point) where closest_point lies on segment ab.
    """
    px, py = point
    x1, y1 = a
    dx = b[0] - x1
    dy = b[1] - y1

    if abs(dx) < 1e-9 and abs(dy) < 1e-9:
        # Zero-length segment, just return distance to endpoint
        return distance(point, a), a

    # Parameter along the segment, clamped to stay within it
    t = ((px - x1) * dx + (py - y1) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))

    closest = (x1 + t * dx, y1 + t * dy)
    return distance(point, closest), closest


def point_on_segment(a: Point, b: Point, point: Point) -> bool:
    """
    Check whether a point lies on segment ab.

    All three points are rounded to the integer grid first; the point is on
    the segment when its distance to it is strictly below one unit.
    """
    dist, _ = point_to_segment_distance(grid_point(point), grid_point(a), grid_point(b))
    return dist < ON_SEGMENT_TOLERANCE


def rotate_point(point: Point, degrees: float, origin: Point = (0.0, 0.0)) -> Point:
    """Rotate a point clockwise (screen coordinates, y pointing down) about origin."""
    x, y = sub(point, origin)
    quarter = degrees % 360

    # Quarter turns are computed exactly to keep grid points on the grid
    if quarter == 0:
        rx, ry = x, y
    elif quarter == 90:
        rx, ry = -y, x
    elif quarter == 180:
        rx, ry = -x, -y
    elif quarter == 270:
        rx, ry = y, -x
    else:
        rad = math.radians(degrees)
        cos_a, sin_a = math.cos(rad), math.sin(rad)
        rx = x * cos_a - y * sin_a
        ry = x * sin_a + y * cos_a

    return (rx + origin[0], ry + origin[1])


def bounding_rect(points: Sequence[Point]) -> Rect:
    """Return the axis-aligned bounding rect (x, y, width, height) of some points."""
    if not points:
        return (0.0, 0.0, 0.0, 0.0)
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def rect_edges(rect: Rect) -> list[Segment]:
    """Return the four edges of a rect: top, right, bottom, left."""
    x, y, w, h = rect
    top_left = (x, y)
    top_right = (x + w, y)
    bottom_right = (x + w, y + h)
    bottom_left = (x, y + h)
    return [
        (top_left, top_right),
        (top_right, bottom_right),
        (bottom_right, bottom_left),
        (bottom_left, top_left),
    ]


def closest_edge(edges: Sequence[Segment], point: Point) -> int:
    """
    Find the edge closest to a point.

    Returns:
        Index into edges of the closest one, or -1 if edges is empty.
    """
    best_index = -1
    best_dist = math.inf
    for index, (a, b) in enumerate(edges):
        dist, _ = point_to_segment_distance(point, a, b)
        if dist < best_dist:
            best_dist = dist
            best_index = index
    return best_index


def clip_point_to_rect(point: Point, rect: Rect) -> Point:
    """Clamp a point into a rect (the point is kept if already inside)."""
    x, y, w, h = rect
    return (min(max(point[0], x), x + w), min(max(point[1], y), y + h))


def clip_point_to_rect_outline(point: Point, rect: Rect) -> Point:
    """Project a point onto the nearest edge of a rect."""
    clipped = clip_point_to_rect(point, rect)
    edges = rect_edges(rect)
    index = closest_edge(edges, clipped)
    if index < 0:
        return clipped
    a, b = edges[index]
    _, projected = point_to_segment_distance(clipped, a, b)
    return projected
