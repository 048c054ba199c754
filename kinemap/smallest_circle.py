"""Smallest enclosing circle of a set of 2-D points.

The circle is grown from a small support set. Starting from a far apart pair, the point farthest from the current
center joins the support, the minimal circle of the support is found by trying every pair diameter and every
circumcircle, and the support is cut back to the points on the new boundary. The radius grows on every round, so the
loop ends once no point lies outside. The construction is deterministic.
"""
from itertools import combinations
from typing import NamedTuple

import numpy as np

# Relative and absolute slack for containment checks, circumcircles are only exact up to rounding.
_RELATIVE_EPSILON = 1e-12
_ABSOLUTE_EPSILON = 1e-12
_MAX_ITERATIONS = 1000


class Circle(NamedTuple):
    x: float
    y: float
    r: float

    @property
    def center(self) -> np.ndarray:
        return np.array([self.x, self.y])

    def contains(self, point) -> bool:
        return np.hypot(point[0] - self.x, point[1] - self.y) <= self.r * (1 + _RELATIVE_EPSILON) + _ABSOLUTE_EPSILON


def _circumcenters(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> np.ndarray:
    """Centers of the circles through the rows of a, b and c. Collinear triples are left out."""
    d = 2 * (a[:, 0] * (b[:, 1] - c[:, 1]) + b[:, 0] * (c[:, 1] - a[:, 1]) + c[:, 0] * (a[:, 1] - b[:, 1]))
    keep = d != 0
    a, b, c, d = a[keep], b[keep], c[keep], d[keep]
    sa, sb, sc = (a ** 2).sum(axis=1), (b ** 2).sum(axis=1), (c ** 2).sum(axis=1)
    x = (sa * (b[:, 1] - c[:, 1]) + sb * (c[:, 1] - a[:, 1]) + sc * (a[:, 1] - b[:, 1])) / d
    y = (sa * (c[:, 0] - b[:, 0]) + sb * (a[:, 0] - c[:, 0]) + sc * (b[:, 0] - a[:, 0])) / d
    return np.column_stack([x, y])


def _support_circle(support: np.ndarray):
    """Minimal circle of a handful of points.

    Its center is the midpoint of two of them or the circumcenter of three, the candidate whose farthest support point
    is nearest wins.
    """
    origin = support.mean(axis=0)
    local = support - origin
    pairs = np.array(list(combinations(range(len(local)), 2)))
    candidates = [(local[pairs[:, 0]] + local[pairs[:, 1]]) / 2]
    if len(local) > 2:
        triples = np.array(list(combinations(range(len(local)), 3)))
        candidates.append(_circumcenters(local[triples[:, 0]], local[triples[:, 1]], local[triples[:, 2]]))
    candidates = np.concatenate(candidates)

    radii = np.linalg.norm(local[None, :, :] - candidates[:, None, :], axis=2).max(axis=1)
    best = np.argmin(radii)
    return candidates[best] + origin, radii[best]


def smallest_enclosing_circle(points) -> Circle:
    """Compute the minimal circle containing all points.

    Parameters
    ----------
        points: Array-like of shape (n, 2) with n >= 1.

    Returns
    -------
        circle: The smallest enclosing circle as (x, y, r).
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(points) == 0:
        raise ValueError("The smallest enclosing circle is undefined for an empty set of points.")

    points = np.unique(points, axis=0)
    if len(points) == 1:
        return Circle(float(points[0, 0]), float(points[0, 1]), 0.0)

    first = points[np.argmax(np.linalg.norm(points - points.mean(axis=0), axis=1))]
    second = points[np.argmax(np.linalg.norm(points - first, axis=1))]
    support = np.array([first, second])
    center = (first + second) / 2
    radius = np.linalg.norm(first - second) / 2

    for _ in range(_MAX_ITERATIONS):
        distances = np.linalg.norm(points - center, axis=1)
        farthest = np.argmax(distances)
        if distances[farthest] <= radius * (1 + _RELATIVE_EPSILON) + _ABSOLUTE_EPSILON:
            break
        support = np.vstack([support, points[farthest]])
        center, radius = _support_circle(support)
        on_boundary = np.isclose(np.linalg.norm(support - center, axis=1), radius, rtol=1e-9, atol=_ABSOLUTE_EPSILON)
        support = support[on_boundary]

    # Rounding in the support circles may leave a point a hair outside.
    radius = np.linalg.norm(points - center, axis=1).max()
    return Circle(float(center[0]), float(center[1]), float(radius))
