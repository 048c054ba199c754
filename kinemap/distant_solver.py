from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from kinemap.geometry import as_points


class Region(IntEnum):
    """Position of a point relative to a viewport, row-major over a 3x3 grid.

    0  1  2
    3  4  5
    6  7  8
    """

    TOP_LEFT = 0
    TOP = 1
    TOP_RIGHT = 2
    LEFT = 3
    INSIDE = 4
    RIGHT = 5
    BOTTOM_LEFT = 6
    BOTTOM = 7
    BOTTOM_RIGHT = 8


EDGE_REGIONS = (Region.TOP, Region.LEFT, Region.RIGHT, Region.BOTTOM)
CORNER_REGIONS = (Region.TOP_LEFT, Region.TOP_RIGHT, Region.BOTTOM_LEFT, Region.BOTTOM_RIGHT)


@dataclass(frozen=True)
class Cover1D:
    """A group of scalars along one axis.

    Attributes
    ----------
        indexes: Member indices, in ascending order of their scalar value.
        span: (center, half_width) of the member values.
        region: The viewport edge the group belongs to, when produced by distant_solve.
    """

    indexes: Tuple[int, ...]
    span: Tuple[float, float]
    region: Optional[Region] = None

    @property
    def center(self) -> float:
        return self.span[0]

    @property
    def half_width(self) -> float:
        return self.span[1]


@dataclass
class DistantSolution:
    regions: List[List[int]]
    top: List[Cover1D] = field(default_factory=list)
    left: List[Cover1D] = field(default_factory=list)
    right: List[Cover1D] = field(default_factory=list)
    bottom: List[Cover1D] = field(default_factory=list)

    @property
    def edges(self) -> List[Cover1D]:
        return self.top + self.left + self.right + self.bottom

    @property
    def corners(self) -> List[List[int]]:
        return [self.regions[r] for r in CORNER_REGIONS]


def _span(values: np.ndarray) -> Tuple[float, float]:
    low, high = float(values.min()), float(values.max())
    return (low + high) / 2, (high - low) / 2


def merge_solve_1d(scalars: Sequence[float], merge_distance: float) -> List[Cover1D]:
    """Group scalars whose consecutive gaps are smaller than merge_distance.

    A group wider than merge_distance is broken down into floor(width / merge_distance) equally wide slices, so a
    single indicator never stands for an arbitrarily long stretch of an edge.

    Parameters
    ----------
        scalars: Array of shape (n, ) with the positions along the axis.

        merge_distance: Gap below which two neighboring values belong to the same group.

    Returns
    -------
        covers: The groups in ascending order of position.
    """
    if np.isnan(merge_distance) or merge_distance <= 0:
        raise ValueError(f"Invalid merge distance: {merge_distance}. It should be a positive number.")
    scalars = np.asarray(scalars, dtype=np.float64).reshape(-1)
    if len(scalars) == 0:
        return []

    order = np.argsort(scalars, kind="stable")
    values = scalars[order]
    splits = np.flatnonzero(np.diff(values) >= merge_distance) + 1

    covers = []
    for group in np.split(order, splits):
        group_values = scalars[group]
        low = group_values[0]
        width = group_values[-1] - low
        count = max(1, int(np.floor(width / merge_distance)))
        thresholds = low + width * np.arange(1, count) / count
        # Each value goes to the first threshold it falls below.
        slices = np.searchsorted(thresholds, group_values, side="right")
        for k in range(count):
            members = group[slices == k]
            if len(members) == 0:
                continue
            covers.append(Cover1D(indexes=tuple(int(i) for i in members), span=_span(scalars[members])))
    return covers


def _section(values: np.ndarray, start: float, end: float) -> np.ndarray:
    return np.where(values < start, 0, np.where(values <= end, 1, 2))


def classify_regions(points, viewport: Tuple[float, float, float, float]) -> np.ndarray:
    """Region of every point relative to the viewport (x, y, width, height). Points on the border are inside."""
    points = as_points(points)
    x0, y0, w, h = viewport
    if w < 0 or h < 0:
        raise ValueError(f"Invalid viewport: {viewport}. Its width and height should be non-negative.")
    i = _section(points[:, 0], x0, x0 + w)
    j = _section(points[:, 1], y0, y0 + h)
    return 3 * j + i


def distant_solve(
    points, viewport: Tuple[float, float, float, float], merge_distance: float, verbose: bool = False
) -> DistantSolution:
    """Cluster the points lying outside a viewport into edge indicators.

    Points are classified into the nine regions around the viewport. The points of each edge region are grouped
    along the edge (x for top and bottom, y for left and right) with merge_solve_1d. Corner regions are returned
    uncombined and the inside region is reported but not processed.

    Parameters
    ----------
        points: Array of shape (n, 2), usually the remains and cover centers of a merge solve.

        viewport: (x, y, width, height) of the visible area in map units.

        merge_distance: Gap below which points along the same edge share an indicator.

        verbose: If true, print info messages.

    Returns
    -------
        solution: The regions as lists of point indices and the edge groups, with indices into points.
    """
    points = as_points(points)
    region_of = classify_regions(points, viewport)
    regions = [np.flatnonzero(region_of == r).tolist() for r in Region]

    def solve(region: Region, axis: int) -> List[Cover1D]:
        indexes = regions[region]
        covers = merge_solve_1d(points[indexes, axis], merge_distance)
        return [replace(c, indexes=tuple(indexes[i] for i in c.indexes), region=region) for c in covers]

    solution = DistantSolution(
        regions=regions,
        top=solve(Region.TOP, 0),
        left=solve(Region.LEFT, 1),
        right=solve(Region.RIGHT, 1),
        bottom=solve(Region.BOTTOM, 0),
    )
    if verbose:
        print(
            f"{len(points) - len(regions[Region.INSIDE])} points off screen, "
            f"{len(solution.edges)} edge indicators."
        )
    return solution
