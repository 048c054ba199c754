from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, FrozenSet, List, Sequence, Tuple, Union

import numpy as np

from kinemap.geometry import cool_max_radius, cool_mean
from kinemap.smallest_circle import Circle, smallest_enclosing_circle

CenterFunction = Callable[[np.ndarray], Sequence[float]]


class CoverMethod(str, Enum):
    simple = "simple"
    mean = "mean"
    median = "median"
    smallest = "smallest"


@dataclass(frozen=True)
class Cover:
    """A cluster of points summarized by one circle which contains all of them.

    Attributes
    ----------
        indexes: Sorted indices of the member points in the solved point array.
        circle: The covering circle (x, y, r).
    """

    indexes: Tuple[int, ...]
    circle: Circle

    @property
    def member_set(self) -> FrozenSet[int]:
        return frozenset(self.indexes)

    @property
    def center(self) -> np.ndarray:
        return self.circle.center

    @property
    def radius(self) -> float:
        return self.circle.r

    def __len__(self):
        return len(self.indexes)


def simple_center(points: np.ndarray) -> np.ndarray:
    """Center of the axis aligned bounding box. Not the smallest circle, but close enough and cheap."""
    return (points.min(axis=0) + points.max(axis=0)) / 2


def mean_center(points: np.ndarray) -> np.ndarray:
    return points.mean(axis=0)


def median_center(points: np.ndarray) -> np.ndarray:
    return np.median(points, axis=0)


def smallest_center(points: np.ndarray) -> np.ndarray:
    return smallest_enclosing_circle(points).center


COVER_METHODS = MappingProxyType(
    {
        CoverMethod.simple: simple_center,
        CoverMethod.mean: mean_center,
        CoverMethod.median: median_center,
        CoverMethod.smallest: smallest_center,
    }
)


def resolve_cover_method(cover_method: Union[str, CoverMethod, CenterFunction]) -> CenterFunction:
    """Turn a cover method option into the function placing the center of a cover.

    A callable is taken as a custom strategy: it receives the (m, 2) member points of a cover and returns the
    cover center. The radius is always derived from the center, so every strategy produces covering circles.
    """
    if callable(cover_method):
        return cover_method
    try:
        return COVER_METHODS[CoverMethod(cover_method)]
    except ValueError:
        raise ValueError(
            f"Invalid cover method: {cover_method}. "
            f'Please select one from: {", ".join(m.value for m in CoverMethod)}.'
        ) from None


def summarize_covers(
    points: np.ndarray,
    groups: Sequence[Sequence[int]],
    center_function: CenterFunction,
    minimum_radius: float = 0.0,
) -> List[Circle]:
    """Compute the covering circle of each group of points.

    The center of each group is placed by the cover method, the radius is the largest distance of a member from
    it, floored at minimum_radius.

    Parameters
    ----------
        points: Array of shape (n, 2) with all the points.

        groups: k non-empty lists of indices into points.

        center_function: Strategy placing the center of a group of points.

        minimum_radius: Lower bound of the radii.

    Returns
    -------
        circles: A list with one circle per group.
    """
    if len(groups) == 0:
        return []
    members = np.concatenate([np.asarray(g, dtype=np.int64) for g in groups])
    partition = np.repeat(np.arange(len(groups)), [len(g) for g in groups])
    if center_function is mean_center:
        centers = np.asarray(cool_mean(points[members], partition), dtype=np.float64)
    else:
        centers = np.array([center_function(points[np.asarray(g)]) for g in groups], dtype=np.float64)
    radii = cool_max_radius(points[members] - centers[partition], partition)
    radii = np.maximum(radii, minimum_radius)
    return [Circle(float(x), float(y), float(r)) for (x, y), r in zip(centers, radii)]
