from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

import numpy as np
import scipy.sparse as sp
from scipy.sparse.csgraph import connected_components
from sklearn import metrics
from sklearn.base import BaseEstimator

from kinemap.covers import CenterFunction, Cover, CoverMethod, resolve_cover_method, summarize_covers
from kinemap.geometry import as_points


@dataclass
class CoverSolution:
    """Result of a merge solve: every point index is either one of the remains or a member of exactly one cover."""

    remains: List[int]
    covers: List[Cover]
    n_points: int = field(default=0)

    @property
    def labels(self) -> np.ndarray:
        """Cover label of every point, -1 for the remains."""
        labels = np.full(self.n_points, -1, dtype=np.int64)
        for k, cover in enumerate(self.covers):
            labels[list(cover.indexes)] = k
        return labels

    def marker_points(self, points) -> np.ndarray:
        """Positions of the markers left on the map: the remains followed by the cover centers."""
        points = as_points(points)
        centers = [cover.center for cover in self.covers]
        return np.vstack([points[self.remains].reshape(-1, 2), np.array(centers).reshape(-1, 2)])


def candidate_adjacency(points: np.ndarray, merge_distance: float) -> sp.csr_matrix:
    """Sparse upper triangular adjacency with an edge for every pair closer than merge_distance."""
    dist = metrics.pairwise_distances(points, points, metric="euclidean")
    close = np.triu(dist < merge_distance, k=1)
    return sp.csr_matrix(close)


def get_clust(adjacency: sp.csr_matrix) -> Tuple[np.ndarray, int]:
    num_clust, u = connected_components(
        csgraph=adjacency, directed=True, connection="weak", return_labels=True
    )
    return u, num_clust


def first_overlap(circles) -> Optional[Tuple[int, int]]:
    """The lexicographically smallest pair (i, j), i < j, of overlapping circles, if any."""
    if len(circles) < 2:
        return None
    circles = np.asarray(circles, dtype=np.float64)
    centers, radii = circles[:, :2], circles[:, 2]
    dist = metrics.pairwise_distances(centers, centers, metric="euclidean")
    overlapping = np.triu(dist < radii[:, None] + radii[None, :], k=1)
    pairs = np.argwhere(overlapping)
    if len(pairs) == 0:
        return None
    i, j = pairs[0]
    return int(i), int(j)


class CoverSolver(BaseEstimator):
    """Cover solver for map markers.

    Groups points closer than a merge distance into covers, each summarized by a circle containing all of its
    members, so that a map view can draw one aggregate marker instead of many overlapping ones.

    Parameters
    ----------
    merge_distance: float
        Two points strictly closer than this distance end up in the same cover. It is expressed in map units, i.e.
        the marker size in pixels already converted with the current zoom.

    min_cover_diameter: float (default 0)
        Lower bound of the diameter of the cover circles. The radius of every cover is at least half of it.

    cover_method: str or callable (default 'simple')
        How the center of a cover is placed. One of 'simple' (bounding box center), 'mean', 'median' (per axis) and
        'smallest' (exact minimal enclosing circle). A callable receiving the (m, 2) member points of a
        cover and returning its center can be given as a custom strategy.

    merge_overlaps: bool (default True)
        If true, covers whose circles overlap are merged, repeatedly, till no two circles overlap.

    Attributes
    ----------
    remains_: list of int
        Indices of the points which belong to no cover.

    covers_: list of Cover
        The covers in order of their smallest member index at creation.

    labels_: array, shape (n_samples, )
        Cover label of each point, -1 for the remains.
    """

    def __init__(
        self,
        merge_distance: float = 1.0,
        min_cover_diameter: float = 0.0,
        cover_method: Union[str, CoverMethod, CenterFunction] = "simple",
        merge_overlaps: bool = True,
    ):
        self.merge_distance = merge_distance
        self.min_cover_diameter = min_cover_diameter
        self.cover_method = cover_method
        self.merge_overlaps = merge_overlaps

    def _validate(self) -> CenterFunction:
        if np.isnan(self.merge_distance) or self.merge_distance < 0:
            raise ValueError(f"Invalid merge distance: {self.merge_distance}. It should be a non-negative number.")
        if np.isnan(self.min_cover_diameter) or self.min_cover_diameter < 0:
            raise ValueError(
                f"Invalid minimum cover diameter: {self.min_cover_diameter}. It should be a non-negative number."
            )
        return resolve_cover_method(self.cover_method)

    def solve(self, X, verbose: bool = False) -> CoverSolution:
        """
        Cluster the points of X into covers and remains.

        Parameters
        ----------
        X: array, shape (n_samples, 2)
            The marker coordinates in map units.

        verbose: bool (default False)
            If true, print info messages.
        """
        center_function = self._validate()
        points = as_points(X)
        n = len(points)
        if n == 0:
            return CoverSolution(remains=[], covers=[], n_points=0)

        labels, num_clust = get_clust(candidate_adjacency(points, self.merge_distance))
        groups = [np.flatnonzero(labels == k) for k in range(num_clust)]
        groups = sorted((g.tolist() for g in groups if len(g) > 1), key=lambda g: g[0])
        if verbose:
            print(f"Found {len(groups)} groups of points closer than {self.merge_distance}.")

        minimum_radius = self.min_cover_diameter / 2
        circles = summarize_covers(points, groups, center_function, minimum_radius)

        if self.merge_overlaps:
            n_merges = 0
            pair = first_overlap(circles)
            while pair is not None:
                i, j = pair
                groups[i] = sorted(groups[i] + groups[j])
                circles[i] = summarize_covers(points, [groups[i]], center_function, minimum_radius)[0]
                del groups[j]
                del circles[j]
                n_merges += 1
                pair = first_overlap(circles)
            if verbose:
                print(f"Merged {n_merges} overlapping covers.")

        covers = [Cover(indexes=tuple(g), circle=c) for g, c in zip(groups, circles)]
        covered = set(i for g in groups for i in g)
        remains = [i for i in range(n) if i not in covered]
        if verbose:
            print(f"{len(covers)} covers with {len(covered)} points, {len(remains)} remaining points.")

        return CoverSolution(remains=remains, covers=covers, n_points=n)

    def fit(self, X, y=None, verbose: bool = False):
        """
        Solve the covers of X and store them in remains_, covers_ and labels_.

        Parameters
        ----------
        X: array, shape (n_samples, 2)
            The marker coordinates in map units.

        y: array, shape (n_samples, )
            Ignored.

        verbose: bool (default False)
            If true, print info messages.
        """
        solution = self.solve(X, verbose=verbose)
        self.remains_ = solution.remains
        self.covers_ = solution.covers
        self.labels_ = solution.labels
        return self

    def fit_predict(self, X, y=None, verbose: bool = False) -> np.ndarray:
        return self.fit(X, verbose=verbose).labels_


def merge_solve(
    points,
    merge_distance: float,
    min_cover_diameter: float = 0.0,
    cover_method: Union[str, CoverMethod, CenterFunction] = "simple",
    merge_overlaps: bool = True,
    verbose: bool = False,
) -> CoverSolution:
    """Group nearby points into covers. See CoverSolver for the parameters."""
    solver = CoverSolver(
        merge_distance=merge_distance,
        min_cover_diameter=min_cover_diameter,
        cover_method=cover_method,
        merge_overlaps=merge_overlaps,
    )
    return solver.solve(points, verbose=verbose)
