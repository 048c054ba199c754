import unittest

import numpy as np
import pytest
from utils import (
    assert_close_points_merged,
    assert_containment,
    assert_no_overlaps,
    assert_partition,
    clustered_points,
    uniform_points,
)

from kinemap import CoverSolver, merge_solve
from kinemap.merge_solver import first_overlap


class TestMergeSolveProperties(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.datasets = {
            "clustered": clustered_points(seed=0),
            "uniform": uniform_points(seed=1),
            "dense": clustered_points(n_points=500, n_hotspots=3, scale=15.0, seed=2),
        }
        cls.merge_distance = 8.0

    def test_partition_and_containment(self):
        for name, points in self.datasets.items():
            for method in ["simple", "mean", "median", "smallest"]:
                with self.subTest(dataset=name, method=method):
                    solution = merge_solve(points, self.merge_distance, cover_method=method)

                    assert_partition(solution, len(points))
                    assert_containment(points, solution)
                    assert_no_overlaps(solution)

    def test_close_points_are_merged(self):
        for name, points in self.datasets.items():
            with self.subTest(dataset=name):
                solution = merge_solve(points, self.merge_distance)

                assert_close_points_merged(points, solution, self.merge_distance)

    def test_determinism(self):
        points = self.datasets["clustered"]
        first = merge_solve(points, self.merge_distance, cover_method="smallest")
        second = merge_solve(points.copy(), self.merge_distance, cover_method="smallest")

        self.assertEqual(first.remains, second.remains)
        self.assertEqual(first.covers, second.covers)

    def test_covers_are_ordered_by_smallest_member(self):
        solution = merge_solve(self.datasets["clustered"], self.merge_distance, merge_overlaps=False)
        firsts = [cover.indexes[0] for cover in solution.covers]

        self.assertEqual(sorted(firsts), firsts)
        for cover in solution.covers:
            self.assertEqual(sorted(cover.indexes), list(cover.indexes))


def test_two_close_points_and_a_distant_one():
    points = np.array([[0.0, 0.0], [5.0, 0.0], [100.0, 100.0]])
    solution = merge_solve(points, merge_distance=10)

    assert solution.remains == [2]
    assert len(solution.covers) == 1
    cover = solution.covers[0]
    assert cover.indexes == (0, 1)
    np.testing.assert_array_almost_equal(cover.center, [2.5, 0.0])
    assert cover.radius == pytest.approx(2.5)


def test_points_at_exactly_the_merge_distance_stay_apart():
    points = np.array([[0.0, 0.0], [10.0, 0.0]])
    solution = merge_solve(points, merge_distance=10)

    assert solution.remains == [0, 1]
    assert solution.covers == []


def test_overlapping_covers_are_merged():
    # Two pairs whose circles overlap once a minimum diameter is enforced.
    points = np.array([[0.0, 0.0], [1.0, 0.0], [6.0, 0.0], [7.0, 0.0]])
    merged = merge_solve(points, merge_distance=2, min_cover_diameter=8)
    kept = merge_solve(points, merge_distance=2, min_cover_diameter=8, merge_overlaps=False)

    assert [c.indexes for c in merged.covers] == [(0, 1, 2, 3)]
    assert merged.covers[0].radius == pytest.approx(4.0)
    assert [c.indexes for c in kept.covers] == [(0, 1), (2, 3)]


def test_min_cover_diameter_is_a_diameter():
    points = np.array([[0.0, 0.0], [1.0, 0.0]])
    solution = merge_solve(points, merge_distance=2, min_cover_diameter=6)

    assert solution.covers[0].radius == pytest.approx(3.0)


def test_marker_points_and_labels():
    points = np.array([[0.0, 0.0], [50.0, 0.0], [1.0, 0.0], [100.0, 0.0]])
    solution = merge_solve(points, merge_distance=2)

    np.testing.assert_array_equal(solution.labels, [0, -1, 0, -1])
    np.testing.assert_array_almost_equal(
        solution.marker_points(points), [[50.0, 0.0], [100.0, 0.0], [0.5, 0.0]]
    )


def test_empty_and_single_inputs():
    empty = merge_solve(np.zeros((0, 2)), merge_distance=5)
    single = merge_solve([[3.0, 4.0]], merge_distance=5)

    assert empty.remains == [] and empty.covers == []
    assert single.remains == [0] and single.covers == []


def test_zero_merge_distance_keeps_every_point():
    points = np.array([[0.0, 0.0], [0.0, 0.0]])

    assert merge_solve(points, merge_distance=0).remains == [0, 1]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"merge_distance": -1.0},
        {"merge_distance": float("nan")},
        {"merge_distance": 1.0, "min_cover_diameter": -2.0},
        {"merge_distance": 1.0, "cover_method": "largest"},
    ],
)
def test_invalid_arguments(kwargs):
    with pytest.raises(ValueError):
        merge_solve(np.zeros((3, 2)), **kwargs)


def test_estimator_interface():
    points = clustered_points(seed=3)
    solver = CoverSolver(merge_distance=5.0, cover_method="smallest")
    labels = solver.fit_predict(points)

    assert labels.shape == (len(points),)
    assert set(np.flatnonzero(labels == -1)) == set(solver.remains_)
    for k, cover in enumerate(solver.covers_):
        assert set(np.flatnonzero(labels == k)) == set(cover.indexes)
    assert solver.get_params()["merge_distance"] == 5.0


def test_verbose_messages(capsys):
    merge_solve(np.array([[0.0, 0.0], [1.0, 0.0]]), merge_distance=2, verbose=True)

    assert "1 covers with 2 points, 0 remaining points." in capsys.readouterr().out


def test_first_overlap_is_lexicographic():
    circles = [(0.0, 0.0, 1.0), (10.0, 0.0, 1.0), (1.5, 0.0, 1.0), (10.5, 0.0, 1.0)]

    assert first_overlap(circles) == (0, 2)
    assert first_overlap(circles[:2]) is None


def test_cover_method_is_checked_when_solving():
    points = clustered_points(n_points=30, seed=2)
    solver = CoverSolver(merge_distance=5.0, cover_method="largest")

    assert solver.get_params()["cover_method"] == "largest"
    with pytest.raises(ValueError, match="Invalid cover method: largest"):
        solver.solve(points)

    solver = CoverSolver(merge_distance=5.0).set_params(cover_method="largest")
    with pytest.raises(ValueError, match="Invalid cover method: largest"):
        solver.fit(points)
    assert solver.set_params(cover_method="mean").fit(points).labels_.shape == (len(points),)
