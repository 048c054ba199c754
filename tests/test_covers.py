import numpy as np
import pytest
from utils import clustered_points

from kinemap.covers import CoverMethod, mean_center, resolve_cover_method, simple_center, summarize_covers
from kinemap.smallest_circle import Circle, smallest_enclosing_circle

square = np.array([[0.0, 0.0], [4.0, 0.0], [4.0, 4.0], [0.0, 4.0], [1.0, 1.0]])


def test_smallest_circle_of_square():
    circle = smallest_enclosing_circle(square)

    np.testing.assert_array_almost_equal(circle.center, [2.0, 2.0])
    assert circle.r == pytest.approx(np.sqrt(8))


def test_smallest_circle_degenerate_inputs():
    assert smallest_enclosing_circle([[1.0, 2.0]]) == Circle(1.0, 2.0, 0.0)

    duplicated = smallest_enclosing_circle([[1.0, 2.0], [1.0, 2.0], [1.0, 2.0]])
    assert duplicated.r == 0.0

    collinear = smallest_enclosing_circle([[0.0, 0.0], [1.0, 0.0], [5.0, 0.0], [2.0, 0.0]])
    np.testing.assert_array_almost_equal(collinear.center, [2.5, 0.0])
    assert collinear.r == pytest.approx(2.5)

    with pytest.raises(ValueError):
        smallest_enclosing_circle(np.zeros((0, 2)))


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_smallest_circle_contains_and_beats_bounding_box(seed):
    points = np.random.default_rng(seed).normal(size=(200, 2))
    circle = smallest_enclosing_circle(points)

    assert all(circle.contains(p) for p in points)
    # At least two points lie on the boundary of the minimal circle.
    on_boundary = np.isclose(np.linalg.norm(points - circle.center, axis=1), circle.r)
    assert on_boundary.sum() >= 2

    box_center = simple_center(points)
    box_radius = np.linalg.norm(points - box_center, axis=1).max()
    assert circle.r <= box_radius + 1e-12


def test_smallest_circle_is_reproducible():
    points = clustered_points(seed=5)

    assert smallest_enclosing_circle(points) == smallest_enclosing_circle(points)


@pytest.mark.parametrize("method", [m.value for m in CoverMethod])
def test_summarized_circles_contain_their_groups(method):
    points = clustered_points(n_points=60, seed=1)
    groups = [list(range(0, 20)), list(range(20, 45)), list(range(45, 60))]
    circles = summarize_covers(points, groups, resolve_cover_method(method))

    assert len(circles) == 3
    for group, circle in zip(groups, circles):
        assert all(circle.contains(p) for p in points[group])


def test_mean_fast_path_matches_per_group_mean():
    points = clustered_points(n_points=30, seed=2)
    groups = [[0, 3, 7], [1, 2], [4, 5, 6, 8, 9]]
    circles = summarize_covers(points, groups, mean_center)

    for group, circle in zip(groups, circles):
        np.testing.assert_array_almost_equal(circle.center, points[group].mean(axis=0))


def test_minimum_radius_floor():
    points = np.array([[0.0, 0.0], [1.0, 0.0]])
    circle, = summarize_covers(points, [[0, 1]], simple_center, minimum_radius=3.0)

    assert circle == Circle(0.5, 0.0, 3.0)


def test_custom_center_function():
    points = np.array([[0.0, 0.0], [2.0, 0.0]])
    circle, = summarize_covers(points, [[0, 1]], lambda members: members[0])

    assert circle == Circle(0.0, 0.0, 2.0)
    assert resolve_cover_method(np.min) is np.min


def test_invalid_cover_method():
    with pytest.raises(ValueError, match="Invalid cover method: largest"):
        resolve_cover_method("largest")
    with pytest.raises(ValueError) as excinfo:
        resolve_cover_method("largest")
    assert excinfo.value.__suppress_context__
