import numpy as np

# DATA


def clustered_points(n_points=300, n_hotspots=8, extent=200.0, scale=6.0, seed=0):
    rng = np.random.default_rng(seed)
    hotspots = rng.uniform(-extent / 2, extent / 2, size=(n_hotspots, 2))
    assignment = rng.integers(0, n_hotspots, size=n_points)
    return hotspots[assignment] + rng.normal(scale=scale, size=(n_points, 2))


def uniform_points(n_points=200, extent=200.0, seed=0):
    return np.random.default_rng(seed).uniform(-extent / 2, extent / 2, size=(n_points, 2))


# CHECKS


def assert_partition(solution, n_points):
    """Every index is a remain or a member of exactly one cover."""
    seen = list(solution.remains)
    for cover in solution.covers:
        seen.extend(cover.indexes)
    assert sorted(seen) == list(range(n_points))


def assert_containment(points, solution, tol=1e-9):
    for cover in solution.covers:
        distances = np.linalg.norm(points[list(cover.indexes)] - cover.center, axis=1)
        assert np.all(distances <= cover.radius + tol)


def assert_no_overlaps(solution, tol=1e-9):
    for i, a in enumerate(solution.covers):
        for b in solution.covers[i + 1:]:
            assert np.linalg.norm(a.center - b.center) >= a.radius + b.radius - tol


def assert_close_points_merged(points, solution, merge_distance):
    """No two points closer than the merge distance are left apart."""
    labels = solution.labels
    remains = np.array(solution.remains, dtype=np.int64)
    for i in remains:
        distances = np.linalg.norm(points - points[i], axis=1)
        distances[i] = np.inf
        assert not np.any(distances < merge_distance)
    for i in range(len(points)):
        distances = np.linalg.norm(points - points[i], axis=1)
        close = np.flatnonzero(distances < merge_distance)
        assert np.all(labels[close] == labels[i])
