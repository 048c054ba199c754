import numpy as np
import scipy.sparse as sp


def as_points(points) -> np.ndarray:
    """Convert an array-like of 2-D points into a float (n, 2) array. An empty input gives a (0, 2) array."""
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return arr.reshape(0, 2)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Points should have shape (n, 2), got {arr.shape}.")
    return arr


def cool_mean(data, partition):
    """Mean position of every cover, all covers at once.

    Parameters
    ----------
        data: (n, 2) marker positions.

        partition: (n, ) cover label of each marker, the labels being 0, ..., k - 1 with no gaps.

    Returns
    -------
        centers: (k, 2) mean of the markers of each cover.
    """
    n = data.shape[0]
    labels, counts = np.unique(partition, return_counts=True)
    membership = sp.csr_matrix((np.ones(n, dtype=np.float64), (np.arange(n), partition)), shape=(n, len(labels)))
    return (membership.T @ data) / counts[:, np.newaxis]


def cool_max(arr, partition):
    """Largest value per cover label. The values have to be non-negative, as the empty entries of the sparse
    label matrix count as zeros.

    Parameters
    ----------
        arr: (n, ) values, one per marker.
        partition: (n, ) cover label of each marker.

    Returns
    -------
        per_cover: (k, ) maximum over the markers of each cover, k being the largest label plus one.
    """
    n_covers = np.max(partition) + 1
    by_cover = sp.csr_matrix((arr, (partition, np.arange(arr.size))), shape=(n_covers, arr.size))
    return by_cover.max(axis=1).toarray().ravel()


def cool_max_radius(data, partition):
    """Cover radii from marker offsets. Row i of data is marker i minus the center of its cover, the radius of a
    cover is the distance to its farthest marker.

    Parameters
    ----------
        data: (n, 2) offsets of the markers from their cover centers.

        partition: (n, ) cover label of each marker.

    Returns
    -------
        radii: (k, ) radius of each cover.
    """
    return cool_max(np.linalg.norm(data, axis=1), partition)


def centroid(points: np.ndarray) -> np.ndarray:
    return points.mean(axis=0)


def average_distance(points: np.ndarray) -> float:
    """Mean distance of the points from their centroid, 0 for an empty set."""
    if len(points) == 0:
        return 0.0
    return float(np.linalg.norm(points - centroid(points), axis=1).mean())


def unit_vector(vector) -> np.ndarray:
    """Direction of a vector. The zero vector has no direction and maps to itself."""
    vector = np.asarray(vector, dtype=np.float64)
    norm = np.linalg.norm(vector)
    if norm > 0:
        return vector / norm
    return np.zeros_like(vector)
