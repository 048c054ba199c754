from enum import Enum
from typing import Sequence, Tuple, Union

import numpy as np


class FrameOrigin(str, Enum):
    top_left = "top-left"
    top = "top"
    top_right = "top-right"
    left = "left"
    center = "center"
    right = "right"
    bottom_left = "bottom-left"
    bottom = "bottom"
    bottom_right = "bottom-right"


_X_DIRECTIONS = {"left": -1.0, "right": 1.0}
_Y_DIRECTIONS = {"top": -1.0, "bottom": 1.0}


def _parse(value: str, options: dict, name: str) -> float:
    try:
        return options[value]
    except KeyError:
        raise ValueError(f'Invalid {name}: {value}. Please select one from: {", ".join(options)}.') from None


def origin_point(map_size: Tuple[float, float], origin: Union[str, FrameOrigin]) -> np.ndarray:
    """Internal coordinates of a named point of the map. Internally the map center is (0, 0) and y grows downwards."""
    try:
        origin = FrameOrigin(origin)
    except ValueError:
        raise ValueError(
            f'Invalid origin: {origin}. Please select one from: {", ".join(o.value for o in FrameOrigin)}.'
        ) from None
    width, height = map_size
    column = {"left": -width / 2, "right": width / 2}
    row = {"top": -height / 2, "bottom": height / 2}
    if origin == FrameOrigin.center:
        return np.zeros(2)
    parts = origin.value.split("-")
    x = next((column[p] for p in parts if p in column), 0.0)
    y = next((row[p] for p in parts if p in row), 0.0)
    return np.array([x, y])


class UserFrame:
    """Coordinate frame in which the user places markers.

    Parameters
    ----------
    map_size: (width, height)
        Size of the map in map units.

    origin: str or (x, y) (default 'center')
        Either one of the nine named points of the map, 'top-left' to 'bottom-right', or a point in internal
        coordinates.

    x_direction: str (default 'right')
        Direction of the positive x axis, 'left' or 'right'.

    y_direction: str (default 'top')
        Direction of the positive y axis, 'top' for the math convention or 'bottom' for the screen convention.
    """

    def __init__(
        self,
        map_size: Tuple[float, float],
        origin: Union[str, Sequence[float]] = "center",
        x_direction: str = "right",
        y_direction: str = "top",
    ):
        self.map_size = tuple(map_size)
        if isinstance(origin, str):
            self.origin = origin_point(self.map_size, origin)
        else:
            self.origin = np.array(origin, dtype=np.float64)
        self.axes = np.array(
            [_parse(x_direction, _X_DIRECTIONS, "x direction"), _parse(y_direction, _Y_DIRECTIONS, "y direction")]
        )

    def to_internal(self, points) -> np.ndarray:
        """Convert user coordinates, a single point or an (n, 2) array, into internal ones."""
        return np.asarray(points, dtype=np.float64) * self.axes + self.origin

    def to_user(self, points) -> np.ndarray:
        return (np.asarray(points, dtype=np.float64) - self.origin) * self.axes
