"""Multi-pointer panning and pinch zooming.

Conventions shared with kinemap.camera:

- zoom is a percentage, 100 means that one map unit spans one screen unit.
- offset is the map point shown at the center of the screen.
- Raw pointer positions are screen positions relative to the screen center, in screen units (the pixel size of one
  map unit at 100% zoom).

With these, the map point under a screen position p is offset + p / (zoom / 100).
"""
import math
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from kinemap.geometry import average_distance, centroid
from kinemap.inertia import InertiaModel

DEFAULT_VELOCITY_WINDOW_MS = 50.0


@dataclass(frozen=True)
class MousePointer:
    """The mouse. There is only one, so all instances compare equal."""


@dataclass(frozen=True)
class TouchPointer:
    identifier: int


PointerId = Union[MousePointer, TouchPointer]

MOUSE = MousePointer()


class TrailSample(NamedTuple):
    t: float
    x: float
    y: float
    zoom: float


@dataclass
class TrailVelocity:
    """Camera displacement over the last dt milliseconds of a trail.

    Attributes
    ----------
        dt: Covered time in ms, at least 1.
        dv: Displacement (dx, dy, dzoom) over the covered time.
    """

    dt: float
    dv: Tuple[float, float, float]

    @property
    def v(self) -> Tuple[float, float, float]:
        """Average rates (vx, vy, vzoom) per ms."""
        return tuple(d / self.dt for d in self.dv)


def trail_velocity(trail: Sequence[TrailSample], window_ms: float) -> TrailVelocity:
    """Average the camera motion over the last window_ms of a trail.

    The trail is walked backwards. The interval straddling the start of the window contributes only the share of its
    displacement which falls inside the window, assuming linear motion. Intervals of zero length contribute their
    full displacement and no time.
    """
    dt = 0.0
    dv = np.zeros(3)
    i = len(trail) - 2
    while dt < window_ms and i >= 0:
        t1, *v1 = trail[i + 1]
        t0, *v0 = trail[i]
        interval = t1 - t0
        covered = min(interval, window_ms - dt)
        share = covered / interval if covered > 0 else 1.0
        dt += covered
        dv += share * (np.array(v1) - np.array(v0))
        i -= 1
    # A minimum of 1 ms caps the speed and avoids dividing by zero.
    dt = max(1.0, dt)
    return TrailVelocity(dt=dt, dv=tuple(float(d) for d in dv))


class PanningSession:
    """Tracks the pointers of one gesture and turns their motion into camera offset and zoom.

    The translation of a moving pointer is divided among all active pointers. With two or more pointers the change
    of their average distance from the centroid scales the zoom around the centroid. Every event appends the camera
    state to the trail, from which the release velocity is estimated.

    Parameters
    ----------
    zoom: float (default 100)
        Zoom at the start of the gesture, in percent.

    offset: sequence of two floats (default (0, 0))
        Camera offset at the start of the gesture, in map units.

    min_zoom, max_zoom: float (default 0, inf)
        Range the pinch zoom is clamped to, usually the zoom levels of the camera.
    """

    def __init__(
        self,
        zoom: float = 100.0,
        offset: Sequence[float] = (0.0, 0.0),
        min_zoom: float = 0.0,
        max_zoom: float = math.inf,
    ):
        if not zoom > 0:
            raise ValueError(f"Invalid zoom: {zoom}. It should be positive.")
        if not 0 <= min_zoom <= max_zoom:
            raise ValueError(f"Invalid zoom range: {min_zoom}, {max_zoom}.")
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.zoom = float(zoom)
        self.offset = np.array(offset, dtype=np.float64)
        self.pointers: Dict[PointerId, np.ndarray] = {}
        self.trail: List[TrailSample] = []
        self.pinch_origin: Optional[np.ndarray] = None

    @property
    def active(self) -> bool:
        return len(self.pointers) > 0

    def centroid(self) -> np.ndarray:
        return centroid(np.array(list(self.pointers.values())))

    def average_distance(self) -> float:
        return average_distance(np.array(list(self.pointers.values())).reshape(-1, 2))

    def _check_time(self, t: float):
        if self.trail and t < self.trail[-1].t:
            raise ValueError(f"Event at {t} ms arrived after an event at {self.trail[-1].t} ms.")

    def _record_trail(self, t: float):
        self.trail.append(TrailSample(float(t), float(self.offset[0]), float(self.offset[1]), self.zoom))

    def _tracked(self, pointer: PointerId, event: str) -> np.ndarray:
        if pointer not in self.pointers:
            raise ValueError(f"Pointer {pointer} is not tracked, cannot {event} it.")
        return self.pointers[pointer]

    def start(self, pointer: PointerId, raw_point: Sequence[float], t: float):
        self._check_time(t)
        if pointer in self.pointers:
            raise ValueError(f"Pointer {pointer} is already tracked, cannot start it again.")
        self.pointers[pointer] = np.array(raw_point, dtype=np.float64)
        self._record_trail(t)

    def move(self, pointer: PointerId, raw_point: Sequence[float], t: float):
        previous = self._tracked(pointer, "move")
        self._check_time(t)
        previous_distance = self.average_distance()

        current = np.array(raw_point, dtype=np.float64)
        self.pointers[pointer] = current
        self.offset -= (current - previous) / len(self.pointers) / (self.zoom / 100)

        if len(self.pointers) > 1:
            distance = self.average_distance()
            scale = distance / previous_distance if previous_distance > 0 and distance > 0 else 1.0
            zoom = min(max(self.zoom * scale, self.min_zoom), self.max_zoom)
            if zoom != self.zoom:
                self.set_zoom(zoom, self.centroid())

        self._record_trail(t)

    def end(self, pointer: PointerId, t: float):
        self._tracked(pointer, "end")
        self._check_time(t)
        del self.pointers[pointer]
        self._record_trail(t)

    def set_zoom(self, zoom: float, anchor: Sequence[float]):
        """Change the zoom keeping the map point under the anchor screen position in place."""
        if not zoom > 0:
            raise ValueError(f"Invalid zoom: {zoom}. It should be positive.")
        anchor = np.array(anchor, dtype=np.float64)
        self.offset += anchor * (1 / self.zoom - 1 / zoom) * 100
        self.pinch_origin = anchor
        self.zoom = float(zoom)

    def jump_to(self, offset: Sequence[float], zoom: float):
        """Move the camera without it counting as gesture motion.

        The whole trail is shifted by the jump, so the release velocity only sees what the pointers did.
        """
        if not zoom > 0:
            raise ValueError(f"Invalid zoom: {zoom}. It should be positive.")
        offset = np.array(offset, dtype=np.float64)
        dx, dy = offset - self.offset
        dzoom = zoom - self.zoom
        self.trail = [TrailSample(s.t, s.x + dx, s.y + dy, s.zoom + dzoom) for s in self.trail]
        self.offset = offset
        self.zoom = float(zoom)

    def step_zoom(self, zoom: float, anchor: Sequence[float] = (0.0, 0.0)):
        """Anchored zoom from a button or typed value. Unlike a pinch, it is not part of the gesture motion."""
        if not zoom > 0:
            raise ValueError(f"Invalid zoom: {zoom}. It should be positive.")
        anchor = np.array(anchor, dtype=np.float64)
        self.jump_to(self.offset + anchor * (1 / self.zoom - 1 / zoom) * 100, zoom)

    def calculate_velocity(self, window_ms: float = DEFAULT_VELOCITY_WINDOW_MS) -> InertiaModel:
        """Build the inertia of the gesture from the camera motion over the last window_ms.

        The state at the start of the window and the current state are the two endpoints of the model. Offsets are
        scaled by the zoom ratio into screen units and zooms are given as ratios, the space in which the model
        couples translation with zooming.
        """
        velocity = trail_velocity(self.trail, window_ms)
        current = np.array([self.offset[0], self.offset[1], self.zoom])
        start = current - np.array(velocity.dv)

        def scaled(state):
            x, y, zoom = state
            return x * zoom / 100, y * zoom / 100, zoom / 100

        return InertiaModel(
            start=scaled(start),
            end=scaled(current),
            dt=velocity.dt,
            pinch_origin=None if self.pinch_origin is None else tuple(self.pinch_origin),
            rates=velocity.v,
        )
