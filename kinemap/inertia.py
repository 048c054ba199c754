"""Inertia of a released gesture.

Models work in scaled space: positions are camera offsets multiplied by the zoom ratio (screen units) and zooms are
ratios (1.0 == 100%). Time is in ms, t = 0 is the release.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from kinemap.geometry import unit_vector

DEFAULT_BRAKING_TIME_MS = 750.0


@dataclass(frozen=True)
class InertiaModel:
    """Closed-form trajectory through two camera states.

    The camera passes through start at t = -dt and through end at t = 0. The zoom changes geometrically,
    z(t) = z0 * (z1 / z0) ** ((t + dt) / dt), and the position moves along the line through both states at a speed
    proportional to the rate of zoom change, which is how a point stays anchored while zooming. Without zoom change
    the position moves linearly.

    Attributes
    ----------
        start: (x0, y0, z0) scaled position and zoom ratio at t = -dt.
        end: (x1, y1, z1) scaled position and zoom ratio at t = 0.
        dt: Time between the two states in ms, positive.
        pinch_origin: Screen position of the last pinch anchor, if the gesture pinched.
        rates: Average (vx, vy, vzoom) of the gesture in map units per ms, for reference.
    """

    start: Tuple[float, float, float]
    end: Tuple[float, float, float]
    dt: float
    pinch_origin: Optional[Tuple[float, float]] = None
    rates: Optional[Tuple[float, float, float]] = None

    def __post_init__(self):
        if not self.dt > 0:
            raise ValueError(f"Invalid time step: {self.dt}. It should be positive.")
        if not (self.start[2] > 0 and self.end[2] > 0):
            raise ValueError(f"Invalid zooms: {self.start[2]}, {self.end[2]}. They should be positive.")
        p0 = np.array(self.start[:2], dtype=np.float64)
        p1 = np.array(self.end[:2], dtype=np.float64)
        object.__setattr__(self, "_p0", p0)
        object.__setattr__(self, "_p1", p1)
        object.__setattr__(self, "_ds", float(np.linalg.norm(p1 - p0)))
        object.__setattr__(self, "_vec", unit_vector(p1 - p0))

    @property
    def zoom_ratio(self) -> float:
        """z1 / z0, the zoom factor applied every dt."""
        return self.end[2] / self.start[2]

    @property
    def zooming(self) -> bool:
        return self.start[2] != self.end[2]

    def _b(self, t: float) -> float:
        return self.zoom_ratio ** ((t + self.dt) / self.dt)

    def z(self, t: float) -> float:
        if not self.zooming:
            return self.end[2]
        return self.start[2] * self._b(t)

    def s(self, t: float) -> np.ndarray:
        if self.zooming:
            magnitude = self._ds * (self._b(t) - 1) / (self.zoom_ratio - 1)
        else:
            magnitude = self._ds * (t + self.dt) / self.dt
        return self._p0 + magnitude * self._vec

    def v(self, t: float) -> np.ndarray:
        """Analytic derivative of s."""
        if self.zooming:
            magnitude = self._ds * math.log(self.zoom_ratio) / self.dt * self._b(t) / (self.zoom_ratio - 1)
        else:
            magnitude = self._ds / self.dt
        return magnitude * self._vec

    def zoom_rate(self, t: float) -> float:
        """Analytic derivative of z."""
        if not self.zooming:
            return 0.0
        return self.z(t) * math.log(self.zoom_ratio) / self.dt

    def speed(self, t: float) -> float:
        return float(np.linalg.norm(self.v(t)))

    def offset(self, t: float) -> np.ndarray:
        """Camera offset in map units."""
        return self.s(t) / self.z(t)

    def remove_zoom(self, anchor: Optional[Sequence[float]] = None) -> "InertiaModel":
        """Remove the zoom and the motion it induces, keeping the translation of the hands.

        Zooming about an anchor displaces the camera radially even if the pointers did not translate. That radial
        speed, (1 - z0 / z1) * |p1 + anchor| / dt, is subtracted from the release velocity and the result becomes a
        constant zoom model.

        Parameters
        ----------
            anchor: Screen position the zoom was anchored at. Defaults to the pinch origin of the model, or to the
                screen center if there is none.
        """
        if anchor is None:
            anchor = self.pinch_origin if self.pinch_origin is not None else (0.0, 0.0)
        anchor = np.array(anchor, dtype=np.float64)
        x1, y1, z1 = self.end
        z0 = self.start[2]

        anchored = self._p1 + anchor
        magnitude = (1 - z0 / z1) * np.linalg.norm(anchored) / self.dt
        velocity = self.v(0) - magnitude * unit_vector(anchored)

        x0, y0 = self._p1 - velocity * self.dt
        return InertiaModel(
            start=(float(x0), float(y0), z1),
            end=self.end,
            dt=self.dt,
            pinch_origin=tuple(anchor),
            rates=self.rates,
        )


@dataclass(frozen=True)
class LinearBrakingModel:
    """Per-axis linear deceleration: each velocity component shrinks to zero over braking_time.

    A lower fidelity alternative to InertiaModel which ignores zoom. It has the same sampling interface and, unlike
    the analytic model, comes to a stop on its own.

    Attributes
    ----------
        position: Scaled (x, y) position at t = 0.
        velocity: Scaled (vx, vy) velocity at t = 0, per ms.
        zoom: Constant zoom ratio.
        braking_time: Time in ms till the motion stops.
    """

    position: Tuple[float, float]
    velocity: Tuple[float, float]
    zoom: float
    braking_time: float = DEFAULT_BRAKING_TIME_MS

    def __post_init__(self):
        if not self.braking_time > 0:
            raise ValueError(f"Invalid braking time: {self.braking_time}. It should be positive.")
        if not self.zoom > 0:
            raise ValueError(f"Invalid zoom: {self.zoom}. It should be positive.")

    @classmethod
    def from_model(cls, model: InertiaModel, braking_time: float = DEFAULT_BRAKING_TIME_MS) -> "LinearBrakingModel":
        x, y, z = model.end
        vx, vy = model.v(0)
        return cls(position=(x, y), velocity=(float(vx), float(vy)), zoom=z, braking_time=braking_time)

    def _elapsed(self, t: float) -> float:
        return min(max(t, 0.0), self.braking_time)

    def s(self, t: float) -> np.ndarray:
        t = self._elapsed(t)
        travelled = t - t * t / (2 * self.braking_time)
        return np.array(self.position) + np.array(self.velocity) * travelled

    def v(self, t: float) -> np.ndarray:
        return np.array(self.velocity) * (1 - self._elapsed(t) / self.braking_time)

    def z(self, t: float) -> float:
        return self.zoom

    def zoom_rate(self, t: float) -> float:
        return 0.0

    def speed(self, t: float) -> float:
        return float(np.linalg.norm(self.v(t)))

    def offset(self, t: float) -> np.ndarray:
        return self.s(t) / self.zoom
