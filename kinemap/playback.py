import math
from typing import Callable, List, Optional, Union

from kinemap.camera import Camera
from kinemap.inertia import InertiaModel, LinearBrakingModel

Model = Union[InertiaModel, LinearBrakingModel]

# Time constant of the friction applied on top of the analytic inertia, in ms.
DEFAULT_DECAY_TIME_MS = 325.0
# Scaled units per ms.
DEFAULT_SPEED_THRESHOLD = 0.01
# Zoom ratio per ms.
DEFAULT_ZOOM_THRESHOLD = 1e-5


class Cancelled(Exception):
    pass


class CancellationToken:
    """Signals that an animation should stop. Cancelling is idempotent and runs the registered callbacks once."""

    def __init__(self):
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]):
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)

    def raise_if_cancelled(self):
        if self._cancelled:
            raise Cancelled()


class InertiaPlayback:
    """Plays an inertia model into a camera, one animation frame at a time.

    The host calls tick on every frame. The time since the release is warped by an exponential friction,
    tau(t) = T * (1 - exp(-t / T)), so the analytic trajectory comes to rest at tau = T instead of running forever.
    Models which brake on their own are played with decay_time_ms=None.

    Parameters
    ----------
    model: InertiaModel or LinearBrakingModel
        The trajectory, with t = 0 at the release.

    camera: Camera
        The camera written on every tick.

    start_time: float
        Timestamp of the release in ms, on the clock of the tick timestamps.

    decay_time_ms: float or None (default 325)
        Friction time constant T.

    speed_threshold: float (default 0.01)
        Speed in scaled units per ms below which the motion counts as stopped.

    zoom_threshold: float (default 1e-5)
        Zoom ratio change per ms below which the zoom counts as stopped.

    token: CancellationToken (optional)
        Token stopping the playback, a new one is created if omitted.
    """

    def __init__(
        self,
        model: Model,
        camera: Camera,
        start_time: float,
        decay_time_ms: Optional[float] = DEFAULT_DECAY_TIME_MS,
        speed_threshold: float = DEFAULT_SPEED_THRESHOLD,
        zoom_threshold: float = DEFAULT_ZOOM_THRESHOLD,
        token: Optional[CancellationToken] = None,
    ):
        if decay_time_ms is not None and not decay_time_ms > 0:
            raise ValueError(f"Invalid decay time: {decay_time_ms}. It should be positive or None.")
        self.model = model
        self.camera = camera
        self.start_time = start_time
        self.decay_time_ms = decay_time_ms
        self.speed_threshold = speed_threshold
        self.zoom_threshold = zoom_threshold
        self.token = token if token is not None else CancellationToken()
        self._finished = False

    @property
    def running(self) -> bool:
        return not self._finished and not self.token.cancelled

    def stop(self):
        self.token.cancel()

    def _warp(self, t: float):
        """Warped time and its derivative."""
        if self.decay_time_ms is None:
            return t, 1.0
        decay = math.exp(-t / self.decay_time_ms)
        return self.decay_time_ms * (1 - decay), decay

    def tick(self, now: float) -> bool:
        """Write the camera state at time now. Returns whether the playback is still running."""
        if not self.running:
            return False

        tau, rate = self._warp(max(0.0, now - self.start_time))
        zoom = self.model.z(tau) * 100
        clamped = self.camera.clamp_zoom(zoom)
        # Offset of the zoom actually shown.
        self.camera.offset = self.model.s(tau) / (clamped / 100)
        self.camera.zoom = clamped

        speed = self.model.speed(tau) * rate
        zoom_speed = abs(self.model.zoom_rate(tau)) * rate
        if clamped != zoom or (speed < self.speed_threshold and zoom_speed < self.zoom_threshold):
            self._finished = True
        return self.running
