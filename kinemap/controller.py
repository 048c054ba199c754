from enum import Enum
from typing import Optional, Sequence

from kinemap.camera import Camera
from kinemap.inertia import DEFAULT_BRAKING_TIME_MS, LinearBrakingModel
from kinemap.panning import DEFAULT_VELOCITY_WINDOW_MS, PanningSession, PointerId
from kinemap.playback import DEFAULT_DECAY_TIME_MS, InertiaPlayback


class InertiaKind(str, Enum):
    analytic = "analytic"
    linear = "linear"


class ViewController:
    """Single writer of a camera: routes gestures, zoom actions and inertia frames.

    Every gesture start and zoom action stops the running inertia before it touches the camera, so the playback and
    the user never write the camera at the same time.

    Parameters
    ----------
    camera: Camera (optional)
        The camera to drive, a default one is created if omitted.

    inertia: str (default 'analytic')
        'analytic' for the zoom aware InertiaModel, 'linear' for the per-axis LinearBrakingModel.

    velocity_window_ms: float (default 50)
        Trailing time over which the release velocity is measured.

    pinch_zoom_threshold: float (default 0.05)
        If a pinch gesture changed the zoom by a relative amount smaller than this over the velocity window, the zoom
        is removed from the inertia and only the translation of the hands keeps going.

    decay_time_ms: float (default 325)
        Friction time constant of the analytic inertia.

    braking_time_ms: float (default 750)
        Braking time of the linear inertia.
    """

    def __init__(
        self,
        camera: Optional[Camera] = None,
        inertia: str = "analytic",
        velocity_window_ms: float = DEFAULT_VELOCITY_WINDOW_MS,
        pinch_zoom_threshold: float = 0.05,
        decay_time_ms: float = DEFAULT_DECAY_TIME_MS,
        braking_time_ms: float = DEFAULT_BRAKING_TIME_MS,
    ):
        try:
            inertia = InertiaKind(inertia)
        except ValueError:
            raise ValueError(
                f"Invalid inertia: {inertia}. "
                f'Please select one from: {", ".join(k.value for k in InertiaKind)}.'
            ) from None
        self.camera = camera if camera is not None else Camera()
        self.inertia = inertia
        self.velocity_window_ms = velocity_window_ms
        self.pinch_zoom_threshold = pinch_zoom_threshold
        self.decay_time_ms = decay_time_ms
        self.braking_time_ms = braking_time_ms

        self.session: Optional[PanningSession] = None
        self.playback: Optional[InertiaPlayback] = None

    def stop_inertia(self):
        if self.playback is not None:
            self.playback.stop()
            self.playback = None

    def _sync_camera(self):
        self.camera.offset = self.session.offset.copy()
        self.camera.zoom = self.session.zoom

    def _require_session(self, pointer: PointerId) -> PanningSession:
        if self.session is None:
            raise ValueError(f"Pointer {pointer} is not tracked, no gesture is in progress.")
        return self.session

    def pointer_down(self, pointer: PointerId, point: Sequence[float], t: float):
        self.stop_inertia()
        if self.session is None:
            self.session = PanningSession(
                zoom=self.camera.zoom,
                offset=self.camera.offset,
                min_zoom=self.camera.min_zoom,
                max_zoom=self.camera.max_zoom,
            )
        self.session.start(pointer, point, t)
        self._sync_camera()

    def pointer_move(self, pointer: PointerId, point: Sequence[float], t: float):
        self._require_session(pointer).move(pointer, point, t)
        self._sync_camera()

    def pointer_up(self, pointer: PointerId, t: float) -> Optional[InertiaPlayback]:
        """Release a pointer. Releasing the last one starts and returns the inertia playback, if there is motion."""
        session = self._require_session(pointer)
        session.end(pointer, t)
        self._sync_camera()
        if session.active:
            return None

        self.session = None
        self.playback = self._release(session, t)
        return self.playback

    def _release(self, session: PanningSession, t: float) -> Optional[InertiaPlayback]:
        model = session.calculate_velocity(self.velocity_window_ms)
        if session.pinch_origin is not None and abs(model.zoom_ratio - 1) < self.pinch_zoom_threshold:
            model = model.remove_zoom()

        if self.inertia == InertiaKind.linear:
            model = LinearBrakingModel.from_model(model, braking_time=self.braking_time_ms)
            decay_time_ms = None
        else:
            decay_time_ms = self.decay_time_ms

        if model.speed(0) == 0 and model.zoom_rate(0) == 0:
            return None
        return InertiaPlayback(model, self.camera, start_time=t, decay_time_ms=decay_time_ms)

    def frame(self, now: float) -> bool:
        """Advance the inertia to time now. Returns whether it is still running."""
        if self.playback is None:
            return False
        running = self.playback.tick(now)
        if not running:
            self.playback = None
        return running

    def set_zoom(self, zoom: float, anchor: Optional[Sequence[float]] = None):
        self.stop_inertia()
        zoom = self.camera.clamp_zoom(zoom)
        if self.session is not None:
            self.session.step_zoom(zoom, anchor if anchor is not None else (0.0, 0.0))
            self._sync_camera()
        else:
            self.camera.set_zoom(zoom, anchor)

    def zoom_in(self, anchor: Optional[Sequence[float]] = None):
        self.set_zoom(self.camera.find_zoom_level(self.camera.zoom)[1], anchor)

    def zoom_out(self, anchor: Optional[Sequence[float]] = None):
        self.set_zoom(self.camera.find_zoom_level(self.camera.zoom)[0], anchor)

    def zoom_fit(self):
        self.stop_inertia()
        self.camera.zoom_fit()
        if self.session is not None:
            self.session.jump_to(self.camera.offset, self.camera.zoom)

    def try_set_zoom(self, text: str) -> bool:
        zoom = self.camera.parse_zoom(text)
        if zoom is None:
            return False
        self.set_zoom(zoom)
        return True
