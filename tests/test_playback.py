import numpy as np
import pytest

from kinemap import Camera, CancellationToken, InertiaModel, InertiaPlayback, LinearBrakingModel
from kinemap.playback import Cancelled


def test_cancellation_token():
    token = CancellationToken()
    calls = []
    token.on_cancel(lambda: calls.append("first"))

    assert not token.cancelled
    token.raise_if_cancelled()
    token.cancel()
    token.cancel()
    token.on_cancel(lambda: calls.append("late"))

    assert token.cancelled
    assert calls == ["first", "late"]
    with pytest.raises(Cancelled):
        token.raise_if_cancelled()


def test_analytic_pan_slows_down_and_stops():
    camera = Camera(offset=(-5.0, 0.0))
    model = InertiaModel(start=(0.0, 0.0, 1.0), end=(-5.0, 0.0, 1.0), dt=50.0)
    playback = InertiaPlayback(model, camera, start_time=1000.0)

    assert playback.tick(1000.0)
    np.testing.assert_array_almost_equal(camera.offset, [-5.0, 0.0])

    assert playback.tick(1100.0)
    early = camera.offset[0]
    assert -37.5 < early < -5.0

    # Friction brings the speed below the threshold after 325 * ln(10) ms.
    assert not playback.tick(1800.0)
    assert camera.offset[0] < early
    assert camera.offset[0] > -37.5
    assert not playback.running
    assert not playback.tick(1900.0)


def test_linear_model_brakes_on_its_own():
    camera = Camera()
    model = LinearBrakingModel(position=(0.0, 0.0), velocity=(0.2, 0.0), zoom=1.0, braking_time=100.0)
    playback = InertiaPlayback(model, camera, start_time=0.0, decay_time_ms=None)

    assert playback.tick(50.0)
    np.testing.assert_array_almost_equal(camera.offset, [7.5, 0.0])
    assert not playback.tick(100.0)
    np.testing.assert_array_almost_equal(camera.offset, [10.0, 0.0])


def test_zoom_stops_at_the_last_level():
    camera = Camera()
    model = InertiaModel(start=(0.0, 0.0, 1.0), end=(0.0, 0.0, 2.0), dt=10.0)
    playback = InertiaPlayback(model, camera, start_time=0.0)

    assert not playback.tick(100.0)
    assert camera.zoom == camera.max_zoom


def test_clamped_zoom_sets_the_offset():
    camera = Camera()
    model = InertiaModel(start=(10.0, 0.0, 1.0), end=(20.0, 0.0, 2.0), dt=10.0)
    playback = InertiaPlayback(model, camera, start_time=0.0)
    playback.tick(100.0)

    tau = 325.0 * (1 - np.exp(-100.0 / 325.0))
    assert model.z(tau) * 100 > camera.max_zoom
    np.testing.assert_array_almost_equal(camera.offset, model.s(tau) / (camera.max_zoom / 100))


def test_stopped_playback_leaves_the_camera_alone():
    camera = Camera()
    model = InertiaModel(start=(0.0, 0.0, 1.0), end=(-5.0, 0.0, 1.0), dt=50.0)
    token = CancellationToken()
    playback = InertiaPlayback(model, camera, start_time=0.0, token=token)
    token.cancel()

    assert not playback.running
    assert not playback.tick(10.0)
    np.testing.assert_array_equal(camera.offset, [0.0, 0.0])


def test_invalid_decay_time():
    model = InertiaModel(start=(0.0, 0.0, 1.0), end=(-5.0, 0.0, 1.0), dt=50.0)
    with pytest.raises(ValueError):
        InertiaPlayback(model, Camera(), start_time=0.0, decay_time_ms=0.0)
