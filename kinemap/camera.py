"""Camera state of a map view: zoom in percent and offset in map units, see kinemap.panning for the conventions."""
import re
from typing import Optional, Sequence, Tuple

import numpy as np

DEFAULT_ZOOM_LEVELS = (
    5, 10, 15, 25, 33, 50, 67, 75, 80, 90, 100, 110, 125, 150, 175, 200, 250, 300, 400, 500, 750, 1000, 1500, 2000,
)

# Scale bar lengths in map units, the one closest to the target on screen size is shown.
SCALE_BAR_LENGTHS = (0.1, 0.2, 0.5, 1, 2, 5, 10, 20, 50, 100, 200, 500, 1000, 2000, 5000)

_ZOOM_TEXT = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*%?\s*$")


class Camera:
    def __init__(
        self,
        zoom: float = 100.0,
        offset: Sequence[float] = (0.0, 0.0),
        zoom_levels: Sequence[float] = DEFAULT_ZOOM_LEVELS,
    ):
        if len(zoom_levels) == 0 or min(zoom_levels) <= 0:
            raise ValueError(f"Invalid zoom levels: {zoom_levels}. Please provide at least one positive level.")
        if not zoom > 0:
            raise ValueError(f"Invalid zoom: {zoom}. It should be positive.")
        self.zoom_levels = tuple(sorted(float(z) for z in zoom_levels))
        self.zoom = float(zoom)
        self.offset = np.array(offset, dtype=np.float64)

    @property
    def min_zoom(self) -> float:
        return self.zoom_levels[0]

    @property
    def max_zoom(self) -> float:
        return self.zoom_levels[-1]

    def clamp_zoom(self, zoom: float) -> float:
        return min(max(zoom, self.min_zoom), self.max_zoom)

    def find_zoom_level(self, zoom: float) -> Tuple[float, float]:
        """The closest levels strictly below and above zoom, clamped to the first and last level."""
        below = [z for z in self.zoom_levels if z < zoom]
        above = [z for z in self.zoom_levels if z > zoom]
        previous = below[-1] if below else self.zoom_levels[0]
        following = above[0] if above else self.zoom_levels[-1]
        return previous, following

    def set_zoom(self, zoom: float, anchor: Optional[Sequence[float]] = None):
        """Change the zoom. With an anchor screen position, the map point under it stays in place."""
        if not zoom > 0:
            raise ValueError(f"Invalid zoom: {zoom}. It should be positive.")
        if anchor is not None:
            self.offset += np.array(anchor, dtype=np.float64) * (1 / self.zoom - 1 / zoom) * 100
        self.zoom = float(zoom)

    def zoom_in(self, anchor: Optional[Sequence[float]] = None):
        self.set_zoom(self.find_zoom_level(self.zoom)[1], anchor)

    def zoom_out(self, anchor: Optional[Sequence[float]] = None):
        self.set_zoom(self.find_zoom_level(self.zoom)[0], anchor)

    def zoom_fit(self):
        self.offset = np.zeros(2)
        self.zoom = 100.0

    def parse_zoom(self, text: str) -> Optional[float]:
        """Parse a zoom typed by the user, e.g. '150' or '75.5 %', clamped to the zoom levels.

        Returns None if the text is not a number or is zero.
        """
        match = _ZOOM_TEXT.match(text)
        if match is None:
            return None
        zoom = float(match.group(1))
        if zoom == 0:
            return None
        return self.clamp_zoom(zoom)

    def try_set_zoom(self, text: str) -> bool:
        zoom = self.parse_zoom(text)
        if zoom is None:
            return False
        self.set_zoom(zoom)
        return True

    def zoomed_ratio(self, screen_px_per_unit: float) -> float:
        """Screen pixels per map unit at the current zoom."""
        return screen_px_per_unit * self.zoom / 100

    def screen_to_map(self, point: Sequence[float], screen_px_per_unit: float = 1.0) -> np.ndarray:
        """Map point under a screen position given in pixels relative to the screen center."""
        return self.offset + np.asarray(point, dtype=np.float64) / self.zoomed_ratio(screen_px_per_unit)

    def map_to_screen(self, point: Sequence[float], screen_px_per_unit: float = 1.0) -> np.ndarray:
        return (np.asarray(point, dtype=np.float64) - self.offset) * self.zoomed_ratio(screen_px_per_unit)

    def scale_bar(self, screen_px_per_unit: float, target_px: float = 100.0) -> Tuple[float, float]:
        """Pick the scale bar length closest to target_px on screen.

        Returns
        -------
            length: The bar length in map units.
            px: The bar length on screen in pixels.
        """
        ratio = self.zoomed_ratio(screen_px_per_unit)
        target = target_px / ratio
        length = min(SCALE_BAR_LENGTHS, key=lambda candidate: abs(candidate - target))
        return length, length * ratio
