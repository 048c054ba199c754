import time
from typing import Sequence

import numpy as np
import pandas as pd
from tqdm import tqdm

from kinemap.distant_solver import distant_solve
from kinemap.merge_solver import merge_solve


def time_function_call(function, *args, **kwargs):
    start_time = time.time()
    output = function(*args, **kwargs)
    return output, time.time() - start_time


def format_time(seconds):
    """Format a duration in seconds into hr:min:sec or ms."""
    if seconds < 1:
        return f"{int(seconds * 1000)} ms"
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    if h > 0:
        return f"{h}h {m}m {s}s"
    elif m > 0:
        return f"{m}m {s}s"
    else:
        return f"{s}s"


def random_points(n: int, extent: float = 1000.0, n_hotspots: int = 10, seed: int = 42) -> np.ndarray:
    """Markers scattered around a few hotspots, the way map annotations usually pile up."""
    rng = np.random.default_rng(seed)
    hotspots = rng.uniform(-extent / 2, extent / 2, size=(n_hotspots, 2))
    assignment = rng.integers(0, n_hotspots, size=n)
    return hotspots[assignment] + rng.normal(scale=extent / 20, size=(n, 2))


def benchmark_solvers(
    counts: Sequence[int],
    merge_distance: float = 10.0,
    cover_methods: Sequence[str] = ("simple", "smallest"),
    extent: float = 1000.0,
    seed: int = 42,
    verbose: bool = False,
) -> pd.DataFrame:
    """Time merge_solve and a follow-up distant_solve on random maps of increasing size.

    The viewport is the central quarter of the map, so roughly three quarters of the markers go to edge indicators.

    Returns
    -------
        scores: One row per (n_points, cover_method) with the number of covers and indicators and the timings in
            seconds.
    """
    rows = []
    viewport = (-extent / 4, -extent / 4, extent / 2, extent / 2)
    with tqdm(total=len(counts) * len(cover_methods), disable=not verbose) as pbar:
        for n in counts:
            points = random_points(n, extent=extent, seed=seed)
            for method in cover_methods:
                solution, merge_time = time_function_call(
                    merge_solve, points, merge_distance, cover_method=method
                )
                distant, distant_time = time_function_call(
                    distant_solve, solution.marker_points(points), viewport, merge_distance
                )
                rows.append(
                    {
                        "n_points": n,
                        "cover_method": method,
                        "n_covers": len(solution.covers),
                        "n_remains": len(solution.remains),
                        "n_indicators": len(distant.edges),
                        "merge_time": merge_time,
                        "distant_time": distant_time,
                    }
                )
                pbar.update(1)
    return pd.DataFrame(rows)
