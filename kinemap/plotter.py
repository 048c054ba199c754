from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Circle, Rectangle

from kinemap.distant_solver import DistantSolution, Region
from kinemap.geometry import as_points
from kinemap.merge_solver import CoverSolution


def plot_solution(
    points,
    solution: CoverSolution,
    viewport: Optional[Tuple[float, float, float, float]] = None,
    distant: Optional[DistantSolution] = None,
    title: str = "Covers",
    draw_labels: bool = False,
    figsize=(8, 8),
    ax=None,
    show: bool = False,
):
    """Plot the remains and covers of a merge solve, and optionally the viewport with its edge indicators.

    The edge indicators of distant are drawn on the viewport border as spans along the edge, labeled with the
    number of markers they stand for.
    """
    points = as_points(points)
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    remains = points[solution.remains].reshape(-1, 2)
    ax.scatter(remains[:, 0], remains[:, 1], s=12, c="k", label="remains")
    for cover in solution.covers:
        members = points[list(cover.indexes)]
        ax.scatter(members[:, 0], members[:, 1], s=8, c="tab:gray", alpha=0.6)
        ax.add_patch(Circle((cover.circle.x, cover.circle.y), cover.circle.r, fill=False, linewidth=1.2,
                            edgecolor="tab:orange"))
        if draw_labels:
            ax.text(cover.circle.x, cover.circle.y, f"{len(cover)}", ha="center", va="center", fontsize=8)

    if viewport is not None:
        x0, y0, w, h = viewport
        ax.add_patch(Rectangle((x0, y0), w, h, fill=False, linestyle="--", edgecolor="tab:blue"))
        if distant is not None:
            _plot_edges(ax, viewport, distant)

    xs = np.concatenate([points[:, 0]] + [[c.circle.x - c.circle.r, c.circle.x + c.circle.r] for c in solution.covers])
    ys = np.concatenate([points[:, 1]] + [[c.circle.y - c.circle.r, c.circle.y + c.circle.r] for c in solution.covers])
    if viewport is not None:
        xs = np.concatenate([xs, [viewport[0], viewport[0] + viewport[2]]])
        ys = np.concatenate([ys, [viewport[1], viewport[1] + viewport[3]]])
    if len(xs) > 0:
        xmin, xmax, ymin, ymax = xs.min(), xs.max(), ys.min(), ys.max()
        padx = 0.06 * (xmax - xmin) if xmax > xmin else 1.0
        pady = 0.06 * (ymax - ymin) if ymax > ymin else 1.0
        ax.set_xlim(xmin - padx, xmax + padx)
        ax.set_ylim(ymin - pady, ymax + pady)

    ax.set_aspect("equal", "box")
    ax.grid(True, linestyle=":", alpha=0.5)
    ax.set_title(title)
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    if show:
        plt.tight_layout()
        plt.show()
    return fig, ax


def _plot_edges(ax, viewport, distant: DistantSolution):
    x0, y0, w, h = viewport
    fixed = {Region.TOP: y0, Region.BOTTOM: y0 + h, Region.LEFT: x0, Region.RIGHT: x0 + w}
    for edge in distant.edges:
        center, half_width = edge.span
        low, high = center - half_width, center + half_width
        if edge.region in (Region.TOP, Region.BOTTOM):
            xs, ys = [low, high], [fixed[edge.region]] * 2
        else:
            xs, ys = [fixed[edge.region]] * 2, [low, high]
        ax.plot(xs, ys, linewidth=4, color="tab:red", solid_capstyle="round")
        ax.text(np.mean(xs), np.mean(ys), f"{len(edge.indexes)}", ha="center", va="center", fontsize=8)
