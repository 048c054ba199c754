from pathlib import Path
from typing import List

import matplotlib.pyplot as plt
import typer

from kinemap.benchmarking import benchmark_solvers, format_time, random_points
from kinemap.distant_solver import distant_solve
from kinemap.merge_solver import merge_solve
from kinemap.plotter import plot_solution


def main(
        experiment_name: str,
        output_directory: Path,
        counts: List[int] = typer.Option([100, 1000, 5000]),
        merge_distance: float = 10.0,
        extent: float = 1000.0,
        seed: int = 42,
        skip_done: bool = True,
        plot_count: int = 500,
        verbose: bool = False
):
    experiment_directory = output_directory / experiment_name
    experiment_directory.mkdir(parents=True, exist_ok=True)
    out_score_path = experiment_directory / 'scores.csv'
    out_plot_path = experiment_directory / 'covers.png'

    if skip_done and out_score_path.exists():
        print(f'Skipping existing benchmark {experiment_name}.')
        return

    print(f'Benchmarking solvers on {counts} points...')
    scores = benchmark_solvers(counts, merge_distance=merge_distance, extent=extent, seed=seed, verbose=verbose)
    scores.to_csv(out_score_path, index=False)
    for row in scores.itertuples():
        print(
            f'{row.n_points} points, {row.cover_method}: merge {format_time(row.merge_time)}, '
            f'distant {format_time(row.distant_time)}'
        )

    if plot_count > 0:
        print('Exporting cover plot...')
        points = random_points(plot_count, extent=extent, seed=seed)
        solution = merge_solve(points, merge_distance, verbose=verbose)
        viewport = (-extent / 4, -extent / 4, extent / 2, extent / 2)
        distant = distant_solve(solution.marker_points(points), viewport, merge_distance, verbose=verbose)
        fig, _ = plot_solution(points, solution, viewport=viewport, distant=distant, figsize=(20, 20))
        fig.savefig(out_plot_path)
        plt.close(fig)


if __name__ == '__main__':
    typer.run(main)
