import logging

import numpy as np

from .placement import MAX_ENUMERATED_CELLS, CentroidGrid

logger = logging.getLogger(__name__)

# Rejection sampling attempts per outlier on grids too large to enumerate.
MAX_DRAWS = 1000


def _free_cells(grid: CentroidGrid, n_outliers: int, rng: np.random.Generator) -> np.ndarray | None:
    """Random unoccupied cells, one per outlier (with replacement); None if none is free."""
    n_dims = grid.dimension_index.shape[0]
    n = grid.n_intersections
    occupied = grid.occupied_cells()

    if grid.n_cells <= MAX_ENUMERATED_CELLS:
        shape = (n,) * n_dims
        taken = np.ravel_multi_index(tuple(grid.intersection_index.T), shape)
        free = np.setdiff1d(np.arange(grid.n_cells), taken)
        if free.size == 0:
            return None
        flat = free[rng.integers(0, free.size, size=n_outliers)]
        return np.stack(np.unravel_index(flat, shape), axis=1)

    cells = np.empty((n_outliers, n_dims), dtype=int)
    for i in range(n_outliers):
        for _ in range(MAX_DRAWS):
            cand = rng.integers(0, n, size=n_dims)
            if tuple(int(c) for c in cand) not in occupied:
                cells[i] = cand
                break
        else:
            return None
    return cells


def _beyond_grid(grid: CentroidGrid, n_outliers: int, rng: np.random.Generator) -> np.ndarray:
    """Outliers spread over the span, each pushed past the span on one random dimension."""
    lo, hi = grid.span
    width = grid.cell_width
    n_dims = lo.shape[0]
    points = rng.uniform(lo, hi, size=(n_outliers, n_dims))
    dims = rng.integers(0, n_dims, size=n_outliers)
    below = rng.random(n_outliers) < 0.5
    # strictly outside: offset in (0, width]
    offset = width[dims] * (1.0 - rng.random(n_outliers))
    rows = np.arange(n_outliers)
    points[rows, dims] = np.where(below, lo[dims] - offset, hi[dims] + offset)
    return points


def insert_outliers(
    grid: CentroidGrid,
    n_outliers: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Uniform points inside grid cells that no cluster occupies.

    When every cell is taken the outliers are placed outside the grid instead,
    up to one cell width beyond its lower or upper border.
    """
    n_dims = grid.dimension_index.shape[0]
    if n_outliers == 0:
        return np.empty((0, n_dims))

    cells = _free_cells(grid, n_outliers, rng)
    if cells is None:
        logger.warning(
            f"No unoccupied grid cell for {n_outliers} outliers; placing them beyond the grid"
        )
        return _beyond_grid(grid, n_outliers, rng)

    lo = grid.dimension_index[np.arange(n_dims), cells]
    hi = grid.dimension_index[np.arange(n_dims), cells + 1]
    return rng.uniform(lo, hi)
