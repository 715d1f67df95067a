import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

# Above this many cells, distinct cells are found by rejection sampling instead of
# drawing from the enumerated grid.
MAX_ENUMERATED_CELLS = 1_000_000


@dataclass(frozen=True)
class CentroidGrid:
    """Cluster centres laid out on a regular grid of cells.

    ``intersection_index[i, j]`` is the cell cluster ``i`` occupies along
    dimension ``j``; ``dimension_index[j]`` holds the ``n_intersections + 1`` cell
    boundaries of dimension ``j``.
    """

    centroids: np.ndarray
    intersection_index: np.ndarray
    dimension_index: np.ndarray

    @property
    def n_intersections(self) -> int:
        return self.dimension_index.shape[1] - 1

    @property
    def n_cells(self) -> int:
        return self.n_intersections ** self.dimension_index.shape[0]

    @property
    def cell_width(self) -> np.ndarray:
        return self.dimension_index[:, 1] - self.dimension_index[:, 0]

    @property
    def span(self) -> tuple[np.ndarray, np.ndarray]:
        return self.dimension_index[:, 0], self.dimension_index[:, -1]

    def occupied_cells(self) -> set[tuple[int, ...]]:
        return {tuple(int(c) for c in row) for row in self.intersection_index}

    def cell_of(self, points: np.ndarray) -> np.ndarray:
        """Cell coordinates of each point; -1 or n_intersections when off the grid."""
        lo, _ = self.span
        cells = np.floor((np.atleast_2d(points) - lo) / self.cell_width).astype(int)
        return np.clip(cells, -1, self.n_intersections)


def grid_margin(compactness) -> float:
    """Border left free on both sides of every dimension of the unit space."""
    return min(float(np.max(compactness)), 0.9) / 2.0


def _distinct_cells(
    n_cells_per_dim: int, n_dims: int, n_clusters: int, rng: np.random.Generator
) -> np.ndarray:
    n_cells = n_cells_per_dim**n_dims
    if n_cells <= MAX_ENUMERATED_CELLS:
        shape = (n_cells_per_dim,) * n_dims
        if n_clusters <= n_cells:
            flat = rng.choice(n_cells, size=n_clusters, replace=False)
        else:
            logger.warning(
                f"{n_clusters} clusters exceed the {n_cells} grid cells; "
                f"cells are reused in permutation order"
            )
            perm = rng.permutation(n_cells)
            flat = perm[np.arange(n_clusters) % n_cells]
        return np.stack(np.unravel_index(flat, shape), axis=1)

    n_distinct = min(n_clusters, n_cells)
    if n_distinct < n_clusters:
        logger.warning(
            f"{n_clusters} clusters exceed the {n_cells} grid cells; cells are reused in draw order"
        )
    seen: set[tuple[int, ...]] = set()
    cells = np.empty((n_clusters, n_dims), dtype=int)
    i = 0
    while i < n_distinct:
        cand = rng.integers(0, n_cells_per_dim, size=n_dims)
        key = tuple(int(c) for c in cand)
        if key in seen:
            continue
        seen.add(key)
        cells[i] = cand
        i += 1
    cells[n_distinct:] = cells[np.arange(n_distinct, n_clusters) % n_distinct]
    return cells


def insert_centroids(
    n_intersections: int,
    n_dimensions: int,
    n_clusters: int,
    n_outliers: int,
    compactness,
    rng: np.random.Generator,
) -> CentroidGrid:
    """Place one centroid per cluster at the centre of a distinct grid cell.

    Every dimension spans ``[m, 1 - m]`` with ``m`` half the largest compactness,
    split into ``n_intersections`` equal cells. Clusters get distinct cells while
    the grid has enough of them; otherwise cells are reused in the order of a
    random permutation, cluster ``i`` taking ``perm[i % n_cells]``.
    """
    margin = grid_margin(compactness)
    bounds = np.linspace(margin, 1.0 - margin, n_intersections + 1)
    dimension_index = np.tile(bounds, (n_dimensions, 1))

    n_cells = n_intersections**n_dimensions
    if n_outliers > 0 and n_clusters >= n_cells:
        logger.info(f"No free grid cell left for outliers ({n_clusters} clusters, {n_cells} cells)")

    intersection_index = _distinct_cells(n_intersections, n_dimensions, n_clusters, rng)
    width = dimension_index[:, 1] - dimension_index[:, 0]
    centroids = dimension_index[:, 0] + (intersection_index + 0.5) * width

    return CentroidGrid(
        centroids=centroids,
        intersection_index=intersection_index,
        dimension_index=dimension_index,
    )
