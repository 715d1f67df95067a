import numpy as np
import pytest

from mdcgen.synthesis import insert_centroids, placement
from mdcgen.synthesis.placement import grid_margin


@pytest.mark.parametrize("n_intersections,n_dims,n_clusters", [(3, 2, 2), (4, 3, 20), (2, 5, 32)])
def test_clusters_get_distinct_cells(n_intersections, n_dims, n_clusters):
    grid = insert_centroids(
        n_intersections, n_dims, n_clusters, 0, [0.1] * n_clusters, np.random.default_rng(0)
    )
    assert grid.centroids.shape == (n_clusters, n_dims)
    assert grid.intersection_index.shape == (n_clusters, n_dims)
    assert grid.dimension_index.shape == (n_dims, n_intersections + 1)
    assert len(grid.occupied_cells()) == n_clusters
    assert (grid.intersection_index >= 0).all()
    assert (grid.intersection_index < n_intersections).all()


def test_centroids_sit_at_cell_centres_inside_span():
    grid = insert_centroids(3, 2, 4, 0, [0.1, 0.2, 0.1, 0.1], np.random.default_rng(1))
    lo, hi = grid.span
    np.testing.assert_allclose(lo, 0.1)
    np.testing.assert_allclose(hi, 0.9)
    assert ((grid.centroids > lo) & (grid.centroids < hi)).all()
    np.testing.assert_array_equal(grid.cell_of(grid.centroids), grid.intersection_index)


def test_lower_compactness_widens_the_grid():
    assert grid_margin([0.05]) < grid_margin([0.5])
    assert grid_margin([1.0]) == pytest.approx(0.45)
    tight = insert_centroids(2, 1, 2, 0, [0.05, 0.05], np.random.default_rng(3))
    loose = insert_centroids(2, 1, 2, 0, [0.6, 0.6], np.random.default_rng(3))
    gap_tight = np.ptp(tight.centroids)
    gap_loose = np.ptp(loose.centroids)
    assert gap_tight > gap_loose


def test_more_clusters_than_cells_reuses_cells_in_permutation_order():
    grid = insert_centroids(2, 1, 5, 0, [0.1] * 5, np.random.default_rng(4))
    cells = grid.intersection_index[:, 0]
    # cluster i takes perm[i % 2]
    assert cells[0] != cells[1]
    np.testing.assert_array_equal(cells[2:], [cells[0], cells[1], cells[0]])


def test_huge_grid_uses_rejection_sampling():
    grid = insert_centroids(2, 40, 10, 0, [0.1] * 10, np.random.default_rng(5))
    assert grid.n_cells == 2**40
    assert len(grid.occupied_cells()) == 10


def test_rejection_sampling_reuses_cells_when_clusters_exceed_cells(monkeypatch):
    monkeypatch.setattr(placement, "MAX_ENUMERATED_CELLS", 0)
    grid = insert_centroids(2, 1, 5, 0, [0.1] * 5, np.random.default_rng(4))
    cells = grid.intersection_index[:, 0]
    assert cells[0] != cells[1]
    np.testing.assert_array_equal(cells[2:], [cells[0], cells[1], cells[0]])


def test_placement_reproducible():
    a = insert_centroids(5, 3, 6, 0, [0.1] * 6, np.random.default_rng(9))
    b = insert_centroids(5, 3, 6, 0, [0.1] * 6, np.random.default_rng(9))
    np.testing.assert_array_equal(a.centroids, b.centroids)
    np.testing.assert_array_equal(a.intersection_index, b.intersection_index)
