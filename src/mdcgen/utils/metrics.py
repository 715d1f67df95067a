import numpy as np
from sklearn.metrics import silhouette_score


def silhouette_index(data: np.ndarray, labels: np.ndarray) -> float:
    """Mean Silhouette coefficient (euclidean); outliers count as their own group."""
    return float(silhouette_score(data, labels, metric="euclidean"))


def _pairwise_overlap(inter_distances: np.ndarray, radii: np.ndarray) -> np.ndarray:
    """o_ij = max(0, 1 - d_ij / (r_i + r_j)), zero on the diagonal."""
    reach = radii[:, None] + radii[None, :]
    overlap = np.zeros_like(inter_distances, dtype=float)
    np.divide(inter_distances, reach, out=overlap, where=reach > 0)
    overlap = np.clip(1.0 - overlap, 0.0, 1.0)
    # zero reach: clusters collapsed to their centroids only overlap if they coincide
    collapsed = reach <= 0
    overlap[collapsed] = (inter_distances[collapsed] == 0).astype(float)
    np.fill_diagonal(overlap, 0.0)
    return overlap


def overlap_indices(
    inter_distances: np.ndarray,
    radii: np.ndarray,
    points_per_cluster: np.ndarray,
) -> tuple[float, np.ndarray]:
    """Global (size-weighted) and per-cluster overlap for one radius estimate."""
    overlap = _pairwise_overlap(inter_distances, radii)
    if overlap.shape[0] < 2:
        individual = np.zeros(overlap.shape[0])
    else:
        individual = overlap.max(axis=1)
    weights = np.asarray(points_per_cluster, dtype=float)
    return float(np.sum(weights * individual) / np.sum(weights)), individual


def g_indices(
    n_clusters: int,
    inter_distances: np.ndarray,
    medians: np.ndarray,
    means: np.ndarray,
    stds: np.ndarray,
    points_per_cluster,
) -> dict[str, float | np.ndarray]:
    """Strict, relaxed and minimum overlap indices from distance statistics.

    Cluster radii are estimated as ``mean + 2 std`` (strict), ``mean + std``
    (relaxed) and ``median`` (minimum). Two clusters overlap by
    ``1 - d / (r_i + r_j)`` when their centroid distance ``d`` is below the sum of
    radii. A cluster's index is its largest overlap with any other cluster; the
    global index averages them weighted by cluster size.
    """
    inter_distances = np.asarray(inter_distances, dtype=float)
    if inter_distances.shape != (n_clusters, n_clusters):
        raise ValueError(
            f"inter_distances has shape {inter_distances.shape}, expected "
            f"{(n_clusters, n_clusters)}"
        )
    medians = np.asarray(medians, dtype=float)
    means = np.asarray(means, dtype=float)
    stds = np.asarray(stds, dtype=float)

    g_str, oi_st = overlap_indices(inter_distances, means + 2.0 * stds, points_per_cluster)
    g_rex, oi_rx = overlap_indices(inter_distances, means + stds, points_per_cluster)
    g_min, oi_mn = overlap_indices(inter_distances, medians, points_per_cluster)

    return {
        "Gstr": g_str,
        "Grex": g_rex,
        "Gmin": g_min,
        "oi_st": oi_st,
        "oi_rx": oi_rx,
        "oi_mn": oi_mn,
    }
