from dataclasses import dataclass

import numpy as np
from scipy.spatial.distance import cdist, pdist, squareform

OUTLIER_LABEL = 0


@dataclass(frozen=True)
class ClusterStatistics:
    """Distance-to-centroid statistics per cluster plus centroid distances."""

    median: np.ndarray
    mean: np.ndarray
    std: np.ndarray
    inter_distances: np.ndarray


def distance_statistics(points: np.ndarray, centroid: np.ndarray) -> tuple[float, float, float]:
    """Median, mean and sample standard deviation of distances to ``centroid``."""
    dists = cdist(points, centroid.reshape(1, -1)).ravel()
    ddof = 1 if dists.size > 1 else 0
    return float(np.median(dists)), float(np.mean(dists)), float(np.std(dists, ddof=ddof))


def centroid_distances(centroids: np.ndarray) -> np.ndarray:
    if centroids.shape[0] < 2:
        return np.zeros((centroids.shape[0], centroids.shape[0]))
    return squareform(pdist(centroids))


class DatasetAssembler:
    """Writes cluster blocks and outliers into pre-sized data and label buffers."""

    def __init__(self, points_per_cluster, n_outliers: int, n_dimensions: int) -> None:
        self.points_per_cluster = tuple(int(n) for n in points_per_cluster)
        self.n_outliers = n_outliers
        n_rows = sum(self.points_per_cluster) + n_outliers
        self.offsets = np.concatenate([[0], np.cumsum(self.points_per_cluster)]).astype(int)
        self.data = np.empty((n_rows, n_dimensions))
        self.labels = np.empty(n_rows, dtype=np.int64)
        k = len(self.points_per_cluster)
        self._median = np.zeros(k)
        self._mean = np.zeros(k)
        self._std = np.zeros(k)

    def add_cluster(self, cluster_index: int, points: np.ndarray, centroid: np.ndarray) -> None:
        """Translate ``points`` to ``centroid`` and store them with label index + 1."""
        start, stop = self.offsets[cluster_index], self.offsets[cluster_index + 1]
        if points.shape != (stop - start, self.data.shape[1]):
            raise ValueError(
                f"cluster {cluster_index} has shape {points.shape}, "
                f"expected {(stop - start, self.data.shape[1])}"
            )
        placed = points + centroid
        self.data[start:stop] = placed
        self.labels[start:stop] = cluster_index + 1
        (
            self._median[cluster_index],
            self._mean[cluster_index],
            self._std[cluster_index],
        ) = distance_statistics(placed, centroid)

    def add_outliers(self, outliers: np.ndarray) -> None:
        start = self.offsets[-1]
        if outliers.shape[0] != self.n_outliers:
            raise ValueError(f"expected {self.n_outliers} outliers, got {outliers.shape[0]}")
        self.data[start:] = outliers
        self.labels[start:] = OUTLIER_LABEL

    def statistics(self, centroids: np.ndarray) -> ClusterStatistics:
        return ClusterStatistics(
            median=self._median.copy(),
            mean=self._mean.copy(),
            std=self._std.copy(),
            inter_distances=centroid_distances(centroids),
        )
