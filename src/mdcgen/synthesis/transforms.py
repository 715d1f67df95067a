import logging

import numpy as np
from scipy import linalg

logger = logging.getLogger(__name__)


def correlation_matrix(n_dims: int, degree: float) -> tuple[np.ndarray | None, bool]:
    """Upper Cholesky factor of an equicorrelation matrix.

    Returns ``(T, ok)``; ``ok`` is False (and ``T`` None) when the requested
    degree does not give a positive definite matrix.
    """
    corr = np.full((n_dims, n_dims), float(degree))
    np.fill_diagonal(corr, 1.0)
    try:
        return linalg.cholesky(corr, lower=False), True
    except linalg.LinAlgError:
        return None, False


def apply_correlation(
    points: np.ndarray, degree: float, cluster_index: int | None = None
) -> tuple[np.ndarray, bool]:
    if degree == 0:
        return points, False
    T, ok = correlation_matrix(points.shape[1], degree)
    if not ok:
        logger.warning(
            f"Correlation degree {degree} is not positive definite in {points.shape[1]} "
            f"dimensions; skipping correlation for cluster {cluster_index}"
        )
        return points, False
    return points @ T, True


def random_rotation(n_dims: int, rng: np.random.Generator) -> np.ndarray:
    """Orthonormal basis of a random [-1, 1] matrix (may lose columns if singular)."""
    return linalg.orth(rng.uniform(-1.0, 1.0, size=(n_dims, n_dims)))


def apply_rotation(
    points: np.ndarray, rng: np.random.Generator, cluster_index: int | None = None
) -> tuple[np.ndarray, bool]:
    n_dims = points.shape[1]
    rotation = random_rotation(n_dims, rng)
    if rotation.shape != (n_dims, n_dims):
        logger.warning(
            f"Rotation basis has shape {rotation.shape}, expected {(n_dims, n_dims)}; "
            f"skipping rotation for cluster {cluster_index}"
        )
        return points, False
    return points @ rotation, True
