from dataclasses import dataclass

import numpy as np


class NoiseInjector:
    """Overwrites selected columns with uniform[0, 1] noise.

    Subclasses act either on a single cluster's cloud (before it is moved to its
    centroid) or on the assembled dataset; the other hook is a no-op.
    """

    def apply_to_cluster(
        self, points: np.ndarray, cluster_index: int, rng: np.random.Generator
    ) -> np.ndarray:
        return points

    def apply_to_dataset(self, data: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        return data

    def columns(self, cluster_index: int | None = None) -> tuple[int, ...]:
        return ()

    def validate(self, n_clusters: int, n_dimensions: int) -> None:
        pass


def _overwrite(points: np.ndarray, columns: tuple[int, ...], rng: np.random.Generator):
    for col in columns:
        points[:, col] = rng.uniform(0.0, 1.0, size=points.shape[0])
    return points


def _check_columns(columns: tuple[int, ...], n_dimensions: int) -> None:
    for col in columns:
        if not 0 <= col < n_dimensions:
            raise ValueError(f"noise column {col} outside [0, {n_dimensions})")


@dataclass(frozen=True)
class NoNoise(NoiseInjector):
    pass


@dataclass(frozen=True)
class PerClusterNoise(NoiseInjector):
    """Per-cluster noisy columns; ``columns_per_cluster[i]`` lists 0-based columns."""

    columns_per_cluster: tuple[tuple[int, ...], ...]

    def apply_to_cluster(
        self, points: np.ndarray, cluster_index: int, rng: np.random.Generator
    ) -> np.ndarray:
        return _overwrite(points, self.columns(cluster_index), rng)

    def columns(self, cluster_index: int | None = None) -> tuple[int, ...]:
        if cluster_index is None:
            return ()
        return self.columns_per_cluster[cluster_index]

    def validate(self, n_clusters: int, n_dimensions: int) -> None:
        if len(self.columns_per_cluster) != n_clusters:
            raise ValueError(
                f"per-cluster noise has {len(self.columns_per_cluster)} entries, "
                f"expected n_clusters={n_clusters}"
            )
        for cols in self.columns_per_cluster:
            _check_columns(cols, n_dimensions)


@dataclass(frozen=True)
class GlobalNoise(NoiseInjector):
    """Columns overwritten across the whole dataset, outliers included."""

    target_columns: tuple[int, ...]

    def apply_to_dataset(self, data: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        return _overwrite(data, self.target_columns, rng)

    def columns(self, cluster_index: int | None = None) -> tuple[int, ...]:
        return self.target_columns

    def validate(self, n_clusters: int, n_dimensions: int) -> None:
        _check_columns(self.target_columns, n_dimensions)


def noise_from_legacy(noise_type: str | None, noise, n_clusters: int) -> NoiseInjector:
    """Build an injector from 1-based dimension ids where 0 (or less) means no noise.

    ``noise_type == "matrix"`` expects a (slots x clusters) matrix, ``"array"`` a
    flat sequence.
    """
    if noise_type is None or noise is None:
        return NoNoise()
    arr = np.asarray(noise, dtype=int)
    if arr.size == 0:
        return NoNoise()
    if noise_type == "matrix":
        arr = arr.reshape(-1, n_clusters) if arr.ndim == 1 else arr
        if arr.shape[1] != n_clusters:
            raise ValueError(f"noise matrix has {arr.shape[1]} columns, expected {n_clusters}")
        return PerClusterNoise(
            tuple(tuple(int(d) - 1 for d in arr[:, i] if d > 0) for i in range(n_clusters))
        )
    if noise_type == "array":
        return GlobalNoise(tuple(int(d) - 1 for d in arr.reshape(-1) if d > 0))
    raise ValueError(f"Unknown noiseType: {noise_type!r} (expected 'matrix' or 'array')")
