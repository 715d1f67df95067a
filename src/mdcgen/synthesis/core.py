import math
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .noise import NoiseInjector, NoNoise, noise_from_legacy
from .registry import DistributionSpec, build_catalog, default_registry
from .utils import compute_cluster_sizes

# None stands for "auto-select" in every per-cluster option below.
DistributionChoice = str | None


class ConfigError(ValueError):
    """Raised for malformed generation configurations, before any sampling."""


@dataclass(frozen=True, slots=True)
class ValiditySelection:
    g_indices: bool = False
    silhouette: bool = False


@dataclass(frozen=True)
class GenerationConfig:
    """Clustered dataset specification.

    Per-cluster options are tuples of length ``n_clusters``; ``distributions[i]``
    holds one entry per dimension. Use :meth:`create` to broadcast scalars.
    """

    n_clusters: int
    n_dimensions: int
    points_per_cluster: tuple[int, ...]
    n_outliers: int = 0
    distributions: tuple[tuple[DistributionChoice, ...], ...] = ()
    multivariate: tuple[bool | None, ...] = ()
    compactness: tuple[float, ...] = ()
    correlation: tuple[float, ...] = ()
    rotation: tuple[bool, ...] = ()
    n_intersections: int | None = None
    noise: NoiseInjector = field(default_factory=NoNoise)
    available_distributions: tuple[str, ...] | None = None
    user_distributions: tuple[DistributionSpec, ...] = ()
    validity: ValiditySelection = field(default_factory=ValiditySelection)

    @property
    def n_datapoints(self) -> int:
        return int(sum(self.points_per_cluster))

    @property
    def n_rows(self) -> int:
        return self.n_datapoints + self.n_outliers

    @property
    def grid_intersections(self) -> int:
        if self.n_intersections is not None:
            return self.n_intersections
        return max(2, math.ceil(self.n_clusters ** (1.0 / self.n_dimensions) - 1e-9) + 1)

    def catalog(self) -> dict[str, DistributionSpec]:
        return build_catalog(self.user_distributions)

    def auto_choices(self) -> tuple[str, ...]:
        if self.available_distributions is not None:
            return self.available_distributions
        return tuple(self.catalog())

    def validate(self) -> "GenerationConfig":
        k, d = self.n_clusters, self.n_dimensions
        if k < 1:
            raise ConfigError("n_clusters must be >= 1")
        if d < 1:
            raise ConfigError("n_dimensions must be >= 1")
        if self.n_outliers < 0:
            raise ConfigError("n_outliers must be >= 0")
        for name in (
            "points_per_cluster",
            "distributions",
            "multivariate",
            "compactness",
            "correlation",
            "rotation",
        ):
            if len(getattr(self, name)) != k:
                raise ConfigError(
                    f"{name} has {len(getattr(self, name))} entries, expected n_clusters={k}"
                )
        if any(n < 1 for n in self.points_per_cluster):
            raise ConfigError("every cluster needs at least one point")
        if any(not 0.0 <= c <= 1.0 for c in self.compactness):
            raise ConfigError("compactness values must lie in [0, 1]")
        if self.n_intersections is not None and self.n_intersections < 1:
            raise ConfigError("n_intersections must be >= 1")

        try:
            catalog = self.catalog()
        except ValueError as e:
            raise ConfigError(str(e)) from e
        for i, dists in enumerate(self.distributions):
            if len(dists) != d:
                raise ConfigError(
                    f"distributions[{i}] has {len(dists)} entries, expected n_dimensions={d}"
                )
            unknown = [name for name in dists if name is not None and name not in catalog]
            if unknown:
                raise ConfigError(f"Unknown distribution(s) for cluster {i}: {unknown}")
        choices = self.auto_choices()
        if not choices:
            raise ConfigError("available_distributions must not be empty")
        unknown = [name for name in choices if name not in catalog]
        if unknown:
            raise ConfigError(f"Unknown available distribution(s): {unknown}")

        try:
            self.noise.validate(k, d)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        return self

    @classmethod
    def create(
        cls,
        n_clusters: int,
        n_dimensions: int,
        *,
        n_datapoints: int | None = None,
        points_per_cluster: Sequence[int] | None = None,
        n_outliers: int = 0,
        distributions: Any = None,
        multivariate: bool | None | Sequence[bool | None] = None,
        compactness: float | Sequence[float] = 0.1,
        correlation: float | Sequence[float] = 0.0,
        rotation: bool | Sequence[bool] = False,
        n_intersections: int | None = None,
        noise: NoiseInjector | None = None,
        available_distributions: Sequence[str] | None = None,
        user_distributions: Sequence[DistributionSpec] = (),
        validity: ValiditySelection | None = None,
    ) -> "GenerationConfig":
        """Build a validated config, broadcasting scalar options to every cluster."""
        if points_per_cluster is None:
            if n_datapoints is None:
                raise ConfigError("Provide n_datapoints or points_per_cluster")
            if n_datapoints < n_clusters:
                raise ConfigError("n_datapoints must be >= n_clusters")
            points_per_cluster = compute_cluster_sizes(n_datapoints, n_clusters)
        elif n_datapoints is not None and sum(points_per_cluster) != n_datapoints:
            raise ConfigError(
                f"points_per_cluster sums to {sum(points_per_cluster)}, "
                f"expected n_datapoints={n_datapoints}"
            )

        return cls(
            n_clusters=n_clusters,
            n_dimensions=n_dimensions,
            points_per_cluster=tuple(int(n) for n in points_per_cluster),
            n_outliers=n_outliers,
            distributions=_broadcast_distributions(distributions, n_clusters, n_dimensions),
            multivariate=_broadcast(multivariate, n_clusters, _optional_bool),
            compactness=_broadcast(compactness, n_clusters, float),
            correlation=_broadcast(correlation, n_clusters, float),
            rotation=_broadcast(rotation, n_clusters, bool),
            n_intersections=n_intersections,
            noise=noise or NoNoise(),
            available_distributions=(
                tuple(available_distributions) if available_distributions is not None else None
            ),
            user_distributions=tuple(user_distributions),
            validity=validity or ValiditySelection(),
        ).validate()

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        user_distributions: Sequence[DistributionSpec] = (),
    ) -> "GenerationConfig":
        """Build a config from the legacy camelCase layout.

        Numeric conventions: distribution ids are 1-based positions in the catalog
        (built-ins first, then ``user_distributions``) with 0 meaning auto-select;
        ``multivariate`` is 0 for a coin flip, positive for feature-wise sampling and
        negative for radial sampling; noise dimension ids are 1-based with 0 meaning
        no noise. The ``distribution`` matrix is laid out dimensions x clusters.
        """
        names = [spec.name for spec in default_registry()]
        names += [spec.name for spec in user_distributions]

        def id_to_name(idx: int) -> DistributionChoice:
            idx = int(idx)
            if idx == 0:
                return None
            if not 1 <= idx <= len(names):
                raise ConfigError(f"Unknown distribution id {idx}")
            return names[idx - 1]

        k = int(mapping["nClusters"])
        d = int(mapping["nDimensions"])

        distributions = None
        if mapping.get("distribution") is not None:
            dist = np.asarray(mapping["distribution"], dtype=int)
            if dist.ndim == 0:
                dist = np.full((d, k), int(dist))
            elif dist.ndim == 1:
                dist = np.tile(dist.reshape(-1, 1), (1, k)) if dist.size == d else dist
            if dist.shape != (d, k):
                raise ConfigError(f"distribution matrix has shape {dist.shape}, expected {(d, k)}")
            distributions = [[id_to_name(dist[j, i]) for j in range(d)] for i in range(k)]

        multivariate = None
        if mapping.get("multivariate") is not None:
            multivariate = [
                None if m == 0 else m > 0 for m in np.atleast_1d(mapping["multivariate"])
            ]
            if np.ndim(mapping["multivariate"]) == 0:
                multivariate = multivariate[0]

        available = None
        if mapping.get("indicesAvailableDistributions") is not None:
            indices = list(np.atleast_1d(mapping["indicesAvailableDistributions"]))
            n_available = mapping.get("nAvailableDistributions")
            if n_available is not None:
                indices = indices[: int(n_available)]
            available = [id_to_name(i) for i in indices]
            if any(name is None for name in available):
                raise ConfigError("indicesAvailableDistributions must not contain 0")

        try:
            noise = noise_from_legacy(mapping.get("noiseType"), mapping.get("noise"), k)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        validity = mapping.get("validity") or {}
        points = mapping.get("pointsPerCluster")

        return cls.create(
            n_clusters=k,
            n_dimensions=d,
            n_datapoints=mapping.get("nDatapoints"),
            points_per_cluster=None if points is None else list(np.atleast_1d(points)),
            n_outliers=int(mapping.get("nOutliers", 0)),
            distributions=distributions,
            multivariate=multivariate,
            compactness=_as_list(mapping.get("compactness", 0.1)),
            correlation=_as_list(mapping.get("correlation", 0.0)),
            rotation=_as_list(mapping.get("rotation", False)),
            n_intersections=mapping.get("nIntersections"),
            noise=noise,
            available_distributions=available,
            user_distributions=user_distributions,
            validity=ValiditySelection(
                g_indices=bool(validity.get("Gindices", False)),
                silhouette=bool(validity.get("Silhouette", False)),
            ),
        )


def _as_list(value):
    return value.tolist() if isinstance(value, np.ndarray) else value


def _optional_bool(value) -> bool | None:
    return None if value is None else bool(value)


def _broadcast(value, n: int, cast) -> tuple:
    if value is None or np.isscalar(value):
        return tuple(cast(value) for _ in range(n))
    return tuple(cast(v) for v in value)


def _broadcast_distributions(value, n_clusters: int, n_dims: int) -> tuple:
    if value is None or isinstance(value, str):
        return tuple((value,) * n_dims for _ in range(n_clusters))
    per_cluster = []
    for entry in value:
        if entry is None or isinstance(entry, str):
            per_cluster.append((entry,) * n_dims)
        else:
            per_cluster.append(tuple(entry))
    return tuple(per_cluster)


@dataclass(frozen=True, slots=True)
class ClusterDesign:
    """Choices resolved for one cluster during generation."""

    multivariate: bool
    distributions: tuple[str, ...]
    correlated: bool = False
    rotated: bool = False
    noise_columns: tuple[int, ...] = ()


class PointCloudStrategy(ABC):
    def __init__(self, catalog: Mapping[str, DistributionSpec]) -> None:
        self.catalog = catalog

    @abstractmethod
    def resolve(
        self,
        requested: tuple[DistributionChoice, ...],
        available: tuple[str, ...],
        rng: np.random.Generator,
    ) -> tuple[str, ...]:
        """Replace auto-select entries with concrete distribution names."""
        ...

    @abstractmethod
    def generate(
        self,
        n_points: int,
        distributions: tuple[str, ...],
        compactness: float,
        rng: np.random.Generator,
    ) -> np.ndarray:
        """Return an origin-centred (n_points, n_dims) cloud."""
        ...
