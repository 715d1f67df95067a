import numpy as np

from .core import DistributionChoice, PointCloudStrategy
from .distributions import random_directions


class MultivariateStrategy(PointCloudStrategy):
    """Each feature is drawn independently from its own distribution."""

    def resolve(
        self,
        requested: tuple[DistributionChoice, ...],
        available: tuple[str, ...],
        rng: np.random.Generator,
    ) -> tuple[str, ...]:
        return tuple(
            name if name is not None else available[int(rng.integers(len(available)))]
            for name in requested
        )

    def generate(
        self,
        n_points: int,
        distributions: tuple[str, ...],
        compactness: float,
        rng: np.random.Generator,
    ) -> np.ndarray:
        points = np.empty((n_points, len(distributions)))
        for j, name in enumerate(distributions):
            points[:, j] = self.catalog[name].sample(rng, n_points)
        return points * compactness


class RadialStrategy(PointCloudStrategy):
    """A single distribution defines the distance of every point to the centroid."""

    def resolve(
        self,
        requested: tuple[DistributionChoice, ...],
        available: tuple[str, ...],
        rng: np.random.Generator,
    ) -> tuple[str, ...]:
        name = requested[0]
        if name is None:
            name = available[int(rng.integers(len(available)))]
        return (name,) * len(requested)

    def generate(
        self,
        n_points: int,
        distributions: tuple[str, ...],
        compactness: float,
        rng: np.random.Generator,
    ) -> np.ndarray:
        radii = np.abs(self.catalog[distributions[0]].sample(rng, n_points))
        directions = random_directions(rng, n_points, len(distributions))
        return directions * (radii * compactness)[:, None]


def strategy_for(multivariate: bool, catalog) -> PointCloudStrategy:
    if multivariate:
        return MultivariateStrategy(catalog)
    return RadialStrategy(catalog)
