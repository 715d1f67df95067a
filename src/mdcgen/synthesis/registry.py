from collections.abc import Callable, Iterable
from dataclasses import dataclass

import numpy as np

from .distributions import (
    gamma_sampler,
    logistic_sampler,
    normal_sampler,
    ring_sampler,
    triangular_sampler,
    uniform_sampler,
)

DistributionSampler = Callable[[np.random.Generator, int], np.ndarray]


@dataclass(frozen=True, slots=True)
class DistributionSpec:
    name: str
    sampler: DistributionSampler

    def sample(self, rng: np.random.Generator, size: int) -> np.ndarray:
        values = np.asarray(self.sampler(rng, size), dtype=float).reshape(-1)
        if values.shape[0] != size:
            raise ValueError(
                f"Distribution '{self.name}' returned {values.shape[0]} values, expected {size}"
            )
        return values


def default_registry() -> list[DistributionSpec]:
    """Built-in catalog; list position + 1 is the legacy numeric id."""
    return [
        DistributionSpec("uniform", uniform_sampler),
        DistributionSpec("normal", normal_sampler),
        DistributionSpec("logistic", logistic_sampler),
        DistributionSpec("triangular", triangular_sampler),
        DistributionSpec("gamma", gamma_sampler),
        DistributionSpec("ring", ring_sampler),
    ]


def build_catalog(
    user_distributions: Iterable[DistributionSpec] = (),
) -> dict[str, DistributionSpec]:
    catalog = {spec.name: spec for spec in default_registry()}
    for spec in user_distributions:
        if spec.name in catalog:
            raise ValueError(f"Duplicate distribution name: {spec.name}")
        catalog[spec.name] = spec
    return catalog
