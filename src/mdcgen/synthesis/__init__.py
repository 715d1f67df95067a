from .assembly import ClusterStatistics, DatasetAssembler
from .core import (
    ClusterDesign,
    ConfigError,
    GenerationConfig,
    PointCloudStrategy,
    ValiditySelection,
)
from .noise import GlobalNoise, NoiseInjector, NoNoise, PerClusterNoise
from .outliers import insert_outliers
from .pipeline import (
    DataGenerator,
    GenerationResult,
    GenerationSettings,
    ValidityResult,
    run_generation,
)
from .placement import CentroidGrid, insert_centroids
from .registry import DistributionSpec, build_catalog, default_registry
from .strategies import MultivariateStrategy, RadialStrategy
from .transforms import apply_correlation, apply_rotation

__all__ = [
    "CentroidGrid",
    "ClusterDesign",
    "ClusterStatistics",
    "ConfigError",
    "DataGenerator",
    "DatasetAssembler",
    "DistributionSpec",
    "GenerationConfig",
    "GenerationResult",
    "GenerationSettings",
    "GlobalNoise",
    "MultivariateStrategy",
    "NoNoise",
    "NoiseInjector",
    "PerClusterNoise",
    "PointCloudStrategy",
    "RadialStrategy",
    "ValidityResult",
    "ValiditySelection",
    "apply_correlation",
    "apply_rotation",
    "build_catalog",
    "default_registry",
    "insert_centroids",
    "insert_outliers",
    "run_generation",
]
