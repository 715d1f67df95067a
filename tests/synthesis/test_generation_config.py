import numpy as np
import pytest

from mdcgen.synthesis import (
    ConfigError,
    DistributionSpec,
    GenerationConfig,
    GlobalNoise,
    NoNoise,
    PerClusterNoise,
    ValiditySelection,
)


def _half(rng: np.random.Generator, size: int) -> np.ndarray:
    return np.full(size, 0.5)


def test_create_broadcasts_scalars():
    cfg = GenerationConfig.create(3, 4, n_datapoints=10, compactness=0.2, rotation=True)
    assert cfg.points_per_cluster == (4, 3, 3)
    assert cfg.n_datapoints == 10
    assert cfg.compactness == (0.2, 0.2, 0.2)
    assert cfg.rotation == (True, True, True)
    assert cfg.correlation == (0.0, 0.0, 0.0)
    assert cfg.multivariate == (None, None, None)
    assert cfg.distributions == ((None,) * 4,) * 3
    assert isinstance(cfg.noise, NoNoise)


def test_create_mixed_distribution_entries():
    cfg = GenerationConfig.create(
        2, 3, points_per_cluster=[5, 5], distributions=["normal", ("uniform", None, "ring")]
    )
    assert cfg.distributions == (("normal",) * 3, ("uniform", None, "ring"))


def test_default_intersections():
    assert GenerationConfig.create(2, 2, n_datapoints=10).grid_intersections == 3
    assert GenerationConfig.create(4, 2, n_datapoints=10).grid_intersections == 3
    assert GenerationConfig.create(5, 1, n_datapoints=10).grid_intersections == 6
    assert GenerationConfig.create(1, 3, n_datapoints=10).grid_intersections == 2
    assert GenerationConfig.create(2, 2, n_datapoints=10, n_intersections=7).grid_intersections == 7


def test_auto_choices_default_to_whole_catalog():
    cfg = GenerationConfig.create(
        1, 2, n_datapoints=5, user_distributions=[DistributionSpec("half", _half)]
    )
    assert cfg.auto_choices()[-1] == "half"
    assert "normal" in cfg.auto_choices()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"points_per_cluster": [10, 10, 10]},
        {"points_per_cluster": [10, 10], "n_datapoints": 30},
        {"points_per_cluster": [10, 0]},
        {"n_datapoints": 1},
        {"n_datapoints": 20, "compactness": 1.5},
        {"n_datapoints": 20, "compactness": [0.1, 0.1, 0.1]},
        {"n_datapoints": 20, "rotation": [True]},
        {"n_datapoints": 20, "n_outliers": -1},
        {"n_datapoints": 20, "n_intersections": 0},
        {"n_datapoints": 20, "distributions": "cauchy"},
        {"n_datapoints": 20, "distributions": [("normal",), ("normal", "normal")]},
        {"n_datapoints": 20, "available_distributions": []},
        {"n_datapoints": 20, "available_distributions": ["cauchy"]},
        {"n_datapoints": 20, "noise": GlobalNoise((2,))},
        {"n_datapoints": 20, "noise": PerClusterNoise(((0,),))},
        {},
    ],
)
def test_invalid_configs_raise(kwargs):
    with pytest.raises(ConfigError):
        GenerationConfig.create(2, 2, **kwargs)


def test_silhouette_with_single_group_is_still_valid():
    cfg = GenerationConfig.create(
        1, 2, n_datapoints=20, validity=ValiditySelection(silhouette=True)
    )
    assert cfg.validity.silhouette
    cfg = GenerationConfig.create(
        1, 2, n_datapoints=20, n_outliers=5, validity=ValiditySelection(silhouette=True)
    )
    assert cfg.n_rows == 25


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_from_mapping_legacy_layout():
    mapping = {
        "nDatapoints": 100,
        "nDimensions": 2,
        "nClusters": 2,
        "nOutliers": 5,
        "distribution": [[1, 0], [2, 0]],
        "multivariate": [1, -1],
        "compactness": [0.1, 0.2],
        "correlation": [0.5, 0],
        "rotation": [1, 0],
        "nIntersections": 4,
        "noiseType": "array",
        "noise": [2, 0],
        "indicesAvailableDistributions": [1, 2, 3],
        "nAvailableDistributions": 2,
        "validity": {"Gindices": 1, "Silhouette": 0},
    }
    cfg = GenerationConfig.from_mapping(mapping)

    assert cfg.points_per_cluster == (50, 50)
    assert cfg.n_outliers == 5
    assert cfg.distributions == (("uniform", "normal"), (None, None))
    assert cfg.multivariate == (True, False)
    assert cfg.compactness == (0.1, 0.2)
    assert cfg.correlation == (0.5, 0.0)
    assert cfg.rotation == (True, False)
    assert cfg.n_intersections == 4
    assert cfg.noise == GlobalNoise((1,))
    assert cfg.available_distributions == ("uniform", "normal")
    assert cfg.validity == ValiditySelection(g_indices=True, silhouette=False)


def test_from_mapping_matrix_noise_and_auto_multivariate():
    mapping = {
        "nDatapoints": 30,
        "pointsPerCluster": [10, 20],
        "nDimensions": 3,
        "nClusters": 2,
        "multivariate": [0, 0],
        "noiseType": "matrix",
        "noise": [[3, 0], [1, 0]],
    }
    cfg = GenerationConfig.from_mapping(mapping)
    assert cfg.points_per_cluster == (10, 20)
    assert cfg.multivariate == (None, None)
    assert cfg.noise == PerClusterNoise(((2, 0), ()))


def test_from_mapping_user_distribution_ids():
    mapping = {"nDatapoints": 10, "nDimensions": 1, "nClusters": 1, "distribution": 7}
    cfg = GenerationConfig.from_mapping(mapping, user_distributions=[DistributionSpec("half", _half)])
    assert cfg.distributions == (("half",),)


@pytest.mark.parametrize(
    "extra",
    [
        {"distribution": 99},
        {"noiseType": "vector", "noise": [1]},
        {"indicesAvailableDistributions": [0, 1]},
        {"distribution": [[1, 1, 1]]},
    ],
)
def test_from_mapping_rejects_bad_values(extra):
    mapping = {"nDatapoints": 10, "nDimensions": 2, "nClusters": 2, **extra}
    with pytest.raises(ConfigError):
        GenerationConfig.from_mapping(mapping)


@pytest.mark.parametrize("flag, expected", [(1, True), (-1, False), (0, None)])
def test_from_mapping_scalar_multivariate_is_broadcast(flag, expected):
    mapping = {"nDatapoints": 30, "nDimensions": 2, "nClusters": 3, "multivariate": flag}
    cfg = GenerationConfig.from_mapping(mapping)
    assert cfg.multivariate == (expected,) * 3
