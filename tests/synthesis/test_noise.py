import numpy as np
import pytest

from mdcgen.synthesis import GlobalNoise, NoNoise, PerClusterNoise
from mdcgen.synthesis.noise import noise_from_legacy


def test_per_cluster_noise_overwrites_only_its_columns():
    noise = PerClusterNoise(((0, 2), ()))
    points = np.full((100, 3), 5.0)
    out = noise.apply_to_cluster(points.copy(), 0, np.random.default_rng(0))
    assert ((out[:, [0, 2]] >= 0) & (out[:, [0, 2]] <= 1)).all()
    np.testing.assert_array_equal(out[:, 1], 5.0)

    untouched = noise.apply_to_cluster(points.copy(), 1, np.random.default_rng(0))
    np.testing.assert_array_equal(untouched, points)
    # dataset hook is a no-op for this variant
    assert noise.apply_to_dataset(points, np.random.default_rng(0)) is points


def test_global_noise_overwrites_whole_columns():
    noise = GlobalNoise((1,))
    data = np.full((50, 2), -3.0)
    out = noise.apply_to_dataset(data.copy(), np.random.default_rng(1))
    assert ((out[:, 1] >= 0) & (out[:, 1] <= 1)).all()
    np.testing.assert_array_equal(out[:, 0], -3.0)
    assert noise.apply_to_cluster(data, 0, np.random.default_rng(1)) is data


def test_no_noise_is_identity():
    noise = NoNoise()
    data = np.zeros((3, 2))
    assert noise.apply_to_cluster(data, 0, np.random.default_rng(0)) is data
    assert noise.apply_to_dataset(data, np.random.default_rng(0)) is data
    assert noise.columns(0) == ()


@pytest.mark.parametrize(
    "noise,n_clusters,n_dims",
    [
        (GlobalNoise((3,)), 2, 3),
        (GlobalNoise((-1,)), 2, 3),
        (PerClusterNoise(((0,), (5,))), 2, 3),
        (PerClusterNoise(((0,),)), 2, 3),
    ],
)
def test_validate_rejects_bad_columns(noise, n_clusters, n_dims):
    with pytest.raises(ValueError):
        noise.validate(n_clusters, n_dims)


def test_legacy_conversion_skips_non_positive_ids():
    assert noise_from_legacy("array", [0, 3, -1, 1], 2) == GlobalNoise((2, 0))
    assert noise_from_legacy("matrix", [[1, 0], [0, 2]], 2) == PerClusterNoise(((0,), (1,)))
    assert noise_from_legacy("matrix", [2, 0], 2) == PerClusterNoise(((1,), ()))
    assert noise_from_legacy(None, [1], 2) == NoNoise()
    assert noise_from_legacy("array", [], 2) == NoNoise()
    with pytest.raises(ValueError):
        noise_from_legacy("matrix", [[1, 0, 0]], 2)
