import logging
import multiprocessing
import pickle
import time
from dataclasses import dataclass, field

import numpy as np

from mdcgen.utils import g_indices, silhouette_index

from .assembly import ClusterStatistics, DatasetAssembler
from .core import ClusterDesign, GenerationConfig
from .outliers import insert_outliers
from .placement import CentroidGrid, insert_centroids
from .strategies import strategy_for
from .transforms import apply_correlation, apply_rotation

logger = logging.getLogger(__name__)

# Streams spawned from the master seed ahead of the per-cluster ones.
PLACEMENT_STREAM, OUTLIER_STREAM, NOISE_STREAM = 0, 1, 2
N_SHARED_STREAMS = 3


@dataclass(frozen=True, slots=True)
class GenerationSettings:
    seed: int | None = None
    n_jobs: int = 1  # >1 generates clusters in a process pool


@dataclass
class ValidityResult:
    silhouette: float | None = None
    g_str: float | None = None
    g_rex: float | None = None
    g_min: float | None = None
    oi_st: np.ndarray | None = None
    oi_rx: np.ndarray | None = None
    oi_mn: np.ndarray | None = None

    def as_dict(self) -> dict:
        """Computed entries only, under the legacy key names."""
        keys = {
            "Silhouette": self.silhouette,
            "Gstr": self.g_str,
            "Grex": self.g_rex,
            "Gmin": self.g_min,
            "oi_st": self.oi_st,
            "oi_rx": self.oi_rx,
            "oi_mn": self.oi_mn,
        }
        return {k: v for k, v in keys.items() if v is not None}


@dataclass
class GenerationResult:
    data: np.ndarray
    labels: np.ndarray
    grid: CentroidGrid
    statistics: ClusterStatistics
    designs: list[ClusterDesign]
    perf: ValidityResult = field(default_factory=ValidityResult)

    @property
    def centroids(self) -> np.ndarray:
        return self.grid.centroids

    def as_dict(self) -> dict:
        return {"dataPoints": self.data, "label": self.labels, "perf": self.perf.as_dict()}


def _generate_cluster(
    config: GenerationConfig,
    cluster_index: int,
    seed_seq: np.random.SeedSequence,
) -> tuple[np.ndarray, ClusterDesign]:
    """Origin-centred cloud of one cluster, transformed and with per-cluster noise.

    Draw order on the cluster stream: multivariate coin, distribution picks,
    point samples, rotation matrix, noise columns.
    """
    rng = np.random.default_rng(seed_seq)
    i = cluster_index

    multivariate = config.multivariate[i]
    if multivariate is None:
        multivariate = bool(rng.random() < 0.5)

    strategy = strategy_for(multivariate, config.catalog())
    distributions = strategy.resolve(config.distributions[i], config.auto_choices(), rng)
    points = strategy.generate(
        config.points_per_cluster[i], distributions, config.compactness[i], rng
    )

    points, correlated = apply_correlation(points, config.correlation[i], cluster_index=i)
    rotated = False
    if config.rotation[i]:
        points, rotated = apply_rotation(points, rng, cluster_index=i)

    points = config.noise.apply_to_cluster(points, i, rng)

    design = ClusterDesign(
        multivariate=multivariate,
        distributions=distributions,
        correlated=correlated,
        rotated=rotated,
        noise_columns=config.noise.columns(i),
    )
    logger.debug(
        f"Cluster {i + 1}: {'multivariate' if multivariate else 'radial'} "
        f"{distributions}, correlated={correlated}, rotated={rotated}"
    )
    return points, design


def _picklable(config: GenerationConfig) -> bool:
    try:
        pickle.dumps(config)
    except (pickle.PicklingError, AttributeError, TypeError) as e:
        logger.warning(f"Config cannot be sent to worker processes, generating serially: {e}")
        return False
    return True


def _compute_validity(
    config: GenerationConfig,
    data: np.ndarray,
    labels: np.ndarray,
    statistics: ClusterStatistics,
) -> ValidityResult:
    perf = ValidityResult()
    if config.validity.g_indices:
        g = g_indices(
            config.n_clusters,
            statistics.inter_distances,
            statistics.median,
            statistics.mean,
            statistics.std,
            config.points_per_cluster,
        )
        perf.g_str, perf.g_rex, perf.g_min = g["Gstr"], g["Grex"], g["Gmin"]
        perf.oi_st, perf.oi_rx, perf.oi_mn = g["oi_st"], g["oi_rx"], g["oi_mn"]
    if config.validity.silhouette:
        n_groups = np.unique(labels).size
        if n_groups < 2 or labels.size <= n_groups:
            logger.warning(
                f"Silhouette undefined for {n_groups} label group(s) over {labels.size} rows"
            )
            perf.silhouette = float("nan")
        else:
            perf.silhouette = silhouette_index(data, labels)
    return perf


def run_generation(
    config: GenerationConfig,
    settings: GenerationSettings | None = None,
) -> GenerationResult:
    """Generate one labelled dataset.

    All randomness comes from ``settings.seed``: one spawned stream each for
    centroid placement, outliers and global noise, plus one per cluster, so the
    serial and pooled paths give bit-identical results.
    """
    settings = settings or GenerationSettings()
    config.validate()
    start_time = time.perf_counter()

    master_ss = np.random.SeedSequence(settings.seed)
    streams = master_ss.spawn(N_SHARED_STREAMS + config.n_clusters)
    cluster_streams = streams[N_SHARED_STREAMS:]

    logger.info(
        f"Generating k={config.n_clusters}, n={config.n_datapoints}, d={config.n_dimensions}, "
        f"outliers={config.n_outliers}, intersections={config.grid_intersections}"
    )

    grid = insert_centroids(
        int(config.grid_intersections),
        config.n_dimensions,
        config.n_clusters,
        config.n_outliers,
        config.compactness,
        np.random.default_rng(streams[PLACEMENT_STREAM]),
    )

    tasks = [(config, i, ss) for i, ss in enumerate(cluster_streams)]
    if settings.n_jobs > 1 and config.n_clusters > 1 and _picklable(config):
        with multiprocessing.Pool(processes=min(settings.n_jobs, config.n_clusters)) as pool:
            clusters = pool.starmap(_generate_cluster, tasks)
    else:
        clusters = [_generate_cluster(*task) for task in tasks]

    assembler = DatasetAssembler(config.points_per_cluster, config.n_outliers, config.n_dimensions)
    designs: list[ClusterDesign] = []
    for i, (points, design) in enumerate(clusters):
        assembler.add_cluster(i, points, grid.centroids[i])
        designs.append(design)

    if config.n_outliers > 0:
        outliers = insert_outliers(
            grid, config.n_outliers, np.random.default_rng(streams[OUTLIER_STREAM])
        )
        assembler.add_outliers(outliers)

    data = config.noise.apply_to_dataset(
        assembler.data, np.random.default_rng(streams[NOISE_STREAM])
    )
    labels = assembler.labels
    statistics = assembler.statistics(grid.centroids)

    perf = _compute_validity(config, data, labels, statistics)

    logger.info(f"Generated {data.shape[0]} rows in {time.perf_counter() - start_time:.2f}s")
    return GenerationResult(
        data=data,
        labels=labels,
        grid=grid,
        statistics=statistics,
        designs=designs,
        perf=perf,
    )


class DataGenerator:
    def __init__(self, config: GenerationConfig) -> None:
        """Create a generator for a validated config."""
        self.config = config.validate()

    def generate(self, seed: int | None = None, n_jobs: int = 1) -> GenerationResult:
        return run_generation(self.config, GenerationSettings(seed=seed, n_jobs=n_jobs))

    def generate_dataset(self, seed: int | None = None) -> tuple[np.ndarray, np.ndarray]:
        result = self.generate(seed=seed)
        return result.data, result.labels
