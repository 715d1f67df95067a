import json
from pathlib import Path

import numpy as np
from scipy import stats

DISTRIBUTION_PARAMS_PATH = Path(__file__).parent / "distribution_params.json"


def _load_params() -> dict:
    """Load distribution parameters from JSON file."""
    with open(DISTRIBUTION_PARAMS_PATH) as f:
        return json.load(f)


PARAMS = _load_params()

# Every sampler returns zero-centred values whose bulk lies in [-0.5, 0.5], so that
# multiplying by a compactness factor yields a cluster extent of about that factor.


def uniform_sampler(rng: np.random.Generator, size: int) -> np.ndarray:
    cfg = PARAMS["uniform"]
    return stats.uniform(loc=cfg["loc"], scale=cfg["scale"]).rvs(size=size, random_state=rng)


def normal_sampler(rng: np.random.Generator, size: int) -> np.ndarray:
    cfg = PARAMS["normal"]
    return stats.norm(loc=cfg["loc"], scale=cfg["scale"]).rvs(size=size, random_state=rng)


def logistic_sampler(rng: np.random.Generator, size: int) -> np.ndarray:
    cfg = PARAMS["logistic"]
    return stats.logistic(loc=cfg["loc"], scale=cfg["scale"]).rvs(size=size, random_state=rng)


def triangular_sampler(rng: np.random.Generator, size: int) -> np.ndarray:
    cfg = PARAMS["triangular"]
    dist = stats.triang(c=cfg["c"], loc=cfg["loc"], scale=cfg["scale"])
    return dist.rvs(size=size, random_state=rng)


def gamma_sampler(rng: np.random.Generator, size: int) -> np.ndarray:
    """Right-skewed gamma shifted to zero mean."""
    cfg = PARAMS["gamma"]
    a, scale = cfg["a"], cfg["scale"]
    return stats.gamma(a=a, loc=-a * scale, scale=scale).rvs(size=size, random_state=rng)


def ring_sampler(rng: np.random.Generator, size: int) -> np.ndarray:
    """Bimodal values around +-radius; a hollow shell in radial mode."""
    cfg = PARAMS["ring"]
    magnitude = stats.norm(loc=cfg["radius"], scale=cfg["width"]).rvs(size=size, random_state=rng)
    sign = rng.choice(np.array([-1.0, 1.0]), size=size)
    return sign * magnitude


def random_directions(rng: np.random.Generator, n_points: int, n_dims: int) -> np.ndarray:
    """Unit vectors uniformly distributed on the (n_dims - 1)-sphere."""
    vec = rng.normal(0, 1, size=(n_points, n_dims))
    norms = np.linalg.norm(vec, axis=1, keepdims=True)
    # a zero draw has probability zero, but keep the row finite anyway
    norms[norms == 0] = 1.0
    return vec / norms
