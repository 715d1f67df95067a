from dataclasses import fields, is_dataclass
from typing import Any

import numpy as np


def compute_cluster_sizes(total: int, k: int) -> list[int]:
    """Evenly distribute total samples into k parts (first remainder buckets get +1)."""
    base = total // k
    rem = total % k
    return [base + (1 if i < rem else 0) for i in range(k)]


def to_jsonable(obj: Any):
    """Best-effort conversion of configs and results to JSON-safe structures."""
    if obj is None:
        return None
    if isinstance(obj, bool | int | str):
        return obj
    if isinstance(obj, float):
        # NaN/inf are not valid JSON
        return obj if np.isfinite(obj) else None
    # NumPy
    if isinstance(obj, np.ndarray):
        return to_jsonable(obj.tolist())
    if isinstance(obj, np.generic):
        return to_jsonable(obj.item())
    if isinstance(obj, list | tuple):
        return [to_jsonable(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if is_dataclass(obj) and not isinstance(obj, type):
        return {
            "type": type(obj).__name__,
            **{f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)},
        }
    if callable(obj):
        return getattr(obj, "__name__", repr(obj))
    return str(obj)
