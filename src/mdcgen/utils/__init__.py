from .metrics import g_indices, overlap_indices, silhouette_index

__all__ = [
    "g_indices",
    "overlap_indices",
    "silhouette_index",
]
