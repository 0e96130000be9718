from .nmf import run_nmf, extract_nmf_markers
from .alternative import run_kmeans, run_leiden

__all__ = [
    "run_nmf",
    "extract_nmf_markers",
    "run_kmeans",
    "run_leiden"
]
