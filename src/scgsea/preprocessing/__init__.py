from .core import calculate_qc_metrics, filter_cells_and_genes, normalize_and_log, filter_genes_by_detection
from .tfidf import tfidf_normalize, term_frequency

__all__ = [
    "calculate_qc_metrics",
    "filter_cells_and_genes",
    "normalize_and_log",
    "filter_genes_by_detection",
    "tfidf_normalize",
    "term_frequency",
]
