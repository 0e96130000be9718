from .pca_umap import run_pca_and_neighbors, run_umap_and_cluster
from .variable import find_variable_pathways
from .markers import find_pathway_markers, top_marker_pathways
from .pseudobulk import make_pseudobulk

__all__ = [
    "run_pca_and_neighbors",
    "run_umap_and_cluster",
    "find_variable_pathways",
    "find_pathway_markers",
    "top_marker_pathways",
    "make_pseudobulk",
]
