"""
Basic dimensionality reduction and clustering on pathway (or gene) matrices.
"""

import warnings

import scanpy as sc
from anndata import AnnData


def _n_features(adata: AnnData) -> int:
    if "highly_variable" in adata.var.columns:
        return int(adata.var["highly_variable"].sum())
    return adata.n_vars


def run_pca_and_neighbors(adata: AnnData, n_pcs: int = 50, n_neighbors: int = 30, random_state: int = 42) -> AnnData:
    """
    PCA followed by the kNN graph.

    PCA uses only ``var['highly_variable']`` features when that column exists
    (see :func:`find_variable_pathways`). ``n_pcs`` and ``n_neighbors`` are
    clipped to what the matrix supports, since pathway matrices are often narrow.
    """
    max_pcs = min(_n_features(adata), adata.n_obs) - 1
    if max_pcs < 1:
        raise ValueError("Need at least 2 cells and 2 (variable) features to run PCA.")
    if n_pcs > max_pcs:
        warnings.warn(f"n_pcs={n_pcs} is too large for this matrix; using {max_pcs}.")
        n_pcs = max_pcs
    n_neighbors = min(n_neighbors, adata.n_obs - 1)

    sc.tl.pca(adata, svd_solver='arpack', n_comps=n_pcs, random_state=random_state)
    sc.pp.neighbors(adata, n_neighbors=n_neighbors, n_pcs=n_pcs, random_state=random_state)
    return adata


def run_umap_and_cluster(adata: AnnData, resolution: float = 0.5, random_state: int = 42) -> AnnData:
    sc.tl.umap(adata, random_state=random_state)
    sc.tl.leiden(adata, resolution=resolution, key_added=f'leiden_{resolution}', random_state=random_state)
    return adata
