"""
Clustering of cells on pathway activity or any embedding.
"""

import scanpy as sc
from anndata import AnnData
import pandas as pd
from sklearn.cluster import KMeans


def run_kmeans(adata: AnnData, n_clusters: int = 5, use_rep: str = 'X_pca', random_state: int = 42) -> AnnData:
    """Run K-Means clustering."""
    print(f"Running K-Means (k={n_clusters})...")
    X = adata.obsm[use_rep] if use_rep in adata.obsm else adata.X
    model = KMeans(n_clusters=n_clusters, random_state=random_state, n_init=10)
    adata.obs['kmeans'] = pd.Categorical(model.fit_predict(X).astype(str))
    return adata


def run_leiden(adata: AnnData, resolution: float = 1.0, random_state: int = 42, **kwargs) -> AnnData:
    """
    Run conventional Leiden clustering via Scanpy.
    """
    if 'neighbors' not in adata.uns:
        sc.pp.neighbors(adata, random_state=random_state)
    sc.tl.leiden(adata, resolution=resolution, random_state=random_state, **kwargs)
    return adata
