"""
NMF (Non-negative Matrix Factorization) program discovery.
"""

import warnings

import numpy as np
import pandas as pd
import scanpy as sc
import scipy.sparse as sp
from anndata import AnnData
from sklearn.decomposition import NMF

from ..preprocessing.tfidf import tfidf_normalize

NORMALIZATIONS = ("tfidf", "cp10k", "none")


def _nmf_input(adata: AnnData, normalization: str, layer: str = None):
    if normalization == "tfidf":
        tfidf_normalize(adata, layer=layer, key_added="tfidf")
        return adata.layers["tfidf"]

    X = adata.layers[layer] if layer is not None else adata.X
    if normalization == "none":
        return X

    # cp10k on a throwaway copy so adata.X keeps its counts
    tmp = AnnData(X=X.copy())
    sc.pp.normalize_total(tmp, target_sum=1e4)
    sc.pp.log1p(tmp)
    return tmp.X


def run_nmf(
    adata: AnnData,
    n_components: int = 100,
    normalization: str = "tfidf",
    layer: str = None,
    random_state: int = 42,
    max_iter: int = 500,
    verbose: bool = True
) -> AnnData:
    """
    Run Non-negative Matrix Factorization (NMF) on the data.

    Parameters
    ----------
    adata : AnnData
        Annotated data matrix with raw counts in ``X`` or ``layer``.
    n_components : int
        Number of NMF factors (programs) to compute. Clipped to min(n_obs, n_vars).
    normalization : str
        'tfidf' (default), 'cp10k' (library-size + log1p) or 'none'.
    layer : str, optional
        Layer holding raw counts.
    random_state : int
        Random seed for stability.
    max_iter : int
        Maximum number of multiplicative/coordinate-descent iterations.
    verbose : bool
        Print a progress line.

    Returns
    -------
    AnnData
        Updated AnnData object with 'X_nmf' in obsm and 'nmf_features' in varm.
    """
    if normalization not in NORMALIZATIONS:
        raise ValueError(f"normalization must be one of {NORMALIZATIONS}, got '{normalization}'.")

    k = min(n_components, adata.n_obs, adata.n_vars)
    if k < n_components:
        warnings.warn(f"n_components={n_components} exceeds the data shape; using {k}.")

    X = _nmf_input(adata, normalization, layer)
    min_value = X.min() if sp.issparse(X) else np.min(X)
    if min_value < 0:
        raise ValueError("NMF requires non-negative data. Use raw counts or a non-negative layer.")

    if verbose:
        print(f"[NMF] Running NMF with {k} components on {normalization} data...")
    model = NMF(n_components=k, init='nndsvda', random_state=random_state, max_iter=max_iter)

    W = model.fit_transform(X)  # Cell loadings
    H = model.components_       # Gene loadings

    adata.obsm['X_nmf'] = W
    adata.varm['nmf_features'] = H.T

    # Assign soft-cluster based on max NMF loading
    adata.obs['nmf_cluster'] = pd.Categorical([f"NMF_{i}" for i in W.argmax(axis=1)])
    adata.uns['nmf'] = {
        "n_components": k,
        "normalization": normalization,
        "layer": layer if layer is not None else "X",
        "random_state": random_state,
        "reconstruction_err": float(model.reconstruction_err_),
    }
    return adata


def extract_nmf_markers(adata: AnnData, top_n: int = 50) -> pd.DataFrame:
    """
    Extract the top 'weighted' feature genes for each NMF program.

    Parameters
    ----------
    adata : AnnData
        AnnData object containing 'nmf_features' in varm.
    top_n : int
        Number of top genes to retrieve per NMF component.

    Returns
    -------
    pd.DataFrame
        DataFrame of top genes and their weights for each NMF component.
    """
    if 'nmf_features' not in adata.varm:
        raise ValueError("NMF features not found in adata.varm. Run run_nmf first.")

    H_T = np.asarray(adata.varm['nmf_features'])  # Genes x Components
    genes = adata.var_names
    top_n = min(top_n, adata.n_vars)

    results = {}
    for i in range(H_T.shape[1]):
        weights = H_T[:, i]
        top_indices = np.argsort(weights)[::-1][:top_n]

        results[f'NMF_{i}_gene'] = genes[top_indices].values
        results[f'NMF_{i}_weight'] = weights[top_indices]

    return pd.DataFrame(results)
