"""
TF-IDF normalization of count matrices.

Cells are treated as documents and genes as terms: the term frequency is the
gene's share of the cell's counts, and the inverse document frequency
down-weights genes detected in most cells.
"""

import numpy as np
import scipy.sparse as sp
from anndata import AnnData
from sklearn.feature_extraction.text import TfidfTransformer


def term_frequency(X):
    """Divide each row (cell) by its total counts."""
    totals = np.asarray(X.sum(axis=1)).ravel()
    if np.any(totals <= 0):
        n_empty = int((totals <= 0).sum())
        raise ValueError(f"{n_empty} cells have zero total counts. Filter them before TF-IDF.")

    if sp.issparse(X):
        return sp.diags(1.0 / totals) @ sp.csr_matrix(X, dtype=np.float64)
    return np.asarray(X, dtype=np.float64) / totals[:, None]


def tfidf_normalize(
    adata: AnnData,
    layer: str = None,
    key_added: str = "tfidf",
    l2_norm: bool = True,
    smooth_idf: bool = True
) -> AnnData:
    """
    TF-IDF normalize raw counts and store the result in ``adata.layers[key_added]``.

    Parameters
    ----------
    adata : AnnData
        Annotated data matrix with raw (non-negative) counts.
    layer : str, optional
        Layer holding the counts. Uses ``adata.X`` when None.
    key_added : str
        Layer to write the normalized matrix to.
    l2_norm : bool
        Scale every cell to unit L2 norm after weighting.
    smooth_idf : bool
        Add one to document frequencies, as if an extra cell contained every gene.

    Returns
    -------
    AnnData
        The same object, with the new layer and ``uns['tfidf']`` holding the IDF weights.
    """
    X = adata.layers[layer] if layer is not None else adata.X
    min_value = X.min() if sp.issparse(X) else np.min(X)
    if min_value < 0:
        raise ValueError("TF-IDF requires non-negative counts. Pass the raw count layer.")

    tf = term_frequency(X)
    transformer = TfidfTransformer(norm="l2" if l2_norm else None, smooth_idf=smooth_idf)
    weighted = transformer.fit_transform(tf)

    if sp.issparse(X):
        adata.layers[key_added] = sp.csr_matrix(weighted)
    else:
        adata.layers[key_added] = weighted.toarray() if sp.issparse(weighted) else np.asarray(weighted)
    adata.uns["tfidf"] = {
        "idf": transformer.idf_,
        "layer": layer if layer is not None else "X",
        "l2_norm": l2_norm,
    }
    return adata
