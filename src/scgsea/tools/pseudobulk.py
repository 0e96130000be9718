"""
Pseudobulk and aggregation methods.
"""

from anndata import AnnData
import pandas as pd
import numpy as np


def make_pseudobulk(adata: AnnData, groupby: str, mode: str = "sum") -> AnnData:
    """
    Aggregate single-cell profiles into one profile per group.

    On a pathway object with ``mode='mean'`` this gives the average pathway
    activity of each cluster.

    Parameters
    ----------
    adata : AnnData
        Annotated data matrix.
    groupby : str
        Column in `adata.obs` to group cells by (e.g., 'leiden_0.5' or 'sample').
    mode : str
        Aggregation mode: 'sum' or 'mean'.

    Returns
    -------
    AnnData
        A new AnnData object where rows are the unique groups in `groupby`,
        with the number of cells per group in ``obs['n_cells']``.
    """
    if groupby not in adata.obs.columns:
        raise ValueError(f"Column '{groupby}' not found in adata.obs")
    if mode not in ("sum", "mean"):
        raise ValueError("Mode must be 'sum' or 'mean'")

    groups = adata.obs[groupby].astype("category").cat.categories

    X = adata.X
    grouped_X = []
    kept, sizes = [], []

    for group in groups:
        idx = (adata.obs[groupby] == group).values
        if not np.any(idx):
            continue

        group_data = X[idx, :]
        res = group_data.sum(axis=0) if mode == "sum" else group_data.mean(axis=0)

        # Sparse reductions return np.matrix
        grouped_X.append(np.asarray(res).ravel())
        kept.append(str(group))
        sizes.append(int(idx.sum()))

    pb_adata = AnnData(X=np.vstack(grouped_X), var=adata.var.copy())
    pb_adata.obs_names = kept
    pb_adata.obs[groupby] = pd.Categorical(kept)
    pb_adata.obs["n_cells"] = sizes

    print(f"Created pseudobulk AnnData with {pb_adata.n_obs} {groupby} groups across {pb_adata.n_vars} features.")
    return pb_adata
