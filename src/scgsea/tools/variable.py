"""
Variable pathway selection.
"""

import numpy as np
import pandas as pd
import scipy.sparse as sp
from anndata import AnnData

FLAVORS = ("variance", "dispersion")


def find_variable_pathways(adata: AnnData, n_top: int = None, flavor: str = "variance") -> pd.DataFrame:
    """
    Flag the most variable pathways (or genes) across cells.

    Parameters
    ----------
    adata : AnnData
        Pathway activity object, e.g. from :func:`scgsea.pathway.run_scgsea`.
    n_top : int, optional
        Number of features to flag. None flags every feature with non-zero variance.
    flavor : str
        'variance' ranks by variance, 'dispersion' by variance / |mean|.

    Returns
    -------
    pd.DataFrame
        The updated ``adata.var`` with 'means', 'variances', 'dispersions',
        'highly_variable_rank' and 'highly_variable'.
    """
    if flavor not in FLAVORS:
        raise ValueError(f"flavor must be one of {FLAVORS}, got '{flavor}'.")

    X = adata.X.toarray() if sp.issparse(adata.X) else np.asarray(adata.X)
    means = X.mean(axis=0)
    variances = X.var(axis=0, ddof=1) if adata.n_obs > 1 else np.zeros(adata.n_vars)
    abs_means = np.abs(means)
    dispersions = np.divide(variances, abs_means, out=np.zeros_like(variances), where=abs_means > 0)

    metric = variances if flavor == "variance" else dispersions
    candidates = metric > 0
    if n_top is None:
        n_top = int(candidates.sum())
    n_top = min(n_top, adata.n_vars)

    order = np.argsort(-metric, kind="stable")
    rank = np.full(adata.n_vars, np.nan)
    rank[order] = np.arange(adata.n_vars)

    highly_variable = (rank < n_top) & candidates
    adata.var["means"] = means
    adata.var["variances"] = variances
    adata.var["dispersions"] = dispersions
    adata.var["highly_variable_rank"] = np.where(highly_variable, rank, np.nan)
    adata.var["highly_variable"] = highly_variable
    adata.uns["hvg"] = {"flavor": flavor}

    print(f"Flagged {int(highly_variable.sum())}/{adata.n_vars} variable features ({flavor}).")
    return adata.var
