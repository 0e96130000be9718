"""
Marker pathways per cluster.
"""

import scanpy as sc
from anndata import AnnData
import pandas as pd


def find_pathway_markers(
    adata: AnnData,
    groupby: str,
    method: str = "wilcoxon",
    n_top: int = 5,
    key_added: str = "pathway_markers"
) -> pd.DataFrame:
    """
    Rank pathways that distinguish each group of cells from the rest.

    Parameters
    ----------
    adata : AnnData
        Pathway activity object.
    groupby : str
        Column in ``adata.obs`` with the groups (e.g. 'leiden_0.5').
    method : str
        Any test supported by ``sc.tl.rank_genes_groups``.
    n_top : int
        Number of pathways kept per group.

    Returns
    -------
    pd.DataFrame
        Columns 'group', 'names', 'scores', 'logfoldchanges', 'pvals', 'pvals_adj'.
    """
    if groupby not in adata.obs.columns:
        raise ValueError(f"Column '{groupby}' not found in adata.obs")

    adata.obs[groupby] = adata.obs[groupby].astype("category")
    sc.tl.rank_genes_groups(adata, groupby=groupby, method=method, key_added=key_added)
    df = sc.get.rank_genes_groups_df(adata, group=None, key=key_added)

    if "group" not in df.columns:
        # a single comparison comes back without the group column
        df.insert(0, "group", adata.obs[groupby].cat.categories[0])

    top = df.groupby("group", observed=True, sort=False).head(n_top).reset_index(drop=True)
    print(f"Found {top['names'].nunique()} marker pathways across {top['group'].nunique()} groups.")
    return top


def top_marker_pathways(markers: pd.DataFrame, n_top: int = 3) -> list:
    """Unique pathway names from :func:`find_pathway_markers`, best first within each group."""
    ranked = markers.groupby("group", observed=True, sort=False).head(n_top)
    return list(dict.fromkeys(ranked["names"]))
