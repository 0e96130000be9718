"""
Quality control and preprocessing functions.
"""

import numpy as np
import scanpy as sc
import scipy.sparse as sp
from anndata import AnnData


def calculate_qc_metrics(adata: AnnData, mt_prefix: str = "MT-") -> None:
    """
    Calculate basic quality control metrics.

    Parameters
    ----------
    adata : AnnData
        Annotated data matrix.
    mt_prefix : str, optional
        Prefix for mitochondrial genes, by default "MT-"
    """
    adata.var["mt"] = adata.var_names.str.startswith(mt_prefix)
    sc.pp.calculate_qc_metrics(
        adata, qc_vars=["mt"], percent_top=None, log1p=False, inplace=True
    )


def filter_cells_and_genes(
    adata: AnnData,
    min_genes: int = 200,
    min_cells: int = 3,
    max_pct_mt: float = 20.0
) -> None:
    """
    Filter out low quality cells and rare genes.

    Parameters
    ----------
    adata : AnnData
        Annotated data matrix.
    min_genes : int, optional
        Minimum number of expressed genes for a cell to pass filtering, by default 200
    min_cells : int, optional
        Minimum number of cells expressing a gene for it to pass filtering, by default 3
    max_pct_mt : float, optional
        Maximum allowed percentage of mitochondrial counts, by default 20.0
    """
    sc.pp.filter_cells(adata, min_genes=min_genes)
    sc.pp.filter_genes(adata, min_cells=min_cells)

    # Filter by mitochondrial fraction if calculated
    if "pct_counts_mt" in adata.obs.columns:
        adata._inplace_subset_obs(adata.obs["pct_counts_mt"] < max_pct_mt)


def normalize_and_log(adata: AnnData, target_sum: float = 1e4) -> None:
    """
    Total-count normalize (library-size correct) the data matrix to 10,000 reads per cell,
    so that counts become comparable among cells, and then logarithmize the data.
    """
    sc.pp.normalize_total(adata, target_sum=target_sum)
    sc.pp.log1p(adata)


def filter_genes_by_detection(
    adata: AnnData,
    min_fraction: float = 0.05,
    max_fraction: float = 1.0,
    layer: str = None
) -> None:
    """
    Keep genes detected (count > 0) in a fraction of cells between
    ``min_fraction`` and ``max_fraction`` (both inclusive). Operates in place.
    """
    if not 0.0 <= min_fraction <= max_fraction <= 1.0:
        raise ValueError(
            f"Need 0 <= min_fraction <= max_fraction <= 1, got {min_fraction} and {max_fraction}."
        )

    X = adata.layers[layer] if layer is not None else adata.X
    if sp.issparse(X):
        detected = np.asarray((X > 0).mean(axis=0)).ravel()
    else:
        detected = np.asarray(X > 0).mean(axis=0)

    keep = (detected >= min_fraction) & (detected <= max_fraction)
    if not keep.any():
        raise ValueError(
            f"No genes are detected in between {min_fraction:.1%} and {max_fraction:.1%} of cells."
        )

    print(f"Keeping {int(keep.sum())}/{adata.n_vars} genes detected in "
          f"{min_fraction:.1%}-{max_fraction:.1%} of cells.")
    adata._inplace_subset_var(keep)
