"""
Data input/output functions for CellRanger, Seurat and Scanpy formatted data,
plus export of scGSEA result tables.
"""

import os
import warnings

import pandas as pd
import scanpy as sc
import scipy.sparse as sp
from anndata import AnnData


def read_10x(path: str, is_h5: bool = False, var_names: str = "gene_symbols") -> AnnData:
    """
    Read output from 10x Genomics CellRanger.

    Parameters
    ----------
    path : str
        Path to the 10x output directory (containing matrix.mtx, features.tsv, barcodes.tsv)
        or path to an hdf5 file (filtered_feature_bc_matrix.h5).
    is_h5 : bool
        If True, reads an h5 file instead of an mtx directory.
    var_names : str
        'gene_symbols' or 'gene_ids'. With 'gene_ids' the symbols stay in
        ``var['gene_symbols']``; use ``run_scgsea(gene_id='ensembl')``.
    """
    print(f"Reading 10x CellRanger data from: {path}")
    if is_h5:
        adata = sc.read_10x_h5(path)
        if var_names == "gene_ids":
            adata.var["gene_symbols"] = adata.var_names
            adata.var_names = adata.var["gene_ids"].astype(str)
    else:
        adata = sc.read_10x_mtx(path, var_names=var_names, cache=True)
    adata.var_names_make_unique()
    return adata


def read_h5ad(path: str) -> AnnData:
    """
    Read standard Scanpy h5ad formatted data.
    """
    print(f"Reading Scanpy/AnnData file: {path}")
    return sc.read_h5ad(path)


def read_seurat(path: str) -> AnnData:
    """
    Read a Seurat object.
    The object has to be exported from R as .h5ad (SeuratDisk) or loom first.
    """
    print(f"Reading Seurat data from: {path}")

    if path.endswith(".h5seurat") or path.endswith(".h5Seurat"):
        raise NotImplementedError(
            "Direct reading of .h5Seurat is not supported. "
            "Please export your Seurat object to .h5ad using SeuratDisk in R: "
            "SaveH5Seurat(seurat_obj, filename='obj.h5Seurat'); Convert('obj.h5Seurat', dest='h5ad')"
        )
    elif path.endswith(".rds"):
        raise NotImplementedError(
            "Cannot read .rds files directly in Python. Please export from Seurat to .h5ad format first."
        )

    warnings.warn("Assuming generic format. For best results, save Seurat objects as .h5ad in R.")
    return sc.read(path)


def write_scgsea_tables(adata: AnnData, outdir: str) -> dict:
    """
    Write the pathway activity matrix and the NES/FDR tables of a ``run_scgsea`` result as CSV.

    Returns
    -------
    dict
        {table name: file path}
    """
    if "scgsea" not in adata.uns:
        raise ValueError("scGSEA results not found. Run `run_scgsea` first.")
    os.makedirs(outdir, exist_ok=True)

    X = adata.X.toarray() if sp.issparse(adata.X) else adata.X
    tables = {
        "activity": pd.DataFrame(X, index=adata.obs_names, columns=adata.var_names),
        "pathways": adata.var,
        "nes": adata.uns["scgsea"]["nes"],
        "fdr": adata.uns["scgsea"]["fdr"],
    }

    paths = {}
    for name, df in tables.items():
        paths[name] = os.path.join(outdir, f"scgsea_{name}.csv")
        df.to_csv(paths[name])
    print(f"Saved {len(paths)} scGSEA tables -> {outdir}")
    return paths
