"""
Dataset generation utilities.
"""

import numpy as np
import anndata as ad
import pandas as pd

# Common human marker genes used for the informative features
MARKER_GENES = [
    "CD3D", "CD3E", "CD8A", "CD4", "IL7R", "SELL",
    "GNLY", "NKG7", "MS4A1", "CD79A", "CD14", "LYZ",
    "FCGR3A", "MS4A7", "PPBP", "FCER1A", "CST3",
    "CD8B", "LEF1", "CCR7", "TRAC", "GZMB", "GZMH",
    "PRF1", "CD27", "HLA-DRA", "HLA-DRB1", "CD68", "S100A9",
    "S100A8", "NCAM1", "CD19", "BANK1", "PAX5", "CD38",
    "SDC1", "MKI67", "TOP2A", "PCNA", "AURKA", "BIRC5",
    "EPCAM", "KRT18", "KRT19", "KRT8", "MUC1", "CDH1",
    "VIM", "ACTA2", "COL1A1"
]


def make_mock_scrna(n_cells: int = 2000, n_genes: int = 2500, n_clusters: int = 5, random_state: int = 42) -> ad.AnnData:
    """
    Generate a mock scRNA-seq AnnData object with defined clusters.

    Parameters
    ----------
    n_cells : int
        Number of cells
    n_genes : int
        Number of genes
    n_clusters : int
        Number of synthetic cell types/clusters to simulate

    Returns
    -------
    anndata.AnnData
    """
    from sklearn.datasets import make_blobs
    np.random.seed(random_state)

    # Cluster structure lives in a small number of informative genes, the rest is noise
    n_informative = min(len(MARKER_GENES), n_genes)
    X, y = make_blobs(n_samples=n_cells, n_features=n_informative, centers=n_clusters,
                      cluster_std=1.0, random_state=random_state)
    X = X - X.min() + 0.1

    if n_genes > n_informative:
        noise = np.random.lognormal(mean=0.5, sigma=0.5, size=(n_cells, n_genes - n_informative))
        X = np.hstack([X, noise])

    # Scale to typical library sizes (~5000 mean UMI per cell)
    X = X / X.sum(axis=1, keepdims=True) * np.random.normal(5000, 1000, size=(n_cells, 1))
    X[X < 0] = 0.1
    X_counts = np.random.poisson(X).astype(np.float32)

    gene_names = list(MARKER_GENES[:n_informative])
    gene_names += [f"GENE{i}" for i in range(n_genes - n_informative)]

    obs = pd.DataFrame(
        {"true_cluster": pd.Categorical([str(c) for c in y])},
        index=[f"cell_{i}" for i in range(n_cells)],
    )
    var = pd.DataFrame(index=gene_names)
    return ad.AnnData(X=X_counts, obs=obs, var=var)


def make_mock_pathway_data(
    n_cells: int = 300,
    n_programs: int = 4,
    genes_per_program: int = 40,
    n_background: int = 200,
    n_decoys: int = 4,
    fold_change: float = 8.0,
    random_state: int = 0
):
    """
    Generate counts with planted gene programs and a matching gene set collection.

    Every cell belongs to one program; the program's genes are expressed
    ``fold_change`` times above background in those cells. The returned
    collection holds one 'PROGRAM_<i>' set per program (most of its genes plus
    a few background genes) and 'DECOY_<i>' sets that sample every program and
    the background in proportion to their share of the genes, so no program
    ranks them above chance.

    Returns
    -------
    (anndata.AnnData, dict)
        Counts with ``obs['true_program']``, and {gene_set: [genes]}.
    """
    np.random.seed(random_state)

    program_genes = [[f"P{p}_GENE{j}" for j in range(genes_per_program)] for p in range(n_programs)]
    background = [f"BG_GENE{j}" for j in range(n_background)]
    genes = [g for block in program_genes for g in block] + background

    labels = np.arange(n_cells) % n_programs
    np.random.shuffle(labels)

    rates = np.random.lognormal(mean=0.0, sigma=0.5, size=(n_cells, len(genes)))
    for p in range(n_programs):
        cols = slice(p * genes_per_program, (p + 1) * genes_per_program)
        rates[labels == p, cols] *= fold_change

    depth = np.random.uniform(0.8, 1.2, size=(n_cells, 1))
    X = np.random.poisson(rates * depth).astype(np.float32)

    # Guarantee every cell has counts
    empty = X.sum(axis=1) == 0
    X[empty, 0] = 1

    n_core = max(1, int(genes_per_program * 0.75))
    gene_sets = {}
    for p, block in enumerate(program_genes):
        extra = list(np.random.choice(background, size=5, replace=False))
        gene_sets[f"PROGRAM_{p}"] = block[:n_core] + extra
    blocks = program_genes + [background]
    for d in range(n_decoys):
        decoy = []
        for block in blocks:
            n = min(len(block), int(round(n_core * len(block) / len(genes))))
            decoy += list(np.random.choice(block, size=n, replace=False))
        gene_sets[f"DECOY_{d}"] = decoy

    obs = pd.DataFrame(
        {"true_program": pd.Categorical([f"program_{p}" for p in labels])},
        index=[f"cell_{i}" for i in range(n_cells)],
    )
    adata = ad.AnnData(X=X, obs=obs, var=pd.DataFrame(index=genes))
    return adata, gene_sets
