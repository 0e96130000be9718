"""
Single-cell gene set enrichment through NMF programs.

Counts are TF-IDF normalized and factorized into gene programs. Each
program's gene loadings are tested with pre-ranked GSEA, and the
significant normalized enrichment scores are projected back onto cells
through the program usages, giving a cells x pathways activity matrix.
"""

import warnings

import gseapy as gp
import numpy as np
import pandas as pd
import scipy.sparse as sp
from anndata import AnnData

from ..clustering.nmf import run_nmf
from .genesets import get_gene_sets, filter_gene_sets

GENE_IDS = ("symbol", "ensembl")
SPECIES = ("human", "mouse")
RESCALE = ("none", "by_gs", "by_cell")
NMF_NORMALIZATIONS = ("tfidf", "cp10k")

SCORE_COLUMNS = {"ES": "es", "NES": "nes", "NOM p-val": "pval", "FDR q-val": "fdr"}


def _check_choice(name: str, value, choices) -> None:
    if value not in choices:
        raise ValueError(f"{name} must be one of {choices}, got '{value}'.")


def _gene_symbols(adata: AnnData, gene_id: str, symbol_key: str) -> pd.Index:
    """Gene symbols aligned with adata.var_names."""
    if gene_id == "symbol":
        return pd.Index(adata.var_names)
    if symbol_key not in adata.var.columns:
        raise ValueError(
            f"gene_id='ensembl' needs gene symbols in adata.var['{symbol_key}']. "
            "Pass symbol_key to point at the right column."
        )
    return pd.Index(adata.var[symbol_key])


def _nmf_reusable(adata: AnnData, n_components: int, normalization: str, layer: str, random_state: int) -> bool:
    info = adata.uns.get("nmf")
    if info is None or "X_nmf" not in adata.obsm or "nmf_features" not in adata.varm:
        return False
    k = min(n_components, adata.n_obs, adata.n_vars)
    return (
        info.get("normalization") == normalization
        and int(info.get("n_components")) == k
        and info.get("layer", "X") == (layer if layer is not None else "X")
        and info.get("random_state") == random_state
    )


def score_programs(
    ranked: pd.Series,
    gene_sets: dict,
    min_size: int = 15,
    max_size: int = 500,
    permutation_num: int = 1000,
    weight: float = 0.0,
    threads: int = 1,
    seed: int = 42
) -> pd.DataFrame:
    """
    Run pre-ranked GSEA on one program's gene loadings.

    Parameters
    ----------
    ranked : pd.Series
        Gene loadings indexed by gene symbol.
    gene_sets : dict
        {gene_set: [genes]}
    weight : float
        GSEA weighting exponent; 0 gives the classic unweighted statistic.

    Returns
    -------
    pd.DataFrame
        Indexed by gene set, with float columns 'ES', 'NES', 'NOM p-val', 'FDR q-val'.
    """
    ranked = ranked.sort_values(ascending=False)
    ranked.index.name = "gene"
    ranked.name = "loading"

    pre = gp.prerank(
        rnk=ranked,
        gene_sets=gene_sets,
        outdir=None,
        min_size=min_size,
        max_size=max_size,
        permutation_num=permutation_num,
        weight=weight,
        threads=threads,
        seed=seed,
        no_plot=True,
        verbose=False,
    )

    res = pre.res2d
    if "Term" in res.columns:
        res = res.set_index("Term")
    return res[list(SCORE_COLUMNS)].apply(pd.to_numeric, errors="coerce")


def compute_pathway_activity(W, nes: pd.DataFrame, fdr: pd.DataFrame, fdr_threshold: float = 0.05):
    """
    Project significant enrichment scores onto cells.

    Parameters
    ----------
    W : array-like
        Program usage per cell (cells x programs).
    nes, fdr : pd.DataFrame
        Normalized enrichment scores and FDR q-values (pathways x programs).
    fdr_threshold : float
        (pathway, program) pairs with FDR above this, or with NES <= 0, contribute nothing.

    Returns
    -------
    activity : np.ndarray
        Cells x kept pathways.
    nes_sig : pd.DataFrame
        NES with non-significant entries set to 0, restricted to pathways
        significant in at least one program.
    """
    significant = (fdr <= fdr_threshold) & (nes > 0)
    nes_sig = nes.where(significant, 0.0)
    nes_sig = nes_sig.loc[significant.any(axis=1)]

    W = W.toarray() if sp.issparse(W) else np.asarray(W)
    activity = W @ nes_sig.to_numpy().T
    return activity, nes_sig


def _zscore(X, axis):
    mean = X.mean(axis=axis, keepdims=True)
    std = X.std(axis=axis, keepdims=True)
    centered = X - mean
    return np.divide(centered, std, out=np.zeros_like(centered), where=std > 0)


def rescale_activity(X, how: str = "none"):
    """
    Rescale an activity matrix: 'by_gs' z-scores each pathway (column),
    'by_cell' z-scores each cell (row). Constant rows/columns become 0.
    """
    _check_choice("rescale", how, RESCALE)
    X = np.asarray(X, dtype=np.float64)
    if how == "by_gs":
        return _zscore(X, axis=0)
    if how == "by_cell":
        return _zscore(X, axis=1)
    return X


def run_scgsea(
    adata: AnnData,
    gene_id: str = "symbol",
    species: str = "human",
    category: str = "H",
    subcategory: str = None,
    gene_sets=None,
    n_components: int = 100,
    normalization: str = "tfidf",
    layer: str = None,
    min_size: int = 15,
    max_size: int = 500,
    permutation_num: int = 1000,
    fdr_threshold: float = 0.05,
    rescale: str = "none",
    weight: float = 0.0,
    threads: int = 1,
    symbol_key: str = "gene_symbols",
    reuse_nmf: bool = True,
    random_state: int = 42,
    verbose: bool = True
) -> AnnData:
    """
    Score pathway activity in every cell.

    Parameters
    ----------
    adata : AnnData
        Cells x genes with raw counts in ``X`` or ``layer``. NMF results are
        written back to it (``obsm['X_nmf']``, ``varm['nmf_features']``).
    gene_id : str
        'symbol' if var_names are gene symbols, 'ensembl' if they are Ensembl
        IDs (symbols are then read from ``adata.var[symbol_key]``).
    species : str
        'human' or 'mouse'.
    category, subcategory : str
        MSigDB collection, msigdbr style (e.g. 'C2' and 'CP:KEGG').
    gene_sets : dict or str, optional
        Custom collection; see :func:`scgsea.pathway.get_gene_sets`.
    n_components : int
        Number of NMF programs.
    normalization : str
        'tfidf' or 'cp10k', the matrix NMF is run on.
    min_size, max_size : int
        Gene set size bounds after intersecting with the data.
    permutation_num : int
        GSEA permutations per program.
    fdr_threshold : float
        FDR cut-off for a (pathway, program) pair to count.
    rescale : str
        'none', 'by_gs' (z-score per pathway) or 'by_cell' (z-score per cell).
    weight : float
        GSEA weighting exponent (0 = classic).
    threads : int
        Threads passed to GSEApy.
    reuse_nmf : bool
        Reuse NMF results already stored in ``adata`` when they match.

    Returns
    -------
    AnnData
        Cells x pathways activity, with the input's obs and obsm, per-pathway
        statistics in var and the full enrichment tables in ``uns['scgsea']``.
    """
    _check_choice("gene_id", gene_id, GENE_IDS)
    _check_choice("species", species, SPECIES)
    _check_choice("rescale", rescale, RESCALE)
    _check_choice("normalization", normalization, NMF_NORMALIZATIONS)
    if not 0 < fdr_threshold <= 1:
        raise ValueError(f"fdr_threshold must be in (0, 1], got {fdr_threshold}.")

    symbols = _gene_symbols(adata, gene_id, symbol_key)
    has_symbol = ~symbols.isna()

    collection = get_gene_sets(species, category, subcategory, gene_sets=gene_sets, verbose=verbose)
    collection = filter_gene_sets(collection, symbols[has_symbol], min_size=min_size, max_size=max_size,
                                  verbose=verbose)
    if not collection:
        raise ValueError(
            f"No gene set has between {min_size} and {max_size} genes in the data. "
            "Check gene_id/species or relax min_size/max_size."
        )

    if reuse_nmf and _nmf_reusable(adata, n_components, normalization, layer, random_state):
        if verbose:
            print(f"[scGSEA] Reusing {adata.uns['nmf']['n_components']} stored NMF programs.")
    else:
        run_nmf(adata, n_components=n_components, normalization=normalization,
                layer=layer, random_state=random_state, verbose=verbose)

    W = np.asarray(adata.obsm["X_nmf"])
    H = np.asarray(adata.varm["nmf_features"])
    programs = [f"NMF_{i}" for i in range(H.shape[1])]

    # Collapse duplicated symbols (e.g. several Ensembl IDs) to their strongest loading
    loadings = pd.DataFrame(H[np.asarray(has_symbol)], index=symbols[has_symbol].astype(str), columns=programs)
    loadings = loadings.groupby(level=0).max()

    tables = {
        key: pd.DataFrame(np.nan, index=list(collection), columns=programs)
        for key in SCORE_COLUMNS.values()
    }
    for i, program in enumerate(programs):
        ranked = loadings[program]
        if not (ranked > 0).any():
            warnings.warn(f"{program} has no positive loadings; skipping it.")
            continue
        if verbose:
            print(f"[scGSEA] Running GSEA on {program} ({i + 1}/{len(programs)})...")

        res = score_programs(ranked, collection, min_size=min_size, max_size=max_size,
                             permutation_num=permutation_num, weight=weight,
                             threads=threads, seed=random_state)
        terms = res.index.intersection(tables["nes"].index)
        for column, key in SCORE_COLUMNS.items():
            tables[key].loc[terms, program] = res.loc[terms, column].values

    activity, nes_sig = compute_pathway_activity(W, tables["nes"], tables["fdr"], fdr_threshold)
    if nes_sig.empty:
        raise ValueError(
            f"No pathway is significant (FDR <= {fdr_threshold}) in any NMF program. "
            "Try a higher fdr_threshold, more permutations or another collection."
        )
    if verbose:
        print(f"[scGSEA] {len(nes_sig)}/{len(collection)} pathways are significant in at least one program.")

    kept = nes_sig.index
    var = pd.DataFrame(
        {
            "n_genes": [len(collection[p]) for p in kept],
            "max_nes": nes_sig.max(axis=1).values,
            "min_fdr": tables["fdr"].loc[kept].min(axis=1).values,
            "n_programs": (nes_sig > 0).sum(axis=1).values,
        },
        index=kept,
    )

    pdata = AnnData(
        X=rescale_activity(activity, rescale),
        obs=adata.obs.copy(),
        var=var,
        obsm={key: value.copy() for key, value in adata.obsm.items()},
    )

    params = {
        "gene_id": gene_id, "species": species, "category": category,
        "subcategory": subcategory,
        "gene_sets": gene_sets if isinstance(gene_sets, str) else None,
        "n_components": len(programs), "normalization": normalization,
        "layer": layer,
        "min_size": min_size, "max_size": max_size, "permutation_num": permutation_num,
        "fdr_threshold": fdr_threshold, "rescale": rescale, "weight": weight,
        "random_state": random_state,
    }
    pdata.uns["scgsea"] = {
        # h5ad cannot store None
        "params": {k: v for k, v in params.items() if v is not None},
        "nes_significant": nes_sig,
        "gene_sets": {p: list(collection[p]) for p in kept},
        **tables,
    }
    return pdata


def run_ssgsea(
    adata: AnnData,
    gene_sets: dict,
    layer: str = None,
    min_size: int = 15,
    max_size: int = 500,
    threads: int = 1,
    key_added: str = "X_ssgsea",
    verbose: bool = True
) -> pd.DataFrame:
    """
    Run single-sample GSEA (ssGSEA) on every cell with GSEApy.

    Scores each cell directly rather than through NMF programs; useful as a
    per-cell baseline next to :func:`run_scgsea`. Slow beyond a few thousand cells.

    Returns
    -------
    pd.DataFrame
        Cells x gene sets NES, also stored in ``adata.obsm[key_added]``.
    """
    X = adata.layers[layer] if layer is not None else adata.X
    if sp.issparse(X):
        X = X.toarray()
    # GSEApy ssGSEA expects a DataFrame of Genes x Samples (Cells)
    df = pd.DataFrame(np.asarray(X).T, index=adata.var_names, columns=adata.obs_names)

    if adata.n_obs > 5000:
        warnings.warn("ssGSEA on more than 5000 cells might be slow.")

    if verbose:
        print(f"[ssGSEA] Running ssGSEA with GSEApy on {adata.n_obs} cells...")
    ss = gp.ssgsea(data=df, gene_sets=gene_sets, outdir=None, sample_norm_method='rank',
                   min_size=min_size, max_size=max_size, threads=threads,
                   no_plot=True, verbose=False)

    nes = ss.res2d.pivot(index="Name", columns="Term", values="NES").astype(float)
    nes = nes.reindex(adata.obs_names)
    adata.obsm[key_added] = nes
    return nes


def run_go_enrichment(
    gene_list: list,
    background=20000,
    gene_sets: str = 'GO_Biological_Process_2021',
    species: str = "human"
) -> pd.DataFrame:
    """
    Run Over-Representation Analysis with Enrichr on a list of genes,
    e.g. the top loadings of one NMF program.

    Parameters
    ----------
    gene_list : list
        List of gene symbols.
    background : int or list
        Background size or list of background genes.
    gene_sets : str
        Enrichr library name.
    species : str
        'human' or 'mouse'.
    """
    _check_choice("species", species, SPECIES)
    enr = gp.enrichr(gene_list=gene_list,
                     gene_sets=gene_sets,
                     organism=species.capitalize(),
                     background=background,
                     outdir=None)
    return enr.results
