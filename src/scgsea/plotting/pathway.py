"""
Pathway activity plots: embeddings, dot plots and heatmaps.
"""

import matplotlib.pyplot as plt
import numpy as np
import scanpy as sc
import seaborn as sns
from anndata import AnnData
from typing import Optional, List

from .style import (
    set_style,
    apply_seurat_theme,
    SEURAT_EXPR_CMAP,
    SEURAT_DOTPLOT_CMAP,
    SEURAT_FEATURE_CMAP,
    SEURAT_NES_CMAP,
)


def _check_pathways(adata: AnnData, pathways: List[str]) -> List[str]:
    pathways = [pathways] if isinstance(pathways, str) else list(pathways)
    missing = [p for p in pathways if p not in adata.var_names]
    if missing:
        raise ValueError(f"Pathways not found in the pathway object: {missing}")
    return pathways


def plot_pathway_umap(
    adata: AnnData,
    pathway: str,
    basis: str = "umap",
    cmap: str = SEURAT_EXPR_CMAP,
    title: str = None,
    save_path: str = None
):
    """
    Plot the activity of one pathway on an embedding.

    ``adata`` is the object returned by ``run_scgsea``; it carries the input's
    embeddings, so ``basis`` can be the gene-level UMAP or one computed on pathways.
    """
    if f"X_{basis}" not in adata.obsm:
        raise ValueError(f"Embedding 'X_{basis}' not found. Run UMAP first.")
    _check_pathways(adata, pathway)

    set_style()
    fig = sc.pl.embedding(
        adata,
        basis=basis,
        color=pathway,
        color_map=cmap,
        title=title if title else pathway,
        frameon=False,
        show=False,
        return_fig=True
    )

    if save_path:
        fig.savefig(save_path, bbox_inches='tight', dpi=150)
        plt.close(fig)
    return fig


def dot_plot(
    adata: AnnData,
    pathways: List[str],
    groupby: str,
    cmap: str = SEURAT_DOTPLOT_CMAP,
    standard_scale: Optional[str] = "var",
    save_path: str = None,
    **kwargs
):
    """
    Seurat DotPlot of pathway activity per group.

    Dot size is the fraction of cells with positive activity, colour the
    mean activity (scaled per pathway by default).
    """
    if groupby not in adata.obs.columns:
        raise ValueError(f"Column '{groupby}' not found in adata.obs")
    pathways = _check_pathways(adata, pathways)

    set_style()
    dp = sc.pl.dotplot(
        adata,
        var_names=pathways,
        groupby=groupby,
        cmap=cmap,
        standard_scale=standard_scale,
        show=False,
        return_fig=True,
        **kwargs
    )

    if save_path:
        dp.savefig(save_path, bbox_inches='tight', dpi=150)
        plt.close("all")
    return dp


def heatmap(
    adata: AnnData,
    pathways: List[str],
    groupby: str,
    cmap: str = SEURAT_FEATURE_CMAP,
    standard_scale: Optional[str] = "var",
    save_path: str = None,
    **kwargs
):
    """
    Seurat DoHeatmap: cells (grouped) x pathways.

    Returns the dict of axes produced by ``sc.pl.heatmap``.
    """
    if groupby not in adata.obs.columns:
        raise ValueError(f"Column '{groupby}' not found in adata.obs")
    pathways = _check_pathways(adata, pathways)

    set_style()
    axes = sc.pl.heatmap(
        adata,
        var_names=pathways,
        groupby=groupby,
        cmap=cmap,
        standard_scale=standard_scale,
        swap_axes=True,
        show=False,
        **kwargs
    )

    if save_path:
        fig = plt.gcf()
        fig.savefig(save_path, bbox_inches='tight', dpi=150)
        plt.close(fig)
    return axes


def plot_nes_heatmap(
    adata: AnnData,
    top_n: int = 30,
    cmap: str = SEURAT_NES_CMAP,
    save_path: str = None
):
    """
    Heatmap of significant NES (pathways x NMF programs) from ``uns['scgsea']``.

    Pathways are ordered by their best NES; only the ``top_n`` strongest are shown.
    """
    if "scgsea" not in adata.uns:
        raise ValueError("scGSEA results not found. Run `run_scgsea` first.")

    nes = adata.uns["scgsea"]["nes_significant"]
    order = nes.max(axis=1).sort_values(ascending=False).index[:top_n]
    nes = nes.loc[order]
    # programs with no significant pathway carry no information here
    nes = nes.loc[:, (nes > 0).any(axis=0)]

    set_style()
    height = max(3.0, 0.25 * len(nes) + 1.5)
    width = max(4.0, 0.35 * nes.shape[1] + 4.0)
    fig, ax = plt.subplots(figsize=(width, height))
    sns.heatmap(
        nes.replace(0.0, np.nan),
        cmap=cmap,
        ax=ax,
        linewidths=0.3,
        linecolor="#EEEEEE",
        cbar_kws={"label": "NES"},
    )
    ax.set_xlabel("NMF program")
    ax.set_ylabel("")
    apply_seurat_theme(ax, spines="none")

    if save_path:
        fig.savefig(save_path, bbox_inches='tight', dpi=150)
        plt.close(fig)
    return fig
