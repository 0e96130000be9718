"""
Embedding plots in the style of Seurat's DimPlot and FeaturePlot.
"""

import scanpy as sc
import matplotlib.pyplot as plt
from anndata import AnnData
from typing import Optional, Union, List

from .style import set_style, discrete_colors, SEURAT_EXPR_CMAP


def dim_plot(
    adata: AnnData,
    color: Union[str, List[str]],
    basis: str = "umap",
    palette: str = "default",
    title: Optional[str] = None,
    show: bool = True,
    save: Optional[str] = None,
    **kwargs
) -> Optional[plt.Axes]:
    """
    A customized wrapper around sc.pl.embedding to simulate SeuratExtend DimPlot.

    Parameters
    ----------
    adata : AnnData
        Annotated data matrix.
    color : str or list of str
        Keys for annotations of observations/cells (e.g. 'leiden_0.5').
    basis : str, optional
        String indicating the basis to use., by default "umap"
    palette : str, optional
        Color palette to use, by default "default"

    Returns
    -------
    Axes or None
        Returns axes, list of axes, or None if `show` is True.
    """
    set_style()

    colors = [color] if isinstance(color, str) else color
    for c in colors:
        if c in adata.obs.columns and adata.obs[c].dtype.name in ['category', 'object']:
            adata.obs[c] = adata.obs[c].astype("category")
            n_cats = len(adata.obs[c].cat.categories)
            adata.uns[f"{c}_colors"] = discrete_colors(n_cats, palette)

    ax = sc.pl.embedding(
        adata,
        basis=basis,
        color=color,
        frameon=False,
        title=title if title else color,
        show=show,
        save=save,
        **kwargs
    )
    return ax


def feature_plot(
    adata: AnnData,
    features: Union[str, List[str]],
    basis: str = "umap",
    cmap: str = SEURAT_EXPR_CMAP,
    show: bool = True,
    save: Optional[str] = None,
    **kwargs
) -> Optional[plt.Axes]:
    """
    A customized wrapper for plotting feature values (similar to Seurat's FeaturePlot).
    On a pathway object the features are pathway names.
    """
    set_style()

    ax = sc.pl.embedding(
        adata,
        basis=basis,
        color=features,
        color_map=cmap,
        frameon=False,
        show=show,
        save=save,
        **kwargs
    )
    return ax
