from .base import dim_plot, feature_plot
from .pathway import plot_pathway_umap, dot_plot, heatmap, plot_nes_heatmap

from .style import (
    set_style,
    apply_seurat_theme,
    discrete_colors,
    SEURAT_DISCRETE,
    SEURAT_FEATURE_CMAP,
    SEURAT_EXPR_CMAP,
    SEURAT_NES_CMAP,
    SEURAT_DOTPLOT_CMAP,
)

__all__ = [
    "dim_plot",
    "feature_plot",
    "plot_pathway_umap",
    "dot_plot",
    "heatmap",
    "plot_nes_heatmap",
    "set_style",
    "apply_seurat_theme",
    "discrete_colors",
    "SEURAT_DISCRETE",
    "SEURAT_FEATURE_CMAP",
    "SEURAT_EXPR_CMAP",
    "SEURAT_NES_CMAP",
    "SEURAT_DOTPLOT_CMAP",
]
