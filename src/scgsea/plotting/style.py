# scgsea plotting style module, SeuratExtend-inspired

# ── Discrete palettes ─────────────────────────────────────────────────────────
SEURAT_DISCRETE = [
    "#4DBBD5",   # teal
    "#E64B35",   # red-orange
    "#00A087",   # green-teal
    "#3C5488",   # navy blue
    "#F39B7F",   # salmon
    "#8491B4",   # slate-lavender
    "#91D1C2",   # mint
    "#DC0000",   # crimson
    "#7E6148",   # umber
    "#B09C85",   # warm beige
    "#FFDC91",   # straw
    "#A9D18E",   # moss green
]

PALETTES = {
    "default": [
        "#000080", "#FFD700", "#8B0000", "#4DAF4A", "#984EA3", "#FF7F00",
        "#FFFF33", "#A65628", "#F781BF", "#999999", "#66C2A5", "#FC8D62",
        "#8DA0CB", "#E78AC3", "#A6D854", "#B3B3B3"
    ],
    "nature": SEURAT_DISCRETE,
}

# ── Continuous palettes ───────────────────────────────────────────────────────
SEURAT_FEATURE_CMAP   = "RdYlBu_r"   # heatmap / scaled activity
SEURAT_EXPR_CMAP      = "YlOrRd"     # pathway activity on embeddings
SEURAT_NES_CMAP       = "magma_r"    # enrichment scores
SEURAT_DOTPLOT_CMAP   = "Blues"      # dot plot colour

# ── Typography ────────────────────────────────────────────────────────────────
FONT_FAMILY   = "sans-serif"
TITLE_SIZE    = 13
LABEL_SIZE    = 9
TICK_SIZE     = 8

# ── Layout ────────────────────────────────────────────────────────────────────
FIG_BG        = "white"
AX_BG         = "white"
SPINE_COLOR   = "#CCCCCC"


def set_style():
    """
    Apply SeuratExtend-like styles to matplotlib global parameters.
    """
    import matplotlib.pyplot as plt
    import seaborn as sns

    sns.set_style("ticks")
    plt.rcParams.update({
        "font.family":       FONT_FAMILY,
        "font.size":         LABEL_SIZE,
        "axes.titlesize":    TITLE_SIZE,
        "axes.labelsize":    LABEL_SIZE,
        "axes.spines.top":   False,
        "axes.spines.right": False,
        "figure.facecolor":  FIG_BG,
        "legend.frameon":    False,
    })


def apply_seurat_theme(ax, spines="bl"):
    """
    Apply SeuratExtend-style aesthetics to a matplotlib Axes.

    Parameters
    ----------
    ax     : matplotlib.axes.Axes
    spines : str, which spines to keep: 'bl' = bottom+left (classic),
                    'none' = all hidden, 'all' = keep all four
    """
    ax.set_facecolor(AX_BG)

    if spines == "none":
        for s in ax.spines.values():
            s.set_visible(False)
    elif spines == "bl":
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        for s in ["bottom", "left"]:
            ax.spines[s].set_color(SPINE_COLOR)
            ax.spines[s].set_linewidth(0.8)
    else:
        for s in ax.spines.values():
            s.set_color(SPINE_COLOR)
            s.set_linewidth(0.8)

    ax.grid(False)
    ax.tick_params(axis="both", labelsize=TICK_SIZE,
                   length=3, width=0.6, color=SPINE_COLOR)
    return ax


def discrete_colors(n, palette="default"):
    """Return a list of n discrete colors, cycling the palette when needed."""
    colors = PALETTES.get(palette, PALETTES["default"])
    colors = colors * ((n // len(colors)) + 1)
    return colors[:n]
