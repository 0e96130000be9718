import pytest
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from scgsea import plotting as pl


def test_dim_plot(pathway_adata):
    ax = pl.dim_plot(pathway_adata, color="leiden_0.5", show=False)
    assert ax is not None
    assert len(pathway_adata.uns["leiden_0.5_colors"]) == 3
    plt.close("all")


def test_feature_plot(pathway_adata):
    ax = pl.feature_plot(pathway_adata, features="PATHWAY_0", show=False)
    assert ax is not None
    plt.close("all")


def test_plot_pathway_umap_saves(pathway_adata, tmp_path):
    out = tmp_path / "pathway.png"
    fig = pl.plot_pathway_umap(pathway_adata, "PATHWAY_1", save_path=str(out))
    assert fig is not None
    assert out.exists()


def test_plot_pathway_umap_errors(pathway_adata):
    with pytest.raises(ValueError, match="not found"):
        pl.plot_pathway_umap(pathway_adata, "NOT_A_PATHWAY")
    with pytest.raises(ValueError, match="X_tsne"):
        pl.plot_pathway_umap(pathway_adata, "PATHWAY_0", basis="tsne")


def test_dot_plot(pathway_adata, tmp_path):
    out = tmp_path / "dotplot.png"
    dp = pl.dot_plot(pathway_adata, ["PATHWAY_0", "PATHWAY_2", "PATHWAY_4"],
                     groupby="leiden_0.5", save_path=str(out))
    assert dp is not None
    assert out.exists()


def test_dot_plot_requires_groupby(pathway_adata):
    with pytest.raises(ValueError):
        pl.dot_plot(pathway_adata, ["PATHWAY_0"], groupby="cluster")


def test_heatmap(pathway_adata, tmp_path):
    out = tmp_path / "heatmap.png"
    axes = pl.heatmap(pathway_adata, ["PATHWAY_0", "PATHWAY_3"], groupby="leiden_0.5",
                      save_path=str(out))
    assert axes is not None
    assert out.exists()


def test_plot_nes_heatmap(pathway_adata):
    fig = pl.plot_nes_heatmap(pathway_adata, top_n=4)
    ax = fig.axes[0]
    assert len(ax.get_yticklabels()) == 4
    # NMF_2 has no significant pathway
    assert [t.get_text() for t in ax.get_xticklabels()] == ["NMF_0", "NMF_1"]
    plt.close("all")


def test_plot_nes_heatmap_requires_results(pathway_adata):
    del pathway_adata.uns["scgsea"]
    with pytest.raises(ValueError, match="run_scgsea"):
        pl.plot_nes_heatmap(pathway_adata)


def test_discrete_colors_cycle():
    colors = pl.discrete_colors(20, palette="nature")
    assert len(colors) == 20
    assert colors[0] == colors[len(pl.SEURAT_DISCRETE)]
