"""
scGSEA demo: score pathway activity per cell, then cluster and plot cells on pathways.

Usage:
    python generate_demo_data.py      # offline mock data + gene sets
    python demo_scgsea.py             # uses demo_data/ if present
    python demo_scgsea.py --msigdb    # pbmc3k + MSigDB hallmarks (needs network)
"""

import os
import sys
import scanpy as sc

# Limit pynndescent/arpack thread spawning
sc.settings.n_jobs = 1

import matplotlib
matplotlib.use("Agg")

import scgsea as gs


def load_data(use_msigdb: bool):
    if use_msigdb:
        print("Downloading/Loading scanpy.datasets.pbmc3k()...")
        adata = sc.datasets.pbmc3k()
        adata.var_names_make_unique()
        gs.pp.filter_cells_and_genes(adata, min_genes=200, min_cells=3)
        return adata, dict(species="human", category="H")

    if not os.path.exists("demo_data/scgsea_demo_scrna.h5ad"):
        print("Demo data not found. Please run 'python generate_demo_data.py' first.")
        sys.exit(1)
    adata = gs.datasets.read_h5ad("demo_data/scgsea_demo_scrna.h5ad")
    return adata, dict(gene_sets="demo_data/scgsea_demo_sets.gmt")


def main():
    fig_dir = "demo_figs"
    os.makedirs(fig_dir, exist_ok=True)
    sc.settings.figdir = fig_dir

    adata, collection = load_data("--msigdb" in sys.argv)
    print(adata)

    # 1. Gene-level embedding, so pathway scores can be shown on familiar clusters
    print("\n--- Gene-level UMAP ---")
    gene_view = adata.copy()
    gs.pp.normalize_and_log(gene_view)
    sc.pp.highly_variable_genes(gene_view, n_top_genes=min(2000, gene_view.n_vars))
    gs.tl.run_pca_and_neighbors(gene_view, n_pcs=30, n_neighbors=15)
    gs.tl.run_umap_and_cluster(gene_view, resolution=0.5)
    adata.obsm["X_umap"] = gene_view.obsm["X_umap"]
    adata.obs["gene_clusters"] = gene_view.obs["leiden_0.5"]

    # 2. Pathway activity
    print("\n--- Running scGSEA ---")
    pdata = gs.run_scgsea(adata, gene_id="symbol", n_components=30, min_size=15,
                          permutation_num=1000, fdr_threshold=0.05, **collection)
    print(pdata)
    gs.datasets.write_scgsea_tables(pdata, os.path.join(fig_dir, "tables"))
    gs.pl.plot_nes_heatmap(pdata, top_n=30, save_path=os.path.join(fig_dir, "nes_heatmap.png"))

    top_pathway = pdata.var["max_nes"].idxmax()
    gs.pl.plot_pathway_umap(pdata, top_pathway, save_path=os.path.join(fig_dir, "top_pathway_umap.png"))

    # 3. Pathway markers of the gene-level clusters
    markers = gs.tl.find_pathway_markers(pdata, groupby="gene_clusters", n_top=3)
    top = gs.tl.top_marker_pathways(markers, n_top=2)
    gs.pl.dim_plot(pdata, color="gene_clusters", show=False, save="_gene_clusters.png")
    gs.pl.dot_plot(pdata, top, groupby="gene_clusters", save_path=os.path.join(fig_dir, "dotplot_gene_clusters.png"))
    gs.pl.heatmap(pdata, top, groupby="gene_clusters", save_path=os.path.join(fig_dir, "heatmap_gene_clusters.png"))

    # 4. Cluster cells on their pathway activity
    print("\n--- Clustering on variable pathways ---")
    gs.tl.find_variable_pathways(pdata, n_top=min(50, pdata.n_vars))
    gs.tl.run_pca_and_neighbors(pdata, n_pcs=20, n_neighbors=15)
    gs.tl.run_umap_and_cluster(pdata, resolution=0.5)

    gs.pl.dim_plot(pdata, color=["leiden_0.5", "gene_clusters"], show=False, save="_pathway_clusters.png")
    markers = gs.tl.find_pathway_markers(pdata, groupby="leiden_0.5", n_top=3)
    top = gs.tl.top_marker_pathways(markers, n_top=2)
    gs.pl.dot_plot(pdata, top, groupby="leiden_0.5", save_path=os.path.join(fig_dir, "dotplot_pathway_clusters.png"))
    gs.pl.heatmap(pdata, top, groupby="leiden_0.5", save_path=os.path.join(fig_dir, "heatmap_pathway_clusters.png"))

    summary = gs.tl.make_pseudobulk(pdata, groupby="leiden_0.5", mode="mean")
    print(summary.to_df().round(3))
    print(f"\nFigures and tables written to {fig_dir}/")


if __name__ == "__main__":
    main()
