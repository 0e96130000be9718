import os
from scgsea.datasets import make_mock_pathway_data
from scgsea.pathway import write_gmt


def main():
    print("Generating scGSEA Demo Datasets...")
    os.makedirs("demo_data", exist_ok=True)

    # Counts with 5 planted gene programs (1500 cells) and a matching gene set collection
    print("Generating scRNA-seq data with planted programs: 1500 cells")
    adata, gene_sets = make_mock_pathway_data(n_cells=1500, n_programs=5, genes_per_program=60,
                                              n_background=1500, n_decoys=10, random_state=42)
    adata.write_h5ad("demo_data/scgsea_demo_scrna.h5ad")
    print("Saved -> demo_data/scgsea_demo_scrna.h5ad")

    write_gmt(gene_sets, "demo_data/scgsea_demo_sets.gmt")
    print("Saved -> demo_data/scgsea_demo_sets.gmt")


if __name__ == "__main__":
    main()
