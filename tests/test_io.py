import pytest
import pandas as pd
from scgsea import datasets


def test_write_scgsea_tables(pathway_adata, tmp_path):
    paths = datasets.write_scgsea_tables(pathway_adata, str(tmp_path / "out"))

    assert set(paths) == {"activity", "pathways", "nes", "fdr"}
    activity = pd.read_csv(paths["activity"], index_col=0)
    assert activity.shape == pathway_adata.shape
    assert list(activity.columns) == list(pathway_adata.var_names)


def test_write_scgsea_tables_requires_results(pathway_adata, tmp_path):
    del pathway_adata.uns["scgsea"]
    with pytest.raises(ValueError):
        datasets.write_scgsea_tables(pathway_adata, str(tmp_path))


def test_read_seurat_rejects_r_formats():
    with pytest.raises(NotImplementedError, match=".rds"):
        datasets.read_seurat("object.rds")
    with pytest.raises(NotImplementedError):
        datasets.read_seurat("object.h5Seurat")


def test_read_h5ad_roundtrip(planted, tmp_path):
    adata, _ = planted
    path = str(tmp_path / "planted.h5ad")
    adata.write_h5ad(path)
    loaded = datasets.read_h5ad(path)
    assert loaded.shape == adata.shape
    assert "true_program" in loaded.obs.columns


def test_make_mock_pathway_data_shapes():
    adata, gene_sets = datasets.make_mock_pathway_data(n_cells=40, n_programs=2, genes_per_program=10,
                                                       n_background=30, n_decoys=3)
    assert adata.shape == (40, 50)
    assert set(gene_sets) == {"PROGRAM_0", "PROGRAM_1", "DECOY_0", "DECOY_1", "DECOY_2"}
    assert (adata.X.sum(axis=1) > 0).all()
    assert all(g in adata.var_names for genes in gene_sets.values() for g in genes)


def test_make_mock_scrna():
    adata = datasets.make_mock_scrna(n_cells=100, n_genes=80, n_clusters=3)
    assert adata.shape == (100, 80)
    assert adata.obs["true_cluster"].nunique() == 3
    assert "CD3D" in adata.var_names


def test_make_mock_pathway_data_decoys_match_gene_composition():
    _, gene_sets = datasets.make_mock_pathway_data(n_cells=30, n_programs=3, genes_per_program=30,
                                                   n_background=120, n_decoys=4)
    for name in ["DECOY_0", "DECOY_1", "DECOY_2", "DECOY_3"]:
        genes = gene_sets[name]
        assert len(set(genes)) == len(genes)
        per_program = [sum(g.startswith(f"P{p}_") for g in genes) for p in range(3)]
        assert per_program == [3, 3, 3]
        assert sum(g.startswith("BG_") for g in genes) == 13
