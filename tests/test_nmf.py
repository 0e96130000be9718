import pytest
import numpy as np
import anndata as ad
from scgsea import clustering


def test_run_nmf_tfidf(planted):
    adata, _ = planted
    counts = adata.X.copy()

    clustering.run_nmf(adata, n_components=3)

    assert adata.obsm["X_nmf"].shape == (adata.n_obs, 3)
    assert adata.varm["nmf_features"].shape == (adata.n_vars, 3)
    assert adata.obsm["X_nmf"].min() >= 0
    assert "tfidf" in adata.layers
    assert adata.uns["nmf"]["normalization"] == "tfidf"
    assert set(adata.obs["nmf_cluster"].cat.categories) <= {"NMF_0", "NMF_1", "NMF_2"}
    # raw counts untouched
    np.testing.assert_array_equal(adata.X, counts)


def test_run_nmf_recovers_planted_programs(planted):
    adata, _ = planted
    clustering.run_nmf(adata, n_components=3)

    # each program's cells should be dominated by a single NMF program
    for program in adata.obs["true_program"].cat.categories:
        labels = adata.obs.loc[adata.obs["true_program"] == program, "nmf_cluster"]
        assert labels.value_counts(normalize=True).iloc[0] > 0.8


def test_run_nmf_cp10k_keeps_counts(planted):
    adata, _ = planted
    counts = adata.X.copy()
    clustering.run_nmf(adata, n_components=2, normalization="cp10k")

    assert adata.uns["nmf"]["normalization"] == "cp10k"
    assert "log1p" not in adata.uns
    np.testing.assert_array_equal(adata.X, counts)


def test_run_nmf_clips_components():
    np.random.seed(0)
    adata = ad.AnnData(X=np.random.poisson(3, (20, 8)).astype(np.float32) + 1)
    with pytest.warns(UserWarning, match="n_components"):
        clustering.run_nmf(adata, n_components=50, normalization="none")
    assert adata.obsm["X_nmf"].shape[1] == 8


def test_run_nmf_rejects_negative_data():
    adata = ad.AnnData(X=np.random.normal(size=(20, 10)))
    with pytest.raises(ValueError, match="non-negative"):
        clustering.run_nmf(adata, n_components=2, normalization="none")


def test_run_nmf_rejects_unknown_normalization(planted):
    adata, _ = planted
    with pytest.raises(ValueError, match="normalization"):
        clustering.run_nmf(adata, n_components=2, normalization="sctransform")


def test_extract_nmf_markers(planted):
    adata, _ = planted
    clustering.run_nmf(adata, n_components=3)
    markers = clustering.extract_nmf_markers(adata, top_n=10)

    assert markers.shape == (10, 6)
    # top genes of every program are planted program genes
    for i in range(3):
        top = markers[f"NMF_{i}_gene"].head(5)
        assert all(g.startswith("P") for g in top)


def test_extract_nmf_markers_requires_nmf():
    adata = ad.AnnData(X=np.ones((5, 5)))
    with pytest.raises(ValueError, match="run_nmf"):
        clustering.extract_nmf_markers(adata)
