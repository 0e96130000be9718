import pytest
import numpy as np
import anndata as ad
import scipy.sparse as sp
from scgsea import preprocessing as pp


@pytest.fixture
def mock_adata():
    np.random.seed(42)
    # 100 cells, 50 genes
    X = np.random.poisson(1, (100, 50)).astype(np.float32)
    X[:, 0] += 1  # no empty cells
    obs = {"cell_id": [f"cell_{i}" for i in range(100)]}
    var = {"gene_id": [f"gene_{i}" if i >= 5 else f"MT-gene_{i}" for i in range(50)]}
    adata = ad.AnnData(X=X, obs=obs, var=var)
    adata.var_names = adata.var["gene_id"].astype(str)
    return adata


def test_calculate_qc_metrics(mock_adata):
    pp.calculate_qc_metrics(mock_adata, mt_prefix="MT-")
    assert "n_genes_by_counts" in mock_adata.obs.columns
    assert "total_counts" in mock_adata.obs.columns
    assert "pct_counts_mt" in mock_adata.obs.columns
    assert mock_adata.var["mt"].sum() == 5


def test_filter_cells_and_genes(mock_adata):
    pp.calculate_qc_metrics(mock_adata, mt_prefix="MT-")
    original_cells = mock_adata.n_obs
    original_genes = mock_adata.n_vars

    pp.filter_cells_and_genes(mock_adata, min_genes=10, min_cells=3, max_pct_mt=20.0)

    assert mock_adata.n_obs <= original_cells
    assert mock_adata.n_vars <= original_genes


def test_normalize_and_log(mock_adata):
    pp.normalize_and_log(mock_adata)
    assert 'log1p' in mock_adata.uns


def test_filter_genes_by_detection(mock_adata):
    mock_adata.X[:, 1] = 0
    mock_adata.X[:3, 2] = 5  # detected in 3% of cells
    mock_adata.X[3:, 2] = 0

    pp.filter_genes_by_detection(mock_adata, min_fraction=0.05)

    assert "MT-gene_1" not in mock_adata.var_names
    assert "MT-gene_2" not in mock_adata.var_names
    assert "MT-gene_0" in mock_adata.var_names


def test_filter_genes_by_detection_rejects_bad_bounds(mock_adata):
    with pytest.raises(ValueError):
        pp.filter_genes_by_detection(mock_adata, min_fraction=0.5, max_fraction=0.1)
    mock_adata.X[:, 0] = 0
    mock_adata.X[0, 1:] = 0
    with pytest.raises(ValueError, match="No genes"):
        pp.filter_genes_by_detection(mock_adata, min_fraction=1.0, max_fraction=1.0)


def test_tfidf_normalize_dense(mock_adata):
    pp.tfidf_normalize(mock_adata)
    tfidf = mock_adata.layers["tfidf"]

    assert isinstance(tfidf, np.ndarray)
    assert tfidf.shape == mock_adata.shape
    assert tfidf.min() >= 0
    np.testing.assert_allclose(np.linalg.norm(tfidf, axis=1), 1.0, rtol=1e-6)
    assert len(mock_adata.uns["tfidf"]["idf"]) == mock_adata.n_vars


def test_tfidf_downweights_ubiquitous_genes():
    X = np.array([
        [5, 5, 0],
        [5, 0, 5],
        [5, 5, 0],
        [5, 0, 5],
    ], dtype=float)
    adata = ad.AnnData(X=X)
    pp.tfidf_normalize(adata, l2_norm=False)
    idf = adata.uns["tfidf"]["idf"]
    assert idf[0] < idf[1]
    assert idf[1] == pytest.approx(idf[2])


def test_tfidf_normalize_sparse_layer(mock_adata):
    mock_adata.layers["counts"] = sp.csr_matrix(mock_adata.X)
    mock_adata.X = np.zeros_like(mock_adata.X)

    pp.tfidf_normalize(mock_adata, layer="counts", key_added="w", l2_norm=False)

    assert sp.issparse(mock_adata.layers["w"])
    assert mock_adata.uns["tfidf"]["layer"] == "counts"


def test_tfidf_rejects_empty_cells(mock_adata):
    mock_adata.X[0, :] = 0
    with pytest.raises(ValueError, match="zero total counts"):
        pp.tfidf_normalize(mock_adata)


def test_tfidf_rejects_negative_values(mock_adata):
    mock_adata.X[0, 0] = -1
    with pytest.raises(ValueError, match="non-negative"):
        pp.tfidf_normalize(mock_adata)
