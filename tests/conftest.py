import numpy as np
import pandas as pd
import pytest

from scgsea.datasets import make_mock_pathway_data


def fake_score_programs(ranked, gene_sets, min_size=15, max_size=500, permutation_num=1000,
                        weight=0.0, threads=1, seed=42):
    """Deterministic stand-in for GSEApy: NES is the set's mean loading over the overall mean."""
    overall = ranked.mean()
    rows = {}
    for name, genes in gene_sets.items():
        ratio = ranked.reindex(genes).mean() / overall if overall > 0 else 0.0
        rows[name] = {
            "ES": ratio / 4,
            "NES": ratio,
            "NOM p-val": 0.001 if ratio > 2 else 0.8,
            "FDR q-val": 0.01 if ratio > 2 else 0.9,
        }
    return pd.DataFrame.from_dict(rows, orient="index")


@pytest.fixture
def planted():
    adata, gene_sets = make_mock_pathway_data(n_cells=120, n_programs=3, genes_per_program=30,
                                              n_background=120, random_state=0)
    return adata, gene_sets


@pytest.fixture
def fake_gsea(monkeypatch):
    monkeypatch.setattr("scgsea.pathway.enrichment.score_programs", fake_score_programs)
    return fake_score_programs


@pytest.fixture
def pathway_adata():
    """A small pathway object shaped like the output of run_scgsea."""
    import anndata as ad

    np.random.seed(0)
    n_cells, n_pathways = 60, 6
    groups = np.repeat(["0", "1", "2"], n_cells // 3)
    X = np.random.gamma(2.0, 1.0, size=(n_cells, n_pathways))
    # each group gets two pathways of its own
    for g in range(3):
        X[groups == str(g), 2 * g:2 * g + 2] += 5.0

    pathways = [f"PATHWAY_{i}" for i in range(n_pathways)]
    programs = [f"NMF_{i}" for i in range(3)]
    nes = pd.DataFrame(np.random.uniform(1.0, 3.0, size=(n_pathways, 3)), index=pathways, columns=programs)
    nes.iloc[:, 2] = 0.0

    adata = ad.AnnData(
        X=X,
        obs=pd.DataFrame({"leiden_0.5": pd.Categorical(groups)},
                         index=[f"cell_{i}" for i in range(n_cells)]),
        var=pd.DataFrame(index=pathways),
    )
    adata.obsm["X_umap"] = np.random.normal(size=(n_cells, 2))
    adata.uns["scgsea"] = {
        "nes": nes,
        "fdr": pd.DataFrame(0.01, index=pathways, columns=programs),
        "nes_significant": nes,
    }
    return adata
