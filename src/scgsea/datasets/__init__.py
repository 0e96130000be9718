from .mock_data import make_mock_scrna, make_mock_pathway_data
from .io import read_10x, read_h5ad, read_seurat, write_scgsea_tables

__all__ = [
    "make_mock_scrna",
    "make_mock_pathway_data",
    "read_10x",
    "read_h5ad",
    "read_seurat",
    "write_scgsea_tables",
]
