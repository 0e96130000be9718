"""
scgsea: single-cell gene set enrichment through NMF gene programs.
"""

__version__ = "0.1.0"

from . import preprocessing as pp
from . import tools as tl
from . import plotting as pl
from . import datasets
from . import clustering
from . import pathway
from .pathway import run_scgsea

__all__ = [
    "pp",
    "tl",
    "pl",
    "datasets",
    "clustering",
    "pathway",
    "run_scgsea",
]
