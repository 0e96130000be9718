from .enrichment import (
    run_scgsea,
    score_programs,
    compute_pathway_activity,
    rescale_activity,
    run_ssgsea,
    run_go_enrichment,
)
from .genesets import (
    get_gene_sets,
    filter_gene_sets,
    msigdb_collection_name,
    read_gmt,
    write_gmt,
)

__all__ = [
    "run_scgsea",
    "score_programs",
    "compute_pathway_activity",
    "rescale_activity",
    "run_ssgsea",
    "run_go_enrichment",
    "get_gene_sets",
    "filter_gene_sets",
    "msigdb_collection_name",
    "read_gmt",
    "write_gmt",
]
