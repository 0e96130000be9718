"""
Gene set collections: MSigDB downloads via GSEApy, Enrichr libraries and GMT files.
"""

import os

import gseapy as gp

# MSigDB releases used when no dbver is given
MSIGDB_VERSIONS = {
    "human": "2023.2.Hs",
    "mouse": "2023.2.Mm",
}

# msigdbr-style categories and the GMT prefix of each species
HUMAN_CATEGORIES = {"H": "h", "C1": "c1", "C2": "c2", "C3": "c3", "C4": "c4",
                    "C5": "c5", "C6": "c6", "C7": "c7", "C8": "c8"}
MOUSE_CATEGORIES = {"H": "mh", "MH": "mh", "C1": "m1", "M1": "m1", "C2": "m2", "M2": "m2",
                    "C3": "m3", "M3": "m3", "C5": "m5", "M5": "m5", "C8": "m8", "M8": "m8"}

# Collections renamed in MSigDB 2023.1; older releases keep the original name
RENAMED_SUBCATEGORIES = {"cp.kegg": "cp.kegg_legacy"}
RENAMED_SINCE = (2023, 1)


def _release(dbver: str) -> tuple:
    """'2023.2.Hs' -> (2023, 2), '7.5.1' -> (7, 5)."""
    parts = [int(p) for p in dbver.split(".") if p.isdigit()]
    return tuple(parts[:2])


def msigdb_collection_name(species: str, category: str, subcategory: str = None, dbver: str = None) -> str:
    """
    Translate an msigdbr-style (category, subcategory) pair into the MSigDB GMT collection name.

    ``dbver`` defaults to ``MSIGDB_VERSIONS[species]``. From release 2023.1 on,
    CP:KEGG resolves to the 'cp.kegg_legacy' collection.

    Examples
    --------
    >>> msigdb_collection_name("human", "C2", "CP:KEGG", dbver="7.5.1")
    'c2.cp.kegg'
    >>> msigdb_collection_name("human", "C2", "CP:KEGG")
    'c2.cp.kegg_legacy'
    >>> msigdb_collection_name("mouse", "H")
    'mh.all'
    """
    species = species.lower()
    if species == "human":
        prefixes = HUMAN_CATEGORIES
    elif species == "mouse":
        prefixes = MOUSE_CATEGORIES
    else:
        raise ValueError(f"species must be 'human' or 'mouse', got '{species}'.")

    key = category.upper()
    if key not in prefixes:
        raise ValueError(
            f"Unknown MSigDB category '{category}' for {species}. "
            f"Choose from {sorted(prefixes)}."
        )

    if not subcategory:
        return f"{prefixes[key]}.all"
    sub = subcategory.lower().replace(":", ".")
    if sub in RENAMED_SUBCATEGORIES and _release(dbver or MSIGDB_VERSIONS[species]) >= RENAMED_SINCE:
        sub = RENAMED_SUBCATEGORIES[sub]
    return f"{prefixes[key]}.{sub}"


def read_gmt(path: str) -> dict:
    """Read a GMT file into {gene_set: [genes]}."""
    return gp.read_gmt(path)


def write_gmt(gene_sets: dict, path: str, description: str = "scgsea") -> str:
    """Write {gene_set: [genes]} as a GMT file and return the path."""
    with open(path, "w") as fh:
        for name, genes in gene_sets.items():
            fh.write("\t".join([name, description, *genes]) + "\n")
    return path


def get_gene_sets(
    species: str = "human",
    category: str = "H",
    subcategory: str = None,
    gene_sets=None,
    dbver: str = None,
    verbose: bool = True
) -> dict:
    """
    Fetch a gene set collection.

    Parameters
    ----------
    species : str
        'human' or 'mouse'.
    category : str
        MSigDB category (e.g. 'H', 'C2', 'C5').
    subcategory : str, optional
        MSigDB subcategory (e.g. 'CP:KEGG', 'GO:BP').
    gene_sets : dict or str, optional
        Overrides the MSigDB download. A dict is returned as-is, a path to a
        ``.gmt`` file is read from disk, any other string is fetched as an
        Enrichr library (e.g. 'KEGG_2021_Human').
    dbver : str, optional
        MSigDB release, defaults to ``MSIGDB_VERSIONS[species]``.
    verbose : bool
        Print progress lines.

    Returns
    -------
    dict
        {gene_set: [genes]}
    """
    if isinstance(gene_sets, dict):
        collection = {name: list(genes) for name, genes in gene_sets.items()}
        source = "user dict"
    elif isinstance(gene_sets, str) and (gene_sets.endswith(".gmt") or os.path.isfile(gene_sets)):
        collection = read_gmt(gene_sets)
        source = gene_sets
    elif isinstance(gene_sets, str):
        organism = "Mouse" if species.lower() == "mouse" else "Human"
        collection = gp.get_library(name=gene_sets, organism=organism)
        source = f"Enrichr:{gene_sets}"
    elif gene_sets is not None:
        raise ValueError("gene_sets must be a dict, a .gmt path or an Enrichr library name.")
    else:
        version = dbver or MSIGDB_VERSIONS[species.lower()]
        name = msigdb_collection_name(species, category, subcategory, dbver=version)
        if verbose:
            print(f"[GeneSets] Downloading MSigDB collection '{name}' ({version})...")
        collection = gp.Msigdb().get_gmt(category=name, dbver=version)
        source = f"MSigDB:{name}:{version}"

    if not collection:
        raise ValueError(f"No gene sets returned from {source}.")

    if verbose:
        print(f"[GeneSets] Loaded {len(collection)} gene sets from {source}.")
    return collection


def filter_gene_sets(
    gene_sets: dict,
    universe,
    min_size: int = 15,
    max_size: int = 500,
    verbose: bool = True
) -> dict:
    """
    Intersect every gene set with ``universe`` and keep those whose overlap
    holds between ``min_size`` and ``max_size`` genes.
    """
    if min_size > max_size:
        raise ValueError(f"min_size ({min_size}) is larger than max_size ({max_size}).")

    universe = set(universe)
    kept = {}
    for name, genes in gene_sets.items():
        overlap = [g for g in dict.fromkeys(genes) if g in universe]
        if min_size <= len(overlap) <= max_size:
            kept[name] = overlap

    if verbose:
        print(f"[GeneSets] {len(kept)}/{len(gene_sets)} gene sets have {min_size}-{max_size} genes in the data.")
    return kept
