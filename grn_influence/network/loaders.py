"""
Network Loaders

Handles loading of regulatory network and scoring inputs:
- Adjacency tables (TF, target, importance), e.g. pySCENIC GRNBoost2 output
- Regulon GMT files (TF<TAB>description<TAB>target1<TAB>target2...)
- Score tables (e.g. enrichment results) and gene lists (e.g. DEGs)
"""

from pathlib import Path
from typing import Dict, List, Optional, Set
import logging
import re

import pandas as pd

from .graph import RegulatoryGraph

logger = logging.getLogger(__name__)

# pySCENIC regulon names carry a mode suffix, e.g. "SOX2(+)" or "SOX2_(+)"
_REGULON_SUFFIX = re.compile(r"_?\([+-]\)$")

# Identifier columns only treat blank cells as missing, so genes named
# "NA" or "None" survive. Score cells use the usual missing markers.
_MISSING_SCORE = ["", "NA", "N/A", "NaN", "nan", "NULL", "null", "None"]


def _require_file(path: str, kind: str) -> Path:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"{kind} file not found: {path}")
    return file_path


def load_grn_edges(
    path: str,
    source_column: str = "TF",
    target_column: str = "target",
    weight_column: Optional[str] = "importance",
    sep: str = "\t",
) -> RegulatoryGraph:
    """
    Load a regulatory graph from an edge table.

    Args:
        path: Path to a delimited file with one edge per row
        source_column: Column holding TF identifiers
        target_column: Column holding target gene identifiers
        weight_column: Optional weight column, ignored if absent
        sep: Field delimiter

    Returns:
        RegulatoryGraph
    """
    file_path = _require_file(path, "GRN")
    df = pd.read_csv(
        file_path,
        sep=sep,
        dtype={source_column: str, target_column: str},
        keep_default_na=False,
        na_values=[""],
    )

    missing = [c for c in (source_column, target_column) if c not in df.columns]
    if missing:
        raise ValueError(f"GRN file {path} is missing columns: {missing}")

    if weight_column is not None and weight_column not in df.columns:
        logger.debug(f"Weight column '{weight_column}' not in {path}; edges are unweighted")
        weight_column = None

    graph = RegulatoryGraph.from_dataframe(
        df,
        source_column=source_column,
        target_column=target_column,
        weight_column=weight_column,
    )
    logger.info(f"Loaded GRN from {path}: {graph.n_nodes} nodes, {graph.n_edges} edges")
    return graph


def load_regulons_gmt(path: str, strip_regulon_suffix: bool = True) -> RegulatoryGraph:
    """
    Load regulons from GMT format.

    GMT format: regulon_id<TAB>description<TAB>gene1<TAB>gene2<TAB>...

    Args:
        path: Path to GMT file
        strip_regulon_suffix: Turn pySCENIC names like "SOX2(+)" into "SOX2"

    Returns:
        RegulatoryGraph with one TF -> target edge per listed gene
    """
    file_path = _require_file(path, "GMT")

    regulons: Dict[str, List[str]] = {}
    with open(file_path, "r") as f:
        for line_num, line in enumerate(f, 1):
            line = line.rstrip("\n\r")
            if not line.strip():
                continue

            fields = line.split("\t")
            if len(fields) < 3:
                logger.warning(f"Skipping malformed line {line_num} in {path}")
                continue

            tf = fields[0].strip()
            if strip_regulon_suffix:
                tf = _REGULON_SUFFIX.sub("", tf)
            if not tf:
                logger.warning(f"Skipping line {line_num} in {path}: empty regulon name")
                continue

            targets = [g.strip() for g in fields[2:]]
            targets = [g for g in targets if g and g not in ("na", "NA")]

            # Regulons for the same TF (e.g. activating and repressing) are merged
            regulons.setdefault(tf, []).extend(targets)

    graph = RegulatoryGraph.from_mapping(regulons)
    logger.info(
        f"Loaded {len(regulons)} regulons from {path} "
        f"({graph.n_edges} TF-target edges)"
    )
    return graph


def load_score_table(
    path: str,
    id_column: str = "tf",
    score_column: str = "nes",
    sep: Optional[str] = None,
) -> Dict[str, float]:
    """
    Load a score vector from a table.

    Rows with a missing score are skipped. If an identifier appears more than
    once, the last row wins.

    Args:
        path: Path to CSV/TSV file
        id_column: Column with node identifiers
        score_column: Column with numeric scores
        sep: Field delimiter (inferred from the suffix when None)

    Returns:
        Dictionary mapping identifier to score
    """
    file_path = _require_file(path, "Score")
    if sep is None:
        sep = "\t" if file_path.suffix in (".tsv", ".txt") else ","

    df = pd.read_csv(
        file_path,
        sep=sep,
        dtype={id_column: str},
        keep_default_na=False,
        na_values={id_column: [""], score_column: _MISSING_SCORE},
    )
    missing = [c for c in (id_column, score_column) if c not in df.columns]
    if missing:
        raise ValueError(f"Score file {path} is missing columns: {missing}")

    df = df.dropna(subset=[id_column, score_column])
    scores = {str(k): float(v) for k, v in zip(df[id_column], df[score_column])}
    logger.info(f"Loaded {len(scores)} scores from {path}")
    return scores


def load_ranked_genes(
    path: str,
    gene_column: str = "gene",
    stat_column: str = "logFC",
    sep: Optional[str] = None,
) -> pd.Series:
    """
    Load a ranked gene statistic (e.g. logFC) as a Series indexed by gene.

    Args:
        path: Path to CSV/TSV file
        gene_column: Column with gene symbols
        stat_column: Column with the ranking statistic
        sep: Field delimiter (inferred from the suffix when None)

    Returns:
        Series of statistics indexed by gene
    """
    scores = load_score_table(path, id_column=gene_column, score_column=stat_column, sep=sep)
    return pd.Series(scores, dtype=float, name=stat_column)


def load_gene_list(path: str, column: Optional[str] = None, sep: Optional[str] = None) -> Set[str]:
    """
    Load a set of genes (e.g. DEGs).

    Without `column` the file is read as one gene per line; with `column`
    it is read as a table and that column is used.

    Args:
        path: Path to gene list file
        column: Optional column name in a tabular file
        sep: Field delimiter for tabular files (inferred when None)

    Returns:
        Set of gene identifiers
    """
    file_path = _require_file(path, "Gene list")

    if column is None:
        with open(file_path, "r") as f:
            genes = {line.strip() for line in f if line.strip() and not line.startswith("#")}
    else:
        if sep is None:
            sep = "\t" if file_path.suffix in (".tsv", ".txt") else ","
        df = pd.read_csv(
            file_path, sep=sep, dtype={column: str}, keep_default_na=False, na_values=[""]
        )
        if column not in df.columns:
            raise ValueError(f"Gene list {path} has no column '{column}'")
        genes = set(df[column].dropna().str.strip()) - {""}

    logger.info(f"Loaded {len(genes)} genes from {path}")
    return genes
