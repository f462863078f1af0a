"""
Target Census

Counts the targets of each TF and, optionally, how many of them fall in a
set of interest such as differentially expressed genes.
"""

from typing import Iterable, Mapping, Optional, Union
import logging

import pandas as pd

from ..network.graph import RegulatoryGraph

logger = logging.getLogger(__name__)


def count_targets(
    targets_list: Union[RegulatoryGraph, Mapping[str, Iterable[str]]],
    interest_set: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """
    Count targets per TF and their overlap with a gene set of interest.

    Rows are sorted in descending order of n_overlap when `interest_set` is
    given, otherwise of n_targets. The sort is stable, so tied TFs keep their
    input order. TFs with no targets are kept with zero counts.

    Args:
        targets_list: Mapping of TF to target genes, or a RegulatoryGraph
            (its regulators and declared empty regulons are counted)
        interest_set: Optional genes of interest (e.g. DEGs)

    Returns:
        DataFrame with columns tf, n_targets and, with an interest set, n_overlap
    """
    if isinstance(targets_list, RegulatoryGraph):
        regulons = {tf: targets_list.targets_of(tf) for tf in targets_list.tfs}
    else:
        regulons = {tf: set(targets) for tf, targets in targets_list.items()}

    df = pd.DataFrame(
        {
            "tf": pd.Series(list(regulons), dtype=object),
            "n_targets": pd.Series([len(targets) for targets in regulons.values()], dtype=int),
        }
    )

    if interest_set is not None:
        interest = set(interest_set)
        df["n_overlap"] = pd.Series(
            [len(targets & interest) for targets in regulons.values()], dtype=int
        )
        sort_column = "n_overlap"
    else:
        sort_column = "n_targets"

    df = df.sort_values(sort_column, ascending=False, kind="mergesort").reset_index(drop=True)

    logger.info(f"Counted targets for {len(df)} TFs (sorted by {sort_column})")
    return df
