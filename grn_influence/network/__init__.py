"""
Regulatory Network

Directed TF -> target graph and the bounded walks used to query it.

Components:
- RegulatoryGraph: Immutable network with forward and reverse lookups
- bounded_traversal: Depth-limited, cycle-safe walk in either direction
- get_downstream / get_upstream: Reachability queries for a single root
- Loaders for adjacency tables, regulon GMT files, scores and gene lists

Example Usage:
    from grn_influence.network import RegulatoryGraph, get_downstream

    grn = RegulatoryGraph.from_mapping({"TF1": ["TF2", "GeneA"], "TF2": ["TF3"]})
    targets, edges = get_downstream(grn, "TF1", max_depth=2)
"""

from .graph import (
    GraphLike,
    MalformedGraphError,
    RegulatoryGraph,
    RegulatoryGraphStats,
    as_regulatory_graph,
)

from .traversal import (
    TraversalDirection,
    TraversalResult,
    bounded_traversal,
    get_downstream,
    get_upstream,
)

from .loaders import (
    load_gene_list,
    load_grn_edges,
    load_ranked_genes,
    load_regulons_gmt,
    load_score_table,
)

__all__ = [
    # Graph
    "GraphLike",
    "MalformedGraphError",
    "RegulatoryGraph",
    "RegulatoryGraphStats",
    "as_regulatory_graph",
    # Traversal
    "TraversalDirection",
    "TraversalResult",
    "bounded_traversal",
    "get_downstream",
    "get_upstream",
    # Loaders
    "load_gene_list",
    "load_grn_edges",
    "load_ranked_genes",
    "load_regulons_gmt",
    "load_score_table",
]
