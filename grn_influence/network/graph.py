"""
Regulatory Graph

Immutable directed gene regulatory network (TF -> target genes) with
forward and reverse lookups.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Set, Tuple, Union
import logging
import math

import networkx as nx
import pandas as pd

logger = logging.getLogger(__name__)


class MalformedGraphError(ValueError):
    """Raised when edge records reference a null or empty node identifier."""


@dataclass
class RegulatoryGraphStats:
    """Statistics about a regulatory graph."""

    n_nodes: int
    n_edges: int
    n_regulators: int
    n_self_loops: int
    mean_out_degree: float


def _check_node_id(node: Any, position: str, record: Any) -> str:
    if node is None or (isinstance(node, float) and math.isnan(node)):
        raise MalformedGraphError(f"Null {position} in edge record: {record!r}")
    if not isinstance(node, str):
        raise MalformedGraphError(
            f"Node identifiers must be strings, got {type(node).__name__} "
            f"for {position} in edge record: {record!r}"
        )
    if not node.strip():
        raise MalformedGraphError(f"Empty {position} in edge record: {record!r}")
    return node


def _check_weight(weight: Any, record: Any) -> float:
    try:
        return float(weight)
    except (TypeError, ValueError) as e:
        raise MalformedGraphError(f"Non-numeric weight in edge record: {record!r}") from e


class RegulatoryGraph:
    """
    Directed regulatory network backed by a frozen NetworkX DiGraph.

    Missing nodes are never an error: lookups on an unknown identifier
    return an empty set. Cycles and self-loops are allowed. Neighbours are
    iterated in edge insertion order.
    """

    def __init__(
        self,
        edges: Iterable[Tuple[Any, ...]] = (),
        isolated_nodes: Iterable[str] = (),
        declared_tfs: Iterable[str] = (),
    ):
        """
        Build the graph from edge records.

        Args:
            edges: Iterable of (source, target) or (source, target, weight) tuples
            isolated_nodes: Extra nodes to include even without edges
            declared_tfs: TFs listed as regulons even if they have no targets

        Raises:
            MalformedGraphError: If a record has a null or empty endpoint,
                or a weight that is not a number
        """
        graph = nx.DiGraph()
        for record in edges:
            if len(record) not in (2, 3):
                raise MalformedGraphError(
                    f"Edge records must be (source, target[, weight]), got: {record!r}"
                )
            source = _check_node_id(record[0], "source", record)
            target = _check_node_id(record[1], "target", record)
            weight = _check_weight(record[2], record) if len(record) == 3 else 1.0
            graph.add_edge(source, target, weight=weight)

        for node in isolated_nodes:
            graph.add_node(_check_node_id(node, "node", node))

        declared = set()
        for tf in declared_tfs:
            declared.add(_check_node_id(tf, "TF", tf))
            graph.add_node(tf)

        self._graph = nx.freeze(graph)
        self._declared_tfs = frozenset(declared)
        logger.debug(
            f"Built regulatory graph: {graph.number_of_nodes()} nodes, "
            f"{graph.number_of_edges()} edges"
        )

    @classmethod
    def from_edges(cls, edges: Iterable[Tuple[Any, ...]]) -> "RegulatoryGraph":
        """Build a graph from (source, target[, weight]) tuples."""
        return cls(edges)

    @classmethod
    def from_mapping(cls, regulons: Mapping[str, Iterable[str]]) -> "RegulatoryGraph":
        """
        Build a graph from a mapping of TF to its target genes.

        TFs with an empty target collection are kept as isolated nodes and
        still listed in `tfs`. A string value is a single target.

        Args:
            regulons: Mapping from TF identifier to iterable of target identifiers

        Returns:
            RegulatoryGraph
        """
        edges: List[Tuple[Any, Any]] = []
        for tf, targets in regulons.items():
            if isinstance(targets, str):
                targets = [targets]
            edges.extend((tf, target) for target in targets)

        return cls(edges, declared_tfs=regulons.keys())

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        source_column: str = "TF",
        target_column: str = "target",
        weight_column: Optional[str] = None,
    ) -> "RegulatoryGraph":
        """
        Build a graph from a DataFrame of edges.

        Args:
            df: DataFrame with one edge per row
            source_column: Column holding regulator identifiers
            target_column: Column holding target identifiers
            weight_column: Optional column with edge weights (kept, not used for scoring)

        Returns:
            RegulatoryGraph
        """
        for column in (source_column, target_column):
            if column not in df.columns:
                raise ValueError(f"Missing edge column: {column}")

        if weight_column is not None and weight_column in df.columns:
            records = zip(df[source_column], df[target_column], df[weight_column])
        else:
            records = zip(df[source_column], df[target_column])

        graph = cls(records)
        logger.debug(f"Built regulatory graph from {len(df)} rows: {graph.n_nodes} nodes, {graph.n_edges} edges")
        return graph

    @property
    def graph(self) -> nx.DiGraph:
        """Access underlying (frozen) NetworkX graph."""
        return self._graph

    @property
    def nodes(self) -> List[str]:
        return list(self._graph.nodes())

    @property
    def regulators(self) -> List[str]:
        """Nodes with at least one outgoing edge, in insertion order."""
        return [n for n in self._graph.nodes() if self._graph.out_degree(n) > 0]

    @property
    def tfs(self) -> List[str]:
        """Regulators plus TFs declared with an empty regulon, in insertion order."""
        return [
            n for n in self._graph.nodes()
            if n in self._declared_tfs or self._graph.out_degree(n) > 0
        ]

    @property
    def n_nodes(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def n_edges(self) -> int:
        return self._graph.number_of_edges()

    def contains(self, node: str) -> bool:
        """Check whether a node appears in the graph."""
        return self._graph.has_node(node)

    def __contains__(self, node: object) -> bool:
        return self._graph.has_node(node)

    def __len__(self) -> int:
        return self.n_nodes

    def targets_of(self, node: str) -> FrozenSet[str]:
        """Targets regulated by a node (empty if none or unknown)."""
        if not self._graph.has_node(node):
            return frozenset()
        return frozenset(self._graph.successors(node))

    def sources_of(self, node: str) -> FrozenSet[str]:
        """Regulators of a node (empty if none or unknown)."""
        if not self._graph.has_node(node):
            return frozenset()
        return frozenset(self._graph.predecessors(node))

    def successors(self, node: str) -> Tuple[str, ...]:
        """Targets of a node in edge insertion order."""
        if not self._graph.has_node(node):
            return ()
        return tuple(self._graph.successors(node))

    def predecessors(self, node: str) -> Tuple[str, ...]:
        """Regulators of a node in edge insertion order."""
        if not self._graph.has_node(node):
            return ()
        return tuple(self._graph.predecessors(node))

    def edges(self) -> Iterator[Tuple[str, str]]:
        """Iterate over (source, target) pairs."""
        return iter(self._graph.edges())

    def to_gene_sets(self) -> Dict[str, Set[str]]:
        """Regulons as gene sets: TF -> set of targets."""
        return {tf: set(self._graph.successors(tf)) for tf in self.regulators}

    def get_stats(self) -> RegulatoryGraphStats:
        """Compute summary statistics."""
        n_regulators = len(self.regulators)
        return RegulatoryGraphStats(
            n_nodes=self.n_nodes,
            n_edges=self.n_edges,
            n_regulators=n_regulators,
            n_self_loops=nx.number_of_selfloops(self._graph),
            mean_out_degree=self.n_edges / n_regulators if n_regulators else 0.0,
        )

    def __repr__(self) -> str:
        return f"RegulatoryGraph(n_nodes={self.n_nodes}, n_edges={self.n_edges})"


GraphLike = Union[RegulatoryGraph, Mapping[str, Iterable[str]]]


def as_regulatory_graph(graph: GraphLike) -> RegulatoryGraph:
    """Accept either a RegulatoryGraph or a TF -> targets mapping."""
    if isinstance(graph, RegulatoryGraph):
        return graph
    return RegulatoryGraph.from_mapping(graph)
