"""
Bounded Traversal

Depth-limited, cycle-safe walks over a regulatory graph in either direction,
returning both the reached nodes and the edges crossed on the way. The
downstream/upstream query functions are thin wrappers over this walk.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple
import logging

import pandas as pd

from .graph import GraphLike, as_regulatory_graph

logger = logging.getLogger(__name__)


class TraversalDirection(Enum):
    """Direction of a graph walk."""

    FORWARD = "forward"  # TF -> targets (downstream)
    REVERSE = "reverse"  # target -> regulating TFs (upstream)


@dataclass(frozen=True)
class TraversalResult:
    """
    Nodes and edges discovered by a bounded traversal.

    Attributes:
        nodes: Reached node identifiers (the start node only if reached via a cycle)
        edges: Unique (source, target) pairs, always oriented TF -> target
    """

    nodes: FrozenSet[str] = field(default_factory=frozenset)
    edges: FrozenSet[Tuple[str, str]] = field(default_factory=frozenset)

    def __iter__(self) -> Iterator[FrozenSet]:
        # Allows `nodes, edges = result`
        yield self.nodes
        yield self.edges

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def edges_frame(self) -> pd.DataFrame:
        """Edges as a two-column DataFrame (TF, Target), sorted for stable output."""
        return pd.DataFrame(sorted(self.edges), columns=["TF", "Target"])


def bounded_traversal(
    graph: GraphLike,
    start: str,
    depth: int,
    direction: TraversalDirection = TraversalDirection.FORWARD,
    visited: Optional[Set[str]] = None,
    exclude_self_loops: bool = False,
    restrict_to: Optional[Iterable[str]] = None,
) -> TraversalResult:
    """
    Walk the graph from `start` for at most `depth` hops.

    A frame stops when its remaining depth is zero, its node was already
    visited, or it has no neighbours in `direction`. Otherwise the node is
    marked visited and its neighbours (intersected with `restrict_to` when
    given) are reached and expanded with one hop less.

    The visited set is shared by the whole walk, so a node expanded by an
    earlier branch is not expanded again by a later sibling branch even when
    it would be reached with more remaining depth. Frames are processed from
    an explicit stack in the same depth-first order a recursive walk would
    use, with neighbours taken in edge insertion order.

    Args:
        graph: RegulatoryGraph or TF -> targets mapping
        start: Root node identifier
        depth: Maximum number of hops (0 or less gives an empty result)
        direction: FORWARD for targets, REVERSE for regulators
        visited: Already-visited nodes; updated in place when chaining walks
        exclude_self_loops: Drop (X, X) edges from the edge set
        restrict_to: Only keep newly discovered neighbours in this set

    Returns:
        TraversalResult with reached nodes and crossed edges
    """
    graph = as_regulatory_graph(graph)
    if visited is None:
        visited = set()
    allowed: Optional[AbstractSet[str]] = frozenset(restrict_to) if restrict_to is not None else None
    forward = direction == TraversalDirection.FORWARD

    reached: Set[str] = set()
    edges: Set[Tuple[str, str]] = set()
    stack: List[Tuple[str, int]] = [(start, depth)]

    while stack:
        node, remaining = stack.pop()
        if remaining <= 0 or node in visited:
            continue

        neighbors = graph.successors(node) if forward else graph.predecessors(node)
        if not neighbors:
            continue

        visited.add(node)

        if allowed is not None:
            neighbors = tuple(n for n in neighbors if n in allowed)
            if not neighbors:
                continue

        for neighbor in neighbors:
            reached.add(neighbor)
            edge = (node, neighbor) if forward else (neighbor, node)
            if exclude_self_loops and edge[0] == edge[1]:
                continue
            edges.add(edge)

        # Reversed so the first neighbour is expanded first
        stack.extend((neighbor, remaining - 1) for neighbor in reversed(neighbors))

    return TraversalResult(nodes=frozenset(reached), edges=frozenset(edges))


def get_downstream(
    graph: GraphLike,
    tf: str,
    max_depth: int = 2,
    exclude_self_loops: bool = False,
    interest_set: Optional[Iterable[str]] = None,
) -> TraversalResult:
    """
    Genes regulated directly or indirectly by a TF.

    Args:
        graph: RegulatoryGraph or TF -> targets mapping
        tf: Transcription factor to start from
        max_depth: Levels of downstream regulation to explore
        exclude_self_loops: Drop self-regulatory edges (TF regulates itself)
        interest_set: Optional genes of interest (e.g. DEGs); targets outside it are not followed

    Returns:
        TraversalResult with downstream targets and TF -> Target edges
    """
    result = bounded_traversal(
        graph,
        tf,
        max_depth,
        direction=TraversalDirection.FORWARD,
        exclude_self_loops=exclude_self_loops,
        restrict_to=interest_set,
    )
    logger.debug(f"Downstream of {tf} (depth {max_depth}): {len(result.nodes)} targets, {len(result.edges)} edges")
    return result


def get_upstream(
    graph: GraphLike,
    gene: str,
    max_depth: int = 2,
    exclude_self_loops: bool = False,
    interest_set: Optional[Iterable[str]] = None,
) -> TraversalResult:
    """
    TFs that regulate a gene directly or indirectly.

    Note: `interest_set` filters the regulating TFs found at each hop, not
    the gene being regulated. With a DEG list this keeps only regulators
    that are themselves DEGs, which is probably not what a caller filtering
    "targets among DEGs" expects. The behaviour is kept as is pending a
    decision on the intended semantics.

    Args:
        graph: RegulatoryGraph or TF -> targets mapping
        gene: Gene to start from
        max_depth: Levels of upstream regulation to explore
        exclude_self_loops: Drop self-regulatory edges
        interest_set: Optional identifiers the regulating TFs are filtered against

    Returns:
        TraversalResult with upstream TFs and TF -> Target edges
    """
    result = bounded_traversal(
        graph,
        gene,
        max_depth,
        direction=TraversalDirection.REVERSE,
        exclude_self_loops=exclude_self_loops,
        restrict_to=interest_set,
    )
    logger.debug(f"Upstream of {gene} (depth {max_depth}): {len(result.nodes)} regulators, {len(result.edges)} edges")
    return result
