"""Bounded cheapest-first search over a path graph."""

import heapq
from itertools import count
from typing import Callable

from semnav.domain.relationships import RelationEdge
from semnav.pathfinding.graph_builder import PathGraph


def score_cost(edge: RelationEdge) -> float:
    """One unit per hop, plus a penalty for weakly scored edges."""
    return 2.0 - min(max(edge.score, 0.0), 1.0)


def find_edge_paths(
    graph: PathGraph,
    max_length: int,
    max_paths: int,
    edge_cost: Callable[[RelationEdge], float] | None = None,
) -> list[list[RelationEdge]]:
    """Enumerate cycle-free paths from graph.start to graph.goal, cheapest first.

    Partial paths are expanded in order of cumulative cost, so when the search
    stops at `max_paths` only the most expensive paths are left out. A node
    already on a partial path is never revisited.

    Args:
        graph: Bounded subgraph to search
        max_length: Maximum number of nodes on a path
        max_paths: Stop after this many complete paths
        edge_cost: Non-negative traversal cost of an edge. Defaults to score_cost.

    Returns:
        Edge sequences of the complete paths, ascending by cumulative cost. A
        single empty sequence when start and goal are the same node.
    """
    if graph.start == graph.goal:
        return [[]]

    edge_cost = edge_cost or score_cost
    adjacency = graph.adjacency()
    results: list[list[RelationEdge]] = []
    tie = count()
    frontier: list[tuple[float, int, tuple[RelationEdge, ...]]] = [(0.0, next(tie), ())]

    while frontier and len(results) < max_paths:
        cost, _, edges = heapq.heappop(frontier)
        current = edges[-1].to_address if edges else graph.start
        if current == graph.goal:
            results.append(list(edges))
            continue
        if len(edges) + 1 >= max_length:
            continue

        on_path = {graph.start, *(edge.to_address for edge in edges)}
        for edge in adjacency.get(current, []):
            if edge.to_address in on_path:
                continue
            heapq.heappush(frontier, (cost + edge_cost(edge), next(tie), (*edges, edge)))

    return results
