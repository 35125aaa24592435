"""Building bounded search subgraphs between a start and a goal address."""

from loguru import logger
from pydantic import BaseModel

from semnav.config import settings
from semnav.domain.address import Address
from semnav.domain.relationships import EdgeWeights, QueryContext, RelationEdge
from semnav.relations import analyzer
from semnav.relations.index import RelationIndex


class Bridge(BaseModel):
    """Intermediate node pairing a start-side and a goal-side candidate edge."""

    node: Address  # reached from the start
    via: Address  # leads into the goal
    connection_to_start: EdgeWeights
    connection_to_goal: EdgeWeights
    bridge_quality: float


class PathGraph(BaseModel):
    """Bounded weighted directed subgraph spanning a start and a goal."""

    start: Address
    goal: Address
    edges: list[RelationEdge] = []
    bridges: list[Bridge] = []  # sorted by descending bridge_quality

    def adjacency(self) -> dict[Address, list[RelationEdge]]:
        """Outgoing edges per node, best score first."""
        adjacency: dict[Address, list[RelationEdge]] = {}
        for edge in sorted(self.edges, key=lambda e: e.score, reverse=True):
            adjacency.setdefault(edge.from_address, []).append(edge)
        return adjacency

    def bridge_rank(self, nodes: list[Address]) -> int | None:
        """Rank of the best bridge among the interior nodes of a path, if any."""
        interior = set(nodes[1:-1])
        for rank, bridge in enumerate(self.bridges):
            if bridge.node in interior or bridge.via in interior:
                return rank
        return None


class PathGraphBuilder:
    """Builds bounded candidate subgraphs from the relation index."""

    def __init__(
        self,
        relation_index: RelationIndex,
        candidate_limit: int | None = None,
        bridge_threshold: float | None = None,
        full_graph_max_artifacts: int | None = None,
    ):
        """Initialize the builder.

        Args:
            relation_index: Source of candidate edges
            candidate_limit: Edges fetched on each side (start and goal)
            bridge_threshold: Minimum semantic similarity of both edges of a bridge
            full_graph_max_artifacts: Registries up to this size contribute their
                whole explicit edge set to the subgraph
        """
        self.relation_index = relation_index
        self.candidate_limit = candidate_limit or settings.candidate_limit
        self.bridge_threshold = (
            settings.bridge_threshold if bridge_threshold is None else bridge_threshold
        )
        self.full_graph_max_artifacts = (
            settings.full_graph_max_artifacts
            if full_graph_max_artifacts is None
            else full_graph_max_artifacts
        )

    def build(self, start: Address, goal: Address) -> PathGraph:
        """Assemble the subgraph for a (start, goal) query.

        Edges are ranked without user context so that the resulting graph, and
        every path searched on it, is the same for all users.

        Args:
            start: Start address
            goal: Goal address

        Returns:
            PathGraph with deduplicated edges and ranked bridges
        """
        context = QueryContext(pathfinding_mode=True)
        start_edges = self.relation_index.candidate_edges_from(start, self.candidate_limit, context)
        goal_edges = self.relation_index.candidate_edges_into(goal, self.candidate_limit, context)
        bridges = self._build_bridges(start, goal, start_edges, goal_edges)

        edges = start_edges + goal_edges
        if len(self.relation_index.registry) <= self.full_graph_max_artifacts:
            edges += [
                edge.model_copy(
                    update={"score": analyzer.calculate_pathfinding_score(edge, context)}
                )
                for edge in self.relation_index.explicit_edges()
            ]

        graph = PathGraph(start=start, goal=goal, edges=self._merge_edges(edges), bridges=bridges)
        logger.debug(
            f"Built path graph {start.uri} -> {goal.uri}: "
            f"{len(graph.edges)} edges, {len(graph.bridges)} bridges"
        )
        return graph

    def _build_bridges(
        self,
        start: Address,
        goal: Address,
        start_edges: list[RelationEdge],
        goal_edges: list[RelationEdge],
    ) -> list[Bridge]:
        """Pair start-side and goal-side candidates whose similarities both pass the threshold."""
        bridges = []
        for start_edge in start_edges:
            if start_edge.to_address == goal:
                continue
            for goal_edge in goal_edges:
                if goal_edge.from_address == start:
                    continue
                start_similarity = start_edge.weights.semantic_similarity
                goal_similarity = goal_edge.weights.semantic_similarity
                if (
                    start_similarity > self.bridge_threshold
                    and goal_similarity > self.bridge_threshold
                ):
                    bridges.append(
                        Bridge(
                            node=start_edge.to_address,
                            via=goal_edge.from_address,
                            connection_to_start=start_edge.weights,
                            connection_to_goal=goal_edge.weights,
                            bridge_quality=(start_similarity + goal_similarity) / 2,
                        )
                    )

        bridges.sort(key=lambda bridge: bridge.bridge_quality, reverse=True)
        return bridges

    @staticmethod
    def _merge_edges(edges: list[RelationEdge]) -> list[RelationEdge]:
        """Keep the best scored edge per (from, to) pair, in order of first appearance."""
        best: dict[tuple[Address, Address], RelationEdge] = {}
        for edge in edges:
            key = (edge.from_address, edge.to_address)
            if key not in best or edge.score > best[key].score:
                best[key] = edge
        return list(best.values())
