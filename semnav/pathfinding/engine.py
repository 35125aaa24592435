"""Pathfinder: cached, personalized path queries between two addresses."""

from typing import Callable, TypeVar, get_args

from loguru import logger

from semnav.cache.base import PathCache
from semnav.cache.lru import LRUPathCache
from semnav.config import settings
from semnav.domain.address import Address
from semnav.domain.path import Path, PathStep, PathStyle
from semnav.domain.relationships import RelationEdge
from semnav.domain.user import UserContext
from semnav.errors import InvalidLimit, PathfindingDegraded
from semnav.pathfinding.evaluation import PathEvaluator
from semnav.pathfinding.graph_builder import PathGraph, PathGraphBuilder
from semnav.pathfinding.personalization import personalize_for_user
from semnav.pathfinding.scoring import rank_paths
from semnav.pathfinding.search import find_edge_paths
from semnav.registry.base import AddressRegistry
from semnav.relations import analyzer
from semnav.relations.index import RelationIndex

T = TypeVar("T")

PATH_STYLES = get_args(PathStyle)

FALLBACK_ROUTE = "basic-research-path"


class Pathfinder:
    """Finds ranked paths between two registered addresses.

    A query moves through Requested -> CacheCheck, then either CacheHit, or
    CacheMiss -> GraphBuild -> Search -> Evaluate -> CachePut, and finally
    Personalize -> Rank -> Done. Every candidate is personalized before ranking,
    so the user's skill gap takes part in the order. A failure in any stage ends
    the query in Failed and the fallback path set is returned instead.
    """

    def __init__(
        self,
        registry: AddressRegistry,
        relation_index: RelationIndex | None = None,
        cache: PathCache | None = None,
        graph_builder: PathGraphBuilder | None = None,
        evaluator: PathEvaluator | None = None,
        max_path_length: int | None = None,
        max_search_paths: int | None = None,
    ):
        """Initialize the pathfinder.

        Args:
            registry: Registry holding the artifacts
            relation_index: Source of candidate edges. Defaults to one over the registry.
            cache: Path cache. Defaults to an LRU cache sized from settings.
            graph_builder: Subgraph builder. Defaults to one over the relation index.
            evaluator: Path evaluator. Defaults to one over the registry.
            max_path_length: Maximum number of nodes on a path
            max_search_paths: Maximum number of paths enumerated per search
        """
        self.registry = registry
        self.relation_index = relation_index or RelationIndex(registry)
        self.cache = cache if cache is not None else LRUPathCache()
        self.graph_builder = graph_builder or PathGraphBuilder(self.relation_index)
        self.evaluator = evaluator or PathEvaluator(registry)
        self.max_path_length = max_path_length or settings.max_path_length
        self.max_search_paths = max_search_paths or settings.max_search_paths

    def find_paths(
        self,
        start: str | Address,
        goal: str | Address,
        *,
        user_context: UserContext | None = None,
        style: PathStyle = "balanced",
        max_paths: int = 5,
        force_refresh: bool = False,
    ) -> list[Path]:
        """Find ranked paths from start to goal.

        Args:
            start: Start address in canonical or short form
            goal: Goal address in canonical or short form
            user_context: Optional user context used for personalization
            style: balanced, fastest, safest, learning or exploratory
            max_paths: Maximum number of paths returned
            force_refresh: Skip the cache lookup; the fresh result is still cached

        Returns:
            Up to max_paths paths, an empty list when no path exists, or the
            fallback path set when a stage failed

        Raises:
            InvalidAddress: If start or goal is malformed
            InvalidLimit: If max_paths is not a strictly positive integer
            ValueError: If style is unknown
        """
        start_address = self.registry.normalize(start)
        goal_address = self.registry.normalize(goal)
        if isinstance(max_paths, bool) or not isinstance(max_paths, int) or max_paths <= 0:
            raise InvalidLimit(max_paths)
        if style not in PATH_STYLES:
            raise ValueError(f"Unknown path style {style!r}, expected one of {PATH_STYLES}")

        query = f"{start_address.uri} -> {goal_address.uri}"
        logger.debug(f"Requested: {query} ({style})")

        if start_address not in self.registry or goal_address not in self.registry:
            logger.info(f"No path for {query}: start or goal is not registered")
            return []

        try:
            candidates = self._candidates(start_address, goal_address, force_refresh)
            if user_context is not None:
                candidates = self._stage(
                    "Personalize", personalize_for_user, candidates, user_context
                )
            paths = self._stage("Rank", rank_paths, candidates, style, max_paths)
        except PathfindingDegraded as e:
            logger.warning(f"Failed: {query}: {e}. Returning fallback paths")
            return self.fallback_paths(start_address, goal_address)

        logger.info(f"Done: {query}, {len(paths)} paths")
        return paths

    def _candidates(self, start: Address, goal: Address, force_refresh: bool) -> list[Path]:
        """User-independent candidate paths, from the cache or a fresh search."""
        logger.debug(f"CacheCheck: {start.uri} -> {goal.uri}")
        if not force_refresh:
            cached = self._stage("CacheCheck", self.cache.get, start, goal)
            if cached is not None:
                logger.debug(f"CacheHit: {len(cached)} candidate paths")
                return cached

        logger.debug("CacheMiss")
        graph = self._stage("GraphBuild", self.graph_builder.build, start, goal)
        edge_paths = self._stage("Search", self._search, graph)
        logger.debug(f"Search: {len(edge_paths)} paths found")
        candidates = self._stage("Evaluate", self.evaluator.evaluate, graph, edge_paths)
        self._stage("CachePut", self.cache.put, start, goal, candidates)
        return candidates

    def _search(self, graph: PathGraph) -> list[list[RelationEdge]]:
        return find_edge_paths(
            graph,
            self.max_path_length,
            self.max_search_paths,
            self.evaluator.edge_cost_function(),
        )

    @staticmethod
    def _stage(name: str, func: Callable[..., T], *args) -> T:
        try:
            return func(*args)
        except Exception as e:
            raise PathfindingDegraded(name, e) from e

    def fallback_paths(self, start: str | Address, goal: str | Address) -> list[Path]:
        """The basic research path suggested when pathfinding fails."""
        start_address = self.registry.normalize(start)
        goal_address = self.registry.normalize(goal)
        steps = [
            ("research-goal", f"Research how others have achieved: {goal_address.slug}"),
            ("identify-experts", "Find experts or mentors in this area"),
            ("create-learning-plan", "Create a basic learning and action plan"),
        ]
        return [
            Path(
                route=FALLBACK_ROUTE,
                start=start_address,
                goal=goal_address,
                steps=[
                    PathStep(
                        sequence=sequence,
                        address=Address(
                            namespace=self.registry.normalizer.default_namespace,
                            type="action",
                            slug=slug,
                        ),
                        title=slug.replace("-", " ").capitalize(),
                        description=description,
                        skill_requirement=analyzer.skill_requirement("action"),
                    )
                    for sequence, (slug, description) in enumerate(steps, start=1)
                ],
                is_fallback=True,
            )
        ]

    def invalidate(self, start: str | Address, goal: str | Address) -> bool:
        """Drop the cached paths of a (start, goal) pair."""
        return self.cache.invalidate(self.registry.normalize(start), self.registry.normalize(goal))

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Path cache cleared")
