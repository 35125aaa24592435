"""Lazy derivation of candidate relation edges from the registered artifacts."""

import threading

from loguru import logger

from semnav.config import settings
from semnav.domain.address import Address
from semnav.domain.artifact import ArtifactRecord
from semnav.domain.relationships import LinkValidation, QueryContext, RelationEdge
from semnav.errors import InvalidLimit
from semnav.registry.base import AddressRegistry

from . import analyzer
from .extractor import ReferenceExtractor


class RelationIndex:
    """Derives candidate edges between addressed artifacts on request.

    Edges are never stored; they are recomputed from the current record set for
    every query. Only the token sets used for similarity are memoized, keyed by
    address and content so a record read before a registry change never
    stands in for the current one. The memo is dropped whenever the registry
    version changes.
    """

    def __init__(
        self,
        registry: AddressRegistry,
        extractor: ReferenceExtractor | None = None,
    ):
        """Initialize the index.

        Args:
            registry: Registry holding the artifact records
            extractor: Reference/token extractor. Defaults to one sharing the
                registry's normalizer.
        """
        self.registry = registry
        self.extractor = extractor or ReferenceExtractor(registry.normalizer)
        self._token_cache: dict[tuple[Address, str], frozenset[str]] = {}
        self._token_cache_version = -1
        self._token_lock = threading.Lock()

    def candidate_edges_from(
        self,
        address: str | Address,
        limit: int | None = None,
        context: QueryContext | None = None,
    ) -> list[RelationEdge]:
        """Get ranked outgoing candidate edges of an artifact.

        Args:
            address: Source address in canonical or short form
            limit: Maximum number of edges, a strictly positive integer
            context: Query context; pathfinding mode switches to the composite score

        Returns:
            At most `limit` edges, sorted descending by score

        Raises:
            InvalidLimit: If limit is not a strictly positive integer
            InvalidAddress: If the address is malformed
        """
        limit = self._validate_limit(limit)
        source = self.registry.resolve(self.registry.normalize(address))
        if source is None:
            return []

        records = self.registry.records()
        by_address = {record.address: record for record in records}
        edges = self._explicit_edges_from(source, by_address)
        for other in records:
            if other.address == source.address:
                continue
            edge = self._similarity_edge(source, other)
            if edge is not None:
                edges.append(edge)

        return self._rank(edges, limit, context)

    def candidate_edges_into(
        self,
        address: str | Address,
        limit: int | None = None,
        context: QueryContext | None = None,
    ) -> list[RelationEdge]:
        """Get ranked incoming candidate edges: backlinks and similar artifacts.

        Same contract as candidate_edges_from, with every edge ending at `address`.
        """
        limit = self._validate_limit(limit)
        target = self.registry.resolve(self.registry.normalize(address))
        if target is None:
            return []

        edges = []
        for other in self.registry.records():
            if other.address == target.address:
                continue
            for referenced, raw in self.extractor.extract_references(other.content):
                if referenced == target.address:
                    edges.append(self._explicit_edge(other, target, raw))
                    break
            edge = self._similarity_edge(other, target)
            if edge is not None:
                edges.append(edge)

        return self._rank(edges, limit, context)

    def explicit_edges(self) -> list[RelationEdge]:
        """All explicit-reference edges between registered artifacts."""
        records = self.registry.records()
        by_address = {record.address: record for record in records}
        edges = []
        for record in records:
            edges.extend(self._explicit_edges_from(record, by_address))
        return edges

    def validate_links(self, content: str) -> list[LinkValidation]:
        """Check every bracketed reference in a text against the registry.

        Args:
            content: Text containing [[...]] references

        Returns:
            One entry per bracketed reference, in order of appearance
        """
        results = []
        for raw in self.extractor.extract_bracketed(content):
            address = None
            target = None
            if self.registry.normalizer.is_valid(raw):
                address = self.registry.normalize(raw)
                target = self.registry.resolve(address)
            results.append(
                LinkValidation(
                    reference=raw, address=address, valid=target is not None, target=target
                )
            )
        return results

    def _explicit_edges_from(
        self, source: ArtifactRecord, by_address: dict[Address, ArtifactRecord]
    ) -> list[RelationEdge]:
        edges = []
        for referenced, raw in self.extractor.extract_references(source.content):
            if referenced == source.address:
                continue
            target = by_address.get(referenced)
            if target is None:
                logger.warning(f"Could not resolve reference {raw} in {source.address.uri}")
                continue
            edges.append(self._explicit_edge(source, target, raw))
        return edges

    @staticmethod
    def _explicit_edge(source: ArtifactRecord, target: ArtifactRecord, raw: str) -> RelationEdge:
        return RelationEdge(
            from_address=source.address,
            to_address=target.address,
            reason_kind="explicit-reference",
            weights=analyzer.explicit_reference_weights(source.address.type, target.address.type),
            match_count=analyzer.EXPLICIT_REFERENCE_MATCH_COUNT,
            context=analyzer.extract_relationship_context(source.content, raw),
        )

    def _similarity_edge(
        self, source: ArtifactRecord, target: ArtifactRecord
    ) -> RelationEdge | None:
        """Propose a similarity edge when more than two long tokens are shared."""
        overlap = len(self._tokens(source) & self._tokens(target))
        if overlap <= 2:
            return None
        return RelationEdge(
            from_address=source.address,
            to_address=target.address,
            reason_kind="content-similarity",
            weights=analyzer.content_similarity_weights(
                overlap, source.address.type, target.address.type
            ),
            match_count=overlap,
        )

    def _tokens(self, record: ArtifactRecord) -> frozenset[str]:
        key = (record.address, record.content)
        with self._token_lock:
            if self._token_cache_version != self.registry.version:
                self._token_cache = {}
                self._token_cache_version = self.registry.version
            tokens = self._token_cache.get(key)
            if tokens is None:
                tokens = self.extractor.tokenize(record.content)
                self._token_cache[key] = tokens
        return tokens

    @staticmethod
    def _validate_limit(limit: int | None) -> int:
        if limit is None:
            return settings.default_relation_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise InvalidLimit(limit)
        return limit

    @staticmethod
    def _rank(
        edges: list[RelationEdge], limit: int, context: QueryContext | None
    ) -> list[RelationEdge]:
        if context is not None and context.pathfinding_mode:
            scored = [
                edge.model_copy(
                    update={"score": analyzer.calculate_pathfinding_score(edge, context)}
                )
                for edge in edges
            ]
        else:
            scored = [edge.model_copy(update={"score": float(edge.match_count)}) for edge in edges]

        scored.sort(key=lambda edge: edge.score, reverse=True)
        return scored[:limit]
