"""Relation discovery between addressed artifacts: references, similarity and edge weighting."""

from semnav.relations.extractor import ReferenceExtractor
from semnav.relations.index import RelationIndex

__all__ = [
    "ReferenceExtractor",
    "RelationIndex",
]
