"""Relationship domain models."""

from typing import Literal

from pydantic import BaseModel, Field

from semnav.domain.address import Address
from semnav.domain.artifact import ArtifactRecord
from semnav.domain.user import UserContext

ReasonKind = Literal["explicit-reference", "content-similarity"]


class EdgeWeights(BaseModel):
    """Multi-dimensional weight of a relation edge."""

    semantic_similarity: float = Field(ge=0.0, le=1.0)
    causal_strength: float = Field(ge=0.0, le=1.0)
    temporal_dependency: float = Field(ge=0.0, le=1.0)
    type_compatibility: float = Field(default=0.5, ge=0.0, le=1.0)

    model_config = {"frozen": True}


class RelationEdge(BaseModel):
    """Directed, weighted candidate link between two addresses."""

    from_address: Address
    to_address: Address
    reason_kind: ReasonKind
    weights: EdgeWeights
    match_count: int = 0  # 10 for references, token overlap count otherwise
    score: float = 0.0  # ordering score assigned by the query that produced the edge
    context: str = ""  # surrounding text of an explicit reference

    model_config = {"frozen": True}


class QueryContext(BaseModel):
    """Options for relation queries."""

    pathfinding_mode: bool = False
    user_context: UserContext | None = None


class LinkValidation(BaseModel):
    """Outcome of checking one bracketed reference against the registry."""

    reference: str
    address: Address | None = None
    valid: bool = False
    target: ArtifactRecord | None = None
