"""Analysis functions for edge weighting, skill matching and relation context."""

import re

import numpy as np

from semnav.domain.relationships import EdgeWeights, QueryContext, RelationEdge

TYPE_COMPATIBILITY = {
    ("concept", "skill"): 0.8,
    ("skill", "action"): 0.9,
    ("action", "outcome"): 0.9,
    ("resource", "action"): 0.7,
    ("goal", "strategy"): 0.8,
    ("strategy", "tactic"): 0.9,
}
DEFAULT_TYPE_COMPATIBILITY = 0.5

SKILL_REQUIREMENTS = {
    "action": 0.6,
    "skill": 0.8,
    "concept": 0.3,
    "resource": 0.2,
}
DEFAULT_SKILL_REQUIREMENT = 0.5

# semantic similarity, causal strength, skill match, type compatibility
PATHFINDING_SCORE_COEFFICIENTS = np.array([0.3, 0.4, 0.2, 0.1])

EXPLICIT_REFERENCE_MATCH_COUNT = 10


def type_compatibility(source_type: str, target_type: str) -> float:
    """Look up how naturally one artifact type leads to another."""
    return TYPE_COMPATIBILITY.get((source_type, target_type), DEFAULT_TYPE_COMPATIBILITY)


def skill_requirement(artifact_type: str) -> float:
    """Skill required to work through an artifact of the given type."""
    return SKILL_REQUIREMENTS.get(artifact_type, DEFAULT_SKILL_REQUIREMENT)


def calculate_skill_match(artifact_type: str, user_skill_level: float) -> float:
    """How well a user's skill level matches the requirement (1.0 is a perfect match)."""
    return 1.0 - abs(user_skill_level - skill_requirement(artifact_type))


def explicit_reference_weights(source_type: str, target_type: str) -> EdgeWeights:
    return EdgeWeights(
        semantic_similarity=0.9,
        causal_strength=0.8,
        temporal_dependency=0.3,
        type_compatibility=type_compatibility(source_type, target_type),
    )


def content_similarity_weights(
    overlap_count: int, source_type: str, target_type: str
) -> EdgeWeights:
    return EdgeWeights(
        semantic_similarity=min(overlap_count / 10, 1.0),
        causal_strength=0.4,
        temporal_dependency=0.2,
        type_compatibility=type_compatibility(source_type, target_type),
    )


def calculate_pathfinding_score(edge: RelationEdge, context: QueryContext | None) -> float:
    """Composite weighted score of an edge for pathfinding.

    Args:
        edge: Candidate edge
        context: Query context carrying the optional user context

    Returns:
        Weighted sum of semantic similarity, causal strength, skill match
        (only when a skill level is known) and type compatibility
    """
    skill_match = 0.0
    user_context = context.user_context if context else None
    if user_context is not None:
        user_skill = user_context.skill_for(edge.to_address.type)
        if user_skill is not None:
            skill_match = calculate_skill_match(edge.to_address.type, user_skill)

    features = np.array(
        [
            edge.weights.semantic_similarity,
            edge.weights.causal_strength,
            skill_match,
            edge.weights.type_compatibility,
        ]
    )
    return float(np.dot(features, PATHFINDING_SCORE_COEFFICIENTS))


def extract_relationship_context(content: str, reference: str, context_chars: int = 100) -> str:
    """Extract surrounding context for a reference mention.

    Args:
        content: Full content of the artifact
        reference: Raw reference text being looked for
        context_chars: Number of characters before/after to include

    Returns:
        Context string around the first mention
    """
    match = re.search(re.escape(reference), content, re.IGNORECASE)
    if not match:
        return ""

    start = max(0, match.start() - context_chars)
    end = min(len(content), match.end() + context_chars)

    context = content[start:end].strip()

    # Collapse newlines and runs of spaces
    context = re.sub(r"\s+", " ", context)

    return context
