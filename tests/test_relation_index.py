"""Tests for candidate edge discovery and edge weighting."""

import pytest

from semnav.domain.artifact import ArtifactDocument
from semnav.domain.relationships import QueryContext
from semnav.domain.user import UserContext
from semnav.errors import InvalidAddress, InvalidLimit
from semnav.registry.local_registry import LocalAddressRegistry
from semnav.relations import analyzer
from semnav.relations.extractor import ReferenceExtractor
from semnav.relations.index import RelationIndex


@pytest.fixture
def ml_registry(registry: LocalAddressRegistry) -> LocalAddressRegistry:
    """Artifacts that share vocabulary but do not reference each other."""
    documents = {
        "concept:gradient-descent": (
            "Gradient descent optimization with momentum and learning rate"
        ),
        "skill:tuning-optimizers": (
            "Tuning optimization momentum learning schedules for gradient methods"
        ),
        "action:train-model": (
            "Train model using gradient optimization and a learning rate schedule"
        ),
        "resource:optimizer-paper": "A paper about momentum",
        "note:grocery-list": "Apples, flour, butter, sugar",
    }
    for address, content in documents.items():
        registry.register(
            address,
            ArtifactDocument(
                source_ref=f"{address}.md",
                title=address.split(":")[1],
                type=address.split(":")[0],
                content=content,
            ),
        )
    return registry


def test_explicit_reference_edge(relation_index: RelationIndex) -> None:
    edges = relation_index.candidate_edges_from("action:apple-pie-recipe")

    assert len(edges) == 1
    edge = edges[0]
    assert edge.to_address.short == "skill:pie-crust-skill"
    assert edge.reason_kind == "explicit-reference"
    assert edge.weights.semantic_similarity == 0.9
    assert edge.weights.causal_strength == 0.8
    assert edge.weights.temporal_dependency == 0.3
    assert edge.weights.type_compatibility == 0.5
    assert edge.match_count == 10
    assert edge.score == 10.0
    assert "[[skill:pie-crust-skill]]" in edge.context


def test_reference_with_label_is_resolved(relation_index: RelationIndex) -> None:
    edges = relation_index.candidate_edges_from("skill:pie-crust-skill")

    assert [edge.to_address.short for edge in edges] == ["outcome:baked-pie"]


def test_candidate_edges_into_returns_backlinks(relation_index: RelationIndex) -> None:
    edges = relation_index.candidate_edges_into("vault://outcome/baked-pie")

    assert len(edges) == 1
    assert edges[0].from_address.short == "skill:pie-crust-skill"
    assert edges[0].to_address.short == "outcome:baked-pie"


def test_pathfinding_mode_uses_composite_score(relation_index: RelationIndex) -> None:
    context = QueryContext(pathfinding_mode=True)

    edge = relation_index.candidate_edges_from("action:apple-pie-recipe", 5, context)[0]

    # 0.3 * 0.9 + 0.4 * 0.8 + 0.2 * 0 + 0.1 * 0.5
    assert edge.score == pytest.approx(0.64)


def test_composite_score_includes_skill_match(relation_index: RelationIndex) -> None:
    context = QueryContext(pathfinding_mode=True, user_context=UserContext(skill_level=0.8))

    edge = relation_index.candidate_edges_from("action:apple-pie-recipe", 5, context)[0]

    # The target is a skill (requirement 0.8), so the skill match is perfect
    assert edge.score == pytest.approx(0.84)


def test_domain_skill_overrides_overall_level() -> None:
    user = UserContext(skill_level=0.1, domain_skills={"skill": 0.8})

    assert user.skill_for("skill") == 0.8
    assert user.skill_for("action") == 0.1


def test_similarity_edges(ml_registry: LocalAddressRegistry) -> None:
    index = RelationIndex(ml_registry)

    edges = index.candidate_edges_from("concept:gradient-descent", limit=10)

    targets = {edge.to_address.short: edge for edge in edges}
    assert set(targets) == {"skill:tuning-optimizers", "action:train-model"}
    tuning = targets["skill:tuning-optimizers"]
    assert tuning.reason_kind == "content-similarity"
    # gradient, optimization, momentum, learning
    assert tuning.match_count == 4
    assert tuning.weights.semantic_similarity == pytest.approx(0.4)
    assert tuning.weights.causal_strength == 0.4
    assert tuning.weights.temporal_dependency == 0.2
    assert tuning.weights.type_compatibility == 0.8
    assert tuning.context == ""


def test_two_shared_tokens_are_not_enough(ml_registry: LocalAddressRegistry) -> None:
    index = RelationIndex(ml_registry)

    edges = index.candidate_edges_from("resource:optimizer-paper", limit=10)

    assert edges == []


def test_limit_bounds_and_ordering(ml_registry: LocalAddressRegistry) -> None:
    index = RelationIndex(ml_registry)

    edges = index.candidate_edges_from("concept:gradient-descent", limit=1)
    all_edges = index.candidate_edges_from("concept:gradient-descent", limit=10)

    assert len(edges) == 1
    assert [edge.score for edge in all_edges] == sorted(
        (edge.score for edge in all_edges), reverse=True
    )
    assert edges[0] == all_edges[0]


@pytest.mark.parametrize("limit", [0, -3, 1.5, True, "5"])
def test_invalid_limit_raises(relation_index: RelationIndex, limit: object) -> None:
    with pytest.raises(InvalidLimit):
        relation_index.candidate_edges_from("action:apple-pie-recipe", limit)
    with pytest.raises(InvalidLimit):
        relation_index.candidate_edges_into("outcome:baked-pie", limit)


def test_unknown_address_has_no_edges(relation_index: RelationIndex) -> None:
    assert relation_index.candidate_edges_from("skill:unknown") == []
    assert relation_index.candidate_edges_into("skill:unknown") == []


def test_malformed_address_raises(relation_index: RelationIndex) -> None:
    with pytest.raises(InvalidAddress):
        relation_index.candidate_edges_from("not an address")


def test_newly_registered_artifacts_are_picked_up(
    ml_registry: LocalAddressRegistry,
) -> None:
    index = RelationIndex(ml_registry)
    assert index.candidate_edges_from("resource:optimizer-paper", limit=10) == []

    ml_registry.register(
        "concept:momentum-methods",
        ArtifactDocument(
            source_ref="momentum.md",
            title="Momentum methods",
            type="concept",
            content="A paper about momentum",
        ),
    )

    edges = index.candidate_edges_from("resource:optimizer-paper", limit=10)
    assert [edge.to_address.short for edge in edges] == ["concept:momentum-methods"]


def test_unresolved_reference_produces_no_edge(registry: LocalAddressRegistry) -> None:
    registry.register(
        "note:draft",
        ArtifactDocument(source_ref="draft.md", title="Draft", content="See [[skill:missing]]."),
    )
    index = RelationIndex(registry)

    assert index.candidate_edges_from("note:draft") == []


def test_self_reference_is_ignored(registry: LocalAddressRegistry) -> None:
    registry.register(
        "note:loop",
        ArtifactDocument(source_ref="loop.md", title="Loop", content="Back to [[note:loop]]."),
    )

    assert RelationIndex(registry).candidate_edges_from("note:loop") == []


def test_explicit_edges(relation_index: RelationIndex) -> None:
    pairs = [
        (edge.from_address.short, edge.to_address.short)
        for edge in relation_index.explicit_edges()
    ]

    assert pairs == [
        ("action:apple-pie-recipe", "skill:pie-crust-skill"),
        ("skill:pie-crust-skill", "outcome:baked-pie"),
    ]


def test_validate_links(relation_index: RelationIndex) -> None:
    results = relation_index.validate_links(
        "Use [[skill:pie-crust-skill]], [[skill:missing]] and [[Plain Title]]."
    )

    assert [(result.reference, result.valid) for result in results] == [
        ("skill:pie-crust-skill", True),
        ("skill:missing", False),
        ("Plain Title", False),
    ]
    assert results[0].target.title == "Pie Crust Skill"
    assert results[1].address.short == "skill:missing"
    assert results[2].address is None


def test_extractor_deduplicates_references(registry: LocalAddressRegistry) -> None:
    extractor = ReferenceExtractor(registry.normalizer)

    references = extractor.extract_references(
        "[[skill:crust]] then [[vault://skill/crust|again]] and [[not valid]]"
    )

    assert [(address.short, raw) for address, raw in references] == [("skill:crust", "skill:crust")]


def test_tokenize_keeps_long_tokens_only(registry: LocalAddressRegistry) -> None:
    tokens = ReferenceExtractor(registry.normalizer).tokenize("The Pie crust, and BAKING time!")

    assert tokens == frozenset({"crust", "baking", "time"})


def test_type_compatibility_table() -> None:
    assert analyzer.type_compatibility("skill", "action") == 0.9
    assert analyzer.type_compatibility("action", "outcome") == 0.9
    assert analyzer.type_compatibility("outcome", "action") == 0.5


def test_skill_requirements() -> None:
    assert analyzer.skill_requirement("action") == 0.6
    assert analyzer.skill_requirement("skill") == 0.8
    assert analyzer.skill_requirement("concept") == 0.3
    assert analyzer.skill_requirement("resource") == 0.2
    assert analyzer.skill_requirement("outcome") == 0.5
    assert analyzer.calculate_skill_match("skill", 0.5) == pytest.approx(0.7)
