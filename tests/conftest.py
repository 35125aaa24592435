import pytest
from fastapi.testclient import TestClient

from semnav.api import create_app
from semnav.cache.lru import LRUPathCache
from semnav.domain.artifact import ArtifactDocument
from semnav.pathfinding.engine import Pathfinder
from semnav.registry.local_registry import LocalAddressRegistry
from semnav.relations.index import RelationIndex


@pytest.fixture
def registry() -> LocalAddressRegistry:
    return LocalAddressRegistry()


@pytest.fixture
def pie_documents() -> dict[str, ArtifactDocument]:
    """Recipe -> crust skill -> baked pie, linked by bracketed references."""
    return {
        "action:apple-pie-recipe": ArtifactDocument(
            source_ref="recipes/apple-pie.md",
            title="Apple Pie Recipe",
            type="action",
            content="Start with [[skill:pie-crust-skill]] before anything else.",
        ),
        "skill:pie-crust-skill": ArtifactDocument(
            source_ref="skills/pie-crust.md",
            title="Pie Crust Skill",
            type="skill",
            content="Roll the dough, then bake toward [[outcome:baked-pie|the result]].",
        ),
        "outcome:baked-pie": ArtifactDocument(
            source_ref="outcomes/baked-pie.md",
            title="Baked Pie",
            type="outcome",
            content="A golden pie.",
        ),
    }


@pytest.fixture
def pie_registry(
    registry: LocalAddressRegistry, pie_documents: dict[str, ArtifactDocument]
) -> LocalAddressRegistry:
    for address, document in pie_documents.items():
        registry.register(address, document)
    return registry


@pytest.fixture
def relation_index(pie_registry: LocalAddressRegistry) -> RelationIndex:
    return RelationIndex(pie_registry)


@pytest.fixture
def path_cache() -> LRUPathCache:
    return LRUPathCache(max_entries=8)


@pytest.fixture
def pathfinder(
    pie_registry: LocalAddressRegistry,
    relation_index: RelationIndex,
    path_cache: LRUPathCache,
) -> Pathfinder:
    return Pathfinder(pie_registry, relation_index=relation_index, cache=path_cache)


@pytest.fixture
def test_client(
    pie_registry: LocalAddressRegistry,
    relation_index: RelationIndex,
    pathfinder: Pathfinder,
) -> TestClient:
    """Create test client over the apple pie registry."""
    app = create_app(registry=pie_registry, relation_index=relation_index, pathfinder=pathfinder)
    return TestClient(app)
