import sys

from loguru import logger

from semnav.api import create_app
from semnav.cache.lru import LRUPathCache
from semnav.config import settings
from semnav.pathfinding.engine import Pathfinder
from semnav.registry.local_registry import LocalAddressRegistry
from semnav.relations.index import RelationIndex

logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

logger.info(f"Initializing semantic navigation for namespace {settings.default_namespace!r}")
registry = LocalAddressRegistry()
relation_index = RelationIndex(registry)
pathfinder = Pathfinder(
    registry,
    relation_index=relation_index,
    cache=LRUPathCache(settings.cache_max_entries),
)
app = create_app(
    registry=registry,
    relation_index=relation_index,
    pathfinder=pathfinder,
)
