from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from semnav.api.endpoints import get_endpoints_router
from semnav.pathfinding.engine import Pathfinder
from semnav.registry.base import AddressRegistry
from semnav.relations.index import RelationIndex


def create_app(
    *,
    registry: AddressRegistry,
    relation_index: RelationIndex,
    pathfinder: Pathfinder,
) -> FastAPI:
    """Create FastAPI app."""
    app = FastAPI(title="semnav")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        router=get_endpoints_router(
            registry=registry, relation_index=relation_index, pathfinder=pathfinder
        )
    )

    return app
