from typing import Literal

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse
from loguru import logger

from semnav.domain.artifact import ArtifactDocument
from semnav.domain.path import PathStyle
from semnav.domain.relationships import QueryContext
from semnav.domain.user import UserContext
from semnav.errors import InvalidAddress, InvalidLimit, RegistryExhausted
from semnav.pathfinding.engine import Pathfinder
from semnav.pathfinding.export import convert_to_markdown, export_path
from semnav.registry.base import AddressRegistry
from semnav.relations.index import RelationIndex


class ArtifactRegistration(ArtifactDocument):
    """Registration payload. Without an address one is generated from title and type."""

    address: str | None = None


def _user_context(skill_level: float | None) -> UserContext | None:
    if skill_level is None:
        return None
    try:
        return UserContext(skill_level=skill_level)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="skill_level must be within [0, 1]") from e


def _create_register_endpoint(registry: AddressRegistry):
    """Create the artifact registration endpoint handler."""

    async def register_artifact(registration: ArtifactRegistration):
        document = ArtifactDocument(**registration.model_dump(exclude={"address"}))
        try:
            if registration.address:
                address = registry.register(registration.address, document)
            else:
                address = registry.register_document(document)
        except InvalidAddress as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except RegistryExhausted as e:
            logger.error(f"Registration of {document.source_ref} failed: {e}")
            raise HTTPException(status_code=409, detail=str(e)) from e

        return {"address": address.uri, "short": address.short}

    return register_artifact


def _create_resolve_endpoint(registry: AddressRegistry):
    """Create the address resolution endpoint handler."""

    async def resolve_artifact(address: str):
        try:
            normalized = registry.normalize(address)
        except InvalidAddress as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        record = registry.resolve(normalized)
        if record is None:
            raise HTTPException(status_code=404, detail="Artifact not found")
        return {"address": record.address.uri, **record.model_dump(exclude={"address"})}

    return resolve_artifact


def _create_reverse_lookup_endpoint(registry: AddressRegistry):
    """Create the source reference lookup endpoint handler."""

    async def lookup_by_source(source_ref: str):
        address = registry.reverse_lookup(source_ref)
        if address is None:
            raise HTTPException(status_code=404, detail="Artifact not found")
        return {"source_ref": source_ref, "address": address.uri}

    return lookup_by_source


def _create_relations_endpoint(relation_index: RelationIndex):
    """Create the candidate relations endpoint handler."""

    async def get_relations(
        address: str,
        limit: int | None = None,
        direction: Literal["from", "into"] = "from",
        pathfinding: bool = False,
        skill_level: float | None = None,
    ):
        context = QueryContext(
            pathfinding_mode=pathfinding, user_context=_user_context(skill_level)
        )
        query = (
            relation_index.candidate_edges_from
            if direction == "from"
            else relation_index.candidate_edges_into
        )
        try:
            edges = query(address, limit, context)
        except (InvalidAddress, InvalidLimit) as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        return [
            {
                "from": edge.from_address.uri,
                "to": edge.to_address.uri,
                "reason_kind": edge.reason_kind,
                "weights": edge.weights.model_dump(),
                "match_count": edge.match_count,
                "score": edge.score,
                "context": edge.context,
            }
            for edge in edges
        ]

    return get_relations


def _create_paths_endpoint(pathfinder: Pathfinder):
    """Create the pathfinding endpoint handler."""

    async def find_paths(
        start: str,
        goal: str,
        style: PathStyle = "balanced",
        max_paths: int = 5,
        skill_level: float | None = None,
        force_refresh: bool = False,
    ):
        try:
            paths = pathfinder.find_paths(
                start,
                goal,
                user_context=_user_context(skill_level),
                style=style,
                max_paths=max_paths,
                force_refresh=force_refresh,
            )
        except (InvalidAddress, InvalidLimit) as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        return [
            {
                "addresses": [address.uri for address in path.addresses],
                **path.model_dump(mode="json"),
            }
            for path in paths
        ]

    return find_paths


def _create_export_endpoint(pathfinder: Pathfinder):
    """Create the path export endpoint handler."""

    async def export_best_path(
        start: str,
        goal: str,
        style: PathStyle = "balanced",
        skill_level: float | None = None,
        output_format: Literal["json", "markdown"] = Query("json", alias="format"),
    ):
        try:
            paths = pathfinder.find_paths(
                start, goal, user_context=_user_context(skill_level), style=style, max_paths=1
            )
        except InvalidAddress as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        if not paths:
            raise HTTPException(status_code=404, detail="No path found")

        export = export_path(paths[0])
        if output_format == "markdown":
            return PlainTextResponse(convert_to_markdown(export), media_type="text/markdown")
        return export

    return export_best_path


def get_endpoints_router(
    *,
    registry: AddressRegistry,
    relation_index: RelationIndex,
    pathfinder: Pathfinder,
) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    async def health_check():
        return {"status": "healthy"}

    @router.get("/api/stats")
    async def get_stats():
        return {"total": len(registry), "types": registry.stats()}

    @router.delete("/api/paths/cache")
    async def clear_path_cache():
        pathfinder.clear_cache()
        return {"cleared": True}

    router.post("/api/artifacts")(_create_register_endpoint(registry))
    router.get("/api/artifacts/resolve")(_create_resolve_endpoint(registry))
    router.get("/api/artifacts/by-source")(_create_reverse_lookup_endpoint(registry))
    router.get("/api/relations")(_create_relations_endpoint(relation_index))
    router.get("/api/paths")(_create_paths_endpoint(pathfinder))
    router.get("/api/paths/export")(_create_export_endpoint(pathfinder))

    return router
