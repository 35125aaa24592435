"""Pathfinding over the relation graph: subgraph building, search, ranking and export."""

from semnav.pathfinding.engine import Pathfinder
from semnav.pathfinding.evaluation import PathEvaluator
from semnav.pathfinding.export import convert_to_markdown, export_path, export_path_json
from semnav.pathfinding.graph_builder import PathGraph, PathGraphBuilder
from semnav.pathfinding.personalization import personalize_for_user

__all__ = [
    "PathEvaluator",
    "PathGraph",
    "PathGraphBuilder",
    "Pathfinder",
    "convert_to_markdown",
    "export_path",
    "export_path_json",
    "personalize_for_user",
]
