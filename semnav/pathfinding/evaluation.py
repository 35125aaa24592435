"""Turning searched edge sequences into evaluated paths."""

import math
from typing import Callable

import numpy as np

from semnav.config import settings
from semnav.domain.address import Address
from semnav.domain.artifact import ArtifactRecord
from semnav.domain.path import Contingency, Path, PathStep
from semnav.domain.relationships import RelationEdge
from semnav.pathfinding.graph_builder import PathGraph
from semnav.pathfinding.scoring import balanced_key, edge_cost
from semnav.registry.base import AddressRegistry
from semnav.relations import analyzer

STEP_VERBS = {
    "action": "Carry out",
    "skill": "Develop the skill",
    "concept": "Study",
    "resource": "Consult",
    "outcome": "Reach",
    "goal": "Aim for",
}

HARD_STEP_DIFFICULTY = 0.6
MAX_ALTERNATIVES = 3


class PathEvaluator:
    """Builds Path objects with per-step breakdown and aggregate metrics."""

    def __init__(
        self,
        registry: AddressRegistry,
        default_difficulty: float | None = None,
        default_time_required: float | None = None,
        time_cost_scale: float | None = None,
    ):
        self.registry = registry
        self.default_difficulty = (
            settings.default_difficulty if default_difficulty is None else default_difficulty
        )
        self.default_time_required = (
            settings.default_time_required
            if default_time_required is None
            else default_time_required
        )
        self.time_cost_scale = (
            settings.time_cost_scale if time_cost_scale is None else time_cost_scale
        )

    def evaluate(self, graph: PathGraph, edge_paths: list[list[RelationEdge]]) -> list[Path]:
        """Evaluate every searched path, ascending by cumulative cost.

        Args:
            graph: Graph the paths were searched on
            edge_paths: Edge sequences from start to goal

        Returns:
            Evaluated paths; paths through unregistered nodes are dropped
        """
        adjacency = graph.adjacency()
        records = {record.address: record for record in self.registry.records()}
        if graph.start not in records:
            return []

        paths = []
        for edges in edge_paths:
            path = self._evaluate_one(graph, adjacency, records, edges)
            if path is not None:
                paths.append(path)

        paths.sort(key=balanced_key)
        return paths

    def step_difficulty(self, record: ArtifactRecord) -> float:
        return self.default_difficulty if record.difficulty is None else record.difficulty

    def step_time(self, record: ArtifactRecord) -> float:
        return self.default_time_required if record.time_required is None else record.time_required

    def base_cost(self, record: ArtifactRecord) -> float:
        """User independent cost of reaching a record."""
        return edge_cost(
            difficulty=self.step_difficulty(record),
            time_required=self.step_time(record),
            time_cost_scale=self.time_cost_scale,
            skill_requirement=analyzer.skill_requirement(record.address.type),
        )

    def edge_cost_function(self) -> Callable[[RelationEdge], float]:
        """Base cost of traversing an edge, over a snapshot of the current records.

        Edges into unregistered nodes cost infinity.
        """
        records = {record.address: record for record in self.registry.records()}

        def cost(edge: RelationEdge) -> float:
            record = records.get(edge.to_address)
            return math.inf if record is None else self.base_cost(record)

        return cost

    def _evaluate_one(
        self,
        graph: PathGraph,
        adjacency: dict[Address, list[RelationEdge]],
        records: dict[Address, ArtifactRecord],
        edges: list[RelationEdge],
    ) -> Path | None:
        start_record = records[graph.start]
        steps = [
            PathStep(
                sequence=1,
                address=start_record.address,
                title=start_record.title,
                description=f"Start from {start_record.title}",
                skill_requirement=analyzer.skill_requirement(start_record.address.type),
                resources=[start_record.source_ref],
            )
        ]

        cumulative = 0.0
        visited = {graph.start}
        for edge in edges:
            record = records.get(edge.to_address)
            if record is None:
                return None
            previous = records.get(edge.from_address)
            if previous is None:
                return None
            visited.add(record.address)

            requirement = analyzer.skill_requirement(record.address.type)
            difficulty = self.step_difficulty(record)
            time_required = self.step_time(record)
            cost = self.base_cost(record)
            cumulative += cost

            alternatives = [
                other.to_address.uri
                for other in adjacency.get(edge.from_address, [])
                if other.to_address != edge.to_address and other.to_address not in visited
            ][:MAX_ALTERNATIVES]

            steps.append(
                PathStep(
                    sequence=len(steps) + 1,
                    address=record.address,
                    title=record.title,
                    description=self._describe(edge, previous, record),
                    reason_kind=edge.reason_kind,
                    weights=edge.weights,
                    difficulty=difficulty,
                    skill_requirement=requirement,
                    estimated_time=time_required,
                    step_cost=cost,
                    cumulative_cost=cumulative,
                    resources=[record.source_ref],
                    tips=edge.context,
                    alternatives=alternatives,
                )
            )

        nodes = [step.address for step in steps]
        later_steps = steps[1:]
        difficulty = 0.0
        if later_steps:
            difficulty = float(np.mean([step.difficulty for step in later_steps]))
        return Path(
            route="balanced",
            start=graph.start,
            goal=graph.goal,
            steps=steps,
            cost=cumulative,
            estimated_time=sum(step.estimated_time for step in later_steps),
            difficulty=difficulty,
            success_probability=float(np.prod([edge.weights.causal_strength for edge in edges])),
            bridge_rank=graph.bridge_rank(nodes),
            contingencies=self._contingencies(steps),
        )

    @staticmethod
    def _describe(edge: RelationEdge, previous: ArtifactRecord, record: ArtifactRecord) -> str:
        verb = STEP_VERBS.get(record.address.type, "Work through")
        if edge.reason_kind == "explicit-reference":
            return f"{verb} {record.title} (referenced by {previous.title})"
        return f"{verb} {record.title} (related to {previous.title})"

    @staticmethod
    def _contingencies(steps: list[PathStep]) -> list[Contingency]:
        contingencies = []
        for step in steps[1:]:
            if step.difficulty < HARD_STEP_DIFFICULTY:
                continue
            if step.alternatives:
                contingencies.append(
                    Contingency(
                        condition=f"{step.title} proves too difficult",
                        action=f"switch to {step.alternatives[0]}",
                        impact="different route, progress so far is kept",
                    )
                )
            else:
                contingencies.append(
                    Contingency(
                        condition=f"{step.title} proves too difficult",
                        action=f"break {step.title} into smaller steps",
                        impact="more time needed",
                    )
                )
        return contingencies
