"""Path domain models."""

from typing import Literal

from pydantic import BaseModel

from semnav.domain.address import Address
from semnav.domain.relationships import EdgeWeights, ReasonKind

PathStyle = Literal["balanced", "fastest", "safest", "learning", "exploratory"]


class PathStep(BaseModel):
    """A single node on a path together with the edge used to reach it.

    The first step of a path is the start node and carries no edge.

    Attributes:
        sequence: 1-based position in the path
        address: Address of the node
        title: Title of the artifact at the node
        description: Human readable instruction for this step
        reason_kind: Kind of the incoming edge, None for the start node
        weights: Weights of the incoming edge, None for the start node
        difficulty: Base difficulty of reaching this node
        skill_requirement: Skill required to complete this step, inferred from the type
        estimated_time: Estimated time in hours
        step_cost: Traversal cost of the incoming edge
        cumulative_cost: Sum of step costs up to and including this step
        resources: Source references useful for this step
        tips: Context text that explains the connection
        alternatives: Canonical URIs of other nodes reachable from the previous step
        notes: Personalization notes
        time_multiplier: Personalized adjustment applied to estimated_time
    """

    sequence: int
    address: Address
    title: str = ""
    description: str = ""
    reason_kind: ReasonKind | None = None
    weights: EdgeWeights | None = None
    difficulty: float = 0.0
    skill_requirement: float = 0.5
    estimated_time: float = 0.0
    step_cost: float = 0.0
    cumulative_cost: float = 0.0
    resources: list[str] = []
    tips: str = ""
    alternatives: list[str] = []
    notes: list[str] = []
    time_multiplier: float = 1.0


class Contingency(BaseModel):
    """Fallback plan for a step that is likely to fail."""

    condition: str
    action: str
    impact: str


class UserOptimization(BaseModel):
    """Personalization annotation for one step."""

    step: str  # canonical URI of the step
    optimization: Literal["additional-preparation", "acceleration-opportunity"]
    suggestion: str
    time_impact: str


class Path(BaseModel):
    """Ranked ordered sequence of addresses from start to goal."""

    route: str
    start: Address
    goal: Address
    steps: list[PathStep]
    cost: float = 0.0
    personalized_cost: float | None = None
    estimated_time: float = 0.0
    difficulty: float = 0.0
    success_probability: float = 1.0
    bridge_rank: int | None = None
    contingencies: list[Contingency] = []
    user_optimizations: list[UserOptimization] = []
    is_fallback: bool = False

    @property
    def addresses(self) -> list[Address]:
        return [step.address for step in self.steps]

    @property
    def hops(self) -> int:
        return max(len(self.steps) - 1, 0)
