"""Stable export format for paths, as plain data, JSON or markdown."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from semnav.domain.path import Path


class _ExportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExportMetadata(_ExportModel):
    path_type: str
    estimated_duration: float
    difficulty: float
    success_probability: float


class ExportNavigation(_ExportModel):
    start_point: str
    end_point: str
    total_steps: int


class ExportStep(_ExportModel):
    sequence: int
    semantic: str
    description: str
    estimated_time: float
    difficulty: float
    resources: list[str] = []
    tips: str = ""
    alternatives: list[str] = []


class ExportContingency(_ExportModel):
    condition: str = Field(alias="if")
    action: str = Field(alias="then")
    impact: str


class ExportOptimization(_ExportModel):
    step: str
    optimization: str
    suggestion: str
    time_impact: str


class PathExport(_ExportModel):
    metadata: ExportMetadata
    navigation: ExportNavigation
    steps: list[ExportStep]
    contingencies: list[ExportContingency] = []
    user_optimizations: list[ExportOptimization] = []


def build_export(path: Path) -> PathExport:
    return PathExport(
        metadata=ExportMetadata(
            path_type=path.route,
            estimated_duration=path.estimated_time,
            difficulty=path.difficulty,
            success_probability=path.success_probability,
        ),
        navigation=ExportNavigation(
            start_point=path.start.uri,
            end_point=path.goal.uri,
            total_steps=len(path.steps),
        ),
        steps=[
            ExportStep(
                sequence=step.sequence,
                semantic=step.address.uri,
                description=step.description,
                estimated_time=step.estimated_time,
                difficulty=step.difficulty,
                resources=step.resources,
                tips=step.tips,
                alternatives=step.alternatives,
            )
            for step in path.steps
        ],
        contingencies=[
            ExportContingency(
                condition=contingency.condition,
                action=contingency.action,
                impact=contingency.impact,
            )
            for contingency in path.contingencies
        ],
        user_optimizations=[
            ExportOptimization(**optimization.model_dump())
            for optimization in path.user_optimizations
        ],
    )


def export_path(path: Path) -> dict:
    """Export a path as a plain dict with camelCase keys.

    Structure: metadata, navigation, steps, contingencies, userOptimizations.
    """
    return build_export(path).model_dump(by_alias=True)


def export_path_json(path: Path) -> str:
    return build_export(path).model_dump_json(by_alias=True, indent=2)


def format_duration(hours: float) -> str:
    """Human readable duration, e.g. "45 min" or "2.5 hours"."""
    if hours < 1:
        return f"{round(hours * 60)} min"
    if hours == 1:
        return "1 hour"
    return f"{hours:g} hours"


def _hours(hours: float) -> str:
    # exact value first, readable form in parentheses
    return f"{hours} hours ({format_duration(hours)})"


def convert_to_markdown(export: dict) -> str:
    """Render an exported path as markdown for sharing.

    Args:
        export: Output of export_path

    Returns:
        Markdown document with metadata, navigation, steps, contingencies and
        user optimizations, in that order
    """
    metadata = export["metadata"]
    navigation = export["navigation"]

    lines = [
        f"# Pathfinding Route: {metadata['pathType']}",
        "",
        f"**Duration:** {_hours(metadata['estimatedDuration'])}",
        f"**Difficulty:** {metadata['difficulty']}/1.0",
        f"**Success Probability:** {metadata['successProbability']}"
        f" ({metadata['successProbability'] * 100:.0f}%)",
        "",
        "## Navigation",
        f"- **Start:** {navigation['startPoint']}",
        f"- **End:** {navigation['endPoint']}",
        f"- **Total Steps:** {navigation['totalSteps']}",
        "",
        "## Step-by-Step Route",
        "",
    ]

    for step in export["steps"]:
        lines.append(f"### Step {step['sequence']}: {step['description']}")
        lines.append(f"- **Semantic ID:** `{step['semantic']}`")
        lines.append(f"- **Estimated Time:** {_hours(step['estimatedTime'])}")
        lines.append(f"- **Difficulty:** {step['difficulty']}/1.0")
        if step["resources"]:
            lines.append(f"- **Resources:** {', '.join(step['resources'])}")
        if step["tips"]:
            lines.append(f"- **Tip:** {step['tips']}")
        if step["alternatives"]:
            lines.append(f"- **Alternatives:** {', '.join(step['alternatives'])}")
        lines.append("")

    if export["contingencies"]:
        lines.extend(["## Contingency Plans", ""])
        for contingency in export["contingencies"]:
            lines.append(
                f"- **If** {contingency['if']} **then** {contingency['then']}"
                f" ({contingency['impact']})"
            )
        lines.append("")

    if export["userOptimizations"]:
        lines.extend(["## Personal Optimizations", ""])
        for optimization in export["userOptimizations"]:
            lines.append(
                f"- `{optimization['step']}` {optimization['optimization']}: "
                f"{optimization['suggestion']} ({optimization['timeImpact']})"
            )
        lines.append("")

    return "\n".join(lines)
