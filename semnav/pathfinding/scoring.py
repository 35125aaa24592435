"""Edge traversal cost and path style ranking."""

import math

from semnav.domain.path import Path, PathStyle


def edge_cost(
    *,
    difficulty: float,
    time_required: float,
    time_cost_scale: float,
    skill_requirement: float,
    user_skill_level: float | None = None,
) -> float:
    """Cost of traversing one edge. Lower is better.

    Args:
        difficulty: Base difficulty of reaching the target node
        time_required: Estimated hours needed for the step
        time_cost_scale: Weight of one hour in cost units
        skill_requirement: Skill needed for the target node
        user_skill_level: The user's skill level for the target type, if known

    Returns:
        difficulty + skill gap penalty + scaled time cost
    """
    cost = difficulty
    if user_skill_level is not None:
        cost += abs(user_skill_level - skill_requirement)
    cost += time_required * time_cost_scale
    return cost


def _tie_break(path: Path) -> tuple:
    bridge_rank = path.bridge_rank if path.bridge_rank is not None else math.inf
    return (bridge_rank, path.hops, [step.address.uri for step in path.steps])


def ranking_cost(path: Path) -> float:
    """The personalized cost when the path was personalized, the base cost otherwise."""
    return path.cost if path.personalized_cost is None else path.personalized_cost


def balanced_key(path: Path) -> tuple:
    """Cumulative cost, then bridge rank, hop count and node URIs."""
    return (round(ranking_cost(path), 9), *_tie_break(path))


def _fastest_key(path: Path) -> tuple:
    return (path.hops, round(path.estimated_time, 9), *balanced_key(path))


def _safest_key(path: Path) -> tuple:
    return (-round(path.success_probability, 9), *balanced_key(path))


def _learning_key(path: Path) -> tuple:
    # most skill developed along the way first
    developed = sum(step.skill_requirement for step in path.steps[1:])
    return (-round(developed, 9), *balanced_key(path))


def _interior(path: Path) -> set[str]:
    return {step.address.uri for step in path.steps[1:-1]}


def _select_exploratory(paths: list[Path], max_paths: int) -> list[Path]:
    """Greedily pick paths that share the fewest interior nodes with those already picked."""
    remaining = sorted(paths, key=balanced_key)
    selected: list[Path] = []
    seen: set[str] = set()
    while remaining and len(selected) < max_paths:
        best = min(remaining, key=lambda path: (len(_interior(path) & seen), *balanced_key(path)))
        remaining.remove(best)
        selected.append(best)
        seen |= _interior(best)
    return selected


def rank_paths(paths: list[Path], style: PathStyle, max_paths: int) -> list[Path]:
    """Order candidate paths for a path style and keep the best `max_paths`.

    All styles score the same candidate set; only the ordering function differs.

    Args:
        paths: Evaluated candidate paths
        style: balanced, fastest, safest, learning or exploratory
        max_paths: Maximum number of paths returned

    Returns:
        Deep copies of the selected paths with `route` set to the style
    """
    if style == "exploratory":
        ranked = _select_exploratory(paths, max_paths)
    else:
        key = {
            "balanced": balanced_key,
            "fastest": _fastest_key,
            "safest": _safest_key,
            "learning": _learning_key,
        }[style]
        ranked = sorted(paths, key=key)[:max_paths]
    return [path.model_copy(update={"route": style}, deep=True) for path in ranked]
