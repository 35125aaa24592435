"""Per-user annotation of evaluated paths."""

from loguru import logger

from semnav.config import settings
from semnav.domain.path import Path, PathStep, UserOptimization
from semnav.domain.user import UserContext
from semnav.pathfinding.scoring import edge_cost

MAX_PREPARATION_MULTIPLIER = 1.5
BASE_PREPARATION_MULTIPLIER = 1.2
ACCELERATION_MULTIPLIER = 0.7


def _time_impact(multiplier: float) -> str:
    percent = round((multiplier - 1.0) * 100)
    return f"+{percent}%" if percent >= 0 else f"{percent}%"


def _personalize_step(
    step: PathStep,
    user_skill: float,
    preparation_gap: float,
    acceleration_margin: float,
) -> UserOptimization | None:
    """Set the time multiplier and notes of a step in place. Returns the optimization, if any."""
    gap = round(step.skill_requirement - user_skill, 9)
    if gap >= preparation_gap:
        step.time_multiplier = min(
            MAX_PREPARATION_MULTIPLIER, BASE_PREPARATION_MULTIPLIER + (gap - preparation_gap)
        )
        step.notes.append(f"needs preparation: skill gap of {gap:.2f}")
        return UserOptimization(
            step=step.address.uri,
            optimization="additional-preparation",
            suggestion=(
                f"Consider taking a preparatory course or finding a mentor for {step.description}"
            ),
            time_impact=_time_impact(step.time_multiplier),
        )
    if -gap >= acceleration_margin:
        step.time_multiplier = ACCELERATION_MULTIPLIER
        step.notes.append("accelerable: skill level well above the requirement")
        return UserOptimization(
            step=step.address.uri,
            optimization="acceleration-opportunity",
            suggestion=f'You can likely complete "{step.description}" faster than estimated',
            time_impact=_time_impact(step.time_multiplier),
        )
    return None


def personalize_for_user(
    paths: list[Path],
    user_context: UserContext,
    *,
    preparation_gap: float | None = None,
    acceleration_margin: float | None = None,
    time_cost_scale: float | None = None,
) -> list[Path]:
    """Annotate paths for a user without changing their nodes or order.

    The input paths are left untouched; every returned path is a deep copy.

    Args:
        paths: Evaluated paths, e.g. straight from the cache
        user_context: The user's skill levels
        preparation_gap: Minimum requirement-minus-skill gap that calls for preparation
        acceleration_margin: Minimum skill-minus-requirement margin that allows acceleration
        time_cost_scale: Weight of one hour in cost units

    Returns:
        Copies with step notes, time multipliers, user optimizations,
        personalized cost and adjusted estimated time
    """
    if preparation_gap is None:
        preparation_gap = settings.preparation_gap
    if acceleration_margin is None:
        acceleration_margin = settings.acceleration_margin
    if time_cost_scale is None:
        time_cost_scale = settings.time_cost_scale

    personalized = []
    for path in paths:
        path = path.model_copy(deep=True)
        optimizations = []
        cumulative = 0.0
        for step in path.steps[1:]:
            user_skill = user_context.skill_for(step.address.type)
            if user_skill is not None:
                optimization = _personalize_step(
                    step, user_skill, preparation_gap, acceleration_margin
                )
                if optimization is not None:
                    optimizations.append(optimization)
                step.estimated_time = step.estimated_time * step.time_multiplier

            cumulative += edge_cost(
                difficulty=step.difficulty,
                time_required=step.estimated_time,
                time_cost_scale=time_cost_scale,
                skill_requirement=step.skill_requirement,
                user_skill_level=user_skill,
            )

        path.user_optimizations = optimizations
        path.personalized_cost = cumulative
        path.estimated_time = sum(step.estimated_time for step in path.steps[1:])
        personalized.append(path)

    logger.debug(f"Personalized {len(personalized)} paths")
    return personalized
