"""Tests for per-user path annotation."""

import pytest

from semnav.domain.path import Path
from semnav.domain.user import UserContext
from semnav.pathfinding.engine import Pathfinder
from semnav.pathfinding.personalization import personalize_for_user


@pytest.fixture
def pie_path(pathfinder: Pathfinder) -> Path:
    return pathfinder.find_paths("action:apple-pie-recipe", "outcome:baked-pie")[0]


def test_node_order_is_never_changed(pie_path: Path) -> None:
    for skill_level in (0.0, 0.2, 0.5, 0.8, 1.0):
        personalized = personalize_for_user([pie_path], UserContext(skill_level=skill_level))
        assert personalized[0].addresses == pie_path.addresses


def test_input_paths_are_not_modified(pie_path: Path) -> None:
    original = pie_path.model_copy(deep=True)

    personalize_for_user([pie_path], UserContext(skill_level=0.1))

    assert pie_path == original


def test_preparation_for_large_skill_gap(pie_path: Path) -> None:
    personalized = personalize_for_user([pie_path], UserContext(skill_level=0.2))[0]

    crust, baked = personalized.steps[1], personalized.steps[2]
    # skill requirement 0.8, gap 0.6
    assert crust.time_multiplier == pytest.approx(1.5)
    assert crust.estimated_time == pytest.approx(1.5)
    assert crust.notes[0].startswith("needs preparation")
    # default requirement 0.5, gap 0.3
    assert baked.time_multiplier == pytest.approx(1.2)

    optimizations = {o.step: o for o in personalized.user_optimizations}
    assert optimizations["vault://skill/pie-crust-skill"].optimization == "additional-preparation"
    assert optimizations["vault://skill/pie-crust-skill"].time_impact == "+50%"
    assert optimizations["vault://outcome/baked-pie"].time_impact == "+20%"
    assert personalized.estimated_time == pytest.approx(2.7)


def test_acceleration_for_skilled_user(pie_path: Path) -> None:
    personalized = personalize_for_user([pie_path], UserContext(skill_level=0.95))[0]

    crust, baked = personalized.steps[1], personalized.steps[2]
    assert crust.time_multiplier == 1.0
    assert crust.notes == []
    assert baked.time_multiplier == pytest.approx(0.7)
    assert baked.notes[0].startswith("accelerable")
    assert [o.optimization for o in personalized.user_optimizations] == [
        "acceleration-opportunity"
    ]
    assert personalized.user_optimizations[0].time_impact == "-30%"


def test_domain_skills_are_used_per_type(pie_path: Path) -> None:
    user = UserContext(domain_skills={"skill": 0.8})

    personalized = personalize_for_user([pie_path], user)[0]

    assert personalized.user_optimizations == []
    assert [step.time_multiplier for step in personalized.steps] == [1.0, 1.0, 1.0]


def test_personalized_cost(pie_path: Path) -> None:
    personalized = personalize_for_user([pie_path], UserContext(skill_level=0.7))[0]

    # crust: 0.5 + |0.7 - 0.8| + 0.1, baked: 0.5 + |0.7 - 0.5| + 0.1
    assert personalized.personalized_cost == pytest.approx(1.5)
    assert personalized.cost == pie_path.cost


def test_unknown_skill_leaves_path_unchanged(pie_path: Path) -> None:
    personalized = personalize_for_user([pie_path], UserContext())[0]

    assert personalized.user_optimizations == []
    assert personalized.personalized_cost == pytest.approx(pie_path.cost)
    assert personalized.estimated_time == pytest.approx(pie_path.estimated_time)
