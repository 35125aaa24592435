from semnav.domain.address import Address
from semnav.pathfinding.graph_builder import PathGraph


class FailingGraphBuilder:
    """Graph builder that fails on every build."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or RuntimeError("relation index unavailable")
        self.calls = 0

    def build(self, start: Address, goal: Address) -> PathGraph:
        self.calls += 1
        raise self.error
