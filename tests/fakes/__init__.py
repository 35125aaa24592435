from tests.fakes.fake_graph_builder import FailingGraphBuilder
from tests.fakes.fake_path_cache import RecordingPathCache

__all__ = ["FailingGraphBuilder", "RecordingPathCache"]
