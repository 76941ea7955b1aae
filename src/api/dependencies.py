from api import state
from extraction.task_extractor import FallbackTaskExtractor
from taskplanner.collection import TaskCollection


def get_collection() -> TaskCollection:
    if state.collection is None:
        return state.init_collection()
    return state.collection


def get_extractor() -> FallbackTaskExtractor:
    return FallbackTaskExtractor()
