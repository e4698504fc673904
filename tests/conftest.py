import pytest

from signal_desk.core.models import MasterResume, PersonalInfo
from signal_desk.core.seed import sample_master_resume, sample_signals
from signal_desk.tracker.app_state import AppState
from signal_desk.tracker.storage import MemoryStorage


class FakeLLM:
    """Stands in for LLMClient; records prompts and replays a canned response."""

    def __init__(self, response: str = "", error: Exception = None):
        self.response = response
        self.error = error
        self.prompts = []

    def complete(self, prompt, temperature=0.2, system=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def resume() -> MasterResume:
    return sample_master_resume()


@pytest.fixture
def small_resume() -> MasterResume:
    return MasterResume(
        personal_info=PersonalInfo(name="Sam Tester", role="QA Engineer", location="Remote"),
        summary="Experienced in Python and FastAPI automation",
    )


@pytest.fixture
def signals():
    return sample_signals()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def state(storage, signals, resume) -> AppState:
    return AppState(storage, initial_jobs=signals, initial_resume=resume)


@pytest.fixture
def fake_llm_factory():
    return FakeLLM
