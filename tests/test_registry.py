from signal_desk.core.models import AgentId, JobSignal
from signal_desk.integrations.base import ScraperAgent
from signal_desk.integrations.ghost import GhostDetector
from signal_desk.integrations.registry import AgentRegistry

import pytest


LONG = "Detailed posting about test infrastructure and release quality. " * 10


class StaticAgent(ScraperAgent):
    def __init__(self, agent_id, jobs=None, error=None):
        super().__init__()
        self._agent_id = agent_id
        self.jobs = jobs or []
        self.error = error
        self.calls = []

    @property
    def agent_id(self):
        return self._agent_id

    @property
    def name(self):
        return f"Static {self._agent_id.value}"

    def fetch(self, keywords, limit=25):
        self.calls.append((keywords, limit))
        if self.error:
            raise self.error
        return list(self.jobs)


def _job(title, company, description=LONG, posted="1 day ago"):
    return JobSignal(title=title, company=company, description=description, posted_date=posted)


@pytest.mark.parametrize("parallel", [True, False])
def test_fetch_dedupes_and_scores(parallel):
    linkedin = StaticAgent(AgentId.LINKEDIN, [_job("SDET", "Acme"), _job("Rockstar QA", "Shady", "rockstar", "2 months ago")])
    dice = StaticAgent(AgentId.DICE, [_job("sdet", "ACME"), _job("QA Lead", "Initech")])
    registry = AgentRegistry(agents=[linkedin, dice, GhostDetector()])

    signals = registry.fetch("QA", limit=10, parallel=parallel)
    keys = sorted((s.title.lower(), s.company.lower()) for s in signals)
    assert keys == [("qa lead", "initech"), ("rockstar qa", "shady"), ("sdet", "acme")]

    legitimacy = {s.company: s.legitimacy for s in signals}
    assert legitimacy["Shady"] == 0.05
    assert legitimacy["Initech"] == 1.0


def test_failing_agent_is_skipped():
    broken = StaticAgent(AgentId.LINKEDIN, error=RuntimeError("blocked"))
    dice = StaticAgent(AgentId.DICE, [_job("QA Lead", "Initech")])
    registry = AgentRegistry(agents=[broken, dice])
    signals = registry.fetch("QA")
    assert [s.company for s in signals] == ["Initech"]


def test_fetch_selected_agents_only():
    linkedin = StaticAgent(AgentId.LINKEDIN, [_job("SDET", "Acme")])
    dice = StaticAgent(AgentId.DICE, [_job("QA Lead", "Initech")])
    registry = AgentRegistry(agents=[linkedin, dice])
    signals = registry.fetch("QA", agent_ids=[AgentId.DICE])
    assert [s.company for s in signals] == ["Initech"]
    assert linkedin.calls == []


def test_fetch_without_discovery_agents():
    registry = AgentRegistry(agents=[GhostDetector()])
    assert registry.fetch("QA") == []


def test_get_and_simulate():
    registry = AgentRegistry(agents=[GhostDetector()])
    assert registry.get("ghost").agent_id == AgentId.GHOST
    assert registry.get("monster") is None
    assert registry.get("dice") is None

    logs = registry.simulate(AgentId.GHOST)
    assert registry.last_logs[AgentId.GHOST] == logs
    with pytest.raises(ValueError):
        registry.simulate("dice")


def test_default_registry_has_all_agents():
    assert set(AgentRegistry().ids()) == set(AgentId)
