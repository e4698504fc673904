"""
Agent Registry - Runs discovery agents and merges their signals.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Union
import logging

from .base import ScraperAgent
from .dice import DiceAgent
from .ghost import GhostDetector
from .greenhouse import GreenhouseAgent
from .linkedin import LinkedInAgent
from signal_desk.core.models import AgentId, JobSignal


class AgentRegistry:
    """Holds the scraper agents and aggregates their results."""

    def __init__(self, agents: Optional[list[ScraperAgent]] = None):
        """
        Initialize the registry.

        Args:
            agents: Agents to register (defaults to LinkedIn, Dice, Greenhouse
                and the ghost detector)
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        if agents is None:
            agents = [LinkedInAgent(), DiceAgent(), GreenhouseAgent(), GhostDetector()]

        self.agents: dict[AgentId, ScraperAgent] = {}
        for agent in agents:
            self.register(agent)

        self.last_logs: dict[AgentId, list[str]] = {}

    def register(self, agent: ScraperAgent) -> None:
        self.agents[agent.agent_id] = agent

    def get(self, agent_id: Union[AgentId, str]) -> Optional[ScraperAgent]:
        try:
            return self.agents.get(AgentId(agent_id))
        except ValueError:
            return None

    def ids(self) -> list[AgentId]:
        return list(self.agents)

    def simulate(self, agent_id: Union[AgentId, str]) -> list[str]:
        """
        Dry-run an agent and remember its log.

        Raises:
            ValueError: If no such agent is registered
        """
        agent = self.get(agent_id)
        if agent is None:
            raise ValueError(f"Unknown agent: {agent_id}")

        logs = agent.simulate()
        self.last_logs[agent.agent_id] = logs
        return logs

    def fetch(
        self,
        keywords: str,
        limit: int = 50,
        agent_ids: Optional[list[AgentId]] = None,
        parallel: bool = True,
    ) -> list[JobSignal]:
        """
        Fetch signals from the discovery agents.

        Args:
            keywords: Search keywords
            limit: Max total results
            agent_ids: Specific agents to use (None = all)
            parallel: Whether to query agents in parallel

        Returns:
            Deduplicated signals, rescored by the ghost detector when registered
        """
        active = [
            agent for agent_id, agent in self.agents.items()
            if agent_id != AgentId.GHOST and (agent_ids is None or agent_id in agent_ids)
        ]
        if not active:
            self.logger.warning("No discovery agents selected")
            return []

        limit_per_agent = max(10, limit // len(active))

        if parallel:
            all_signals = self._fetch_parallel(active, keywords, limit_per_agent)
        else:
            all_signals = self._fetch_sequential(active, keywords, limit_per_agent)

        # Deduplicate by title + company
        seen = set()
        unique = []
        for signal in all_signals:
            key = f"{signal.title.lower()}_{signal.company.lower()}"
            if key not in seen:
                seen.add(key)
                unique.append(signal)

        ghost = self.agents.get(AgentId.GHOST)
        if isinstance(ghost, GhostDetector):
            ghost.score(unique)

        self.logger.info(f"Found {len(unique)} unique signals from {len(active)} agents")
        return unique[:limit]

    def _fetch_parallel(
        self,
        agents: list[ScraperAgent],
        keywords: str,
        limit: int,
    ) -> list[JobSignal]:
        all_signals = []

        with ThreadPoolExecutor(max_workers=len(agents)) as executor:
            futures = {
                executor.submit(self._fetch_agent, agent, keywords, limit): agent
                for agent in agents
            }
            for future in as_completed(futures):
                all_signals.extend(future.result())

        return all_signals

    def _fetch_sequential(
        self,
        agents: list[ScraperAgent],
        keywords: str,
        limit: int,
    ) -> list[JobSignal]:
        all_signals = []
        for agent in agents:
            all_signals.extend(self._fetch_agent(agent, keywords, limit))
        return all_signals

    def _fetch_agent(self, agent: ScraperAgent, keywords: str, limit: int) -> list[JobSignal]:
        """Fetch from one agent, logging and skipping failures."""
        try:
            signals = agent.fetch(keywords, limit)
            self.logger.debug(f"{agent.name}: {len(signals)} signals")
            return signals
        except Exception as e:
            self.logger.error(f"Error fetching from {agent.name}: {e}")
            return []
