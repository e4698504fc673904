"""
Greenhouse ATS integration.

Greenhouse job boards are public and need no authentication for reading
jobs. Postings come straight from the employer, so they are Tier 1 signals.
"""

from html import unescape
from typing import Optional

from bs4 import BeautifulSoup

from .base import ScraperAgent, describe_age, parse_timestamp
from signal_desk.core.models import AgentId, JobSignal, SourceTier


class GreenhouseAgent(ScraperAgent):
    """Greenhouse job board reader."""

    API_URL = "https://boards-api.greenhouse.io/v1/boards"

    # Boards polled by default
    DEFAULT_BOARDS = [
        "anthropic",
        "stripe",
        "databricks",
        "figma",
        "datadog",
        "coinbase",
        "discord",
        "plaid",
    ]

    SIMULATION_LOG = [
        "[ENGINE] Dispatching REST request to Greenhouse board API...",
        "[ENGINE] Status 200 OK - Payload received.",
        "[PARSER] Mapping board postings to internal schema.",
        "[SYSTEM] Batch Ingest Complete. Forwarding to Orchestrator.",
    ]

    def __init__(self, boards: Optional[list[str]] = None, **kwargs):
        super().__init__(**kwargs)
        self.boards = list(boards) if boards is not None else list(self.DEFAULT_BOARDS)

    @property
    def agent_id(self) -> AgentId:
        return AgentId.GREENHOUSE

    @property
    def name(self) -> str:
        return "Greenhouse"

    def fetch(self, keywords: str, limit: int = 25) -> list[JobSignal]:
        """Collect postings from each board whose title or body mentions the keywords."""
        query = keywords.lower().strip()
        signals = []

        for board in self.boards:
            if len(signals) >= limit:
                break
            for signal in self._get_board_jobs(board):
                text = f"{signal.title} {signal.description}".lower()
                if not query or query in text:
                    signals.append(signal)

        self.logger.info(f"Greenhouse returned {len(signals[:limit])} signals for '{keywords}'")
        return signals[:limit]

    def _get_board_jobs(self, board: str) -> list[JobSignal]:
        response = self._get(f"{self.API_URL}/{board}/jobs", params={"content": "true"})
        if response is None:
            return []

        try:
            data = response.json()
        except ValueError as e:
            self.logger.error(f"Greenhouse board {board} returned invalid JSON: {e}")
            return []

        signals = []
        for job_data in data.get("jobs", []):
            signal = self._parse_job(job_data, board)
            if signal:
                signals.append(signal)
        return signals

    def _parse_job(self, data: dict, board: str) -> Optional[JobSignal]:
        title = (data.get("title") or "").strip()
        if not title:
            return None

        location_data = data.get("location", {})
        location = location_data.get("name", "") if isinstance(location_data, dict) else str(location_data)

        # Board content is entity-escaped HTML
        content = BeautifulSoup(unescape(data.get("content", "")), "html.parser")
        departments = [d.get("name", "") for d in data.get("departments", [])]

        return JobSignal(
            id=f"greenhouse_{board}_{data.get('id', '')}",
            title=title,
            company=board.title().replace("-", " "),
            location=location,
            highlights=[d for d in departments if d][:3],
            is_remote="remote" in location.lower(),
            posted_date=describe_age(parse_timestamp(data.get("updated_at"))),
            is_verified=True,
            source_tier=SourceTier.DIRECT,
            source_platform=self.name,
            description=content.get_text(" ", strip=True),
            source_url=data.get("absolute_url", ""),
            proof=f"Greenhouse board '{board}' job {data.get('id', '')}",
        )
