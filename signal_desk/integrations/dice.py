"""
Dice discovery agent.

Dice exposes its job search as a JSON endpoint; results arrive under
``resultItemList``.
"""

from html import unescape
from typing import Optional

from bs4 import BeautifulSoup

from .base import ScraperAgent, describe_age, parse_timestamp
from signal_desk.core.models import AgentId, JobSignal, SourceTier


class DiceAgent(ScraperAgent):
    """Dice REST search client."""

    SEARCH_URL = "https://www.dice.com/api/search/jobs"

    SIMULATION_LOG = [
        "[ENGINE] Dispatching REST request to Dice API...",
        "[ENGINE] Headers: User-Agent, Bearer Auth verified.",
        "[ENGINE] Status 200 OK - Payload received.",
        "[PARSER] Mapping 45 job records to internal schema.",
        "[SYSTEM] Syncing with PostgreSQL instance.",
    ]

    def __init__(self, location: str = "Remote, USA", **kwargs):
        super().__init__(**kwargs)
        self.location = location
        self.session.headers.setdefault("Accept", "application/json")

    @property
    def agent_id(self) -> AgentId:
        return AgentId.DICE

    @property
    def name(self) -> str:
        return "Dice"

    def fetch(self, keywords: str, limit: int = 25) -> list[JobSignal]:
        params = {"q": keywords, "location": self.location, "pageSize": limit}
        response = self._get(self.SEARCH_URL, params=params)
        if response is None:
            return []

        try:
            items = response.json().get("resultItemList", [])
        except ValueError as e:
            self.logger.error(f"Dice returned invalid JSON: {e}")
            return []

        signals = []
        for item in items[:limit]:
            signal = self._parse_item(item)
            if signal:
                signals.append(signal)

        self.logger.info(f"Dice returned {len(signals)} signals for '{keywords}'")
        return signals

    def _parse_item(self, item: dict) -> Optional[JobSignal]:
        title = (item.get("jobTitle") or item.get("title") or "").strip()
        company = (item.get("companyName") or "").strip()
        if not title or not company:
            return None

        location_data = item.get("jobLocation") or {}
        if isinstance(location_data, dict):
            location = location_data.get("displayName", "")
        else:
            location = str(location_data)

        summary = item.get("summary") or item.get("description") or ""
        description = BeautifulSoup(unescape(summary), "html.parser").get_text(" ", strip=True)
        url = item.get("detailsPageUrl") or ""

        return JobSignal(
            id=self._make_id(str(item.get("id", "")), title, company),
            title=title,
            company=company,
            location=location,
            is_remote=bool(item.get("workFromHomeAvailability")) or "remote" in location.lower(),
            posted_date=describe_age(parse_timestamp(item.get("postedDate"))),
            source_tier=SourceTier.PARTNER,
            source_platform=self.name,
            salary_range=item.get("salary") or "",
            description=description,
            source_url=url,
            proof=f"Dice listing {item.get('id', '')}".strip(),
        )
