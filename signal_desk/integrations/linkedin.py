"""
LinkedIn discovery agent.

Uses the public guest job search endpoint, which serves job cards as HTML
fragments and needs no authentication.
"""

from bs4 import BeautifulSoup

from .base import ScraperAgent
from signal_desk.core.models import AgentId, JobSignal, SourceTier


class LinkedInAgent(ScraperAgent):
    """LinkedIn guest job search scraper."""

    SEARCH_URL = "https://www.linkedin.com/jobs-guest/jobs/api/seeMoreJobPostings/search"
    PAGE_SIZE = 25

    SIMULATION_LOG = [
        "[ENGINE] Launching Chromium (Headless)...",
        "[ENGINE] Setting user-agent: QA-Discovery-Bot/1.0",
        "[ENGINE] Navigating to T1 Signal Source...",
        "[ENGINE] Detected 12 high-integrity signals.",
        "[PARSER] Extracting metadata for Anthropic, Stripe, OpenAI...",
        "[SYSTEM] Batch Ingest Complete. Forwarding to Orchestrator.",
    ]

    def __init__(self, location: str = "United States", **kwargs):
        super().__init__(**kwargs)
        self.location = location

    @property
    def agent_id(self) -> AgentId:
        return AgentId.LINKEDIN

    @property
    def name(self) -> str:
        return "LinkedIn"

    @property
    def protocol(self) -> str:
        return "HEADLESS_BROWSER"

    def fetch(self, keywords: str, limit: int = 25) -> list[JobSignal]:
        signals = []
        start = 0

        while len(signals) < limit:
            params = {"keywords": keywords, "location": self.location, "start": start}
            response = self._get(self.SEARCH_URL, params=params)
            if response is None:
                break

            page = self.parse_cards(response.text)
            if not page:
                break

            signals.extend(page)
            start += self.PAGE_SIZE

        self.logger.info(f"LinkedIn returned {len(signals[:limit])} signals for '{keywords}'")
        return signals[:limit]

    def parse_cards(self, html: str) -> list[JobSignal]:
        """Parse a page of guest search job cards."""
        soup = BeautifulSoup(html, "html.parser")
        signals = []

        for card in soup.find_all("div", class_="base-search-card"):
            title_el = card.find("h3", class_="base-search-card__title")
            company_el = card.find("h4", class_="base-search-card__subtitle")
            if not title_el or not company_el:
                continue

            location_el = card.find("span", class_="job-search-card__location")
            time_el = card.find("time")
            link_el = card.find("a", class_="base-card__full-link")

            title = title_el.get_text(strip=True)
            company = company_el.get_text(strip=True)
            location = location_el.get_text(strip=True) if location_el else ""
            url = link_el.get("href", "").split("?")[0] if link_el else ""

            signals.append(JobSignal(
                id=self._make_id(title, company, url),
                title=title,
                company=company,
                location=location,
                is_remote="remote" in location.lower(),
                posted_date=time_el.get_text(strip=True) if time_el else "Just now",
                source_tier=SourceTier.AGGREGATOR,
                source_platform=self.name,
                source_url=url,
                proof=f"LinkedIn guest search: {url}" if url else "LinkedIn guest search",
            ))

        return signals
