"""
Base class for scraper agents.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional
import hashlib
import logging

import requests

from signal_desk.core.models import AgentId, JobSignal


def describe_age(posted: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Render a posting timestamp the way job boards do ("3 days ago")."""
    if posted is None:
        return "Just now"

    now = now or datetime.now(timezone.utc)
    if posted.tzinfo is None:
        posted = posted.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    days = (now - posted).days
    if days <= 0:
        return "Just now"
    if days >= 30:
        return "30+ days ago"
    return f"{days} day{'s' if days != 1 else ''} ago"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class ScraperAgent(ABC):
    """Abstract base class for discovery agents."""

    USER_AGENT = "SignalDesk-Discovery/1.0"

    # Console lines emitted by a dry run, after the common header
    SIMULATION_LOG: list[str] = []

    def __init__(self, session: Optional[requests.Session] = None, timeout: int = 30):
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", self.USER_AGENT)
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def agent_id(self) -> AgentId:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name."""
        pass

    @property
    def protocol(self) -> str:
        return "REST_API"

    @abstractmethod
    def fetch(self, keywords: str, limit: int = 25) -> list[JobSignal]:
        """
        Fetch live job signals.

        Args:
            keywords: Search keywords
            limit: Maximum number of signals

        Returns:
            List of JobSignal objects (empty on network failure)
        """
        pass

    def simulate(self) -> list[str]:
        """Return the console log of a dry run without touching the network."""
        header = [
            f"[SYSTEM] Initializing {self.agent_id.value.upper()} Agent...",
            "[SYSTEM] Compliance Check: ARCHITECT_CERTIFIED",
            f"[SYSTEM] Target Protocol: {self.protocol}",
        ]
        self.logger.info(f"Simulating {self.name} agent")
        return header + list(self.SIMULATION_LOG)

    def _make_id(self, *parts: str) -> str:
        digest = hashlib.sha1("|".join(parts).encode("utf-8")).hexdigest()[:12]
        return f"{self.agent_id.value}_{digest}"

    def _get(self, url: str, **kwargs) -> Optional[requests.Response]:
        """GET a URL, returning None on network errors or non-200 responses."""
        try:
            response = self.session.get(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            self.logger.error(f"{self.name} request failed: {e}")
            return None

        if response.status_code != 200:
            self.logger.warning(f"{self.name} returned status {response.status_code}")
            return None

        return response
