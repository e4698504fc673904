"""
Scraper agents, ghost job detection and agent scheduling.
"""

from .base import ScraperAgent
from .linkedin import LinkedInAgent
from .dice import DiceAgent
from .greenhouse import GreenhouseAgent
from .ghost import GhostDetector, audit_signal_integrity
from .registry import AgentRegistry
from .scheduler import AgentScheduler, cron_matches

__all__ = [
    "ScraperAgent",
    "LinkedInAgent",
    "DiceAgent",
    "GreenhouseAgent",
    "GhostDetector",
    "audit_signal_integrity",
    "AgentRegistry",
    "AgentScheduler",
    "cron_matches",
]
