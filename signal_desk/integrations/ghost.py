"""
Ghost job detection.

Scores how likely a posting is to be a real, open position. Stale posts,
thin descriptions, and hype buzzwords all lower the legitimacy score.
"""

from .base import ScraperAgent
from signal_desk.core.models import AgentId, JobSignal


BUZZWORDS = ["rockstar", "ninja", "superhero", "guru", "family"]
BUZZWORD_PENALTY = 0.15
MIN_DESCRIPTION_LENGTH = 500
SHORT_DESCRIPTION_PENALTY = 0.3
STALE_POST_PENALTY = 0.5


def audit_signal_integrity(description: str, posted_date: str) -> float:
    """
    Score a posting's legitimacy between 0.0 and 1.0.

    Args:
        description: Full posting text
        posted_date: Board-provided age, e.g. "2 months ago" or "30+ days ago"

    Returns:
        Legitimacy score, rounded to two decimals
    """
    description = description or ""
    posted_date = posted_date or ""
    score = 1.0

    lowered = description.lower()
    for word in BUZZWORDS:
        if word in lowered:
            score -= BUZZWORD_PENALTY

    if len(description) < MIN_DESCRIPTION_LENGTH:
        score -= SHORT_DESCRIPTION_PENALTY

    if "month" in posted_date.lower() or "30+" in posted_date:
        score -= STALE_POST_PENALTY

    return round(max(0.0, score), 2)


class GhostDetector(ScraperAgent):
    """Audit agent that rescores signals instead of discovering them."""

    SIMULATION_LOG = [
        "[AUDIT] Analyzing job signal integrity for 'SDET Rockstar'...",
        "[AUDIT] Keyword Scan: Found 'rockstar' (-0.3 penalty)",
        "[AUDIT] Age Check: 65 days since posting (-0.7 penalty)",
        "[ALERT] GHOST_JOB detected (Legitimacy: 0.0)",
        "[SYSTEM] Moving to unverified quarantine.",
    ]

    @property
    def agent_id(self) -> AgentId:
        return AgentId.GHOST

    @property
    def name(self) -> str:
        return "Ghost Job Detector"

    @property
    def protocol(self) -> str:
        return "HEADLESS_BROWSER"

    def fetch(self, keywords: str, limit: int = 25) -> list[JobSignal]:
        return []

    def score(self, jobs: list[JobSignal]) -> list[JobSignal]:
        """Rewrite each signal's legitimacy in place and return the list."""
        flagged = 0
        for job in jobs:
            job.legitimacy = audit_signal_integrity(job.description, job.posted_date)
            if job.legitimacy < 0.7:
                flagged += 1
                self.logger.debug(f"Possible ghost job: {job.title} at {job.company} ({job.legitimacy})")

        if flagged:
            self.logger.info(f"Flagged {flagged} of {len(jobs)} signals as possible ghost jobs")
        return jobs
