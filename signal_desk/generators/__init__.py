"""
Generators for tailored resume artifacts and outreach drafts.
"""

from .resume_optimizer import ResumeOptimizer
from .followup_generator import FollowUpGenerator

__all__ = [
    "ResumeOptimizer",
    "FollowUpGenerator",
]
