"""
Signal Desk - Verified Job Signals and Audited Resume Tailoring

This application:
1. Keeps a master resume as the single source of truth for your experience
2. Discovers job signals through scraper agents and scores their legitimacy
3. Tailors the master resume to a signal, with a language model or by rules
4. Rejects any tailored artifact that uses words absent from the master resume
5. Tracks signals through a Kanban pipeline and drafts follow-ups for stale ones
6. Renders dashboards of the whole desk
"""

__version__ = "1.0.0"
__author__ = "Signal Desk"
