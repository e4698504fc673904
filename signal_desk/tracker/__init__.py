"""
Desk state, persistence and dashboard rendering.
"""

from .storage import Storage, MemoryStorage, JsonFileStorage
from .app_state import AppState
from .dashboard import DashboardRenderer

__all__ = [
    "Storage",
    "MemoryStorage",
    "JsonFileStorage",
    "AppState",
    "DashboardRenderer",
]
