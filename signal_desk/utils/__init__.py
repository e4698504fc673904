"""
Utility modules for Signal Desk.
"""

from .config import Config
from .llm import LLMClient, extract_code_block

__all__ = [
    "Config",
    "LLMClient",
    "extract_code_block",
]
