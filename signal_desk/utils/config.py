"""
Configuration management for Signal Desk.

Settings live in a JSON file layered over DEFAULT_CONFIG. Keys are
addressed with dot notation, e.g. "dashboard.legitimacy_threshold".
"""

from pathlib import Path
from typing import Optional
import copy
import json
import os

from signal_desk.utils.llm import DEFAULT_MODEL


def merge_settings(defaults: dict, overrides: dict) -> dict:
    """Recursively overlay user settings on top of the defaults."""
    merged = dict(defaults)
    for name, override in overrides.items():
        current = merged.get(name)
        if isinstance(current, dict) and isinstance(override, dict):
            merged[name] = merge_settings(current, override)
        else:
            merged[name] = override
    return merged


class Config:
    """Desk settings: storage paths, optimizer model, thresholds and API keys."""

    DEFAULT_CONFIG = {
        "api_keys": {
            "anthropic": "",
        },
        "optimizer": {
            "model": DEFAULT_MODEL,
            "max_tokens": 4000,
            "temperature": 0.2,
        },
        "storage": {
            "data_dir": "./desk_data",
        },
        "dashboard": {
            "output_dir": "./dashboards",
            "legitimacy_threshold": 0.7,
        },
        "agents": {
            "default_keywords": "QA Automation",
            "parallel": True,
        },
    }

    SENSITIVE_KEYS = {"api_key", "api_keys", "key", "secret", "password", "token"}

    def __init__(self, config_path: Optional[str] = None):
        """
        Load settings.

        Args:
            config_path: Settings file (default: ~/.signal_desk/config.json)
        """
        self.config_path = (
            Path(config_path) if config_path
            else Path.home() / ".signal_desk" / "config.json"
        )
        self.config = self._read()

    def _read(self) -> dict:
        defaults = copy.deepcopy(self.DEFAULT_CONFIG)
        if not self.config_path.exists():
            return defaults
        with open(self.config_path, "r", encoding="utf-8") as f:
            return merge_settings(defaults, json.load(f))

    def save(self) -> None:
        """Write the settings back to config_path, creating parent folders."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default=None):
        """
        Look up a dotted key.

        Args:
            key: Dotted path (e.g., "optimizer.model")
            default: Returned when any segment is missing
        """
        node = self.config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value) -> None:
        """Assign a dotted key, creating intermediate sections as needed."""
        *parents, leaf = key.split(".")
        node = self.config
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[leaf] = value

    def get_api_key(self, provider: str) -> str:
        """
        Resolve the API key for a provider.

        {PROVIDER}_API_KEY in the environment wins over the settings file.
        """
        return os.environ.get(f"{provider.upper()}_API_KEY") or self.get(f"api_keys.{provider}", "")

    def set_api_key(self, provider: str, key: str) -> None:
        self.set(f"api_keys.{provider}", key)
        self.save()

    def get_data_dir(self) -> str:
        return self.get("storage.data_dir", "./desk_data")

    def get_output_dir(self) -> str:
        return self.get("dashboard.output_dir", "./dashboards")

    def get_legitimacy_threshold(self) -> float:
        return float(self.get("dashboard.legitimacy_threshold", 0.7))

    def print_config(self) -> None:
        """Print the settings with secrets masked."""
        print(json.dumps(self.masked(), indent=2))

    def masked(self) -> dict:
        return self._mask_section(self.config)

    def _is_sensitive(self, key: str) -> bool:
        key = key.lower()
        return any(key == s or key.endswith(f"_{s}") for s in self.SENSITIVE_KEYS)

    def _mask_section(self, section: dict) -> dict:
        masked = {}
        for name, value in section.items():
            if isinstance(value, dict):
                masked[name] = (
                    {k: self._mask_value(v) for k, v in value.items()}
                    if self._is_sensitive(name)
                    else self._mask_section(value)
                )
            else:
                masked[name] = self._mask_value(value) if self._is_sensitive(name) else value
        return masked

    def _mask_value(self, value) -> str:
        if not value:
            return "(not set)"
        value = str(value)
        return f"{value[:4]}...{value[-4:]}" if len(value) > 8 else "****"
