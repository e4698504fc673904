import json

from signal_desk.utils.config import Config
from signal_desk.utils.llm import DEFAULT_MODEL


def test_defaults_without_file(tmp_path):
    config = Config(str(tmp_path / "config.json"))
    assert config.get("optimizer.temperature") == 0.2
    assert config.get_data_dir() == "./desk_data"
    assert config.get_legitimacy_threshold() == 0.7
    assert config.get("missing.key", "default") == "default"


def test_file_is_deep_merged(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"optimizer": {"model": "custom"}}), encoding="utf-8")
    config = Config(str(path))
    assert config.get("optimizer.model") == "custom"
    assert config.get("optimizer.max_tokens") == 4000


def test_set_and_save(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = Config(str(path))
    config.set("dashboard.legitimacy_threshold", 0.5)
    config.set("agents.extra.flag", True)
    config.save()

    reloaded = Config(str(path))
    assert reloaded.get_legitimacy_threshold() == 0.5
    assert reloaded.get("agents.extra.flag") is True
    # Defaults are not shared between instances
    assert Config(str(tmp_path / "other.json")).get_legitimacy_threshold() == 0.7


def test_env_api_key_takes_precedence(tmp_path, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    config = Config(str(tmp_path / "config.json"))
    config.set("api_keys.anthropic", "file-key")
    assert config.get_api_key("anthropic") == "file-key"
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
    assert config.get_api_key("anthropic") == "env-key"


def test_masked_hides_keys(tmp_path):
    config = Config(str(tmp_path / "config.json"))
    config.set("api_keys.anthropic", "sk-ant-1234567890")
    masked = config.masked()
    assert masked["api_keys"]["anthropic"] == "sk-a...7890"
    assert masked["optimizer"]["model"] == config.get("optimizer.model")
    assert Config(str(tmp_path / "x.json")).masked()["api_keys"]["anthropic"] == "(not set)"
    assert masked["optimizer"]["max_tokens"] == 4000


def test_default_model_matches_llm_client(tmp_path):
    assert Config(str(tmp_path / "config.json")).get("optimizer.model") == DEFAULT_MODEL
