"""Tests for config loading and validation."""

from pathlib import Path

import pytest

from cli.config import find_config, load_config_model
from cli.config_models import JournalConfig


def test_defaults_without_file(tmp_path):
    config = load_config_model(tmp_path / "missing.yaml")
    assert config.llm.provider == "auto"
    assert config.llm.enabled is True
    assert config.analysis.default_window_days == 30
    assert config.analysis.suggestions is False
    assert config.analysis.goals == []
    assert config.paths.data_file == Path("~/journal-companion/entries.json").expanduser()
    assert config.paths.log_file is None
    assert config.logging.level == "WARNING"


def test_loads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "llm:\n"
        "  provider: openai\n"
        "  enabled: false\n"
        "paths:\n"
        f"  data_file: {tmp_path / 'entries.json'}\n"
        "analysis:\n"
        "  default_window_days: 7\n"
        "  suggestions: true\n"
        "  goals:\n"
        "    - sleep earlier\n"
        "logging:\n"
        "  level: debug\n"
        "  json: true\n"
    )
    config = load_config_model(path)
    assert config.llm.provider == "openai"
    assert config.llm.enabled is False
    assert config.paths.data_file == tmp_path / "entries.json"
    assert config.analysis.default_window_days == 7
    assert config.analysis.suggestions is True
    assert config.analysis.goals == ["sleep earlier"]
    assert config.logging.level == "DEBUG"
    assert config.logging.json_output is True


def test_env_var_expansion(tmp_path, monkeypatch):
    monkeypatch.setenv("MY_JOURNAL_KEY", "sk-ant-secret")
    path = tmp_path / "config.yaml"
    path.write_text("llm:\n  api_key: ${MY_JOURNAL_KEY}\n")
    assert load_config_model(path).llm.api_key == "sk-ant-secret"


def test_tilde_expanded():
    config = JournalConfig.from_dict({"paths": {"data_file": "~/j/entries.json"}})
    assert config.paths.data_file == Path.home() / "j" / "entries.json"


@pytest.mark.parametrize(
    "body",
    [
        "llm:\n  provider: llama\n",
        "analysis:\n  default_window_days: 0\n",
        "logging:\n  level: chatty\n",
        "llm:\n  max_tokens: -1\n",
    ],
)
def test_validation_errors(tmp_path, body):
    path = tmp_path / "config.yaml"
    path.write_text(body)
    with pytest.raises(ValueError, match="Config validation failed"):
        load_config_model(path)


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("llm: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config_model(path)


def test_non_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config_model(path)


def test_find_config_prefers_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Path, "home", lambda: tmp_path / "home")
    assert find_config() is None
    (tmp_path / "config.yaml").write_text("{}\n")
    assert find_config() == tmp_path / "config.yaml"


def test_to_dict_uses_yaml_keys():
    data = JournalConfig().to_dict()
    assert data["logging"]["json"] is False
    assert set(data) == {"llm", "paths", "analysis", "retry", "logging"}
