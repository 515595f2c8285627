from __future__ import annotations

from pathlib import Path

import pytest

from csv_link_editor.config import ConfigError, default_config, load_config
from csv_link_editor.config.loader import apply_env_overrides


def test_load_config_basic(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.server.host == "0.0.0.0"
    assert cfg.server.port == 8080
    assert cfg.server.cors_origins == ("http://localhost:5173",)
    assert cfg.editor.page_size == 2
    assert cfg.editor.default_link_columns == ("Content", "Content 2")
    # omitted keys fall back to defaults
    assert cfg.server.max_upload_mb == 50
    assert cfg.sheets.value_input_option == "RAW"
    assert cfg.sheets.access_token is None


def test_empty_file_is_all_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "editor.yml"
    p.write_text("", encoding="utf-8")
    assert load_config(p) == default_config()


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "editor.yml"
    p.write_text("server: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


def test_root_must_be_mapping(temp_workdir: Path):
    p = temp_workdir / "config" / "editor.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(p)


def test_api_base_url_trailing_slash_stripped(temp_workdir: Path):
    p = temp_workdir / "config" / "editor.yml"
    p.write_text("sheets:\n  api_base_url: http://localhost:9000/v4/\n", encoding="utf-8")
    assert load_config(p).sheets.api_base_url == "http://localhost:9000/v4"


class TestEnvOverrides:
    def test_overrides_apply(self):
        cfg = apply_env_overrides(
            default_config(),
            {
                "EDITOR_HOST": "0.0.0.0",
                "EDITOR_PORT": "9000",
                "GOOGLE_ACCESS_TOKEN": "tok",
                "EDITOR_LOG_LEVEL": "debug",
            },
        )
        assert cfg.server.host == "0.0.0.0"
        assert cfg.server.port == 9000
        assert cfg.sheets.access_token == "tok"
        assert cfg.logging.level == "DEBUG"

    def test_empty_environment_keeps_config(self):
        cfg = default_config()
        assert apply_env_overrides(cfg, {}) == cfg

    def test_bad_port(self):
        with pytest.raises(ConfigError, match="EDITOR_PORT"):
            apply_env_overrides(default_config(), {"EDITOR_PORT": "http"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("EDITOR_PORT", "4000")
        assert apply_env_overrides(default_config()).server.port == 4000
