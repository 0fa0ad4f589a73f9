"""Tests for the config loader module."""

import os
import tempfile
from pathlib import Path

import pytest
import yaml

from cfshim.config_loader import (
    _substitute_env_vars,
    load_config,
    load_settings,
    resolve_config_path,
    resolve_env_path,
)
from cfshim.core import ShimSettings


class TestLoadConfig:
    """Tests for loading configuration from YAML files."""

    def test_loads_simple_config(self):
        """Test loading a simple configuration."""
        config_data = {"model_map": {"test-model": "@cf/test/model"}}

        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.safe_dump(config_data, f)
            f.flush()

            try:
                result = load_config(f.name)
                assert result["model_map"]["test-model"] == "@cf/test/model"
            finally:
                os.unlink(f.name)

    def test_raises_error_for_missing_config(self):
        """Test that error is raised for missing config file."""
        with pytest.raises(RuntimeError, match="Config file not found"):
            load_config("/nonexistent/path/config.yaml")

    def test_empty_file_is_empty_config(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert load_config(str(config_file)) == {}

    def test_substitutes_environment_variables(self, tmp_path, monkeypatch):
        """Test that environment variables are substituted."""
        monkeypatch.setenv("TEST_CF_TOKEN", "my-secret-token")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("cloudflare:\n  api_token: ${TEST_CF_TOKEN}\n")

        result = load_config(str(config_file))
        assert result["cloudflare"]["api_token"] == "my-secret-token"

    def test_paired_env_file_wins_over_process_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_CF_ACCOUNT", "from-process")
        config_file = tmp_path / "config_local.yaml"
        config_file.write_text("cloudflare:\n  account_id: ${TEST_CF_ACCOUNT}\n")
        (tmp_path / ".env_local").write_text("TEST_CF_ACCOUNT=from-dotenv\n")

        result = load_config(str(config_file))
        assert result["cloudflare"]["account_id"] == "from-dotenv"
        assert os.environ["TEST_CF_ACCOUNT"] == "from-process"

    def test_substitution_can_be_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_CF_TOKEN", "secret")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("cloudflare:\n  api_token: ${TEST_CF_TOKEN}\n")

        result = load_config(str(config_file), substitute_env=False)
        assert result["cloudflare"]["api_token"] == "${TEST_CF_TOKEN}"

    def test_uses_config_path_env_var(self, tmp_path, monkeypatch):
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("model_map:\n  a: '@cf/a/a'\n")
        monkeypatch.setenv("CFSHIM_CONFIG", str(config_file))

        assert load_config()["model_map"] == {"a": "@cf/a/a"}

    def test_unset_variables_are_reported_once(self, tmp_path, monkeypatch, caplog):
        monkeypatch.delenv("CF_UNSET_ONE", raising=False)
        monkeypatch.delenv("CF_UNSET_TWO", raising=False)
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "cloudflare:\n  account_id: ${CF_UNSET_ONE}\n  api_token: ${CF_UNSET_TWO}\n"
            "auth:\n  api_keys: ['${CF_UNSET_ONE}']\n"
        )

        with caplog.at_level("WARNING", logger="cfshim"):
            result = load_config(str(config_file))

        assert result["cloudflare"]["account_id"] == "${CF_UNSET_ONE}"
        warnings = [r.getMessage() for r in caplog.records if r.levelname == "WARNING"]
        assert len(warnings) == 1
        assert "CF_UNSET_ONE, CF_UNSET_TWO" in warnings[0]

    def test_load_settings(self, tmp_path):
        config_file = tmp_path / "config_test.yaml"
        config_file.write_text(
            "model_map:\n  m: '@cf/x/m'\n"
            "auth:\n  api_keys: [$SHIM_KEY]\n  api_keys_env: ''\n"
            "proxy_settings:\n  default_model: m\n"
        )
        (tmp_path / ".env_test").write_text("SHIM_KEY=k-123\n")

        settings = load_settings(str(config_file))
        assert settings.default_model == "m"
        assert settings.api_keys == ("k-123",)

    def test_api_keys_env_read_from_dotenv(self, tmp_path, monkeypatch):
        """A key list kept only in the paired dotenv file still authenticates."""
        monkeypatch.delenv("VALID_API_KEYS", raising=False)
        config_file = tmp_path / "config_x.yaml"
        config_file.write_text(
            "cloudflare:\n  account_id: ${CLOUDFLARE_ACCOUNT_ID}\n"
            "auth:\n  api_keys_env: VALID_API_KEYS\n"
        )
        (tmp_path / ".env_x").write_text(
            "CLOUDFLARE_ACCOUNT_ID=acct\nVALID_API_KEYS=sk-1,sk-2\n"
        )

        settings = load_settings(str(config_file))
        assert settings.api_keys == ("sk-1", "sk-2")
        assert settings.account_id == "acct"

    def test_api_keys_env_falls_back_to_process_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SHIM_KEYS", "env-1, env-2")
        config_file = tmp_path / "config_y.yaml"
        config_file.write_text("auth:\n  api_keys: [static]\n  api_keys_env: SHIM_KEYS\n")

        settings = load_settings(str(config_file))
        assert settings.api_keys == ("static", "env-1", "env-2")

    def test_default_config_builds_settings(self, monkeypatch):
        """The shipped config file loads and yields the built-in model table."""
        monkeypatch.delenv("CFSHIM_CONFIG", raising=False)
        settings = ShimSettings.from_config(load_config(substitute_env=False))
        assert settings.default_model == "deepseek-r1"
        assert len(settings.model_map) == 6
        assert settings.max_request_size == 1024 * 1024


class TestPathResolution:
    def test_relative_paths_resolve_from_project_root(self):
        resolved = resolve_config_path("configs/config_default.yaml")
        assert resolved.is_absolute()
        assert resolved.name == "config_default.yaml"

    def test_env_file_pairs_with_config_name(self):
        assert resolve_env_path(Path("/x/config_prod.yaml")) == Path("/x/.env_prod")
        assert resolve_env_path(Path("/x/settings.yaml")) == Path("/x/.env")


class TestSubstituteEnvVars:
    """Tests for environment variable substitution."""

    def test_substitutes_in_nested_dict(self, monkeypatch):
        """Test substitution in nested dictionaries."""
        monkeypatch.setenv("NESTED_VAR", "nested-value")
        result = _substitute_env_vars({"level1": {"level2": "${NESTED_VAR}"}})
        assert result["level1"]["level2"] == "nested-value"

    def test_substitutes_in_list(self, monkeypatch):
        """Test substitution in lists."""
        monkeypatch.setenv("LIST_VAR", "list-value")
        assert _substitute_env_vars(["$LIST_VAR", "static"]) == ["list-value", "static"]

    def test_unset_variable_keeps_placeholder(self, monkeypatch):
        monkeypatch.delenv("DEFINITELY_UNSET_VAR", raising=False)
        assert _substitute_env_vars("${DEFINITELY_UNSET_VAR}") == "${DEFINITELY_UNSET_VAR}"

    def test_preserves_non_string_values(self):
        """Test that non-string values are preserved."""
        data = {"number": 42, "boolean": True, "null": None}
        assert _substitute_env_vars(data) == data
