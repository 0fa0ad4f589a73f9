"""Tests for the model registry and dialect classification."""

import pytest

from cfshim.core import ModelNotSupportedError, ShimSettings
from cfshim.core.models import Dialect, ModelRegistry, classify_dialect
from cfshim.core.settings import DEFAULT_MODEL_MAP


class TestClassifyDialect:
    def test_gpt_oss_family_is_structured(self):
        assert classify_dialect("@cf/openai/gpt-oss-120b") is Dialect.STRUCTURED
        assert classify_dialect("@cf/openai/gpt-oss-20b") is Dialect.STRUCTURED

    def test_everything_else_is_legacy(self):
        assert classify_dialect("@cf/meta/llama-4-scout-17b-16e-instruct") is Dialect.LEGACY
        assert classify_dialect("@cf/openai/whisper") is Dialect.LEGACY

    def test_custom_prefixes(self):
        assert classify_dialect("@cf/acme/new", ["@cf/acme/"]) is Dialect.STRUCTURED
        assert classify_dialect("@cf/openai/gpt-oss-20b", []) is Dialect.LEGACY


class TestModelRegistry:
    """Tests for resolving public model ids."""

    @pytest.fixture
    def registry(self):
        return ModelRegistry.from_settings(ShimSettings())

    def test_default_table_has_six_models(self, registry):
        assert len(registry) == 6
        assert registry.model_ids() == list(DEFAULT_MODEL_MAP)

    def test_resolves_known_model(self, registry):
        route = registry.resolve("gpt-oss-120b")
        assert route.public_id == "gpt-oss-120b"
        assert route.backend_id == "@cf/openai/gpt-oss-120b"
        assert route.dialect is Dialect.STRUCTURED

    @pytest.mark.parametrize("model", [None, ""])
    def test_missing_model_uses_default(self, registry, model):
        route = registry.resolve(model)
        assert route.public_id == "deepseek-r1"
        assert route.dialect is Dialect.LEGACY

    def test_unknown_model_resolves_to_none(self, registry):
        assert registry.resolve("gpt-5") is None
        assert registry.resolve(42) is None

    def test_require_raises_for_unknown_model(self, registry):
        with pytest.raises(ModelNotSupportedError, match="Model 'gpt-5' not supported"):
            registry.require("gpt-5")

    def test_lookup_is_case_sensitive(self, registry):
        assert "deepseek-r1" in registry
        assert "DeepSeek-R1" not in registry

    def test_missing_default_model_is_rejected(self):
        registry = ModelRegistry({"only": "@cf/x/only"}, default_model="absent")
        with pytest.raises(ModelNotSupportedError, match="Model 'absent' not supported"):
            registry.require(None)
