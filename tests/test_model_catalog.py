# Test suite for the model catalog

import json

import pytest

from promptx.config.models import (
    DEFAULT_CONTEXT_LIMIT,
    MODEL_CONTEXT_LIMITS,
    ModelCatalog,
    default_catalog,
)
from promptx.exceptions import ModelConfigError


class TestModelCatalog:
    """Lookups and extension"""

    def test_compiled_in_table(self):
        catalog = ModelCatalog()
        assert len(catalog) == len(MODEL_CONTEXT_LIMITS)
        assert catalog.context_limit("claude-3-haiku") == 200000
        assert "deepseek-v3" in catalog

    def test_unknown_and_empty_ids_use_default(self):
        catalog = ModelCatalog()
        assert catalog.context_limit("no-such-model") == DEFAULT_CONTEXT_LIMIT
        assert catalog.context_limit("") == DEFAULT_CONTEXT_LIMIT
        assert catalog.context_limit(None) == DEFAULT_CONTEXT_LIMIT

    def test_register_overrides(self):
        catalog = ModelCatalog()
        catalog.register("gpt-4", 64000)
        catalog.register("new-model", 4096)

        assert catalog.context_limit("gpt-4") == 64000
        assert catalog.context_limit("new-model") == 4096

    @pytest.mark.parametrize("limit", [0, -5, "big", True, None])
    def test_register_rejects_bad_limits(self, limit):
        with pytest.raises(ModelConfigError):
            ModelCatalog().register("bad", limit)

    def test_default_catalog_is_shared(self):
        assert default_catalog() is default_catalog()


class TestModelCatalogFromJson:
    """Model map files"""

    def write(self, tmp_path, data):
        path = tmp_path / "models.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_merges_over_compiled_in_table(self, tmp_path):
        path = self.write(
            tmp_path,
            {
                "default_context_limit": 32768,
                "models": {
                    "local-qwen": {"context_window": 40960},
                    "gpt-3.5-turbo": 4096,
                },
            },
        )
        catalog = ModelCatalog.from_json(path)

        assert catalog.context_limit("local-qwen") == 40960
        assert catalog.context_limit("gpt-3.5-turbo") == 4096
        assert catalog.context_limit("claude-3-opus") == 200000
        assert catalog.context_limit("unknown") == 32768

    def test_missing_file(self, tmp_path):
        with pytest.raises(ModelConfigError) as exc_info:
            ModelCatalog.from_json(tmp_path / "missing.json")
        assert exc_info.value.config_file == tmp_path / "missing.json"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "models.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ModelConfigError):
            ModelCatalog.from_json(path)

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"models": []},
            {"models": {"m": {"context_window": 0}}},
            {"models": {"m": {}}},
            {"default_context_limit": "lots"},
        ],
    )
    def test_rejects_bad_shapes(self, tmp_path, data):
        with pytest.raises(ModelConfigError):
            ModelCatalog.from_json(self.write(tmp_path, data))


if __name__ == "__main__":
    pytest.main([__file__])
