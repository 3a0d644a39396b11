"""测试配置模块"""
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from config import ExtractionSettings, get_settings, load_extraction_settings
from config.constants import (
    BOTTOM_MODULES,
    MODULES_BY_ID,
    TOP_MODULES,
    DiagnosticLimits,
    KeyTokenRules,
    RecordFields,
)


class TestExtractionSettings:
    """测试ExtractionSettings类"""

    def test_defaults(self):
        settings = load_extraction_settings(_env_file=None)

        assert settings.preview_chars == DiagnosticLimits.PREVIEW_CHARS
        assert settings.key_token_fallbacks == KeyTokenRules.DEFAULT_FALLBACKS
        assert settings.enable_library_repair is False
        assert settings.requery_max_attempts == 3
        assert settings.console_log_level == "WARNING"
        assert settings.log_file_path is None

    def test_env_overrides(self):
        """测试环境变量覆盖"""
        with patch.dict(os.environ, {
            "ANALYSIS_PREVIEW_CHARS": "120",
            "ANALYSIS_ENABLE_LIBRARY_REPAIR": "true",
            "ANALYSIS_LOG_LEVEL": "debug",
        }):
            settings = ExtractionSettings(_env_file=None)

        assert settings.preview_chars == 120
        assert settings.enable_library_repair is True
        assert settings.log_level == "DEBUG"

    def test_fallbacks_from_comma_separated_env(self):
        with patch.dict(os.environ, {"ANALYSIS_KEY_TOKEN_FALLBACKS": "warm light, soft focus ,, film grain"}):
            settings = ExtractionSettings(_env_file=None)

        assert settings.key_token_fallbacks == ("warm light", "soft focus", "film grain")

    def test_fallbacks_from_json_env(self):
        with patch.dict(os.environ, {"ANALYSIS_KEY_TOKEN_FALLBACKS": '["warm light", "soft focus"]'}):
            settings = ExtractionSettings(_env_file=None)

        assert settings.key_token_fallbacks == ("warm light", "soft focus")

    def test_negative_preview_rejected(self):
        with pytest.raises(ValidationError):
            load_extraction_settings(_env_file=None, preview_chars=-1)

    def test_settings_are_frozen(self):
        settings = load_extraction_settings(_env_file=None)
        with pytest.raises(ValidationError):
            settings.preview_chars = 10  # type: ignore[misc]

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestConstants:
    """测试常量定义"""

    def test_required_fields(self):
        assert len(RecordFields.REQUIRED_FIELDS) == 10
        assert set(RecordFields.REQUIRED_FIELDS) == set(RecordFields.SCALAR_FIELDS) | set(RecordFields.LIST_FIELDS)

    def test_fallback_vocabulary_covers_key_token_count(self):
        assert len(KeyTokenRules.DEFAULT_FALLBACKS) == KeyTokenRules.COUNT
        assert KeyTokenRules.placeholder(0) == "token 1"

    def test_modules_map_to_list_fields(self):
        assert len(MODULES_BY_ID) == len(TOP_MODULES) + len(BOTTOM_MODULES) == 6
        for module in MODULES_BY_ID.values():
            assert module.field in RecordFields.LIST_FIELDS
            assert module.field != RecordFields.KEY_TOKENS
