"""
重新请求辅助函数的单元测试
"""

import json

import pytest

from config.env_loader import load_extraction_settings
from services.requery import build_requery_retryer, default_requery_kinds, extract_with_requery
from utils.error_handler import ErrorKind


@pytest.fixture
def fast_settings():
    """不等待的重试配置"""
    return load_extraction_settings(
        _env_file=None,
        requery_max_attempts=3,
        requery_wait_multiplier=0,
        requery_max_wait=0,
    )


class _ScriptedModel:
    """依次返回预设文本的假模型"""

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = 0

    def __call__(self):
        response = self._responses[min(self.calls, len(self._responses) - 1)]
        self.calls += 1
        return response


class TestExtractWithRequery:
    """测试按结果重试"""

    def test_first_attempt_succeeds(self, fast_settings, sample_text, sample_payload):
        model = _ScriptedModel([sample_text])
        result = extract_with_requery(model, settings=fast_settings)
        assert result.value.to_dict() == sample_payload
        assert model.calls == 1

    def test_succeeds_on_second_attempt(self, fast_settings, sample_text, sample_payload):
        model = _ScriptedModel(["I cannot help with that.", sample_text])
        result = extract_with_requery(model, settings=fast_settings)
        assert result.is_ok
        assert result.value.to_dict() == sample_payload
        assert model.calls == 2

    def test_returns_last_error_after_max_attempts(self, fast_settings):
        model = _ScriptedModel(["no json", "still none", '{"title": "x"}'])
        result = extract_with_requery(model, settings=fast_settings)
        assert model.calls == 3
        assert result.is_err
        assert result.error.kind == ErrorKind.MISSING_FIELDS

    def test_stops_on_kind_not_retried(self, fast_settings, sample_text):
        model = _ScriptedModel(["plain prose", sample_text])
        result = extract_with_requery(
            model,
            settings=fast_settings,
            retry_kinds={ErrorKind.SYNTAX_ERROR},
        )
        assert model.calls == 1
        assert result.error.kind == ErrorKind.BOUNDARY_NOT_FOUND

    def test_fetch_exception_propagates(self, fast_settings):
        def _broken():
            raise ConnectionError("upstream down")

        with pytest.raises(ConnectionError):
            extract_with_requery(_broken, settings=fast_settings)

    def test_repaired_output_is_not_requeried(self, fast_settings, sample_payload):
        sample_payload["keyTokens"] = ["only one"]
        model = _ScriptedModel([f"```json\n{json.dumps(sample_payload)}\n```"])
        result = extract_with_requery(model, settings=fast_settings)
        assert model.calls == 1
        assert len(result.value.key_tokens) == 7


class TestRetryer:
    """测试重试器构建"""

    def test_default_kinds_cover_all_recoverable(self):
        assert default_requery_kinds() == frozenset(ErrorKind)

    def test_stop_uses_configured_attempts(self):
        settings = load_extraction_settings(
            _env_file=None,
            requery_max_attempts=1,
            requery_wait_multiplier=0,
            requery_max_wait=0,
        )
        retryer = build_requery_retryer(settings, default_requery_kinds())
        model = _ScriptedModel(["nothing here"])

        from core.pipeline import extract_analysis_record

        result = retryer(lambda: extract_analysis_record(model(), settings=settings))
        assert model.calls == 1
        assert result.is_err
