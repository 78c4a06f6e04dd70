import pytest
from pydantic import ValidationError

from bill_analyzer.config.settings import Settings


def _settings(**kwargs: object) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        assert _settings().app_env == "dev"

    def test_default_http_port(self) -> None:
        assert _settings().http_port == 8080

    def test_default_upload_limits(self) -> None:
        s = _settings()
        assert s.upload_max_file_size_bytes == 10 * 1024 * 1024
        assert s.upload_allowed_types == ["image/jpeg", "image/png", "application/pdf"]

    def test_default_image_settings(self) -> None:
        s = _settings()
        assert s.image_max_width_px == 1200
        assert s.image_jpeg_quality == 0.9

    def test_default_analysis_provider(self) -> None:
        s = _settings()
        assert s.analysis_provider == "groq"
        assert s.analysis_model_name == "meta-llama/llama-4-scout-17b-16e-instruct"
        assert s.analysis_timeout_seconds == 30
        assert s.analysis_max_image_size_bytes == 5 * 1024 * 1024

    def test_default_retry_policy(self) -> None:
        policy = _settings().retry_policy()
        assert policy.max_attempts == 3
        assert policy.initial_delay_seconds == 1.0
        assert policy.multiplier == 2.0


class TestSettingsFromEnv:
    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UPLOAD_MAX_FILE_SIZE_BYTES", "2048")
        monkeypatch.setenv("ANALYSIS_RETRY_INITIAL_DELAY_MS", "500")
        s = _settings()
        assert s.upload_max_file_size_bytes == 2048
        assert s.retry_policy().initial_delay_seconds == 0.5

    def test_reads_json_schema_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert _settings().analysis_use_json_schema is False
        monkeypatch.setenv("ANALYSIS_USE_JSON_SCHEMA", "true")
        assert _settings().analysis_use_json_schema is True

    def test_reads_allowed_types_as_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UPLOAD_ALLOWED_TYPES", '["image/png"]')
        assert _settings().upload_allowed_types == ["image/png"]


class TestSettingsValidation:
    def test_rejects_unknown_upload_type(self) -> None:
        with pytest.raises(ValidationError, match="Unsupported upload types"):
            _settings(upload_allowed_types=["image/gif"])

    def test_rejects_empty_allow_list(self) -> None:
        with pytest.raises(ValidationError):
            _settings(upload_allowed_types=[])

    def test_rejects_zero_max_file_size(self) -> None:
        with pytest.raises(ValidationError):
            _settings(upload_max_file_size_bytes=0)

    def test_rejects_too_short_retry_delay(self) -> None:
        with pytest.raises(ValidationError):
            _settings(analysis_retry_initial_delay_ms=50)

    def test_rejects_shrinking_multiplier(self) -> None:
        with pytest.raises(ValidationError):
            _settings(analysis_retry_multiplier=0.5)

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValidationError):
            _settings(analysis_retry_max_attempts=0)


class TestSettingsHelpers:
    @pytest.mark.parametrize(("size", "expected"), [(0, False), (1, True), (100, True), (101, False)])
    def test_is_file_size_valid(self, size: int, expected: bool) -> None:
        assert _settings(upload_max_file_size_bytes=100).is_file_size_valid(size) is expected

    def test_is_type_allowed(self) -> None:
        s = _settings(upload_allowed_types=["image/jpeg"])
        assert s.is_type_allowed("image/jpeg")
        assert not s.is_type_allowed("image/png")
        assert not s.is_type_allowed(None)
