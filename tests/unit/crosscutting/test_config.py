"""
Name: Settings Tests

Responsibilities:
  - Defaults (token TTL, storage backend resolution)
  - Validators (TTL, storage backend, pool bounds, payment method width)
  - Production hardening (secret strength, storage backend)
"""

import pytest
from pydantic import ValidationError

from gardenspace.crosscutting.config import Settings
from gardenspace.domain.entities import PAYMENT_METHOD_MAX_CHARS

pytestmark = pytest.mark.unit

STRONG_SECRET = "x" * 40


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestDefaults:
    def test_token_ttl_defaults_to_one_day(self, monkeypatch):
        monkeypatch.delenv("JWT_ACCESS_TTL_MINUTES", raising=False)
        assert _settings().jwt_access_ttl_minutes == 1440

    @pytest.mark.parametrize(
        "app_env,backend,expected",
        [
            ("test", "", "memory"),
            ("ci", "", "memory"),
            ("development", "", "postgres"),
            ("development", "memory", "memory"),
            ("test", "postgres", "postgres"),
        ],
    )
    def test_resolved_storage_backend(self, app_env, backend, expected):
        settings = _settings(app_env=app_env, storage_backend=backend)
        assert settings.resolved_storage_backend() == expected

    def test_allowed_origins_list(self):
        settings = _settings(allowed_origins=" http://a.com , ,http://b.com")
        assert settings.get_allowed_origins_list() == ["http://a.com", "http://b.com"]


class TestValidators:
    def test_ttl_must_be_positive(self):
        with pytest.raises(ValidationError):
            _settings(jwt_access_ttl_minutes=0)

    def test_unknown_storage_backend(self):
        with pytest.raises(ValidationError):
            _settings(storage_backend="sqlite")

    def test_pool_bounds(self):
        with pytest.raises(ValidationError):
            _settings(db_pool_min_size=5, db_pool_max_size=2)

    @pytest.mark.parametrize("chars", [0, PAYMENT_METHOD_MAX_CHARS + 1])
    def test_payment_method_limit_must_fit_column(self, chars):
        with pytest.raises(ValidationError):
            _settings(max_payment_method_chars=chars)

    def test_payment_method_limit_within_column(self):
        assert _settings(max_payment_method_chars=40).max_payment_method_chars == 40
        assert _settings().max_payment_method_chars == PAYMENT_METHOD_MAX_CHARS


class TestProductionHardening:
    def test_default_secret_rejected(self):
        with pytest.raises(ValidationError):
            _settings(app_env="production", jwt_secret="dev-secret")

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            _settings(app_env="production", jwt_secret="short-but-custom")

    def test_memory_backend_rejected(self):
        with pytest.raises(ValidationError):
            _settings(
                app_env="production",
                jwt_secret=STRONG_SECRET,
                storage_backend="memory",
            )

    def test_valid_production_settings(self):
        settings = _settings(
            app_env="production",
            jwt_secret=STRONG_SECRET,
            storage_backend="postgres",
        )
        assert settings.is_production() is True
