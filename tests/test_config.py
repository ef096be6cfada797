"""
Tests for configuration system
"""
import os
import pytest
from unittest.mock import patch
from config import (
    Config,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    validate_database_config
)


@pytest.mark.unit
class TestBaseConfig:
    """Tests for base configuration"""

    def test_base_config_has_secret_key(self):
        """Test that base config has a secret key"""
        config = Config()
        assert hasattr(config, 'SECRET_KEY')
        assert config.SECRET_KEY is not None

    def test_base_config_has_max_content_length(self):
        """Test that base config has max content length"""
        config = Config()
        assert config.MAX_CONTENT_LENGTH == 16 * 1024 * 1024

    def test_base_config_has_cors_settings(self):
        """Test that base config has CORS settings"""
        config = Config()
        assert hasattr(config, 'CORS_ORIGINS')
        assert 'GET' in config.CORS_METHODS
        assert 'DELETE' in config.CORS_METHODS

    def test_base_config_has_email_settings(self):
        """Test that base config points at the Resend API"""
        config = Config()
        assert config.RESEND_API_URL.startswith('https://')
        assert config.EMAIL_TIMEOUT > 0

    def test_base_config_does_not_create_tables(self):
        """Test that Alembic owns the schema outside development"""
        assert Config.AUTO_CREATE_TABLES is False

    def test_base_config_has_logging_settings(self):
        """Test that base config has logging settings"""
        config = Config()
        assert config.LOG_FILE == 'app.log'


@pytest.mark.unit
class TestDevelopmentConfig:
    """Tests for development configuration"""

    def test_development_config_has_debug(self):
        """Test that development config has debug enabled"""
        assert DevelopmentConfig.DEBUG is True
        assert DevelopmentConfig.TESTING is False

    def test_development_config_has_debug_log_level(self):
        """Test that development config has DEBUG log level"""
        assert DevelopmentConfig.LOG_LEVEL == 'DEBUG'

    def test_development_config_creates_tables(self):
        """Test that development config creates missing tables"""
        assert DevelopmentConfig.AUTO_CREATE_TABLES is True


@pytest.mark.unit
class TestProductionConfig:
    """Tests for production configuration"""

    def test_production_config_has_debug_disabled(self):
        """Test that production config has debug disabled"""
        assert ProductionConfig.DEBUG is False
        assert ProductionConfig.TESTING is False

    def test_production_config_has_secure_cookies(self):
        """Test that production config has secure cookies"""
        assert ProductionConfig.SESSION_COOKIE_SECURE is True
        assert ProductionConfig.SESSION_COOKIE_HTTPONLY is True
        assert ProductionConfig.SESSION_COOKIE_SAMESITE == 'Lax'

    def test_production_config_has_https_scheme(self):
        """Test that production config prefers HTTPS"""
        assert ProductionConfig.PREFERRED_URL_SCHEME == 'https'


@pytest.mark.unit
class TestTestingConfig:
    """Tests for testing configuration"""

    def test_testing_config_has_testing_enabled(self):
        """Test that testing config has testing enabled"""
        assert TestingConfig.TESTING is True

    def test_testing_config_uses_in_memory_sqlite(self):
        """Test that testing config uses an in-memory database"""
        assert TestingConfig.DATABASE_URL == 'sqlite://'
        assert TestingConfig.AUTO_CREATE_TABLES is True

    def test_testing_config_disables_email(self):
        """Test that testing config never talks to Resend"""
        assert TestingConfig.RESEND_API_KEY == ''


@pytest.mark.unit
class TestGetConfig:
    """Tests for configuration selector"""

    def test_get_config_returns_development_by_default(self):
        """Test that get_config returns development config by default"""
        with patch.dict(os.environ, {}, clear=True):
            assert get_config() == DevelopmentConfig

    def test_get_config_returns_production_when_set(self):
        """Test that get_config returns production config when env is production"""
        with patch.dict(os.environ, {'FLASK_ENV': 'production'}):
            assert get_config() == ProductionConfig

    def test_get_config_returns_testing_when_set(self):
        """Test that get_config returns testing config when env is testing"""
        with patch.dict(os.environ, {'FLASK_ENV': 'testing'}):
            assert get_config() == TestingConfig

    def test_get_config_falls_back_for_unknown_env(self):
        """Test that an unknown environment name gets development config"""
        with patch.dict(os.environ, {'FLASK_ENV': 'staging'}):
            assert get_config() == DevelopmentConfig


@pytest.mark.unit
class TestDatabasePolicy:
    """Tests for the production database requirement"""

    def test_production_without_database_fails(self):
        """Test that production refuses to start without DATABASE_URL"""
        with patch.dict(os.environ, {'FLASK_ENV': 'production'}, clear=True):
            with pytest.raises(RuntimeError):
                validate_database_config()

    def test_production_with_database_passes(self):
        """Test that production with DATABASE_URL passes"""
        env = {'FLASK_ENV': 'production', 'DATABASE_URL': 'postgres://u:p@localhost/db'}
        with patch.dict(os.environ, env, clear=True):
            assert validate_database_config() is True

    def test_development_without_database_passes(self):
        """Test that development does not require DATABASE_URL"""
        with patch.dict(os.environ, {'FLASK_ENV': 'development'}, clear=True):
            assert validate_database_config() is True
