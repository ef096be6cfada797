"""
Centralized Configuration for the Home Care Licensing Platform
Manages environment-specific settings, secrets, and service configurations.
"""
import os
from datetime import timedelta


def _database_url(default=None):
    """Read DATABASE_URL, normalizing Render/Heroku style postgres:// URLs."""
    url = os.environ.get('DATABASE_URL', default)
    if url and url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    """Base configuration with defaults"""

    # Flask Settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or os.urandom(32).hex()
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max request body

    # CORS Settings
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')
    CORS_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
    CORS_ALLOW_HEADERS = ['Content-Type', 'Authorization', 'X-Requested-With']

    # Database Settings
    DATABASE_URL = _database_url()
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Public URL used in email links
    APP_URL = os.environ.get('APP_URL', 'http://localhost:5000')

    # Email (Resend HTTP API)
    RESEND_API_KEY = os.environ.get('RESEND_API_KEY', '')
    RESEND_API_URL = os.environ.get('RESEND_API_URL', 'https://api.resend.com/emails')
    EMAIL_FROM = os.environ.get('EMAIL_FROM', 'Home Care Licensing <onboarding@resend.dev>')
    EMAIL_TIMEOUT = int(os.environ.get('EMAIL_TIMEOUT', '10'))  # seconds

    # Password reset tokens
    PASSWORD_RESET_MAX_AGE = int(os.environ.get('PASSWORD_RESET_MAX_AGE', '3600'))  # seconds

    # Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    LOG_FILE = os.environ.get('LOG_FILE', 'app.log')

    # Session Configuration
    SESSION_PERMANENT = False
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)

    # Create missing tables at startup (Alembic manages production schemas)
    AUTO_CREATE_TABLES = False

    # Seed credentials for the first admin account
    DEFAULT_ADMIN_EMAIL = os.environ.get('DEFAULT_ADMIN_EMAIL', 'admin@homecarelicensing.com')
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD', 'admin123')


class DevelopmentConfig(Config):
    """Development-specific configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = 'DEBUG'
    # Allow all CORS in development
    CORS_ORIGINS = ['*']
    DATABASE_URL = _database_url('sqlite:///homecare_dev.db')
    AUTO_CREATE_TABLES = True


class ProductionConfig(Config):
    """Production-specific configuration"""
    DEBUG = False
    TESTING = False
    # Strict CORS in production
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'https://homecarelicensing.com').split(',')
    # Force HTTPS
    PREFERRED_URL_SCHEME = 'https'
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class TestingConfig(Config):
    """Testing-specific configuration"""
    DEBUG = True
    TESTING = True
    DATABASE_URL = 'sqlite://'
    AUTO_CREATE_TABLES = True
    SECRET_KEY = 'testing-key-4f9c2a7e1b6d3085c9e2f1a4b7d0c3e6'
    RESEND_API_KEY = ''


# Configuration selector
config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig,
}


def get_config():
    """Get configuration based on FLASK_ENV environment variable"""
    env = os.environ.get('FLASK_ENV', 'development')
    return config_by_name.get(env, DevelopmentConfig)


# ============================================================================
# STORAGE POLICY HELPERS
# ============================================================================

def get_app_env():
    """Return the normalized application environment name."""
    return os.environ.get('FLASK_ENV', 'development').lower()


def is_production():
    return get_app_env() == 'production'


def has_database():
    """Check whether a DATABASE_URL is configured in the environment."""
    return bool(_database_url())


def validate_database_config():
    """
    Fail fast when production is started without a database.

    Raises:
        RuntimeError: If FLASK_ENV is production and DATABASE_URL is missing
    """
    if is_production() and not has_database():
        raise RuntimeError(
            "DATABASE_URL must be configured in production. "
            "Set the DATABASE_URL environment variable to a PostgreSQL connection string."
        )
    return True
