"""
Home Care Licensing Platform - Application Package

This package contains the modular backend structure:
- api/: HTTP route handlers (Flask Blueprints)
- utils/: Shared request/response helpers

The app factory and core Flask setup remain in app_init.py at the project root.
Business logic lives in the root services/ package.

STORAGE POLICY:
- Production: DATABASE_URL is REQUIRED (PostgreSQL, schema via Alembic).
- Development: falls back to a local SQLite file with tables created at startup.
- Testing: in-memory SQLite.
"""

import logging

logger = logging.getLogger(__name__)

# Import blueprints
from app.api.auth_routes import auth_bp
from app.api.admin import admin_bp
from app.api.agencies import agencies_bp
from app.api.staff import staff_bp
from app.api.certifications import certifications_bp
from app.api.configuration import configuration_bp
from app.api.license_requirements import license_requirements_bp
from app.api.applications import applications_bp
from app.api.licenses import licenses_bp
from app.api.experts import experts_bp
from app.api.billing import billing_bp
from app.api.reports import reports_bp
from app.api.messages import messages_bp
from app.api.notifications_email import notifications_email_bp

BLUEPRINTS = [
    auth_bp,
    admin_bp,
    agencies_bp,
    staff_bp,
    certifications_bp,
    configuration_bp,
    license_requirements_bp,
    applications_bp,
    licenses_bp,
    experts_bp,
    billing_bp,
    reports_bp,
    messages_bp,
    notifications_email_bp,
]


def validate_storage_policy():
    """
    Validate storage configuration at startup.

    Raises:
        RuntimeError: If production mode without DATABASE_URL
    """
    from config import validate_database_config, get_app_env, has_database

    logger.info(f"🔧 Environment: {get_app_env().upper()}")
    logger.info(f"🗄️  Database configured: {has_database()}")

    # This will raise RuntimeError if production without DB
    validate_database_config()


def register_blueprints(app):
    """
    Register all API blueprints with the Flask app.
    Called from app_init.create_app() after the database is configured.

    Args:
        app: Flask application instance

    Raises:
        RuntimeError: If production mode without DATABASE_URL configured
    """
    # Validate storage policy FIRST (fail fast in production without DB)
    validate_storage_policy()

    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
    logger.info(f"✅ Registered {len(BLUEPRINTS)} blueprints")


__all__ = ['register_blueprints', 'validate_storage_policy', 'app', 'BLUEPRINTS',
           'auth_bp', 'admin_bp', 'agencies_bp', 'staff_bp', 'certifications_bp',
           'configuration_bp', 'license_requirements_bp', 'applications_bp',
           'licenses_bp', 'experts_bp', 'billing_bp', 'reports_bp', 'messages_bp',
           'notifications_email_bp']


# ==============================================================================
# WSGI APP EXPORT FOR GUNICORN
# ==============================================================================
# This allows gunicorn to run with: gunicorn app:app
# The Flask app is created in application.py.
# We use __getattr__ for lazy loading to avoid circular import issues.
# ==============================================================================

_flask_app = None


def __getattr__(name):
    """Lazy load the Flask app to avoid circular imports."""
    global _flask_app
    if name == 'app':
        if _flask_app is None:
            from application import app as flask_app
            _flask_app = flask_app
        return _flask_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
