"""
Application Initialization Module
Properly initializes Flask app with all infrastructure components
"""
import os
from flask import Flask
from config import get_config
from logging_config import setup_logging
from security import setup_security
from health_checks import register_health_checks
from database import configure_database, init_db
from database.seed import seed_database
import logging

logger = logging.getLogger(__name__)


def create_app(config_class=None):
    """
    Application factory that creates and configures Flask app with all infrastructure

    Args:
        config_class: Optional config class; defaults to the one selected by FLASK_ENV

    Returns:
        Configured Flask application instance
    """
    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config_class or get_config())

    setup_logging(app)

    logger.info("=" * 60)
    logger.info("🚀 Initializing Home Care Licensing Platform")
    logger.info("=" * 60)
    logger.info(f"Environment: {os.environ.get('FLASK_ENV', 'development')}")
    logger.info(f"Debug mode: {app.debug}")

    # Setup security (CORS, headers, error handlers)
    setup_security(app, app.config)

    # Create required directories
    create_required_directories(app)

    # Connect the database and seed defaults
    initialize_database(app)

    # Register health check endpoints
    register_health_checks(app)

    # Register API blueprints
    from app import register_blueprints
    register_blueprints(app)

    logger.info("✅ Application initialization complete")
    logger.info("=" * 60)

    return app


def create_required_directories(app):
    """
    Create all required application directories

    Args:
        app: Flask application instance
    """
    directories = ['logs']

    for directory in directories:
        try:
            os.makedirs(directory, exist_ok=True)
            logger.debug(f"Directory ensured: {directory}")
        except OSError as e:
            logger.error(f"Failed to create directory {directory}: {e}")


def initialize_database(app):
    """
    Bind the session factory to DATABASE_URL, create tables where allowed,
    and seed the admin account, pick lists and pricing.

    Args:
        app: Flask application instance
    """
    database_url = app.config.get('DATABASE_URL')
    if not database_url:
        logger.warning("⚠️  DATABASE_URL not configured - database features unavailable")
        return

    configure_database(database_url)

    if app.config.get('AUTO_CREATE_TABLES'):
        init_db()

    seed_database(app.config.get('DEFAULT_ADMIN_EMAIL'), app.config.get('DEFAULT_ADMIN_PASSWORD'))
    logger.info("✅ Database initialized")
