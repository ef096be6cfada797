"""
Home Care Licensing Platform
Multi-tenant licensing workflows for home-care agencies: staff certifications,
license applications, billing, and messaging between company owners, admins
and licensing experts.

MODULAR ARCHITECTURE:
- app_init.py: Application factory (config, logging, security, database, health checks)
- app/api/: HTTP route handlers (Flask Blueprints), registered by app/__init__.py
- services/: Repositories and domain services over the SQLAlchemy session
- database/: SQLAlchemy models, connection management and seed data

Database tables are managed by Alembic migrations in production:
    alembic upgrade head
"""
import os
import logging

from app_init import create_app

# Initialize Flask app with the full infrastructure
app = create_app()
logger = logging.getLogger(__name__)


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    logger.info(f"Starting development server on port {port}")
    app.run(host='0.0.0.0', port=port, debug=app.config.get('DEBUG', False))
