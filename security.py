"""
Security Utilities & Middleware

Secret key and session cookie setup, CORS for the browser front end,
response headers, JSON error bodies, and per-request logging tagged with
the signed-in user and role.
"""
import os
import secrets
from typing import Dict, Any
from flask import Flask, request, session, jsonify, Response
from flask_cors import CORS
import logging

from auth import LOGIN_PATH

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = 'homecare_session'

# Health endpoints are polled constantly; keep them out of the request log
QUIET_PATHS = ('/api/health', '/api/ping')

# Environment variables a production deployment cannot run without
PRODUCTION_ENV_VARS = ['SECRET_KEY', 'DATABASE_URL', 'RESEND_API_KEY']

WEAK_SECRET_MARKERS = ['changeme', 'secret', 'password', '12345', 'homecare']


class SecurityConfig:
    """Secret key checks"""

    @staticmethod
    def generate_secret_key() -> str:
        return secrets.token_hex(32)

    @staticmethod
    def validate_secret_key(secret_key: str) -> bool:
        """
        Session cookies and password reset links are both signed with this
        key, so short or guessable values are rejected.
        """
        if not secret_key:
            return False

        if len(secret_key) < 32:
            logger.warning("Secret key is too short (minimum 32 characters)")
            return False

        if any(marker in secret_key.lower() for marker in WEAK_SECRET_MARKERS):
            logger.warning("Secret key appears to be weak or default")
            return False

        return True

    @staticmethod
    def ensure_secret_key(config: Dict[str, Any]) -> str:
        """
        Return the configured key, or a generated one if it is missing or weak.

        A generated key logs everyone out and invalidates outstanding reset
        links on every restart.
        """
        secret_key = config.get('SECRET_KEY')

        if not secret_key or not SecurityConfig.validate_secret_key(secret_key):
            if os.environ.get('FLASK_ENV') == 'production':
                logger.error("No secure SECRET_KEY in production! Generating one...")
                logger.error("Sessions and password reset links will not survive a restart")

            secret_key = SecurityConfig.generate_secret_key()
            logger.warning(f"Generated new secret key (length: {len(secret_key)})")

        return secret_key


def setup_session_cookies(app: Flask):
    """
    Harden the signed session cookie that carries user_id and user_role.

    Args:
        app: Flask application instance
    """
    app.config['SESSION_COOKIE_NAME'] = SESSION_COOKIE_NAME
    app.config.setdefault('SESSION_COOKIE_HTTPONLY', True)
    app.config.setdefault('SESSION_COOKIE_SAMESITE', 'Lax')
    if not app.debug and not app.testing:
        app.config['SESSION_COOKIE_SECURE'] = True

    logger.info(f"Session cookie configured: secure={app.config.get('SESSION_COOKIE_SECURE', False)}")


def setup_security_headers(app: Flask):
    """
    Add security headers to all responses

    Args:
        app: Flask application instance
    """
    @app.after_request
    def add_security_headers(response: Response) -> Response:
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        if not app.debug:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        # JSON only, nothing to render or embed
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'self'"

        # Session-scoped data (staff, certifications, billing) must not be cached
        if request.path.startswith('/api/') and request.path not in QUIET_PATHS:
            response.headers['Cache-Control'] = 'no-store'

        return response

    logger.info("Security headers configured")


def setup_cors(app: Flask, config: Dict[str, Any]):
    """
    Allow the browser front end to call the API with its session cookie

    Args:
        app: Flask application instance
        config: Application configuration dictionary
    """
    cors_origins = config.get('CORS_ORIGINS', ['*'])

    if not app.debug and '*' in cors_origins:
        logger.warning("Using wildcard CORS in production! Set CORS_ORIGINS environment variable.")

    CORS(
        app,
        resources={r'/api/*': {'origins': cors_origins}},
        methods=config.get('CORS_METHODS', ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS']),
        allow_headers=config.get('CORS_ALLOW_HEADERS', ['Content-Type']),
        supports_credentials=True,
        max_age=3600
    )

    logger.info(f"CORS configured: origins={cors_origins}")


def _error(title: str, message: str, status: int, **extra):
    body = {'success': False, 'error': title, 'message': message}
    body.update(extra)
    return jsonify(body), status


def setup_error_handlers(app: Flask):
    """
    Register JSON error handlers that don't expose stack traces

    Args:
        app: Flask application instance
    """
    include_details = app.debug
    max_upload_mb = (app.config.get('MAX_CONTENT_LENGTH') or 0) // (1024 * 1024)

    @app.errorhandler(400)
    def bad_request(error):
        return _error('Bad Request',
                      'The request could not be understood or was missing required parameters', 400)

    @app.errorhandler(401)
    def unauthorized(error):
        return _error('Unauthorized', 'Authentication required', 401, redirect=LOGIN_PATH)

    @app.errorhandler(403)
    def forbidden(error):
        return _error('Forbidden', 'You do not have permission to access this resource', 403)

    @app.errorhandler(404)
    def not_found(error):
        return _error('Not Found', 'The requested resource was not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _error('Method Not Allowed', 'The method is not allowed for the requested URL', 405)

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return _error('Payload Too Large',
                      f'Documents are limited to {max_upload_mb}MB per upload', 413)

    @app.errorhandler(500)
    def internal_server_error(error):
        logger.error(f"Internal server error on {request.method} {request.path}: {error}",
                     exc_info=True)
        extra = {'details': str(error), 'type': type(error).__name__} if include_details else {}
        return _error('Internal Server Error',
                      'An error occurred while processing your request', 500, **extra)

    @app.errorhandler(503)
    def service_unavailable(error):
        return _error('Service Unavailable',
                      'The service is temporarily unavailable. Please try again later', 503)

    logger.info("Error handlers registered")


def setup_request_logging(app: Flask):
    """
    Log each API call with the acting user so access to tenant data can be traced

    Args:
        app: Flask application instance
    """
    @app.before_request
    def log_request():
        if request.path in QUIET_PATHS:
            return

        logger.info(
            f"Request: {request.method} {request.path} "
            f"user={session.get('user_id', 'anonymous')} "
            f"role={session.get('user_role', '-')} "
            f"from {request.remote_addr}"
        )

    @app.after_request
    def log_response(response: Response) -> Response:
        if request.path in QUIET_PATHS:
            return response

        level = logging.WARNING if response.status_code in (401, 403) else logging.INFO
        logger.log(
            level,
            f"Response: {request.method} {request.path} "
            f"status={response.status_code} "
            f"user={session.get('user_id', 'anonymous')}"
        )

        return response

    logger.info("Request logging configured")


def validate_environment_variables(required_vars: list, app: Flask) -> bool:
    """
    Log every required environment variable that is not set

    Args:
        required_vars: Environment variable names
        app: Flask application instance

    Returns:
        True when all of them are set
    """
    missing_vars = [var for var in required_vars if not os.environ.get(var)]

    for var in missing_vars:
        logger.warning(f"Missing environment variable: {var}")

    if missing_vars and not app.debug:
        logger.error(f"Missing required environment variables in production: {missing_vars}")

    return not missing_vars


def setup_security(app: Flask, config: Dict[str, Any]):
    """
    Setup all security features for the application

    Args:
        app: Flask application instance
        config: Application configuration dictionary
    """
    logger.info("Configuring application security...")

    app.secret_key = SecurityConfig.ensure_secret_key(config)

    setup_session_cookies(app)
    setup_cors(app, config)
    setup_security_headers(app)
    setup_error_handlers(app)
    setup_request_logging(app)

    if not app.debug and not app.testing:
        validate_environment_variables(PRODUCTION_ENV_VARS, app)

    logger.info("Security configuration complete")
