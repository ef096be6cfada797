"""
Authentication Routes Blueprint

Handles sign-in/sign-up, logout, the current user, and password resets.
"""

from flask import Blueprint, jsonify
import logging

import auth
from app.utils import get_json_body, error_response

logger = logging.getLogger(__name__)

# Create blueprint
auth_bp = Blueprint('auth_bp', __name__)


# ============================================================================
# LOGIN/LOGOUT ROUTES
# ============================================================================

@auth_bp.route('/api/auth/login', methods=['POST'])
def api_login():
    """API endpoint for user login"""
    try:
        data = get_json_body()
        email = data.get('email')
        password = data.get('password')

        if not email or not password:
            return error_response('Email and password required')

        user, error = auth.sign_in(email, password)
        if error:
            return error_response(error, 401)

        return jsonify({
            'success': True,
            'user': user,
            'redirect': auth.get_dashboard_path(user['role'])
        })

    except Exception as e:
        logger.error(f"Login error: {e}")
        return error_response('Login failed', 500)


@auth_bp.route('/api/auth/signup', methods=['POST'])
def api_signup():
    """API endpoint for account registration"""
    try:
        data = get_json_body()
        user, error = auth.sign_up(
            data.get('email'),
            data.get('password'),
            data.get('full_name'),
            data.get('role', 'company_owner')
        )
        if error:
            return error_response(error)

        return jsonify({
            'success': True,
            'user': user,
            'redirect': auth.get_dashboard_path(user['role'])
        }), 201

    except Exception as e:
        logger.error(f"Signup error: {e}")
        return error_response('Signup failed', 500)


@auth_bp.route('/api/auth/logout', methods=['POST'])
def api_logout():
    """API endpoint for user logout"""
    auth.logout_user()
    return jsonify({'success': True, 'redirect': auth.LOGIN_PATH})


@auth_bp.route('/api/auth/current-user', methods=['GET'])
@auth.login_required
def get_current_user_api():
    """Get current logged-in user info"""
    user = auth.get_current_user()
    if user:
        return jsonify({'success': True, 'user': user})
    return error_response('Not authenticated', 401)


# ============================================================================
# PASSWORDS
# ============================================================================

@auth_bp.route('/api/auth/password-reset', methods=['POST'])
def request_password_reset_api():
    """Email a reset link. Always succeeds so registered emails are not revealed."""
    try:
        email = get_json_body().get('email')
        if not email:
            return error_response('Email is required')
        auth.request_password_reset(email)
        return jsonify({
            'success': True,
            'message': 'If an account exists for that email, a reset link has been sent.'
        })
    except Exception as e:
        logger.error(f"Password reset request error: {e}")
        return error_response(str(e), 500)


@auth_bp.route('/api/auth/password-reset/confirm', methods=['POST'])
def confirm_password_reset_api():
    try:
        data = get_json_body()
        ok, error = auth.reset_password(data.get('token', ''), data.get('password'))
        if not ok:
            return error_response(error)
        return jsonify({'success': True, 'redirect': auth.LOGIN_PATH})
    except Exception as e:
        logger.error(f"Password reset error: {e}")
        return error_response(str(e), 500)


@auth_bp.route('/api/auth/password', methods=['PUT'])
@auth.login_required
def update_password_api():
    """Change the signed-in user's password"""
    try:
        data = get_json_body()
        ok, error = auth.update_password(
            auth.get_current_user_id(),
            data.get('current_password', ''),
            data.get('new_password')
        )
        if not ok:
            return error_response(error)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Password update error: {e}")
        return error_response(str(e), 500)
