"""
Admin Routes Blueprint

Handles the admin dashboard numbers, user accounts, and the audit trail.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import admin_required, get_current_user_id
from database import get_db_session
from services.cases_repository import CasesRepository
from services.event_logger import EventLogger
from services.users_repository import UsersRepository
from validators import validate_email, validate_password, validate_role, validate_required_fields
from app.utils import get_json_body, error_response, parse_bool

logger = logging.getLogger(__name__)

# Create blueprint
admin_bp = Blueprint('admin_bp', __name__)


# ============================================================================
# DASHBOARD
# ============================================================================

@admin_bp.route('/api/admin/dashboard-stats', methods=['GET'])
@admin_required
def get_dashboard_stats():
    """Case totals, average progress and chart series"""
    try:
        with get_db_session() as db:
            stats = CasesRepository(db).get_dashboard_stats()
        return jsonify({'success': True, 'stats': stats})
    except Exception as e:
        logger.error(f"Error getting dashboard stats: {e}")
        return error_response(str(e), 500)


# ============================================================================
# USER MANAGEMENT API
# ============================================================================

@admin_bp.route('/api/admin/users', methods=['GET'])
@admin_required
def list_users():
    try:
        with get_db_session() as db:
            users = UsersRepository(db).list_users(
                role=request.args.get('role'),
                active_only=parse_bool(request.args.get('active_only'))
            )
        return jsonify({'success': True, 'users': users})
    except Exception as e:
        logger.error(f"Error getting users: {e}")
        return error_response(str(e), 500)


@admin_bp.route('/api/admin/users/<user_id>', methods=['GET'])
@admin_required
def get_user(user_id):
    try:
        with get_db_session() as db:
            user = UsersRepository(db).get_user(user_id)
        if not user:
            return error_response('User not found', 404)
        return jsonify({'success': True, 'user': user})
    except Exception as e:
        logger.error(f"Error getting user: {e}")
        return error_response(str(e), 500)


@admin_bp.route('/api/admin/users', methods=['POST'])
@admin_required
def create_user_account():
    """Create a login account; an existing email is linked rather than rejected"""
    try:
        data = get_json_body()
        is_valid, error = validate_required_fields(data, ['email', 'password', 'role'])
        if not is_valid:
            return error_response(error)
        for check in (validate_email(data['email']), validate_password(data['password']),
                      validate_role(data['role'])):
            if not check[0]:
                return error_response(check[1])

        with get_db_session() as db:
            result = UsersRepository(db, get_current_user_id()).create_user_account(
                data['email'], data['password'], data.get('full_name'), data['role']
            )
        return jsonify(result), 201 if result.get('created') else 200

    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating user: {e}")
        return error_response(str(e), 500)


@admin_bp.route('/api/admin/users/<user_id>', methods=['PUT'])
@admin_required
def update_user(user_id):
    try:
        data = get_json_body()
        if 'role' in data:
            is_valid, error = validate_role(data['role'])
            if not is_valid:
                return error_response(error)

        with get_db_session() as db:
            user = UsersRepository(db, get_current_user_id()).update_user(user_id, data)
        if not user:
            return error_response('User not found', 404)
        return jsonify({'success': True, 'user': user})
    except Exception as e:
        logger.error(f"Error updating user: {e}")
        return error_response(str(e), 500)


@admin_bp.route('/api/admin/users/<user_id>/password', methods=['PUT'])
@admin_required
def set_user_password(user_id):
    try:
        password = get_json_body().get('password')
        is_valid, error = validate_password(password)
        if not is_valid:
            return error_response(error)

        with get_db_session() as db:
            result = UsersRepository(db, get_current_user_id()).set_user_password(user_id, password)
        return jsonify(result)
    except ValueError as e:
        return error_response(str(e), 404)
    except Exception as e:
        logger.error(f"Error setting password: {e}")
        return error_response(str(e), 500)


@admin_bp.route('/api/admin/users/<user_id>/status', methods=['PUT'])
@admin_required
def toggle_user_status(user_id):
    try:
        data = get_json_body()
        if 'is_active' not in data:
            return error_response('is_active is required')

        with get_db_session() as db:
            user = UsersRepository(db, get_current_user_id()).toggle_user_status(
                user_id, parse_bool(data['is_active'])
            )
        if not user:
            return error_response('User not found', 404)
        return jsonify({'success': True, 'user': user})
    except Exception as e:
        logger.error(f"Error toggling user status: {e}")
        return error_response(str(e), 500)


@admin_bp.route('/api/admin/users/<user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id):
    """Deactivate a user account"""
    if user_id == get_current_user_id():
        return error_response('You cannot delete your own account')
    try:
        with get_db_session() as db:
            deleted = UsersRepository(db, get_current_user_id()).delete_user(user_id)
        if not deleted:
            return error_response('User not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting user: {e}")
        return error_response(str(e), 500)


# ============================================================================
# AUDIT TRAIL
# ============================================================================

@admin_bp.route('/api/admin/events', methods=['GET'])
@admin_required
def get_recent_events():
    try:
        hours = int(request.args.get('hours', 24))
        entity_type = request.args.get('entity_type')
        with get_db_session() as db:
            events = EventLogger(db).get_recent_events(
                hours=hours,
                entity_types=[entity_type] if entity_type else None
            )
        return jsonify({'success': True, 'events': events})
    except ValueError:
        return error_response('hours must be a number')
    except Exception as e:
        logger.error(f"Error getting events: {e}")
        return error_response(str(e), 500)


@admin_bp.route('/api/admin/events/<entity_type>/<entity_id>', methods=['GET'])
@admin_required
def get_entity_history(entity_type, entity_id):
    try:
        with get_db_session() as db:
            events = EventLogger(db).get_entity_history(entity_type, entity_id)
        return jsonify({'success': True, 'events': events})
    except Exception as e:
        logger.error(f"Error getting entity history: {e}")
        return error_response(str(e), 500)
