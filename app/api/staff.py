"""
Staff Routes Blueprint

Company owners manage the caregivers and office staff of their own client
record; admins can work on any client by passing client_id.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import role_required, get_current_user_id, is_admin
from database import get_db_session
from services.agencies_repository import AgenciesRepository
from services.staff_repository import StaffRepository
from validators import validate_staff_request
from app.utils import get_json_body, error_response

logger = logging.getLogger(__name__)

# Create blueprint
staff_bp = Blueprint('staff_bp', __name__)


def _scope_client_id(db, requested_client_id=None):
    """Client the request acts on: any for admins, the owner's own otherwise."""
    if is_admin():
        return requested_client_id
    client = AgenciesRepository(db).get_client_for_owner(get_current_user_id())
    return client.id if client else None


def _owned_member(db, staff_id):
    member = StaffRepository(db).get_staff_member(staff_id)
    if not member or is_admin():
        return member
    if member['company_owner_id'] != _scope_client_id(db):
        return None
    return member


@staff_bp.route('/api/staff', methods=['GET'])
@role_required('admin', 'company_owner')
def list_staff():
    try:
        with get_db_session() as db:
            client_id = _scope_client_id(db, request.args.get('client_id'))
            if not client_id and not is_admin():
                return jsonify({'success': True, 'staff': []})
            staff = StaffRepository(db).list_staff(client_id, request.args.get('status'))
        return jsonify({'success': True, 'staff': staff})
    except Exception as e:
        logger.error(f"Error listing staff: {e}")
        return error_response(str(e), 500)


@staff_bp.route('/api/staff/me', methods=['GET'])
@role_required('staff_member')
def get_my_staff_record():
    """Staff record linked to the signed-in staff member's login"""
    try:
        with get_db_session() as db:
            member = StaffRepository(db).get_staff_by_user(get_current_user_id())
        if not member:
            return error_response('Staff member not found', 404)
        return jsonify({'success': True, 'staff_member': member})
    except Exception as e:
        logger.error(f"Error getting staff record: {e}")
        return error_response(str(e), 500)


@staff_bp.route('/api/staff/<staff_id>', methods=['GET'])
@role_required('admin', 'company_owner')
def get_staff_member(staff_id):
    try:
        with get_db_session() as db:
            member = _owned_member(db, staff_id)
        if not member:
            return error_response('Staff member not found', 404)
        return jsonify({'success': True, 'staff_member': member})
    except Exception as e:
        logger.error(f"Error getting staff member: {e}")
        return error_response(str(e), 500)


@staff_bp.route('/api/staff', methods=['POST'])
@role_required('admin', 'company_owner')
def create_staff_member():
    """Add a staff member; a password also creates their login"""
    try:
        data = get_json_body()
        is_valid, error = validate_staff_request(data)
        if not is_valid:
            return error_response(error)

        with get_db_session() as db:
            client_id = _scope_client_id(db, data.get('client_id'))
            if not client_id:
                return error_response('Client not found', 404)
            member = StaffRepository(db, get_current_user_id()).create_staff_member(
                client_id, data, password=data.get('password')
            )
        return jsonify({'success': True, 'staff_member': member}), 201

    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating staff member: {e}")
        return error_response(str(e), 500)


@staff_bp.route('/api/staff/<staff_id>', methods=['PUT'])
@role_required('admin', 'company_owner')
def update_staff_member(staff_id):
    try:
        data = get_json_body()
        data.pop('company_owner_id', None)
        with get_db_session() as db:
            if not _owned_member(db, staff_id):
                return error_response('Staff member not found', 404)
            member = StaffRepository(db, get_current_user_id()).update_staff_member(staff_id, data)
        return jsonify({'success': True, 'staff_member': member})
    except Exception as e:
        logger.error(f"Error updating staff member: {e}")
        return error_response(str(e), 500)


@staff_bp.route('/api/staff/<staff_id>', methods=['DELETE'])
@role_required('admin', 'company_owner')
def delete_staff_member(staff_id):
    try:
        with get_db_session() as db:
            if not _owned_member(db, staff_id):
                return error_response('Staff member not found', 404)
            StaffRepository(db, get_current_user_id()).delete_staff_member(staff_id)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting staff member: {e}")
        return error_response(str(e), 500)
