"""
Agencies Routes Blueprint

Admin management of agencies and their client (company owner) records,
plus the company owner's view of their own client record.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import admin_required, role_required, get_current_user_id
from database import get_db_session
from services.agencies_repository import AgenciesRepository
from services.staff_repository import StaffRepository
from app.utils import get_json_body, error_response

logger = logging.getLogger(__name__)

# Create blueprint
agencies_bp = Blueprint('agencies_bp', __name__)


# ============================================================================
# AGENCIES
# ============================================================================

@agencies_bp.route('/api/agencies', methods=['GET'])
@admin_required
def list_agencies():
    """Agencies with their active staff counts"""
    try:
        with get_db_session() as db:
            staff = StaffRepository(db)
            agencies = AgenciesRepository(db).list_agencies()
            for agency in agencies:
                agency['active_staff_count'] = staff.count_active_staff_by_agency(agency['id'])
        return jsonify({'success': True, 'agencies': agencies})
    except Exception as e:
        logger.error(f"Error listing agencies: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/agencies/<agency_id>', methods=['GET'])
@admin_required
def get_agency(agency_id):
    try:
        with get_db_session() as db:
            agencies = AgenciesRepository(db)
            agency = agencies.get_agency(agency_id)
            if agency:
                agency['clients'] = agencies.list_clients(agency_id=agency_id)
        if not agency:
            return error_response('Agency not found', 404)
        return jsonify({'success': True, 'agency': agency})
    except Exception as e:
        logger.error(f"Error getting agency: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/agencies', methods=['POST'])
@admin_required
def create_agency():
    try:
        data = get_json_body()
        with get_db_session() as db:
            agency = AgenciesRepository(db, get_current_user_id()).create_agency(
                data.get('name'), data.get('agency_admin_id') or None
            )
        return jsonify({'success': True, 'agency': agency}), 201
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating agency: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/agencies/<agency_id>', methods=['PUT'])
@admin_required
def update_agency(agency_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            agency = AgenciesRepository(db, get_current_user_id()).update_agency(
                agency_id,
                data.get('name'),
                data.get('agency_admin_id') or None,
                data.get('previous_agency_admin_id') or None
            )
        if not agency:
            return error_response('Agency not found', 404)
        return jsonify({'success': True, 'agency': agency})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error updating agency: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/agencies/<agency_id>', methods=['DELETE'])
@admin_required
def delete_agency(agency_id):
    try:
        with get_db_session() as db:
            deleted = AgenciesRepository(db, get_current_user_id()).delete_agency(agency_id)
        if not deleted:
            return error_response('Agency not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting agency: {e}")
        return error_response(str(e), 500)


# ============================================================================
# CLIENTS
# ============================================================================

@agencies_bp.route('/api/clients', methods=['GET'])
@admin_required
def list_clients():
    try:
        with get_db_session() as db:
            clients = AgenciesRepository(db).list_clients(
                status=request.args.get('status'),
                expert_id=request.args.get('expert_id'),
                agency_id=request.args.get('agency_id')
            )
        return jsonify({'success': True, 'clients': clients})
    except Exception as e:
        logger.error(f"Error listing clients: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/clients/me', methods=['GET'])
@role_required('company_owner')
def get_my_client():
    """The signed-in company owner's client record"""
    try:
        with get_db_session() as db:
            client = AgenciesRepository(db).get_client_for_owner(get_current_user_id())
            client = client.to_dict() if client else None
        if not client:
            return error_response('Client not found', 404)
        return jsonify({'success': True, 'client': client})
    except Exception as e:
        logger.error(f"Error getting client: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/clients/<client_id>', methods=['GET'])
@admin_required
def get_client(client_id):
    try:
        with get_db_session() as db:
            client = AgenciesRepository(db).get_client(client_id)
        if not client:
            return error_response('Client not found', 404)
        return jsonify({'success': True, 'client': client})
    except Exception as e:
        logger.error(f"Error getting client: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/clients', methods=['POST'])
@admin_required
def create_client():
    try:
        data = get_json_body()
        if not (data.get('company_name') or data.get('contact_name')):
            return error_response('Company name or contact name is required')
        with get_db_session() as db:
            client = AgenciesRepository(db, get_current_user_id()).create_client(data)
        return jsonify({'success': True, 'client': client}), 201
    except Exception as e:
        logger.error(f"Error creating client: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/clients/<client_id>', methods=['PUT'])
@admin_required
def update_client(client_id):
    try:
        with get_db_session() as db:
            client = AgenciesRepository(db, get_current_user_id()).update_client(
                client_id, get_json_body()
            )
        if not client:
            return error_response('Client not found', 404)
        return jsonify({'success': True, 'client': client})
    except Exception as e:
        logger.error(f"Error updating client: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/clients/<client_id>/expert', methods=['PUT'])
@admin_required
def assign_client_expert(client_id):
    try:
        expert_id = get_json_body().get('expert_id') or None
        with get_db_session() as db:
            client = AgenciesRepository(db, get_current_user_id()).assign_expert(client_id, expert_id)
        if not client:
            return error_response('Client not found', 404)
        return jsonify({'success': True, 'client': client})
    except Exception as e:
        logger.error(f"Error assigning expert: {e}")
        return error_response(str(e), 500)


@agencies_bp.route('/api/clients/<client_id>', methods=['DELETE'])
@admin_required
def delete_client(client_id):
    try:
        with get_db_session() as db:
            deleted = AgenciesRepository(db, get_current_user_id()).delete_client(client_id)
        if not deleted:
            return error_response('Client not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting client: {e}")
        return error_response(str(e), 500)
