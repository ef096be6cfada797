"""
Configuration Routes Blueprint

Admin configuration screens: seat pricing, license types per state, and the
certification type / staff role pick lists. The read endpoints for license
types and pick lists are open to every signed-in user since owners and staff
fill forms from them.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import admin_required, login_required, get_current_user_id, is_admin
from constants import US_STATES
from database import get_db_session
from services.billing_repository import BillingRepository
from services.license_types_repository import LicenseTypesRepository
from services.system_lists_repository import SystemListsRepository
from validators import validate_license_type_request, validate_number_range
from app.utils import get_json_body, error_response, parse_bool

logger = logging.getLogger(__name__)

# Create blueprint
configuration_bp = Blueprint('configuration_bp', __name__)


@configuration_bp.route('/api/states', methods=['GET'])
def list_states():
    return jsonify({'success': True, 'states': US_STATES})


# ============================================================================
# PRICING
# ============================================================================

@configuration_bp.route('/api/pricing', methods=['GET'])
@admin_required
def get_pricing():
    try:
        with get_db_session() as db:
            pricing = BillingRepository(db).get_current_pricing()
        return jsonify({'success': True, 'pricing': pricing})
    except Exception as e:
        logger.error(f"Error getting pricing: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/pricing', methods=['PUT'])
@admin_required
def update_pricing():
    try:
        data = get_json_body()
        try:
            owner_rate = float(data.get('owner_admin_license'))
            staff_rate = float(data.get('staff_license'))
        except (TypeError, ValueError):
            return error_response('owner_admin_license and staff_license must be numbers')

        for value in (owner_rate, staff_rate):
            is_valid, error = validate_number_range(value, min_value=0)
            if not is_valid:
                return error_response(error)

        with get_db_session() as db:
            pricing = BillingRepository(db, get_current_user_id()).update_pricing(owner_rate, staff_rate)
        return jsonify({'success': True, 'pricing': pricing})
    except Exception as e:
        logger.error(f"Error updating pricing: {e}")
        return error_response(str(e), 500)


# ============================================================================
# LICENSE TYPES
# ============================================================================

@configuration_bp.route('/api/license-types', methods=['GET'])
@login_required
def list_license_types():
    """License types, optionally for one state; non-admins only see active ones"""
    try:
        active_only = parse_bool(request.args.get('active_only')) or not is_admin()
        with get_db_session() as db:
            license_types = LicenseTypesRepository(db).list_license_types(
                state=request.args.get('state'), active_only=active_only
            )
        return jsonify({'success': True, 'license_types': license_types})
    except Exception as e:
        logger.error(f"Error listing license types: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/license-types/<license_type_id>', methods=['GET'])
@login_required
def get_license_type(license_type_id):
    try:
        with get_db_session() as db:
            license_type = LicenseTypesRepository(db).get_license_type(license_type_id)
        if not license_type:
            return error_response('License type not found', 404)
        return jsonify({'success': True, 'license_type': license_type})
    except Exception as e:
        logger.error(f"Error getting license type: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/license-types', methods=['POST'])
@admin_required
def create_license_type():
    try:
        data = get_json_body()
        is_valid, error = validate_license_type_request(data)
        if not is_valid:
            return error_response(error)

        with get_db_session() as db:
            license_type = LicenseTypesRepository(db, get_current_user_id()).create_license_type(
                data['state'],
                data['name'].strip(),
                description=data.get('description', ''),
                processing_time=data.get('processing_time', ''),
                application_fee=data.get('application_fee', ''),
                renewal_period=data.get('renewal_period', '')
            )
        return jsonify({'success': True, 'license_type': license_type}), 201
    except Exception as e:
        logger.error(f"Error creating license type: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/license-types/<license_type_id>', methods=['PUT'])
@admin_required
def update_license_type(license_type_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            license_type = LicenseTypesRepository(db, get_current_user_id()).update_license_type(
                license_type_id,
                renewal_period=data.get('renewal_period', ''),
                application_fee=data.get('application_fee', ''),
                service_fee=data.get('service_fee', ''),
                processing_time=data.get('processing_time', '')
            )
        if not license_type:
            return error_response('License type not found', 404)
        return jsonify({'success': True, 'license_type': license_type})
    except Exception as e:
        logger.error(f"Error updating license type: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/license-types/<license_type_id>/active', methods=['PUT'])
@admin_required
def toggle_license_type(license_type_id):
    try:
        is_active = parse_bool(get_json_body().get('is_active'))
        with get_db_session() as db:
            license_type = LicenseTypesRepository(db, get_current_user_id()).toggle_active(
                license_type_id, is_active
            )
        if not license_type:
            return error_response('License type not found', 404)
        return jsonify({'success': True, 'license_type': license_type})
    except Exception as e:
        logger.error(f"Error toggling license type: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/license-types/<license_type_id>', methods=['DELETE'])
@admin_required
def delete_license_type(license_type_id):
    try:
        with get_db_session() as db:
            LicenseTypesRepository(db, get_current_user_id()).delete_license_type(license_type_id)
        return jsonify({'success': True})
    except ValueError as e:
        return error_response(str(e), 404)
    except Exception as e:
        logger.error(f"Error deleting license type: {e}")
        return error_response(str(e), 500)


# ============================================================================
# CERTIFICATION TYPES
# ============================================================================

@configuration_bp.route('/api/certification-types', methods=['GET'])
@login_required
def list_certification_types():
    try:
        with get_db_session() as db:
            rows = SystemListsRepository(db).list_certification_types()
        return jsonify({'success': True, 'certification_types': rows})
    except Exception as e:
        logger.error(f"Error listing certification types: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/certification-types', methods=['POST'])
@admin_required
def create_certification_type():
    try:
        name = get_json_body().get('certification_type')
        with get_db_session() as db:
            row = SystemListsRepository(db, get_current_user_id()).create_certification_type(name)
        return jsonify({'success': True, 'certification_type': row}), 201
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating certification type: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/certification-types/<int:type_id>', methods=['PUT'])
@admin_required
def update_certification_type(type_id):
    try:
        name = get_json_body().get('certification_type')
        with get_db_session() as db:
            row = SystemListsRepository(db, get_current_user_id()).update_certification_type(type_id, name)
        if not row:
            return error_response('Certification type not found', 404)
        return jsonify({'success': True, 'certification_type': row})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error updating certification type: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/certification-types/<int:type_id>', methods=['DELETE'])
@admin_required
def delete_certification_type(type_id):
    try:
        with get_db_session() as db:
            deleted = SystemListsRepository(db, get_current_user_id()).delete_certification_type(type_id)
        if not deleted:
            return error_response('Certification type not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting certification type: {e}")
        return error_response(str(e), 500)


# ============================================================================
# STAFF ROLES
# ============================================================================

@configuration_bp.route('/api/staff-roles', methods=['GET'])
@login_required
def list_staff_roles():
    try:
        with get_db_session() as db:
            rows = SystemListsRepository(db).list_staff_roles()
        return jsonify({'success': True, 'staff_roles': rows})
    except Exception as e:
        logger.error(f"Error listing staff roles: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/staff-roles', methods=['POST'])
@admin_required
def create_staff_role():
    try:
        name = get_json_body().get('name')
        with get_db_session() as db:
            row = SystemListsRepository(db, get_current_user_id()).create_staff_role(name)
        return jsonify({'success': True, 'staff_role': row}), 201
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating staff role: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/staff-roles/<int:role_id>', methods=['PUT'])
@admin_required
def update_staff_role(role_id):
    try:
        name = get_json_body().get('name')
        with get_db_session() as db:
            row = SystemListsRepository(db, get_current_user_id()).update_staff_role(role_id, name)
        if not row:
            return error_response('Staff role not found', 404)
        return jsonify({'success': True, 'staff_role': row})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error updating staff role: {e}")
        return error_response(str(e), 500)


@configuration_bp.route('/api/staff-roles/<int:role_id>', methods=['DELETE'])
@admin_required
def delete_staff_role(role_id):
    try:
        with get_db_session() as db:
            deleted = SystemListsRepository(db, get_current_user_id()).delete_staff_role(role_id)
        if not deleted:
            return error_response('Staff role not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting staff role: {e}")
        return error_response(str(e), 500)
