"""
Licenses Routes Blueprint

Licenses a company owner already holds, with their documents.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import role_required, get_current_user_id, is_admin
from database import get_db_session
from services.licenses_repository import LicensesRepository
from validators import validate_date, validate_state
from app.utils import get_json_body, error_response

logger = logging.getLogger(__name__)

# Create blueprint
licenses_bp = Blueprint('licenses_bp', __name__)


def _owner_scope():
    """None for admins (all licenses), the signed-in owner otherwise."""
    return None if is_admin() else get_current_user_id()


def _validate_license(data):
    for field in ('activated_date', 'expiry_date', 'renewal_due_date'):
        if data.get(field):
            is_valid, error = validate_date(data[field])
            if not is_valid:
                return False, f"Invalid {field}: {error}"
    if data.get('state'):
        return validate_state(data['state'])
    return True, None


@licenses_bp.route('/api/licenses', methods=['GET'])
@role_required('admin', 'company_owner')
def list_licenses():
    try:
        owner_id = _owner_scope() or request.args.get('owner_id')
        with get_db_session() as db:
            licenses = LicensesRepository(db).list_licenses(owner_id)
        return jsonify({'success': True, 'licenses': licenses})
    except Exception as e:
        logger.error(f"Error listing licenses: {e}")
        return error_response(str(e), 500)


@licenses_bp.route('/api/licenses/<license_id>', methods=['GET'])
@role_required('admin', 'company_owner')
def get_license(license_id):
    try:
        with get_db_session() as db:
            license_data = LicensesRepository(db).get_license(license_id, _owner_scope())
        if not license_data:
            return error_response('License not found', 404)
        return jsonify({'success': True, 'license': license_data})
    except Exception as e:
        logger.error(f"Error getting license: {e}")
        return error_response(str(e), 500)


@licenses_bp.route('/api/licenses', methods=['POST'])
@role_required('company_owner')
def create_license():
    try:
        data = get_json_body()
        if not (data.get('license_name') or '').strip():
            return error_response('License name is required')
        is_valid, error = _validate_license(data)
        if not is_valid:
            return error_response(error)

        user_id = get_current_user_id()
        with get_db_session() as db:
            license_data = LicensesRepository(db, user_id).create_license(user_id, data)
        return jsonify({'success': True, 'license': license_data}), 201
    except Exception as e:
        logger.error(f"Error creating license: {e}")
        return error_response(str(e), 500)


@licenses_bp.route('/api/licenses/<license_id>', methods=['PUT'])
@role_required('admin', 'company_owner')
def update_license(license_id):
    try:
        data = get_json_body()
        is_valid, error = _validate_license(data)
        if not is_valid:
            return error_response(error)

        with get_db_session() as db:
            license_data = LicensesRepository(db, get_current_user_id()).update_license(
                license_id, data, _owner_scope()
            )
        if not license_data:
            return error_response('License not found', 404)
        return jsonify({'success': True, 'license': license_data})
    except Exception as e:
        logger.error(f"Error updating license: {e}")
        return error_response(str(e), 500)


@licenses_bp.route('/api/licenses/<license_id>', methods=['DELETE'])
@role_required('admin', 'company_owner')
def delete_license(license_id):
    try:
        with get_db_session() as db:
            deleted = LicensesRepository(db, get_current_user_id()).delete_license(
                license_id, _owner_scope()
            )
        if not deleted:
            return error_response('License not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting license: {e}")
        return error_response(str(e), 500)


@licenses_bp.route('/api/licenses/<license_id>/documents', methods=['POST'])
@role_required('admin', 'company_owner')
def add_license_document(license_id):
    try:
        data = get_json_body()
        if not (data.get('document_name') or '').strip():
            return error_response('Document name is required')

        with get_db_session() as db:
            document = LicensesRepository(db, get_current_user_id()).add_document(
                license_id,
                data['document_name'].strip(),
                document_url=data.get('document_url'),
                category=data.get('category'),
                owner_id=_owner_scope()
            )
        return jsonify({'success': True, 'document': document}), 201
    except ValueError as e:
        return error_response(str(e), 404)
    except Exception as e:
        logger.error(f"Error adding license document: {e}")
        return error_response(str(e), 500)


@licenses_bp.route('/api/licenses/<license_id>/documents/<document_id>', methods=['DELETE'])
@role_required('admin', 'company_owner')
def delete_license_document(license_id, document_id):
    try:
        with get_db_session() as db:
            repo = LicensesRepository(db, get_current_user_id())
            license_data = repo.get_license(license_id, _owner_scope())
            if not license_data or document_id not in {d['id'] for d in license_data.get('documents', [])}:
                return error_response('Document not found', 404)
            repo.delete_document(document_id)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting license document: {e}")
        return error_response(str(e), 500)
