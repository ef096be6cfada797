"""
Certifications Routes Blueprint

Every signed-in user manages their own certifications and professional licenses.
"""

from flask import Blueprint, jsonify
import logging

from auth import login_required, get_current_user_id
from database import get_db_session
from services.certifications_repository import CertificationsRepository
from validators import validate_certification_request, validate_date
from app.utils import get_json_body, error_response

logger = logging.getLogger(__name__)

# Create blueprint
certifications_bp = Blueprint('certifications_bp', __name__)


@certifications_bp.route('/api/certifications', methods=['GET'])
@login_required
def list_certifications():
    """Certifications of the signed-in user, soonest expiry first"""
    try:
        with get_db_session() as db:
            certifications = CertificationsRepository(db).get_certifications(get_current_user_id())
        return jsonify({'success': True, 'certifications': certifications})
    except Exception as e:
        logger.error(f"Error listing certifications: {e}")
        return error_response(str(e), 500)


@certifications_bp.route('/api/certifications/<certification_id>', methods=['GET'])
@login_required
def get_certification(certification_id):
    try:
        with get_db_session() as db:
            certification = CertificationsRepository(db).get_certification(
                get_current_user_id(), certification_id
            )
        if not certification:
            return error_response('Certification not found', 404)
        return jsonify({'success': True, 'certification': certification})
    except Exception as e:
        logger.error(f"Error getting certification: {e}")
        return error_response(str(e), 500)


@certifications_bp.route('/api/certifications', methods=['POST'])
@login_required
def create_certification():
    try:
        data = get_json_body()
        is_valid, error = validate_certification_request(data)
        if not is_valid:
            return error_response(error)

        user_id = get_current_user_id()
        with get_db_session() as db:
            certification = CertificationsRepository(db, user_id).create_certification(user_id, data)
        return jsonify({'success': True, 'certification': certification}), 201

    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating certification: {e}")
        return error_response(str(e), 500)


@certifications_bp.route('/api/certifications/<certification_id>', methods=['PUT'])
@login_required
def update_certification(certification_id):
    try:
        data = get_json_body()
        for field in ('issue_date', 'expiration_date'):
            if data.get(field):
                is_valid, error = validate_date(data[field])
                if not is_valid:
                    return error_response(f"Invalid {field}: {error}")

        user_id = get_current_user_id()
        with get_db_session() as db:
            certification = CertificationsRepository(db, user_id).update_certification(
                user_id, certification_id, data
            )
        if not certification:
            return error_response('Certification not found', 404)
        return jsonify({'success': True, 'certification': certification})
    except Exception as e:
        logger.error(f"Error updating certification: {e}")
        return error_response(str(e), 500)


@certifications_bp.route('/api/certifications/<certification_id>', methods=['DELETE'])
@login_required
def delete_certification(certification_id):
    try:
        user_id = get_current_user_id()
        with get_db_session() as db:
            deleted = CertificationsRepository(db, user_id).delete_certification(user_id, certification_id)
        if not deleted:
            return error_response('Certification not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting certification: {e}")
        return error_response(str(e), 500)
