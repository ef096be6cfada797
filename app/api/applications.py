"""
Applications Routes Blueprint

License applications: company owners request and follow them, admins
approve/reject and assign experts, experts work the steps and review
documents.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import login_required, role_required, admin_required, get_current_user_id, get_current_role
from constants import APPLICATION_STATUSES
from database import get_db_session
from services.applications_repository import ApplicationsRepository
from services.notification_service import NotificationService
from validators import validate_required_fields, validate_state
from app.utils import get_json_body, error_response, parse_bool

logger = logging.getLogger(__name__)

# Create blueprint
applications_bp = Blueprint('applications_bp', __name__)


def _can_access(application):
    """Admins see everything; owners their own applications; experts the ones assigned to them."""
    role = get_current_role()
    user_id = get_current_user_id()
    if role == 'admin':
        return True
    if role == 'company_owner':
        return application['company_owner_id'] == user_id
    if role == 'expert':
        return application['assigned_expert_id'] == user_id
    return False


def _load(db, application_id):
    application = ApplicationsRepository(db).get_application(application_id)
    if not application or not _can_access(application):
        return None
    return application


def _notify(db, user_id, title, message, notification_type='application'):
    if user_id and user_id != get_current_user_id():
        NotificationService(db).create_notification(user_id, title, message, notification_type)


# ============================================================================
# QUERIES
# ============================================================================

@applications_bp.route('/api/applications', methods=['GET'])
@role_required('admin', 'company_owner', 'expert')
def list_applications():
    try:
        role = get_current_role()
        user_id = get_current_user_id()
        with get_db_session() as db:
            applications = ApplicationsRepository(db).list_applications(
                owner_id=user_id if role == 'company_owner' else request.args.get('owner_id'),
                expert_id=user_id if role == 'expert' else request.args.get('expert_id'),
                status=request.args.get('status')
            )
        return jsonify({'success': True, 'applications': applications})
    except Exception as e:
        logger.error(f"Error listing applications: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>', methods=['GET'])
@login_required
def get_application(application_id):
    try:
        with get_db_session() as db:
            application = _load(db, application_id)
        if not application:
            return error_response('Application not found', 404)
        return jsonify({'success': True, 'application': application})
    except Exception as e:
        logger.error(f"Error getting application: {e}")
        return error_response(str(e), 500)


# ============================================================================
# LIFECYCLE
# ============================================================================

@applications_bp.route('/api/applications', methods=['POST'])
@role_required('company_owner')
def request_application():
    """File a license request for the signed-in company owner"""
    try:
        data = get_json_body()
        is_valid, error = validate_required_fields(data, ['state', 'license_type_id'])
        if not is_valid:
            return error_response(error)
        is_valid, error = validate_state(data['state'])
        if not is_valid:
            return error_response(error)

        user_id = get_current_user_id()
        with get_db_session() as db:
            application = ApplicationsRepository(db, user_id).request_application(
                user_id, data['state'], data['license_type_id'], data.get('staff_member_id') or None
            )
        return jsonify({'success': True, 'application': application}), 201

    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error requesting application: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>/approve', methods=['POST'])
@admin_required
def approve_application(application_id):
    try:
        expert_id = get_json_body().get('expert_id') or None
        with get_db_session() as db:
            application = ApplicationsRepository(db, get_current_user_id()).approve_application(
                application_id, expert_id
            )
            if not application:
                return error_response('Application not found', 404)
            _notify(db, application['company_owner_id'], 'Application approved',
                    f"Work has started on your {application['application_name']} application.",
                    'success')
            _notify(db, application['assigned_expert_id'], 'New application assigned',
                    f"You have been assigned the {application['application_name']} application.")
        return jsonify({'success': True, 'application': application})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error approving application: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>/reject', methods=['POST'])
@admin_required
def reject_application(application_id):
    try:
        reason = get_json_body().get('reason')
        with get_db_session() as db:
            application = ApplicationsRepository(db, get_current_user_id()).reject_application(
                application_id, reason
            )
            if not application:
                return error_response('Application not found', 404)
            _notify(db, application['company_owner_id'], 'Application rejected',
                    reason or f"Your {application['application_name']} application was rejected.",
                    'alert')
        return jsonify({'success': True, 'application': application})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error rejecting application: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>/revision', methods=['POST'])
@role_required('admin', 'expert')
def request_revision(application_id):
    try:
        reason = (get_json_body().get('reason') or '').strip()
        if not reason:
            return error_response('A reason is required')

        with get_db_session() as db:
            if not _load(db, application_id):
                return error_response('Application not found', 404)
            application = ApplicationsRepository(db, get_current_user_id()).request_revision(
                application_id, reason
            )
            _notify(db, application['company_owner_id'], 'Revision requested', reason, 'warning')
        return jsonify({'success': True, 'application': application})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error requesting revision: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>/submit', methods=['POST'])
@role_required('admin', 'expert')
def submit_application(application_id):
    try:
        with get_db_session() as db:
            if not _load(db, application_id):
                return error_response('Application not found', 404)
            application = ApplicationsRepository(db, get_current_user_id()).submit_application(application_id)
        return jsonify({'success': True, 'application': application})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error submitting application: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>/status', methods=['PUT'])
@admin_required
def update_status(application_id):
    try:
        status = get_json_body().get('status')
        if status not in APPLICATION_STATUSES:
            return error_response(f"Invalid status. Allowed: {', '.join(APPLICATION_STATUSES)}")
        with get_db_session() as db:
            application = ApplicationsRepository(db, get_current_user_id()).update_status(
                application_id, status
            )
        if not application:
            return error_response('Application not found', 404)
        return jsonify({'success': True, 'application': application})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error updating application status: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>/expert', methods=['PUT'])
@admin_required
def assign_expert(application_id):
    try:
        expert_id = get_json_body().get('expert_id') or None
        with get_db_session() as db:
            application = ApplicationsRepository(db, get_current_user_id()).assign_expert(
                application_id, expert_id
            )
            if application:
                _notify(db, expert_id, 'New application assigned',
                        f"You have been assigned the {application['application_name']} application.")
        if not application:
            return error_response('Application not found', 404)
        return jsonify({'success': True, 'application': application})
    except Exception as e:
        logger.error(f"Error assigning expert: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>/close', methods=['POST'])
@role_required('admin', 'company_owner', 'expert')
def close_application(application_id):
    try:
        with get_db_session() as db:
            if not _load(db, application_id):
                return error_response('Application not found', 404)
            application = ApplicationsRepository(db, get_current_user_id()).close_application(application_id)
        return jsonify({'success': True, 'application': application})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error closing application: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>', methods=['DELETE'])
@admin_required
def delete_application(application_id):
    try:
        with get_db_session() as db:
            deleted = ApplicationsRepository(db, get_current_user_id()).delete_application(application_id)
        if not deleted:
            return error_response('Application not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting application: {e}")
        return error_response(str(e), 500)


# ============================================================================
# STEPS
# ============================================================================

@applications_bp.route('/api/applications/<application_id>/steps/<step_id>', methods=['PUT'])
@role_required('admin', 'company_owner', 'expert')
def toggle_step(application_id, step_id):
    """Mark a step complete or incomplete; returns the step and the new progress"""
    try:
        data = get_json_body()
        if 'is_completed' not in data:
            return error_response('is_completed is required')

        with get_db_session() as db:
            application = _load(db, application_id)
            if not application or step_id not in {s['id'] for s in application['steps']}:
                return error_response('Step not found', 404)
            step = ApplicationsRepository(db, get_current_user_id()).toggle_step(
                step_id, parse_bool(data['is_completed'])
            )
        return jsonify({'success': True, 'step': step,
                        'progress_percentage': step['progress_percentage']})
    except Exception as e:
        logger.error(f"Error updating step: {e}")
        return error_response(str(e), 500)


# ============================================================================
# DOCUMENTS
# ============================================================================

@applications_bp.route('/api/applications/<application_id>/documents', methods=['POST'])
@role_required('admin', 'company_owner', 'expert')
def add_document(application_id):
    """Attach an uploaded document (URL as stored by the client) and tell the expert"""
    try:
        data = get_json_body()
        if not (data.get('document_name') or '').strip():
            return error_response('Document name is required')

        with get_db_session() as db:
            application = _load(db, application_id)
            if not application:
                return error_response('Application not found', 404)
            document = ApplicationsRepository(db, get_current_user_id()).add_document(
                application_id,
                data['document_name'].strip(),
                document_url=data.get('document_url'),
                document_type=data.get('document_type'),
                license_requirement_document_id=data.get('license_requirement_document_id')
            )
            _notify(db, application['assigned_expert_id'], 'New document uploaded',
                    f"{document['document_name']} was added to {application['application_name']}.",
                    'document')
        return jsonify({'success': True, 'document': document}), 201
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error adding document: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>/documents/<document_id>/review', methods=['PUT'])
@role_required('admin', 'expert')
def review_document(application_id, document_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            application = _load(db, application_id)
            if not application or document_id not in {d['id'] for d in application['documents']}:
                return error_response('Document not found', 404)
            document = ApplicationsRepository(db, get_current_user_id()).review_document(
                document_id, data.get('status'), data.get('notes')
            )
            _notify(db, application['company_owner_id'], 'Document reviewed',
                    f"{document['document_name']} was marked {document['status']}.", 'document')
        return jsonify({'success': True, 'document': document})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error reviewing document: {e}")
        return error_response(str(e), 500)


@applications_bp.route('/api/applications/<application_id>/documents/<document_id>', methods=['DELETE'])
@role_required('admin', 'company_owner', 'expert')
def delete_document(application_id, document_id):
    try:
        with get_db_session() as db:
            application = _load(db, application_id)
            if not application or document_id not in {d['id'] for d in application['documents']}:
                return error_response('Document not found', 404)
            ApplicationsRepository(db, get_current_user_id()).delete_document(document_id)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting document: {e}")
        return error_response(str(e), 500)
