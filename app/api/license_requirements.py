"""
License Requirements Routes Blueprint

Admin editing of the per-state license templates: client steps, required
documents, and the expert steps carried by every application of a
(state, license type) pair. Includes the copy-from-another-template flows.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import admin_required, get_current_user_id
from database import get_db_session
from services.license_requirements_repository import LicenseRequirementsRepository
from app.utils import get_json_body, error_response, parse_bool

logger = logging.getLogger(__name__)

# Create blueprint
license_requirements_bp = Blueprint('license_requirements_bp', __name__)


def _repo(db):
    return LicenseRequirementsRepository(db, get_current_user_id())


def _estimated_days(data):
    value = data.get('estimated_days')
    if value in (None, ''):
        return None
    return int(value)


# ============================================================================
# REQUIREMENTS
# ============================================================================

@license_requirements_bp.route('/api/license-requirements', methods=['GET'])
@admin_required
def list_requirements():
    try:
        with get_db_session() as db:
            requirements = _repo(db).list_requirements()
        return jsonify({'success': True, 'requirements': requirements})
    except Exception as e:
        logger.error(f"Error listing license requirements: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements', methods=['POST'])
@admin_required
def get_or_create_requirement():
    """Requirement id for a state and license type, created on first use"""
    try:
        data = get_json_body()
        state = (data.get('state') or '').strip()
        license_type = (data.get('license_type') or '').strip()
        if not state or not license_type:
            return error_response('State and license type are required')

        with get_db_session() as db:
            requirement_id = _repo(db).get_or_create_requirement(state, license_type)
        return jsonify({'success': True, 'requirement_id': requirement_id})
    except Exception as e:
        logger.error(f"Error creating license requirement: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements/<requirement_id>', methods=['GET'])
@admin_required
def get_requirement(requirement_id):
    """A requirement with its steps, documents and expert steps"""
    try:
        with get_db_session() as db:
            repo = _repo(db)
            requirement = repo.get_requirement(requirement_id)
            if not requirement:
                return error_response('License requirement not found', 404)
            data = requirement.to_dict()
            data['steps'] = repo.get_steps(requirement_id)
            data['documents'] = repo.get_documents(requirement_id)
            data['expert_steps'] = repo.get_expert_steps(requirement_id)
        return jsonify({'success': True, 'requirement': data})
    except Exception as e:
        logger.error(f"Error getting license requirement: {e}")
        return error_response(str(e), 500)


# ============================================================================
# STEPS
# ============================================================================

@license_requirements_bp.route('/api/license-requirements/<requirement_id>/steps', methods=['GET'])
@admin_required
def get_steps(requirement_id):
    try:
        with get_db_session() as db:
            steps = _repo(db).get_steps(requirement_id)
        return jsonify({'success': True, 'steps': steps})
    except Exception as e:
        logger.error(f"Error getting steps: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements/<requirement_id>/steps', methods=['POST'])
@admin_required
def create_step(requirement_id):
    try:
        data = get_json_body()
        if not (data.get('step_name') or '').strip():
            return error_response('Step name is required')

        with get_db_session() as db:
            step = _repo(db).create_step(
                requirement_id,
                data['step_name'].strip(),
                description=data.get('description'),
                estimated_days=_estimated_days(data),
                is_required=parse_bool(data.get('is_required'), default=True)
            )
        return jsonify({'success': True, 'step': step}), 201
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating step: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirement-steps/<step_id>', methods=['PUT'])
@admin_required
def update_step(step_id):
    try:
        data = get_json_body()
        if not (data.get('step_name') or '').strip():
            return error_response('Step name is required')

        with get_db_session() as db:
            step = _repo(db).update_step(
                step_id,
                data['step_name'].strip(),
                description=data.get('description'),
                estimated_days=_estimated_days(data),
                is_required=parse_bool(data.get('is_required'), default=True)
            )
        if not step:
            return error_response('Step not found', 404)
        return jsonify({'success': True, 'step': step})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error updating step: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirement-steps/<step_id>', methods=['DELETE'])
@admin_required
def delete_step(step_id):
    try:
        with get_db_session() as db:
            deleted = _repo(db).delete_step(step_id)
        if not deleted:
            return error_response('Step not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting step: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirement-steps', methods=['GET'])
@admin_required
def get_all_steps():
    """Steps of every template, for the copy dialog"""
    try:
        with get_db_session() as db:
            steps = _repo(db).get_all_steps_with_requirement_info(request.args.get('exclude'))
        return jsonify({'success': True, 'steps': steps})
    except Exception as e:
        logger.error(f"Error getting steps: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements/<requirement_id>/steps/copy', methods=['POST'])
@admin_required
def copy_steps(requirement_id):
    try:
        step_ids = get_json_body().get('step_ids') or []
        with get_db_session() as db:
            steps = _repo(db).copy_steps(requirement_id, step_ids)
        return jsonify({'success': True, 'steps': steps, 'count': len(steps)})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error copying steps: {e}")
        return error_response(str(e), 500)


# ============================================================================
# DOCUMENTS
# ============================================================================

@license_requirements_bp.route('/api/license-requirements/<requirement_id>/documents', methods=['GET'])
@admin_required
def get_documents(requirement_id):
    try:
        with get_db_session() as db:
            documents = _repo(db).get_documents(requirement_id)
        return jsonify({'success': True, 'documents': documents})
    except Exception as e:
        logger.error(f"Error getting documents: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements/<requirement_id>/documents', methods=['POST'])
@admin_required
def create_document(requirement_id):
    try:
        data = get_json_body()
        if not (data.get('document_name') or '').strip():
            return error_response('Document name is required')

        with get_db_session() as db:
            document = _repo(db).create_document(
                requirement_id,
                data['document_name'].strip(),
                description=data.get('description'),
                is_required=parse_bool(data.get('is_required'), default=True),
                document_type=data.get('document_type')
            )
        return jsonify({'success': True, 'document': document}), 201
    except Exception as e:
        logger.error(f"Error creating document: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirement-documents/<document_id>', methods=['PUT'])
@admin_required
def update_document(document_id):
    try:
        data = get_json_body()
        if not (data.get('document_name') or '').strip():
            return error_response('Document name is required')

        with get_db_session() as db:
            document = _repo(db).update_document(
                document_id,
                data['document_name'].strip(),
                description=data.get('description'),
                is_required=parse_bool(data.get('is_required'), default=True)
            )
        if not document:
            return error_response('Document not found', 404)
        return jsonify({'success': True, 'document': document})
    except Exception as e:
        logger.error(f"Error updating document: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirement-documents/<document_id>', methods=['DELETE'])
@admin_required
def delete_document(document_id):
    try:
        with get_db_session() as db:
            deleted = _repo(db).delete_document(document_id)
        if not deleted:
            return error_response('Document not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting document: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirement-documents', methods=['GET'])
@admin_required
def get_all_documents():
    try:
        with get_db_session() as db:
            documents = _repo(db).get_all_documents_with_requirement_info(request.args.get('exclude'))
        return jsonify({'success': True, 'documents': documents})
    except Exception as e:
        logger.error(f"Error getting documents: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements/<requirement_id>/documents/copy', methods=['POST'])
@admin_required
def copy_documents(requirement_id):
    try:
        document_ids = get_json_body().get('document_ids') or []
        with get_db_session() as db:
            documents = _repo(db).copy_documents(requirement_id, document_ids)
        return jsonify({'success': True, 'documents': documents, 'count': len(documents)})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error copying documents: {e}")
        return error_response(str(e), 500)


# ============================================================================
# EXPERT STEPS
# ============================================================================

@license_requirements_bp.route('/api/license-requirements/<requirement_id>/expert-steps', methods=['GET'])
@admin_required
def get_expert_steps(requirement_id):
    try:
        with get_db_session() as db:
            steps = _repo(db).get_expert_steps(requirement_id)
        return jsonify({'success': True, 'expert_steps': steps})
    except Exception as e:
        logger.error(f"Error getting expert steps: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements/<requirement_id>/expert-steps', methods=['POST'])
@admin_required
def create_expert_step(requirement_id):
    """Add an expert step to every application filed for this template"""
    try:
        data = get_json_body()
        if not (data.get('step_title') or '').strip():
            return error_response('Step title is required')

        with get_db_session() as db:
            step = _repo(db).create_expert_step(
                requirement_id,
                data.get('phase'),
                data['step_title'].strip(),
                description=data.get('description')
            )
        return jsonify({'success': True, 'expert_step': step}), 201
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating expert step: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements/<requirement_id>/expert-steps', methods=['PUT'])
@admin_required
def update_expert_steps_for_requirement(requirement_id):
    """Rewrite every copy of an expert step, matched on its current name, description and phase"""
    try:
        data = get_json_body()
        if not data.get('step_name') or not (data.get('new_title') or '').strip():
            return error_response('step_name and new_title are required')

        with get_db_session() as db:
            count = _repo(db).update_expert_step_for_requirement(
                requirement_id,
                data['step_name'],
                data.get('description'),
                data.get('phase'),
                new_phase=data.get('new_phase'),
                new_title=data['new_title'].strip(),
                new_description=data.get('new_description')
            )
        return jsonify({'success': True, 'updated': count})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error updating expert steps: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements/<requirement_id>/expert-steps', methods=['DELETE'])
@admin_required
def delete_expert_steps_for_requirement(requirement_id):
    try:
        data = get_json_body()
        if not data.get('step_name'):
            return error_response('step_name is required')

        with get_db_session() as db:
            count = _repo(db).delete_expert_step_for_requirement(
                requirement_id, data['step_name'], data.get('description'), data.get('phase')
            )
        return jsonify({'success': True, 'deleted': count})
    except Exception as e:
        logger.error(f"Error deleting expert steps: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/expert-steps/<step_id>', methods=['PUT'])
@admin_required
def update_expert_step(step_id):
    try:
        data = get_json_body()
        if not (data.get('step_title') or '').strip():
            return error_response('Step title is required')

        with get_db_session() as db:
            step = _repo(db).update_expert_step(
                step_id, data.get('phase'), data['step_title'].strip(), data.get('description')
            )
        if not step:
            return error_response('Expert step not found', 404)
        return jsonify({'success': True, 'expert_step': step})
    except Exception as e:
        logger.error(f"Error updating expert step: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/expert-steps/<step_id>', methods=['DELETE'])
@admin_required
def delete_expert_step(step_id):
    try:
        with get_db_session() as db:
            deleted = _repo(db).delete_expert_step(step_id)
        if not deleted:
            return error_response('Expert step not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting expert step: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/expert-steps', methods=['GET'])
@admin_required
def get_all_expert_steps():
    try:
        with get_db_session() as db:
            steps = _repo(db).get_all_expert_steps_with_requirement_info(request.args.get('exclude'))
        return jsonify({'success': True, 'expert_steps': steps})
    except Exception as e:
        logger.error(f"Error getting expert steps: {e}")
        return error_response(str(e), 500)


@license_requirements_bp.route('/api/license-requirements/<requirement_id>/expert-steps/copy', methods=['POST'])
@admin_required
def copy_expert_steps(requirement_id):
    try:
        step_ids = get_json_body().get('step_ids') or []
        with get_db_session() as db:
            steps = _repo(db).copy_expert_steps(requirement_id, step_ids)
        return jsonify({'success': True, 'expert_steps': steps, 'count': len(steps)})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error copying expert steps: {e}")
        return error_response(str(e), 500)
