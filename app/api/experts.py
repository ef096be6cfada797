"""
Experts Routes Blueprint

Admin management of licensing experts; experts read their own profile,
clients and applications.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import admin_required, role_required, get_current_user_id
from database import get_db_session
from services.experts_repository import ExpertsRepository
from validators import validate_expert_request, validate_phone
from app.utils import get_json_body, error_response

logger = logging.getLogger(__name__)

# Create blueprint
experts_bp = Blueprint('experts_bp', __name__)


@experts_bp.route('/api/experts', methods=['GET'])
@admin_required
def list_experts():
    try:
        with get_db_session() as db:
            experts = ExpertsRepository(db).list_experts(request.args.get('status'))
        return jsonify({'success': True, 'experts': experts})
    except Exception as e:
        logger.error(f"Error listing experts: {e}")
        return error_response(str(e), 500)


@experts_bp.route('/api/experts', methods=['POST'])
@admin_required
def create_expert():
    """Create the expert's login and profile"""
    try:
        data = get_json_body()
        is_valid, error = validate_expert_request(data)
        if not is_valid:
            return error_response(error)

        with get_db_session() as db:
            repo = ExpertsRepository(db, get_current_user_id())
            expert = repo.create_expert(
                data['first_name'].strip(),
                data['last_name'].strip(),
                data['email'],
                data['password'],
                phone=data.get('phone'),
                expertise=data.get('expertise'),
                role=data.get('role'),
                status=data.get('status')
            )
            if data.get('states'):
                expert = repo.update_expert(expert['id'], {'states': data['states']})
        return jsonify({'success': True, 'expert': expert}), 201

    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating expert: {e}")
        return error_response(str(e), 500)


@experts_bp.route('/api/experts/me', methods=['GET'])
@role_required('expert')
def get_my_expert_profile():
    """The signed-in expert's profile with assigned clients and applications"""
    try:
        with get_db_session() as db:
            repo = ExpertsRepository(db)
            expert = repo.get_expert_by_user(get_current_user_id())
            if not expert:
                return error_response('Expert profile not found', 404)
            expert['clients'] = repo.get_expert_clients(expert['id'])
            expert['applications'] = repo.get_expert_applications(expert['id'])
        return jsonify({'success': True, 'expert': expert})
    except Exception as e:
        logger.error(f"Error getting expert profile: {e}")
        return error_response(str(e), 500)


@experts_bp.route('/api/experts/<expert_id>', methods=['GET'])
@admin_required
def get_expert(expert_id):
    try:
        with get_db_session() as db:
            repo = ExpertsRepository(db)
            expert = repo.get_expert(expert_id)
            if expert:
                expert['clients'] = repo.get_expert_clients(expert_id)
                expert['applications'] = repo.get_expert_applications(expert_id)
        if not expert:
            return error_response('Expert not found', 404)
        return jsonify({'success': True, 'expert': expert})
    except Exception as e:
        logger.error(f"Error getting expert: {e}")
        return error_response(str(e), 500)


@experts_bp.route('/api/experts/<expert_id>', methods=['PUT'])
@admin_required
def update_expert(expert_id):
    try:
        data = get_json_body()
        if data.get('phone'):
            is_valid, error = validate_phone(data['phone'])
            if not is_valid:
                return error_response(error)

        with get_db_session() as db:
            expert = ExpertsRepository(db, get_current_user_id()).update_expert(expert_id, data)
        if not expert:
            return error_response('Expert not found', 404)
        return jsonify({'success': True, 'expert': expert})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error updating expert: {e}")
        return error_response(str(e), 500)
