"""
Billing Routes Blueprint

Admin billing screens: manual billing records, the monthly agency bill, and
the licensing cases feeding it.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import admin_required, get_current_user_id
from database import get_db_session
from services.billing_repository import BillingRepository
from services.cases_repository import CasesRepository
from validators import validate_billing_request, validate_required_fields, validate_state
from app.utils import get_json_body, error_response, parse_month_args

logger = logging.getLogger(__name__)

# Create blueprint
billing_bp = Blueprint('billing_bp', __name__)


# ============================================================================
# BILLING RECORDS
# ============================================================================

@billing_bp.route('/api/billing', methods=['GET'])
@admin_required
def list_billing():
    try:
        with get_db_session() as db:
            records = BillingRepository(db).list_billing(request.args.get('client_id'))
        return jsonify({'success': True, 'billing': records})
    except Exception as e:
        logger.error(f"Error listing billing: {e}")
        return error_response(str(e), 500)


@billing_bp.route('/api/billing', methods=['POST'])
@admin_required
def create_billing():
    try:
        data = get_json_body()
        is_valid, error = validate_billing_request(data)
        if not is_valid:
            return error_response(error)

        with get_db_session() as db:
            record = BillingRepository(db, get_current_user_id()).create_billing(data)
        return jsonify({'success': True, 'billing': record}), 201
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error creating billing: {e}")
        return error_response(str(e), 500)


@billing_bp.route('/api/billing/<billing_id>/status', methods=['PUT'])
@admin_required
def update_billing_status(billing_id):
    try:
        status = get_json_body().get('status')
        with get_db_session() as db:
            record = BillingRepository(db, get_current_user_id()).update_billing_status(billing_id, status)
        if not record:
            return error_response('Billing record not found', 404)
        return jsonify({'success': True, 'billing': record})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error updating billing status: {e}")
        return error_response(str(e), 500)


@billing_bp.route('/api/billing/agencies', methods=['GET'])
@admin_required
def get_agency_billing():
    """Per-agency bill for ?year=&month= (defaults to the current month)"""
    try:
        year, month = parse_month_args(request.args)
    except ValueError as e:
        return error_response(str(e))

    try:
        with get_db_session() as db:
            billing = BillingRepository(db).get_agency_billing(year, month)
        return jsonify({'success': True, **billing})
    except Exception as e:
        logger.error(f"Error building agency billing: {e}")
        return error_response(str(e), 500)


# ============================================================================
# CASES
# ============================================================================

@billing_bp.route('/api/cases', methods=['GET'])
@admin_required
def list_cases():
    try:
        with get_db_session() as db:
            cases = CasesRepository(db).list_cases(
                client_id=request.args.get('client_id'),
                status=request.args.get('status'),
                state=request.args.get('state')
            )
        return jsonify({'success': True, 'cases': cases})
    except Exception as e:
        logger.error(f"Error listing cases: {e}")
        return error_response(str(e), 500)


@billing_bp.route('/api/cases', methods=['POST'])
@admin_required
def create_case():
    try:
        data = get_json_body()
        is_valid, error = validate_required_fields(data, ['client_id', 'state'])
        if not is_valid:
            return error_response(error)
        is_valid, error = validate_state(data['state'])
        if not is_valid:
            return error_response(error)

        with get_db_session() as db:
            case = CasesRepository(db, get_current_user_id()).create_case(data)
        return jsonify({'success': True, 'case': case}), 201
    except Exception as e:
        logger.error(f"Error creating case: {e}")
        return error_response(str(e), 500)


@billing_bp.route('/api/cases/<case_id>', methods=['GET'])
@admin_required
def get_case(case_id):
    try:
        with get_db_session() as db:
            case = CasesRepository(db).get_case(case_id)
        if not case:
            return error_response('Case not found', 404)
        return jsonify({'success': True, 'case': case})
    except Exception as e:
        logger.error(f"Error getting case: {e}")
        return error_response(str(e), 500)


@billing_bp.route('/api/cases/<case_id>', methods=['PUT'])
@admin_required
def update_case(case_id):
    try:
        with get_db_session() as db:
            case = CasesRepository(db, get_current_user_id()).update_case(case_id, get_json_body())
        if not case:
            return error_response('Case not found', 404)
        return jsonify({'success': True, 'case': case})
    except Exception as e:
        logger.error(f"Error updating case: {e}")
        return error_response(str(e), 500)


@billing_bp.route('/api/cases/<case_id>', methods=['DELETE'])
@admin_required
def delete_case(case_id):
    try:
        with get_db_session() as db:
            deleted = CasesRepository(db, get_current_user_id()).delete_case(case_id)
        if not deleted:
            return error_response('Case not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting case: {e}")
        return error_response(str(e), 500)
