"""
Reports Routes Blueprint

Company owner reports on their staff: certifications, expiring
certifications and the staff roster, as JSON or CSV downloads (?format=csv).
"""

from datetime import date

from flask import Blueprint, request, jsonify, make_response
import logging

from auth import role_required, get_current_user_id
from database import get_db_session
from services.reports_service import (
    ReportsService,
    to_csv,
    STAFF_CERTIFICATION_COLUMNS,
    EXPIRING_CERTIFICATION_COLUMNS,
    STAFF_ROSTER_COLUMNS,
)
from app.utils import error_response

logger = logging.getLogger(__name__)

# Create blueprint
reports_bp = Blueprint('reports_bp', __name__)

# report name -> (service method, CSV columns)
REPORTS = {
    'staff-certifications': ('get_staff_certifications_report', STAFF_CERTIFICATION_COLUMNS),
    'expiring-certifications': ('get_expiring_certifications_report', EXPIRING_CERTIFICATION_COLUMNS),
    'staff-roster': ('get_staff_roster_report', STAFF_ROSTER_COLUMNS),
}


@reports_bp.route('/api/reports', methods=['GET'])
@role_required('company_owner')
def list_reports():
    return jsonify({'success': True, 'reports': list(REPORTS.keys())})


@reports_bp.route('/api/reports/<report_name>', methods=['GET'])
@role_required('company_owner')
def get_report(report_name):
    if report_name not in REPORTS:
        return error_response('Report not found', 404)

    method_name, columns = REPORTS[report_name]
    try:
        with get_db_session() as db:
            rows = getattr(ReportsService(db, get_current_user_id()), method_name)()

        if request.args.get('format') == 'csv':
            response = make_response(to_csv(rows, columns))
            response.headers['Content-Type'] = 'text/csv; charset=utf-8'
            response.headers['Content-Disposition'] = (
                f'attachment; filename={report_name}-{date.today().isoformat()}.csv'
            )
            return response

        return jsonify({'success': True, 'report': report_name, 'rows': rows, 'count': len(rows)})

    except Exception as e:
        logger.error(f"Error generating {report_name} report: {e}")
        return error_response(str(e), 500)
