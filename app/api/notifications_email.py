"""
Email Notification Routes Blueprint

Sends the "new document uploaded" email to an application's expert. A
Resend account still in testing mode is reported as a warning with a 200 so
the document upload that triggered the email is not treated as failed.
"""

from flask import Blueprint, jsonify, current_app
import logging

from auth import login_required
from services.email_service import get_email_service, is_testing_mode_error
from validators import validate_document_notification_request
from app.utils import get_json_body, error_response

logger = logging.getLogger(__name__)

# Create blueprint
notifications_email_bp = Blueprint('notifications_email_bp', __name__)

TESTING_MODE_WARNING = (
    'Email notification not sent - Resend API is in testing mode. Please verify a '
    'domain at resend.com/domains to enable email notifications.'
)


@notifications_email_bp.route('/api/send-email-notification', methods=['POST'])
@login_required
def send_email_notification():
    try:
        data = get_json_body()
        is_valid, error = validate_document_notification_request(data)
        if not is_valid:
            return error_response(error)

        result = get_email_service(current_app.config).send_document_upload_notification(
            expert_email=data['expertEmail'],
            application_name=data['applicationName'],
            document_name=data['documentName'],
            application_id=data['applicationId'],
            expert_name=data.get('expertName'),
            owner_name=data.get('ownerName')
        )

        if result['success']:
            return jsonify({'success': True})

        if is_testing_mode_error(result.get('error')):
            logger.warning('Email notification skipped: Resend API is in testing mode')
            return jsonify({
                'success': False,
                'warning': TESTING_MODE_WARNING,
                'details': result['error']
            }), 200

        return error_response('Failed to send email', 500, details=result.get('error'))

    except Exception as e:
        logger.error(f"Error in email notification API: {e}")
        return error_response('Internal server error', 500, details=str(e))
