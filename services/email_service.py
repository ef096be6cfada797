"""
Email Service - transactional email through the Resend HTTP API.

Sending never raises: a failed email must not break the upload or reset
flow that triggered it, so every send returns a result dict:

    {'success': True, 'data': {...}}
    {'success': False, 'error': {'message': ..., 'statusCode': ..., 'isTestingMode': bool}}
"""

import logging
from typing import Dict, Optional

import requests
from markupsafe import escape

logger = logging.getLogger(__name__)

DEFAULT_FROM = 'Home Care Licensing <onboarding@resend.dev>'
TESTING_MODE_MARKER = 'You can only send testing emails'
TESTING_MODE_MESSAGE = (
    'Email sending is restricted to testing mode. Please verify a domain at '
    'resend.com/domains to send emails to other recipients.'
)


def is_testing_mode_error(error: Optional[Dict]) -> bool:
    """True when Resend refused the message because the account is in testing mode."""
    if not error:
        return False
    if error.get('isTestingMode'):
        return True
    return error.get('statusCode') == 403 and 'testing emails' in (error.get('message') or '')


class EmailService:
    """Thin client for the Resend /emails endpoint."""

    def __init__(self, api_key: str, api_url: str = 'https://api.resend.com/emails',
                 from_email: str = DEFAULT_FROM, app_url: str = 'http://localhost:5000',
                 timeout: int = 10):
        self.api_key = api_key
        self.api_url = api_url
        self.from_email = from_email or DEFAULT_FROM
        self.app_url = (app_url or '').rstrip('/')
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def send(self, to: str, subject: str, html: str, text: str) -> Dict:
        if not self.enabled:
            logger.warning(f"Email not sent (RESEND_API_KEY not configured): {subject}")
            return {'success': False, 'error': {'message': 'RESEND_API_KEY is not configured'}}

        payload = {
            'from': self.from_email,
            'to': (to or '').strip(),
            'subject': subject,
            'html': html,
            'text': text,
        }

        try:
            response = requests.post(
                self.api_url,
                json=payload,
                headers={'Authorization': f'Bearer {self.api_key}'},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Error sending email to {payload['to']}: {e}")
            return {'success': False, 'error': {'message': str(e)}}

        try:
            body = response.json()
        except ValueError:
            body = {'message': response.text}

        if response.ok:
            logger.info(f"Sent email '{subject}' to {payload['to']}")
            return {'success': True, 'data': body}

        error = {
            'statusCode': body.get('statusCode', response.status_code),
            'name': body.get('name'),
            'message': body.get('message') or response.reason,
        }

        if TESTING_MODE_MARKER in (error['message'] or ''):
            logger.warning('Resend API is in testing mode; domain verification required '
                           'to send to other recipients.')
            error['isTestingMode'] = True
            error['message'] = TESTING_MODE_MESSAGE
        else:
            logger.error(f"Resend API error ({error['statusCode']}): {error['message']}")

        return {'success': False, 'error': error}

    # ==================== MESSAGES ====================

    def application_url(self, application_id: str) -> str:
        return f"{self.app_url}/pages/expert/applications/{application_id}"

    def send_document_upload_notification(self, expert_email: str, application_name: str,
                                          document_name: str, application_id: str,
                                          expert_name: str = None,
                                          owner_name: str = None) -> Dict:
        """Tell the assigned expert that the client uploaded a document."""
        url = self.application_url(application_id)
        greeting = f"Hello {expert_name or 'Expert'},"
        uploader = f"{owner_name} has" if owner_name else 'A client has'

        # Names come from the request body
        html_greeting = escape(greeting)
        html_uploader = escape(uploader)
        html_application = escape(application_name)
        html_document = escape(document_name)
        html_url = escape(url)

        html = f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>New Document Uploaded</title>
  </head>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background: #2563eb; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
      <h1 style="color: white; margin: 0; font-size: 24px;">New Document Uploaded</h1>
    </div>
    <div style="background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; border: 1px solid #e5e7eb;">
      <p style="font-size: 16px;">{html_greeting}</p>
      <p style="font-size: 16px;">{html_uploader} uploaded a new document for the application:</p>
      <div style="background: white; padding: 20px; border-radius: 8px; border-left: 4px solid #2563eb;">
        <p style="margin: 0; font-size: 18px; font-weight: bold;">{html_application}</p>
        <p style="margin: 10px 0 0 0; font-size: 14px; color: #6b7280;">Document: <strong>{html_document}</strong></p>
      </div>
      <div style="text-align: center; margin: 30px 0;">
        <a href="{html_url}" style="display: inline-block; background: #2563eb; color: white; padding: 12px 30px; text-decoration: none; border-radius: 6px; font-weight: bold;">View Application</a>
      </div>
      <p style="font-size: 14px; color: #6b7280;">This is an automated notification from Home Care Licensing Platform.</p>
    </div>
  </body>
</html>"""

        text = (
            f"New Document Uploaded\n\n"
            f"{greeting}\n\n"
            f"{uploader} uploaded a new document for the application: {application_name}\n\n"
            f"Document: {document_name}\n\n"
            f"View the application: {url}\n\n"
            f"This is an automated notification from Home Care Licensing Platform."
        )

        return self.send(expert_email, f"New Document Uploaded: {document_name}", html, text)

    def send_password_reset(self, email: str, reset_url: str) -> Dict:
        html = f"""<!DOCTYPE html>
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <p>We received a request to reset your Home Care Licensing password.</p>
    <p><a href="{reset_url}">Reset your password</a></p>
    <p style="font-size: 14px; color: #6b7280;">If you did not request this, you can ignore this email.</p>
  </body>
</html>"""
        text = (
            "We received a request to reset your Home Care Licensing password.\n\n"
            f"Reset your password: {reset_url}\n\n"
            "If you did not request this, you can ignore this email."
        )
        return self.send(email, 'Reset your password', html, text)


def get_email_service(config) -> EmailService:
    """Build an EmailService from a Flask config mapping."""
    return EmailService(
        api_key=config.get('RESEND_API_KEY', ''),
        api_url=config.get('RESEND_API_URL', 'https://api.resend.com/emails'),
        from_email=config.get('EMAIL_FROM', DEFAULT_FROM),
        app_url=config.get('APP_URL', 'http://localhost:5000'),
        timeout=config.get('EMAIL_TIMEOUT', 10)
    )
