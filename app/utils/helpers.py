"""
Helper functions shared by the API blueprints.
"""

from datetime import date

from flask import request, jsonify


def get_json_body():
    """Request JSON as a dict; an empty dict for missing or malformed bodies."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(message, status=400, **extra):
    """
    Standard error envelope.

    Args:
        message: Error message shown to the user
        status: HTTP status code
        extra: Additional keys merged into the body
    """
    body = {'success': False, 'error': message}
    body.update(extra)
    return jsonify(body), status


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def parse_month_args(args):
    """
    (year, month) from ?year=&month= query args, defaulting to the current month.

    Raises:
        ValueError: If either value is not a number or the month is out of range
    """
    today = date.today()
    year = int(args.get('year', today.year))
    month = int(args.get('month', today.month))
    if not 1 <= month <= 12:
        raise ValueError('month must be between 1 and 12')
    return year, month
