"""
Input Validation & Sanitization Utilities
Provides validation for API request payloads and user input
"""
import re
from datetime import date, datetime
from typing import Dict, Any, List, Optional, Tuple
from werkzeug.utils import secure_filename
import logging

from constants import US_STATES, ROLES, BILLING_STATUSES, EXPERT_STATUSES

logger = logging.getLogger(__name__)

# Regex patterns
EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
PHONE_PATTERN = re.compile(r'^\+?1?\d{9,15}$')
DATE_FORMAT = '%Y-%m-%d'

MIN_PASSWORD_LENGTH = 6


class ValidationError(Exception):
    """Custom exception for validation errors"""
    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate that all required fields are present in the data

    Args:
        data: Dictionary of input data
        required_fields: List of required field names

    Returns:
        Tuple of (is_valid, error_message)
    """
    missing_fields = [field for field in required_fields if field not in data or data[field] is None or data[field] == '']

    if missing_fields:
        return False, f"Missing required fields: {', '.join(missing_fields)}"

    return True, None


def validate_email(email: str) -> Tuple[bool, Optional[str]]:
    """
    Validate email format

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email or not isinstance(email, str):
        return False, "Email must be a non-empty string"

    if not EMAIL_PATTERN.match(email.strip()):
        return False, "Invalid email format"

    if len(email) > 254:  # RFC 5321
        return False, "Email address too long"

    return True, None


def validate_phone(phone: str) -> Tuple[bool, Optional[str]]:
    """
    Validate phone number format

    Args:
        phone: Phone number to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not phone or not isinstance(phone, str):
        return False, "Phone must be a non-empty string"

    # Remove common separators
    cleaned_phone = re.sub(r'[\s\-\(\)\.]', '', phone)

    if not PHONE_PATTERN.match(cleaned_phone):
        return False, "Invalid phone number format"

    return True, None


def validate_string_length(value: str, min_length: int = 0, max_length: int = 1000) -> Tuple[bool, Optional[str]]:
    """
    Validate string length is within acceptable range

    Args:
        value: String to validate
        min_length: Minimum allowed length
        max_length: Maximum allowed length

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, "Value must be a string"

    if len(value) < min_length:
        return False, f"Value too short (minimum {min_length} characters)"

    if len(value) > max_length:
        return False, f"Value too long (maximum {max_length} characters)"

    return True, None


def validate_number_range(value: float, min_value: Optional[float] = None, max_value: Optional[float] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate number is within acceptable range

    Args:
        value: Number to validate
        min_value: Minimum allowed value
        max_value: Maximum allowed value

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False, "Value must be a number"

    if min_value is not None and value < min_value:
        return False, f"Value too small (minimum {min_value})"

    if max_value is not None and value > max_value:
        return False, f"Value too large (maximum {max_value})"

    return True, None


def validate_date(value: Any) -> Tuple[bool, Optional[str]]:
    """Validate an ISO (YYYY-MM-DD) date string or a date object."""
    if isinstance(value, date):
        return True, None

    if not value or not isinstance(value, str):
        return False, "Date must be a non-empty string"

    try:
        datetime.strptime(value[:10], DATE_FORMAT)
    except ValueError:
        return False, "Invalid date format (expected YYYY-MM-DD)"

    return True, None


def parse_date(value: Any) -> Optional[date]:
    """
    Convert an ISO date string (or datetime/date) to a date.

    Returns None for empty values; raises ValidationError for malformed input.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")


def validate_state(state: str) -> Tuple[bool, Optional[str]]:
    """Validate that the value is one of the 50 US state names."""
    if not state or not isinstance(state, str):
        return False, "State must be a non-empty string"

    if state not in US_STATES:
        return False, f"Unknown state: {state}"

    return True, None


def validate_role(role: str) -> Tuple[bool, Optional[str]]:
    if role not in ROLES:
        return False, f"Invalid role. Allowed roles: {', '.join(ROLES)}"
    return True, None


def validate_password(password: str) -> Tuple[bool, Optional[str]]:
    if not password or not isinstance(password, str):
        return False, "Password is required"

    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    return True, None


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """
    Sanitize string input by removing null bytes and surrounding whitespace

    Args:
        value: String to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if not isinstance(value, str):
        return str(value)

    sanitized = value.replace('\x00', '').strip()

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent directory traversal attacks

    Args:
        filename: Original filename

    Returns:
        Sanitized filename
    """
    safe_name = secure_filename(filename)

    if not safe_name:
        safe_name = 'file'

    return safe_name


# ============================================================================
# REQUEST VALIDATORS
# ============================================================================

def validate_certification_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate a create/update certification payload

    Args:
        data: Request data dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_fields = ['type', 'license_number', 'expiration_date', 'issuing_authority', 'status']

    is_valid, error = validate_required_fields(data, required_fields)
    if not is_valid:
        return False, error

    is_valid, error = validate_date(data['expiration_date'])
    if not is_valid:
        return False, f"Invalid expiration_date: {error}"

    if data.get('issue_date'):
        is_valid, error = validate_date(data['issue_date'])
        if not is_valid:
            return False, f"Invalid issue_date: {error}"

    if data.get('state'):
        is_valid, error = validate_state(data['state'])
        if not is_valid:
            return False, error

    return True, None


def validate_license_type_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate a new license type payload."""
    is_valid, error = validate_required_fields(data, ['state', 'name'])
    if not is_valid:
        return False, error

    is_valid, error = validate_state(data['state'])
    if not is_valid:
        return False, error

    is_valid, error = validate_string_length(data['name'], min_length=1, max_length=255)
    if not is_valid:
        return False, f"Invalid name: {error}"

    return True, None


def validate_billing_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate a manual billing record payload."""
    is_valid, error = validate_required_fields(data, ['client_id', 'billing_month'])
    if not is_valid:
        return False, error

    is_valid, error = validate_date(data['billing_month'])
    if not is_valid:
        return False, f"Invalid billing_month: {error}"

    for field in ('user_licenses_count', 'applications_count'):
        if data.get(field) is not None:
            is_valid, error = validate_number_range(data[field], min_value=0)
            if not is_valid:
                return False, f"Invalid {field}: {error}"

    for field in ('user_license_rate', 'application_rate'):
        if data.get(field) is not None:
            is_valid, error = validate_number_range(data[field], min_value=0)
            if not is_valid:
                return False, f"Invalid {field}: {error}"

    if data.get('status') and data['status'] not in BILLING_STATUSES:
        return False, f"Invalid status. Allowed: {', '.join(BILLING_STATUSES)}"

    return True, None


def validate_expert_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate a new licensing expert payload."""
    is_valid, error = validate_required_fields(data, ['first_name', 'last_name', 'email', 'password'])
    if not is_valid:
        return False, error

    is_valid, error = validate_email(data['email'])
    if not is_valid:
        return False, error

    is_valid, error = validate_password(data['password'])
    if not is_valid:
        return False, error

    if data.get('phone'):
        is_valid, error = validate_phone(data['phone'])
        if not is_valid:
            return False, error

    if data.get('status') and data['status'] not in EXPERT_STATUSES:
        return False, f"Invalid status. Allowed: {', '.join(EXPERT_STATUSES)}"

    return True, None


def validate_staff_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate a new staff member payload."""
    is_valid, error = validate_required_fields(data, ['first_name', 'last_name', 'email'])
    if not is_valid:
        return False, error

    is_valid, error = validate_email(data['email'])
    if not is_valid:
        return False, error

    if data.get('phone'):
        is_valid, error = validate_phone(data['phone'])
        if not is_valid:
            return False, error

    if data.get('password'):
        is_valid, error = validate_password(data['password'])
        if not is_valid:
            return False, error

    return True, None


def validate_document_notification_request(data: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """Validate the document upload email payload (camelCase keys from the browser)."""
    required = ['expertEmail', 'applicationName', 'documentName', 'applicationId']
    if any(not data.get(field) for field in required):
        return False, "Missing required fields"
    return True, None


def format_validation_error(field: str, message: str) -> Dict[str, Any]:
    """
    Format validation error for consistent API responses

    Args:
        field: Field name that failed validation
        message: Error message

    Returns:
        Error response dictionary
    """
    return {
        'success': False,
        'error': message,
        'field': field
    }
