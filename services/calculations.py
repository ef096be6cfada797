"""
Business arithmetic shared by the repositories and reports.

Pure functions only: fee and duration parsing for license types,
certification expiry classification, application progress and the
billing formulas used by the admin billing screen.
"""

import calendar
import math
import re
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple, Any

from constants import (
    CERTIFICATION_STATUS_ACTIVE,
    CERTIFICATION_STATUS_EXPIRING,
    CERTIFICATION_STATUS_EXPIRED,
)

DEFAULT_USER_LICENSE_RATE = 50.00
DEFAULT_APPLICATION_RATE = 500.00
DEFAULT_APPLICATION_FEE = 500
SERVICE_FEE_SHARE = 0.10
EXPIRING_SOON_DAYS = 90

_FIRST_INTEGER = re.compile(r'(\d+)')
_NON_NUMERIC = re.compile(r'[^0-9.]')


# =============================================================================
# LICENSE TYPE FIELD PARSING
# =============================================================================

def parse_first_integer(text: Optional[str]) -> Optional[int]:
    """Return the first run of digits in text ("60 days" -> 60), or None."""
    if not text:
        return None
    match = _FIRST_INTEGER.search(str(text))
    return int(match.group(1)) if match else None


def parse_processing_time(text: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
    """Processing time is stored as a (min, max) pair; a single number fills both."""
    value = parse_first_integer(text)
    return value, value


def parse_fee(text: Optional[str]) -> Optional[float]:
    """
    Parse a money string by keeping only digits and dots.

    "$3,500" -> 3500.0, "" -> None. Strings with no usable number return None.
    """
    if text is None:
        return None
    cleaned = _NON_NUMERIC.sub('', str(text))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_renewal_period(text: Optional[str]) -> int:
    """Renewal period in years; defaults to 1 when no number is present."""
    value = parse_first_integer(text)
    return value if value else 1


# =============================================================================
# DATES & CERTIFICATION EXPIRY
# =============================================================================

def to_date(value: Any) -> Optional[date]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()


def days_until(expiry: Any, today: Optional[date] = None) -> Optional[int]:
    """
    Whole days from today until expiry, rounded up.

    Measured from the current moment, so a date later today counts as 1 and
    today itself counts as 0.
    """
    expiry_date = to_date(expiry)
    if expiry_date is None:
        return None

    if today is None:
        now = datetime.now()
    else:
        now = datetime.combine(today, datetime.min.time())

    delta = datetime.combine(expiry_date, datetime.min.time()) - now
    return math.ceil(delta.total_seconds() / 86400)


def classify_certification(expiration_date: Any, status: Optional[str] = None,
                           today: Optional[date] = None) -> str:
    """
    Classify a certification as Expired, Expiring Soon or Active.

    An explicit status of "Expired" always wins over the date.
    """
    days = days_until(expiration_date, today)
    if status == CERTIFICATION_STATUS_EXPIRED or days is None or days <= 0:
        return CERTIFICATION_STATUS_EXPIRED
    if days <= EXPIRING_SOON_DAYS:
        return CERTIFICATION_STATUS_EXPIRING
    return CERTIFICATION_STATUS_ACTIVE


def is_expiring_or_expired(expiration_date: Any, status: Optional[str] = None,
                           today: Optional[date] = None) -> bool:
    days = days_until(expiration_date, today)
    return status == CERTIFICATION_STATUS_EXPIRED or days is None or days <= EXPIRING_SOON_DAYS


def format_report_date(value: Any) -> str:
    """MM/DD/YYYY for reports, "N/A" when missing."""
    parsed = to_date(value)
    return parsed.strftime('%m/%d/%Y') if parsed else 'N/A'


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


# =============================================================================
# APPLICATIONS
# =============================================================================

def status_display(status: Optional[str]) -> str:
    """'needs_revision' -> 'Needs Revision'; 'closed' -> 'Closed'."""
    if not status:
        return ''
    if status == 'closed':
        return 'Closed'
    return ' '.join(part.capitalize() for part in status.split('_'))


def step_progress(completed: int, total: int) -> int:
    """Percentage of completed steps, rounded to the nearest whole percent."""
    if total <= 0:
        return 0
    return int(math.floor(completed * 100 / total + 0.5))


def average_progress(values: Iterable[Optional[int]]) -> int:
    """Mean of progress percentages rounded half up; missing values count as 0."""
    values = [v or 0 for v in values]
    if not values:
        return 0
    return int(math.floor(sum(values) / len(values) + 0.5))


# =============================================================================
# BILLING
# =============================================================================

def billing_total(user_licenses_count: int = 0, user_license_rate: Optional[float] = None,
                  applications_count: int = 0, application_rate: Optional[float] = None) -> float:
    """Manual billing record total: seats times seat rate plus applications times application rate."""
    user_rate = user_license_rate or DEFAULT_USER_LICENSE_RATE
    app_rate = application_rate or DEFAULT_APPLICATION_RATE
    return (user_licenses_count or 0) * user_rate + (applications_count or 0) * app_rate


def license_fee(owner_count: int, staff_count: int,
                owner_rate: float, staff_rate: float) -> Dict[str, float]:
    owner_fee = owner_count * owner_rate
    staff_fee = staff_count * staff_rate
    return {
        'owner_license_fee': owner_fee,
        'staff_license_fee': staff_fee,
        'total_license_fee': owner_fee + staff_fee,
    }


def license_type_fee(license_type: Dict) -> float:
    """Fee charged for a license type: parsed cost_display, else cost_min, else 0."""
    fee = parse_fee(license_type.get('cost_display'))
    if fee is not None:
        return fee
    return license_type.get('cost_min') or 0


def application_fee_for_state(state: str, license_types: Iterable[Dict]) -> float:
    """Fee for a case in a state; the first license type for that state decides."""
    for license_type in license_types:
        if license_type.get('state') == state:
            return license_type_fee(license_type)
    return DEFAULT_APPLICATION_FEE


def split_application_fee(fee: float) -> Tuple[float, float]:
    """Split an application fee into (service fee, government fee)."""
    service = fee * SERVICE_FEE_SHARE
    return service, fee - service


def application_fees(cases: List[Dict], license_types: List[Dict]) -> Dict[str, float]:
    """Total application, government and service fees for a list of cases."""
    total = gov = service = 0.0
    for case in cases:
        fee = application_fee_for_state(case.get('state'), license_types)
        service_part, gov_part = split_application_fee(fee)
        total += fee
        gov += gov_part
        service += service_part
    return {
        'total_application_fee': total,
        'gov_fee': gov,
        'service_fee': service,
    }
