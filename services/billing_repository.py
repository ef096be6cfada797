"""
Billing Repository - seat pricing, manual billing records and the monthly
agency billing summary shown on the admin billing screen.
"""

import logging
from datetime import datetime, date
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from constants import BILLING_STATUSES
from database.models import Pricing, Billing, Agency, StaffMember, Case, LicenseType
from services.calculations import (
    DEFAULT_USER_LICENSE_RATE,
    DEFAULT_APPLICATION_RATE,
    billing_total,
    license_fee,
    application_fees,
    month_bounds,
    to_date,
)
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)

DEFAULT_OWNER_LICENSE_RATE = 50
DEFAULT_STAFF_LICENSE_RATE = 25


class BillingRepository:
    """Repository for pricing and billing operations."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.events = EventLogger(session, actor_id)

    # ==================== PRICING ====================

    def get_pricing_for_month(self, year: int, month: int) -> Dict:
        """Pricing in effect on the first day of the month, or the default rates."""
        target = date(year, month, 1)
        pricing = self.session.query(Pricing).filter(
            Pricing.effective_date <= target
        ).order_by(Pricing.effective_date.desc()).first()

        if not pricing:
            return {
                'owner_admin_license': DEFAULT_OWNER_LICENSE_RATE,
                'staff_license': DEFAULT_STAFF_LICENSE_RATE,
                'effective_date': target.isoformat()
            }
        return pricing.to_dict()

    def get_current_pricing(self) -> Dict:
        pricing = self.session.query(Pricing).order_by(Pricing.effective_date.desc()).first()
        if not pricing:
            return {
                'owner_admin_license': DEFAULT_OWNER_LICENSE_RATE,
                'staff_license': DEFAULT_STAFF_LICENSE_RATE
            }
        return pricing.to_dict()

    def update_pricing(self, owner_admin_license: float, staff_license: float) -> Dict:
        """Update the most recently created pricing row, or insert the first one."""
        pricing = self.session.query(Pricing).order_by(Pricing.created_at.desc()).first()

        if pricing:
            pricing.owner_admin_license = owner_admin_license
            pricing.staff_license = staff_license
            pricing.updated_at = datetime.utcnow()
            self.session.flush()
            self.events.log_update('pricing', pricing.id, {
                'owner_admin_license': owner_admin_license,
                'staff_license': staff_license
            })
        else:
            pricing = Pricing(owner_admin_license=owner_admin_license, staff_license=staff_license)
            self.session.add(pricing)
            self.session.flush()
            self.events.log_create('pricing', pricing.id)

        logger.info(f"Pricing set: owner={owner_admin_license} staff={staff_license}")
        return pricing.to_dict()

    # ==================== BILLING RECORDS ====================

    def create_billing(self, data: Dict) -> Dict:
        """Record a bill: seats times seat rate plus applications times application rate."""
        status = data.get('status') or 'pending'
        if status not in BILLING_STATUSES:
            raise ValueError(f"Invalid billing status: {status}")

        users = data.get('user_licenses_count') or 0
        user_rate = data.get('user_license_rate') or DEFAULT_USER_LICENSE_RATE
        apps = data.get('applications_count') or 0
        app_rate = data.get('application_rate') or DEFAULT_APPLICATION_RATE

        billing = Billing(
            client_id=data['client_id'],
            billing_month=to_date(data['billing_month']),
            user_licenses_count=users,
            user_license_rate=user_rate,
            applications_count=apps,
            application_rate=app_rate,
            total_amount=billing_total(users, user_rate, apps, app_rate),
            status=status
        )
        self.session.add(billing)
        self.session.flush()

        self.events.log_create('billing', billing.id, {'total_amount': billing.total_amount})
        logger.info(f"Created billing record: {billing.id}")
        return billing.to_dict()

    def list_billing(self, client_id: str = None) -> List[Dict]:
        query = self.session.query(Billing)
        if client_id:
            query = query.filter(Billing.client_id == client_id)
        rows = query.order_by(Billing.billing_month.desc()).all()
        return [r.to_dict() for r in rows]

    def update_billing_status(self, billing_id: str, status: str) -> Optional[Dict]:
        if status not in BILLING_STATUSES:
            raise ValueError(f"Invalid billing status: {status}")
        billing = self.session.query(Billing).filter(Billing.id == billing_id).first()
        if not billing:
            return None
        old_status = billing.status
        billing.status = status
        billing.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_status_change('billing', billing_id, old_status, status)
        return billing.to_dict()

    # ==================== AGENCY BILLING ====================

    def get_agency_billing(self, year: int, month: int) -> Dict:
        """
        Monthly bill per agency.

        Seats: one owner license per agency admin and one staff license per
        active staff member of the agency, priced at the rates in effect that
        month. Applications: every case of the agency's admins started within
        the month, charged at the fee of the first license type in the case's
        state (split 10% service, 90% government).
        """
        pricing = self.get_pricing_for_month(year, month)
        owner_rate = pricing.get('owner_admin_license') or 0
        staff_rate = pricing.get('staff_license') or 0

        license_types = [lt.to_dict() for lt in self.session.query(LicenseType).filter(
            LicenseType.is_active == True  # noqa: E712
        ).order_by(LicenseType.state, LicenseType.name).all()]

        month_start, month_end = month_bounds(year, month)
        agencies = self.session.query(Agency).order_by(Agency.name).all()

        items = []
        for agency in agencies:
            admin_ids = list(agency.agency_admin_ids or [])
            owner_count = len(admin_ids)
            staff_count = self.session.query(StaffMember).filter(
                StaffMember.agency_id == agency.id,
                StaffMember.status == 'active'
            ).count()

            cases = []
            if admin_ids:
                cases = self.session.query(Case).filter(
                    Case.client_id.in_(admin_ids),
                    Case.started_date >= month_start,
                    Case.started_date <= month_end
                ).order_by(Case.started_date.desc()).all()
            case_dicts = [c.to_dict() for c in cases]

            seats = license_fee(owner_count, staff_count, owner_rate, staff_rate)
            fees = application_fees(case_dicts, license_types)

            items.append({
                'agency': {'id': agency.id, 'name': agency.name or ''},
                'owner_count': owner_count,
                'staff_count': staff_count,
                'total_licenses': owner_count + staff_count,
                **seats,
                'applications_count': len(case_dicts),
                **fees,
                'monthly_total': seats['total_license_fee'] + fees['total_application_fee'],
                'cases': case_dicts
            })

        summary = {
            'total_revenue': sum(i['monthly_total'] for i in items),
            'total_user_licenses': sum(i['total_licenses'] for i in items),
            'total_owners': len(items),
            'total_staff': sum(i['staff_count'] for i in items),
            'total_applications': sum(i['applications_count'] for i in items),
            'total_application_fees': sum(i['total_application_fee'] for i in items),
            'active_agencies': len(agencies)
        }

        return {
            'year': year,
            'month': month,
            'owner_license_rate': owner_rate,
            'staff_license_rate': staff_rate,
            'agencies': items,
            'summary': summary
        }
