"""
License Types Repository - the licenses offered per state and their fees.

Admins enter human readable strings ("60 days", "$3,500", "1 year"); the
display string is stored as given and the numeric columns are parsed from it.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from database.models import LicenseType, LicenseRequirement
from services.calculations import (
    parse_processing_time, parse_fee, parse_renewal_period
)
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)


class LicenseTypesRepository:
    """Repository for license type operations."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.events = EventLogger(session, actor_id)

    def _get(self, license_type_id: str) -> Optional[LicenseType]:
        return self.session.query(LicenseType).filter(LicenseType.id == license_type_id).first()

    def list_license_types(self, state: str = None, active_only: bool = False) -> List[Dict]:
        query = self.session.query(LicenseType)
        if state:
            query = query.filter(LicenseType.state == state)
        if active_only:
            query = query.filter(LicenseType.is_active == True)  # noqa: E712
        rows = query.order_by(LicenseType.state, LicenseType.name).all()
        return [r.to_dict() for r in rows]

    def get_license_type(self, license_type_id: str) -> Optional[Dict]:
        row = self._get(license_type_id)
        return row.to_dict() if row else None

    def create_license_type(self, state: str, name: str, description: str = '',
                            processing_time: str = '', application_fee: str = '',
                            renewal_period: str = '') -> Dict:
        """
        Create a license type and the matching license requirement template.

        An existing requirement for the same state and name is left as is.
        """
        processing_min, processing_max = parse_processing_time(processing_time)
        cost = parse_fee(application_fee)

        license_type = LicenseType(
            state=state,
            name=name,
            description=description,
            cost_min=cost,
            cost_max=cost,
            cost_display=application_fee,
            processing_time_min=processing_min,
            processing_time_max=processing_max,
            processing_time_display=processing_time,
            renewal_period_years=parse_renewal_period(renewal_period),
            renewal_period_display=renewal_period,
            icon_type='heart',
            requirements=[],
            is_active=True
        )
        self.session.add(license_type)
        self.session.flush()

        existing = self.session.query(LicenseRequirement).filter(
            LicenseRequirement.state == state,
            LicenseRequirement.license_type == name
        ).first()
        if existing:
            logger.debug(f"License requirement already exists for {state} / {name}")
        else:
            self.session.add(LicenseRequirement(state=state, license_type=name))
            self.session.flush()

        self.events.log_create('license_type', license_type.id, {'state': state, 'name': name})
        logger.info(f"Created license type: {license_type.id}")
        return license_type.to_dict()

    def update_license_type(self, license_type_id: str, renewal_period: str,
                            application_fee: str, service_fee: str,
                            processing_time: str) -> Optional[Dict]:
        """Re-parse and store the fee, processing time and renewal strings."""
        row = self._get(license_type_id)
        if not row:
            return None

        processing_min, processing_max = parse_processing_time(processing_time)
        cost = parse_fee(application_fee)

        row.cost_min = cost
        row.cost_max = cost
        row.cost_display = application_fee
        row.service_fee = parse_fee(service_fee) or 0
        row.service_fee_display = service_fee
        row.processing_time_min = processing_min
        row.processing_time_max = processing_max
        row.processing_time_display = processing_time
        row.renewal_period_years = parse_renewal_period(renewal_period)
        row.renewal_period_display = renewal_period
        row.updated_at = datetime.utcnow()

        self.session.flush()
        self.events.log_update('license_type', license_type_id, {
            'cost_display': application_fee,
            'service_fee_display': service_fee,
            'processing_time_display': processing_time,
            'renewal_period_display': renewal_period
        })
        logger.info(f"Updated license type: {license_type_id}")
        return row.to_dict()

    def toggle_active(self, license_type_id: str, is_active: bool) -> Optional[Dict]:
        row = self._get(license_type_id)
        if not row:
            return None
        row.is_active = bool(is_active)
        row.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_update('license_type', license_type_id, {'is_active': row.is_active})
        return row.to_dict()

    def delete_license_type(self, license_type_id: str) -> bool:
        """Delete a license type and its requirement template. Raises ValueError when missing."""
        row = self._get(license_type_id)
        if not row:
            raise ValueError('License type not found')

        state, name = row.state, row.name
        self.session.delete(row)

        requirement = self.session.query(LicenseRequirement).filter(
            LicenseRequirement.state == state,
            LicenseRequirement.license_type == name
        ).first()
        if requirement:
            self.session.delete(requirement)

        self.session.flush()
        self.events.log_delete('license_type', license_type_id)
        logger.info(f"Deleted license type: {license_type_id}")
        return True
