"""
Licenses Repository - licenses a company owner already holds.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from database.models import License, LicenseDocument
from services.calculations import to_date, days_until
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)

LICENSE_FIELDS = ['license_name', 'state', 'license_number', 'status']
LICENSE_DATE_FIELDS = ['activated_date', 'expiry_date', 'renewal_due_date']


def license_to_dict(license_row: License) -> Dict:
    data = license_row.to_dict()
    data['days_until_expiry'] = days_until(license_row.expiry_date)
    return data


class LicensesRepository:

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.events = EventLogger(session, actor_id)

    def _get(self, license_id: str, owner_id: str = None) -> Optional[License]:
        query = self.session.query(License).filter(License.id == license_id)
        if owner_id:
            query = query.filter(License.company_owner_id == owner_id)
        return query.first()

    def list_licenses(self, owner_id: str = None) -> List[Dict]:
        query = self.session.query(License)
        if owner_id:
            query = query.filter(License.company_owner_id == owner_id)
        rows = query.order_by(License.expiry_date).all()
        return [license_to_dict(r) for r in rows]

    def get_license(self, license_id: str, owner_id: str = None) -> Optional[Dict]:
        row = self._get(license_id, owner_id)
        return license_to_dict(row) if row else None

    def create_license(self, owner_id: str, data: Dict) -> Dict:
        row = License(
            company_owner_id=owner_id,
            license_name=data['license_name'],
            state=data.get('state'),
            license_number=data.get('license_number'),
            status=data.get('status', 'active'),
            activated_date=to_date(data.get('activated_date')),
            expiry_date=to_date(data.get('expiry_date')),
            renewal_due_date=to_date(data.get('renewal_due_date'))
        )
        self.session.add(row)
        self.session.flush()
        self.events.log_create('license', row.id, {'license_name': row.license_name})
        logger.info(f"Created license: {row.id}")
        return license_to_dict(row)

    def update_license(self, license_id: str, data: Dict, owner_id: str = None) -> Optional[Dict]:
        row = self._get(license_id, owner_id)
        if not row:
            return None

        changes = {}
        for key in LICENSE_FIELDS:
            if key in data:
                setattr(row, key, data[key])
                changes[key] = data[key]
        for key in LICENSE_DATE_FIELDS:
            if key in data:
                setattr(row, key, to_date(data[key]))
                changes[key] = data[key]

        row.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_update('license', license_id, changes)
        logger.info(f"Updated license: {license_id}")
        return license_to_dict(row)

    def delete_license(self, license_id: str, owner_id: str = None) -> bool:
        row = self._get(license_id, owner_id)
        if not row:
            return False
        self.session.delete(row)
        self.session.flush()
        self.events.log_delete('license', license_id)
        logger.info(f"Deleted license: {license_id}")
        return True

    # ==================== DOCUMENTS ====================

    def add_document(self, license_id: str, document_name: str, document_url: str = None,
                     category: str = None, owner_id: str = None) -> Dict:
        row = self._get(license_id, owner_id)
        if not row:
            raise ValueError('License not found')
        document = LicenseDocument(
            license_id=license_id,
            document_name=document_name,
            document_url=document_url,
            category=category
        )
        self.session.add(document)
        self.session.flush()
        self.events.log('license', license_id, 'DOCUMENT_UPLOADED',
                        metadata={'document_id': document.id})
        return document.to_dict()

    def delete_document(self, document_id: str) -> bool:
        document = self.session.query(LicenseDocument).filter(LicenseDocument.id == document_id).first()
        if not document:
            return False
        self.session.delete(document)
        self.session.flush()
        self.events.log_delete('license_document', document_id)
        return True
