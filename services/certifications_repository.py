"""
Certifications Repository - certifications and professional licenses held by users.

Every query is scoped to the owning user id; a user can never read or change
another user's certifications through this repository.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from database.models import Certification
from services.calculations import to_date, days_until, classify_certification
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)

CERTIFICATION_FIELDS = ['type', 'license_number', 'state', 'issuing_authority',
                        'status', 'document_url']
DATE_FIELDS = ['issue_date', 'expiration_date']


def certification_to_dict(cert: Certification) -> Dict:
    """Row dict plus computed days remaining and expiry status."""
    data = cert.to_dict()
    data['days_until_expiry'] = days_until(cert.expiration_date)
    data['expiry_status'] = classify_certification(cert.expiration_date, cert.status)
    return data


class CertificationsRepository:
    """Repository for certification operations."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.events = EventLogger(session, actor_id)

    def _get(self, user_id: str, certification_id: str) -> Optional[Certification]:
        return self.session.query(Certification).filter(
            Certification.id == certification_id,
            Certification.user_id == user_id
        ).first()

    def get_certifications(self, user_id: str) -> List[Dict]:
        certs = self.session.query(Certification).filter(
            Certification.user_id == user_id
        ).order_by(Certification.expiration_date).all()
        return [certification_to_dict(c) for c in certs]

    def get_certification(self, user_id: str, certification_id: str) -> Optional[Dict]:
        cert = self._get(user_id, certification_id)
        return certification_to_dict(cert) if cert else None

    def create_certification(self, user_id: str, data: Dict) -> Dict:
        if not user_id:
            raise ValueError('You must be logged in to create a certification')

        cert = Certification(
            user_id=user_id,
            type=data['type'],
            license_number=data['license_number'],
            state=data.get('state') or None,
            issue_date=to_date(data.get('issue_date')),
            expiration_date=to_date(data['expiration_date']),
            issuing_authority=data['issuing_authority'],
            status=data.get('status') or 'Active',
            document_url=data.get('document_url') or None
        )
        self.session.add(cert)
        self.session.flush()

        self.events.log_create('certification', cert.id, {'type': cert.type})
        logger.info(f"Created certification: {cert.id}")
        return certification_to_dict(cert)

    def update_certification(self, user_id: str, certification_id: str,
                             data: Dict) -> Optional[Dict]:
        cert = self._get(user_id, certification_id)
        if not cert:
            return None

        changes = {}
        for key in CERTIFICATION_FIELDS:
            if key in data:
                setattr(cert, key, data[key])
                changes[key] = data[key]
        for key in DATE_FIELDS:
            if key in data:
                setattr(cert, key, to_date(data[key]))
                changes[key] = data[key]

        cert.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_update('certification', certification_id, changes)
        logger.info(f"Updated certification: {certification_id}")
        return certification_to_dict(cert)

    def delete_certification(self, user_id: str, certification_id: str) -> bool:
        cert = self._get(user_id, certification_id)
        if not cert:
            return False
        self.session.delete(cert)
        self.session.flush()
        self.events.log_delete('certification', certification_id)
        logger.info(f"Deleted certification: {certification_id}")
        return True
