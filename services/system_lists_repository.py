"""
System Lists Repository - admin-maintained pick lists (certification types, staff roles).
"""

import logging
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from database.models import CertificationType, StaffRole
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)


class SystemListsRepository:

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.events = EventLogger(session, actor_id)

    @staticmethod
    def _clean(value: str, label: str) -> str:
        cleaned = (value or '').strip()
        if not cleaned:
            raise ValueError(f"{label} is required")
        return cleaned

    # ==================== CERTIFICATION TYPES ====================

    def list_certification_types(self) -> List[Dict]:
        rows = self.session.query(CertificationType).order_by(CertificationType.certification_type).all()
        return [r.to_dict() for r in rows]

    def create_certification_type(self, name: str) -> Dict:
        name = self._clean(name, 'Certification type')
        if self.session.query(CertificationType).filter(CertificationType.certification_type == name).first():
            raise ValueError(f"Certification type '{name}' already exists")
        row = CertificationType(certification_type=name)
        self.session.add(row)
        self.session.flush()
        self.events.log_create('certification_type', row.id, {'certification_type': name})
        logger.info(f"Created certification type: {row.id}")
        return row.to_dict()

    def update_certification_type(self, type_id: int, name: str) -> Optional[Dict]:
        row = self.session.query(CertificationType).filter(CertificationType.id == type_id).first()
        if not row:
            return None
        row.certification_type = self._clean(name, 'Certification type')
        self.session.flush()
        self.events.log_update('certification_type', type_id, {'certification_type': row.certification_type})
        return row.to_dict()

    def delete_certification_type(self, type_id: int) -> bool:
        row = self.session.query(CertificationType).filter(CertificationType.id == type_id).first()
        if not row:
            return False
        self.session.delete(row)
        self.session.flush()
        self.events.log_delete('certification_type', type_id)
        logger.info(f"Deleted certification type: {type_id}")
        return True

    # ==================== STAFF ROLES ====================

    def list_staff_roles(self) -> List[Dict]:
        rows = self.session.query(StaffRole).order_by(StaffRole.name).all()
        return [r.to_dict() for r in rows]

    def create_staff_role(self, name: str) -> Dict:
        name = self._clean(name, 'Role name')
        if self.session.query(StaffRole).filter(StaffRole.name == name).first():
            raise ValueError(f"Staff role '{name}' already exists")
        row = StaffRole(name=name)
        self.session.add(row)
        self.session.flush()
        self.events.log_create('staff_role', row.id, {'name': name})
        logger.info(f"Created staff role: {row.id}")
        return row.to_dict()

    def update_staff_role(self, role_id: int, name: str) -> Optional[Dict]:
        row = self.session.query(StaffRole).filter(StaffRole.id == role_id).first()
        if not row:
            return None
        row.name = self._clean(name, 'Role name')
        self.session.flush()
        self.events.log_update('staff_role', role_id, {'name': row.name})
        return row.to_dict()

    def delete_staff_role(self, role_id: int) -> bool:
        row = self.session.query(StaffRole).filter(StaffRole.id == role_id).first()
        if not row:
            return False
        self.session.delete(row)
        self.session.flush()
        self.events.log_delete('staff_role', role_id)
        logger.info(f"Deleted staff role: {role_id}")
        return True
