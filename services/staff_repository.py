"""
Staff Repository - caregivers and office staff belonging to a client.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from database.models import StaffMember, Client
from services.event_logger import EventLogger
from services.users_repository import UsersRepository

logger = logging.getLogger(__name__)

STAFF_FIELDS = ['first_name', 'last_name', 'email', 'phone', 'role', 'job_title', 'status']


class StaffRepository:
    """Repository for staff member operations."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.actor_id = actor_id
        self.events = EventLogger(session, actor_id)

    def _get(self, staff_id: str) -> Optional[StaffMember]:
        return self.session.query(StaffMember).filter(StaffMember.id == staff_id).first()

    def list_staff(self, client_id: str = None, status: str = None) -> List[Dict]:
        """List staff ordered by first name, optionally for one client."""
        query = self.session.query(StaffMember)
        if client_id:
            query = query.filter(StaffMember.company_owner_id == client_id)
        if status:
            query = query.filter(StaffMember.status == status)
        staff = query.order_by(StaffMember.first_name, StaffMember.last_name).all()
        return [s.to_dict() for s in staff]

    def get_staff_member(self, staff_id: str) -> Optional[Dict]:
        member = self._get(staff_id)
        return member.to_dict() if member else None

    def get_staff_by_user(self, user_id: str) -> Optional[Dict]:
        member = self.session.query(StaffMember).filter(StaffMember.user_id == user_id).first()
        return member.to_dict() if member else None

    def create_staff_member(self, client_id: str, data: Dict, password: str = None) -> Dict:
        """
        Add a staff member to a client.

        When a password is supplied a staff_member login is created (or an
        existing account with the same email is linked) and stored in user_id.
        """
        client = self.session.query(Client).filter(Client.id == client_id).first()
        if not client:
            raise ValueError('Client not found')

        email = (data.get('email') or '').lower().strip()
        user_id = data.get('user_id')
        account_message = None

        if password and not user_id:
            result = UsersRepository(self.session, self.actor_id).create_staff_user_account(
                email, password, data.get('first_name', ''), data.get('last_name', '')
            )
            user_id = result['user_id']
            account_message = result['message']

        member = StaffMember(
            first_name=(data.get('first_name') or '').strip(),
            last_name=(data.get('last_name') or '').strip(),
            email=email,
            phone=data.get('phone'),
            role=data.get('role'),
            job_title=data.get('job_title'),
            status=data.get('status', 'active'),
            user_id=user_id,
            company_owner_id=client_id,
            agency_id=data.get('agency_id', client.agency_id)
        )
        self.session.add(member)
        self.session.flush()

        self.events.log_create('staff_member', member.id, {'email': email})
        logger.info(f"Created staff member: {member.id}")

        result = member.to_dict()
        if account_message:
            result['account_message'] = account_message
        return result

    def update_staff_member(self, staff_id: str, data: Dict) -> Optional[Dict]:
        member = self._get(staff_id)
        if not member:
            return None

        changes = {}
        for key in STAFF_FIELDS + ['agency_id', 'user_id']:
            if key in data:
                value = data[key]
                if key == 'email' and value:
                    value = value.lower().strip()
                setattr(member, key, value)
                changes[key] = value

        member.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_update('staff_member', staff_id, changes)
        logger.info(f"Updated staff member: {staff_id}")
        return member.to_dict()

    def delete_staff_member(self, staff_id: str) -> bool:
        member = self._get(staff_id)
        if not member:
            return False
        self.session.delete(member)
        self.session.flush()
        self.events.log_delete('staff_member', staff_id)
        logger.info(f"Deleted staff member: {staff_id}")
        return True

    def count_active_staff_by_agency(self, agency_id: str) -> int:
        return self.session.query(StaffMember).filter(
            StaffMember.agency_id == agency_id,
            StaffMember.status == 'active'
        ).count()
