"""
Experts Repository - licensing experts and the clients/applications assigned to them.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from constants import DEFAULT_EXPERT_ROLE, EXPERT_STATUSES
from database.models import LicensingExpert, ExpertState, Client, Application
from services.event_logger import EventLogger
from services.users_repository import UsersRepository

logger = logging.getLogger(__name__)

EXPERT_FIELDS = ['first_name', 'last_name', 'phone', 'expertise', 'role', 'status']


class ExpertsRepository:
    """Repository for licensing expert operations."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.actor_id = actor_id
        self.events = EventLogger(session, actor_id)

    def _get(self, expert_id: str) -> Optional[LicensingExpert]:
        return self.session.query(LicensingExpert).filter(LicensingExpert.id == expert_id).first()

    def list_experts(self, status: str = None) -> List[Dict]:
        query = self.session.query(LicensingExpert)
        if status:
            query = query.filter(LicensingExpert.status == status)
        experts = query.order_by(LicensingExpert.first_name, LicensingExpert.last_name).all()
        return [e.to_dict() for e in experts]

    def get_expert(self, expert_id: str) -> Optional[Dict]:
        expert = self._get(expert_id)
        return expert.to_dict() if expert else None

    def get_expert_by_user(self, user_id: str) -> Optional[Dict]:
        expert = self.session.query(LicensingExpert).filter(LicensingExpert.user_id == user_id).first()
        return expert.to_dict() if expert else None

    def create_expert(self, first_name: str, last_name: str, email: str, password: str,
                      phone: str = None, expertise: str = None, role: str = None,
                      status: str = None) -> Dict:
        """Create the expert's login (role expert) and the licensing_experts profile row."""
        status = status or 'active'
        if status not in EXPERT_STATUSES:
            raise ValueError(f"Invalid expert status: {status}")

        users = UsersRepository(self.session, self.actor_id)
        user = users.create_user(email, password, f"{first_name} {last_name}", role='expert')

        expert = LicensingExpert(
            user_id=user['id'],
            first_name=first_name,
            last_name=last_name,
            email=user['email'],
            phone=phone or None,
            expertise=expertise or None,
            role=role or DEFAULT_EXPERT_ROLE,
            status=status
        )
        self.session.add(expert)
        self.session.flush()

        self.events.log_create('expert', expert.id, {'email': expert.email})
        logger.info(f"Created licensing expert: {expert.id}")
        return expert.to_dict()

    def update_expert(self, expert_id: str, data: Dict) -> Optional[Dict]:
        expert = self._get(expert_id)
        if not expert:
            return None

        if 'status' in data and data['status'] not in EXPERT_STATUSES:
            raise ValueError(f"Invalid expert status: {data['status']}")

        changes = {}
        for key in EXPERT_FIELDS:
            if key in data:
                setattr(expert, key, data[key])
                changes[key] = data[key]

        if 'states' in data:
            self.set_expert_states(expert, data['states'] or [])
            changes['states'] = data['states']

        expert.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_update('expert', expert_id, changes)
        logger.info(f"Updated licensing expert: {expert_id}")
        return expert.to_dict()

    def set_expert_states(self, expert: LicensingExpert, states: List[str]) -> None:
        wanted = list(dict.fromkeys(states))
        for row in [r for r in expert.states if r.state not in wanted]:
            expert.states.remove(row)
        self.session.flush()
        existing = {r.state for r in expert.states}
        for state in wanted:
            if state not in existing:
                expert.states.append(ExpertState(state=state))

    def get_expert_clients(self, expert_id: str) -> List[Dict]:
        """Clients assigned to the expert's user account."""
        expert = self._get(expert_id)
        if not expert:
            return []
        clients = self.session.query(Client).filter(
            Client.expert_id == expert.user_id
        ).order_by(Client.company_name).all()
        return [c.to_dict() for c in clients]

    def get_expert_applications(self, expert_id: str) -> List[Dict]:
        expert = self._get(expert_id)
        if not expert:
            return []
        applications = self.session.query(Application).filter(
            Application.assigned_expert_id == expert.user_id
        ).order_by(Application.created_at.desc()).all()
        return [a.to_dict() for a in applications]
