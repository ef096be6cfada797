"""
Agencies Repository - agencies and the client (company owner) records they group.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from database.models import Agency, Client, ClientState
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)


class AgenciesRepository:
    """Repository for agency and client operations."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.events = EventLogger(session, actor_id)

    # ==================== AGENCIES ====================

    def list_agencies(self) -> List[Dict]:
        agencies = self.session.query(Agency).order_by(Agency.name).all()
        return [a.to_dict() for a in agencies]

    def get_agency(self, agency_id: str) -> Optional[Dict]:
        agency = self.session.query(Agency).filter(Agency.id == agency_id).first()
        return agency.to_dict() if agency else None

    def _set_company_name(self, client_id: str, name: str) -> None:
        client = self.session.query(Client).filter(Client.id == client_id).first()
        if client:
            client.company_name = name
        else:
            logger.warning(f"Agency admin client not found: {client_id}")

    def _release_admin(self, client_id: str, keep_agency_id: str = None) -> None:
        """Remove a client from every agency's admin list except keep_agency_id."""
        for agency in self.session.query(Agency).all():
            if agency.id == keep_agency_id:
                continue
            admin_ids = list(agency.agency_admin_ids or [])
            if client_id in admin_ids:
                agency.agency_admin_ids = [a for a in admin_ids if a != client_id]
                agency.updated_at = datetime.utcnow()

    def create_agency(self, name: str, agency_admin_id: str = None) -> Dict:
        """
        Create an agency. When an admin (client id) is given, that client's
        company_name is set to the agency name.
        """
        trimmed = (name or '').strip()
        if not trimmed:
            raise ValueError('Agency name is required')

        agency = Agency(
            name=trimmed,
            agency_admin_ids=[agency_admin_id] if agency_admin_id else []
        )
        self.session.add(agency)
        self.session.flush()

        if agency_admin_id:
            self._release_admin(agency_admin_id, keep_agency_id=agency.id)
            self._set_company_name(agency_admin_id, trimmed)
            if self.session.query(Client).filter(Client.id == agency_admin_id).first():
                self.session.query(Client).filter(Client.id == agency_admin_id).update(
                    {'agency_id': agency.id})

        self.session.flush()
        self.events.log_create('agency', agency.id, {'name': trimmed})
        logger.info(f"Created agency: {agency.id}")
        return agency.to_dict()

    def update_agency(self, agency_id: str, name: str, agency_admin_id: str = None,
                      previous_agency_admin_id: str = None) -> Optional[Dict]:
        """
        Rename an agency and (re)assign its admin.

        The new admin is removed from any other agency, a replaced admin's
        company_name is cleared, and the new admin's company_name follows the
        agency name.
        """
        agency = self.session.query(Agency).filter(Agency.id == agency_id).first()
        if not agency:
            return None

        trimmed = (name or '').strip()
        if not trimmed:
            raise ValueError('Agency name is required')

        if agency_admin_id:
            self._release_admin(agency_admin_id, keep_agency_id=agency_id)

        admin_ids = [a for a in (agency.agency_admin_ids or []) if a != previous_agency_admin_id]
        if agency_admin_id and agency_admin_id not in admin_ids:
            admin_ids.append(agency_admin_id)

        agency.name = trimmed
        agency.agency_admin_ids = admin_ids
        agency.updated_at = datetime.utcnow()

        if previous_agency_admin_id and previous_agency_admin_id != agency_admin_id:
            self._set_company_name(previous_agency_admin_id, '')

        if agency_admin_id:
            self._set_company_name(agency_admin_id, trimmed)
            self.session.query(Client).filter(Client.id == agency_admin_id).update(
                {'agency_id': agency_id})

        self.session.flush()
        self.events.log_update('agency', agency_id, {
            'name': trimmed,
            'agency_admin_id': agency_admin_id,
            'previous_agency_admin_id': previous_agency_admin_id
        })
        logger.info(f"Updated agency: {agency_id}")
        return agency.to_dict()

    def delete_agency(self, agency_id: str) -> bool:
        agency = self.session.query(Agency).filter(Agency.id == agency_id).first()
        if not agency:
            return False
        self.session.query(Client).filter(Client.agency_id == agency_id).update({'agency_id': None})
        self.session.delete(agency)
        self.session.flush()
        self.events.log_delete('agency', agency_id)
        logger.info(f"Deleted agency: {agency_id}")
        return True

    # ==================== CLIENTS ====================

    def list_clients(self, status: str = None, expert_id: str = None,
                     agency_id: str = None) -> List[Dict]:
        query = self.session.query(Client)
        if status:
            query = query.filter(Client.status == status)
        if expert_id:
            query = query.filter(Client.expert_id == expert_id)
        if agency_id:
            query = query.filter(Client.agency_id == agency_id)
        clients = query.order_by(Client.company_name, Client.contact_name).all()
        return [c.to_dict() for c in clients]

    def get_client(self, client_id: str) -> Optional[Dict]:
        client = self.session.query(Client).filter(Client.id == client_id).first()
        return client.to_dict() if client else None

    def get_client_for_owner(self, user_id: str) -> Optional[Client]:
        """The client record owned by a company owner user (model)."""
        return self.session.query(Client).filter(Client.company_owner_id == user_id).first()

    def create_client(self, data: Dict) -> Dict:
        client = Client(
            company_name=(data.get('company_name') or '').strip(),
            contact_name=data.get('contact_name'),
            contact_email=data.get('contact_email'),
            contact_phone=data.get('contact_phone'),
            status=data.get('status', 'active'),
            company_owner_id=data.get('company_owner_id'),
            agency_id=data.get('agency_id'),
            expert_id=data.get('expert_id')
        )
        for state in dict.fromkeys(data.get('states') or []):
            client.states.append(ClientState(state=state))
        self.session.add(client)
        self.session.flush()
        self.events.log_create('client', client.id, {'company_name': client.company_name})
        logger.info(f"Created client: {client.id}")
        return client.to_dict()

    def update_client(self, client_id: str, data: Dict) -> Optional[Dict]:
        client = self.session.query(Client).filter(Client.id == client_id).first()
        if not client:
            return None

        for key in ['company_name', 'contact_name', 'contact_email', 'contact_phone',
                    'status', 'agency_id', 'expert_id']:
            if key in data:
                setattr(client, key, data[key])

        if 'states' in data:
            self.set_client_states(client, data['states'] or [])

        client.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log_update('client', client_id, {k: v for k, v in data.items() if k != 'states'})
        logger.info(f"Updated client: {client_id}")
        return client.to_dict()

    def set_client_states(self, client: Client, states: List[str]) -> None:
        """Add the new states and drop the missing ones; rows for kept states stay."""
        wanted = list(dict.fromkeys(states))
        for row in [r for r in client.states if r.state not in wanted]:
            client.states.remove(row)
        self.session.flush()
        existing = {r.state for r in client.states}
        for state in wanted:
            if state not in existing:
                client.states.append(ClientState(state=state))

    def assign_expert(self, client_id: str, expert_id: Optional[str]) -> Optional[Dict]:
        client = self.session.query(Client).filter(Client.id == client_id).first()
        if not client:
            return None
        client.expert_id = expert_id
        client.updated_at = datetime.utcnow()
        self.session.flush()
        self.events.log('client', client_id, 'ASSIGNED', metadata={'expert_id': expert_id})
        logger.info(f"Assigned expert {expert_id} to client {client_id}")
        return client.to_dict()

    def delete_client(self, client_id: str) -> bool:
        client = self.session.query(Client).filter(Client.id == client_id).first()
        if not client:
            return False
        self._release_admin(client_id)
        self.session.delete(client)
        self.session.flush()
        self.events.log_delete('client', client_id)
        logger.info(f"Deleted client: {client_id}")
        return True
