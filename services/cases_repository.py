"""
Cases Repository - admin-side licensing cases and the dashboard statistics built on them.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import List, Optional, Dict
from sqlalchemy.orm import Session

from database.models import Case
from services.calculations import average_progress, to_date
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)

CHART_STATUSES = ['in_progress', 'under_review', 'approved', 'rejected']


class CasesRepository:

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.events = EventLogger(session, actor_id)

    def _get(self, case_id: str) -> Optional[Case]:
        return self.session.query(Case).filter(Case.id == case_id).first()

    def list_cases(self, client_id: str = None, status: str = None, state: str = None) -> List[Dict]:
        query = self.session.query(Case)
        if client_id:
            query = query.filter(Case.client_id == client_id)
        if status:
            query = query.filter(Case.status == status)
        if state:
            query = query.filter(Case.state == state)
        cases = query.order_by(Case.started_date.desc()).all()
        return [c.to_dict() for c in cases]

    def get_case(self, case_id: str) -> Optional[Dict]:
        case = self._get(case_id)
        return case.to_dict() if case else None

    def create_case(self, data: Dict) -> Dict:
        case = Case(
            client_id=data['client_id'],
            business_name=data.get('business_name'),
            state=data['state'],
            status=data.get('status', 'in_progress'),
            progress_percentage=data.get('progress_percentage', 0),
            started_date=to_date(data.get('started_date')) or datetime.utcnow().date(),
            last_activity=datetime.utcnow()
        )
        self.session.add(case)
        self.session.flush()
        self.events.log_create('case', case.id, {'state': case.state})
        logger.info(f"Created case: {case.id}")
        return case.to_dict()

    def update_case(self, case_id: str, data: Dict) -> Optional[Dict]:
        case = self._get(case_id)
        if not case:
            return None

        old_status = case.status
        for key in ['business_name', 'state', 'status', 'progress_percentage']:
            if key in data:
                setattr(case, key, data[key])
        if 'started_date' in data:
            case.started_date = to_date(data['started_date'])
        case.last_activity = datetime.utcnow()
        self.session.flush()

        if case.status != old_status:
            self.events.log_status_change('case', case_id, old_status, case.status)
        else:
            self.events.log_update('case', case_id, data)
        return case.to_dict()

    def delete_case(self, case_id: str) -> bool:
        case = self._get(case_id)
        if not case:
            return False
        self.session.delete(case)
        self.session.flush()
        self.events.log_delete('case', case_id)
        return True

    def get_dashboard_stats(self) -> Dict:
        """Headline numbers and chart series for the admin dashboard."""
        cases = self.session.query(Case).all()
        statuses = Counter(c.status for c in cases)

        return {
            'total_cases': len(cases),
            'in_progress': statuses.get('in_progress', 0),
            'under_review': statuses.get('under_review', 0),
            'approved': statuses.get('approved', 0),
            'average_progress': average_progress(c.progress_percentage for c in cases),
            'status_counts': {status: statuses.get(status, 0) for status in CHART_STATUSES},
            'state_counts': dict(Counter(c.state for c in cases if c.state))
        }
