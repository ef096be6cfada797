"""
Event Logger Service - audit trail of changes made through the platform.

Every repository that changes licensing data records who did what to which
entity, so admins can review the history of an application, agency or user.
"""

import logging
from typing import Dict, Optional, List
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

EVENT_TYPES = {
    # CRUD Operations
    'CREATED': 'Entity was created',
    'UPDATED': 'Entity was updated',
    'DELETED': 'Entity was deleted',

    # Status changes
    'STATUS_CHANGED': 'Status was changed',
    'ASSIGNED': 'Entity was assigned to someone',

    # Application lifecycle
    'APPLICATION_REQUESTED': 'License application was requested',
    'APPLICATION_APPROVED': 'License application was approved',
    'APPLICATION_REJECTED': 'License application was rejected',
    'APPLICATION_CLOSED': 'License application was closed',
    'STEP_COMPLETED': 'Application step was completed',
    'DOCUMENT_UPLOADED': 'Document was uploaded',
    'DOCUMENT_REVIEWED': 'Document was reviewed',

    # Communication events
    'EMAIL_SENT': 'Email was sent',
    'MESSAGE_SENT': 'Message was sent',

    # User events
    'USER_LOGIN': 'User logged in',
    'USER_LOGOUT': 'User logged out',
    'PASSWORD_CHANGED': 'User password was changed',
}


class EventLogger:
    """Service for logging system events to the database."""

    def __init__(self, session, actor_id: str = None):
        """
        Initialize the event logger.

        Args:
            session: SQLAlchemy database session
            actor_id: ID of the acting user; None for system actions
        """
        self.session = session
        self.actor_id = actor_id
        self.actor_type = 'user' if actor_id else 'system'

    def log(self, entity_type: str, entity_id, event_type: str,
            description: str = None, metadata: Dict = None) -> Optional[Dict]:
        """
        Log an event to the database.

        Args:
            entity_type: Type of entity (application, agency, certification, ...)
            entity_id: ID of the entity
            event_type: Type of event (CREATED, UPDATED, ...)
            description: Human-readable description of the event
            metadata: Additional data about the event

        Returns:
            The created event log entry as a dict, or None on failure
        """
        try:
            from database.models import EventLog

            event = EventLog(
                timestamp=datetime.utcnow(),
                actor_type=self.actor_type,
                actor_id=self.actor_id,
                entity_type=entity_type,
                entity_id=str(entity_id),
                event_type=event_type,
                description=description or EVENT_TYPES.get(event_type, event_type),
                extra_data=metadata or {}
            )

            self.session.add(event)
            self.session.flush()

            logger.debug(f"Event logged: {event_type} on {entity_type}:{entity_id}")
            return event.to_dict()

        except Exception as e:
            logger.error(f"Failed to log event: {e}")
            return None

    def log_create(self, entity_type: str, entity_id, entity_data: Dict = None) -> Optional[Dict]:
        return self.log(
            entity_type=entity_type,
            entity_id=entity_id,
            event_type='CREATED',
            description=f"New {entity_type} created",
            metadata={'data': entity_data} if entity_data else None
        )

    def log_update(self, entity_type: str, entity_id, changes: Dict = None) -> Optional[Dict]:
        return self.log(
            entity_type=entity_type,
            entity_id=entity_id,
            event_type='UPDATED',
            description=f"{entity_type.capitalize()} was updated",
            metadata={'changes': changes} if changes else None
        )

    def log_delete(self, entity_type: str, entity_id) -> Optional[Dict]:
        return self.log(
            entity_type=entity_type,
            entity_id=entity_id,
            event_type='DELETED',
            description=f"{entity_type.capitalize()} was deleted"
        )

    def log_status_change(self, entity_type: str, entity_id,
                          old_status: str, new_status: str) -> Optional[Dict]:
        """Log a status change event."""
        return self.log(
            entity_type=entity_type,
            entity_id=entity_id,
            event_type='STATUS_CHANGED',
            description=f"{entity_type.capitalize()} status changed from '{old_status}' to '{new_status}'",
            metadata={'old_status': old_status, 'new_status': new_status}
        )

    def get_entity_history(self, entity_type: str, entity_id,
                           limit: int = 50) -> List[Dict]:
        """Get the event history for a specific entity, newest first."""
        from database.models import EventLog

        events = self.session.query(EventLog).filter(
            EventLog.entity_type == entity_type,
            EventLog.entity_id == str(entity_id)
        ).order_by(EventLog.timestamp.desc()).limit(limit).all()

        return [e.to_dict() for e in events]

    def get_recent_events(self, hours: int = 24, event_types: List[str] = None,
                          entity_types: List[str] = None, limit: int = 100) -> List[Dict]:
        """Get recent events with optional filtering."""
        from database.models import EventLog

        since = datetime.utcnow() - timedelta(hours=hours)

        query = self.session.query(EventLog).filter(EventLog.timestamp >= since)

        if event_types:
            query = query.filter(EventLog.event_type.in_(event_types))

        if entity_types:
            query = query.filter(EventLog.entity_type.in_(entity_types))

        events = query.order_by(EventLog.timestamp.desc()).limit(limit).all()

        return [e.to_dict() for e in events]
