"""
Messaging Repository - one conversation per application between the
company owner, the assigned expert and an admin.
"""

import logging
from datetime import datetime
from typing import List, Optional, Dict
from sqlalchemy import or_, func
from sqlalchemy.orm import Session

from database.models import Conversation, Message, Application, UserProfile
from services.event_logger import EventLogger

logger = logging.getLogger(__name__)


class MessagingRepository:
    """Repository for conversations and messages."""

    def __init__(self, session: Session, actor_id: str = None):
        self.session = session
        self.events = EventLogger(session, actor_id)

    def _get(self, conversation_id: str) -> Optional[Conversation]:
        return self.session.query(Conversation).filter(Conversation.id == conversation_id).first()

    def get_or_create_conversation(self, application_id: str, admin_id: str = None) -> Dict:
        """
        Conversation for an application, created on first use.

        Client and expert are taken from the application; the admin defaults
        to the first admin account. An existing conversation picks up the
        application's current expert.
        """
        application = self.session.query(Application).filter(Application.id == application_id).first()
        if not application:
            raise ValueError('Application not found')

        conversation = self.session.query(Conversation).filter(
            Conversation.application_id == application_id
        ).first()
        if conversation:
            if conversation.expert_id != application.assigned_expert_id:
                conversation.expert_id = application.assigned_expert_id
                self.session.flush()
            return conversation.to_dict()

        if not admin_id:
            admin = self.session.query(UserProfile).filter(
                UserProfile.role == 'admin'
            ).order_by(UserProfile.created_at).first()
            admin_id = admin.id if admin else None

        conversation = Conversation(
            application_id=application_id,
            client_id=application.company_owner_id,
            expert_id=application.assigned_expert_id,
            admin_id=admin_id
        )
        self.session.add(conversation)
        self.session.flush()
        logger.info(f"Created conversation {conversation.id} for application {application_id}")
        return conversation.to_dict()

    def list_conversations(self, user_id: str, role: str = None) -> List[Dict]:
        """Conversations the user takes part in (admins see all), latest activity first."""
        query = self.session.query(Conversation)
        if role != 'admin':
            query = query.filter(or_(
                Conversation.client_id == user_id,
                Conversation.expert_id == user_id,
                Conversation.admin_id == user_id
            ))
        conversations = query.order_by(
            Conversation.last_message_at.desc(), Conversation.created_at.desc()
        ).all()

        unread = self._unread_by_conversation(user_id, [c.id for c in conversations])
        result = []
        for conversation in conversations:
            data = conversation.to_dict()
            data['unread_count'] = unread.get(conversation.id, 0)
            result.append(data)
        return result

    def is_participant(self, conversation_id: str, user_id: str) -> bool:
        conversation = self._get(conversation_id)
        if not conversation:
            return False
        return user_id in (conversation.client_id, conversation.expert_id, conversation.admin_id)

    def get_messages(self, conversation_id: str) -> List[Dict]:
        messages = self.session.query(Message).filter(
            Message.conversation_id == conversation_id
        ).order_by(Message.created_at).all()
        return [m.to_dict() for m in messages]

    def send_message(self, conversation_id: str, sender_id: str, content: str) -> Dict:
        conversation = self._get(conversation_id)
        if not conversation:
            raise ValueError('Conversation not found')

        content = (content or '').strip()
        if not content:
            raise ValueError('Message content is required')

        message = Message(conversation_id=conversation_id, sender_id=sender_id, content=content)
        self.session.add(message)
        conversation.last_message_at = datetime.utcnow()
        self.session.flush()

        self.events.log('conversation', conversation_id, 'MESSAGE_SENT',
                        metadata={'message_id': message.id})
        logger.info(f"Message {message.id} sent in conversation {conversation_id}")
        return message.to_dict()

    def mark_conversation_read(self, conversation_id: str, user_id: str) -> int:
        """Mark other participants' messages as read; returns how many changed."""
        count = self.session.query(Message).filter(
            Message.conversation_id == conversation_id,
            Message.sender_id != user_id,
            Message.is_read == False  # noqa: E712
        ).update({'is_read': True}, synchronize_session=False)
        self.session.flush()
        return count

    def _unread_by_conversation(self, user_id: str, conversation_ids: List[str]) -> Dict[str, int]:
        if not conversation_ids:
            return {}
        rows = self.session.query(Message.conversation_id, func.count(Message.id)).filter(
            Message.conversation_id.in_(conversation_ids),
            Message.sender_id != user_id,
            Message.is_read == False  # noqa: E712
        ).group_by(Message.conversation_id).all()
        return {conversation_id: count for conversation_id, count in rows}

    def get_unread_count(self, user_id: str, role: str = None) -> int:
        conversation_ids = [c['id'] for c in self.list_conversations(user_id, role)]
        return sum(self._unread_by_conversation(user_id, conversation_ids).values())
