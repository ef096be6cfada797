"""
Messages Routes Blueprint

Per-application conversations between the company owner, the assigned
expert and an admin, plus the signed-in user's in-app notifications.
"""

from flask import Blueprint, request, jsonify
import logging

from auth import login_required, get_current_user_id, get_current_role
from database import get_db_session
from services.applications_repository import ApplicationsRepository
from services.messaging_repository import MessagingRepository
from services.notification_service import NotificationService
from app.utils import get_json_body, error_response, parse_bool

logger = logging.getLogger(__name__)

# Create blueprint
messages_bp = Blueprint('messages_bp', __name__)


def _may_read(repo, conversation_id):
    return get_current_role() == 'admin' or repo.is_participant(conversation_id, get_current_user_id())


# ============================================================================
# CONVERSATIONS
# ============================================================================

@messages_bp.route('/api/conversations', methods=['GET'])
@login_required
def list_conversations():
    try:
        with get_db_session() as db:
            conversations = MessagingRepository(db).list_conversations(
                get_current_user_id(), get_current_role()
            )
        return jsonify({'success': True, 'conversations': conversations})
    except Exception as e:
        logger.error(f"Error listing conversations: {e}")
        return error_response(str(e), 500)


@messages_bp.route('/api/applications/<application_id>/conversation', methods=['POST'])
@login_required
def open_conversation(application_id):
    """Conversation for an application, created on first use"""
    try:
        user_id = get_current_user_id()
        role = get_current_role()
        with get_db_session() as db:
            application = ApplicationsRepository(db).get_application(application_id)
            if not application:
                return error_response('Application not found', 404)
            if role != 'admin' and user_id not in (application['company_owner_id'],
                                                   application['assigned_expert_id']):
                return error_response('Application not found', 404)

            conversation = MessagingRepository(db, user_id).get_or_create_conversation(
                application_id, admin_id=user_id if role == 'admin' else None
            )
        return jsonify({'success': True, 'conversation': conversation})
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error opening conversation: {e}")
        return error_response(str(e), 500)


@messages_bp.route('/api/conversations/<conversation_id>/messages', methods=['GET'])
@login_required
def get_messages(conversation_id):
    try:
        with get_db_session() as db:
            repo = MessagingRepository(db)
            if not _may_read(repo, conversation_id):
                return error_response('Conversation not found', 404)
            messages = repo.get_messages(conversation_id)
        return jsonify({'success': True, 'messages': messages})
    except Exception as e:
        logger.error(f"Error getting messages: {e}")
        return error_response(str(e), 500)


@messages_bp.route('/api/conversations/<conversation_id>/messages', methods=['POST'])
@login_required
def send_message(conversation_id):
    try:
        user_id = get_current_user_id()
        content = get_json_body().get('content')
        with get_db_session() as db:
            repo = MessagingRepository(db, user_id)
            if not _may_read(repo, conversation_id):
                return error_response('Conversation not found', 404)
            message = repo.send_message(conversation_id, user_id, content)
        return jsonify({'success': True, 'message': message}), 201
    except ValueError as e:
        return error_response(str(e))
    except Exception as e:
        logger.error(f"Error sending message: {e}")
        return error_response(str(e), 500)


@messages_bp.route('/api/conversations/<conversation_id>/read', methods=['POST'])
@login_required
def mark_conversation_read(conversation_id):
    try:
        with get_db_session() as db:
            repo = MessagingRepository(db)
            if not _may_read(repo, conversation_id):
                return error_response('Conversation not found', 404)
            count = repo.mark_conversation_read(conversation_id, get_current_user_id())
        return jsonify({'success': True, 'marked_read': count})
    except Exception as e:
        logger.error(f"Error marking conversation read: {e}")
        return error_response(str(e), 500)


@messages_bp.route('/api/messages/unread-count', methods=['GET'])
@login_required
def get_unread_message_count():
    try:
        with get_db_session() as db:
            count = MessagingRepository(db).get_unread_count(get_current_user_id(), get_current_role())
        return jsonify({'success': True, 'unread_count': count})
    except Exception as e:
        logger.error(f"Error counting unread messages: {e}")
        return error_response(str(e), 500)


# ============================================================================
# NOTIFICATIONS
# ============================================================================

@messages_bp.route('/api/notifications', methods=['GET'])
@login_required
def get_notifications():
    try:
        with get_db_session() as db:
            service = NotificationService(db, get_current_user_id())
            notifications = service.get_notifications(
                unread_only=parse_bool(request.args.get('unread_only')),
                limit=int(request.args.get('limit', 50))
            )
            unread_count = service.get_unread_count()
        return jsonify({'success': True, 'notifications': notifications, 'unread_count': unread_count})
    except ValueError:
        return error_response('limit must be a number')
    except Exception as e:
        logger.error(f"Error getting notifications: {e}")
        return error_response(str(e), 500)


@messages_bp.route('/api/notifications/<notification_id>/read', methods=['POST'])
@login_required
def mark_notification_read(notification_id):
    try:
        with get_db_session() as db:
            updated = NotificationService(db, get_current_user_id()).mark_as_read(notification_id)
        if not updated:
            return error_response('Notification not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error marking notification read: {e}")
        return error_response(str(e), 500)


@messages_bp.route('/api/notifications/read-all', methods=['POST'])
@login_required
def mark_all_notifications_read():
    try:
        with get_db_session() as db:
            count = NotificationService(db, get_current_user_id()).mark_all_as_read()
        return jsonify({'success': True, 'marked_read': count})
    except Exception as e:
        logger.error(f"Error marking notifications read: {e}")
        return error_response(str(e), 500)


@messages_bp.route('/api/notifications/<notification_id>', methods=['DELETE'])
@login_required
def delete_notification(notification_id):
    try:
        with get_db_session() as db:
            deleted = NotificationService(db, get_current_user_id()).delete_notification(notification_id)
        if not deleted:
            return error_response('Notification not found', 404)
        return jsonify({'success': True})
    except Exception as e:
        logger.error(f"Error deleting notification: {e}")
        return error_response(str(e), 500)
