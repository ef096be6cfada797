"""
Tests for application conversations, in-app notifications and certifications
"""
import pytest
from services.applications_repository import ApplicationsRepository
from services.certifications_repository import CertificationsRepository
from services.event_logger import EventLogger
from services.license_types_repository import LicenseTypesRepository
from services.messaging_repository import MessagingRepository
from services.notification_service import NotificationService
from services.users_repository import UsersRepository


@pytest.fixture
def users(db_session):
    repo = UsersRepository(db_session)
    return {
        'admin': repo.create_user('admin@example.com', 'password123', 'Ada Admin', 'admin'),
        'owner': repo.create_user('owner@example.com', 'password123', 'Olivia Owner'),
        'expert': repo.create_user('expert@example.com', 'password123', 'Evan Expert', 'expert'),
    }


@pytest.fixture
def application(db_session, users):
    license_type = LicenseTypesRepository(db_session).create_license_type('Texas', 'Home Care')
    applications = ApplicationsRepository(db_session)
    application = applications.request_application(users['owner']['id'], 'Texas', license_type['id'])
    return applications.assign_expert(application['id'], users['expert']['id'])


@pytest.fixture
def messaging(db_session):
    return MessagingRepository(db_session)


@pytest.mark.unit
class TestConversations:
    """Tests for one conversation per application"""

    def test_conversation_takes_participants_from_application(self, messaging, users, application):
        conversation = messaging.get_or_create_conversation(application['id'])
        assert conversation['client_id'] == users['owner']['id']
        assert conversation['expert_id'] == users['expert']['id']
        assert conversation['admin_id'] == users['admin']['id']

    def test_conversation_is_reused(self, messaging, application):
        first = messaging.get_or_create_conversation(application['id'])
        assert messaging.get_or_create_conversation(application['id'])['id'] == first['id']

    def test_conversation_for_missing_application(self, messaging, users):
        with pytest.raises(ValueError, match='Application not found'):
            messaging.get_or_create_conversation('missing')

    def test_conversation_follows_expert_assignment(self, db_session, messaging, users):
        """A conversation opened before an expert is assigned is handed to that expert"""
        license_type = LicenseTypesRepository(db_session).create_license_type('Texas', 'Home Care')
        applications = ApplicationsRepository(db_session)
        application = applications.request_application(users['owner']['id'], 'Texas', license_type['id'])

        conversation = messaging.get_or_create_conversation(application['id'])
        assert conversation['expert_id'] is None

        applications.approve_application(application['id'], users['expert']['id'])

        listed = messaging.list_conversations(users['expert']['id'], 'expert')
        assert [c['id'] for c in listed] == [conversation['id']]
        assert messaging.is_participant(conversation['id'], users['expert']['id']) is True

    def test_reassigned_expert_takes_over_conversation(self, messaging, users, application):
        conversation = messaging.get_or_create_conversation(application['id'])
        other = UsersRepository(messaging.session).create_user(
            'other.expert@example.com', 'password123', 'Olga Expert', 'expert')

        ApplicationsRepository(messaging.session).assign_expert(application['id'], other['id'])

        assert messaging.get_or_create_conversation(application['id'])['expert_id'] == other['id']
        assert messaging.is_participant(conversation['id'], users['expert']['id']) is False
        assert messaging.list_conversations(users['expert']['id'], 'expert') == []

    def test_participants(self, messaging, users, application):
        conversation = messaging.get_or_create_conversation(application['id'])
        outsider = UsersRepository(messaging.session).create_user('x@example.com', 'password123')
        assert messaging.is_participant(conversation['id'], users['owner']['id']) is True
        assert messaging.is_participant(conversation['id'], outsider['id']) is False

    def test_blank_message_rejected(self, messaging, users, application):
        conversation = messaging.get_or_create_conversation(application['id'])
        with pytest.raises(ValueError, match='Message content is required'):
            messaging.send_message(conversation['id'], users['owner']['id'], '   ')

    def test_unread_counts(self, messaging, users, application):
        conversation = messaging.get_or_create_conversation(application['id'])
        messaging.send_message(conversation['id'], users['owner']['id'], 'Hello')
        messaging.send_message(conversation['id'], users['owner']['id'], 'Any news?')

        assert messaging.get_unread_count(users['expert']['id']) == 2
        # Own messages never count as unread
        assert messaging.get_unread_count(users['owner']['id']) == 0

        listed = messaging.list_conversations(users['expert']['id'])
        assert listed[0]['unread_count'] == 2

        assert messaging.mark_conversation_read(conversation['id'], users['expert']['id']) == 2
        assert messaging.get_unread_count(users['expert']['id']) == 0

    def test_admin_sees_all_conversations(self, messaging, users, application):
        messaging.get_or_create_conversation(application['id'], admin_id=None)
        other_admin = UsersRepository(messaging.session).create_user(
            'admin2@example.com', 'password123', 'Second Admin', 'admin')
        assert len(messaging.list_conversations(other_admin['id'], role='admin')) == 1
        assert messaging.list_conversations(other_admin['id']) == []


@pytest.mark.unit
class TestNotifications:
    """Tests for in-app notifications"""

    def test_create_and_count(self, db_session, users):
        user_id = users['owner']['id']
        service = NotificationService(db_session, user_id)
        service.create_notification(user_id, 'Application approved', 'Work has started', 'application')
        service.create_notification(user_id, 'Heads up', notification_type='bogus')

        notifications = service.get_notifications()
        assert len(notifications) == 2
        assert {n['type'] for n in notifications} == {'application', 'info'}
        assert service.get_unread_count() == 2

    def test_mark_read(self, db_session, users):
        user_id = users['owner']['id']
        service = NotificationService(db_session, user_id)
        first = service.create_notification(user_id, 'One')
        service.create_notification(user_id, 'Two')

        assert service.mark_as_read(first['id']) is True
        assert len(service.get_notifications(unread_only=True)) == 1
        assert service.mark_all_as_read() == 1
        assert service.get_unread_count() == 0

    def test_other_users_notifications_are_hidden(self, db_session, users):
        note = NotificationService(db_session).create_notification(users['owner']['id'], 'Private')
        expert_service = NotificationService(db_session, users['expert']['id'])
        assert expert_service.mark_as_read(note['id']) is False
        assert expert_service.delete_notification(note['id']) is False


@pytest.mark.unit
class TestCertifications:
    """Tests for a user's own certifications"""

    def test_crud(self, db_session, users, sample_certification_data):
        user_id = users['owner']['id']
        certifications = CertificationsRepository(db_session)

        cert = certifications.create_certification(user_id, sample_certification_data)
        assert cert['expiration_date'] == '2027-01-15'

        updated = certifications.update_certification(user_id, cert['id'], {'expiration_date': '2028-01-15'})
        assert updated['expiration_date'] == '2028-01-15'

        assert certifications.delete_certification(user_id, cert['id']) is True
        assert certifications.get_certifications(user_id) == []

    def test_certifications_are_scoped_to_user(self, db_session, users, sample_certification_data):
        certifications = CertificationsRepository(db_session)
        cert = certifications.create_certification(users['owner']['id'], sample_certification_data)
        assert certifications.get_certification(users['expert']['id'], cert['id']) is None
        assert certifications.delete_certification(users['expert']['id'], cert['id']) is False

    def test_create_requires_user(self, db_session, sample_certification_data):
        with pytest.raises(ValueError, match='logged in'):
            CertificationsRepository(db_session).create_certification(None, sample_certification_data)


@pytest.mark.unit
class TestEventLog:
    """Tests for the audit trail written by the repositories"""

    def test_application_events_recorded(self, db_session, users, application):
        ApplicationsRepository(db_session, users['admin']['id']).approve_application(application['id'])

        history = EventLogger(db_session).get_entity_history('application', application['id'])
        event_types = {e['event_type'] for e in history}
        assert 'APPLICATION_REQUESTED' in event_types
        assert 'APPLICATION_APPROVED' in event_types
