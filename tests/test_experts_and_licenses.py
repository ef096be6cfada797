"""
Tests for licensing experts, owner licenses, admin pick lists and case statistics
"""
import pytest
from datetime import date, timedelta

from services.agencies_repository import AgenciesRepository
from services.applications_repository import ApplicationsRepository
from services.cases_repository import CasesRepository
from services.experts_repository import ExpertsRepository
from services.license_types_repository import LicenseTypesRepository
from services.licenses_repository import LicensesRepository
from services.system_lists_repository import SystemListsRepository
from services.users_repository import UsersRepository


@pytest.fixture
def experts(db_session):
    return ExpertsRepository(db_session)


@pytest.fixture
def expert(experts):
    return experts.create_expert('Evan', 'Expert', 'Evan.Expert@Example.com', 'password123',
                                 phone='(512) 555-0100', expertise='Texas home care')


@pytest.fixture
def owner(db_session):
    return UsersRepository(db_session).create_user('owner@example.com', 'password123', 'Olivia Owner')


@pytest.mark.unit
class TestExperts:
    """Tests for expert profiles and their assignments"""

    def test_create_expert_adds_login(self, db_session, expert):
        user = UsersRepository(db_session).get_user(expert['user_id'])

        assert user['role'] == 'expert'
        assert user['full_name'] == 'Evan Expert'
        assert expert['email'] == 'evan.expert@example.com'
        assert expert['role'] == 'Licensing Specialist'
        assert expert['status'] == 'active'
        assert expert['states'] == []

    def test_create_expert_rejects_unknown_status(self, experts):
        with pytest.raises(ValueError, match='Invalid expert status'):
            experts.create_expert('Evan', 'Expert', 'evan@example.com', 'password123', status='busy')

    def test_create_expert_duplicate_email(self, experts, expert):
        with pytest.raises(ValueError):
            experts.create_expert('Eve', 'Other', 'evan.expert@example.com', 'password123')

    def test_update_expert_fields(self, experts, expert):
        updated = experts.update_expert(expert['id'], {'phone': '(512) 555-0199', 'status': 'inactive'})

        assert updated['phone'] == '(512) 555-0199'
        assert updated['status'] == 'inactive'
        assert experts.list_experts(status='active') == []

    def test_update_expert_rejects_unknown_status(self, experts, expert):
        with pytest.raises(ValueError, match='Invalid expert status'):
            experts.update_expert(expert['id'], {'status': 'busy'})

    def test_update_missing_expert(self, experts):
        assert experts.update_expert('missing', {'status': 'active'}) is None

    def test_states_can_be_extended(self, db_session, experts, expert):
        """Keeping a state while adding another does not duplicate its row"""
        experts.update_expert(expert['id'], {'states': ['Texas']})
        db_session.flush()

        updated = experts.update_expert(expert['id'], {'states': ['Texas', 'Ohio']})
        assert sorted(updated['states']) == ['Ohio', 'Texas']

        updated = experts.update_expert(expert['id'], {'states': ['Ohio']})
        assert updated['states'] == ['Ohio']

    def test_get_expert_by_user(self, experts, expert):
        assert experts.get_expert_by_user(expert['user_id'])['id'] == expert['id']
        assert experts.get_expert_by_user('missing') is None

    def test_expert_clients(self, db_session, experts, expert, owner):
        agencies = AgenciesRepository(db_session)
        assigned = agencies.create_client({'company_name': 'Sunrise Home Care',
                                           'company_owner_id': owner['id']})
        agencies.create_client({'company_name': 'Unassigned Care'})
        agencies.assign_expert(assigned['id'], expert['user_id'])

        clients = experts.get_expert_clients(expert['id'])

        assert [c['company_name'] for c in clients] == ['Sunrise Home Care']
        assert experts.get_expert_clients('missing') == []

    def test_expert_applications(self, db_session, experts, expert, owner):
        license_type = LicenseTypesRepository(db_session).create_license_type('Texas', 'Home Care Services')
        applications = ApplicationsRepository(db_session)
        assigned = applications.request_application(owner['id'], 'Texas', license_type['id'])
        applications.request_application(owner['id'], 'Texas', license_type['id'])
        applications.assign_expert(assigned['id'], expert['user_id'])

        listed = experts.get_expert_applications(expert['id'])

        assert [a['id'] for a in listed] == [assigned['id']]
        assert experts.get_expert_applications('missing') == []


@pytest.mark.unit
class TestLicenses:
    """Tests for licenses an owner already holds"""

    def test_create_and_days_until_expiry(self, db_session, owner):
        licenses = LicensesRepository(db_session)
        expiry = (date.today() + timedelta(days=10)).isoformat()

        created = licenses.create_license(owner['id'], {
            'license_name': 'Home Care Services',
            'state': 'Texas',
            'license_number': 'HCS-001',
            'expiry_date': expiry
        })

        assert created['status'] == 'active'
        assert created['days_until_expiry'] == 10

    def test_expired_and_undated_licenses(self, db_session, owner):
        licenses = LicensesRepository(db_session)
        expired = licenses.create_license(owner['id'], {
            'license_name': 'Old permit',
            'expiry_date': (date.today() - timedelta(days=5)).isoformat()
        })
        undated = licenses.create_license(owner['id'], {'license_name': 'Business registration'})

        assert expired['days_until_expiry'] == -5
        assert undated['days_until_expiry'] is None

    def test_licenses_are_scoped_to_owner(self, db_session, owner):
        licenses = LicensesRepository(db_session)
        other = UsersRepository(db_session).create_user('other@example.com', 'password123')
        created = licenses.create_license(owner['id'], {'license_name': 'Home Care Services'})

        assert licenses.get_license(created['id'], other['id']) is None
        assert licenses.update_license(created['id'], {'status': 'expired'}, other['id']) is None
        assert licenses.delete_license(created['id'], other['id']) is False
        assert [row['id'] for row in licenses.list_licenses(owner['id'])] == [created['id']]

    def test_update_license_dates(self, db_session, owner):
        licenses = LicensesRepository(db_session)
        created = licenses.create_license(owner['id'], {'license_name': 'Home Care Services'})

        updated = licenses.update_license(created['id'], {
            'status': 'pending_renewal',
            'expiry_date': (date.today() + timedelta(days=30)).isoformat()
        }, owner['id'])

        assert updated['status'] == 'pending_renewal'
        assert updated['days_until_expiry'] == 30

    def test_documents(self, db_session, owner):
        licenses = LicensesRepository(db_session)
        created = licenses.create_license(owner['id'], {'license_name': 'Home Care Services'})

        document = licenses.add_document(created['id'], 'Certificate.pdf', 'https://files/cert.pdf',
                                         category='certificate', owner_id=owner['id'])
        assert document['license_id'] == created['id']
        assert document['category'] == 'certificate'

        assert licenses.delete_document(document['id']) is True
        assert licenses.delete_document(document['id']) is False

    def test_document_for_missing_license(self, db_session):
        with pytest.raises(ValueError, match='License not found'):
            LicensesRepository(db_session).add_document('missing', 'Certificate.pdf')


@pytest.mark.integration
class TestLicenseRoutes:
    """Tests for /api/licenses and its documents"""

    def _create(self, client):
        response = client.post('/api/licenses', json={
            'license_name': 'Home Care Services',
            'state': 'Texas',
            'expiry_date': (date.today() + timedelta(days=45)).isoformat()
        })
        assert response.status_code == 201
        return response.get_json()['license']

    def test_create_requires_name(self, owner_client):
        response = owner_client.post('/api/licenses', json={'state': 'Texas'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'License name is required'

    def test_create_rejects_bad_date(self, owner_client):
        response = owner_client.post('/api/licenses', json={
            'license_name': 'Home Care Services',
            'expiry_date': 'soon'
        })
        assert response.status_code == 400

    def test_created_license_reports_days_until_expiry(self, owner_client):
        license_data = self._create(owner_client)

        response = owner_client.get(f"/api/licenses/{license_data['id']}")

        assert response.status_code == 200
        assert response.get_json()['license']['days_until_expiry'] == 45

    def test_document_upload_and_delete(self, owner_client):
        license_data = self._create(owner_client)

        response = owner_client.post(f"/api/licenses/{license_data['id']}/documents", json={
            'document_name': 'Certificate.pdf',
            'document_url': 'https://files/cert.pdf'
        })
        assert response.status_code == 201
        document = response.get_json()['document']

        documents = owner_client.get(f"/api/licenses/{license_data['id']}").get_json()['license']['documents']
        assert [d['id'] for d in documents] == [document['id']]

        response = owner_client.delete(f"/api/licenses/{license_data['id']}/documents/{document['id']}")
        assert response.status_code == 200
        response = owner_client.delete(f"/api/licenses/{license_data['id']}/documents/{document['id']}")
        assert response.status_code == 404

    def test_document_requires_name(self, owner_client):
        license_data = self._create(owner_client)

        response = owner_client.post(f"/api/licenses/{license_data['id']}/documents", json={})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Document name is required'

    def test_other_owner_cannot_add_documents(self, client, owner_user, make_user, login_as):
        login_as(client, owner_user)
        license_data = self._create(client)

        login_as(client, make_user('other@example.com', 'company_owner'))
        response = client.post(f"/api/licenses/{license_data['id']}/documents",
                               json={'document_name': 'Certificate.pdf'})

        assert response.status_code == 404
        assert response.get_json()['error'] == 'License not found'


@pytest.mark.unit
class TestSystemLists:
    """Tests for certification types and staff roles"""

    def test_certification_types_are_alphabetical(self, db_session):
        lists = SystemListsRepository(db_session)
        for name in ('TB Test', 'CPR', 'Home Health Aide (HHA)'):
            lists.create_certification_type(name)

        names = [t['certification_type'] for t in lists.list_certification_types()]
        assert names == ['CPR', 'Home Health Aide (HHA)', 'TB Test']

    def test_duplicate_certification_type_rejected(self, db_session):
        lists = SystemListsRepository(db_session)
        lists.create_certification_type('CPR')

        with pytest.raises(ValueError, match="Certification type 'CPR' already exists"):
            lists.create_certification_type('  CPR ')

    def test_blank_certification_type_rejected(self, db_session):
        with pytest.raises(ValueError, match='Certification type is required'):
            SystemListsRepository(db_session).create_certification_type('   ')

    def test_staff_roles_are_alphabetical(self, db_session):
        lists = SystemListsRepository(db_session)
        for name in ('Registered Nurse', 'Administrator', 'Home Health Aide'):
            lists.create_staff_role(name)

        names = [r['name'] for r in lists.list_staff_roles()]
        assert names == ['Administrator', 'Home Health Aide', 'Registered Nurse']

    def test_duplicate_staff_role_rejected(self, db_session):
        lists = SystemListsRepository(db_session)
        lists.create_staff_role('Caregiver')

        with pytest.raises(ValueError, match="Staff role 'Caregiver' already exists"):
            lists.create_staff_role('Caregiver')

    def test_rename_and_delete(self, db_session):
        lists = SystemListsRepository(db_session)
        role = lists.create_staff_role('Caregiver')

        assert lists.update_staff_role(role['id'], 'Personal Care Aide')['name'] == 'Personal Care Aide'
        assert lists.delete_staff_role(role['id']) is True
        assert lists.delete_staff_role(role['id']) is False
        assert lists.update_staff_role(role['id'], 'Anything') is None


@pytest.mark.unit
class TestDashboardStats:
    """Tests for the admin dashboard numbers"""

    def test_empty_dashboard(self, db_session):
        stats = CasesRepository(db_session).get_dashboard_stats()

        assert stats['total_cases'] == 0
        assert stats['average_progress'] == 0
        assert stats['status_counts'] == {'in_progress': 0, 'under_review': 0, 'approved': 0, 'rejected': 0}
        assert stats['state_counts'] == {}

    def test_counts_and_average(self, db_session):
        client = AgenciesRepository(db_session).create_client({'company_name': 'Sunrise Home Care'})
        cases = CasesRepository(db_session)
        for state, status, progress in [('Texas', 'in_progress', 25),
                                        ('Texas', 'approved', 100),
                                        ('Ohio', 'under_review', 50)]:
            cases.create_case({'client_id': client['id'], 'state': state, 'status': status,
                               'progress_percentage': progress})

        stats = cases.get_dashboard_stats()

        assert stats['total_cases'] == 3
        assert stats['in_progress'] == 1
        assert stats['under_review'] == 1
        assert stats['approved'] == 1
        # (25 + 100 + 50) / 3 = 58.33
        assert stats['average_progress'] == 58
        assert stats['status_counts']['rejected'] == 0
        assert stats['state_counts'] == {'Texas': 2, 'Ohio': 1}
