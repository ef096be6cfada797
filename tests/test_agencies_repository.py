"""
Tests for agencies, clients and staff repositories
"""
import pytest
from services.agencies_repository import AgenciesRepository
from services.staff_repository import StaffRepository
from services.users_repository import UsersRepository


@pytest.fixture
def agencies(db_session):
    return AgenciesRepository(db_session)


@pytest.fixture
def owner_client_record(db_session, agencies):
    owner = UsersRepository(db_session).create_user('owner@example.com', 'password123', 'Olivia Owner')
    return agencies.create_client({
        'company_name': '',
        'contact_name': 'Olivia Owner',
        'contact_email': owner['email'],
        'company_owner_id': owner['id'],
        'states': ['Texas', 'Ohio', 'Texas']
    })


@pytest.mark.unit
class TestAgencies:
    """Tests for agency create/update/delete"""

    def test_create_agency_trims_name(self, agencies):
        agency = agencies.create_agency('  Bright Path  ')
        assert agency['name'] == 'Bright Path'
        assert agency['agency_admin_ids'] == []

    def test_create_agency_requires_name(self, agencies):
        with pytest.raises(ValueError, match='Agency name is required'):
            agencies.create_agency('   ')

    def test_create_agency_with_admin_sets_company_name(self, agencies, owner_client_record):
        """Test that the admin client's company name follows the agency"""
        agency = agencies.create_agency('Bright Path', owner_client_record['id'])
        assert agency['agency_admin_ids'] == [owner_client_record['id']]

        client = agencies.get_client(owner_client_record['id'])
        assert client['company_name'] == 'Bright Path'
        assert client['agency_id'] == agency['id']

    def test_admin_moves_between_agencies(self, agencies, owner_client_record):
        """Test that assigning an admin removes them from any other agency"""
        first = agencies.create_agency('First', owner_client_record['id'])
        second = agencies.create_agency('Second')

        agencies.update_agency(second['id'], 'Second', agency_admin_id=owner_client_record['id'])

        assert agencies.get_agency(first['id'])['agency_admin_ids'] == []
        assert agencies.get_agency(second['id'])['agency_admin_ids'] == [owner_client_record['id']]
        assert agencies.get_client(owner_client_record['id'])['company_name'] == 'Second'

    def test_replaced_admin_loses_company_name(self, agencies, owner_client_record):
        agency = agencies.create_agency('Bright Path', owner_client_record['id'])
        other = agencies.create_client({'company_name': '', 'contact_name': 'Other'})

        agencies.update_agency(agency['id'], 'Bright Path', agency_admin_id=other['id'],
                               previous_agency_admin_id=owner_client_record['id'])

        assert agencies.get_client(owner_client_record['id'])['company_name'] == ''
        assert agencies.get_agency(agency['id'])['agency_admin_ids'] == [other['id']]

    def test_update_missing_agency(self, agencies):
        assert agencies.update_agency('missing', 'Name') is None

    def test_delete_agency_detaches_clients(self, agencies, owner_client_record):
        agency = agencies.create_agency('Bright Path', owner_client_record['id'])
        assert agencies.delete_agency(agency['id']) is True
        assert agencies.get_agency(agency['id']) is None
        assert agencies.get_client(owner_client_record['id'])['agency_id'] is None

    def test_delete_missing_agency(self, agencies):
        assert agencies.delete_agency('missing') is False


@pytest.mark.unit
class TestClients:
    """Tests for client records"""

    def test_client_states_are_deduplicated(self, owner_client_record):
        assert owner_client_record['states'] == ['Texas', 'Ohio']

    def test_update_client_replaces_states(self, agencies, owner_client_record):
        updated = agencies.update_client(owner_client_record['id'], {'states': ['Florida']})
        assert updated['states'] == ['Florida']

    def test_update_client_keeps_existing_state(self, db_session, agencies, owner_client_record):
        """Keeping a state while adding another does not duplicate its row"""
        updated = agencies.update_client(owner_client_record['id'], {'states': ['Texas', 'Florida']})
        db_session.flush()

        assert sorted(updated['states']) == ['Florida', 'Texas']
        again = agencies.update_client(owner_client_record['id'], {'states': ['Florida', 'Texas']})
        assert sorted(again['states']) == ['Florida', 'Texas']

    def test_assign_expert(self, db_session, agencies, owner_client_record):
        expert = UsersRepository(db_session).create_user('expert@example.com', 'password123', 'E', 'expert')
        client = agencies.assign_expert(owner_client_record['id'], expert['id'])
        assert client['expert_id'] == expert['id']

    def test_client_for_owner(self, agencies, owner_client_record):
        client = agencies.get_client_for_owner(owner_client_record['company_owner_id'])
        assert client.id == owner_client_record['id']


@pytest.mark.unit
class TestStaff:
    """Tests for staff members of a client"""

    def test_create_staff_member_normalizes_email(self, db_session, owner_client_record, sample_staff_data):
        sample_staff_data['email'] = '  Jane.Doe@Example.com '
        member = StaffRepository(db_session).create_staff_member(owner_client_record['id'], sample_staff_data)
        assert member['email'] == 'jane.doe@example.com'
        assert member['company_owner_id'] == owner_client_record['id']
        assert member['user_id'] is None

    def test_create_staff_member_unknown_client(self, db_session, sample_staff_data):
        with pytest.raises(ValueError, match='Client not found'):
            StaffRepository(db_session).create_staff_member('missing', sample_staff_data)

    def test_staff_member_with_password_gets_login(self, db_session, owner_client_record, sample_staff_data):
        """Test that a password creates a staff_member account linked by user_id"""
        member = StaffRepository(db_session).create_staff_member(
            owner_client_record['id'], sample_staff_data, password='password123')

        user = UsersRepository(db_session).get_user(member['user_id'])
        assert user['role'] == 'staff_member'
        assert user['email'] == 'jane.doe@example.com'
        assert 'account_message' in member

    def test_existing_account_is_linked(self, db_session, owner_client_record, sample_staff_data):
        existing = UsersRepository(db_session).create_user('jane.doe@example.com', 'password123', 'Jane')
        member = StaffRepository(db_session).create_staff_member(
            owner_client_record['id'], sample_staff_data, password='password123')
        assert member['user_id'] == existing['id']
        assert 'already exists' in member['account_message']

    def test_staff_inherits_client_agency(self, db_session, agencies, owner_client_record, sample_staff_data):
        agency = agencies.create_agency('Bright Path', owner_client_record['id'])
        member = StaffRepository(db_session).create_staff_member(owner_client_record['id'], sample_staff_data)
        assert member['agency_id'] == agency['id']

    def test_update_and_delete_staff_member(self, db_session, owner_client_record, sample_staff_data):
        staff = StaffRepository(db_session)
        member = staff.create_staff_member(owner_client_record['id'], sample_staff_data)

        updated = staff.update_staff_member(member['id'], {'status': 'inactive'})
        assert updated['status'] == 'inactive'

        assert staff.delete_staff_member(member['id']) is True
        assert staff.get_staff_member(member['id']) is None
