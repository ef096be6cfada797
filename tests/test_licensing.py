"""
Tests for license types, requirement templates and the application lifecycle
"""
import pytest
from services.applications_repository import ApplicationsRepository
from services.license_requirements_repository import LicenseRequirementsRepository
from services.license_types_repository import LicenseTypesRepository
from services.users_repository import UsersRepository


@pytest.fixture
def owner(db_session):
    return UsersRepository(db_session).create_user('owner@example.com', 'password123', 'Olivia Owner')


@pytest.fixture
def expert(db_session):
    return UsersRepository(db_session).create_user('expert@example.com', 'password123', 'Evan Expert', 'expert')


@pytest.fixture
def license_type(db_session):
    return LicenseTypesRepository(db_session).create_license_type(
        'Texas', 'Home Care Services', 'Non-medical home care',
        processing_time='60 days', application_fee='$1,750', renewal_period='2 years'
    )


@pytest.fixture
def requirements(db_session):
    return LicenseRequirementsRepository(db_session)


@pytest.fixture
def requirement_id(requirements, license_type):
    """Template for the license type, with two steps and one document"""
    requirement = requirements.find_requirement('Texas', 'Home Care Services')
    requirements.create_step(requirement.id, 'Submit application', 'Online portal')
    requirements.create_step(requirement.id, 'Background check')
    requirements.create_document(requirement.id, 'Proof of insurance', document_type='insurance')
    return requirement.id


@pytest.fixture
def applications(db_session):
    return ApplicationsRepository(db_session)


@pytest.mark.unit
class TestLicenseTypes:
    """Tests for license type parsing and the matching template"""

    def test_create_parses_display_strings(self, license_type):
        assert license_type['cost_min'] == 1750.0
        assert license_type['cost_display'] == '$1,750'
        assert license_type['processing_time_min'] == 60
        assert license_type['processing_time_max'] == 60
        assert license_type['renewal_period_years'] == 2
        assert license_type['is_active'] is True

    def test_create_adds_requirement_template(self, requirements, license_type):
        assert requirements.find_requirement('Texas', 'Home Care Services') is not None

    def test_update_reparses_fields(self, db_session, license_type):
        updated = LicenseTypesRepository(db_session).update_license_type(
            license_type['id'], renewal_period='annual', application_fee='$900',
            service_fee='$100', processing_time='30 days')
        assert updated['cost_min'] == 900.0
        assert updated['service_fee'] == 100.0
        assert updated['renewal_period_years'] == 1
        assert updated['processing_time_max'] == 30

    def test_toggle_active(self, db_session, license_type):
        repo = LicenseTypesRepository(db_session)
        assert repo.toggle_active(license_type['id'], False)['is_active'] is False
        assert repo.list_license_types(active_only=True) == []

    def test_delete_removes_template(self, db_session, requirements, license_type):
        assert LicenseTypesRepository(db_session).delete_license_type(license_type['id']) is True
        assert requirements.find_requirement('Texas', 'Home Care Services') is None

    def test_delete_missing_license_type(self, db_session):
        with pytest.raises(ValueError, match='License type not found'):
            LicenseTypesRepository(db_session).delete_license_type('missing')


@pytest.mark.unit
class TestRequirementTemplates:
    """Tests for requirement steps and documents"""

    def test_get_or_create_is_idempotent(self, requirements):
        first = requirements.get_or_create_requirement('Ohio', 'Skilled Nursing')
        assert requirements.get_or_create_requirement('Ohio', 'Skilled Nursing') == first

    def test_steps_are_numbered_in_order(self, requirements, requirement_id):
        steps = requirements.get_steps(requirement_id)
        assert [s['step_order'] for s in steps] == [1, 2]
        assert steps[1]['description'] is None

    def test_copy_steps_appends_after_existing(self, requirements, requirement_id):
        target = requirements.get_or_create_requirement('Ohio', 'Skilled Nursing')
        requirements.create_step(target, 'Existing step')

        source_ids = [s['id'] for s in requirements.get_steps(requirement_id)]
        copies = requirements.copy_steps(target, source_ids)

        assert [c['step_order'] for c in copies] == [2, 3]
        assert [c['step_name'] for c in copies] == ['Submit application', 'Background check']

    def test_copy_without_selection(self, requirements, requirement_id):
        with pytest.raises(ValueError, match='No steps selected'):
            requirements.copy_steps(requirement_id, [])

    def test_steps_listing_excludes_requirement(self, requirements, requirement_id):
        other = requirements.get_or_create_requirement('Ohio', 'Skilled Nursing')
        requirements.create_step(other, 'Ohio step')

        listed = requirements.get_all_steps_with_requirement_info(exclude_requirement_id=requirement_id)
        assert [s['step_name'] for s in listed] == ['Ohio step']
        assert listed[0]['state'] == 'Ohio'

    def test_copy_documents(self, requirements, requirement_id):
        target = requirements.get_or_create_requirement('Ohio', 'Skilled Nursing')
        source_ids = [d['id'] for d in requirements.get_documents(requirement_id)]
        copies = requirements.copy_documents(target, source_ids)
        assert copies[0]['document_name'] == 'Proof of insurance'
        assert copies[0]['license_requirement_id'] == target


@pytest.mark.unit
class TestApplicationLifecycle:
    """Tests for requesting, approving and closing applications"""

    def test_request_copies_template(self, applications, owner, license_type, requirement_id):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])

        assert application['status'] == 'requested'
        assert application['application_name'] == 'Home Care Services'
        assert application['progress_percentage'] == 0
        assert [s['step_name'] for s in application['steps']] == ['Submit application', 'Background check']
        assert application['documents'][0]['status'] == 'pending'

    def test_request_requires_owner(self, applications, license_type):
        with pytest.raises(ValueError, match='logged in'):
            applications.request_application(None, 'Texas', license_type['id'])

    def test_request_unknown_license_type(self, applications, owner):
        with pytest.raises(ValueError, match='License type not found'):
            applications.request_application(owner['id'], 'Texas', 'missing')

    def test_approve_requires_expert(self, applications, owner, license_type):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])
        with pytest.raises(ValueError, match='assign an expert'):
            applications.approve_application(application['id'])

    def test_approve_with_expert(self, applications, owner, expert, license_type):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])
        approved = applications.approve_application(application['id'], expert['id'])
        assert approved['status'] == 'in_progress'
        assert approved['status_display'] == 'In Progress'
        assert approved['assigned_expert_id'] == expert['id']

    def test_revision_and_reject_keep_reason(self, applications, owner, license_type):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])
        revised = applications.request_revision(application['id'], 'Missing insurance')
        assert revised['status'] == 'needs_revision'
        assert revised['revision_reason'] == 'Missing insurance'

        rejected = applications.reject_application(application['id'], 'Out of area')
        assert rejected['status'] == 'rejected'
        assert rejected['revision_reason'] == 'Out of area'

    def test_submit_sets_under_review(self, applications, owner, license_type):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])
        assert applications.submit_application(application['id'])['status'] == 'under_review'

    def test_lifecycle_on_missing_application(self, applications):
        assert applications.approve_application('missing', 'someone') is None
        assert applications.reject_application('missing', 'Out of area') is None
        assert applications.request_revision('missing', 'Missing insurance') is None
        assert applications.submit_application('missing') is None
        assert applications.update_status('missing', 'approved') is None
        assert applications.close_application('missing') is None

    def test_update_status_rejects_unknown(self, applications, owner, license_type):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])
        with pytest.raises(ValueError, match='Invalid status'):
            applications.update_status(application['id'], 'archived')

    def test_step_progress_and_close(self, applications, owner, license_type, requirement_id):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])
        first, second = application['steps']

        assert applications.toggle_step(first['id'], True)['progress_percentage'] == 50
        with pytest.raises(ValueError, match='100%'):
            applications.close_application(application['id'])

        assert applications.toggle_step(second['id'], True)['progress_percentage'] == 100
        assert applications.close_application(application['id'])['status'] == 'closed'
        # Closing twice is a no-op
        assert applications.close_application(application['id'])['status'] == 'closed'

    def test_unchecking_step_clears_completed_at(self, applications, owner, license_type, requirement_id):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])
        step_id = application['steps'][0]['id']
        applications.toggle_step(step_id, True)
        step = applications.toggle_step(step_id, False)
        assert step['is_completed'] is False
        assert step['completed_at'] is None
        assert step['progress_percentage'] == 0

    def test_document_review(self, applications, owner, license_type):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])
        document = applications.add_document(application['id'], 'License.pdf', 'https://files/x.pdf')
        reviewed = applications.review_document(document['id'], 'approved', 'Looks good')
        assert reviewed['status'] == 'approved'
        assert reviewed['expert_review_notes'] == 'Looks good'

        with pytest.raises(ValueError):
            applications.review_document(document['id'], 'lost')

    def test_delete_application(self, applications, owner, license_type):
        application = applications.request_application(owner['id'], 'Texas', license_type['id'])
        assert applications.delete_application(application['id']) is True
        assert applications.get_application(application['id']) is None


@pytest.mark.unit
class TestExpertSteps:
    """Tests for expert steps shared across a requirement's applications"""

    def test_expert_step_needs_applications(self, requirements, requirement_id):
        with pytest.raises(ValueError, match='No applications found'):
            requirements.create_expert_step(requirement_id, 'Client Intake', 'Kickoff call')

    def test_expert_step_reaches_every_application(self, db_session, requirements, applications, owner,
                                                   license_type, requirement_id):
        first = applications.request_application(owner['id'], 'Texas', license_type['id'])
        second = applications.request_application(owner['id'], 'Texas', license_type['id'])

        requirements.create_expert_step(requirement_id, 'Client Intake', 'Kickoff call', 'Intro')
        db_session.expire_all()

        for application_id in (first['id'], second['id']):
            steps = applications.get_application(application_id)['steps']
            expert_steps = [s for s in steps if s['is_expert_step']]
            assert [s['step_name'] for s in expert_steps] == ['Kickoff call']
            assert expert_steps[0]['phase'] == 'Client Intake'

        # Deduplicated across applications
        assert len(requirements.get_expert_steps(requirement_id)) == 1

    def test_new_application_inherits_expert_steps(self, requirements, applications, owner,
                                                   license_type, requirement_id):
        applications.request_application(owner['id'], 'Texas', license_type['id'])
        requirements.create_expert_step(requirement_id, 'Survey Preparation', 'Mock survey')

        later = applications.request_application(owner['id'], 'Texas', license_type['id'])
        expert_steps = [s for s in later['steps'] if s['is_expert_step']]
        assert [s['step_name'] for s in expert_steps] == ['Mock survey']

    def test_bulk_update_and_delete(self, requirements, applications, owner, license_type, requirement_id):
        applications.request_application(owner['id'], 'Texas', license_type['id'])
        applications.request_application(owner['id'], 'Texas', license_type['id'])
        requirements.create_expert_step(requirement_id, 'Client Intake', 'Kickoff call')

        updated = requirements.update_expert_step_for_requirement(
            requirement_id, 'Kickoff call', None, 'Client Intake',
            new_phase='Application Preparation', new_title='Kickoff meeting')
        assert updated == 2
        assert requirements.get_expert_steps(requirement_id)[0]['step_name'] == 'Kickoff meeting'

        deleted = requirements.delete_expert_step_for_requirement(
            requirement_id, 'Kickoff meeting', None, 'Application Preparation')
        assert deleted == 2
        assert requirements.get_expert_steps(requirement_id) == []

    def test_delete_for_requirement_matches_missing_description(self, requirements, applications, owner,
                                                               license_type, requirement_id):
        """A null description only matches steps without one"""
        applications.request_application(owner['id'], 'Texas', license_type['id'])
        requirements.create_expert_step(requirement_id, 'Client Intake', 'Kickoff call')
        requirements.create_expert_step(requirement_id, 'Client Intake', 'Kickoff call', 'With the owner')

        deleted = requirements.delete_expert_step_for_requirement(
            requirement_id, 'Kickoff call', None, 'Client Intake')

        assert deleted == 1
        remaining = requirements.get_expert_steps(requirement_id)
        assert [s['description'] for s in remaining] == ['With the owner']

    def test_listing_excludes_requirement(self, db_session, requirements, applications, owner,
                                          license_type, requirement_id):
        ohio = LicenseTypesRepository(db_session).create_license_type('Ohio', 'Skilled Nursing')
        ohio_requirement = requirements.find_requirement('Ohio', 'Skilled Nursing').id
        applications.request_application(owner['id'], 'Texas', license_type['id'])
        applications.request_application(owner['id'], 'Ohio', ohio['id'])
        requirements.create_expert_step(requirement_id, 'Client Intake', 'Kickoff call')
        requirements.create_expert_step(ohio_requirement, 'Survey Preparation', 'Mock survey')

        everything = requirements.get_all_expert_steps_with_requirement_info()
        assert sorted(s['step_name'] for s in everything) == ['Kickoff call', 'Mock survey']

        listed = requirements.get_all_expert_steps_with_requirement_info(exclude_requirement_id=requirement_id)
        assert [s['step_name'] for s in listed] == ['Mock survey']
        assert listed[0]['state'] == 'Ohio'
        assert listed[0]['license_type'] == 'Skilled Nursing'
        assert listed[0]['license_requirement_id'] == ohio_requirement

    def test_copy_expert_steps_to_other_requirement(self, db_session, requirements, applications, owner,
                                                    license_type, requirement_id):
        ohio = LicenseTypesRepository(db_session).create_license_type('Ohio', 'Skilled Nursing')
        ohio_requirement = requirements.find_requirement('Ohio', 'Skilled Nursing').id
        applications.request_application(owner['id'], 'Texas', license_type['id'])
        target = applications.request_application(owner['id'], 'Ohio', ohio['id'])
        source = requirements.create_expert_step(requirement_id, 'Client Intake', 'Kickoff call', 'Intro')

        copies = requirements.copy_expert_steps(ohio_requirement, [source['id']])

        assert len(copies) == 1
        assert copies[0]['application_id'] == target['id']
        assert copies[0]['step_name'] == 'Kickoff call'
        assert copies[0]['phase'] == 'Client Intake'
        assert copies[0]['step_order'] == 1

    def test_copy_expert_steps_without_selection(self, requirements, requirement_id):
        with pytest.raises(ValueError, match='No expert steps selected'):
            requirements.copy_expert_steps(requirement_id, [])

    def test_copy_expert_steps_needs_target_applications(self, requirements, applications, owner,
                                                         license_type, requirement_id):
        applications.request_application(owner['id'], 'Texas', license_type['id'])
        source = requirements.create_expert_step(requirement_id, 'Client Intake', 'Kickoff call')
        empty_target = requirements.get_or_create_requirement('Ohio', 'Skilled Nursing')

        with pytest.raises(ValueError, match='No applications found for target license type and state'):
            requirements.copy_expert_steps(empty_target, [source['id']])
