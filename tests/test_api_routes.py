"""
Route tests for user administration, the application workflow, reports
and email notifications
"""
import pytest
from unittest.mock import patch, Mock


def _create_license_type(admin_client, state='Texas', name='Home Care Services'):
    response = admin_client.post('/api/license-types', json={
        'state': state,
        'name': name,
        'application_fee': '$750'
    })
    assert response.status_code == 201
    return response.get_json()['license_type']


@pytest.mark.integration
class TestAdminUserRoutes:
    """Tests for /api/admin/users"""

    def test_list_users_includes_seeded_admin(self, app, admin_client):
        """Seeded admin shows up in the user list"""
        response = admin_client.get('/api/admin/users')

        assert response.status_code == 200
        emails = [u['email'] for u in response.get_json()['users']]
        assert app.config['DEFAULT_ADMIN_EMAIL'] in emails

    def test_create_user(self, admin_client):
        response = admin_client.post('/api/admin/users', json={
            'email': 'New.Expert@Example.com',
            'password': 'password123',
            'full_name': 'New Expert',
            'role': 'expert'
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['created'] is True
        assert data['user_id']

    def test_create_existing_user_links_account(self, admin_client, make_user):
        """An existing email is linked, not rejected"""
        existing = make_user('linked@example.com', 'staff_member')

        response = admin_client.post('/api/admin/users', json={
            'email': 'linked@example.com',
            'password': 'password123',
            'role': 'staff_member'
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data['created'] is False
        assert data['user_id'] == existing['id']

    def test_create_user_rejects_unknown_role(self, admin_client):
        response = admin_client.post('/api/admin/users', json={
            'email': 'someone@example.com',
            'password': 'password123',
            'role': 'superuser'
        })

        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_cannot_delete_own_account(self, admin_client):
        with admin_client.session_transaction() as sess:
            admin_id = sess['user_id']

        response = admin_client.delete(f'/api/admin/users/{admin_id}')

        assert response.status_code == 400
        assert response.get_json()['error'] == 'You cannot delete your own account'

    def test_delete_unknown_user(self, admin_client):
        response = admin_client.delete('/api/admin/users/does-not-exist')
        assert response.status_code == 404


@pytest.mark.integration
class TestApplicationWorkflowRoutes:
    """License request through expert progress, over HTTP"""

    def test_owner_cannot_create_license_type(self, owner_client):
        response = owner_client.post('/api/license-types', json={'state': 'Texas', 'name': 'X'})
        assert response.status_code == 403

    def test_request_requires_state_and_type(self, owner_client):
        response = owner_client.post('/api/applications', json={'state': 'Texas'})
        assert response.status_code == 400

    def test_request_unknown_license_type(self, owner_client):
        response = owner_client.post('/api/applications', json={
            'state': 'Texas',
            'license_type_id': 'missing'
        })

        assert response.status_code == 400
        assert response.get_json()['error'] == 'License type not found'

    def test_full_workflow(self, client, admin_client, admin_user, owner_user, expert_user,
                           login_as):
        """Admin approves with an expert; the owner is notified; the expert completes a step"""
        license_type = _create_license_type(admin_client)

        requirement = admin_client.post('/api/license-requirements', json={
            'state': 'Texas',
            'license_type': 'Home Care Services'
        }).get_json()
        for name in ('Submit application', 'Background check'):
            response = admin_client.post(
                f"/api/license-requirements/{requirement['requirement_id']}/steps",
                json={'step_name': name}
            )
            assert response.status_code == 201

        login_as(client, owner_user)
        response = client.post('/api/applications', json={
            'state': 'Texas',
            'license_type_id': license_type['id']
        })
        assert response.status_code == 201
        application = response.get_json()['application']
        assert application['status'] == 'requested'
        assert len(application['steps']) == 2

        login_as(client, admin_user)
        response = client.post(f"/api/applications/{application['id']}/approve",
                               json={'expert_id': expert_user['id']})
        assert response.status_code == 200
        assert response.get_json()['application']['status'] == 'in_progress'

        login_as(client, owner_user)
        notifications = client.get('/api/notifications').get_json()
        assert notifications['unread_count'] == 1
        assert notifications['notifications'][0]['title'] == 'Application approved'

        login_as(client, expert_user)
        step_id = application['steps'][0]['id']
        response = client.put(f"/api/applications/{application['id']}/steps/{step_id}",
                              json={'is_completed': True})
        assert response.status_code == 200
        assert response.get_json()['progress_percentage'] == 50

    def test_approve_without_expert_fails(self, client, admin_client, admin_user, owner_user,
                                         login_as):
        license_type = _create_license_type(admin_client)

        login_as(client, owner_user)
        application = client.post('/api/applications', json={
            'state': 'Texas',
            'license_type_id': license_type['id']
        }).get_json()['application']

        login_as(client, admin_user)
        response = client.post(f"/api/applications/{application['id']}/approve", json={})

        assert response.status_code == 400

    def test_expert_joins_conversation_opened_before_approval(self, client, admin_client, admin_user,
                                                              owner_user, expert_user, login_as):
        """The owner writes before approval; the expert assigned on approval can read it"""
        license_type = _create_license_type(admin_client)

        login_as(client, owner_user)
        application = client.post('/api/applications', json={
            'state': 'Texas',
            'license_type_id': license_type['id']
        }).get_json()['application']
        response = client.post(f"/api/applications/{application['id']}/conversation")
        assert response.status_code == 200
        conversation_id = response.get_json()['conversation']['id']
        response = client.post(f"/api/conversations/{conversation_id}/messages", json={'content': 'hello'})
        assert response.status_code == 201

        login_as(client, admin_user)
        response = client.post(f"/api/applications/{application['id']}/approve",
                               json={'expert_id': expert_user['id']})
        assert response.status_code == 200

        login_as(client, expert_user)
        response = client.post(f"/api/applications/{application['id']}/conversation")
        assert response.status_code == 200
        assert response.get_json()['conversation']['id'] == conversation_id

        response = client.get(f"/api/conversations/{conversation_id}/messages")
        assert response.status_code == 200
        assert [m['content'] for m in response.get_json()['messages']] == ['hello']

        conversations = client.get('/api/conversations').get_json()['conversations']
        assert [c['id'] for c in conversations] == [conversation_id]

    @pytest.mark.parametrize('method,path,body', [
        ('post', 'approve', {'expert_id': 'someone'}),
        ('post', 'reject', {'reason': 'Out of area'}),
        ('post', 'revision', {'reason': 'Missing insurance'}),
        ('post', 'submit', {}),
        ('put', 'status', {'status': 'approved'}),
        ('post', 'close', {}),
    ])
    def test_missing_application_is_not_found(self, admin_client, method, path, body):
        response = getattr(admin_client, method)(f"/api/applications/missing/{path}", json=body)

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Application not found'

    def test_other_owner_cannot_see_application(self, client, admin_client, owner_user,
                                                make_user, login_as):
        license_type = _create_license_type(admin_client)

        login_as(client, owner_user)
        application = client.post('/api/applications', json={
            'state': 'Texas',
            'license_type_id': license_type['id']
        }).get_json()['application']

        login_as(client, make_user('other@example.com', 'company_owner'))
        response = client.get(f"/api/applications/{application['id']}")

        assert response.status_code == 404


@pytest.mark.integration
class TestReportRoutes:
    """Tests for /api/reports"""

    def test_list_reports(self, owner_client):
        response = owner_client.get('/api/reports')
        assert response.get_json()['reports'] == [
            'staff-certifications', 'expiring-certifications', 'staff-roster'
        ]

    def test_staff_roster_csv(self, owner_client, sample_staff_data):
        response = owner_client.post('/api/staff', json=sample_staff_data)
        assert response.status_code == 201

        response = owner_client.get('/api/reports/staff-roster?format=csv')

        assert response.status_code == 200
        assert response.headers['Content-Type'].startswith('text/csv')
        assert response.headers['Content-Disposition'].startswith(
            'attachment; filename=staff-roster-')
        lines = response.get_data(as_text=True).splitlines()
        assert lines[0] == 'Staff Name,Email,Phone,Role,Job Title,Status'
        assert lines[1].startswith('Jane Doe,jane.doe@example.com')

    def test_staff_roster_json(self, owner_client, sample_staff_data):
        owner_client.post('/api/staff', json=sample_staff_data)

        data = owner_client.get('/api/reports/staff-roster').get_json()

        assert data['count'] == 1
        assert data['rows'][0]['staff_name'] == 'Jane Doe'

    def test_unknown_report(self, owner_client):
        response = owner_client.get('/api/reports/payroll')

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Report not found'

    def test_reports_are_owner_only(self, admin_client):
        assert admin_client.get('/api/reports').status_code == 403


@pytest.mark.integration
class TestEmailNotificationRoute:
    """Tests for /api/send-email-notification"""

    payload = {
        'expertEmail': 'expert@example.com',
        'applicationName': 'Home Care Services',
        'documentName': 'Proof of insurance',
        'applicationId': 'app-1',
        'expertName': 'Evan Expert',
        'ownerName': 'Olivia Owner'
    }

    def test_missing_fields(self, owner_client):
        response = owner_client.post('/api/send-email-notification', json={'expertEmail': 'x@y.com'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'Missing required fields'

    def test_requires_login(self, client):
        response = client.post('/api/send-email-notification', json=self.payload)
        assert response.status_code == 401

    def test_without_api_key(self, app, owner_client):
        app.config['RESEND_API_KEY'] = ''

        response = owner_client.post('/api/send-email-notification', json=self.payload)

        assert response.status_code == 500
        assert response.get_json()['error'] == 'Failed to send email'

    @patch('services.email_service.requests.post')
    def test_sends_email(self, mock_post, app, owner_client):
        app.config['RESEND_API_KEY'] = 're_test'
        mock_post.return_value = Mock(ok=True, status_code=200, json=Mock(return_value={'id': 'email-1'}))

        response = owner_client.post('/api/send-email-notification', json=self.payload)

        assert response.status_code == 200
        assert response.get_json() == {'success': True}
        sent = mock_post.call_args.kwargs['json']
        assert sent['to'] == 'expert@example.com'
        assert sent['subject'] == 'New Document Uploaded: Proof of insurance'
        assert '/pages/expert/applications/app-1' in sent['text']

    @patch('services.email_service.requests.post')
    def test_request_values_are_escaped_in_html(self, mock_post, app, owner_client):
        app.config['RESEND_API_KEY'] = 're_test'
        mock_post.return_value = Mock(ok=True, status_code=200, json=Mock(return_value={'id': 'email-1'}))
        payload = dict(self.payload,
                       ownerName='<script>alert(1)</script>',
                       documentName='<img src=x onerror=alert(1)>',
                       applicationName='Home & Hospice')

        response = owner_client.post('/api/send-email-notification', json=payload)

        assert response.status_code == 200
        sent = mock_post.call_args.kwargs['json']
        assert '<script>' not in sent['html']
        assert '&lt;script&gt;alert(1)&lt;/script&gt; has uploaded' in sent['html']
        assert '<img' not in sent['html']
        assert 'Home &amp; Hospice' in sent['html']
        # The plain-text body is not HTML and keeps the values as sent
        assert '<script>alert(1)</script> has uploaded' in sent['text']

    @patch('services.email_service.requests.post')
    def test_testing_mode_is_a_warning(self, mock_post, app, owner_client):
        app.config['RESEND_API_KEY'] = 're_test'
        mock_post.return_value = Mock(
            ok=False,
            status_code=403,
            reason='Forbidden',
            json=Mock(return_value={
                'statusCode': 403,
                'name': 'validation_error',
                'message': 'You can only send testing emails to your own email address.'
            })
        )

        response = owner_client.post('/api/send-email-notification', json=self.payload)

        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is False
        assert 'testing mode' in data['warning']
