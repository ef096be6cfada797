"""
Tests for health check endpoints
"""
import pytest
import time
import psutil
from unittest.mock import patch
from flask import Flask
from health_checks import (
    get_system_metrics,
    get_uptime,
    check_database,
    register_health_checks
)


@pytest.mark.unit
class TestSystemMetrics:
    """Tests for system metrics collection"""

    def test_get_system_metrics_returns_dict(self):
        """Test that get_system_metrics returns a dictionary"""
        assert isinstance(get_system_metrics(), dict)

    def test_system_metrics_has_memory_info(self):
        """Test that system metrics includes memory info"""
        metrics = get_system_metrics()
        if metrics:
            assert 'memory_mb' in metrics
            assert 'memory_percent' in metrics

    @patch('health_checks.psutil.Process')
    def test_system_metrics_handles_errors(self, mock_process):
        """Test that get_system_metrics handles psutil errors gracefully"""
        mock_process.side_effect = psutil.Error("Test error")
        assert get_system_metrics() == {}


@pytest.mark.unit
class TestUptime:
    """Tests for uptime calculation"""

    def test_uptime_has_required_fields(self):
        """Test that uptime includes all required fields"""
        uptime = get_uptime()
        for key in ('uptime_seconds', 'uptime_minutes', 'uptime_hours', 'started_at'):
            assert key in uptime

    def test_uptime_increases_over_time(self):
        """Test that uptime increases over time"""
        first = get_uptime()
        time.sleep(0.05)
        assert get_uptime()['uptime_seconds'] > first['uptime_seconds']


@pytest.mark.unit
class TestDatabaseCheck:
    """Tests for the database connectivity check"""

    @patch('health_checks.is_db_configured', return_value=False)
    def test_unconfigured_database(self, _configured):
        assert check_database() == {'configured': False, 'connected': False}

    @patch('health_checks.check_db_connection', side_effect=RuntimeError('Cannot connect to database: boom'))
    @patch('health_checks.is_db_configured', return_value=True)
    def test_unreachable_database(self, _configured, _check):
        result = check_database()
        assert result['configured'] is True
        assert result['connected'] is False
        assert 'boom' in result['error']

    @patch('health_checks.check_db_connection', return_value=True)
    @patch('health_checks.is_db_configured', return_value=True)
    def test_reachable_database(self, _configured, _check):
        assert check_database() == {'configured': True, 'connected': True}


@pytest.mark.integration
class TestHealthCheckEndpoints:
    """Integration tests for health check endpoints"""

    @pytest.fixture
    def health_app(self):
        """Create a bare Flask app with only the health check blueprint"""
        app = Flask(__name__)
        app.config['TESTING'] = True
        register_health_checks(app)
        return app

    @pytest.fixture
    def health_client(self, health_app):
        return health_app.test_client()

    def test_health_endpoint_returns_200(self, health_client):
        response = health_client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['service'] == 'home-care-licensing'

    def test_ping_endpoint_returns_pong(self, health_client):
        response = health_client.get('/api/ping')
        assert response.status_code == 200
        assert response.data == b'pong'

    @patch('health_checks.is_db_configured', return_value=False)
    def test_ready_without_database_is_503(self, _configured, health_client):
        response = health_client.get('/api/ready')
        assert response.status_code == 503
        assert response.get_json()['status'] == 'not_ready'

    def test_ready_with_database_is_200(self, client):
        """Test that the full app reports ready against its SQLite database"""
        response = client.get('/api/ready')
        assert response.status_code == 200
        assert response.get_json()['checks']['database']['connected'] is True

    def test_metrics_endpoint(self, health_client):
        response = health_client.get('/api/metrics')
        data = response.get_json()
        assert response.status_code == 200
        assert 'uptime' in data
        assert 'database' in data
