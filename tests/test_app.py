"""
Test application factory and configuration.
"""

import pytest
from app import create_app


class TestAppFactory:
    """Test Flask application factory."""

    def test_create_app_development(self):
        """Test app creation with development config."""
        app = create_app('development')
        assert app is not None
        assert app.config['DEBUG'] is True
        assert app.config['TESTING'] is False

    def test_create_app_test(self):
        """Test app creation with test config."""
        app = create_app('test')
        assert app.config['TESTING'] is True
        assert app.config['WTF_CSRF_ENABLED'] is False

    def test_create_app_default(self):
        """Test app creation with default config."""
        app = create_app()
        assert app is not None

    def test_app_has_api_blueprint(self):
        """The JSON API is the only blueprint."""
        app = create_app('test')
        assert list(app.blueprints.keys()) == ['api']

    def test_app_has_csrf_extension(self):
        """CSRF protection is registered."""
        app = create_app('test')
        assert 'csrf' in app.extensions

    def test_production_requires_secret_key(self, monkeypatch):
        """Production refuses to start without a strong SECRET_KEY."""
        monkeypatch.delenv('SECRET_KEY', raising=False)
        with pytest.raises(ValueError):
            create_app('production')


class TestAppConfiguration:
    """Test application configuration."""

    def test_app_settings(self, app):
        """Application name and hotel settings are present."""
        assert app.config['APP_NAME'] == 'HotelDesk'
        assert app.config['TIMEZONE'] == 'Asia/Kolkata'
        assert app.config['MONTH_STAY_DAYS'] == 30
        assert app.config['DASHBOARD_DAILY_WINDOW'] == 7

    def test_database_path_isolated(self, app):
        """Tests never touch the real database."""
        assert app.config['DATABASE_PATH'].endswith('hoteldesk_test.db')


class TestCliCommands:
    """Test Flask CLI commands."""

    def test_commands_registered(self, app):
        """init-db and create-room are available."""
        assert 'init-db' in app.cli.commands
        assert 'create-room' in app.cli.commands

    def test_init_db_command(self, app):
        """init-db recreates the seeded database."""
        runner = app.test_cli_runner()
        result = runner.invoke(args=['init-db'])

        assert result.exit_code == 0
        assert 'Database initialized successfully!' in result.output

    def test_create_room_command(self, app):
        """create-room adds a room to the inventory."""
        from models.room import get_all_rooms

        runner = app.test_cli_runner()
        result = runner.invoke(args=['create-room', '301', '3', 'Deluxe AC'])

        assert result.exit_code == 0
        assert 'Room created successfully!' in result.output
        rooms = get_all_rooms()
        assert any(r['room_number'] == 301 and r['room_type'] == 'Deluxe AC' for r in rooms)


class TestRootRoutes:
    """Test service-level routes."""

    def test_index(self, client):
        """Root returns the service banner."""
        response = client.get('/')
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['data']['app'] == 'HotelDesk'

    def test_health(self, client):
        """Health check reports ok."""
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['data']['status'] == 'ok'

    def test_unknown_route_is_json_404(self, client):
        """Unknown URLs answer with the JSON error envelope."""
        response = client.get('/api/nope')
        assert response.status_code == 404
        assert response.get_json() == {'success': False, 'error': 'Not found'}

    def test_wrong_method_is_405(self, client):
        """Wrong HTTP method is reported as JSON."""
        response = client.delete('/api/rooms')
        assert response.status_code == 405
        assert response.get_json()['success'] is False
