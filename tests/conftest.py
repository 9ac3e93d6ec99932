"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'hoteldesk_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with a freshly seeded database."""
    from app import create_app
    from database import init_db

    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def booking_details():
    """Valid advance booking fields for one NON AC room on 2025-06-01."""
    return {
        'name': 'Ravi Kumar',
        'mobile': '9876543210',
        'aadhar': '123412341234',
        'date_of_booking': '2025-06-01',
        'room_type': 'NON AC',
        'number_of_rooms': 1,
        'advance_amount': 500,
        'payment_mode': 'cash',
    }


@pytest.fixture
def guest():
    """Valid guest fields for check-ins."""
    return {
        'guest_name': 'Anita Shah',
        'phone_number': '9123456780',
        'id_number': 'ID-4455',
        'number_of_guests': 2,
    }
