"""
HotelDesk - Hotel and Property Management Backend
Flask application factory and initialization
"""

import os
import click
import logging
import sqlite3
from flask import Flask, g
from flask_wtf.csrf import CSRFError
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import csrf

# Import database functions
from database import close_db, init_db

from utils.api_response import api_success, api_error
from utils.errors import ValidationError, NotFoundError, ConflictError, GatewayError


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    config_class = config[config_name]
    if config_name == 'production':
        config_class.validate()
    app.config.from_object(config_class)

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize CSRF Protection
    csrf.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.api import api_bp

    app.register_blueprint(api_bp, url_prefix='/api')

    @app.route('/')
    def index():
        """Service banner."""
        return api_success(data={
            'app': app.config.get('APP_NAME'),
            'version': app.config.get('APP_VERSION'),
            'api': '/api'
        })


def register_error_handlers(app):
    """Register error handlers."""

    @app.errorhandler(ValidationError)
    def validation_error(error):
        """Bad input, nothing was written."""
        return api_error(str(error), 400)

    @app.errorhandler(NotFoundError)
    def not_found_record(error):
        """Referenced record does not exist."""
        return api_error(str(error), 404)

    @app.errorhandler(ConflictError)
    def conflict_error(error):
        """Record changed state since it was read."""
        return api_error(str(error), 409)

    @app.errorhandler(GatewayError)
    @app.errorhandler(sqlite3.Error)
    def storage_error(error):
        """Storage failure: log details, show a generic message."""
        app.logger.error(f'Storage error: {error}', exc_info=True)
        db = g.get('db')
        if db:
            db.rollback()
        return api_error('The operation failed. Please try again.', 500)

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        """Handle missing or invalid CSRF token."""
        return api_error(error.description, 400)

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error('Not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 errors."""
        return api_error('Method not allowed', 405)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        return api_error('Internal server error', 500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-room')
    @click.argument('room_number', type=int)
    @click.argument('floor')
    @click.argument('room_type')
    def create_room_command(room_number, floor, room_type):
        """Create a new room."""
        from models.room import create_room

        with app.app_context():
            try:
                room_id = create_room(room_number, floor, room_type)
                click.echo(f'Room created successfully! ID: {room_id}')
            except (ValidationError, GatewayError, sqlite3.Error) as e:
                click.echo(f'Error creating room: {str(e)}', err=True)


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/hoteldesk.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        # Model modules log through their own loggers
        logging.getLogger('models').addHandler(file_handler)
        logging.getLogger('models').setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info('HotelDesk startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
