"""
JSON API blueprint.
Split into smaller modules by entity for maintainability.
"""

from flask import Blueprint

# Create the API blueprint
api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.api import routes
from blueprints.api import rooms
from blueprints.api import checkins
from blueprints.api import advance_bookings
from blueprints.api import houses
from blueprints.api import payments
from blueprints.api import dashboard

# Register all route functions on the blueprint
routes.register_routes(api_bp)
rooms.register_routes(api_bp)
checkins.register_routes(api_bp)
advance_bookings.register_routes(api_bp)
houses.register_routes(api_bp)
payments.register_routes(api_bp)
dashboard.register_routes(api_bp)
