"""
Dashboard API route.
"""

from models.dashboard import get_dashboard_summary
from utils.api_response import api_success


def register_routes(bp):
    """Register dashboard API routes on the blueprint."""

    @bp.route('/dashboard')
    def dashboard():
        """Room counts, period takings and the 7-day revenue series."""
        return api_success(data=get_dashboard_summary())
