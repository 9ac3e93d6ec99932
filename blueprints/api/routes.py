"""
General API routes: health check and CSRF token handoff.
"""

from flask import current_app
from flask_wtf.csrf import generate_csrf

from utils.api_response import api_success


def register_routes(bp):
    """Register general API routes on the blueprint."""

    @bp.route('/health')
    def health_check():
        """
        Health check endpoint.

        Returns:
            JSON with status and version
        """
        return api_success(data={
            'status': 'ok',
            'app': current_app.config.get('APP_NAME'),
            'version': current_app.config.get('APP_VERSION')
        })

    @bp.route('/csrf-token')
    def csrf_token():
        """Hand the CSRF token to the browser client (send it back as X-CSRFToken)."""
        return api_success(data={'csrf_token': generate_csrf()})
