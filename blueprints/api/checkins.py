"""
Room check-in API routes.
"""

from flask import request

from models.checkin import (
    create_checkin, add_checkin_payment, checkout_checkin,
    get_checkin, get_active_checkins
)
from utils.api_response import api_success, api_error
from utils.errors import NotFoundError


def register_routes(bp):
    """Register check-in API routes on the blueprint."""

    @bp.route('/checkins')
    def checkins_list():
        """Open check-ins."""
        return api_success(data={'checkins': get_active_checkins()})

    @bp.route('/checkins/<int:checkin_id>')
    def checkins_detail(checkin_id):
        """One check-in with its payments."""
        checkin = get_checkin(checkin_id)
        if not checkin:
            raise NotFoundError(f'Check-in {checkin_id} not found')
        return api_success(data={'checkin': checkin})

    @bp.route('/checkins', methods=['POST'])
    def checkins_create():
        """
        Check a guest into a room.

        Request body:
            room_id, guest_name, phone_number, id_number, number_of_guests,
            days_of_stay, rent, initial_payment, payment_mode
        """
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return api_error('Request body required', 400)

        checkin_id = create_checkin(
            room_id=data.get('room_id'),
            guest_name=data.get('guest_name'),
            phone_number=data.get('phone_number'),
            id_number=data.get('id_number'),
            number_of_guests=data.get('number_of_guests', 1),
            days_of_stay=data.get('days_of_stay', 1),
            rent=data.get('rent'),
            initial_payment=data.get('initial_payment', 0),
            payment_mode=data.get('payment_mode')
        )
        return api_success(data={'checkin': get_checkin(checkin_id)},
                           message='Check-in successful', status=201)

    @bp.route('/checkins/<int:checkin_id>/payments', methods=['POST'])
    def checkins_add_payment(checkin_id):
        """Record a further payment (or extension payment) for a stay."""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return api_error('Request body must be a JSON object', 400)
        add_checkin_payment(
            checkin_id,
            data.get('amount'),
            data.get('mode'),
            data.get('type', 'payment')
        )
        return api_success(data={'checkin': get_checkin(checkin_id)},
                           message='Payment recorded', status=201)

    @bp.route('/checkins/<int:checkin_id>/checkout', methods=['POST'])
    def checkins_checkout(checkin_id):
        """Close a stay; the room goes to cleaning."""
        checkout_checkin(checkin_id)
        return api_success(data={'checkin': get_checkin(checkin_id)}, message='Checked out')
