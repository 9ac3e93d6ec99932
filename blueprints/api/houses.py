"""
House rental API routes.
"""

from flask import request

from models.house import (
    get_houses_with_status, get_house_booking, check_in_house,
    extend_house_stay, add_house_extra_fee, record_house_payment, checkout_house
)
from utils.api_response import api_success, api_error
from utils.errors import NotFoundError


def register_routes(bp):
    """Register house API routes on the blueprint."""

    @bp.route('/houses')
    def houses_list():
        """Houses with availability and their open booking."""
        return api_success(data={'houses': get_houses_with_status()})

    @bp.route('/houses/<house_id>/check-in', methods=['POST'])
    def houses_check_in(house_id):
        """
        Check a guest into a house.

        Request body:
            guest_name, phone_number, id_number, number_of_guests,
            stay_type ('days'|'month'), days_of_stay, rent,
            initial_payment, payment_mode
        """
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return api_error('Request body required', 400)

        booking_id = check_in_house(
            house_id,
            guest_name=data.get('guest_name'),
            phone_number=data.get('phone_number'),
            id_number=data.get('id_number'),
            number_of_guests=data.get('number_of_guests', 1),
            rent=data.get('rent'),
            initial_payment=data.get('initial_payment'),
            payment_mode=data.get('payment_mode'),
            stay_type=data.get('stay_type', 'days'),
            days_of_stay=data.get('days_of_stay', 1)
        )
        return api_success(
            data={'booking': get_house_booking(booking_id)},
            message='Check-in successful',
            status=201
        )

    @bp.route('/house-bookings/<int:booking_id>')
    def house_bookings_detail(booking_id):
        """One house booking with fees, extensions and payments."""
        booking = get_house_booking(booking_id)
        if not booking:
            raise NotFoundError(f'House booking {booking_id} not found')
        return api_success(data={'booking': booking})

    @bp.route('/house-bookings/<int:booking_id>/extend', methods=['POST'])
    def house_bookings_extend(booking_id):
        """
        Extend a stay.

        Request body:
            additional_days, rent_for_days, version (optional)
        """
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return api_error('Request body must be a JSON object', 400)
        booking = extend_house_stay(
            booking_id,
            data.get('additional_days'),
            data.get('rent_for_days'),
            expected_version=data.get('version')
        )
        return api_success(data={'booking': booking}, message='Stay extended')

    @bp.route('/house-bookings/<int:booking_id>/extra-fees', methods=['POST'])
    def house_bookings_extra_fee(booking_id):
        """
        Add an extra fee.

        Request body:
            description, amount, version (optional)
        """
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return api_error('Request body must be a JSON object', 400)
        booking = add_house_extra_fee(
            booking_id,
            data.get('description'),
            data.get('amount'),
            expected_version=data.get('version')
        )
        return api_success(data={'booking': booking}, message='Extra fee added')

    @bp.route('/house-bookings/<int:booking_id>/payments', methods=['POST'])
    def house_bookings_payment(booking_id):
        """
        Collect a payment against the pending amount.

        Request body:
            amount, mode, version (optional)
        """
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return api_error('Request body must be a JSON object', 400)
        booking = record_house_payment(
            booking_id,
            data.get('amount'),
            data.get('mode'),
            expected_version=data.get('version')
        )
        return api_success(data={'booking': booking}, message='Payment recorded')

    @bp.route('/house-bookings/<int:booking_id>/checkout', methods=['POST'])
    def house_bookings_checkout(booking_id):
        """Close a house booking."""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return api_error('Request body must be a JSON object', 400)
        booking = checkout_house(booking_id, expected_version=data.get('version'))
        return api_success(data={'booking': booking}, message='Checked out')
