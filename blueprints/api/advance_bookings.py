"""
Advance booking API routes.
"""

from flask import request

from models.advance_booking import (
    create_advance_booking, cancel_advance_booking, complete_advance_booking,
    get_advance_booking, get_advance_bookings
)
from utils.api_response import api_success, api_error
from utils.errors import NotFoundError


def register_routes(bp):
    """Register advance booking API routes on the blueprint."""

    @bp.route('/advance-bookings')
    def advance_bookings_list():
        """
        List advance bookings by date of booking.

        Query params:
            search: Name, mobile, date or room number
            status: pending, active, cancelled, completed
            page: Page number (default 1)
        """
        result = get_advance_bookings(
            search=request.args.get('search'),
            status=request.args.get('status'),
            page=request.args.get('page', 1, type=int)
        )
        return api_success(data=result)

    @bp.route('/advance-bookings/<int:booking_id>')
    def advance_bookings_detail(booking_id):
        """One booking with rooms, totals and payments."""
        booking = get_advance_booking(booking_id)
        if not booking:
            raise NotFoundError(f'Advance booking {booking_id} not found')
        return api_success(data={'booking': booking})

    @bp.route('/advance-bookings', methods=['POST'])
    def advance_bookings_create():
        """
        Create an advance booking for selected rooms.

        Request body:
            name, mobile, aadhar, date_of_booking, room_type,
            number_of_rooms, advance_amount, payment_mode
            rooms: [{room_id, price, persons}, ...]
        """
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return api_error('Request body required', 400)

        booking_id = create_advance_booking(data, data.get('rooms', []))
        return api_success(
            data={'booking': get_advance_booking(booking_id)},
            message='Advance booking created',
            status=201,
            booking_id=booking_id
        )

    @bp.route('/advance-bookings/<int:booking_id>/cancel', methods=['POST'])
    def advance_bookings_cancel(booking_id):
        """
        Cancel a booking.

        Request body:
            refund_amount: 0..advance_amount
            refund_mode: Optional 'cash' or 'gpay'
        """
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return api_error('Request body must be a JSON object', 400)
        cancel_advance_booking(
            booking_id,
            data.get('refund_amount'),
            data.get('refund_mode')
        )
        return api_success(
            data={'booking': get_advance_booking(booking_id)},
            message='Booking cancelled and refund recorded'
        )

    @bp.route('/advance-bookings/<int:booking_id>/complete', methods=['POST'])
    def advance_bookings_complete(booking_id):
        """Mark a booking as completed."""
        complete_advance_booking(booking_id)
        return api_success(
            data={'booking': get_advance_booking(booking_id)},
            message='Booking completed'
        )
