"""
Room inventory and availability API routes.
"""

from flask import request

from models.availability import find_available_rooms
from models.room import get_all_rooms, create_room, update_room_status, get_room_by_id
from utils.api_response import api_success, api_error
from utils.datetime_helpers import get_today
from utils.validators import require_date


def register_routes(bp):
    """Register room API routes on the blueprint."""

    @bp.route('/rooms')
    def rooms_list():
        """Get all rooms ordered by number."""
        return api_success(data={'rooms': get_all_rooms()})

    @bp.route('/rooms', methods=['POST'])
    def rooms_create():
        """
        Create a room.

        Request body:
            room_number: Display number
            floor: Floor label
            room_type: e.g. 'NON AC'
            status: Optional initial status
        """
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return api_error('Request body required', 400)

        room_id = create_room(
            data.get('room_number'),
            data.get('floor', ''),
            data.get('room_type'),
            data.get('status', 'available')
        )
        return api_success(data={'room': get_room_by_id(room_id)},
                           message='Room created', status=201)

    @bp.route('/rooms/<int:room_id>/status', methods=['PUT'])
    def rooms_update_status(room_id):
        """Set a room's housekeeping status."""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return api_error('Request body must be a JSON object', 400)
        update_room_status(room_id, data.get('status'))
        return api_success(data={'room': get_room_by_id(room_id)}, message='Room status updated')

    @bp.route('/rooms/available')
    def rooms_available():
        """
        Rooms free for a date.

        Query params:
            date: YYYY-MM-DD (default: today)
            room_type: Requested type (default: any)

        An empty result is a normal answer and carries a message.
        """
        date_str = request.args.get('date') or get_today().isoformat()
        date_str = require_date(date_str)
        room_type = request.args.get('room_type')

        rooms = find_available_rooms(date_str, room_type)
        message = None if rooms else 'No rooms available for the selected date and type'
        return api_success(
            data={'date': date_str, 'room_type': room_type, 'rooms': rooms},
            message=message
        )
