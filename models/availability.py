"""
Room availability for a date.

A room is available for a date when its housekeeping status is
'available', it is not reserved by an active advance booking for that
date, it is not held by an open check-in, and its type matches the
requested type.
"""

from database import get_db


def normalize_room_type(value: str) -> str:
    """Lower-case a room type and turn spaces into hyphens ('NON AC' -> 'non-ac')."""
    return '-'.join(str(value or '').lower().split())


def room_type_matches(room_type: str, wanted: str) -> bool:
    """
    Check a room's type against a requested type.

    Both sides are normalized and the requested type must occur as a
    substring of the room's type. An occurrence directly preceded by
    'non-' does not count, so 'AC' matches 'AC' and 'Deluxe AC' but not
    'NON AC', while 'lux' still matches 'Deluxe Suite'. An empty request
    or 'all' matches every type.

    Args:
        room_type: Type stored on the room
        wanted: Type requested by the caller

    Returns:
        True if the room qualifies
    """
    wanted_norm = normalize_room_type(wanted)
    if not wanted_norm or wanted_norm == 'all':
        return True

    have_norm = normalize_room_type(room_type)
    start = have_norm.find(wanted_norm)
    while start != -1:
        if not have_norm[:start].endswith('non-'):
            return True
        start = have_norm.find(wanted_norm, start + 1)
    return False


def get_reserved_room_ids(date: str, cursor=None) -> set:
    """
    Collect IDs of rooms that cannot be offered for a date.

    Args:
        date: Date (YYYY-MM-DD)
        cursor: Optional cursor of an open transaction

    Returns:
        set: Room IDs reserved by active advance bookings for the date
        or held by check-ins that have not checked out
    """
    cur = cursor or get_db().cursor()

    cur.execute('''
        SELECT abr.room_id
        FROM advance_booking_rooms abr
        JOIN advance_bookings ab ON abr.booking_id = ab.id
        WHERE ab.date_of_booking = ? AND ab.status = 'active'
    ''', (date,))
    reserved = {row['room_id'] for row in cur.fetchall()}

    cur.execute('SELECT room_id FROM checkins WHERE is_checked_out = 0')
    reserved.update(row['room_id'] for row in cur.fetchall())

    return reserved


def find_available_rooms(date: str, room_type: str = None, cursor=None) -> list:
    """
    Find rooms that can be booked for a date.

    An empty list is a normal answer ("no rooms"), not an error.

    Args:
        date: Date (YYYY-MM-DD)
        room_type: Requested type; None or 'all' for any type
        cursor: Optional cursor of an open transaction

    Returns:
        list: Room dicts sorted by room number ascending
    """
    cur = cursor or get_db().cursor()

    cur.execute('SELECT * FROM rooms')
    rooms = [dict(row) for row in cur.fetchall()]

    reserved = get_reserved_room_ids(date, cur)

    available = [
        room for room in rooms
        if room['status'] == 'available'
        and room['id'] not in reserved
        and room_type_matches(room['room_type'], room_type)
    ]
    available.sort(key=lambda room: (room['room_number'], room['id']))
    return available
