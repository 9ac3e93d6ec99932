"""
Room inventory data access functions.
Handles room listing, creation, and housekeeping status changes.
"""

from database import get_db
from utils.datetime_helpers import get_now_str
from utils.errors import NotFoundError, ValidationError
from utils.validators import parse_positive_int, require_text

ROOM_STATUSES = ('available', 'occupied', 'cleaning', 'maintenance')


def get_all_rooms() -> list:
    """
    Get all rooms ordered by room number.

    Returns:
        List of room dicts
    """
    db = get_db()
    cursor = db.execute('SELECT * FROM rooms ORDER BY room_number, id')
    return [dict(row) for row in cursor.fetchall()]


def get_room_by_id(room_id: int) -> dict:
    """
    Get room by ID.

    Args:
        room_id: Room ID

    Returns:
        Room dict or None if not found
    """
    db = get_db()
    row = db.execute('SELECT * FROM rooms WHERE id = ?', (room_id,)).fetchone()
    return dict(row) if row else None


def create_room(room_number, floor: str, room_type: str, status: str = 'available') -> int:
    """
    Create a room.

    Args:
        room_number: Display number (e.g. 101)
        floor: Floor label
        room_type: Room category (e.g. 'NON AC', 'AC')
        status: Initial status

    Returns:
        New room ID

    Raises:
        ValidationError: If any field is invalid
    """
    room_number = parse_positive_int(room_number, 'room_number')
    room_type = require_text(room_type, 'room_type', 50)
    floor = (str(floor).strip() if floor is not None else '')
    if status not in ROOM_STATUSES:
        raise ValidationError(f'Invalid room status: {status}')

    db = get_db()
    cursor = db.execute('''
        INSERT INTO rooms (room_number, floor, room_type, status, created_at)
        VALUES (?, ?, ?, ?, ?)
    ''', (room_number, floor, room_type, status, get_now_str()))
    db.commit()
    return cursor.lastrowid


def update_room_status(room_id: int, status: str) -> None:
    """
    Set a room's housekeeping status.

    Args:
        room_id: Room ID
        status: One of ROOM_STATUSES

    Raises:
        ValidationError: If the status is unknown
        NotFoundError: If the room does not exist
    """
    if status not in ROOM_STATUSES:
        raise ValidationError(f'Invalid room status: {status}')

    db = get_db()
    cursor = db.execute('UPDATE rooms SET status = ? WHERE id = ?', (status, room_id))
    db.commit()
    if cursor.rowcount == 0:
        raise NotFoundError(f'Room {room_id} not found')


def get_room_stats() -> dict:
    """
    Count rooms per status.

    Returns:
        dict: {total, available, occupied, cleaning, maintenance}
    """
    db = get_db()
    stats = {'total': 0}
    stats.update({status: 0 for status in ROOM_STATUSES})

    cursor = db.execute('SELECT status, COUNT(*) AS count FROM rooms GROUP BY status')
    for row in cursor.fetchall():
        stats[row['status']] = row['count']
        stats['total'] += row['count']

    return stats
