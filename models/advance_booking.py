"""
Advance booking operations.
Handles creation (with its advance ledger entry), cancellation with refund,
completion, and listing of advance room bookings.
"""

import logging
import math

from flask import current_app

from database import get_db, transaction
from utils.datetime_helpers import get_now_str, get_today
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.validators import (
    parse_amount, parse_positive_int, require_date, require_payment_mode,
    require_phone, require_text
)
from .availability import find_available_rooms, room_type_matches
from .payment import record_payment, get_stay_payments

logger = logging.getLogger(__name__)

BOOKING_STATUSES = ('pending', 'active', 'cancelled', 'completed')


# =============================================================================
# CREATE
# =============================================================================

def _validate_selected_rooms(selected_rooms, number_of_rooms: int) -> list:
    if not isinstance(selected_rooms, (list, tuple)):
        raise ValidationError('rooms must be a list')
    if len(selected_rooms) != number_of_rooms:
        raise ValidationError(
            f'Select exactly {number_of_rooms} room(s); {len(selected_rooms)} selected'
        )

    cleaned = []
    seen = set()
    for item in selected_rooms:
        if not isinstance(item, dict):
            raise ValidationError('Each selected room must be an object')
        room_id = parse_positive_int(item.get('room_id'), 'room_id')
        if room_id in seen:
            raise ValidationError(f'Room {room_id} selected more than once')
        seen.add(room_id)
        cleaned.append({
            'room_id': room_id,
            'price': parse_amount(item.get('price'), 'Room price'),
            'persons': parse_positive_int(item.get('persons', 1), 'persons'),
        })
    return cleaned


def create_advance_booking(details: dict, selected_rooms: list) -> int:
    """
    Create an active advance booking and its advance ledger entry.

    Every field is validated before anything is written. The booking, its
    room line items and the 'advance' payment entry are written in one
    transaction, after re-checking that every selected room is still
    free for the date. The advance may not exceed the summed room
    prices.

    Args:
        details: name, mobile, aadhar, date_of_booking, room_type,
            number_of_rooms, advance_amount, payment_mode
        selected_rooms: [{'room_id', 'price', 'persons'}, ...]

    Returns:
        int: New booking ID

    Raises:
        ValidationError: If a field is missing or out of range
        NotFoundError: If a selected room does not exist
        ConflictError: If a selected room is no longer available
    """
    details = details or {}
    name = require_text(details.get('name'), 'name')
    mobile = require_phone(details.get('mobile'), 'mobile')
    aadhar = require_text(details.get('aadhar'), 'aadhar', 20)
    date_of_booking = require_date(details.get('date_of_booking'), 'date_of_booking')
    room_type = require_text(details.get('room_type'), 'room_type', 50)
    number_of_rooms = parse_positive_int(details.get('number_of_rooms'), 'number_of_rooms')
    advance_amount = parse_amount(details.get('advance_amount'), 'advance_amount')
    payment_mode = require_payment_mode(details.get('payment_mode'))

    rooms = _validate_selected_rooms(selected_rooms, number_of_rooms)
    total_price = round(sum(room['price'] for room in rooms), 2)
    # Stricter than the old desk screens, which accepted any advance
    if advance_amount > total_price:
        raise ValidationError('advance_amount cannot exceed the total room price')

    with transaction() as cursor:
        available_ids = {
            room['id'] for room in find_available_rooms(date_of_booking, None, cursor)
        }

        for room in rooms:
            cursor.execute('SELECT * FROM rooms WHERE id = ?', (room['room_id'],))
            row = cursor.fetchone()
            if not row:
                raise NotFoundError(f"Room {room['room_id']} not found")
            if not room_type_matches(row['room_type'], room_type):
                raise ValidationError(
                    f"Room {row['room_number']} is not of type {room_type}"
                )
            if row['id'] not in available_ids:
                raise ConflictError(
                    f"Room {row['room_number']} is no longer available on {date_of_booking}"
                )
            room['room_number'] = row['room_number']

        now = get_now_str()
        cursor.execute('''
            INSERT INTO advance_bookings (
                name, mobile, aadhar, date_of_booking, room_type,
                number_of_rooms, advance_amount, payment_mode, status,
                created_at, cancelled_at, refund_amount
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'active', ?, NULL, 0)
        ''', (
            name, mobile, aadhar, date_of_booking, room_type,
            number_of_rooms, advance_amount, payment_mode, now
        ))
        booking_id = cursor.lastrowid

        for room in rooms:
            cursor.execute('''
                INSERT INTO advance_booking_rooms
                (booking_id, room_id, room_number, price, persons)
                VALUES (?, ?, ?, ?, ?)
            ''', (booking_id, room['room_id'], room['room_number'],
                  room['price'], room['persons']))

        record_payment(
            cursor,
            amount=advance_amount,
            payment_type='advance',
            mode=payment_mode,
            stay_type='advance_booking',
            stay_id=booking_id,
            customer_name=name,
            room_number=', '.join(str(room['room_number']) for room in rooms),
            description=f'Advance payment for {number_of_rooms} room(s) on {date_of_booking}',
            created_at=now
        )

    logger.info(f'Advance booking {booking_id} created for {date_of_booking} ({number_of_rooms} rooms)')
    return booking_id


# =============================================================================
# READ
# =============================================================================

def _get_booking_rooms(booking_ids: list) -> dict:
    if not booking_ids:
        return {}
    db = get_db()
    placeholders = ','.join('?' * len(booking_ids))
    cursor = db.execute(f'''
        SELECT booking_id, room_id, room_number, price, persons
        FROM advance_booking_rooms
        WHERE booking_id IN ({placeholders})
        ORDER BY room_number
    ''', booking_ids)

    rooms_by_booking = {booking_id: [] for booking_id in booking_ids}
    for row in cursor.fetchall():
        room = dict(row)
        rooms_by_booking[room.pop('booking_id')].append(room)
    return rooms_by_booking


def _with_totals(booking: dict, rooms: list) -> dict:
    booking['rooms'] = rooms
    booking['total_price'] = round(sum(room['price'] for room in rooms), 2)
    booking['balance_due'] = round(booking['total_price'] - booking['advance_amount'], 2)
    # Date of booking already behind us
    booking['is_past'] = booking['date_of_booking'] < get_today().isoformat()
    return booking


def _like_pattern(text: str) -> str:
    """Contains-pattern for LIKE ... ESCAPE '\\' with wildcards taken literally."""
    escaped = text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f'%{escaped}%'


def get_advance_booking(booking_id: int) -> dict:
    """
    Get an advance booking with rooms, totals and ledger entries.

    Args:
        booking_id: Booking ID

    Returns:
        dict: Booking or None if not found
    """
    db = get_db()
    row = db.execute('SELECT * FROM advance_bookings WHERE id = ?', (booking_id,)).fetchone()
    if not row:
        return None

    booking = _with_totals(dict(row), _get_booking_rooms([booking_id])[booking_id])
    booking['payments'] = get_stay_payments('advance_booking', booking_id)
    return booking


def get_advance_bookings(
    search: str = None,
    status: str = None,
    page: int = 1,
    per_page: int = None
) -> dict:
    """
    List advance bookings by date of booking.

    Args:
        search: Case-insensitive match on name, mobile, date or room number
        status: Optional status filter
        page: Page number (1-based)
        per_page: Page size (default ITEMS_PER_PAGE)

    Returns:
        dict: {'items': [...], 'total': int, 'page': int, 'pages': int,
        'counts': {status: int}}. Counts follow the search but not the
        status filter; each item carries 'is_past'.
    """
    if status and status not in BOOKING_STATUSES:
        raise ValidationError(f'Invalid booking status: {status}')

    per_page = per_page or current_app.config.get('ITEMS_PER_PAGE', 20)
    page = max(int(page or 1), 1)

    where = []
    params = []

    if search and search.strip():
        term = _like_pattern(search.strip().lower())
        where.append('''(
            LOWER(ab.name) LIKE ? ESCAPE '\\'
            OR ab.mobile LIKE ? ESCAPE '\\'
            OR ab.date_of_booking LIKE ? ESCAPE '\\'
            OR EXISTS (
                SELECT 1 FROM advance_booking_rooms abr
                WHERE abr.booking_id = ab.id
                AND CAST(abr.room_number AS TEXT) LIKE ? ESCAPE '\\'
            )
        )''')
        params.extend([term, term, term, term])

    db = get_db()

    search_sql = f"WHERE {' AND '.join(where)}" if where else ''
    counts = {booking_status: 0 for booking_status in BOOKING_STATUSES}
    for row in db.execute(f'''
        SELECT ab.status, COUNT(*) AS count FROM advance_bookings ab
        {search_sql}
        GROUP BY ab.status
    ''', params).fetchall():
        counts[row['status']] = row['count']

    if status:
        where.append('ab.status = ?')
        params.append(status)

    where_sql = f"WHERE {' AND '.join(where)}" if where else ''

    total = db.execute(
        f'SELECT COUNT(*) FROM advance_bookings ab {where_sql}', params
    ).fetchone()[0]

    cursor = db.execute(f'''
        SELECT ab.* FROM advance_bookings ab
        {where_sql}
        ORDER BY ab.date_of_booking ASC, ab.id ASC
        LIMIT ? OFFSET ?
    ''', params + [per_page, (page - 1) * per_page])
    rows = [dict(row) for row in cursor.fetchall()]

    rooms_by_booking = _get_booking_rooms([row['id'] for row in rows])
    items = [_with_totals(row, rooms_by_booking[row['id']]) for row in rows]

    return {
        'items': items,
        'total': total,
        'page': page,
        'pages': math.ceil(total / per_page) if total else 0,
        'counts': counts
    }


# =============================================================================
# STATE CHANGES
# =============================================================================

def cancel_advance_booking(booking_id: int, refund_amount, refund_mode: str = None) -> None:
    """
    Cancel an active booking and record its refund.

    Cancellation is terminal. When the refund is greater than zero a
    'refund' ledger entry with the negated amount is written in the same
    transaction.

    Args:
        booking_id: Booking ID
        refund_amount: Amount returned to the guest (0..advance_amount)
        refund_mode: 'cash' or 'gpay' (default: the advance's payment mode)

    Raises:
        ValidationError: If the refund is negative or exceeds the advance
        NotFoundError: If the booking does not exist
        ConflictError: If the booking is not active
    """
    refund = parse_amount(refund_amount, 'refund_amount', allow_zero=True)
    if refund_mode:
        refund_mode = require_payment_mode(refund_mode, 'refund_mode')

    with transaction() as cursor:
        cursor.execute('SELECT * FROM advance_bookings WHERE id = ?', (booking_id,))
        booking = cursor.fetchone()
        if not booking:
            raise NotFoundError(f'Advance booking {booking_id} not found')
        if booking['status'] != 'active':
            raise ConflictError(f"Booking is {booking['status']} and cannot be cancelled")
        if refund > booking['advance_amount']:
            raise ValidationError('Refund amount cannot exceed advance amount')

        now = get_now_str()
        cursor.execute('''
            UPDATE advance_bookings
            SET status = 'cancelled', cancelled_at = ?, refund_amount = ?
            WHERE id = ? AND status = 'active'
        ''', (now, refund, booking_id))
        if cursor.rowcount == 0:
            raise ConflictError('Booking changed while cancelling')

        if refund > 0:
            cursor.execute('''
                SELECT room_number FROM advance_booking_rooms
                WHERE booking_id = ? ORDER BY room_number
            ''', (booking_id,))
            room_numbers = ', '.join(str(row['room_number']) for row in cursor.fetchall())

            record_payment(
                cursor,
                amount=-refund,
                payment_type='refund',
                mode=refund_mode or booking['payment_mode'],
                stay_type='advance_booking',
                stay_id=booking_id,
                customer_name=booking['name'],
                room_number=room_numbers,
                description=(
                    f"Refund for cancelled advance booking - {booking['name']} "
                    f"({booking['date_of_booking']})"
                ),
                created_at=now
            )

    logger.info(f'Advance booking {booking_id} cancelled, refund {refund:.2f}')


def complete_advance_booking(booking_id: int) -> None:
    """
    Mark an active booking as completed (guest arrived).

    Raises:
        NotFoundError: If the booking does not exist
        ConflictError: If the booking is not active
    """
    with transaction() as cursor:
        cursor.execute('''
            UPDATE advance_bookings
            SET status = 'completed', completed_at = ?
            WHERE id = ? AND status = 'active'
        ''', (get_now_str(), booking_id))

        if cursor.rowcount == 0:
            cursor.execute('SELECT status FROM advance_bookings WHERE id = ?', (booking_id,))
            row = cursor.fetchone()
            if not row:
                raise NotFoundError(f'Advance booking {booking_id} not found')
            raise ConflictError(f"Booking is {row['status']} and cannot be completed")

    logger.info(f'Advance booking {booking_id} completed')
