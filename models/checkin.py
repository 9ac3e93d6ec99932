"""
Room check-in operations.
An open check-in holds its room until checkout; its payments live in the
ledger under stay_type 'checkin'.
"""

import logging
from datetime import timedelta

from database import get_db, transaction
from utils.datetime_helpers import get_now, get_today, format_timestamp
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.validators import (
    parse_amount, parse_positive_int, require_payment_mode, require_phone,
    require_text
)
from .availability import get_reserved_room_ids
from .payment import record_payment, get_stay_payments

logger = logging.getLogger(__name__)


def create_checkin(
    room_id: int,
    guest_name: str,
    phone_number: str,
    id_number: str,
    number_of_guests,
    days_of_stay,
    rent,
    initial_payment,
    payment_mode: str
) -> int:
    """
    Check a guest into an available room.

    Marks the room occupied and records the initial payment, all in one
    transaction.

    Args:
        room_id: Room ID
        guest_name: Guest name
        phone_number: Guest mobile number
        id_number: ID document number
        number_of_guests: Persons in the room
        days_of_stay: Planned nights
        rent: Total rent for the stay
        initial_payment: Amount collected at check-in (0..rent)
        payment_mode: 'cash' or 'gpay'

    Returns:
        int: New check-in ID

    Raises:
        ValidationError: If a field is invalid
        NotFoundError: If the room does not exist
        ConflictError: If the room is not available or is reserved for today
    """
    room_id = parse_positive_int(room_id, 'room_id')
    guest_name = require_text(guest_name, 'guest_name')
    phone_number = require_phone(phone_number, 'phone_number')
    id_number = require_text(id_number, 'id_number', 30)
    number_of_guests = parse_positive_int(number_of_guests, 'number_of_guests')
    days_of_stay = parse_positive_int(days_of_stay, 'days_of_stay')
    rent = parse_amount(rent, 'rent')
    initial_payment = parse_amount(initial_payment, 'initial_payment', allow_zero=True)
    payment_mode = require_payment_mode(payment_mode)
    if initial_payment > rent:
        raise ValidationError('initial_payment cannot exceed rent')

    with transaction() as cursor:
        cursor.execute('SELECT * FROM rooms WHERE id = ?', (room_id,))
        room = cursor.fetchone()
        if not room:
            raise NotFoundError(f'Room {room_id} not found')
        if room['status'] != 'available':
            raise ConflictError(f"Room {room['room_number']} is {room['status']}")
        if room_id in get_reserved_room_ids(get_today().isoformat(), cursor):
            raise ConflictError(f"Room {room['room_number']} is reserved for today")

        checked_in_at = get_now()
        check_out_date = checked_in_at + timedelta(days=days_of_stay)

        cursor.execute('''
            INSERT INTO checkins (
                room_id, room_number, guest_name, phone_number, id_number,
                number_of_guests, days_of_stay, rent, initial_payment,
                payment_mode, checked_in_at, check_out_date, is_checked_out
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0)
        ''', (
            room_id, room['room_number'], guest_name, phone_number, id_number,
            number_of_guests, days_of_stay, rent, initial_payment, payment_mode,
            format_timestamp(checked_in_at), format_timestamp(check_out_date)
        ))
        checkin_id = cursor.lastrowid

        cursor.execute("UPDATE rooms SET status = 'occupied' WHERE id = ?", (room_id,))

        if initial_payment > 0:
            record_payment(
                cursor,
                amount=initial_payment,
                payment_type='initial',
                mode=payment_mode,
                stay_type='checkin',
                stay_id=checkin_id,
                customer_name=guest_name,
                room_number=room['room_number'],
                created_at=format_timestamp(checked_in_at)
            )

    logger.info(f"Check-in {checkin_id} opened for room {room['room_number']}")
    return checkin_id


def add_checkin_payment(checkin_id: int, amount, mode: str, payment_type: str = 'payment') -> int:
    """
    Record a further payment against an open check-in.

    Args:
        checkin_id: Check-in ID
        amount: Amount collected (> 0)
        mode: 'cash' or 'gpay'
        payment_type: 'payment' or 'extension'

    Returns:
        int: Ledger entry ID

    Raises:
        ValidationError: If amount, mode or type is invalid
        NotFoundError: If the check-in does not exist
        ConflictError: If the guest already checked out
    """
    amount = parse_amount(amount, 'amount')
    mode = require_payment_mode(mode, 'mode')
    if payment_type not in ('payment', 'extension'):
        raise ValidationError(f'Invalid payment type: {payment_type}')

    with transaction() as cursor:
        cursor.execute('SELECT * FROM checkins WHERE id = ?', (checkin_id,))
        checkin = cursor.fetchone()
        if not checkin:
            raise NotFoundError(f'Check-in {checkin_id} not found')
        if checkin['is_checked_out']:
            raise ConflictError('Guest has already checked out')

        payment_id = record_payment(
            cursor,
            amount=amount,
            payment_type=payment_type,
            mode=mode,
            stay_type='checkin',
            stay_id=checkin_id,
            customer_name=checkin['guest_name'],
            room_number=checkin['room_number']
        )

    logger.info(f'Payment {payment_id} recorded for check-in {checkin_id}')
    return payment_id


def checkout_checkin(checkin_id: int) -> None:
    """
    Close a check-in. The room goes to 'cleaning'.

    Raises:
        NotFoundError: If the check-in does not exist
        ConflictError: If it is already checked out
    """
    with transaction() as cursor:
        cursor.execute('''
            UPDATE checkins SET is_checked_out = 1, checked_out_at = ?
            WHERE id = ? AND is_checked_out = 0
        ''', (format_timestamp(get_now()), checkin_id))

        if cursor.rowcount == 0:
            cursor.execute('SELECT id FROM checkins WHERE id = ?', (checkin_id,))
            if not cursor.fetchone():
                raise NotFoundError(f'Check-in {checkin_id} not found')
            raise ConflictError('Guest has already checked out')

        cursor.execute('''
            UPDATE rooms SET status = 'cleaning'
            WHERE id = (SELECT room_id FROM checkins WHERE id = ?)
        ''', (checkin_id,))

    logger.info(f'Check-in {checkin_id} checked out')


def get_checkin(checkin_id: int) -> dict:
    """Get a check-in with its ledger entries, or None."""
    db = get_db()
    row = db.execute('SELECT * FROM checkins WHERE id = ?', (checkin_id,)).fetchone()
    if not row:
        return None
    checkin = dict(row)
    checkin['payments'] = get_stay_payments('checkin', checkin_id)
    return checkin


def get_active_checkins() -> list:
    """Get check-ins that have not checked out, by room number."""
    db = get_db()
    cursor = db.execute('''
        SELECT * FROM checkins
        WHERE is_checked_out = 0
        ORDER BY room_number
    ''')
    return [dict(row) for row in cursor.fetchall()]
