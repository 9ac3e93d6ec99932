"""
House rental operations.

A house is either available or booked by exactly one open booking.
While booked, the stay can be extended and extra fees added; each such
change raises both `rent` and `pending_amount` by the same amount and
writes a ledger entry in the same transaction.

Booking rows carry a `version` that every write checks and increments,
so two clients editing the same booking cannot silently overwrite each
other: the second write fails with ConflictError.
"""

import logging
from datetime import timedelta

from flask import current_app

from database import get_db, transaction
from utils.datetime_helpers import get_now, format_timestamp, parse_timestamp
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.validators import (
    parse_amount, parse_positive_int, require_payment_mode, require_phone,
    require_text
)
from .payment import record_payment, get_stay_payments

logger = logging.getLogger(__name__)

STAY_TYPES = ('days', 'month')


# =============================================================================
# READ
# =============================================================================

def get_houses_with_status() -> list:
    """
    Get every house with its availability and open booking.

    Returns:
        list: [{'id', 'name', 'status': 'available'|'booked', 'booking': dict|None}]
    """
    db = get_db()
    houses = [dict(row) for row in db.execute(
        'SELECT id, name FROM houses ORDER BY display_order, name'
    ).fetchall()]

    open_bookings = {
        row['house_id']: dict(row)
        for row in db.execute(
            'SELECT * FROM house_bookings WHERE is_checked_out = 0'
        ).fetchall()
    }

    for house in houses:
        booking = open_bookings.get(house['id'])
        house['status'] = 'booked' if booking else 'available'
        house['booking'] = booking
    return houses


def get_house_booking(booking_id: int) -> dict:
    """
    Get a house booking with its fees, extensions and ledger entries.

    Args:
        booking_id: Booking ID

    Returns:
        dict: Booking or None if not found
    """
    db = get_db()
    row = db.execute('SELECT * FROM house_bookings WHERE id = ?', (booking_id,)).fetchone()
    if not row:
        return None

    booking = dict(row)
    booking['extra_fees'] = [dict(r) for r in db.execute('''
        SELECT description, amount, created_at AS timestamp
        FROM house_booking_fees WHERE booking_id = ? ORDER BY id
    ''', (booking_id,)).fetchall()]
    booking['extensions'] = [dict(r) for r in db.execute('''
        SELECT additional_days, rent_for_days, created_at AS timestamp
        FROM house_booking_extensions WHERE booking_id = ? ORDER BY id
    ''', (booking_id,)).fetchall()]
    booking['payments'] = get_stay_payments('house_booking', booking_id)
    return booking


# =============================================================================
# CHECK-IN
# =============================================================================

def check_in_house(
    house_id: str,
    guest_name: str,
    phone_number: str,
    id_number: str,
    number_of_guests,
    rent,
    initial_payment,
    payment_mode: str,
    stay_type: str = 'days',
    days_of_stay=1
) -> int:
    """
    Open a booking on an available house.

    Args:
        house_id: House ID (e.g. 'guest-house')
        guest_name: Guest name
        phone_number: Guest mobile number
        id_number: ID document number
        number_of_guests: Persons staying
        rent: Rent for the whole stay
        initial_payment: Amount collected at check-in (0..rent)
        payment_mode: 'cash' or 'gpay'
        stay_type: 'days' or 'month' (a month is MONTH_STAY_DAYS days)
        days_of_stay: Nights when stay_type is 'days'

    Returns:
        int: New booking ID

    Raises:
        ValidationError: If a field is invalid
        NotFoundError: If the house does not exist
        ConflictError: If the house is already booked
    """
    guest_name = require_text(guest_name, 'guest_name')
    phone_number = require_phone(phone_number, 'phone_number')
    id_number = require_text(id_number, 'id_number', 30)
    number_of_guests = parse_positive_int(number_of_guests, 'number_of_guests')
    rent = parse_amount(rent, 'rent')
    initial_payment = parse_amount(initial_payment, 'initial_payment', allow_zero=True)
    payment_mode = require_payment_mode(payment_mode)
    if stay_type not in STAY_TYPES:
        raise ValidationError(f'stay_type must be one of: {", ".join(STAY_TYPES)}')
    if stay_type == 'month':
        days_of_stay = current_app.config.get('MONTH_STAY_DAYS', 30)
    else:
        days_of_stay = parse_positive_int(days_of_stay, 'days_of_stay')
    if initial_payment > rent:
        raise ValidationError('initial_payment cannot exceed rent')

    with transaction() as cursor:
        cursor.execute('SELECT * FROM houses WHERE id = ?', (house_id,))
        house = cursor.fetchone()
        if not house:
            raise NotFoundError(f'House {house_id} not found')

        cursor.execute('''
            SELECT id FROM house_bookings
            WHERE house_id = ? AND is_checked_out = 0
        ''', (house_id,))
        if cursor.fetchone():
            raise ConflictError(f"{house['name']} is already booked")

        checked_in_at = get_now()
        check_out_date = checked_in_at + timedelta(days=days_of_stay)

        cursor.execute('''
            INSERT INTO house_bookings (
                house_id, house_name, guest_name, phone_number, id_number,
                number_of_guests, stay_type, days_of_stay, rent, initial_payment,
                payment_mode, checked_in_at, check_out_date, is_checked_out,
                pending_amount, version
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?, 1)
        ''', (
            house_id, house['name'], guest_name, phone_number, id_number,
            number_of_guests, stay_type, days_of_stay, rent, initial_payment,
            payment_mode, format_timestamp(checked_in_at),
            format_timestamp(check_out_date), round(rent - initial_payment, 2)
        ))
        booking_id = cursor.lastrowid

        if initial_payment > 0:
            record_payment(
                cursor,
                amount=initial_payment,
                payment_type='initial',
                mode=payment_mode,
                stay_type='house_booking',
                stay_id=booking_id,
                customer_name=guest_name,
                room_number=house['name'],
                description=f"Initial payment for {house['name']}",
                created_at=format_timestamp(checked_in_at)
            )

    logger.info(f'House booking {booking_id} opened on {house_id} for {days_of_stay} days')
    return booking_id


# =============================================================================
# MUTATIONS ON AN OPEN BOOKING
# =============================================================================

def _load_open_booking(cursor, booking_id: int, expected_version=None):
    cursor.execute('SELECT * FROM house_bookings WHERE id = ?', (booking_id,))
    booking = cursor.fetchone()
    if not booking:
        raise NotFoundError(f'House booking {booking_id} not found')
    if booking['is_checked_out']:
        raise ConflictError('Guest has already checked out')
    if expected_version is not None:
        if parse_positive_int(expected_version, 'version') != booking['version']:
            raise ConflictError('Booking was changed by someone else; reload and try again')
    return booking


def _write_booking(cursor, booking, **fields) -> None:
    """Update fields and bump the version, only if nobody else did first."""
    assignments = ', '.join(f'{name} = ?' for name in fields)
    cursor.execute(f'''
        UPDATE house_bookings
        SET {assignments}, version = version + 1
        WHERE id = ? AND version = ?
    ''', list(fields.values()) + [booking['id'], booking['version']])
    if cursor.rowcount == 0:
        raise ConflictError('Booking was changed by someone else; reload and try again')


def extend_house_stay(booking_id: int, additional_days, rent_for_days, expected_version=None) -> dict:
    """
    Extend an open stay.

    Pushes the checkout date and days of stay forward, adds the extension
    rent to both rent and pending amount, and writes an 'extension'
    ledger entry.

    Args:
        booking_id: Booking ID
        additional_days: Extra nights (> 0)
        rent_for_days: Rent charged for the extra nights (>= 0)
        expected_version: Version the caller last saw (optional)

    Returns:
        dict: Updated booking

    Raises:
        ValidationError: If days or rent are invalid
        NotFoundError: If the booking does not exist
        ConflictError: If checked out or the version is stale
    """
    additional_days = parse_positive_int(additional_days, 'additional_days')
    rent_for_days = parse_amount(rent_for_days, 'rent_for_days', allow_zero=True)

    with transaction() as cursor:
        booking = _load_open_booking(cursor, booking_id, expected_version)
        now = format_timestamp(get_now())

        new_check_out = parse_timestamp(booking['check_out_date']) + timedelta(days=additional_days)

        cursor.execute('''
            INSERT INTO house_booking_extensions
            (booking_id, additional_days, rent_for_days, created_at)
            VALUES (?, ?, ?, ?)
        ''', (booking_id, additional_days, rent_for_days, now))

        _write_booking(
            cursor, booking,
            check_out_date=format_timestamp(new_check_out),
            days_of_stay=booking['days_of_stay'] + additional_days,
            rent=round(booking['rent'] + rent_for_days, 2),
            pending_amount=round(booking['pending_amount'] + rent_for_days, 2)
        )

        record_payment(
            cursor,
            amount=rent_for_days,
            payment_type='extension',
            mode='n/a',
            stay_type='house_booking',
            stay_id=booking_id,
            customer_name=booking['guest_name'],
            room_number=booking['house_name'],
            description=f'Extension: {additional_days} days',
            created_at=now
        )

    logger.info(f'House booking {booking_id} extended by {additional_days} days')
    return get_house_booking(booking_id)


def add_house_extra_fee(booking_id: int, description: str, amount, expected_version=None) -> dict:
    """
    Charge an extra fee (electricity, cleaning, ...) to an open stay.

    Args:
        booking_id: Booking ID
        description: What the fee is for
        amount: Fee amount (> 0)
        expected_version: Version the caller last saw (optional)

    Returns:
        dict: Updated booking

    Raises:
        ValidationError: If description or amount is invalid
        NotFoundError: If the booking does not exist
        ConflictError: If checked out or the version is stale
    """
    description = require_text(description, 'description')
    amount = parse_amount(amount, 'amount')

    with transaction() as cursor:
        booking = _load_open_booking(cursor, booking_id, expected_version)
        now = format_timestamp(get_now())

        cursor.execute('''
            INSERT INTO house_booking_fees (booking_id, description, amount, created_at)
            VALUES (?, ?, ?, ?)
        ''', (booking_id, description, amount, now))

        _write_booking(
            cursor, booking,
            rent=round(booking['rent'] + amount, 2),
            pending_amount=round(booking['pending_amount'] + amount, 2)
        )

        record_payment(
            cursor,
            amount=amount,
            payment_type='extra-fee',
            mode='n/a',
            stay_type='house_booking',
            stay_id=booking_id,
            customer_name=booking['guest_name'],
            room_number=booking['house_name'],
            description=description,
            created_at=now
        )

    logger.info(f'Extra fee {amount:.2f} added to house booking {booking_id}')
    return get_house_booking(booking_id)


def record_house_payment(booking_id: int, amount, mode: str, expected_version=None) -> dict:
    """
    Collect money against an open stay's pending amount.

    Args:
        booking_id: Booking ID
        amount: Amount collected (> 0, at most the pending amount)
        mode: 'cash' or 'gpay'
        expected_version: Version the caller last saw (optional)

    Returns:
        dict: Updated booking

    Raises:
        ValidationError: If amount or mode is invalid
        NotFoundError: If the booking does not exist
        ConflictError: If checked out or the version is stale
    """
    amount = parse_amount(amount, 'amount')
    mode = require_payment_mode(mode, 'mode')

    with transaction() as cursor:
        booking = _load_open_booking(cursor, booking_id, expected_version)
        if amount > booking['pending_amount']:
            raise ValidationError('Payment cannot exceed the pending amount')

        _write_booking(
            cursor, booking,
            pending_amount=round(booking['pending_amount'] - amount, 2)
        )

        record_payment(
            cursor,
            amount=amount,
            payment_type='payment',
            mode=mode,
            stay_type='house_booking',
            stay_id=booking_id,
            customer_name=booking['guest_name'],
            room_number=booking['house_name']
        )

    logger.info(f'Payment {amount:.2f} recorded for house booking {booking_id}')
    return get_house_booking(booking_id)


def checkout_house(booking_id: int, expected_version=None) -> dict:
    """
    Close a house booking; the house becomes available again.

    Returns:
        dict: Closed booking (pending_amount shows anything left unpaid)

    Raises:
        NotFoundError: If the booking does not exist
        ConflictError: If already checked out or the version is stale
    """
    with transaction() as cursor:
        booking = _load_open_booking(cursor, booking_id, expected_version)
        _write_booking(
            cursor, booking,
            is_checked_out=1,
            checked_out_at=format_timestamp(get_now())
        )

    logger.info(f"House booking {booking_id} checked out from {booking['house_id']}")
    return get_house_booking(booking_id)
