"""
Database seed data.
Initial data population for fresh database installations.
"""

from utils.datetime_helpers import get_now_str


HOUSES = [
    ('white-house-ground', 'White House - Ground Floor', 1),
    ('white-house-first', 'White House - First Floor', 2),
    ('white-house-second', 'White House - Second Floor', 3),
    ('guest-house', 'Guest House', 4),
]

# (room_number, floor, room_type)
DEFAULT_ROOMS = [
    (101, '1', 'NON AC'),
    (102, '1', 'NON AC'),
    (103, '1', 'NON AC'),
    (104, '1', 'AC'),
    (105, '1', 'AC'),
    (201, '2', 'NON AC'),
    (202, '2', 'NON AC'),
    (203, '2', 'AC'),
    (204, '2', 'AC'),
    (205, '2', 'AC'),
]


def seed_database(db):
    """Insert initial seed data."""
    created_at = get_now_str()

    # 1. Rentable houses
    for house_id, name, display_order in HOUSES:
        db.execute('''
            INSERT INTO houses (id, name, display_order)
            VALUES (?, ?, ?)
        ''', (house_id, name, display_order))

    # 2. Room inventory
    for room_number, floor, room_type in DEFAULT_ROOMS:
        db.execute('''
            INSERT INTO rooms (room_number, floor, room_type, status, created_at)
            VALUES (?, ?, ?, 'available', ?)
        ''', (room_number, floor, room_type, created_at))
