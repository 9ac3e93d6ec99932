"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'payments',
        'house_booking_extensions',
        'house_booking_fees',
        'house_bookings',
        'houses',
        'advance_booking_rooms',
        'advance_bookings',
        'checkins',
        'rooms'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Room inventory
    db.execute('''
        CREATE TABLE rooms (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            room_number INTEGER NOT NULL,
            floor TEXT NOT NULL DEFAULT '',
            room_type TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'available'
                CHECK (status IN ('available', 'occupied', 'cleaning', 'maintenance')),
            created_at TEXT NOT NULL
        )
    ''')

    # 2. Room stays
    db.execute('''
        CREATE TABLE checkins (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            room_id INTEGER NOT NULL REFERENCES rooms(id),
            room_number INTEGER NOT NULL,
            guest_name TEXT NOT NULL,
            phone_number TEXT NOT NULL,
            id_number TEXT NOT NULL,
            number_of_guests INTEGER NOT NULL DEFAULT 1,
            days_of_stay INTEGER NOT NULL,
            rent REAL NOT NULL,
            initial_payment REAL NOT NULL DEFAULT 0,
            payment_mode TEXT NOT NULL,
            checked_in_at TEXT NOT NULL,
            check_out_date TEXT NOT NULL,
            is_checked_out INTEGER NOT NULL DEFAULT 0,
            checked_out_at TEXT
        )
    ''')

    # 3. Advance bookings and their reserved rooms
    db.execute('''
        CREATE TABLE advance_bookings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            mobile TEXT NOT NULL,
            aadhar TEXT NOT NULL,
            date_of_booking TEXT NOT NULL,
            room_type TEXT NOT NULL,
            number_of_rooms INTEGER NOT NULL,
            advance_amount REAL NOT NULL,
            payment_mode TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'active'
                CHECK (status IN ('pending', 'active', 'cancelled', 'completed')),
            created_at TEXT NOT NULL,
            cancelled_at TEXT,
            refund_amount REAL NOT NULL DEFAULT 0,
            completed_at TEXT,
            CHECK (refund_amount <= advance_amount)
        )
    ''')

    db.execute('''
        CREATE TABLE advance_booking_rooms (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            booking_id INTEGER NOT NULL REFERENCES advance_bookings(id) ON DELETE CASCADE,
            room_id INTEGER NOT NULL REFERENCES rooms(id),
            room_number INTEGER NOT NULL,
            price REAL NOT NULL,
            persons INTEGER NOT NULL DEFAULT 1,
            UNIQUE(booking_id, room_id)
        )
    ''')

    # 4. Houses and house rentals
    db.execute('''
        CREATE TABLE houses (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            display_order INTEGER DEFAULT 0
        )
    ''')

    db.execute('''
        CREATE TABLE house_bookings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            house_id TEXT NOT NULL REFERENCES houses(id),
            house_name TEXT NOT NULL,
            guest_name TEXT NOT NULL,
            phone_number TEXT NOT NULL,
            id_number TEXT NOT NULL,
            number_of_guests INTEGER NOT NULL DEFAULT 1,
            stay_type TEXT NOT NULL DEFAULT 'days'
                CHECK (stay_type IN ('days', 'month')),
            days_of_stay INTEGER NOT NULL,
            rent REAL NOT NULL,
            initial_payment REAL NOT NULL,
            payment_mode TEXT NOT NULL,
            checked_in_at TEXT NOT NULL,
            check_out_date TEXT NOT NULL,
            is_checked_out INTEGER NOT NULL DEFAULT 0,
            checked_out_at TEXT,
            pending_amount REAL NOT NULL,
            version INTEGER NOT NULL DEFAULT 1
        )
    ''')

    db.execute('''
        CREATE TABLE house_booking_fees (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            booking_id INTEGER NOT NULL REFERENCES house_bookings(id) ON DELETE CASCADE,
            description TEXT NOT NULL,
            amount REAL NOT NULL,
            created_at TEXT NOT NULL
        )
    ''')

    db.execute('''
        CREATE TABLE house_booking_extensions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            booking_id INTEGER NOT NULL REFERENCES house_bookings(id) ON DELETE CASCADE,
            additional_days INTEGER NOT NULL,
            rent_for_days REAL NOT NULL,
            created_at TEXT NOT NULL
        )
    ''')

    # 5. Payment ledger (single append-only table for every money event)
    db.execute('''
        CREATE TABLE payments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            stay_type TEXT
                CHECK (stay_type IN ('checkin', 'house_booking', 'advance_booking')),
            stay_id INTEGER,
            payment_type TEXT NOT NULL DEFAULT 'payment',
            amount REAL NOT NULL DEFAULT 0,
            mode TEXT NOT NULL DEFAULT 'n/a'
                CHECK (mode IN ('cash', 'gpay', 'n/a')),
            customer_name TEXT NOT NULL DEFAULT 'Guest',
            room_number TEXT NOT NULL DEFAULT 'N/A',
            description TEXT NOT NULL DEFAULT '',
            payment_status TEXT NOT NULL DEFAULT 'completed',
            created_at TEXT NOT NULL
        )
    ''')


def create_indexes(db):
    """Create performance indexes."""
    db.execute('CREATE INDEX idx_rooms_number ON rooms(room_number)')
    db.execute('CREATE INDEX idx_checkins_open ON checkins(is_checked_out)')
    # A room or house can carry at most one open stay
    db.execute('''
        CREATE UNIQUE INDEX idx_checkins_one_open_per_room
        ON checkins(room_id) WHERE is_checked_out = 0
    ''')
    db.execute('''
        CREATE UNIQUE INDEX idx_house_bookings_one_open_per_house
        ON house_bookings(house_id) WHERE is_checked_out = 0
    ''')
    db.execute('CREATE INDEX idx_advance_bookings_date_status ON advance_bookings(date_of_booking, status)')
    db.execute('CREATE INDEX idx_advance_booking_rooms_booking ON advance_booking_rooms(booking_id)')
    db.execute('CREATE INDEX idx_payments_created ON payments(created_at)')
    db.execute('CREATE INDEX idx_payments_stay ON payments(stay_type, stay_id)')
