"""
Database connection management.
Handles per-context connections, transactions, initialization, and teardown.
"""

import logging
import sqlite3
from contextlib import contextmanager

from flask import g, current_app

from utils.errors import GatewayError

logger = logging.getLogger(__name__)


def get_db():
    """
    Get thread-safe database connection with row factory.

    Returns:
        sqlite3.Connection: Database connection object
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/hotel.db')
        g.db = sqlite3.connect(
            db_path,
            detect_types=sqlite3.PARSE_DECLTYPES
        )
        g.db.row_factory = sqlite3.Row
        # Enable foreign key constraints
        g.db.execute('PRAGMA foreign_keys = ON')
        # Enable WAL mode for better concurrency
        g.db.execute('PRAGMA journal_mode = WAL')
    return g.db


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    db = g.pop('db', None)
    if db is not None:
        db.close()


@contextmanager
def transaction():
    """
    Run a group of writes as one all-or-nothing unit.

    Takes the SQLite write lock up front (BEGIN IMMEDIATE) so a
    read-check-write sequence inside the block cannot interleave with
    another writer. Commits on success, rolls back on any exception.
    Storage failures surface as GatewayError; application errors raised
    inside the block propagate unchanged after the rollback.

    Yields:
        sqlite3.Cursor: Cursor bound to the open transaction
    """
    db = get_db()
    if db.in_transaction:
        db.commit()

    cursor = db.cursor()
    try:
        cursor.execute('BEGIN IMMEDIATE')
        yield cursor
        db.commit()
    except sqlite3.Error as e:
        db.rollback()
        logger.error(f'Transaction failed: {e}', exc_info=True)
        raise GatewayError(str(e)) from e
    except Exception:
        db.rollback()
        raise


def init_db():
    """
    Initialize database: drop existing tables, create new schema, insert seed data.
    WARNING: This will delete all existing data!
    """
    from database.schema import drop_tables, create_tables, create_indexes
    from database.seed import seed_database

    db = get_db()

    # Drop existing tables (in reverse order of dependencies)
    drop_tables(db)

    # Create all tables
    create_tables(db)

    # Create indexes
    create_indexes(db)

    # Insert seed data
    seed_database(db)

    db.commit()
    logger.info('Database initialized')
