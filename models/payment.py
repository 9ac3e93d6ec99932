"""
Payment ledger.

Every money event (advance, check-in/initial payment, extension, extra fee,
refund, later payment) is appended to the single `payments` table at the
moment the related booking or stay is written, inside the same
transaction. A stay's own payment history is the subset of ledger rows
whose (stay_type, stay_id) point at it.
"""

import io
from datetime import datetime
from typing import Any

from database import get_db
from utils.datetime_helpers import get_now_str, parse_timestamp
from utils.errors import ValidationError


PAYMENT_TYPES = (
    'advance', 'initial', 'extension', 'extra-fee',
    'refund', 'check-in', 'payment'
)
PAYMENT_MODES = ('cash', 'gpay', 'n/a')
STAY_TYPES = ('checkin', 'house_booking', 'advance_booking')

SORT_FIELDS = {
    'timestamp': 'timestamp',
    'amount': 'amount',
    'customer_name': 'customer_name',
    'customerName': 'customer_name',
    'room_number': 'room_number',
    'roomNumber': 'room_number',
}


# =============================================================================
# WRITE
# =============================================================================

def describe_payment_type(payment_type: str) -> str:
    """Default description for a stay-scoped ledger entry."""
    if payment_type == 'extension':
        return 'Stay extension'
    if payment_type == 'initial':
        return 'Initial payment'
    return 'Additional payment'


def record_payment(
    cursor,
    amount: float,
    payment_type: str = 'payment',
    mode: str = 'n/a',
    stay_type: str = None,
    stay_id: int = None,
    customer_name: str = None,
    room_number: Any = None,
    description: str = None,
    payment_status: str = 'completed',
    created_at: str = None
) -> int:
    """
    Append one entry to the ledger.

    Must be called with the cursor of the caller's open transaction so the
    entry commits or rolls back together with the booking change it
    belongs to.

    Args:
        cursor: Cursor of the active transaction
        amount: Signed amount (negative for refunds)
        payment_type: One of PAYMENT_TYPES
        mode: 'cash', 'gpay' or 'n/a'
        stay_type: 'checkin', 'house_booking', 'advance_booking' or None
        stay_id: ID of the referenced stay/booking
        customer_name: Payer name (default 'Guest')
        room_number: Room number(s) or house name (default 'N/A')
        description: Free text; derived from the type for stay entries
        payment_status: Ledger status (default 'completed')
        created_at: Timestamp override (default now)

    Returns:
        int: New ledger entry ID

    Raises:
        ValidationError: If type, mode or stay reference is invalid
    """
    if payment_type not in PAYMENT_TYPES:
        raise ValidationError(f'Unknown payment type: {payment_type}')
    if mode not in PAYMENT_MODES:
        raise ValidationError(f'Unknown payment mode: {mode}')
    if stay_type is not None and stay_type not in STAY_TYPES:
        raise ValidationError(f'Unknown stay type: {stay_type}')

    if not description:
        description = describe_payment_type(payment_type) if stay_type else 'Payment'

    cursor.execute('''
        INSERT INTO payments (
            stay_type, stay_id, payment_type, amount, mode,
            customer_name, room_number, description, payment_status, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ''', (
        stay_type, stay_id, payment_type, round(float(amount), 2), mode,
        customer_name or 'Guest',
        str(room_number) if room_number not in (None, '') else 'N/A',
        description, payment_status or 'completed',
        created_at or get_now_str()
    ))

    return cursor.lastrowid


# =============================================================================
# READ
# =============================================================================

def _to_record(row) -> dict:
    return {
        'id': row['id'],
        'amount': row['amount'],
        'timestamp': row['created_at'],
        'customer_name': row['customer_name'],
        'room_number': row['room_number'],
        'type': row['payment_type'],
        'mode': row['mode'],
        'description': row['description'],
        'payment_status': row['payment_status'],
        'stay_type': row['stay_type'],
        'stay_id': row['stay_id'],
    }


def get_stay_payments(stay_type: str, stay_id: int) -> list:
    """
    Get the ledger entries that belong to one stay or booking.

    Args:
        stay_type: 'checkin', 'house_booking' or 'advance_booking'
        stay_id: Stay/booking ID

    Returns:
        list: Payment records, oldest first
    """
    db = get_db()
    cursor = db.execute('''
        SELECT * FROM payments
        WHERE stay_type = ? AND stay_id = ?
        ORDER BY created_at, id
    ''', (stay_type, stay_id))
    return [_to_record(row) for row in cursor.fetchall()]


def _format_amount(amount: float) -> str:
    """Amount as shown to users: no trailing zeros (1000, 1000.5)."""
    return ('%.2f' % amount).rstrip('0').rstrip('.')


def _matches_search(record: dict, query: str) -> bool:
    fields = (
        record['customer_name'],
        record['description'],
        record['room_number'],
        _format_amount(record['amount']),
    )
    return any(query in str(value or '').lower() for value in fields)


def _sort_key(field: str):
    if field == 'amount':
        return lambda r: float(r['amount'] or 0)
    if field == 'timestamp':
        def timestamp_key(r):
            try:
                return parse_timestamp(r['timestamp'])
            except (ValueError, TypeError):
                return datetime.min
        return timestamp_key
    return lambda r: r[field] or ''


def list_payments(
    payment_type: str = None,
    search: str = None,
    sort_by: str = 'timestamp',
    direction: str = 'desc'
) -> list:
    """
    Build the unified, filtered and sorted ledger view.

    Args:
        payment_type: Exact type to keep; None or 'all' keeps everything
        search: Case-insensitive text matched against customer name,
            description, room number and amount
        sort_by: 'timestamp', 'amount', 'customer_name' or 'room_number'
            (camelCase aliases accepted)
        direction: 'asc' or 'desc'

    Returns:
        list: Payment records. Equal sort keys keep ledger insertion order,
        so identical arguments on unchanged data give identical lists.

    Raises:
        ValidationError: If sort field or direction is unknown
    """
    field = SORT_FIELDS.get(sort_by or 'timestamp')
    if field is None:
        raise ValidationError(f'Cannot sort payments by {sort_by}')
    direction = (direction or 'desc').lower()
    if direction not in ('asc', 'desc'):
        raise ValidationError('direction must be asc or desc')

    db = get_db()
    query = 'SELECT * FROM payments'
    params = []
    if payment_type and payment_type != 'all':
        query += ' WHERE payment_type = ?'
        params.append(payment_type)
    query += ' ORDER BY id'

    records = [_to_record(row) for row in db.execute(query, params).fetchall()]

    if search:
        needle = search.strip().lower()
        if needle:
            records = [r for r in records if _matches_search(r, needle)]

    # sorted() is stable, also with reverse=True
    return sorted(records, key=_sort_key(field), reverse=(direction == 'desc'))


def get_payment_totals(payments: list) -> dict:
    """
    Sum the given (already filtered) records by payment mode.

    Args:
        payments: Records as returned by list_payments()

    Returns:
        dict: {'cash_total', 'gpay_total', 'count'}
    """
    cash_total = sum(float(p['amount'] or 0) for p in payments if p['mode'] == 'cash')
    gpay_total = sum(float(p['amount'] or 0) for p in payments if p['mode'] == 'gpay')
    return {
        'cash_total': round(cash_total, 2),
        'gpay_total': round(gpay_total, 2),
        'count': len(payments),
    }


# =============================================================================
# EXPORT
# =============================================================================

def export_payments_workbook(payments: list, title: str = 'Payment Log') -> io.BytesIO:
    """
    Render ledger records as an Excel workbook.

    Args:
        payments: Records as returned by list_payments()
        title: Sheet heading

    Returns:
        io.BytesIO: xlsx file contents, rewound
    """
    from openpyxl import Workbook
    from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

    wb = Workbook()
    ws = wb.active
    ws.title = 'Payments'

    header_font = Font(bold=True, color='FFFFFF', size=11)
    header_fill = PatternFill(start_color='1A3A5C', end_color='1A3A5C', fill_type='solid')
    thin_border = Border(
        left=Side(style='thin', color='D4D4D4'),
        right=Side(style='thin', color='D4D4D4'),
        top=Side(style='thin', color='D4D4D4'),
        bottom=Side(style='thin', color='D4D4D4')
    )

    ws.merge_cells('A1:G1')
    title_cell = ws.cell(row=1, column=1, value=title)
    title_cell.font = Font(bold=True, size=14, color='1A3A5C')
    title_cell.alignment = Alignment(horizontal='center', vertical='center')

    totals = get_payment_totals(payments)
    ws.merge_cells('A2:G2')
    subtitle = ws.cell(
        row=2, column=1,
        value=f"Entries: {totals['count']} | Cash: {totals['cash_total']:.2f} | GPay: {totals['gpay_total']:.2f}"
    )
    subtitle.font = Font(size=10, color='666666')
    subtitle.alignment = Alignment(horizontal='center', vertical='center')

    header_row = 4
    headers = ['Date', 'Customer', 'Room', 'Type', 'Mode', 'Description', 'Amount']
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=header_row, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal='center', vertical='center')
        cell.border = thin_border

    ws.freeze_panes = f'A{header_row + 1}'

    for row_idx, payment in enumerate(payments, header_row + 1):
        values = [
            payment['timestamp'], payment['customer_name'], payment['room_number'],
            payment['type'], payment['mode'], payment['description'], payment['amount'],
        ]
        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row_idx, column=col, value=value)
            cell.border = thin_border
        ws.cell(row=row_idx, column=7).number_format = '#,##0.00'

    for col, width in zip('ABCDEFG', (20, 22, 18, 12, 8, 36, 12)):
        ws.column_dimensions[col].width = width

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output
