"""
Tests for the payment ledger.
"""

import pytest
from openpyxl import load_workbook
from utils.errors import ValidationError


def _seed_ledger():
    """Write a small ledger with known timestamps."""
    from database import transaction
    from models.payment import record_payment

    with transaction() as cursor:
        record_payment(cursor, 500, 'advance', 'cash', 'advance_booking', 1,
                       'Ravi Kumar', '101', 'Advance payment', created_at='2025-06-01 09:00:00')
        record_payment(cursor, 1000, 'initial', 'gpay', 'house_booking', 1,
                       'Anita Shah', 'Guest House', created_at='2025-06-02 10:00:00')
        record_payment(cursor, 1200, 'extension', 'n/a', 'house_booking', 1,
                       'Anita Shah', 'Guest House', 'Extension: 5 days',
                       created_at='2025-06-02 10:00:00')
        record_payment(cursor, -300, 'refund', 'cash', 'advance_booking', 1,
                       'Ravi Kumar', '101', 'Refund for cancelled advance booking',
                       created_at='2025-06-03 08:30:00')


class TestRecordPayment:
    """Tests for record_payment."""

    def test_defaults(self, app):
        from database import transaction
        from models.payment import list_payments

        with transaction() as cursor:
            from models.payment import record_payment
            record_payment(cursor, 250)

        payment = list_payments()[0]
        assert payment['customer_name'] == 'Guest'
        assert payment['room_number'] == 'N/A'
        assert payment['type'] == 'payment'
        assert payment['mode'] == 'n/a'
        assert payment['description'] == 'Payment'
        assert payment['payment_status'] == 'completed'
        assert payment['stay_type'] is None

    def test_rejects_unknown_values(self, app):
        from database import get_db, transaction
        from models.payment import record_payment

        with pytest.raises(ValidationError):
            with transaction() as cursor:
                record_payment(cursor, 100, payment_type='tip')
        with pytest.raises(ValidationError):
            with transaction() as cursor:
                record_payment(cursor, 100, mode='card')

        assert get_db().execute('SELECT COUNT(*) FROM payments').fetchone()[0] == 0

    def test_describe_payment_type(self):
        from models.payment import describe_payment_type

        assert describe_payment_type('extension') == 'Stay extension'
        assert describe_payment_type('initial') == 'Initial payment'
        assert describe_payment_type('payment') == 'Additional payment'


class TestListPayments:
    """Tests for list_payments."""

    def test_newest_first_by_default(self, app):
        from models.payment import list_payments

        _seed_ledger()
        payments = list_payments()

        assert [p['type'] for p in payments] == ['refund', 'initial', 'extension', 'advance']

    def test_ascending_keeps_insertion_order_on_ties(self, app):
        from models.payment import list_payments

        _seed_ledger()
        payments = list_payments(direction='asc')

        assert [p['type'] for p in payments] == ['advance', 'initial', 'extension', 'refund']

    def test_filter_by_type(self, app):
        from models.payment import list_payments

        _seed_ledger()
        assert [p['type'] for p in list_payments(payment_type='refund')] == ['refund']
        assert len(list_payments(payment_type='all')) == 4

    def test_search_fields(self, app):
        from models.payment import list_payments

        _seed_ledger()
        assert {p['customer_name'] for p in list_payments(search='anita')} == {'Anita Shah'}
        assert [p['type'] for p in list_payments(search='extension:')] == ['extension']
        assert [p['type'] for p in list_payments(search='guest house')] == ['initial', 'extension']
        # Amounts are searched without trailing zeros
        assert [p['type'] for p in list_payments(search='1200')] == ['extension']
        assert [p['type'] for p in list_payments(search='-300')] == ['refund']

    def test_sort_by_amount(self, app):
        from models.payment import list_payments

        _seed_ledger()
        amounts = [p['amount'] for p in list_payments(sort_by='amount', direction='asc')]
        assert amounts == [-300, 500, 1000, 1200]

    def test_sort_by_camel_case_alias(self, app):
        from models.payment import list_payments

        _seed_ledger()
        names = [p['customer_name'] for p in list_payments(sort_by='customerName', direction='asc')]
        assert names == ['Anita Shah', 'Anita Shah', 'Ravi Kumar', 'Ravi Kumar']

    def test_repeatable(self, app):
        from models.payment import list_payments

        _seed_ledger()
        assert list_payments(sort_by='room_number') == list_payments(sort_by='room_number')

    def test_invalid_sort(self, app):
        from models.payment import list_payments

        with pytest.raises(ValidationError):
            list_payments(sort_by='mode')
        with pytest.raises(ValidationError):
            list_payments(direction='sideways')

    def test_stay_payments(self, app):
        from models.payment import get_stay_payments

        _seed_ledger()
        assert [p['type'] for p in get_stay_payments('house_booking', 1)] == ['initial', 'extension']
        assert get_stay_payments('checkin', 1) == []


class TestPaymentTotals:
    """Tests for get_payment_totals."""

    def test_totals_by_mode(self, app):
        from models.payment import list_payments, get_payment_totals

        _seed_ledger()
        totals = get_payment_totals(list_payments())

        assert totals == {'cash_total': 200.0, 'gpay_total': 1000.0, 'count': 4}

    def test_totals_follow_filter(self, app):
        from models.payment import list_payments, get_payment_totals

        _seed_ledger()
        totals = get_payment_totals(list_payments(search='ravi'))
        assert totals == {'cash_total': 200.0, 'gpay_total': 0, 'count': 2}


class TestExport:
    """Tests for export_payments_workbook."""

    def test_workbook_rows(self, app):
        from models.payment import list_payments, export_payments_workbook

        _seed_ledger()
        output = export_payments_workbook(list_payments(direction='asc'))
        ws = load_workbook(output).active

        assert ws['A1'].value == 'Payment Log'
        assert [cell.value for cell in ws[4]] == [
            'Date', 'Customer', 'Room', 'Type', 'Mode', 'Description', 'Amount'
        ]
        assert ws['B5'].value == 'Ravi Kumar'
        assert ws['G8'].value == -300
        assert ws.max_row == 8
