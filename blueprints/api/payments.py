"""
Payment ledger API routes.
"""

from flask import request, send_file

from models.payment import list_payments, get_payment_totals, export_payments_workbook
from utils.api_response import api_success
from utils.datetime_helpers import get_today


def _filtered_payments():
    return list_payments(
        payment_type=request.args.get('type'),
        search=request.args.get('search'),
        sort_by=request.args.get('sort', 'timestamp'),
        direction=request.args.get('direction', 'desc')
    )


def register_routes(bp):
    """Register payment API routes on the blueprint."""

    @bp.route('/payments')
    def payments_list():
        """
        Unified payment log with totals for the filtered rows.

        Query params:
            type: Payment type or 'all'
            search: Customer, description, room or amount
            sort: timestamp, amount, customer_name, room_number
            direction: asc or desc (default desc)
        """
        payments = _filtered_payments()
        return api_success(data={
            'payments': payments,
            'totals': get_payment_totals(payments)
        })

    @bp.route('/payments/export')
    def payments_export():
        """Download the filtered payment log as an Excel file."""
        output = export_payments_workbook(_filtered_payments())
        filename = f'payments_{get_today().isoformat()}.xlsx'
        return send_file(
            output,
            mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
            as_attachment=True,
            download_name=filename
        )
