"""Dashboard statistics: room occupancy and cash/GPay takings."""

from datetime import date, datetime, time, timedelta

from flask import current_app

from database import get_db
from utils.datetime_helpers import get_today, format_timestamp
from .room import get_room_stats


def _day_start(day: date) -> str:
    return format_timestamp(datetime.combine(day, time.min))


def get_payment_period_stats(today: date = None) -> dict:
    """
    Cash and GPay totals for today, the last 7 days and this month.

    Periods are open-ended from their start: today from 00:00, week from
    00:00 seven days ago, month from the 1st. Entries with mode 'n/a'
    (charges rather than collections) are not counted.

    Args:
        today: Reference date (default: today in the configured timezone)

    Returns:
        dict: {today_cash, today_gpay, week_cash, week_gpay, month_cash, month_gpay}
    """
    today = today or get_today()
    today_start = _day_start(today)
    week_start = _day_start(today - timedelta(days=7))
    month_start = _day_start(today.replace(day=1))

    stats = {
        f'{period}_{mode}': 0.0
        for period in ('today', 'week', 'month')
        for mode in ('cash', 'gpay')
    }

    db = get_db()
    cursor = db.execute('''
        SELECT mode,
               COALESCE(SUM(CASE WHEN created_at >= ? THEN amount END), 0) AS today_total,
               COALESCE(SUM(CASE WHEN created_at >= ? THEN amount END), 0) AS week_total,
               COALESCE(SUM(CASE WHEN created_at >= ? THEN amount END), 0) AS month_total
        FROM payments
        WHERE mode IN ('cash', 'gpay')
        AND created_at >= ?
        GROUP BY mode
    ''', (today_start, week_start, month_start, min(week_start, month_start)))

    for row in cursor.fetchall():
        stats[f"today_{row['mode']}"] = round(row['today_total'], 2)
        stats[f"week_{row['mode']}"] = round(row['week_total'], 2)
        stats[f"month_{row['mode']}"] = round(row['month_total'], 2)

    stats['today_total'] = round(stats['today_cash'] + stats['today_gpay'], 2)
    return stats


def get_daily_revenue(today: date = None, days: int = None) -> list:
    """
    Per-day cash and GPay totals for the trailing window, oldest first.

    Args:
        today: Last day of the window (default: today)
        days: Window length (default DASHBOARD_DAILY_WINDOW)

    Returns:
        list: [{'date': 'YYYY-MM-DD', 'label': 'Mon', 'cash': float, 'gpay': float}]
    """
    today = today or get_today()
    days = days or current_app.config.get('DASHBOARD_DAILY_WINDOW', 7)
    first_day = today - timedelta(days=days - 1)

    daily = {}
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        daily[day.isoformat()] = {
            'date': day.isoformat(),
            'label': day.strftime('%a'),
            'cash': 0.0,
            'gpay': 0.0
        }

    db = get_db()
    cursor = db.execute('''
        SELECT SUBSTR(created_at, 1, 10) AS day, mode, SUM(amount) AS total
        FROM payments
        WHERE mode IN ('cash', 'gpay')
        AND created_at >= ? AND created_at < ?
        GROUP BY day, mode
    ''', (_day_start(first_day), _day_start(today + timedelta(days=1))))

    for row in cursor.fetchall():
        if row['day'] in daily:
            daily[row['day']][row['mode']] = round(row['total'], 2)

    return list(daily.values())


def get_dashboard_summary() -> dict:
    """Everything the dashboard shows, in one call."""
    today = get_today()
    return {
        'rooms': get_room_stats(),
        'payments': get_payment_period_stats(today),
        'daily_revenue': get_daily_revenue(today)
    }
