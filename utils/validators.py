"""
Input validation helper functions.
Provides validation for common input types.

The validate_* helpers answer yes/no; the require_* / parse_* helpers
return the cleaned value or raise ValidationError with a user-facing
message, so models can validate every field before touching storage.
"""

import re
from datetime import datetime

from utils.errors import ValidationError

PAYMENT_MODES = ('cash', 'gpay')


def validate_phone(phone: str) -> bool:
    """
    Validate Indian mobile number format.
    Accepts: 10 digits, optionally prefixed with +91 / 91 / 0

    Args:
        phone: Phone number to validate

    Returns:
        True if valid phone format
    """
    if not phone:
        return False

    # Remove spaces and common separators
    cleaned = re.sub(r'[\s\-\(\)]', '', phone)

    patterns = [
        r'^\+91[0-9]{10}$',  # +91XXXXXXXXXX
        r'^91[0-9]{10}$',    # 91XXXXXXXXXX
        r'^0?[0-9]{10}$'     # XXXXXXXXXX
    ]

    return any(bool(re.match(pattern, cleaned)) for pattern in patterns)


def validate_date_format(date_str: str) -> bool:
    """
    Validate date is in YYYY-MM-DD format.

    Args:
        date_str: Date string to validate

    Returns:
        True if valid format
    """
    try:
        datetime.strptime(date_str, '%Y-%m-%d')
        return True
    except (ValueError, TypeError):
        return False


def sanitize_input(text: str, max_length: int = None) -> str:
    """
    Sanitize text input by trimming and limiting length.

    Args:
        text: Text to sanitize
        max_length: Maximum length (optional)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    # Strip whitespace
    sanitized = str(text).strip()

    # Limit length if specified
    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def require_text(value, field: str, max_length: int = 200) -> str:
    """Return the trimmed text or raise if it is empty."""
    cleaned = sanitize_input(value, max_length)
    if not cleaned:
        raise ValidationError(f'{field} is required')
    return cleaned


def require_date(value, field: str = 'date') -> str:
    """Return a YYYY-MM-DD string or raise."""
    if not value:
        raise ValidationError(f'{field} is required')
    value = str(value).strip()
    if not validate_date_format(value):
        raise ValidationError(f'{field} must be a date in YYYY-MM-DD format')
    return value


def require_phone(value, field: str = 'mobile') -> str:
    """Return the trimmed phone number or raise if it is missing or malformed."""
    phone = require_text(value, field, 20)
    if not validate_phone(phone):
        raise ValidationError(f'{field} must be a 10 digit mobile number')
    return phone


def parse_amount(value, field: str, allow_zero: bool = False) -> float:
    """
    Parse a money amount.

    Args:
        value: Raw input (number or numeric string)
        field: Field name for the error message
        allow_zero: Accept 0 (otherwise the amount must be > 0)

    Returns:
        Amount rounded to 2 decimals

    Raises:
        ValidationError: If missing, not numeric, negative, or zero when not allowed
    """
    if value is None or value == '':
        raise ValidationError(f'{field} is required')
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number')
    try:
        amount = round(float(value), 2)
    except (ValueError, TypeError):
        raise ValidationError(f'{field} must be a number')
    if amount != amount or amount in (float('inf'), float('-inf')):
        raise ValidationError(f'{field} must be a number')
    if amount < 0 or (amount == 0 and not allow_zero):
        bound = 'zero or more' if allow_zero else 'greater than 0'
        raise ValidationError(f'{field} must be {bound}')
    return amount


def parse_positive_int(value, field: str) -> int:
    """Parse an integer > 0 or raise."""
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a whole number')
    try:
        number = int(value)
    except (ValueError, TypeError):
        raise ValidationError(f'{field} must be a whole number')
    if isinstance(value, float) and value != number:
        raise ValidationError(f'{field} must be a whole number')
    if number <= 0:
        raise ValidationError(f'{field} must be greater than 0')
    return number


def require_payment_mode(value, field: str = 'payment_mode') -> str:
    """Return 'cash' or 'gpay' or raise."""
    mode = sanitize_input(value).lower()
    if mode not in PAYMENT_MODES:
        raise ValidationError(f'{field} must be one of: {", ".join(PAYMENT_MODES)}')
    return mode
