# salon_booking/utils/phone.py
"""Phone normalization used to identify customers"""
import re

from salon_booking.core.errors import InvalidPhoneError

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str) -> str:
    """Strip formatting, keeping digits only"""
    return _NON_DIGITS.sub("", phone or "")


def validate_phone(phone: str) -> str:
    """Return the normalized phone or raise InvalidPhoneError"""
    normalized = normalize_phone(phone)
    if len(normalized) < 10 or len(normalized) > 13:
        raise InvalidPhoneError(phone)
    return normalized
