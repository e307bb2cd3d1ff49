# -*- coding: utf-8 -*-
"""
Validation of NBU QR payment fields against the format 003 syntax.
Returns a list of violation messages; bad input is never an exception here.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from nbu_fields import CURRENCY_UAH, ENCODINGS, FUNCTIONS, Amount, PaymentFields

MAX_AMOUNT = Decimal("999999999.99")
ACCOUNT_LENGTH = 29

_iban_ua_re = re.compile(r"UA[0-9]{27}")
_lock_mask_re = re.compile(r"[0-9A-F]{4}")


def strip_account(account: str) -> str:
    """Убирает все пробельные символы из номера счёта (IBAN)."""
    return re.sub(r"\s+", "", account or "")


def parse_amount(amount: Amount) -> Optional[Decimal]:
    """Decimal for numeric input (int, float, Decimal, numeric string), else None."""
    if isinstance(amount, bool):
        return None
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def _too_long(value: str, limit: int) -> bool:
    return bool(value) and len(value) > limit


def validate(p: PaymentFields) -> List[str]:
    errors: List[str] = []

    if p.function not in FUNCTIONS:
        errors.append("Invalid function")

    if str(p.encoding) not in ENCODINGS:
        errors.append("Invalid encoding")

    if not p.recipient:
        errors.append("Recipient is required")
    elif len(p.recipient) > 140:
        errors.append("Recipient name too long (max 140 characters)")

    if not p.account:
        errors.append("Account is required")
    else:
        account = strip_account(p.account)
        # raw length: non-ASCII characters count by their UTF-8 bytes
        if len(account.encode("utf-8")) != ACCOUNT_LENGTH:
            errors.append("Account must be exactly 29 characters")
        elif not _iban_ua_re.fullmatch(account):
            errors.append("Invalid Ukrainian IBAN format")

    if p.amount is not None:
        value = parse_amount(p.amount)
        if value is None or value < 0 or value > MAX_AMOUNT:
            errors.append("Amount must be between 0 and 999999999.99")
        if p.currency != CURRENCY_UAH:
            errors.append("Only UAH currency is supported")

    if not p.recipient_code:
        errors.append("Recipient code is required")
    elif len(p.recipient_code) > 10:
        errors.append("Recipient code too long (max 10 characters)")

    if _too_long(p.category, 9):
        errors.append("Category too long (max 9 characters)")

    if _too_long(p.reference, 35):
        errors.append("Reference too long (max 35 characters)")

    if not p.purpose:
        errors.append("Purpose is required")
    elif len(p.purpose) > 420:
        errors.append("Purpose too long (max 420 characters)")

    if _too_long(p.display, 140):
        errors.append("Display text too long (max 140 characters)")

    if p.lock_mask and not _lock_mask_re.fullmatch(p.lock_mask):
        errors.append("Lock mask must be 4 hex characters")

    return errors
