# -*- coding: utf-8 -*-
"""
Кодек формата НБУ 003: сборка строки из 17 полей (разделитель LF),
URL-safe base64 и разбор ссылки https://qr.bank.gov.ua/<данные> обратно.
"""
import base64
import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from nbu_fields import (
    DEFAULT_BASE_URL,
    MAX_DATA_SIZE,
    SERVICE_TAG,
    SLOT_COUNT,
    VERSION,
    Amount,
    PaymentFields,
    QRFields,
)
from nbu_validator import parse_amount, strip_account, validate

logger = logging.getLogger(__name__)


class NBUQRError(Exception):
    """Base class for encode/decode failures."""


class ValidationError(NBUQRError, ValueError):
    """The field set has outstanding violations and cannot become a URL."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Validation failed: " + ", ".join(self.errors))


class SizeError(NBUQRError, ValueError):
    pass


class FormatError(NBUQRError, ValueError):
    pass


def format_amount(amount: Optional[Amount], currency: str) -> str:
    """
    UAH100.5, UAH0 и т.п.: два знака после точки, затем без хвостовых нулей.
    Пустая строка, если сумма не задана.
    """
    if amount is None:
        return ""
    value = parse_amount(amount)
    if value is None:
        raise ValueError(f"Amount is not numeric: {amount!r}")
    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if value.is_zero():
        value = value.copy_abs()  # -0 -> 0
    formatted = f"{value:.2f}"
    return currency + formatted.rstrip("0").rstrip(".")


def format_datetime(dt: Optional[datetime]) -> str:
    """YYMMDDHHMM plus fixed "00" seconds."""
    if dt is None:
        return ""
    return dt.strftime("%y%m%d%H%M") + "00"


def canonical_fields(p: PaymentFields) -> QRFields:
    return QRFields(
        service_tag=SERVICE_TAG,
        version=VERSION,
        encoding=str(p.encoding),
        function=p.function,
        unique_id="",
        recipient=p.recipient,
        account=strip_account(p.account),
        amount=format_amount(p.amount, p.currency),
        recipient_code=p.recipient_code,
        category=p.category,
        reference=p.reference,
        purpose=p.purpose,
        display=p.display,
        lock_mask=p.lock_mask,
        valid_until=format_datetime(p.valid_until),
        created_at=format_datetime(p.created_at),
        signature="",
    )


def build_canonical_text(p: PaymentFields) -> str:
    return "\n".join(canonical_fields(p).to_parts())


def base64url_encode(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def base64url_decode(data: str) -> str:
    """Restores the stripped padding, then decodes. Raises ValueError on garbage."""
    padded = data + "=" * (-len(data) % 4)
    raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
    return raw.decode("utf-8")


def normalize_base_url(base_url: str) -> str:
    return base_url.rstrip("/") + "/"


def encode_url(p: PaymentFields, base_url: str = DEFAULT_BASE_URL) -> str:
    """
    Build the payment URL for a field set.

    Raises ValidationError when the field set has violations and SizeError
    when the resulting URL is longer than the standard allows.

    Text fields are not checked for line feeds: a line feed inside a value
    shifts the following slots, and decode_url will not return the same fields.
    """
    errors = validate(p)
    if errors:
        logger.debug("Refusing to encode, %d violation(s): %s", len(errors), errors)
        raise ValidationError(errors)

    url = normalize_base_url(base_url) + base64url_encode(build_canonical_text(p))
    logger.debug("Encoded QR URL: %d of %d characters", len(url), MAX_DATA_SIZE)

    if len(url) > MAX_DATA_SIZE:
        logger.warning("QR URL is %d characters, limit is %d", len(url), MAX_DATA_SIZE)
        raise SizeError("QR data size exceeds maximum allowed")
    return url


def decode_url(url: str, base_url: str = DEFAULT_BASE_URL) -> QRFields:
    """
    Разбирает ссылку обратно в 17 полей. Семантика полей повторно не проверяется.
    """
    prefix = normalize_base_url(base_url)
    if not url.startswith(prefix):
        logger.debug("URL %r is outside base %r", url, prefix)
        raise FormatError("Invalid QR URL format")

    try:
        text = base64url_decode(url[len(prefix):])
    except ValueError as e:
        logger.debug("Payload is not base64url UTF-8: %s", e)
        raise FormatError("Invalid QR data structure") from e

    parts = text.split("\n")
    if len(parts) < SLOT_COUNT:
        logger.debug("Payload has %d field(s), expected %d", len(parts), SLOT_COUNT)
        raise FormatError("Invalid QR data structure")

    return QRFields.from_parts(parts)
