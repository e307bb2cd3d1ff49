# -*- coding: utf-8 -*-
"""
Генератор QR-кода для оплаты по стандарту НБУ (формат 003).
Хранит набор полей и результат валидации, строит ссылку и рисует QR
(SVG, PNG или data URI) через qrcode.
"""
import base64
import io
import logging
from dataclasses import asdict, fields as dc_fields, replace
from typing import Any, Dict, List, Optional, Union

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.image.svg import SvgPathImage

from nbu_codec import decode_url, encode_url, normalize_base_url
from nbu_fields import DEFAULT_BASE_URL, PaymentFields, QRFields
from nbu_validator import validate

logger = logging.getLogger(__name__)

# Стандарт НБУ требует уровень коррекции M
ERROR_CORRECTION = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

KIND_SVG = "svg"
KIND_PNG = "png"
KIND_DATA_URI = "data-uri"

_FIELD_NAMES = {f.name for f in dc_fields(PaymentFields)}


def render(
    url: str,
    kind: str = KIND_SVG,
    version: Optional[int] = None,
    error_correction: str = "M",
    scale: int = 8,
    border: int = 4,
) -> Union[str, bytes]:
    """
    Renders the URL as a QR symbol.
    svg -> markup string, png -> PNG bytes, data-uri -> "data:image/png;base64,..." string.
    version=None picks the smallest symbol that fits; border=0 drops the quiet zone.
    """
    if kind not in (KIND_SVG, KIND_PNG, KIND_DATA_URI):
        raise ValueError(f"Unknown QR output kind: {kind}")
    try:
        ecc = ERROR_CORRECTION[error_correction.upper()]
    except KeyError:
        raise ValueError(f"Unknown error correction level: {error_correction}") from None

    qr = qrcode.QRCode(
        version=version,
        error_correction=ecc,
        box_size=scale,
        border=border,
    )
    qr.add_data(url)
    qr.make(fit=version is None)
    logger.debug("QR symbol version %s for %d characters", qr.version, len(url))

    buf = io.BytesIO()
    if kind == KIND_SVG:
        img = qr.make_image(image_factory=SvgPathImage)
        img.save(buf)
        return buf.getvalue().decode("utf-8")

    img = qr.make_image(fill_color="black", back_color="white")
    img.save(buf, format="PNG")
    png = buf.getvalue()
    if kind == KIND_PNG:
        return png
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


class NBUQRGenerator:
    """Набор полей платежа плюс кэш ошибок валидации; пересчитывается при каждом изменении."""

    def __init__(self, options: Optional[Dict[str, Any]] = None, base_url: str = DEFAULT_BASE_URL, **kwargs):
        self.base_url = normalize_base_url(base_url)
        self._fields = PaymentFields()
        self._errors: List[str] = []
        self.set_options(options, **kwargs)

    def set_options(self, options: Optional[Dict[str, Any]] = None, **kwargs) -> "NBUQRGenerator":
        """Defaults merged with the given values; previous values are dropped."""
        values = dict(options or {}, **kwargs)
        self._check_names(values)
        self._fields = PaymentFields(**values)
        self._revalidate()
        return self

    def update(self, **kwargs) -> "NBUQRGenerator":
        self._check_names(kwargs)
        self._fields = replace(self._fields, **kwargs)
        self._revalidate()
        return self

    @staticmethod
    def _check_names(values: Dict[str, Any]) -> None:
        unknown = sorted(set(values) - _FIELD_NAMES)
        if unknown:
            raise TypeError(f"Unknown payment field(s): {', '.join(unknown)}")

    def _revalidate(self) -> None:
        self._errors = validate(self._fields)
        if self._errors:
            logger.debug("Payment fields have %d violation(s)", len(self._errors))

    @property
    def fields(self) -> PaymentFields:
        return self._fields

    @property
    def options(self) -> Dict[str, Any]:
        return asdict(self._fields)

    @property
    def errors(self) -> List[str]:
        return list(self._errors)

    @property
    def is_valid(self) -> bool:
        return not self._errors

    def generate_url(self) -> str:
        return encode_url(self._fields, self.base_url)

    def parse_url(self, url: str) -> QRFields:
        return decode_url(url, self.base_url)

    def render_svg(self, **opts) -> str:
        return render(self.generate_url(), kind=KIND_SVG, **opts)

    def render_png(self, **opts) -> bytes:
        return render(self.generate_url(), kind=KIND_PNG, **opts)

    def render_data_uri(self, **opts) -> str:
        return render(self.generate_url(), kind=KIND_DATA_URI, **opts)
