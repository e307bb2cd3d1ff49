# -*- coding: utf-8 -*-
"""
Поля платёжного QR-кода НБУ (формат 003): константы стандарта,
входной набор полей и именованная запись из 17 позиций.
"""
from dataclasses import astuple, dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

SERVICE_TAG = "BCD"
VERSION = "003"
DEFAULT_BASE_URL = "https://qr.bank.gov.ua/"
MAX_DATA_SIZE = 507

FUNCTION_UCT = "UCT"
FUNCTION_ICT = "ICT"
FUNCTION_XCT = "XCT"
FUNCTIONS = (FUNCTION_UCT, FUNCTION_ICT, FUNCTION_XCT)

ENCODING_UTF8 = "1"
ENCODING_WIN1251 = "2"
ENCODINGS = (ENCODING_UTF8, ENCODING_WIN1251)

CURRENCY_UAH = "UAH"

Amount = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class PaymentFields:
    """Один платёж: данные, из которых строится QR."""
    function: str = FUNCTION_ICT
    encoding: str = ENCODING_WIN1251
    recipient: str = ""
    account: str = ""
    amount: Optional[Amount] = None
    currency: str = CURRENCY_UAH
    recipient_code: str = ""         # ЄДРПОУ / РНОКПП
    category: str = ""
    reference: str = ""
    purpose: str = ""                # призначення платежу
    display: str = ""
    lock_mask: str = ""              # 4 hex: які поля застосунок не дає редагувати
    valid_until: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass
class QRFields:
    """Содержимое QR по позициям. Все значения — строки, как на проводе."""
    service_tag: str = ""
    version: str = ""
    encoding: str = ""
    function: str = ""
    unique_id: str = ""      # RFU
    recipient: str = ""
    account: str = ""
    amount: str = ""
    recipient_code: str = ""
    category: str = ""
    reference: str = ""
    purpose: str = ""
    display: str = ""
    lock_mask: str = ""
    valid_until: str = ""
    created_at: str = ""
    signature: str = ""      # RFU

    @classmethod
    def slot_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_parts(cls, parts: List[str]) -> "QRFields":
        """Missing trailing slots become empty strings; extra slots are ignored."""
        names = cls.slot_names()
        padded = list(parts[:len(names)]) + [""] * (len(names) - len(parts))
        return cls(*padded)

    def to_parts(self) -> List[str]:
        return list(astuple(self))


SLOT_COUNT = len(QRFields.slot_names())
