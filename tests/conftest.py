"""
Shared fixtures for NBU QR tests.
"""

import sys
from pathlib import Path

import pytest

# Flat modules live in the repository root
sys.path.insert(0, str(Path(__file__).parent.parent))

from nbu_fields import PaymentFields  # noqa: E402


@pytest.fixture
def valid_options():
    return {
        "function": "ICT",
        "recipient": 'ТОВ "Тестова компанія"',
        "account": "UA123456789012345678901234567",
        "amount": 100.50,
        "recipient_code": "12345678",
        "category": "MP2B/GSCB",
        "reference": "REF-123",
        "purpose": "Тестовий платіж",
    }


@pytest.fixture
def valid_fields(valid_options):
    return PaymentFields(**valid_options)
