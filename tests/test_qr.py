"""
Tests for the stateful generator and QR rendering.
"""

import base64
from dataclasses import FrozenInstanceError
from datetime import datetime

import pytest

from nbu_codec import FormatError, ValidationError
from nbu_fields import (
    DEFAULT_BASE_URL,
    ENCODING_UTF8,
    ENCODING_WIN1251,
    FUNCTION_ICT,
    FUNCTION_UCT,
    FUNCTION_XCT,
    SERVICE_TAG,
    VERSION,
)
from nbu_qr import NBUQRGenerator, render

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_constants():
    assert VERSION == "003"
    assert SERVICE_TAG == "BCD"
    assert FUNCTION_UCT == "UCT"
    assert FUNCTION_ICT == "ICT"
    assert FUNCTION_XCT == "XCT"
    assert ENCODING_UTF8 == "1"
    assert ENCODING_WIN1251 == "2"


class TestGenerator:

    def test_valid_options(self, valid_options):
        gen = NBUQRGenerator(valid_options)
        assert gen.errors == []
        assert gen.is_valid

    def test_defaults(self):
        gen = NBUQRGenerator()
        assert gen.options["function"] == "ICT"
        assert gen.options["encoding"] == "2"
        assert gen.options["currency"] == "UAH"
        assert "Recipient is required" in gen.errors

    def test_set_options_overrides_defaults(self, valid_options):
        gen = NBUQRGenerator()
        gen.set_options(dict(valid_options, function="UCT", encoding="1"))
        assert gen.options["function"] == "UCT"
        assert gen.options["encoding"] == "1"
        assert gen.is_valid

    def test_set_options_drops_previous_values(self, valid_options):
        gen = NBUQRGenerator(valid_options)
        gen.set_options(recipient="Інший отримувач")
        assert gen.options["purpose"] == ""
        assert "Purpose is required" in gen.errors

    def test_update_revalidates(self, valid_options):
        gen = NBUQRGenerator(valid_options)
        gen.update(lock_mask="nope")
        assert gen.errors == ["Lock mask must be 4 hex characters"]
        gen.update(lock_mask="00FF")
        assert gen.is_valid
        assert gen.options["recipient"] == valid_options["recipient"]

    def test_fields_cannot_change_behind_validation(self, valid_options):
        gen = NBUQRGenerator(valid_options)
        with pytest.raises(FrozenInstanceError):
            gen.fields.recipient = ""
        assert gen.is_valid
        assert gen.fields.recipient == valid_options["recipient"]

    def test_keyword_fields(self, valid_options):
        gen = NBUQRGenerator(**valid_options)
        assert gen.is_valid

    def test_unknown_field(self):
        with pytest.raises(TypeError, match="colour"):
            NBUQRGenerator(colour="red")

    def test_errors_is_a_copy(self):
        gen = NBUQRGenerator()
        gen.errors.clear()
        assert gen.errors

    def test_generate_url_fails_on_violations(self, valid_options):
        gen = NBUQRGenerator(dict(valid_options, recipient=""))
        with pytest.raises(ValidationError, match="Validation failed"):
            gen.generate_url()

    def test_generate_and_parse(self, valid_options):
        ts = datetime(2025, 9, 21, 12, 30, 45)
        gen = NBUQRGenerator(dict(valid_options, valid_until=ts, created_at=ts))
        url = gen.generate_url()
        assert url.startswith(DEFAULT_BASE_URL)
        parsed = gen.parse_url(url)
        assert parsed.recipient == valid_options["recipient"]
        assert parsed.valid_until == "250921123000"
        assert parsed.created_at == "250921123000"

    def test_own_base_url(self, valid_options):
        gen = NBUQRGenerator(valid_options, base_url="https://pay.example.ua")
        assert gen.base_url == "https://pay.example.ua/"
        url = gen.generate_url()
        assert url.startswith("https://pay.example.ua/")
        assert gen.parse_url(url).account == "UA123456789012345678901234567"
        with pytest.raises(FormatError, match="Invalid QR URL format"):
            NBUQRGenerator(valid_options).parse_url(url)


class TestRender:

    def test_svg(self, valid_options):
        svg = NBUQRGenerator(valid_options).render_svg()
        assert isinstance(svg, str)
        assert "<svg" in svg

    def test_png(self, valid_options):
        png = NBUQRGenerator(valid_options).render_png(scale=2, border=0)
        assert png.startswith(PNG_MAGIC)

    def test_data_uri(self, valid_options):
        uri = NBUQRGenerator(valid_options).render_data_uri()
        prefix = "data:image/png;base64,"
        assert uri.startswith(prefix)
        assert base64.b64decode(uri[len(prefix):]).startswith(PNG_MAGIC)

    def test_invalid_data_is_not_rendered(self):
        with pytest.raises(ValidationError):
            NBUQRGenerator().render_svg()

    def test_fixed_version_and_level(self):
        png = render(DEFAULT_BASE_URL + "QkNE", kind="png", version=10, error_correction="h")
        assert png.startswith(PNG_MAGIC)

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown QR output kind"):
            render(DEFAULT_BASE_URL, kind="gif")

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown error correction level"):
            render(DEFAULT_BASE_URL, error_correction="X")
