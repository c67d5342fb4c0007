"""Tests for sipgrammar.rfc2806."""

import pytest

from sipgrammar.errors import ParseError
from sipgrammar.rfc2806 import global_phone_number, local_phone_number, telephone_subscriber
from sipgrammar.scanner import parse_all, run


class TestGlobalNumber:
    def test_plain(self) -> None:
        assert parse_all(global_phone_number, b"+1-212-555-1212") == "+1-212-555-1212"

    def test_visual_separators(self) -> None:
        assert parse_all(global_phone_number, b"+358.(9).123456") == "+358.(9).123456"

    def test_isub_and_postd(self) -> None:
        text = b"+1-800-555-1234;isub=1411;postd=pp22"
        assert parse_all(global_phone_number, text) == text.decode()

    def test_tsp(self) -> None:
        text = b"+1-800-555-1234;tsp=provider.example.net"
        assert parse_all(global_phone_number, text) == text.decode()

    def test_future_extension(self) -> None:
        text = b'+1234;ext=567;note="a b";flag'
        assert parse_all(global_phone_number, text) == text.decode()

    def test_requires_plus(self) -> None:
        with pytest.raises(ParseError):
            run(global_phone_number, b"1234")


class TestLocalNumber:
    def test_with_phone_context(self) -> None:
        text = b"7042;phone-context=+1-212-555"
        assert parse_all(local_phone_number, text) == text.decode()

    def test_private_phone_context(self) -> None:
        text = b"#31;phone-context=example.com"
        assert parse_all(local_phone_number, text) == text.decode()

    def test_dtmf_and_pause(self) -> None:
        text = b"*70w555ABCD;phone-context=+44"
        assert parse_all(local_phone_number, text) == text.decode()

    def test_requires_area_specifier(self) -> None:
        with pytest.raises(ParseError):
            run(local_phone_number, b"7042")


class TestTelephoneSubscriber:
    def test_global(self) -> None:
        assert run(telephone_subscriber, b"+1-212-555-1212@gw") == ("+1-212-555-1212", b"@gw")

    def test_local(self) -> None:
        assert run(telephone_subscriber, b"555;phone-context=+1@gw") == (
            "555;phone-context=+1",
            b"@gw",
        )

    def test_neither(self) -> None:
        with pytest.raises(ParseError):
            run(telephone_subscriber, b"alice")
