"""Tests for sipgrammar.message."""

import logging

import pytest

from sipgrammar import ParserConfig, parse_message, parse_request, parse_response
from sipgrammar.common import SIP_2_0, Extension, Method, Version
from sipgrammar.errors import ErrorKind, ParseError
from sipgrammar.headers import (
    CSeqHeader,
    ExtensionHeader,
    MaxForwardsHeader,
    MediaType,
    SubjectHeader,
    ViaHeader,
)
from sipgrammar.message import Request, RequestLine, Response, StatusLine

INVITE = (
    "INVITE sip:bob@biloxi.example.com SIP/2.0\r\n"
    "Via: SIP/2.0/UDP pc33.atlanta.example.com;branch=z9hG4bK776asdhds\r\n"
    "Max-Forwards: 70\r\n"
    "To: Bob <sip:bob@biloxi.example.com>\r\n"
    "From: Alice <sip:alice@atlanta.example.com>;tag=1928301774\r\n"
    "Call-ID: a84b4c76e66710@pc33.atlanta.example.com\r\n"
    "CSeq: 314159 INVITE\r\n"
    "Contact: <sip:alice@pc33.atlanta.example.com>\r\n"
    "Content-Type: application/sdp\r\n"
    "Content-Length: 142\r\n"
    "\r\n"
    "v=0\r\n"
    "o=alice 2890844526 2890844526 IN IP4 pc33.atlanta.example.com\r\n"
)

OK_200 = (
    "SIP/2.0 200 OK\r\n"
    "Via: SIP/2.0/UDP server10.biloxi.example.com;branch=z9hG4bKnashds8\r\n"
    "Via: SIP/2.0/UDP bigbox3.site3.atlanta.example.com;branch=z9hG4bK77ef4c2312983.1\r\n"
    "To: Bob <sip:bob@biloxi.example.com>;tag=a6c85cf\r\n"
    "From: Alice <sip:alice@atlanta.example.com>;tag=1928301774\r\n"
    "Call-ID: a84b4c76e66710@pc33.atlanta.example.com\r\n"
    "CSeq: 314159 INVITE\r\n"
    "Contact: <sip:bob@192.0.2.4>\r\n"
    "Content-Length: 0\r\n"
    "\r\n"
)

TRYING_100 = (
    "SIP/2.0 100 Trying\r\n"
    "Via: SIP/2.0/UDP pc33.atlanta.example.com;branch=z9hG4bK776asdhds\r\n"
    "To: Bob <sip:bob@biloxi.example.com>\r\n"
    "From: Alice <sip:alice@atlanta.example.com>;tag=1928301774\r\n"
    "Call-ID: a84b4c76e66710@pc33.atlanta.example.com\r\n"
    "CSeq: 314159 INVITE\r\n"
    "Content-Length: 0\r\n"
    "\r\n"
)


class TestParseRequest:
    def test_request_line(self) -> None:
        msg = parse_message(INVITE)
        assert isinstance(msg, Request)
        assert msg.request_line == RequestLine(Method.INVITE, "sip:bob@biloxi.example.com", SIP_2_0)
        assert msg.method is Method.INVITE
        assert msg.uri == "sip:bob@biloxi.example.com"
        assert msg.version == Version(2, 0)

    def test_headers_in_wire_order(self) -> None:
        msg = parse_request(INVITE)
        names = [header.field_name for header in msg.headers]
        assert names == [
            "Via",
            "Max-Forwards",
            "To",
            "From",
            "Call-ID",
            "CSeq",
            "Contact",
            "Content-Type",
            "Content-Length",
        ]

    def test_body_is_verbatim(self) -> None:
        msg = parse_request(INVITE)
        assert msg.body == (
            b"v=0\r\no=alice 2890844526 2890844526 IN IP4 pc33.atlanta.example.com\r\n"
        )

    def test_body_not_truncated_to_content_length(self) -> None:
        msg = parse_request(INVITE)
        assert msg.content_length == 142
        assert msg.body is not None
        assert len(msg.body) != 142

    def test_no_body(self) -> None:
        raw = "OPTIONS sip:carol@chicago.com SIP/2.0\r\nMax-Forwards: 70\r\n\r\n"
        msg = parse_request(raw)
        assert msg.body is None
        assert msg.headers == (MaxForwardsHeader(70),)

    def test_accessors(self) -> None:
        msg = parse_request(INVITE)
        assert msg.call_id == "a84b4c76e66710@pc33.atlanta.example.com"
        assert msg.cseq == CSeqHeader(314159, Method.INVITE)
        assert msg.from_header is not None
        assert msg.from_header.name == "Alice"
        assert msg.from_header.tag == "1928301774"
        assert msg.to_header is not None
        assert msg.to_header.tag is None
        content_type = msg.content_type
        assert content_type is not None
        assert content_type.type is MediaType.APPLICATION

    def test_via(self) -> None:
        msg = parse_request(INVITE)
        vias = msg.via
        assert len(vias) == 1
        assert vias[0].host == "pc33.atlanta.example.com"
        assert vias[0].branch == "z9hG4bK776asdhds"

    def test_contact(self) -> None:
        msg = parse_request(INVITE)
        contacts = msg.contact
        assert len(contacts) == 1
        uri = contacts[0].uri
        assert uri is not None
        assert uri.user == "alice"

    def test_get_headers(self) -> None:
        msg = parse_request(INVITE)
        assert msg.get_header("max-forwards") == MaxForwardsHeader(70)
        assert msg.get_header("l") == msg.get_header("Content-Length")
        assert msg.get_headers("X-Missing") == []
        assert msg.get_header("X-Missing") is None

    def test_request_parse_classmethod(self) -> None:
        assert Request.parse(INVITE.encode()) == parse_request(INVITE)

    def test_extension_method(self) -> None:
        raw = "SUBSCRIBE sips:alice@atlanta.com SIP/2.0\r\n\r\n"
        msg = parse_request(raw)
        assert msg.method == Extension("SUBSCRIBE")
        assert msg.uri == "sips:alice@atlanta.com"
        assert msg.headers == ()

    def test_absolute_request_uri(self) -> None:
        msg = parse_request("INVITE tel:+1-212-555-1212 SIP/2.0\r\n\r\n")
        assert msg.uri == "tel:+1-212-555-1212"

    def test_request_uri_with_params_and_headers(self) -> None:
        msg = parse_request("INVITE sip:bob@biloxi.com;transport=tcp?subject=hi SIP/2.0\r\n\r\n")
        assert msg.uri == "sip:bob@biloxi.com;transport=tcp?subject=hi"


class TestParseResponse:
    def test_200_ok(self) -> None:
        msg = parse_message(OK_200)
        assert isinstance(msg, Response)
        assert msg.status_line == StatusLine(SIP_2_0, 200, "OK")
        assert msg.status_code == 200
        assert msg.reason_phrase == "OK"

    def test_content_is_whole_message(self) -> None:
        msg = parse_response(OK_200)
        assert msg.content == OK_200.encode()

    def test_100_trying(self) -> None:
        msg = parse_message(TRYING_100.encode())
        assert isinstance(msg, Response)
        assert msg.status_code == 100
        assert msg.reason_phrase == "Trying"

    def test_reason_phrase_with_escapes_and_utf8(self) -> None:
        msg = parse_response("SIP/2.0 486 Busy Here%21 – später\r\n\r\n")
        assert msg.reason_phrase == "Busy Here%21 – später"

    def test_empty_reason_phrase(self) -> None:
        assert parse_response("SIP/2.0 180 \r\n\r\n").reason_phrase == ""

    def test_response_headers_are_validated(self) -> None:
        raw = "SIP/2.0 200 OK\r\nCSeq: abc\r\n\r\n"
        with pytest.raises(ParseError) as info:
            parse_message(raw)
        assert info.value.fatal

    def test_response_parse_classmethod(self) -> None:
        assert Response.parse(OK_200) == parse_response(OK_200)

    def test_status_code_must_be_three_digits(self) -> None:
        with pytest.raises(ParseError):
            parse_response("SIP/2.0 2000 OK\r\n\r\n")


class TestHeaderHandling:
    def test_content_type_with_q_param(self) -> None:
        msg = parse_message("MESSAGE sip:a@b SIP/2.0\r\nContent-Type: text/plain;q=1\r\n\r\nhi")
        assert isinstance(msg, Request)
        assert msg.content_type is not None
        assert msg.content_type.mime_type == "text/plain"
        assert msg.body == b"hi"

    def test_compact_headers(self) -> None:
        raw = (
            "INVITE sip:bob@example.com SIP/2.0\r\n"
            "v: SIP/2.0/UDP 10.0.0.1:5060;branch=z9hG4bK1\r\n"
            "f: <sip:alice@example.com>;tag=abc\r\n"
            "t: <sip:bob@example.com>\r\n"
            "i: call123@example.com\r\n"
            "l: 0\r\n"
            "\r\n"
        )
        msg = parse_request(raw)
        assert len(msg.via) == 1
        assert msg.via[0].branch == "z9hG4bK1"
        assert msg.via[0].host == "10.0.0.1"
        assert msg.from_header is not None
        assert msg.from_header.tag == "abc"
        assert msg.call_id == "call123@example.com"
        assert msg.content_length == 0

    def test_repeated_headers_not_merged(self) -> None:
        msg = parse_message(OK_200)
        assert isinstance(msg, Response)
        request = parse_request(OK_200.replace("SIP/2.0 200 OK", "ACK sip:bob@192.0.2.4 SIP/2.0"))
        via_headers = [h for h in request.headers if isinstance(h, ViaHeader)]
        assert len(via_headers) == 2
        assert [v.host for v in request.via] == [
            "server10.biloxi.example.com",
            "bigbox3.site3.atlanta.example.com",
        ]

    def test_comma_separated_via(self) -> None:
        raw = (
            "BYE sip:alice@pc33.atlanta.com SIP/2.0\r\n"
            "Via: SIP/2.0/UDP a.example.com;branch=z9hG4bK1, "
            "SIP/2.0/UDP b.example.com;branch=z9hG4bK2\r\n"
            "Content-Length: 0\r\n"
            "\r\n"
        )
        msg = parse_request(raw)
        assert [v.host for v in msg.via] == ["a.example.com", "b.example.com"]

    def test_line_folding(self) -> None:
        raw = (
            "INVITE sip:bob@example.com SIP/2.0\r\n"
            "Subject: This is a\r\n"
            "  long subject line\r\n"
            "Content-Length: 0\r\n"
            "\r\n"
        )
        msg = parse_request(raw)
        assert msg.get_header("Subject") == SubjectHeader("This is a  long subject line")

    def test_extension_header(self, caplog: pytest.LogCaptureFixture) -> None:
        raw = "INVITE sip:bob@example.com SIP/2.0\r\nX-Custom-Thing: anything\r\n\r\n"
        with caplog.at_level(logging.DEBUG, logger="sipgrammar"):
            msg = parse_message(raw)
        assert isinstance(msg, Request)
        assert msg.headers == (ExtensionHeader("X-Custom-Thing", "anything"),)
        assert "X-Custom-Thing" in caplog.text

    def test_contact_wildcard(self) -> None:
        raw = "REGISTER sip:registrar.biloxi.com SIP/2.0\r\nContact: *\r\nExpires: 0\r\n\r\n"
        msg = parse_request(raw)
        assert msg.contact == []


class TestErrors:
    def test_content_length_overflow(self) -> None:
        raw = (
            "INVITE sip:bob@example.com SIP/2.0\r\n"
            "Content-Length: 99999999999999999999\r\n"
            "\r\n"
        )
        with pytest.raises(ParseError) as info:
            parse_message(raw)
        assert info.value.kind is ErrorKind.INVALID_INTEGER

    def test_garbage_is_unknown(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_message(b"hello world\r\n\r\n")
        assert info.value.kind is ErrorKind.UNKNOWN
        assert len(info.value.backtrace) == 2

    def test_missing_empty_line(self) -> None:
        with pytest.raises(ParseError):
            parse_request("INVITE sip:bob@example.com SIP/2.0\r\nMax-Forwards: 70\r\n")

    def test_bare_lf_rejected(self) -> None:
        with pytest.raises(ParseError):
            parse_message("INVITE sip:bob@example.com SIP/2.0\nMax-Forwards: 70\n\n")

    def test_fatal_request_error_skips_response_grammar(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        raw = "INVITE sip:bob@example.com SIP/2.0\r\nVia: SIP/2.0/UDP h;ttl=999\r\n\r\n"
        with caplog.at_level(logging.DEBUG, logger="sipgrammar"):
            with pytest.raises(ParseError) as info:
                parse_message(raw)
        assert info.value.kind is ErrorKind.INVALID_TTL
        assert "response grammar" not in caplog.text

    def test_message_too_large(self) -> None:
        with pytest.raises(ParseError) as info:
            parse_message(INVITE, ParserConfig(max_message_size=64))
        assert info.value.kind is ErrorKind.MESSAGE_TOO_LARGE

    def test_message_within_limit(self) -> None:
        msg = parse_message(OK_200, ParserConfig(max_message_size=len(OK_200)))
        assert isinstance(msg, Response)

    def test_invalid_utf8_in_header_value(self) -> None:
        raw = b"INVITE sip:bob@example.com SIP/2.0\r\nSubject: caf\xc3\r\n\r\n"
        with pytest.raises(ParseError) as info:
            parse_message(raw)
        assert info.value.fatal
